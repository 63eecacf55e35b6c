"""
Console formatting of I-squared results.
"""

from typing import Any, Dict, List, Optional


class _TableFormatter:
    """Plain-text table helpers."""

    def _format_value(self, value: Any, spec: Optional[str] = None) -> str:
        """Format floats with *spec* (default: 4 decimals, 6 for small values)."""
        if isinstance(value, float):
            if spec is not None:
                return format(value, spec)
            if value != 0 and abs(value) < 0.001:
                return f"{value:.6f}"
            return f"{value:.4f}"
        return str(value)

    def _create_table(self, headers: List[str], rows: List[List[str]], col_widths: Optional[List[int]] = None) -> str:
        """Render *rows* under *headers*, one space between columns."""
        if col_widths is None:
            col_widths = [max([len(str(h))] + [len(str(r[i])) for r in rows]) for i, h in enumerate(headers)]

        def _line(cells):
            return " ".join(str(c).ljust(w) for c, w in zip(cells, col_widths))

        lines = [_line(headers), " ".join("-" * w for w in col_widths)]
        lines.extend(_line(row) for row in rows)
        return "\n".join(lines)


class _ResultFormatter(_TableFormatter):
    """Formats the ``{"model": ..., "results": ...}`` dictionary of an I-squared run."""

    def _format_short(self, data: Dict[str, Any]) -> str:
        res = data["results"]
        return (
            f"I-squared Estimate (N studies={res['n_subj']}, N obs={res['n_obs']}): "
            f"I² = {self._format_value(res['i_squared'])} ({res['i_squared'] * 100:.1f}%)"
        )

    def _format_long(self, data: Dict[str, Any]) -> str:
        model = data["model"]
        res = data["results"]

        inputs = [
            ["Dataset", model["dataset"]],
            ["Study id", model["subj_id_name"]],
            ["Exposure", model["x_name"]],
            ["Filter", model["where"] or "-"],
            ["Seed", model["seed"]],
        ]
        estimates = [
            ["beta0 (intercept)", self._format_value(res["beta0"])],
            ["beta1 (slope)", self._format_value(res["beta1"])],
            ["G", " ".join(self._format_value(v) for row in model["covariance"] for v in row)],
        ]
        sizes = [
            ["Studies (n_subj)", res["n_subj"]],
            ["Observations (n_obs)", res["n_obs"]],
            ["Average study size (n_aver)", self._format_value(res["n_aver"])],
        ]
        components = [
            ["v1 (between-study)", self._format_value(res["v1"])],
            ["v2 (within-study)", self._format_value(res["v2"])],
            ["I-squared", self._format_value(res["i_squared"])],
        ]

        sections = [
            ("Inputs", inputs),
            ("Fixed effects and covariance", estimates),
            ("Sample size", sizes),
            ("Variance components", components),
        ]
        parts = []
        for title, rows in sections:
            parts.append(f"\n{title}:")
            parts.append(self._create_table(["Quantity", "Value"], rows))
        return "\n".join(parts)


_formatter = _ResultFormatter()


def _format_results(result: Dict[str, Any], summary: str = "short") -> str:
    """Format an I-squared result dictionary for printing (``summary``: "short" or "long")."""
    if summary == "long":
        return _formatter._format_short(result) + "\n" + _formatter._format_long(result)
    return _formatter._format_short(result)
