"""
Validation utilities for I-squared estimation.

This module provides validation functions for required inputs, the layout
of the parameter-estimate and covariance tables, and numeric settings.
"""

from dataclasses import dataclass
from typing import Any, List, Optional, Type

import numpy as np
import pandas as pd


__all__ = []

REQUIRED_PARAMETERS = ("dataset", "subj_id_name", "x_name", "paraest_mat", "g_mat")
ESTIMATE_COLUMN = "Estimate"


@dataclass
class _ValidationResult:
    """Outcome of a validation check, carrying errors and warnings.

    Attributes:
        is_valid: ``True`` if no errors were found.
        errors: List of error messages (empty when valid).
        warnings: List of non-fatal warning messages.
    """

    is_valid: bool
    errors: List[str]
    warnings: List[str]

    def raise_if_invalid(self, error_cls: Type[Exception] = ValueError):
        """Raise *error_cls* if the validation failed."""
        if not self.is_valid:
            error_msg = "Validation failed:\n" + "\n".join(f"• {err}" for err in self.errors)
            raise error_cls(error_msg)


def _is_unset(value: Any) -> bool:
    """``None`` and blank strings count as unset."""
    if value is None:
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def _validate_required_parameters(**params: Any) -> _ValidationResult:
    """Check that every required parameter has a value.

    Only presence is checked here; nothing is opened or read, so a missing
    name is reported before any dataset I/O happens.

    Args:
        **params: Parameter name to supplied value. Every name in
            ``REQUIRED_PARAMETERS`` is expected.

    Returns:
        _ValidationResult listing each parameter that is unset.
    """
    errors = []
    for name in REQUIRED_PARAMETERS:
        if _is_unset(params.get(name)):
            errors.append(f"Required parameter '{name}' is not set")
    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_columns_present(data: pd.DataFrame, **columns: str) -> _ValidationResult:
    """Check that named columns (e.g. ``subj_id_name="study"``) exist in *data*."""
    errors = []
    available = [str(c) for c in data.columns]
    for param, col in columns.items():
        if col not in data.columns:
            errors.append(f"{param}='{col}' is not a column of the dataset. Available: {', '.join(available)}")
    return _ValidationResult(len(errors) == 0, errors, [])


def _find_estimate_column(data: pd.DataFrame) -> Optional[str]:
    """Return the column matching ``Estimate`` (case-insensitive), if any."""
    for col in data.columns:
        if str(col).strip().lower() == ESTIMATE_COLUMN.lower():
            return col
    return None


def _validate_estimates_table(data: pd.DataFrame) -> _ValidationResult:
    """Validate the fixed-effect parameter-estimate table.

    Row order is positional: row 1 is the intercept and row 2 the slope.
    Rows beyond the second are reported as a warning and ignored later.
    """
    errors: List[str] = []
    warnings: List[str] = []

    est_col = _find_estimate_column(data)
    if est_col is None:
        errors.append(f"Parameter estimates need an '{ESTIMATE_COLUMN}' column, got columns: {list(data.columns)}")
        return _ValidationResult(False, errors, warnings)

    n_rows = data.shape[0]
    if n_rows < 2:
        errors.append(f"Parameter estimates need at least 2 rows (intercept, slope), got {n_rows}")
        return _ValidationResult(False, errors, warnings)

    values = pd.to_numeric(data[est_col].iloc[:2], errors="coerce")
    if values.isna().any() or not np.all(np.isfinite(values.to_numpy(dtype=float))):
        errors.append(f"Intercept and slope estimates must be finite numbers, got {data[est_col].iloc[:2].tolist()}")

    if n_rows > 2:
        warnings.append(f"Parameter estimates have {n_rows} rows; only the first two (intercept, slope) are used")

    return _ValidationResult(len(errors) == 0, errors, warnings)


def _validate_covariance_table(data: pd.DataFrame) -> _ValidationResult:
    """Validate that the covariance table holds a 2x2 numeric block."""
    errors = []

    numeric = data.select_dtypes(include=[np.number])
    if numeric.shape[1] != 2:
        errors.append(f"Covariance matrix needs exactly 2 numeric columns, got {numeric.shape[1]}")
    if data.shape[0] != 2:
        errors.append(f"Covariance matrix needs exactly 2 rows, got {data.shape[0]}")

    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_numeric_parameter(
    value: Any,
    name: str,
    expected_types: tuple = (int, float),
    min_val: Optional[float] = None,
    max_val: Optional[float] = None,
) -> _ValidationResult:
    """Generic validation for numeric parameters."""
    errors: List[str] = []

    if isinstance(value, bool) or not isinstance(value, expected_types):
        errors.append(f"{name} must be a number, got {type(value).__name__}")
        return _ValidationResult(False, errors, [])

    if min_val is not None and value < min_val:
        errors.append(f"{name} must be >= {min_val}, got {value}")
    if max_val is not None and value > max_val:
        errors.append(f"{name} must be <= {max_val}, got {value}")

    return _ValidationResult(len(errors) == 0, errors, [])


def _validate_count_method(method: str, where: Optional[str]) -> _ValidationResult:
    """Validate the row-count method and its compatibility with a filter."""
    valid_methods = ["auto", "metadata", "scan"]
    if method not in valid_methods:
        return _ValidationResult(False, [f"count method must be one of {valid_methods}, got {method!r}"], [])
    if method == "metadata" and where:
        return _ValidationResult(False, ["count method 'metadata' cannot be used with a 'where' filter"], [])
    return _ValidationResult(True, [], [])


def _validate_summary(summary: str) -> _ValidationResult:
    """Validate the summary detail level of a printed result."""
    valid_levels = ["short", "long"]
    if summary not in valid_levels:
        return _ValidationResult(False, [f"summary must be one of {valid_levels}, got {summary!r}"], [])
    return _ValidationResult(True, [], [])
