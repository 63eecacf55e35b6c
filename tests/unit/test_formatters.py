"""
Tests for result formatting utilities.
"""

from ipdi2.core.results import I2Result, build_i2_result
from ipdi2.utils.formatters import _format_results, _TableFormatter


def _make_output(where=None):
    result = I2Result(v1=0.09, v2=0.03, i_squared=0.75, n_subj=2, n_obs=10, n_aver=5.0, beta0=-1.0, beta1=0.5, seed=4321)
    return build_i2_result("ipd.csv", "study", "treat", where, "auto", [[0.2, 0.0], [0.0, 0.1]], result)


class TestTableFormatter:
    """Test _TableFormatter utility methods."""

    def setup_method(self):
        self.tf = _TableFormatter()

    def test_create_table_basic(self):
        table = self.tf._create_table(["Name", "Value"], [["v1", "0.09"], ["v2", "0.03"]])
        lines = table.split("\n")
        assert len(lines) == 4  # header + separator + 2 rows
        assert "Name" in lines[0]
        assert set(lines[1].replace(" ", "")) == {"-"}

    def test_create_table_custom_col_widths(self):
        table = self.tf._create_table(["A", "B"], [["x", "y"]], col_widths=[10, 10])
        assert len(table.split("\n")[0]) == 21

    def test_create_table_no_rows(self):
        assert self.tf._create_table(["Header"], []).split("\n")[0] == "Header"

    def test_format_value(self):
        assert self.tf._format_value(0.00001) == "0.000010"
        assert self.tf._format_value(3.14159) == "3.1416"
        assert self.tf._format_value(3.14159, ".2f") == "3.14"
        assert self.tf._format_value(42) == "42"


class TestFormatResults:
    def test_short(self):
        out = _format_results(_make_output())
        assert "N studies=2" in out
        assert "0.7500" in out
        assert "75.0%" in out

    def test_long(self):
        out = _format_results(_make_output(where="treat == 1"), "long")
        assert "Sample size" in out
        assert "treat == 1" in out
        assert "4321" in out

    def test_result_dictionary(self):
        output = _make_output()
        assert output["model"]["dataset"] == "ipd.csv"
        assert output["results"]["i_squared"] == 0.75
        assert output["model"]["beta1"] == 0.5
