"""
Tests for validation utilities.
"""

import pandas as pd
import pytest

from ipdi2.exceptions import MissingParameterError
from ipdi2.utils.validators import (
    _validate_columns_present,
    _validate_count_method,
    _validate_covariance_table,
    _validate_estimates_table,
    _validate_numeric_parameter,
    _validate_required_parameters,
    _validate_summary,
)

ALL_SET = {
    "dataset": "ipd.csv",
    "subj_id_name": "study",
    "x_name": "treat",
    "paraest_mat": "fixed.csv",
    "g_mat": "g.csv",
}


class TestValidateRequiredParameters:
    """Test _validate_required_parameters function."""

    def test_all_set(self):
        result = _validate_required_parameters(**ALL_SET)
        assert result.is_valid

    def test_missing_x_name(self):
        params = dict(ALL_SET, x_name=None)
        result = _validate_required_parameters(**params)
        assert not result.is_valid
        assert len(result.errors) == 1
        assert "x_name" in result.errors[0]

    def test_blank_string_is_unset(self):
        params = dict(ALL_SET, subj_id_name="   ")
        result = _validate_required_parameters(**params)
        assert not result.is_valid
        assert "subj_id_name" in result.errors[0]

    def test_omitted_parameter_is_unset(self):
        params = dict(ALL_SET)
        del params["g_mat"]
        result = _validate_required_parameters(**params)
        assert not result.is_valid

    def test_reports_every_missing_parameter(self):
        result = _validate_required_parameters()
        assert len(result.errors) == 5

    def test_dataframe_counts_as_set(self):
        params = dict(ALL_SET, dataset=pd.DataFrame({"a": [1]}))
        assert _validate_required_parameters(**params).is_valid

    def test_raise_if_invalid_uses_error_class(self):
        result = _validate_required_parameters(**dict(ALL_SET, x_name=""))
        with pytest.raises(MissingParameterError, match="x_name"):
            result.raise_if_invalid(MissingParameterError)

    def test_missing_parameter_error_is_value_error(self):
        result = _validate_required_parameters(**dict(ALL_SET, x_name=""))
        with pytest.raises(ValueError):
            result.raise_if_invalid(MissingParameterError)


class TestValidateColumnsPresent:
    """Test _validate_columns_present function."""

    def test_present(self, two_study_ipd):
        result = _validate_columns_present(two_study_ipd, subj_id_name="study", x_name="treat")
        assert result.is_valid

    def test_absent(self, two_study_ipd):
        result = _validate_columns_present(two_study_ipd, subj_id_name="study", x_name="dose")
        assert not result.is_valid
        assert "dose" in result.errors[0]
        assert "Available" in result.errors[0]


class TestValidateEstimatesTable:
    """Test _validate_estimates_table function."""

    def test_valid(self, fixed_effects):
        result = _validate_estimates_table(fixed_effects)
        assert result.is_valid
        assert result.warnings == []

    def test_case_insensitive_column(self):
        df = pd.DataFrame({"estimate": [-1.0, 0.5]})
        assert _validate_estimates_table(df).is_valid

    def test_missing_estimate_column(self):
        df = pd.DataFrame({"Coef": [-1.0, 0.5]})
        result = _validate_estimates_table(df)
        assert not result.is_valid
        assert "Estimate" in result.errors[0]

    def test_single_row(self):
        df = pd.DataFrame({"Estimate": [-1.0]})
        result = _validate_estimates_table(df)
        assert not result.is_valid
        assert "at least 2 rows" in result.errors[0]

    def test_extra_rows_warn(self):
        df = pd.DataFrame({"Estimate": [-1.0, 0.5, 0.2]})
        result = _validate_estimates_table(df)
        assert result.is_valid
        assert len(result.warnings) == 1

    def test_non_numeric_estimates(self):
        df = pd.DataFrame({"Estimate": ["a", "b"]})
        assert not _validate_estimates_table(df).is_valid

    def test_missing_estimate_value(self):
        df = pd.DataFrame({"Estimate": [-1.0, None]})
        assert not _validate_estimates_table(df).is_valid


class TestValidateCovarianceTable:
    """Test _validate_covariance_table function."""

    def test_numeric_2x2(self):
        df = pd.DataFrame([[0.2, 0.0], [0.0, 0.1]])
        assert _validate_covariance_table(df).is_valid

    def test_label_column_ignored(self, g_matrix):
        assert _validate_covariance_table(g_matrix).is_valid

    def test_three_numeric_columns(self):
        df = pd.DataFrame([[0.2, 0.0, 1.0], [0.0, 0.1, 1.0]])
        result = _validate_covariance_table(df)
        assert not result.is_valid
        assert "2 numeric columns" in result.errors[0]

    def test_three_rows(self):
        df = pd.DataFrame([[0.2, 0.0], [0.0, 0.1], [0.0, 0.0]])
        result = _validate_covariance_table(df)
        assert not result.is_valid
        assert "2 rows" in result.errors[0]


class TestValidateNumericParameter:
    """Test _validate_numeric_parameter function."""

    def test_valid(self):
        assert _validate_numeric_parameter(1e-8, "tol", min_val=0).is_valid

    def test_below_min(self):
        assert not _validate_numeric_parameter(-1.0, "tol", min_val=0).is_valid

    def test_wrong_type(self):
        assert not _validate_numeric_parameter("small", "tol").is_valid

    def test_bool_rejected(self):
        assert not _validate_numeric_parameter(True, "tol").is_valid


class TestValidateCountMethod:
    """Test _validate_count_method function."""

    @pytest.mark.parametrize("method", ["auto", "metadata", "scan"])
    def test_valid_methods(self, method):
        assert _validate_count_method(method, None).is_valid

    def test_unknown_method(self):
        assert not _validate_count_method("guess", None).is_valid

    def test_metadata_with_filter(self):
        result = _validate_count_method("metadata", "treat == 1")
        assert not result.is_valid

    def test_scan_with_filter(self):
        assert _validate_count_method("scan", "treat == 1").is_valid


class TestValidateSummary:
    """Test _validate_summary function."""

    @pytest.mark.parametrize("summary", ["short", "long"])
    def test_valid_levels(self, summary):
        assert _validate_summary(summary).is_valid

    @pytest.mark.parametrize("summary", ["full", "Long", None])
    def test_invalid_levels(self, summary):
        result = _validate_summary(summary)
        assert not result.is_valid
        assert "summary" in result.errors[0]
