"""
IPDI2 - I-squared for one-stage IPD meta-analysis of binary outcomes.

This module provides the main IPDI2 class, which estimates I-squared from
the output of a mixed-effects logistic regression by Monte Carlo
simulation of the random intercept and slope.
"""

from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import numpy as np
import pandas as pd

from .core import (
    DEFAULT_SEED,
    I2Result,
    apply_filter,
    build_i2_result,
    estimate_sample_size,
    screen_covariance,
    simulate_i_squared,
)
from .core.covariance import SYMMETRY_TOL
from .exceptions import MissingParameterError
from .utils.data_sources import extract_covariance_matrix, extract_fixed_effects, resolve_source
from .utils.formatters import _format_results
from .utils.validators import (
    _validate_columns_present,
    _validate_count_method,
    _validate_numeric_parameter,
    _validate_required_parameters,
    _validate_summary,
)


def _check_seed(seed) -> int:
    if isinstance(seed, bool) or not isinstance(seed, (int, np.integer)):
        raise TypeError("seed must be an integer")
    if seed < 0:
        raise ValueError("seed must be non-negative")
    if seed > 3000000000:
        raise ValueError("seed must be lower than 3,000,000,000")
    return int(seed)


class IPDI2:
    """I-squared estimation for one-stage IPD meta-analysis.

    Combines the fixed effects and the random-effects covariance matrix of
    a mixed-effects logistic regression (fitted elsewhere) with the study
    dataset, and reports the share of total variance due to between-study
    heterogeneity.

    Inputs are set with the ``set_*`` methods, each of which returns
    ``self`` for method chaining. Nothing is read until
    ``find_i_squared()`` is called.

    Attributes:
        seed: Random seed of the Monte Carlo draw (default: 4321).
        symmetry_tol: Absolute tolerance of the covariance symmetry check.
        count_method: Row-count method, ``"auto"``, ``"metadata"`` or ``"scan"``.

    Example:
        >>> model = IPDI2()
        >>> model.set_data(ipd, subj_id_name="study", x_name="treat")
        >>> model.set_estimates(fixed_effects)
        >>> model.set_covariance(g_matrix)
        >>> model.find_i_squared()
    """

    def __init__(self):
        # Core configuration
        self.seed: int = DEFAULT_SEED
        self.symmetry_tol = SYMMETRY_TOL
        self.count_method = "auto"

        # Inputs
        self._dataset: Any = None
        self._subj_id_name: Optional[str] = None
        self._x_name: Optional[str] = None
        self._where: Optional[str] = None
        self._paraest_mat: Any = None
        self._g_mat: Any = None
        self._catalog: Optional[Mapping[str, Any]] = None

    # =========================================================================
    # Configuration methods
    # =========================================================================

    def set_data(self, dataset, subj_id_name: Optional[str] = None, x_name: Optional[str] = None, where: Optional[str] = None):
        """Set the IPD dataset the mixed model was fitted on.

        Args:
            dataset: DataFrame, dict of columns, file path, or a catalog name.
            subj_id_name: Column identifying the study of each row.
            x_name: Column with the exposure / treatment value.
            where: Optional ``DataFrame.query`` expression selecting rows.

        Returns:
            self: For method chaining.
        """
        self._dataset = dataset
        self._subj_id_name = subj_id_name
        self._x_name = x_name
        self._where = where
        return self

    def set_estimates(self, paraest_mat):
        """Set the fixed-effect estimates table.

        Needs an ``Estimate`` column; row 1 is the intercept and row 2 the
        slope, taken by position.

        Returns:
            self: For method chaining.
        """
        self._paraest_mat = paraest_mat
        return self

    def set_covariance(self, g_mat):
        """Set the 2x2 covariance matrix of the random intercept and slope.

        Text label columns are ignored. A numeric label column (for example
        an integer ``Row`` column) must be left out of *g_mat*.

        Returns:
            self: For method chaining.
        """
        self._g_mat = g_mat
        return self

    def set_catalog(self, catalog: Optional[Mapping[str, Any]]):
        """Register named sources; string inputs are looked up here before the file system.

        Returns:
            self: For method chaining.
        """
        if catalog is not None and not isinstance(catalog, Mapping):
            raise TypeError("catalog must be a mapping of names to sources")
        self._catalog = catalog
        return self

    def set_seed(self, seed: int = DEFAULT_SEED):
        """Set random seed of the Monte Carlo draw.

        Args:
            seed: Non-negative integer up to 3,000,000,000.

        Returns:
            self: For method chaining.

        Raises:
            TypeError: If *seed* is not an integer.
            ValueError: If *seed* is negative or exceeds the maximum.
        """
        self.seed = _check_seed(seed)
        print(f"Seed set to: {seed}")
        return self

    def set_symmetry_tolerance(self, tol: float):
        """Set the absolute tolerance of the covariance symmetry check.

        Returns:
            self: For method chaining.
        """
        _validate_numeric_parameter(tol, "Symmetry tolerance", min_val=0).raise_if_invalid()
        self.symmetry_tol = float(tol)
        return self

    def set_count_method(self, method: str):
        """Set how observations are counted (``"auto"``, ``"metadata"``, ``"scan"``).

        Returns:
            self: For method chaining.
        """
        _validate_count_method(method, self._where).raise_if_invalid(MissingParameterError)
        self.count_method = method
        return self

    # =========================================================================
    # Analysis
    # =========================================================================

    def find_i_squared(self, print_results: bool = True, summary: str = "short", return_results: bool = False):
        """
        Estimate I-squared from the configured inputs.

        Steps: check required inputs, open every source, count studies and
        observations, screen the covariance matrix, then simulate the
        variance components. Any failed check aborts the run.

        Args:
            print_results: Whether to print results
            summary: Output detail level ("short" or "long")
            return_results: Return results dict

        Returns:
            dict or None: If *return_results* is ``True``, returns a
            dictionary with keys ``"model"`` (inputs) and ``"results"``
            (``I2Result`` fields). Returns ``None`` otherwise.

        Raises:
            MissingParameterError: A required input is unset, or a column name or ``where`` filter is invalid.
            DatasetNotFoundError: A source cannot be located or opened.
            InvalidSourceShapeError: The estimate or covariance table has the wrong layout.
            EmptyDatasetError: The dataset has no studies.
            NonPositiveDefiniteCovarianceError: The covariance matrix is not positive-definite.
            DegenerateVarianceError: ``v1 + v2`` is zero or not finite.
            ValueError: *summary* is not "short" or "long".
        """
        _validate_summary(summary).raise_if_invalid()

        result, cov = self._run_find_i_squared()

        output = build_i2_result(
            dataset_name=self._source_label(self._dataset),
            subj_id_name=self._subj_id_name,
            x_name=self._x_name,
            where=self._where,
            count_method=self.count_method,
            covariance=cov,
            result=result,
        )

        if print_results:
            print(f"\n{'=' * 80}")
            print("I-SQUARED ESTIMATE FOR ONE-STAGE IPD META-ANALYSIS")
            print(f"{'=' * 80}")
            print(_format_results(output, summary))

        return output if return_results else None

    def _run_find_i_squared(self):
        """Run the validation and simulation pipeline; returns ``(I2Result, covariance)``."""
        _validate_required_parameters(
            dataset=self._dataset,
            subj_id_name=self._subj_id_name,
            x_name=self._x_name,
            paraest_mat=self._paraest_mat,
            g_mat=self._g_mat,
        ).raise_if_invalid(MissingParameterError)
        # where may have been set after the count method
        _validate_count_method(self.count_method, self._where).raise_if_invalid(MissingParameterError)

        data = resolve_source(self._dataset, "dataset", self._catalog)
        paraest = resolve_source(self._paraest_mat, "paraest_mat", self._catalog)
        g_mat = resolve_source(self._g_mat, "g_mat", self._catalog)

        _validate_columns_present(
            data,
            subj_id_name=self._subj_id_name,
            x_name=self._x_name,
        ).raise_if_invalid(MissingParameterError)

        (beta0, beta1), notes = extract_fixed_effects(paraest)
        for note in notes:
            print(f"Warning: {note}")

        sizes = estimate_sample_size(data, self._subj_id_name, where=self._where, method=self.count_method)
        cov = screen_covariance(extract_covariance_matrix(g_mat), symmetry_tol=self.symmetry_tol)

        x = self._exposure_vector(data)
        result = simulate_i_squared(beta0, beta1, cov, x, sizes.n_aver, seed=self.seed, n_subj=sizes.n_subj)
        return result, cov

    def _exposure_vector(self, data: pd.DataFrame) -> np.ndarray:
        """Exposure values in dataset row order, after the row filter."""
        x = pd.to_numeric(apply_filter(data, self._where)[self._x_name], errors="coerce")
        n_missing = int(x.isna().sum())
        if n_missing:
            print(f"Warning: {n_missing} missing or non-numeric values in exposure column '{self._x_name}'")
        return x.to_numpy(dtype=np.float64)

    @staticmethod
    def _source_label(source) -> str:
        if isinstance(source, (str, Path)):
            return str(source)
        return type(source).__name__

    def __repr__(self):
        return (
            f"IPDI2(dataset={self._source_label(self._dataset)!r}, subj_id_name={self._subj_id_name!r}, "
            f"x_name={self._x_name!r}, seed={self.seed})"
        )


def estimate_i_squared(
    dataset,
    subj_id_name: str,
    x_name: str,
    paraest_mat,
    g_mat,
    seed: int = DEFAULT_SEED,
    where: Optional[str] = None,
    catalog: Optional[Mapping[str, Any]] = None,
    count_method: str = "auto",
    print_results: bool = False,
) -> I2Result:
    """
    Estimate I-squared in a single call.

    Args:
        dataset: IPD dataset (DataFrame, dict, file path, or catalog name).
        subj_id_name: Study id column.
        x_name: Exposure column.
        paraest_mat: Fixed-effect estimates with an ``Estimate`` column
            (row 1 intercept, row 2 slope).
        g_mat: 2x2 covariance matrix of the random intercept and slope.
        seed: Random seed of the Monte Carlo draw.
        where: Optional ``DataFrame.query`` row filter.
        catalog: Optional mapping of source names to sources.
        count_method: Row-count method (``"auto"``, ``"metadata"``, ``"scan"``).
        print_results: Print the summary as ``IPDI2.find_i_squared`` does.

    Returns:
        I2Result with ``v1``, ``v2``, ``i_squared`` and diagnostics.
    """
    model = IPDI2().set_data(dataset, subj_id_name, x_name, where=where).set_estimates(paraest_mat).set_covariance(g_mat)
    model.set_catalog(catalog)
    model.seed = _check_seed(seed)
    model.count_method = count_method

    output: Dict[str, Any] = model.find_i_squared(print_results=print_results, return_results=True)
    return I2Result(**output["results"])
