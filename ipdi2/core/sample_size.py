"""
Sample-size statistics for I-squared estimation.

Derives the number of studies, the number of observations and the average
study size from the IPD dataset. The average study size later divides the
per-observation binomial variance, so it is computed with true division.
"""

import warnings
from dataclasses import dataclass
from typing import Optional

import pandas as pd

from ..exceptions import EmptyDatasetError, MissingParameterError
from ..utils.validators import _validate_count_method


@dataclass(frozen=True)
class SampleSizeSummary:
    """Study counts derived from the dataset.

    Attributes:
        n_subj: Number of distinct studies (subject ids).
        n_obs: Total number of observations.
        n_aver: Average observations per study, ``n_obs / n_subj``.
    """

    n_subj: int
    n_obs: int
    n_aver: float


def apply_filter(data: pd.DataFrame, where: Optional[str] = None) -> pd.DataFrame:
    """Return the rows of *data* selected by the ``DataFrame.query`` expression *where*.

    Raises:
        MissingParameterError: If *where* names an unknown column, is not a
            valid expression, or does not evaluate to a row selection.
    """
    if not where:
        return data
    # pandas reports an unknown name as UndefinedVariableError (a NameError)
    try:
        return data.query(where)
    except (NameError, SyntaxError, KeyError, TypeError, ValueError) as e:
        raise MissingParameterError(
            f"where='{where}' cannot be applied to the dataset ({type(e).__name__}: {e}). "
            f"Available columns: {', '.join(map(str, data.columns))}"
        ) from e


def count_subjects(data: pd.DataFrame, subj_id_name: str) -> int:
    """Count distinct non-missing subject ids."""
    return int(data[subj_id_name].nunique(dropna=True))


def _count_rows_scan(data: pd.DataFrame) -> int:
    n_obs = 0
    for _ in data.itertuples(index=False, name=None):
        n_obs += 1
    return n_obs


def count_observations(data: pd.DataFrame, where: Optional[str] = None, method: str = "auto") -> int:
    """
    Count observations in *data*, optionally after a row filter.

    Args:
        data: The study dataset.
        where: Optional ``DataFrame.query`` expression.
        method: ``"metadata"`` reads the stored frame length and requires
            no filter; ``"scan"`` counts rows one by one over the filtered
            rows; ``"auto"`` picks metadata when no filter is active.

    Returns:
        Number of rows. Both methods return the same count for the same input.
    """
    _validate_count_method(method, where).raise_if_invalid(MissingParameterError)

    if method == "auto":
        method = "scan" if where else "metadata"

    if method == "metadata":
        return int(data.shape[0])
    return _count_rows_scan(apply_filter(data, where))


def estimate_sample_size(
    data: pd.DataFrame,
    subj_id_name: str,
    where: Optional[str] = None,
    method: str = "auto",
) -> SampleSizeSummary:
    """
    Compute ``n_subj``, ``n_obs`` and ``n_aver`` for the dataset.

    Args:
        data: The study dataset (one row per observation).
        subj_id_name: Column identifying the study each row belongs to.
        where: Optional ``DataFrame.query`` row filter.
        method: Row-count method passed to ``count_observations``.

    Returns:
        SampleSizeSummary

    Raises:
        EmptyDatasetError: If no study ids are found.
    """
    n_subj = count_subjects(apply_filter(data, where), subj_id_name)
    if n_subj == 0:
        raise EmptyDatasetError(
            f"No studies found in column '{subj_id_name}'" + (f" after filter '{where}'" if where else "")
            + "; average study size is undefined"
        )

    n_obs = count_observations(data, where=where, method=method)

    if n_subj == 1:
        warnings.warn(
            "Dataset contains a single study. Between-study heterogeneity is not identifiable "
            "from one study; I-squared reflects the supplied covariance matrix only.",
            UserWarning,
            stacklevel=2,
        )

    return SampleSizeSummary(n_subj=n_subj, n_obs=n_obs, n_aver=n_obs / n_subj)
