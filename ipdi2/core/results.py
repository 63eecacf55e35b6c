"""
Result containers for I-squared estimation.

This module holds the I-squared result and the dictionary layout returned
by ``IPDI2.find_i_squared(return_results=True)``.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class I2Result:
    """Estimated I-squared with its variance components and diagnostics.

    Attributes:
        v1: Between-study variance, sample variance of the simulated slopes.
        v2: Within-study variance, mean binomial variance scaled by ``1 / n_aver``.
        i_squared: ``v1 / (v1 + v2)``.
        n_subj: Number of studies.
        n_obs: Number of observations (and simulated draws).
        n_aver: Average observations per study.
        beta0: Fixed intercept used in the simulation.
        beta1: Fixed slope used in the simulation.
        seed: Seed of the random generator.
    """

    v1: float
    v2: float
    i_squared: float
    n_subj: Optional[int] = None
    n_obs: Optional[int] = None
    n_aver: Optional[float] = None
    beta0: Optional[float] = None
    beta1: Optional[float] = None
    seed: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def build_i2_result(
    dataset_name: str,
    subj_id_name: str,
    x_name: str,
    where: Optional[str],
    count_method: str,
    covariance: Any,
    result: I2Result,
) -> Dict[str, Any]:
    """
    Build complete I-squared result dictionary.

    Args:
        dataset_name: Label of the dataset source
        subj_id_name: Study id column
        x_name: Exposure column
        where: Row filter applied, if any
        count_method: Row-count method used
        covariance: Validated covariance matrix
        result: Estimation result

    Returns:
        Complete result dictionary
    """
    return {
        "model": {
            "dataset": dataset_name,
            "subj_id_name": subj_id_name,
            "x_name": x_name,
            "where": where,
            "count_method": count_method,
            "beta0": result.beta0,
            "beta1": result.beta1,
            "covariance": [list(map(float, row)) for row in covariance],
            "seed": result.seed,
        },
        "results": result.to_dict(),
    }
