"""
Monte Carlo variance-component simulation for I-squared.

Draws random intercepts and slopes from the estimated random-effects
distribution, one draw per observation, and combines them with the fixed
effects and the observed exposure values:

- between-study variance ``v1``: sample variance of ``beta1 + Mu_1``
- within-study variance ``v2``: mean of ``p (1 - p) / n_aver`` where
  ``p = expit((beta0 + Mu_0) + (beta1 + Mu_1) * x)``
- ``I^2 = v1 / (v1 + v2)``
"""

from typing import Optional, Tuple

import numpy as np
from scipy.special import expit

from ..exceptions import DegenerateVarianceError
from .covariance import screen_covariance, try_cholesky
from .results import I2Result

DEFAULT_SEED = 4321


def simulate_random_effects(cov: np.ndarray, n_obs: int, seed: int = DEFAULT_SEED) -> np.ndarray:
    """Draw ``n_obs`` bivariate normal random effects with mean zero and covariance *cov*.

    Algorithm:

    1. Create a generator seeded with *seed* (no global random state).
    2. Draw ``(n_obs, 2)`` i.i.d. standard normals.
    3. Apply the Cholesky factor of *cov* to induce the covariance.

    Args:
        cov: Screened 2x2 positive-definite covariance matrix.
        n_obs: Number of draws.
        seed: Random seed.

    Returns:
        ``(n_obs, 2)`` array; column 0 is ``Mu_0`` (intercept), column 1 ``Mu_1`` (slope).
    """
    factor, ok = try_cholesky(cov)
    if not ok:
        # Unscreened input; surface the screener's message.
        screen_covariance(cov)

    rng = np.random.default_rng(seed)
    base_normal = rng.standard_normal((n_obs, 2))
    return base_normal @ factor.T


def compute_variance_components(
    beta0: float,
    beta1: float,
    mu: np.ndarray,
    x: np.ndarray,
    n_aver: float,
) -> Tuple[float, float]:
    """Compute the between-study (``v1``) and within-study (``v2``) variances.

    ``x`` is aligned with ``mu`` by row: draw ``i`` is paired with
    observation ``i`` of the dataset.
    """
    mu_0 = mu[:, 0]
    mu_1 = mu[:, 1]

    v_1 = mu_1 + beta1
    v1 = float(np.var(v_1, ddof=1))

    y_est = (beta0 + mu_0) + (beta1 + mu_1) * x
    p_est = expit(y_est)
    v_2 = (1.0 / n_aver) * p_est * (1.0 - p_est)
    v2 = float(np.mean(v_2))

    return v1, v2


def simulate_i_squared(
    beta0: float,
    beta1: float,
    cov: np.ndarray,
    x,
    n_aver: float,
    seed: int = DEFAULT_SEED,
    n_subj: Optional[int] = None,
) -> I2Result:
    """
    Estimate I-squared by Monte Carlo simulation of the random effects.

    Args:
        beta0: Fixed intercept estimate.
        beta1: Fixed slope estimate.
        cov: Screened 2x2 covariance of the random intercept and slope.
        x: Exposure values, one per observation, in dataset row order.
        n_aver: Average observations per study.
        seed: Random seed; identical inputs and seed give identical results.
        n_subj: Number of studies, recorded on the result.

    Returns:
        I2Result

    Raises:
        DegenerateVarianceError: If fewer than two observations are given,
            or ``v1 + v2`` is zero or not finite.
    """
    x = np.asarray(x, dtype=np.float64)
    n_obs = x.shape[0]
    if n_obs < 2:
        raise DegenerateVarianceError(f"At least 2 observations are needed for a sample variance, got {n_obs}")

    mu = simulate_random_effects(cov, n_obs, seed)
    v1, v2 = compute_variance_components(beta0, beta1, mu, x, n_aver)

    total = v1 + v2
    if not np.isfinite(total) or total == 0:
        raise DegenerateVarianceError(
            f"Total variance v1 + v2 is {total} (v1={v1}, v2={v2}); I-squared is undefined. "
            f"Check the exposure values for missing entries."
        )

    return I2Result(
        v1=v1,
        v2=v2,
        i_squared=v1 / total,
        n_subj=n_subj,
        n_obs=n_obs,
        n_aver=n_aver,
        beta0=beta0,
        beta1=beta1,
        seed=seed,
    )
