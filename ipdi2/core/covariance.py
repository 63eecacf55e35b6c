"""
Positive-definiteness screening of the random-effects covariance matrix.

Sampling from a bivariate normal requires a symmetric positive-definite
covariance matrix. Two independent checks are run and both must pass:
a Cholesky decomposition and an eigenvalue check.
"""

from typing import List, Optional, Tuple

import numpy as np
from scipy import linalg

from ..exceptions import NonPositiveDefiniteCovarianceError

SYMMETRY_TOL = 1e-8


def try_cholesky(cov: np.ndarray) -> Tuple[Optional[np.ndarray], bool]:
    """Attempt a lower Cholesky factorisation without raising.

    Returns:
        ``(L, True)`` with ``L @ L.T == cov`` on success, ``(None, False)``
        when the matrix is not positive-definite.
    """
    try:
        factor = linalg.cholesky(cov, lower=True, check_finite=True)
    except (linalg.LinAlgError, ValueError):
        return None, False
    return factor, True


def screen_covariance(cov, symmetry_tol: float = SYMMETRY_TOL) -> np.ndarray:
    """
    Validate that *cov* is a symmetric positive-definite 2x2 matrix.

    The decomposition and the eigenvalue check always both run, so the
    error lists every check that failed.

    Args:
        cov: 2x2 covariance matrix of the random intercept and slope.
        symmetry_tol: Absolute tolerance for ``cov == cov.T``.

    Returns:
        *cov* as a float array, otherwise unchanged.

    Raises:
        NonPositiveDefiniteCovarianceError: If any check fails.
    """
    cov = np.asarray(cov, dtype=np.float64)

    if cov.shape != (2, 2):
        raise NonPositiveDefiniteCovarianceError(f"Covariance matrix must be 2x2, got shape {cov.shape}")
    if not np.all(np.isfinite(cov)):
        raise NonPositiveDefiniteCovarianceError(f"Covariance matrix contains non-finite values: {cov.tolist()}")

    problems: List[str] = []

    if not np.allclose(cov, cov.T, rtol=0.0, atol=symmetry_tol):
        problems.append(f"matrix is not symmetric (tolerance {symmetry_tol})")

    _, decomposed = try_cholesky(cov)
    if not decomposed:
        problems.append("Cholesky decomposition failed")

    eigenvals = linalg.eigvalsh(cov)
    if np.any(eigenvals <= 0):
        problems.append(f"eigenvalues must all be > 0, got {np.round(eigenvals, 10).tolist()}")

    if problems:
        raise NonPositiveDefiniteCovarianceError(
            "Covariance matrix is not positive-definite:\n"
            + "\n".join(f"• {p}" for p in problems)
            + f"\nMatrix: {cov.tolist()}"
        )

    return cov
