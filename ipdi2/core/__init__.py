"""Core components for the IPDI2 estimator.

Re-exports the building blocks of the estimation pipeline:

- ``SampleSizeSummary``, ``estimate_sample_size``, ``count_observations``:
  study and observation counts.
- ``screen_covariance``, ``try_cholesky``: positive-definiteness checks.
- ``simulate_i_squared``, ``simulate_random_effects``,
  ``compute_variance_components``: Monte Carlo variance components.
- ``I2Result``, ``build_i2_result``: result containers.
"""

from .covariance import screen_covariance, try_cholesky
from .results import I2Result, build_i2_result
from .sample_size import SampleSizeSummary, apply_filter, count_observations, count_subjects, estimate_sample_size
from .simulation import DEFAULT_SEED, compute_variance_components, simulate_i_squared, simulate_random_effects

__all__ = [
    # Sample size
    "SampleSizeSummary",
    "apply_filter",
    "count_subjects",
    "count_observations",
    "estimate_sample_size",
    # Covariance
    "screen_covariance",
    "try_cholesky",
    # Simulation
    "DEFAULT_SEED",
    "simulate_random_effects",
    "compute_variance_components",
    "simulate_i_squared",
    # Results
    "I2Result",
    "build_i2_result",
]
