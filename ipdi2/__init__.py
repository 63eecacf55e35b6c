"""IPDI2 - I-squared for one-stage IPD meta-analysis of binary outcomes.

Estimates the share of total variance due to between-study heterogeneity
from the fixed effects and random-effects covariance matrix of a
mixed-effects logistic regression, by Monte Carlo simulation of the
random intercept and slope.

Example:
    >>> from ipdi2 import IPDI2
    >>>
    >>> model = IPDI2()
    >>> model.set_data(ipd, subj_id_name="study", x_name="treat")
    >>> model.set_estimates({"Effect": ["Intercept", "treat"], "Estimate": [-1.0, 0.5]})
    >>> model.set_covariance([[0.2, 0.0], [0.0, 0.1]])
    >>> model.find_i_squared()
    >>>
    >>> result = estimate_i_squared(ipd, "study", "treat", "fixed.csv", "g.csv")
"""

from importlib.metadata import version as _get_version

from .core import I2Result, SampleSizeSummary
from .exceptions import (
    DatasetNotFoundError,
    DegenerateVarianceError,
    EmptyDatasetError,
    I2Error,
    InvalidSourceShapeError,
    MissingParameterError,
    NonPositiveDefiniteCovarianceError,
)
from .model import IPDI2, estimate_i_squared

__version__ = _get_version("IPDI2")

__all__ = [
    "IPDI2",
    "estimate_i_squared",
    "I2Result",
    "SampleSizeSummary",
    "I2Error",
    "MissingParameterError",
    "DatasetNotFoundError",
    "InvalidSourceShapeError",
    "EmptyDatasetError",
    "NonPositiveDefiniteCovarianceError",
    "DegenerateVarianceError",
]
