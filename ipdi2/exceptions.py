"""
Exception hierarchy for IPDI2.

Every error raised by the estimation pipeline derives from ``I2Error`` so
callers can catch the whole family at once::

    try:
        result = estimate_i_squared(...)
    except I2Error as e:
        print(f"I-squared estimation failed: {e}")

Each subclass also inherits the closest built-in exception, so code that
already catches ``ValueError`` or ``FileNotFoundError`` keeps working.
"""


class I2Error(Exception):
    """Base class for all IPDI2 errors."""

    pass


class MissingParameterError(I2Error, ValueError):
    """A required parameter (dataset, column name, estimate or covariance source) was not set.

    Raised before any dataset is opened. Also raised when a named column
    (subject id or exposure) does not exist in the dataset.
    """

    pass


class DatasetNotFoundError(I2Error, FileNotFoundError):
    """A named input source does not exist or cannot be opened for reading."""

    pass


class InvalidSourceShapeError(I2Error, ValueError):
    """An estimate or covariance table does not have the expected layout.

    The parameter-estimates table needs an ``Estimate`` column with at least
    two rows (intercept, slope); the covariance table needs exactly two
    numeric columns and two rows.
    """

    pass


class EmptyDatasetError(I2Error, ValueError):
    """The dataset contains no studies, so the average study size is undefined."""

    pass


class NonPositiveDefiniteCovarianceError(I2Error, ValueError):
    """The random-effects covariance matrix is not symmetric positive-definite."""

    pass


class DegenerateVarianceError(I2Error, ArithmeticError):
    """Total variance ``v1 + v2`` is zero or not finite, so I-squared is undefined."""

    pass


__all__ = [
    "I2Error",
    "MissingParameterError",
    "DatasetNotFoundError",
    "InvalidSourceShapeError",
    "EmptyDatasetError",
    "NonPositiveDefiniteCovarianceError",
    "DegenerateVarianceError",
]
