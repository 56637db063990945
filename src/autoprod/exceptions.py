"""Domain-specific exceptions for autoprod.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from AutoprodError for easy catching.
"""


class AutoprodError(Exception):
    """Base exception for all autoprod errors.

    Users can catch this exception to handle any analysis error raised by
    the package.
    """

    pass


class ConfigError(AutoprodError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid model orders or seasonal period are provided
    - The forecast horizon or lag counts are not positive
    - Outlier dates cannot be parsed
    """

    pass


class DataQualityError(AutoprodError):
    """Raised when data quality checks fail.

    This exception is raised when:
    - Required columns are missing from the input CSV
    - Dates fail to parse, repeat, or leave monthly gaps
    - Missing or negative values are found and not explicitly allowed
    - A forecast and an actual series share no dates
    """

    pass


class TransformError(AutoprodError):
    """Raised when a series transformation is not valid for its input.

    This exception is raised when:
    - A log transform is requested on non-positive values
    - Transforms are composed in an invalid order (e.g. log after differencing)
    - Outlier smoothing is requested at a boundary position
    """

    pass


class ModelFitError(AutoprodError):
    """Raised when a SARIMA model cannot be fit.

    Carries the attempted orders so callers can record the failed attempt.
    """

    def __init__(
        self,
        message: str,
        order: tuple[int, int, int] | None = None,
        seasonal_order: tuple[int, int, int, int] | None = None,
    ) -> None:
        super().__init__(message)
        self.order = order
        self.seasonal_order = seasonal_order
