"""autoprod - Seasonal ARIMA analysis of monthly auto production.

This package loads monthly production vintages, stabilizes and differences
them, fits seasonal ARIMA models, forecasts twelve months ahead and checks
those forecasts against a later data vintage.

Module Structure:
    autoprod.forecasting: Analysis API (vintage, sensitivity, full report)
    autoprod.forecasting.data: CSV loading, transforms, outlier smoothing
    autoprod.forecasting.models: SARIMA fitting, forecasting, order search
    autoprod.forecasting.diagnostics: Correlograms, ADF, residual tests
    autoprod.config: AnalysisPaths configuration

Quick Start:
    >>> from autoprod import AnalysisPaths
    >>> from autoprod.forecasting import run_production_analysis
    >>> from autoprod.forecasting.data import load_vintages
    >>>
    >>> paths = AnalysisPaths.from_root("data")
    >>> original, updated = load_vintages(paths.original_csv, paths.updated_csv)
    >>> report = run_production_analysis(original, updated)
    >>> print(report.original.forecast)
"""

__version__ = "0.1.0"

from autoprod.config import AnalysisPaths
from autoprod.exceptions import (
    AutoprodError,
    ConfigError,
    DataQualityError,
    ModelFitError,
    TransformError,
)

__all__ = [
    "AnalysisPaths",
    "AutoprodError",
    "ConfigError",
    "DataQualityError",
    "ModelFitError",
    "TransformError",
    "__version__",
]
