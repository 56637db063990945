"""Production forecasting module.

This module provides the seasonal ARIMA analysis of monthly auto production.

Example:
    >>> from autoprod.forecasting import AnalysisConfig, run_production_analysis
    >>> from autoprod.forecasting.data import load_vintages
    >>>
    >>> original, updated = load_vintages(
    ...     "data/production_original.csv", "data/production_updated.csv"
    ... )
    >>>
    >>> config = AnalysisConfig(order=(0, 1, 2), seasonal_order=(0, 1, 1, 12))
    >>> report = run_production_analysis(original, updated, config)
    >>>
    >>> print(report.original.forecast)  # 12 months with 95% intervals
    >>> print(report.original_comparison.table)  # percent error per month
    >>> print(report.sensitivity.verdict)  # COVID outlier sensitivity

"""

from autoprod.forecasting.api import (
    AnalysisConfig,
    AnalysisReport,
    FitAttempt,
    SensitivityResult,
    VintageResult,
    run_production_analysis,
    run_sensitivity_analysis,
    run_vintage_analysis,
)
from autoprod.forecasting.comparison import ComparisonResult, compare_forecast

__all__ = [
    "AnalysisConfig",
    "AnalysisReport",
    "ComparisonResult",
    "FitAttempt",
    "SensitivityResult",
    "VintageResult",
    "compare_forecast",
    "run_production_analysis",
    "run_sensitivity_analysis",
    "run_vintage_analysis",
]
