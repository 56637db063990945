"""Output formatting utilities."""

from autoprod.forecasting.formatters.console import (
    format_comparison,
    format_fit_attempt,
    format_forecast_table,
    format_report_for_console,
    format_sensitivity,
    format_vintage,
)

__all__ = [
    "format_comparison",
    "format_fit_attempt",
    "format_forecast_table",
    "format_report_for_console",
    "format_sensitivity",
    "format_vintage",
]
