"""Example: Production forecast report using the analysis API

This example loads the two data vintages, fits the seasonal ARIMA model with
fixed orders, forecasts twelve months, compares the forecast with the updated
vintage and runs the COVID outlier sensitivity analysis.

Prerequisites:
- data/production_original.csv and data/production_updated.csv with an
  observation_date column and one value column (e.g. a FRED export)
"""

from pathlib import Path

from autoprod import AnalysisPaths
from autoprod.forecasting import AnalysisConfig, run_production_analysis
from autoprod.forecasting.data import load_vintages
from autoprod.forecasting.formatters import format_comparison, format_sensitivity
from autoprod.forecasting.pipeline import write_figures

paths = AnalysisPaths.from_root(Path("data"), Path("output"))

print("Loading data vintages...")
original, updated = load_vintages(
    paths.original_csv,
    paths.updated_csv,
    start="1993-01-01",
    original_end="2022-09-01",  # MODIFY AS NEEDED
)
print(f"Original: {len(original)} months, updated: {len(updated)} months")

# Orders picked from the correlogram of the log, seasonally and first differenced series
config = AnalysisConfig(order=(0, 1, 2), seasonal_order=(0, 1, 1, 12))

print("Running analysis...")
report = run_production_analysis(original, updated, config)

print("\nOriginal vintage fit:")
print(report.original.chosen.fitted.summary())

print("\nCorrelogram (first 13 lags):")
print(report.original.correlogram.head(13))

print("\nForecast (raw scale, 95% intervals):")
print(report.original.forecast)

print()
print(format_comparison(report.original_comparison, "Original forecast vs updated actuals"))

if report.sensitivity is not None:
    print()
    print(format_sensitivity(report.sensitivity))

# Order search candidates for the original vintage
if report.original.search is not None:
    print("\nOrder search candidates:")
    print(report.original.search.candidates.head(10))

# Save tables and figures
paths.ensure_dirs()
report.original.forecast.to_csv(paths.output_root / "original_forecast.csv")
report.original_comparison.table.to_csv(paths.output_root / "original_vs_actual.csv")
written = write_figures(report, paths.figures)
print(f"\nSaved {len(written)} figures to: {paths.figures}")
