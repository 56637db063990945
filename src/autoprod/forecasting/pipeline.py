"""CLI wrapper for the production forecasting analysis.

This module provides a command-line interface for running the report.
All core analysis logic is in autoprod.forecasting.api.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from autoprod.config import AnalysisPaths
from autoprod.forecasting.api import AnalysisConfig, AnalysisReport, run_production_analysis
from autoprod.forecasting.config import DATE_COLUMN
from autoprod.forecasting.data.loaders import load_vintages
from autoprod.forecasting.formatters.console import format_report_for_console
from autoprod.forecasting.plots import (
    plot_correlogram,
    plot_forecast_vs_actual,
    plot_seasonal,
    plot_series,
)


def write_figures(report: AnalysisReport, figures_dir: Path) -> list[Path]:
    """Write the report's diagnostic figures to ``figures_dir``."""
    original = report.original
    actual = report.updated.observed.values
    written = [
        plot_series(original.observed, figures_dir / "original_series.png"),
        plot_series(original.model_input, figures_dir / "original_log_series.png"),
        plot_seasonal(original.model_input, figures_dir / "original_seasonal.png"),
        plot_correlogram(
            original.stationary,
            figures_dir / "original_correlogram.png",
            lags=report.config.acf_lags,
        ),
        plot_forecast_vs_actual(
            original.observed.values,
            original.forecast,
            figures_dir / "original_forecast_vs_actual.png",
            actual=actual,
        ),
        plot_forecast_vs_actual(
            actual, report.updated.forecast, figures_dir / "updated_forecast.png"
        ),
    ]
    if report.sensitivity is not None:
        smoothed = report.sensitivity.smoothed
        written.append(
            plot_forecast_vs_actual(
                smoothed.observed.values,
                smoothed.forecast,
                figures_dir / "smoothed_forecast_vs_actual.png",
                actual=actual,
            )
        )
    return written


def main() -> None:
    """Main CLI entry point for the production report.

    Parses command-line arguments, loads both vintages, runs the analysis,
    prints the report and optionally writes figures.
    """
    paths = AnalysisPaths.from_root("data")

    parser = argparse.ArgumentParser(description="Run the auto production SARIMA report.")
    parser.add_argument(
        "--original",
        type=str,
        default=str(paths.original_csv),
        help=f"Path to the original vintage CSV (default: {paths.original_csv})",
    )
    parser.add_argument(
        "--updated",
        type=str,
        default=str(paths.updated_csv),
        help=f"Path to the updated vintage CSV (default: {paths.updated_csv})",
    )
    parser.add_argument(
        "--date-column",
        type=str,
        default=DATE_COLUMN,
        help=f"Date column name (default: {DATE_COLUMN})",
    )
    parser.add_argument(
        "--value-column",
        type=str,
        default=None,
        help="Value column name (default: the only non-date column)",
    )
    parser.add_argument("--start", type=str, default=None, help="First month, e.g. 1993-01")
    parser.add_argument(
        "--end", type=str, default=None, help="Last month of the original vintage, e.g. 2022-09"
    )
    parser.add_argument(
        "--no-search",
        action="store_true",
        help="Skip the automatic order search unless the fixed orders fail",
    )
    parser.add_argument(
        "--no-sensitivity",
        action="store_true",
        help="Skip the COVID outlier sensitivity analysis",
    )
    parser.add_argument(
        "--plots-dir",
        type=str,
        default=None,
        help="Directory to write diagnostic figures to (default: no figures)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    print("=" * 60)
    print("Auto Production SARIMA Report")
    print("=" * 60)

    try:
        print("\n[1/3] Loading data vintages...")
        print(f"  Original: {args.original}")
        print(f"  Updated:  {args.updated}")
        original, updated = load_vintages(
            args.original,
            args.updated,
            date_column=args.date_column,
            value_column=args.value_column,
            start=args.start,
            original_end=args.end,
        )
        print(f"[OK] Loaded {len(original)} and {len(updated)} months")

        print("\n[2/3] Fitting models and forecasting...")
        config = AnalysisConfig(run_order_search=not args.no_search)
        if args.no_sensitivity:
            config.outlier_dates = []
        report = run_production_analysis(original, updated, config)
        print("[OK] Analysis complete")

        print("\n[3/3] Formatting results...")
        print("\n" + format_report_for_console(report))

        if args.plots_dir:
            written = write_figures(report, Path(args.plots_dir))
            print(f"\n[OK] Wrote {len(written)} figures to {args.plots_dir}")

        print("\n[OK] Report completed successfully")

    except Exception as e:
        print(f"\n[ERROR] Report failed: {e}")
        raise


if __name__ == "__main__":
    main()
