"""Console output formatting utilities."""

from __future__ import annotations

from typing import List

import pandas as pd

from autoprod.forecasting.api import AnalysisReport, FitAttempt, SensitivityResult, VintageResult
from autoprod.forecasting.comparison import ComparisonResult

VERDICT_TEXT = {
    "orders_adequate": "fixed orders remain adequate once the outliers are smoothed",
    "alternative_orders_preferred": "order search suggests different orders after smoothing",
    "inconclusive": "inconclusive; neither smoothing nor the order search improves the fit",
}


def format_fit_attempt(attempt: FitAttempt) -> str:
    """Coefficients, information criteria and residual tests for one fit attempt."""
    lines = [f"{attempt.label} [{attempt.source}]"]
    if attempt.fitted is None:
        lines.append(f"  FAILED: {attempt.error}")
        return "\n".join(lines)

    fitted = attempt.fitted
    lines.append(f"  AIC: {fitted.aic:,.2f}   BIC: {fitted.bic:,.2f}   n={fitted.nobs}")
    lines.append("  Coefficients:")
    for name, value in fitted.params.items():
        lines.append(f"    {name:<12} {value: .4f}")

    diagnostics = attempt.diagnostics
    if diagnostics is not None:
        independent = "yes" if diagnostics.residuals_independent else "no"
        normal = "yes" if diagnostics.residuals_normal else "no"
        lines.append(
            f"  Ljung-Box p (lag {diagnostics.ljung_box.index[-1]}): "
            f"{diagnostics.ljung_box_pvalue:.4f}  independent: {independent}"
        )
        lines.append(
            f"  Jarque-Bera: {diagnostics.jarque_bera:,.2f} "
            f"(p={diagnostics.jarque_bera_pvalue:.4f})  normal: {normal}"
        )
    return "\n".join(lines)


def format_forecast_table(forecast: pd.DataFrame) -> str:
    """One line per forecast month with its interval."""
    lines = [f"{'Month':<8} {'Forecast':>12} {'Lower':>12} {'Upper':>12}"]
    for date, row in forecast.iterrows():
        lines.append(
            f"{date:%Y-%m}  {row['forecast']:>12,.2f} {row['lower']:>12,.2f} "
            f"{row['upper']:>12,.2f}"
        )
    return "\n".join(lines)


def format_comparison(result: ComparisonResult, title: str = "Forecast vs Actual") -> str:
    """Per-month percent errors with skipped months marked."""
    start, end = result.window
    lines = [f"{title} ({start:%Y-%m} to {end:%Y-%m})"]
    lines.append(f"{'Month':<8} {'Forecast':>12} {'Actual':>12} {'Error %':>9}")
    for date, row in result.table.iterrows():
        error = row["percent_error"]
        error_str = "skipped" if pd.isna(error) else f"{error:+.2f}"
        lines.append(
            f"{date:%Y-%m}  {row['forecast']:>12,.2f} {row['actual']:>12,.2f} {error_str:>9}"
        )
    lines.append(
        f"Defined: {result.defined_count}/{len(result.table)}   "
        f"MAPE: {result.mean_absolute_percent_error:.2f}%"
    )
    return "\n".join(lines)


def format_vintage(result: VintageResult) -> str:
    """Diagnostics, fit attempts and forecast for one vintage."""
    observed = result.observed.values
    lines = [
        f"Vintage: {result.label} ({observed.index[0]:%Y-%m} to {observed.index[-1]:%Y-%m}, "
        f"{len(observed)} months)",
        "-" * 60,
    ]

    stationarity = result.stationarity
    lines.append(
        f"ADF on {result.stationary.label}: stat={stationarity.statistic:.3f} "
        f"p={stationarity.pvalue:.4f} stationary: {'yes' if stationarity.is_stationary else 'no'}"
    )
    period = result.fixed.seasonal_order[3]
    seasonal_lags = [lag for lag in (1, 2, period, 2 * period) if lag in result.correlogram.index]
    correlogram = result.correlogram
    acf_str = ", ".join(
        f"{lag}: {correlogram.loc[lag, 'acf']:+.2f}/{correlogram.loc[lag, 'pacf']:+.2f}"
        for lag in seasonal_lags
    )
    lines.append(f"ACF/PACF at lags {acf_str}")
    lines.append("")

    for attempt in result.attempts:
        lines.append(format_fit_attempt(attempt))
    if result.search is not None:
        lines.append(
            f"Order search suggestion: {result.search.label} (AIC={result.search.aic:,.2f}, "
            f"{result.search.failed} of {len(result.search.candidates)} candidates failed)"
        )
    if result.used_fallback:
        lines.append(f"Forecast uses fallback {result.chosen.label}")
    lines.append("")
    lines.append(format_forecast_table(result.forecast))
    return "\n".join(lines)


def format_sensitivity(result: SensitivityResult) -> str:
    """Baseline versus smoothed fit with the verdict."""
    dates = ", ".join(f"{d:%Y-%m}" for d in result.smoothed_dates)
    lines = [f"Sensitivity analysis (smoothed {dates})", "-" * 60]
    for vintage in (result.baseline, result.smoothed):
        fitted = vintage.fixed.fitted
        aic = f"{fitted.aic:,.2f}" if fitted is not None else "failed"
        lines.append(f"  {vintage.label:<10} {vintage.fixed.label}: AIC={aic}")
    if result.smoothed.search is not None:
        lines.append(
            f"  search on smoothed: {result.smoothed.search.label} "
            f"AIC={result.smoothed.search.aic:,.2f}"
        )
    lines.append(f"Verdict: {VERDICT_TEXT.get(result.verdict, result.verdict)}")
    return "\n".join(lines)


def format_report_for_console(report: AnalysisReport) -> str:
    """Build the full human-readable report.

    Args:
        report: AnalysisReport from run_production_analysis()

    Returns:
        Text report with every vintage, comparison and the sensitivity analysis
    """
    sections: List[str] = [
        "Auto Production SARIMA Report",
        "=" * 60,
        format_vintage(report.original),
        "",
        format_comparison(report.original_comparison, "Original forecast vs updated actuals"),
    ]
    if report.sensitivity is not None:
        sections.extend(["", format_vintage(report.sensitivity.smoothed)])
        sections.extend(["", format_sensitivity(report.sensitivity)])
    if report.smoothed_comparison is not None:
        sections.extend(
            [
                "",
                format_comparison(
                    report.smoothed_comparison, "Smoothed forecast vs updated actuals"
                ),
            ]
        )
    sections.extend(["", format_vintage(report.updated)])
    return "\n".join(sections)
