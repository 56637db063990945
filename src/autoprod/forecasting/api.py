"""Public API for the production forecasting analysis.

This module runs the analysis on in-memory series: transform, diagnose, fit,
forecast, compare against a later vintage, and the outlier sensitivity check.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional, Tuple

import pandas as pd

from autoprod.exceptions import ConfigError, DataQualityError, ModelFitError
from autoprod.forecasting.comparison import ComparisonResult, compare_forecast
from autoprod.forecasting.config import (
    AIC_TOLERANCE,
    COVID_OUTLIER_DATES,
    DEFAULT_ACF_LAGS,
    DEFAULT_ALPHA,
    DEFAULT_ORDER,
    DEFAULT_RESIDUAL_LAGS,
    DEFAULT_SEASONAL_ORDER,
    FORECAST_MONTHS,
)
from autoprod.forecasting.data.preparation import (
    difference,
    log_transform,
    positions_for_dates,
    seasonal_difference,
    smooth_outliers,
    tag_raw,
)
from autoprod.forecasting.diagnostics import (
    ResidualDiagnostics,
    StationarityResult,
    adf_stationarity,
    compute_correlogram,
    residual_diagnostics,
)
from autoprod.forecasting.models.sarima import (
    FittedModel,
    OrderSearchResult,
    OrderSearchSpace,
    SARIMAModel,
    format_orders,
    search_orders,
    validate_orders,
)
from autoprod.forecasting.types import TaggedSeries

logger = logging.getLogger(__name__)


@dataclass
class AnalysisConfig:
    """Configuration for the production analysis.

    Attributes:
        order: Fixed non-seasonal order (p, d, q) (default: (0, 1, 2)).
        seasonal_order: Fixed seasonal order (P, D, Q, s) (default: (0, 1, 1, 12)).
        horizon: Months to forecast ahead (default: 12).
        log_transform: Fit models on the log scale (default: True). Forecasts are
            always reported on the raw scale.
        acf_lags: Lags for the correlogram of the differenced series (default: 36).
        residual_lags: Lags for residual diagnostics (default: 24).
        alpha: Significance level for intervals and tests (default: 0.05).
        run_order_search: Run the automatic order search alongside the fixed
            orders (default: True). It always runs when the fixed orders fail.
        search_space: Ranges for the order search.
        outlier_dates: Months smoothed in the sensitivity analysis (default: April
            and May 2020). Empty to skip the sensitivity analysis.
    """

    order: Tuple[int, int, int] = DEFAULT_ORDER
    seasonal_order: Tuple[int, int, int, int] = DEFAULT_SEASONAL_ORDER
    horizon: int = FORECAST_MONTHS
    log_transform: bool = True
    acf_lags: int = DEFAULT_ACF_LAGS
    residual_lags: int = DEFAULT_RESIDUAL_LAGS
    alpha: float = DEFAULT_ALPHA
    run_order_search: bool = True
    search_space: OrderSearchSpace = field(default_factory=OrderSearchSpace)
    outlier_dates: List[str] = field(default_factory=lambda: list(COVID_OUTLIER_DATES))

    def validate(self) -> None:
        """Check the configuration.

        Raises:
            ConfigError: If orders are malformed, the seasonal period is below 2,
                counts are not positive, alpha is outside (0, 1), or an outlier
                date does not parse.
        """
        validate_orders(tuple(self.order), tuple(self.seasonal_order))
        if self.seasonal_order[3] < 2:
            raise ConfigError(
                f"Seasonal period must be at least 2, got {self.seasonal_order[3]}; "
                f"the analysis differences at the seasonal lag"
            )
        for name in ("horizon", "acf_lags", "residual_lags"):
            if getattr(self, name) < 1:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if not 0 < self.alpha < 1:
            raise ConfigError(f"alpha must be in (0, 1), got {self.alpha}")
        for value in self.outlier_dates:
            try:
                pd.Timestamp(value)
            except ValueError as e:
                raise ConfigError(f"Invalid outlier date {value!r}") from e


@dataclass
class FitAttempt:
    """One attempt at fitting a SARIMA model, successful or not.

    Attributes:
        order: Attempted non-seasonal order.
        seasonal_order: Attempted seasonal order.
        source: "fixed" for the configured orders, "search" for the order
            search suggestion.
        fitted: The fitted model, or None if fitting failed.
        diagnostics: Residual diagnostics of the fitted model, if available.
        error: Failure message if fitting failed.
    """

    order: Tuple[int, int, int]
    seasonal_order: Tuple[int, int, int, int]
    source: str
    fitted: Optional[FittedModel] = None
    diagnostics: Optional[ResidualDiagnostics] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.fitted is not None

    @property
    def label(self) -> str:
        return format_orders(self.order, self.seasonal_order)


@dataclass
class VintageResult:
    """Result of analysing one data vintage.

    Attributes:
        label: Name of the vintage, e.g. "original", "smoothed", "updated".
        observed: Raw observations.
        model_input: Series the models were fit on (log scale by default).
        stationary: model_input after seasonal then first differencing.
        correlogram: ACF/PACF of the stationary series by lag.
        stationarity: ADF test on the stationary series.
        attempts: Every fit attempt, fixed orders first.
        search: Order search result, if it ran and found a model.
        forecast: Forecast frame on the raw scale from the first successful attempt.
    """

    label: str
    observed: TaggedSeries
    model_input: TaggedSeries
    stationary: TaggedSeries
    correlogram: pd.DataFrame
    stationarity: StationarityResult
    attempts: List[FitAttempt]
    search: Optional[OrderSearchResult]
    forecast: pd.DataFrame

    @property
    def chosen(self) -> FitAttempt:
        """The attempt whose model produced the forecast."""
        return next(attempt for attempt in self.attempts if attempt.succeeded)

    @property
    def fixed(self) -> FitAttempt:
        """The attempt with the configured orders."""
        return self.attempts[0]

    @property
    def used_fallback(self) -> bool:
        return self.chosen.source != "fixed"


@dataclass
class SensitivityResult:
    """Outlier sensitivity analysis: the same fixed orders with and without smoothing.

    Attributes:
        baseline: Analysis of the unsmoothed series.
        smoothed: Analysis of the series with outliers interpolated.
        smoothed_dates: Months that were interpolated.
        verdict: "orders_adequate", "alternative_orders_preferred" or "inconclusive".
    """

    baseline: VintageResult
    smoothed: VintageResult
    smoothed_dates: List[pd.Timestamp]
    verdict: str


@dataclass
class AnalysisReport:
    """Everything the printed report is built from.

    Attributes:
        config: Configuration the analysis ran with.
        original: Analysis of the original vintage.
        updated: Analysis of the updated vintage, projecting past its end.
        original_comparison: Original-vintage forecast against updated actuals.
        sensitivity: Outlier sensitivity analysis, None if no outlier dates.
        smoothed_comparison: Smoothed-series forecast against updated actuals.
        metadata: Dates and sizes of each vintage.
    """

    config: AnalysisConfig
    original: VintageResult
    updated: VintageResult
    original_comparison: ComparisonResult
    sensitivity: Optional[SensitivityResult] = None
    smoothed_comparison: Optional[ComparisonResult] = None
    metadata: dict = field(default_factory=dict)


def _attempt_fit(
    model: SARIMAModel,
    series: TaggedSeries,
    source: str,
    config: AnalysisConfig,
) -> FitAttempt:
    """Fit one model and collect its residual diagnostics, recording failure."""
    attempt = FitAttempt(order=model.order, seasonal_order=model.seasonal_order, source=source)
    try:
        attempt.fitted = model.train(series)
    except ModelFitError as e:
        logger.warning(f"{model.label} ({source}) failed: {e}")
        attempt.error = str(e)
        return attempt

    try:
        attempt.diagnostics = residual_diagnostics(
            attempt.fitted, lags=config.residual_lags, alpha=config.alpha
        )
    except DataQualityError as e:
        logger.warning(f"Residual diagnostics unavailable for {model.label}: {e}")
    return attempt


def run_vintage_analysis(
    series: pd.Series,
    config: Optional[AnalysisConfig] = None,
    label: str = "original",
) -> VintageResult:
    """Run the full analysis on one data vintage.

    This function:
    - does NOT read or write any files,
    - does NOT print (logging only).

    Steps: log transform (if configured), seasonal and first differencing for the
    correlogram and ADF test, fit with the fixed orders, run the order search,
    fall back to its suggestion if the fixed orders fail, and forecast.

    Args:
        series: Monthly raw observations.
        config: AnalysisConfig. If None, uses defaults.
        label: Name of the vintage for logging and reports.

    Returns:
        VintageResult with every fit attempt recorded.

    Raises:
        ConfigError: If the configuration is invalid.
        TransformError: If the log transform meets non-positive values.
        DataQualityError: If the series is too short for the correlogram.
        ModelFitError: If neither the fixed orders nor the search suggestion fit.

    """
    if config is None:
        config = AnalysisConfig()
    config.validate()

    period = config.seasonal_order[3]
    observed = tag_raw(series)
    model_input = log_transform(observed) if config.log_transform else observed
    stationary = difference(seasonal_difference(model_input, period=period), lag=1)

    logger.info(
        f"[{label}] {len(observed)} months, {observed.values.index[0]:%Y-%m} to "
        f"{observed.values.index[-1]:%Y-%m}"
    )
    correlogram = compute_correlogram(stationary, nlags=config.acf_lags)
    stationarity = adf_stationarity(stationary, alpha=config.alpha)

    model = SARIMAModel(config.order, config.seasonal_order)
    attempts = [_attempt_fit(model, model_input, "fixed", config)]

    search: Optional[OrderSearchResult] = None
    if config.run_order_search or not attempts[0].succeeded:
        try:
            search = search_orders(model_input, config.search_space)
        except ModelFitError as e:
            logger.warning(f"[{label}] order search found no model: {e}")

    fitted = attempts[0].fitted
    if fitted is None:
        if search is None:
            raise ModelFitError(
                f"[{label}] {model.label} failed and the order search found no alternative",
                model.order,
                model.seasonal_order,
            )
        logger.warning(f"[{label}] falling back to search suggestion {search.label}")
        fallback = SARIMAModel(search.order, search.seasonal_order)
        attempts.append(_attempt_fit(fallback, model_input, "search", config))
        fitted = attempts[-1].fitted
        if fitted is None:
            raise ModelFitError(
                f"[{label}] neither {model.label} nor {fallback.label} could be fit",
                fallback.order,
                fallback.seasonal_order,
            )
        model = fallback

    forecast = model.forecast(fitted, steps=config.horizon, alpha=config.alpha)

    return VintageResult(
        label=label,
        observed=observed,
        model_input=model_input,
        stationary=stationary,
        correlogram=correlogram,
        stationarity=stationarity,
        attempts=attempts,
        search=search,
        forecast=forecast,
    )


def _sensitivity_verdict(baseline: VintageResult, smoothed: VintageResult) -> str:
    """Judge whether the fixed orders hold up once the outliers are removed."""
    base_fit = baseline.fixed.fitted
    smooth_fit = smoothed.fixed.fitted
    if base_fit is None or smooth_fit is None:
        return "inconclusive"

    if smoothed.search is not None and smoothed.search.aic < smooth_fit.aic - AIC_TOLERANCE:
        return "alternative_orders_preferred"
    if smooth_fit.aic < base_fit.aic:
        return "orders_adequate"
    return "inconclusive"


def run_sensitivity_analysis(
    series: pd.Series,
    config: Optional[AnalysisConfig] = None,
    baseline: Optional[VintageResult] = None,
) -> SensitivityResult:
    """Smooth the configured outlier months and refit with the same fixed orders.

    A secondary order search always runs on the smoothed series so its
    suggestion can be compared with the fixed orders.

    Args:
        series: Monthly raw observations containing the outlier months.
        config: AnalysisConfig. If None, uses defaults.
        baseline: Existing analysis of the unsmoothed series, reused if given.

    Returns:
        SensitivityResult with both analyses and a verdict.

    Raises:
        TransformError: If an outlier month is missing or at the series boundary.

    """
    if config is None:
        config = AnalysisConfig()

    observed = tag_raw(series)
    positions = positions_for_dates(observed, config.outlier_dates)
    smoothed_series = smooth_outliers(observed, positions).values

    if baseline is None:
        baseline = run_vintage_analysis(series, config, label="baseline")

    smoothed = run_vintage_analysis(
        smoothed_series, replace(config, run_order_search=True), label="smoothed"
    )
    verdict = _sensitivity_verdict(baseline, smoothed)
    logger.info(f"Sensitivity analysis verdict: {verdict}")

    return SensitivityResult(
        baseline=baseline,
        smoothed=smoothed,
        smoothed_dates=[observed.values.index[pos] for pos in positions],
        verdict=verdict,
    )


def run_production_analysis(
    original: pd.Series,
    updated: pd.Series,
    config: Optional[AnalysisConfig] = None,
) -> AnalysisReport:
    """Run the whole analysis over the original and updated vintages.

    Args:
        original: Earlier vintage used to fit and forecast.
        updated: Later vintage holding the realized values.
        config: AnalysisConfig. If None, uses defaults.

    Returns:
        AnalysisReport with both vintage analyses, the forecast comparisons and
        the sensitivity analysis.

    Raises:
        DataQualityError: If the original forecast does not overlap the updated vintage.

    """
    if config is None:
        config = AnalysisConfig()

    original_result = run_vintage_analysis(original, config, label="original")
    original_comparison = compare_forecast(original_result.forecast, updated)

    sensitivity: Optional[SensitivityResult] = None
    smoothed_comparison: Optional[ComparisonResult] = None
    if config.outlier_dates:
        sensitivity = run_sensitivity_analysis(original, config, baseline=original_result)
        smoothed_comparison = compare_forecast(sensitivity.smoothed.forecast, updated)

    updated_result = run_vintage_analysis(updated, config, label="updated")

    return AnalysisReport(
        config=config,
        original=original_result,
        updated=updated_result,
        original_comparison=original_comparison,
        sensitivity=sensitivity,
        smoothed_comparison=smoothed_comparison,
        metadata={
            "original_start": original.index[0],
            "original_end": original.index[-1],
            "updated_end": updated.index[-1],
            "original_months": len(original),
            "updated_months": len(updated),
        },
    )
