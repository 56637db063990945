"""Seasonal ARIMA model implementation for monthly production forecasting.

This module fits SARIMAX from statsmodels by maximum likelihood with fixed
orders, forecasts a fixed horizon with confidence intervals, and runs the
automatic order search whose suggestion is compared against the fixed orders.

Differencing is handled inside the model through the integrated orders ``d``
and ``D``; series passed to train() must be undifferenced. Models trained on a
log-scale series have their forecasts exponentiated back to the raw scale.
"""

from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from itertools import product
from typing import Any

import numpy as np
import pandas as pd
from statsmodels.tools.sm_exceptions import ConvergenceWarning
from statsmodels.tsa.statespace.sarimax import SARIMAX

from autoprod.exceptions import ConfigError, DataQualityError, ModelFitError, TransformError
from autoprod.forecasting.config import (
    DEFAULT_ALPHA,
    DEFAULT_ORDER,
    DEFAULT_SEASONAL_ORDER,
    FORECAST_MONTHS,
    MONTHLY_FREQ,
    SEASONAL_PERIOD,
)
from autoprod.forecasting.models.base import ForecastModel
from autoprod.forecasting.types import Scale, TaggedSeries

logger = logging.getLogger(__name__)

Order = tuple[int, int, int]
SeasonalOrder = tuple[int, int, int, int]


def validate_orders(order: Order, seasonal_order: SeasonalOrder) -> None:
    """Check that SARIMA orders are well formed.

    Raises:
        ConfigError: If an order has the wrong length, a negative entry, or the
            seasonal period is below 2 while seasonal terms are requested.

    """
    if len(order) != 3 or len(seasonal_order) != 4:
        raise ConfigError(
            f"Expected (p,d,q) and (P,D,Q,s), got {order} and {seasonal_order}"
        )
    if any(int(v) < 0 for v in (*order, *seasonal_order)):
        raise ConfigError(f"Orders must be non-negative: {order}x{seasonal_order}")
    if any(seasonal_order[:3]) and seasonal_order[3] < 2:
        raise ConfigError(f"Seasonal period must be at least 2, got {seasonal_order[3]}")


def forecast_index(last_date: pd.Timestamp, steps: int) -> pd.DatetimeIndex:
    """Monthly dates for the ``steps`` months immediately after ``last_date``."""
    start = pd.Timestamp(last_date).to_period("M").to_timestamp() + pd.offsets.MonthBegin(1)
    return pd.date_range(start=start, periods=steps, freq=MONTHLY_FREQ, name="date")


def format_orders(order: Order, seasonal_order: SeasonalOrder) -> str:
    """Render orders as ``SARIMA(p,d,q)(P,D,Q)s``."""
    p, d, q = order
    sp, sd, sq, s = seasonal_order
    return f"SARIMA({p},{d},{q})({sp},{sd},{sq}){s}"


@dataclass(frozen=True)
class FittedModel:
    """A SARIMA model fit by maximum likelihood.

    Attributes:
        order: Non-seasonal (p, d, q).
        seasonal_order: Seasonal (P, D, Q, s).
        scale: Scale of the series the model was fit on.
        params: Estimated coefficients.
        aic: Akaike information criterion.
        bic: Bayesian information criterion.
        converged: Whether the optimizer reported convergence.
        last_date: Date of the last observation used for fitting.
        nobs: Number of observations used for fitting.
        results: The statsmodels SARIMAXResults object.
    """

    order: Order
    seasonal_order: SeasonalOrder
    scale: Scale
    params: pd.Series
    aic: float
    bic: float
    converged: bool
    last_date: pd.Timestamp
    nobs: int
    results: Any = field(repr=False, compare=False)

    @property
    def label(self) -> str:
        return format_orders(self.order, self.seasonal_order)

    def summary(self) -> str:
        """Coefficient table and information criteria from statsmodels."""
        return str(self.results.summary())


class SARIMAModel(ForecastModel):
    """Seasonal ARIMA model with fixed orders.

    Uses SARIMAX from statsmodels without exogenous regressors. Stationarity and
    invertibility are not enforced during optimization, matching how the orders
    are explored in the order search.
    """

    def __init__(
        self,
        order: Order = DEFAULT_ORDER,
        seasonal_order: SeasonalOrder = DEFAULT_SEASONAL_ORDER,
        enforce_stationarity: bool = False,
        enforce_invertibility: bool = False,
        maxiter: int = 200,
    ):
        """Initialize SARIMAModel with fixed orders.

        Args:
            order: Non-seasonal order (p, d, q) (default: (0, 1, 2))
            seasonal_order: Seasonal order (P, D, Q, s) (default: (0, 1, 1, 12))
            enforce_stationarity: Passed to SARIMAX (default: False)
            enforce_invertibility: Passed to SARIMAX (default: False)
            maxiter: Maximum optimizer iterations (default: 200)

        Raises:
            ConfigError: If the orders are malformed

        """
        order = tuple(int(v) for v in order)
        seasonal_order = tuple(int(v) for v in seasonal_order)
        validate_orders(order, seasonal_order)
        self.order: Order = order  # type: ignore[assignment]
        self.seasonal_order: SeasonalOrder = seasonal_order  # type: ignore[assignment]
        self.enforce_stationarity = enforce_stationarity
        self.enforce_invertibility = enforce_invertibility
        self.maxiter = maxiter

    @property
    def label(self) -> str:
        return format_orders(self.order, self.seasonal_order)

    def train(self, series: TaggedSeries, **_kwargs: Any) -> FittedModel:
        """Fit the model by maximum likelihood.

        Args:
            series: Undifferenced series on the raw or log scale
            **_kwargs: Additional parameters (unused, for interface compatibility)

        Returns:
            FittedModel with coefficients and information criteria

        Raises:
            TransformError: If the series has already been differenced
            DataQualityError: If the series contains missing values
            ModelFitError: If fitting fails or the optimizer does not converge

        """
        if series.is_differenced:
            raise TransformError(
                f"{self.label} differences internally; got a series already at {series.label}"
            )
        values = series.values.astype(float)
        if values.isna().any():
            raise DataQualityError(
                f"{int(values.isna().sum())} missing values; interpolate before fitting"
            )

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", ConvergenceWarning)
            try:
                model = SARIMAX(
                    values,
                    order=self.order,
                    seasonal_order=self.seasonal_order,
                    enforce_stationarity=self.enforce_stationarity,
                    enforce_invertibility=self.enforce_invertibility,
                )
                res = model.fit(disp=False, maxiter=self.maxiter)
            except (ValueError, np.linalg.LinAlgError) as e:
                raise ModelFitError(
                    f"{self.label} failed to fit: {e}", self.order, self.seasonal_order
                ) from e

        for warning in caught:
            if not issubclass(warning.category, ConvergenceWarning):
                logger.debug(f"{self.label}: {warning.message}")

        retvals = getattr(res, "mle_retvals", None) or {}
        converged = bool(retvals.get("converged", True)) and not any(
            issubclass(w.category, ConvergenceWarning) for w in caught
        )
        if not converged or not np.isfinite(res.aic):
            raise ModelFitError(
                f"{self.label} did not converge on {series.label} series",
                self.order,
                self.seasonal_order,
            )

        fitted = FittedModel(
            order=self.order,
            seasonal_order=self.seasonal_order,
            scale=series.scale,
            params=res.params.copy(),
            aic=float(res.aic),
            bic=float(res.bic),
            converged=converged,
            last_date=values.index[-1],
            nobs=int(res.nobs),
            results=res,
        )
        logger.info(f"Fit {fitted.label} on {series.label} series: AIC={fitted.aic:.2f}")
        return fitted

    def forecast(
        self,
        model: FittedModel,
        steps: int = FORECAST_MONTHS,
        alpha: float = DEFAULT_ALPHA,
        **_kwargs: Any,
    ) -> pd.DataFrame:
        """Generate point forecasts and confidence intervals.

        Args:
            model: FittedModel from train()
            steps: Number of months to forecast ahead (default: 12)
            alpha: Interval significance level (default: 0.05 for 95% intervals)
            **_kwargs: Additional parameters (unused, for interface compatibility)

        Returns:
            DataFrame indexed by the ``steps`` months after the fitting series'
            last date, with 'forecast', 'lower' and 'upper' on the raw scale

        Raises:
            ConfigError: If steps is not positive

        """
        if steps < 1:
            raise ConfigError(f"Forecast horizon must be positive, got {steps}")

        prediction = model.results.get_forecast(steps=steps)
        mean = np.asarray(prediction.predicted_mean, dtype=float)
        bounds = np.asarray(prediction.conf_int(alpha=alpha), dtype=float)

        frame = pd.DataFrame(
            {"forecast": mean, "lower": bounds[:, 0], "upper": bounds[:, 1]},
            index=forecast_index(model.last_date, steps),
        )
        if model.scale is Scale.LOG:
            # exp is monotone, so the bounds stay ordered
            frame = np.exp(frame)

        return frame


@dataclass(frozen=True)
class OrderSearchSpace:
    """Hyperparameter ranges for the automatic order search.

    The differencing orders default to a single value so every candidate is
    fit on the same differenced data and their AICs are comparable.
    """

    p_range: tuple[int, ...] = (0, 1, 2)
    d_range: tuple[int, ...] = (1,)
    q_range: tuple[int, ...] = (0, 1, 2)
    p_seasonal_range: tuple[int, ...] = (0, 1)
    d_seasonal_range: tuple[int, ...] = (1,)
    q_seasonal_range: tuple[int, ...] = (0, 1)
    seasonal_period: int = SEASONAL_PERIOD

    def candidates(self) -> list[tuple[Order, SeasonalOrder]]:
        """All (order, seasonal_order) combinations in the space."""
        combos = []
        for p, d, q in product(self.p_range, self.d_range, self.q_range):
            for p_seas, d_seas, q_seas in product(
                self.p_seasonal_range, self.d_seasonal_range, self.q_seasonal_range
            ):
                combos.append(((p, d, q), (p_seas, d_seas, q_seas, self.seasonal_period)))
        return combos


@dataclass(frozen=True)
class OrderSearchResult:
    """Outcome of the automatic order search.

    Attributes:
        order: Suggested non-seasonal order.
        seasonal_order: Suggested seasonal order.
        aic: AIC of the suggested model.
        candidates: One row per candidate with columns 'order', 'seasonal_order',
            'aic', 'bic', 'converged', sorted by AIC.
        failed: Number of candidates that failed or did not converge.
    """

    order: Order
    seasonal_order: SeasonalOrder
    aic: float
    candidates: pd.DataFrame = field(repr=False, compare=False)
    failed: int = 0

    @property
    def label(self) -> str:
        return format_orders(self.order, self.seasonal_order)


def search_orders(
    series: TaggedSeries,
    space: OrderSearchSpace | None = None,
    maxiter: int = 200,
) -> OrderSearchResult:
    """Grid search over SARIMA orders, selecting the lowest AIC.

    Only candidates that converge are eligible. The suggestion is meant to be
    compared against the hand-picked orders, not substituted for them.

    Args:
        series: Undifferenced series on the scale the models will be fit on.
        space: Order ranges to search (default: OrderSearchSpace()).
        maxiter: Maximum optimizer iterations per candidate.

    Returns:
        OrderSearchResult with the best orders and the full candidate table.

    Raises:
        ModelFitError: If no candidate converges.

    """
    space = space or OrderSearchSpace()
    rows = []
    failed = 0

    for order, seasonal_order in space.candidates():
        try:
            fitted = SARIMAModel(order, seasonal_order, maxiter=maxiter).train(series)
        except ModelFitError as e:
            # Many combinations fail to converge; that's expected
            logger.debug(str(e))
            failed += 1
            rows.append(
                {
                    "order": order,
                    "seasonal_order": seasonal_order,
                    "aic": np.nan,
                    "bic": np.nan,
                    "converged": False,
                }
            )
            continue
        rows.append(
            {
                "order": order,
                "seasonal_order": seasonal_order,
                "aic": fitted.aic,
                "bic": fitted.bic,
                "converged": True,
            }
        )

    table = pd.DataFrame(rows).sort_values("aic", na_position="last").reset_index(drop=True)
    converged = table[table["converged"]]
    if converged.empty:
        raise ModelFitError("No candidate converged during order search")

    best = converged.iloc[0]
    result = OrderSearchResult(
        order=tuple(best["order"]),
        seasonal_order=tuple(best["seasonal_order"]),
        aic=float(best["aic"]),
        candidates=table,
        failed=failed,
    )
    logger.info(
        f"Order search over {len(table)} candidates suggests {result.label} "
        f"(AIC={result.aic:.2f}, {failed} failed)"
    )
    return result
