"""Descriptive diagnostics for order selection and residual checking.

Correlograms and the stationarity test are computed for a human choosing model
orders; nothing here selects orders automatically. Residual diagnostics check a
fitted model for independence (Ljung-Box) and normality (Jarque-Bera).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
import pandas as pd
from statsmodels.stats.diagnostic import acorr_ljungbox
from statsmodels.stats.stattools import jarque_bera
from statsmodels.tsa.stattools import acf, adfuller, pacf

from autoprod.exceptions import DataQualityError
from autoprod.forecasting.config import DEFAULT_ACF_LAGS, DEFAULT_ALPHA, DEFAULT_RESIDUAL_LAGS
from autoprod.forecasting.types import TaggedSeries

if TYPE_CHECKING:
    from autoprod.forecasting.models.sarima import FittedModel

logger = logging.getLogger(__name__)


def compute_correlogram(ts: TaggedSeries, nlags: int = DEFAULT_ACF_LAGS) -> pd.DataFrame:
    """Compute the autocorrelation and partial autocorrelation at lags 1..nlags.

    Args:
        ts: Series to describe, typically log and differenced.
        nlags: Highest lag (default: 36, three seasonal cycles).

    Returns:
        DataFrame indexed by lag (1..nlags) with columns 'acf' and 'pacf'.

    Raises:
        DataQualityError: If nlags is not positive or the series is too short
            for the partial autocorrelation at that many lags.

    """
    values = ts.values.dropna()
    if nlags < 1:
        raise DataQualityError(f"nlags must be positive, got {nlags}")
    if nlags >= len(values) // 2:
        raise DataQualityError(
            f"Series of {len(values)} observations is too short for {nlags} PACF lags"
        )

    acf_values = acf(values, nlags=nlags, fft=True)
    pacf_values = pacf(values, nlags=nlags, method="ywm")

    lags = pd.RangeIndex(1, nlags + 1, name="lag")
    return pd.DataFrame({"acf": acf_values[1:], "pacf": pacf_values[1:]}, index=lags)


@dataclass(frozen=True)
class StationarityResult:
    """Augmented Dickey-Fuller test outcome."""

    statistic: float
    pvalue: float
    used_lag: int
    nobs: int
    critical_values: dict[str, float]
    alpha: float = DEFAULT_ALPHA

    @property
    def is_stationary(self) -> bool:
        """True when the unit-root null is rejected at ``alpha``."""
        return self.pvalue < self.alpha


def adf_stationarity(ts: TaggedSeries, alpha: float = DEFAULT_ALPHA) -> StationarityResult:
    """Run the augmented Dickey-Fuller test on a series.

    Args:
        ts: Series to test.
        alpha: Significance level for ``is_stationary``.

    Returns:
        StationarityResult with the test statistic and p-value.

    """
    adf = adfuller(ts.values.dropna(), autolag="AIC")
    result = StationarityResult(
        statistic=float(adf[0]),
        pvalue=float(adf[1]),
        used_lag=int(adf[2]),
        nobs=int(adf[3]),
        critical_values={key: float(val) for key, val in adf[4].items()},
        alpha=alpha,
    )
    logger.debug(f"ADF on {ts.label}: stat={result.statistic:.3f}, p={result.pvalue:.4f}")
    return result


@dataclass(frozen=True)
class ResidualDiagnostics:
    """Residual checks for a fitted SARIMA model.

    Attributes:
        ljung_box: DataFrame indexed by lag with 'lb_stat' and 'lb_pvalue'.
        jarque_bera: Jarque-Bera normality statistic.
        jarque_bera_pvalue: P-value of the Jarque-Bera test.
        skew: Residual skewness.
        kurtosis: Residual kurtosis (normal = 3).
        residual_acf: Residual autocorrelation indexed by lag (1..lags).
        alpha: Significance level used by the pass/fail properties.
    """

    ljung_box: pd.DataFrame
    jarque_bera: float
    jarque_bera_pvalue: float
    skew: float
    kurtosis: float
    residual_acf: pd.Series
    alpha: float = DEFAULT_ALPHA

    @property
    def ljung_box_pvalue(self) -> float:
        """Ljung-Box p-value at the highest tested lag."""
        return float(self.ljung_box["lb_pvalue"].iloc[-1])

    @property
    def residuals_independent(self) -> bool:
        """True when Ljung-Box does not reject independence at the highest lag."""
        return self.ljung_box_pvalue > self.alpha

    @property
    def residuals_normal(self) -> bool:
        """True when Jarque-Bera does not reject normality."""
        return self.jarque_bera_pvalue > self.alpha


def residual_diagnostics(
    fitted: FittedModel,
    lags: int = DEFAULT_RESIDUAL_LAGS,
    alpha: float = DEFAULT_ALPHA,
) -> ResidualDiagnostics:
    """Test the residuals of a fitted model for independence and normality.

    Residuals inside the likelihood burn-in (the first ``d + D*s`` observations
    consumed by differencing) are excluded.

    Args:
        fitted: FittedModel from SARIMAModel.train().
        lags: Highest lag for the Ljung-Box test and residual ACF.
        alpha: Significance level for the pass/fail properties.

    Returns:
        ResidualDiagnostics for the model.

    Raises:
        DataQualityError: If too few residuals remain after the burn-in.

    """
    burn = int(getattr(fitted.results, "loglikelihood_burn", 0))
    resid = pd.Series(np.asarray(fitted.results.resid)).iloc[burn:].dropna()
    if len(resid) <= lags + 1:
        raise DataQualityError(f"Only {len(resid)} residuals available for {lags} lags")

    p, _, q = fitted.order
    seasonal_p, _, seasonal_q, _ = fitted.seasonal_order
    model_df = min(p + q + seasonal_p + seasonal_q, lags - 1)

    ljung_box = acorr_ljungbox(resid, lags=lags, model_df=model_df, return_df=True)
    ljung_box.index.name = "lag"
    jb_stat, jb_pvalue, skew, kurtosis = jarque_bera(resid)
    resid_acf = acf(resid, nlags=lags, fft=True)[1:]

    return ResidualDiagnostics(
        ljung_box=ljung_box,
        jarque_bera=float(jb_stat),
        jarque_bera_pvalue=float(jb_pvalue),
        skew=float(skew),
        kurtosis=float(kurtosis),
        residual_acf=pd.Series(resid_acf, index=pd.RangeIndex(1, lags + 1, name="lag")),
        alpha=alpha,
    )
