"""Tests for correlograms, stationarity and residual diagnostics."""

import numpy as np
import pandas as pd
import pytest

from autoprod.exceptions import DataQualityError
from autoprod.forecasting.data.preparation import log_transform, stationary_transform, tag_raw
from autoprod.forecasting.diagnostics import (
    adf_stationarity,
    compute_correlogram,
    residual_diagnostics,
)
from autoprod.forecasting.models.sarima import SARIMAModel


def test_correlogram_lags(production_series) -> None:
    correlogram = compute_correlogram(stationary_transform(tag_raw(production_series)), nlags=36)

    assert list(correlogram.columns) == ["acf", "pacf"]
    assert list(correlogram.index) == list(range(1, 37))
    assert correlogram.index.name == "lag"
    assert correlogram["acf"].abs().max() <= 1.0
    # Simulated seasonal MA leaves a negative spike at the seasonal lag
    assert correlogram.loc[12, "acf"] < 0


def test_correlogram_too_short() -> None:
    series = pd.Series(
        np.linspace(1.0, 2.0, 30), index=pd.date_range("2020-01-01", periods=30, freq="MS")
    )
    with pytest.raises(DataQualityError, match="too short"):
        compute_correlogram(tag_raw(series), nlags=24)
    with pytest.raises(DataQualityError):
        compute_correlogram(tag_raw(series), nlags=0)


def test_stationarity_of_differenced_series(production_series) -> None:
    result = adf_stationarity(stationary_transform(tag_raw(production_series)))

    assert 0.0 <= result.pvalue <= 1.0
    assert result.is_stationary
    assert {"1%", "5%", "10%"}.issubset(result.critical_values)


def test_residual_diagnostics(production_series) -> None:
    fitted = SARIMAModel().train(log_transform(tag_raw(production_series)))

    diagnostics = residual_diagnostics(fitted, lags=24)

    assert len(diagnostics.ljung_box) == 24
    assert {"lb_stat", "lb_pvalue"}.issubset(diagnostics.ljung_box.columns)
    assert list(diagnostics.residual_acf.index) == list(range(1, 25))
    assert 0.0 <= diagnostics.jarque_bera_pvalue <= 1.0
    assert isinstance(diagnostics.residuals_independent, bool)
    assert isinstance(diagnostics.residuals_normal, bool)
