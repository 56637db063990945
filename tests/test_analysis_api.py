"""Tests for the in-memory analysis API."""

from types import SimpleNamespace

import pandas as pd
import pytest

from autoprod.exceptions import ConfigError, ModelFitError, TransformError
from autoprod.forecasting import (
    AnalysisConfig,
    AnalysisReport,
    run_sensitivity_analysis,
    run_vintage_analysis,
)
from autoprod.forecasting.api import _sensitivity_verdict
from autoprod.forecasting.models.sarima import SARIMAModel
from autoprod.forecasting.types import Scale


def test_imports_work() -> None:
    assert AnalysisConfig is not None
    assert callable(run_vintage_analysis)
    assert callable(run_sensitivity_analysis)


def test_config_validation() -> None:
    AnalysisConfig().validate()
    with pytest.raises(ConfigError):
        AnalysisConfig(horizon=0).validate()
    with pytest.raises(ConfigError):
        AnalysisConfig(alpha=1.5).validate()
    with pytest.raises(ConfigError):
        AnalysisConfig(order=(0, 1)).validate()
    with pytest.raises(ConfigError):
        AnalysisConfig(outlier_dates=["not a date"]).validate()


def test_non_seasonal_period_rejected(production_series) -> None:
    config = AnalysisConfig(
        order=(1, 1, 1), seasonal_order=(0, 0, 0, 0), run_order_search=False, outlier_dates=[]
    )

    with pytest.raises(ConfigError, match="Seasonal period must be at least 2"):
        config.validate()
    with pytest.raises(ConfigError, match="Seasonal period"):
        run_vintage_analysis(production_series, config)


def test_original_vintage(production_report: AnalysisReport) -> None:
    original = production_report.original

    assert original.label == "original"
    assert original.model_input.scale is Scale.LOG
    assert len(original.stationary) == len(original.observed) - 13
    assert len(original.correlogram) == 36
    assert original.fixed.source == "fixed"
    assert original.fixed.succeeded
    assert original.fixed.diagnostics is not None
    assert not original.used_fallback
    assert original.search is not None

    expected = pd.date_range("2022-10-01", periods=12, freq="MS")
    assert list(original.forecast.index) == list(expected)


def test_original_forecast_compared_over_overlap(production_report: AnalysisReport) -> None:
    comparison = production_report.original_comparison

    assert comparison.window == (pd.Timestamp("2022-10-01"), pd.Timestamp("2023-05-01"))
    assert comparison.defined_count == 8
    assert comparison.skipped_dates == []


def test_sensitivity_uses_same_orders(production_report: AnalysisReport) -> None:
    sensitivity = production_report.sensitivity
    assert sensitivity is not None

    assert sensitivity.baseline is production_report.original
    assert sensitivity.smoothed_dates == [pd.Timestamp("2020-04-01"), pd.Timestamp("2020-05-01")]
    assert sensitivity.smoothed.fixed.order == sensitivity.baseline.fixed.order
    assert sensitivity.smoothed.fixed.seasonal_order == sensitivity.baseline.fixed.seasonal_order
    assert sensitivity.smoothed.search is not None
    assert sensitivity.verdict in {
        "orders_adequate",
        "alternative_orders_preferred",
        "inconclusive",
    }

    raw = sensitivity.baseline.observed.values
    smoothed = sensitivity.smoothed.observed.values
    march, june = raw.loc["2020-03-01"], raw.loc["2020-06-01"]
    assert smoothed.loc["2020-04-01"] == pytest.approx(march + (june - march) / 3)
    assert smoothed.loc["2020-05-01"] == pytest.approx(march + 2 * (june - march) / 3)
    assert production_report.smoothed_comparison is not None


def test_updated_vintage_projects_past_its_end(production_report: AnalysisReport) -> None:
    updated = production_report.updated

    assert updated.forecast.index[0] == pd.Timestamp("2023-06-01")
    assert len(updated.forecast) == 12
    assert production_report.metadata["updated_months"] == 365
    assert production_report.metadata["original_months"] == 357


def test_fallback_to_search_suggestion(production_series, small_config, monkeypatch) -> None:
    original_train = SARIMAModel.train

    def train_fixed_fails(self, series, **kwargs):
        if self.order == (0, 1, 2):
            raise ModelFitError("did not converge", self.order, self.seasonal_order)
        return original_train(self, series, **kwargs)

    monkeypatch.setattr(SARIMAModel, "train", train_fixed_fails)
    config = AnalysisConfig(run_order_search=False, search_space=small_config.search_space)

    result = run_vintage_analysis(production_series, config)

    assert len(result.attempts) == 2
    assert not result.fixed.succeeded
    assert "did not converge" in result.fixed.error
    assert result.used_fallback
    assert result.chosen.source == "search"
    assert result.chosen.order == result.search.order
    assert len(result.forecast) == 12


def test_fallback_failure_raises(production_series, small_config, monkeypatch) -> None:
    def always_fails(self, series, **kwargs):
        raise ModelFitError("did not converge", self.order, self.seasonal_order)

    monkeypatch.setattr(SARIMAModel, "train", always_fails)
    with pytest.raises(ModelFitError):
        run_vintage_analysis(production_series, small_config)


def test_raw_scale_configuration(production_series) -> None:
    config = AnalysisConfig(
        order=(0, 1, 1), log_transform=False, run_order_search=False, outlier_dates=[]
    )
    result = run_vintage_analysis(production_series, config, label="raw")

    assert result.model_input.scale is Scale.RAW
    assert result.chosen.fitted.scale is Scale.RAW
    assert result.search is None


def test_sensitivity_rejects_boundary_outlier(production_series) -> None:
    config = AnalysisConfig(outlier_dates=["2022-09-01"], run_order_search=False)
    with pytest.raises(TransformError, match="boundary"):
        run_sensitivity_analysis(production_series, config)


def _vintage(fixed_aic, search_aic=None):
    """Stand-in for a VintageResult carrying only the AICs the verdict reads."""
    fitted = None if fixed_aic is None else SimpleNamespace(aic=fixed_aic)
    search = None if search_aic is None else SimpleNamespace(aic=search_aic)
    return SimpleNamespace(fixed=SimpleNamespace(fitted=fitted), search=search)


def test_verdict_search_beats_fixed_orders() -> None:
    verdict = _sensitivity_verdict(_vintage(-500.0), _vintage(-550.0, search_aic=-553.0))
    assert verdict == "alternative_orders_preferred"


def test_verdict_search_within_tolerance_is_not_preferred() -> None:
    verdict = _sensitivity_verdict(_vintage(-500.0), _vintage(-550.0, search_aic=-551.5))
    assert verdict == "orders_adequate"


def test_verdict_smoothing_improves_fit() -> None:
    verdict = _sensitivity_verdict(_vintage(-500.0), _vintage(-550.0, search_aic=-550.0))
    assert verdict == "orders_adequate"


def test_verdict_neither_improves() -> None:
    verdict = _sensitivity_verdict(_vintage(-500.0), _vintage(-490.0, search_aic=-491.0))
    assert verdict == "inconclusive"


def test_verdict_failed_fixed_fit_is_inconclusive() -> None:
    assert _sensitivity_verdict(_vintage(None), _vintage(-550.0)) == "inconclusive"
    assert _sensitivity_verdict(_vintage(-500.0), _vintage(None, -600.0)) == "inconclusive"
