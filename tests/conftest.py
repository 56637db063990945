"""Shared fixtures: synthetic monthly production series and CSV vintages."""

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from autoprod.forecasting import AnalysisConfig, run_production_analysis
from autoprod.forecasting.models.sarima import OrderSearchSpace

SMALL_SEARCH = OrderSearchSpace(
    p_range=(0, 1),
    q_range=(1,),
    p_seasonal_range=(0,),
    q_seasonal_range=(1,),
)


def make_production_series(
    start: str = "1993-01-01",
    periods: int = 357,
    seed: int = 7,
    level: float = 200.0,
) -> pd.Series:
    """Simulate a positive monthly series whose log follows SARIMA(0,1,1)(0,1,1)12."""
    rng = np.random.default_rng(seed)
    e = rng.normal(0.0, 0.03, periods + 13)
    w = e[13:] - 0.4 * e[12:-1] - 0.6 * e[1:-12] + 0.24 * e[:-13]

    z = np.empty(periods)
    t = np.arange(13)
    z[:13] = np.log(level) + 0.002 * t + 0.15 * np.sin(2 * np.pi * t / 12)
    for i in range(13, periods):
        z[i] = z[i - 1] + z[i - 12] - z[i - 13] + w[i]

    index = pd.date_range(start, periods=periods, freq="MS")
    return pd.Series(np.exp(z), index=index, name="production")


def write_csv(path: Path, series: pd.Series, date_column: str = "observation_date") -> Path:
    """Write a series as a two-column dated CSV."""
    df = pd.DataFrame({date_column: series.index.strftime("%Y-%m-%d"), series.name: series.values})
    df.to_csv(path, index=False)
    return path


@pytest.fixture
def production_series() -> pd.Series:
    """357 months, Jan 1993 to Sep 2022."""
    return make_production_series()


@pytest.fixture(scope="session")
def vintages() -> tuple[pd.Series, pd.Series]:
    """Original vintage to Sep 2022 and updated vintage to May 2023, with COVID dips."""
    updated = make_production_series(periods=365)
    updated.loc["2020-04-01"] *= 0.3
    updated.loc["2020-05-01"] *= 0.5
    original = updated.loc[:"2022-09-01"].copy()
    return original, updated


@pytest.fixture(scope="session")
def small_config() -> AnalysisConfig:
    """Default orders with a two-candidate order search."""
    return AnalysisConfig(search_space=SMALL_SEARCH)


@pytest.fixture(scope="session")
def production_report(vintages, small_config):
    """Full analysis over both vintages, shared by the slower tests."""
    original, updated = vintages
    return run_production_analysis(original, updated, small_config)
