"""Diagnostic figures for the production report.

Figures are built with the matplotlib object API (no pyplot state) and saved
to disk; every function returns the path it wrote.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import pandas as pd
from matplotlib.figure import Figure
from statsmodels.graphics.tsaplots import plot_acf, plot_pacf

from autoprod.forecasting.config import DEFAULT_ACF_LAGS
from autoprod.forecasting.types import TaggedSeries

logger = logging.getLogger(__name__)


def _save(fig: Figure, path: Path) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    fig.tight_layout()
    fig.savefig(path, dpi=120)
    logger.debug(f"Saved figure {path}")
    return path


def plot_series(ts: TaggedSeries, path: Path, title: Optional[str] = None) -> Path:
    """Line plot of a series over time."""
    fig = Figure(figsize=(12, 5))
    ax = fig.add_subplot(1, 1, 1)
    ax.plot(ts.values.index, ts.values.to_numpy(), color="tab:blue")
    ax.set_title(title or f"Production ({ts.label})")
    ax.set_xlabel("Month")
    ax.grid(True, alpha=0.3)
    return _save(fig, path)


def plot_correlogram(ts: TaggedSeries, path: Path, lags: int = DEFAULT_ACF_LAGS) -> Path:
    """ACF and PACF panels with confidence bands."""
    fig = Figure(figsize=(12, 8))
    ax_acf = fig.add_subplot(2, 1, 1)
    ax_pacf = fig.add_subplot(2, 1, 2)
    values = ts.values.dropna()
    plot_acf(values, ax=ax_acf, lags=lags, title=f"ACF ({ts.label})")
    plot_pacf(values, ax=ax_pacf, lags=lags, method="ywm", title=f"PACF ({ts.label})")
    return _save(fig, path)


def plot_seasonal(ts: TaggedSeries, path: Path) -> Path:
    """One line per year across the twelve calendar months."""
    values = ts.values
    by_year = pd.DataFrame(
        {"year": values.index.year, "month": values.index.month, "value": values.to_numpy()}
    ).pivot(index="month", columns="year", values="value")

    fig = Figure(figsize=(12, 6))
    ax = fig.add_subplot(1, 1, 1)
    for year in by_year.columns:
        ax.plot(by_year.index, by_year[year], alpha=0.6, label=str(year))
    ax.set_xticks(range(1, 13))
    ax.set_xlabel("Month")
    ax.set_title(f"Seasonal plot ({ts.label})")
    if len(by_year.columns) <= 12:
        ax.legend(ncol=2, fontsize="small")
    return _save(fig, path)


def plot_forecast_vs_actual(
    history: pd.Series,
    forecast: pd.DataFrame,
    path: Path,
    actual: Optional[pd.Series] = None,
    history_months: int = 60,
) -> Path:
    """Recent history, forecast with interval band, and realized values if known."""
    fig = Figure(figsize=(12, 6))
    ax = fig.add_subplot(1, 1, 1)
    recent = history.iloc[-history_months:]
    ax.plot(recent.index, recent.to_numpy(), color="tab:blue", label="History")
    ax.plot(
        forecast.index, forecast["forecast"], color="tab:red", linestyle="--", label="Forecast"
    )
    ax.fill_between(
        forecast.index, forecast["lower"], forecast["upper"], color="tab:red", alpha=0.2
    )
    if actual is not None:
        realized = actual.loc[actual.index.intersection(forecast.index)]
        ax.plot(realized.index, realized.to_numpy(), color="tab:green", marker="o", label="Actual")
    ax.set_title("Forecast vs actual")
    ax.legend()
    ax.grid(True, alpha=0.3)
    return _save(fig, path)
