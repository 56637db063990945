"""Series transformations for the production analysis.

This module provides the pure transforms applied before diagnostics and model
fitting (log variance stabilization, first and seasonal differencing) and the
outlier smoother used by the sensitivity analysis. Every function takes a
TaggedSeries and returns a new one; inputs are never mutated.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np
import pandas as pd

from autoprod.exceptions import TransformError
from autoprod.forecasting.config import SEASONAL_PERIOD
from autoprod.forecasting.types import Scale, TaggedSeries

logger = logging.getLogger(__name__)


def tag_raw(series: pd.Series) -> TaggedSeries:
    """Wrap an observation series as raw and undifferenced."""
    return TaggedSeries(values=series.astype(float).copy(), scale=Scale.RAW)


def log_transform(ts: TaggedSeries) -> TaggedSeries:
    """Apply the natural log to a raw, undifferenced series.

    Args:
        ts: Raw series with strictly positive values.

    Returns:
        TaggedSeries on the log scale.

    Raises:
        TransformError: If the series is already on the log scale, has been
            differenced, or contains values <= 0.

    """
    if ts.scale is not Scale.RAW:
        raise TransformError(f"Series is already on the {ts.scale.value} scale")
    if ts.is_differenced:
        raise TransformError("Log transform must be applied before differencing")

    non_positive = ts.values[ts.values <= 0]
    if len(non_positive) > 0:
        first = non_positive.index[0]
        raise TransformError(
            f"Log transform needs positive values; found {len(non_positive)} <= 0 "
            f"(first at {first:%Y-%m})"
        )

    return TaggedSeries(values=np.log(ts.values), scale=Scale.LOG)


def exp_transform(ts: TaggedSeries) -> TaggedSeries:
    """Invert log_transform on an undifferenced log-scale series.

    Raises:
        TransformError: If the series is not on the log scale or has been differenced.

    """
    if ts.scale is not Scale.LOG:
        raise TransformError(f"Series is on the {ts.scale.value} scale, not log")
    if ts.is_differenced:
        raise TransformError("Cannot exponentiate a differenced series")

    return TaggedSeries(values=np.exp(ts.values), scale=Scale.RAW)


def difference(ts: TaggedSeries, lag: int = 1) -> TaggedSeries:
    """Difference a series at the given lag: ``d[t] = y[t] - y[t-lag]``.

    Args:
        ts: Series to difference.
        lag: Lag to subtract (1 for trend, 12 for monthly seasonality).

    Returns:
        TaggedSeries of length ``len(ts) - lag``, keeping the dates of the
        surviving observations.

    Raises:
        TransformError: If lag is not positive or the series is too short.

    """
    if lag < 1:
        raise TransformError(f"Differencing lag must be positive, got {lag}")
    if len(ts) <= lag:
        raise TransformError(f"Cannot difference {len(ts)} observations at lag {lag}")

    differenced = ts.values.diff(lag).iloc[lag:]
    return TaggedSeries(values=differenced, scale=ts.scale, diff_lags=ts.diff_lags + (lag,))


def seasonal_difference(ts: TaggedSeries, period: int = SEASONAL_PERIOD) -> TaggedSeries:
    """Difference a series at its seasonal period (default 12 months)."""
    return difference(ts, lag=period)


def stationary_transform(
    ts: TaggedSeries,
    log: bool = True,
    period: int = SEASONAL_PERIOD,
) -> TaggedSeries:
    """Compose the transforms in their required order: log, seasonal diff, first diff.

    Args:
        ts: Raw, undifferenced series.
        log: Whether to log-transform first.
        period: Seasonal period for the seasonal difference.

    Returns:
        TaggedSeries of length ``len(ts) - period - 1``.

    """
    if log:
        ts = log_transform(ts)
    return difference(seasonal_difference(ts, period=period), lag=1)


def positions_for_dates(ts: TaggedSeries, dates: Iterable[str | pd.Timestamp]) -> list[int]:
    """Map dates to integer positions in a series.

    Raises:
        TransformError: If a date is not in the series index.

    """
    positions = []
    for value in dates:
        stamp = pd.Timestamp(value)
        if stamp not in ts.values.index:
            raise TransformError(f"Date {stamp:%Y-%m} is not in the series")
        positions.append(int(ts.values.index.get_loc(stamp)))
    return positions


def smooth_outliers(ts: TaggedSeries, positions: Iterable[int]) -> TaggedSeries:
    """Replace flagged positions with values linearly interpolated from neighbours.

    Adjacent flagged positions are interpolated together between the nearest
    unflagged values on each side. Only the flagged positions change; a missing
    value elsewhere in the series is left as it is.

    Args:
        ts: Undifferenced series on any scale.
        positions: Integer positions to treat as missing. Must be interior points.

    Returns:
        New TaggedSeries with the same scale and index.

    Raises:
        TransformError: If the series is differenced, or any position is at the
            boundary or out of range, or if an unflagged neighbour of a flagged
            run is missing. Checked before any value is changed.

    """
    if ts.is_differenced:
        raise TransformError("Outlier smoothing applies to undifferenced series")

    flagged = sorted(set(positions))
    n = len(ts)
    if not flagged:
        return TaggedSeries(values=ts.values.copy(), scale=ts.scale)

    out_of_range = [p for p in flagged if p < 0 or p >= n]
    if out_of_range:
        raise TransformError(f"Positions {out_of_range} are outside a series of length {n}")
    boundary = [p for p in flagged if p in (0, n - 1)]
    if boundary:
        raise TransformError(
            f"Positions {boundary} are at the series boundary; only interior points can be "
            f"interpolated"
        )

    flagged_set = set(flagged)
    missing_neighbours = []
    for pos in flagged:
        left = max(p for p in range(pos) if p not in flagged_set)
        right = min(p for p in range(pos + 1, n) if p not in flagged_set)
        for neighbour in (left, right):
            if pd.isna(ts.values.iloc[neighbour]):
                missing_neighbours.append(neighbour)
    if missing_neighbours:
        raise TransformError(
            f"Could not interpolate positions {flagged}; neighbouring positions "
            f"{sorted(set(missing_neighbours))} are missing"
        )

    masked = ts.values.copy()
    masked.iloc[flagged] = np.nan
    # Positional interpolation so the result does not depend on month lengths
    positional = masked.reset_index(drop=True).interpolate(method="linear", limit_area="inside")
    smoothed = ts.values.copy()
    smoothed.iloc[flagged] = positional.iloc[flagged].to_numpy()

    for pos in flagged:
        logger.info(
            f"Smoothed {ts.values.index[pos]:%Y-%m}: {ts.values.iloc[pos]:.4f} -> "
            f"{smoothed.iloc[pos]:.4f}"
        )

    return TaggedSeries(values=smoothed, scale=ts.scale)
