"""Tests for series transforms and outlier smoothing."""

import numpy as np
import pandas as pd
import pytest

from autoprod.exceptions import TransformError
from autoprod.forecasting.data.preparation import (
    difference,
    exp_transform,
    log_transform,
    positions_for_dates,
    seasonal_difference,
    smooth_outliers,
    stationary_transform,
    tag_raw,
)
from autoprod.forecasting.types import Scale


def _monthly(values, start="2020-01-01") -> pd.Series:
    return pd.Series(
        [float(v) for v in values], index=pd.date_range(start, periods=len(values), freq="MS")
    )


def test_log_then_differences_drop_thirteen_points(production_series) -> None:
    """Seasonal then first differencing of the log series leaves n - 1 - 12 points."""
    ts = difference(seasonal_difference(log_transform(tag_raw(production_series))))

    assert len(ts) == len(production_series) - 1 - 12
    assert ts.scale is Scale.LOG
    assert ts.diff_lags == (12, 1)
    assert ts.values.index[0] == production_series.index[13]
    assert stationary_transform(tag_raw(production_series)).values.equals(ts.values)


def test_difference_values() -> None:
    ts = difference(tag_raw(_monthly([1, 4, 9, 16])))
    assert ts.values.tolist() == [3.0, 5.0, 7.0]
    assert ts.label == "raw, diff(1)"


def test_log_exp_round_trip(production_series) -> None:
    raw = tag_raw(production_series)
    back = exp_transform(log_transform(raw))

    assert back.scale is Scale.RAW
    np.testing.assert_allclose(back.values.to_numpy(), production_series.to_numpy(), rtol=1e-12)


def test_log_transform_rejects_non_positive() -> None:
    with pytest.raises(TransformError, match="positive"):
        log_transform(tag_raw(_monthly([5, 0, 3])))
    with pytest.raises(TransformError, match="positive"):
        log_transform(tag_raw(_monthly([5, -1, 3])))


def test_log_transform_enforces_order() -> None:
    """Log must come before differencing and cannot be applied twice."""
    raw = tag_raw(_monthly([5, 6, 7, 8]))
    with pytest.raises(TransformError, match="before differencing"):
        log_transform(difference(raw))
    with pytest.raises(TransformError, match="already"):
        log_transform(log_transform(raw))
    with pytest.raises(TransformError):
        exp_transform(raw)


def test_difference_too_short() -> None:
    with pytest.raises(TransformError):
        seasonal_difference(tag_raw(_monthly(range(1, 13))))


def test_smooth_interior_point_is_midpoint() -> None:
    series = _monthly([10, 50, 20, 30])
    smoothed = smooth_outliers(tag_raw(series), [1])

    assert smoothed.values.iloc[1] == pytest.approx(15.0)
    assert smoothed.values.iloc[[0, 2, 3]].tolist() == [10.0, 20.0, 30.0]
    assert series.iloc[1] == 50.0


def test_smooth_monotonic_neighbours_strictly_between() -> None:
    series = _monthly([100, 110, 5, 130, 140])
    value = smooth_outliers(tag_raw(series), [2]).values.iloc[2]

    assert 110.0 < value < 130.0
    assert value == pytest.approx(110.0 + (130.0 - 110.0) * 1 / 2)


def test_smooth_adjacent_points_interpolate_linearly() -> None:
    series = _monthly([100, 10, 10, 130])
    smoothed = smooth_outliers(tag_raw(series), [1, 2]).values

    assert smoothed.iloc[1] == pytest.approx(110.0)
    assert smoothed.iloc[2] == pytest.approx(120.0)


def test_smooth_boundary_fails_before_mutating() -> None:
    series = _monthly([10, 20, 30])
    ts = tag_raw(series)

    with pytest.raises(TransformError, match="boundary"):
        smooth_outliers(ts, [1, 2])
    with pytest.raises(TransformError, match="boundary"):
        smooth_outliers(ts, [0])
    with pytest.raises(TransformError, match="outside"):
        smooth_outliers(ts, [5])
    assert ts.values.tolist() == [10.0, 20.0, 30.0]


def test_smooth_rejects_differenced_series() -> None:
    with pytest.raises(TransformError):
        smooth_outliers(difference(tag_raw(_monthly([1, 2, 3, 4]))), [1])


def test_smooth_keeps_scale_and_index() -> None:
    ts = log_transform(tag_raw(_monthly([10, 1, 12, 13])))
    smoothed = smooth_outliers(ts, [1])

    assert smoothed.scale is Scale.LOG
    assert smoothed.values.index.equals(ts.values.index)


def test_positions_for_dates() -> None:
    ts = tag_raw(_monthly(range(1, 13), start="2020-01-01"))
    assert positions_for_dates(ts, ["2020-04-01", "2020-05-01"]) == [3, 4]
    with pytest.raises(TransformError, match="not in the series"):
        positions_for_dates(ts, ["2021-04-01"])


def test_smooth_changes_only_flagged_positions() -> None:
    series = _monthly([1, 2, np.nan, 4, 50, 6])
    smoothed = smooth_outliers(tag_raw(series), [4]).values

    assert smoothed.iloc[4] == pytest.approx(5.0)
    assert np.isnan(smoothed.iloc[2])
    assert smoothed.iloc[[0, 1, 3, 5]].tolist() == [1.0, 2.0, 4.0, 6.0]


def test_smooth_missing_neighbour_fails() -> None:
    ts = tag_raw(_monthly([1, np.nan, 50, 4, 5]))

    with pytest.raises(TransformError, match=r"neighbouring positions \[1\] are missing"):
        smooth_outliers(ts, [2])

    filled = smooth_outliers(ts, [1, 2]).values
    assert filled.tolist() == pytest.approx([1.0, 2.0, 3.0, 4.0, 5.0])
