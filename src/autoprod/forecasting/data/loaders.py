"""Data loading utilities for the production analysis.

Reads the dated production CSVs into monthly series and validates them before
any modeling step runs.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from autoprod.exceptions import DataQualityError
from autoprod.forecasting.config import DATE_COLUMN, MONTHLY_FREQ

logger = logging.getLogger(__name__)

DateLike = Union[str, pd.Timestamp, None]


def _resolve_value_column(df: pd.DataFrame, date_column: str, value_column: Optional[str]) -> str:
    """Pick the value column, inferring it when the CSV has exactly one besides the date."""
    if value_column is not None:
        if value_column not in df.columns:
            raise DataQualityError(
                f"Missing required column '{value_column}'. Available: {list(df.columns)}"
            )
        return value_column

    candidates = [col for col in df.columns if col != date_column]
    if len(candidates) != 1:
        raise DataQualityError(
            f"Cannot infer value column from {candidates}; pass value_column explicitly"
        )
    return candidates[0]


def load_production_csv(
    csv_path: Union[str, Path],
    date_column: str = DATE_COLUMN,
    value_column: Optional[str] = None,
    start: DateLike = None,
    end: DateLike = None,
    allow_missing: bool = False,
) -> pd.Series:
    """Load a monthly production series from a two-column dated CSV.

    Args:
        csv_path: Path to the CSV file.
        date_column: Name of the date column (default: "observation_date").
        value_column: Name of the value column. If None, the only non-date
            column is used.
        start: Optional first month to keep (inclusive).
        end: Optional last month to keep (inclusive).
        allow_missing: If True, missing values are kept as NaN for a later
            interpolation step instead of halting the load.

    Returns:
        Series indexed by month-start dates with ``freq="MS"``, named after the
        value column.

    Raises:
        FileNotFoundError: If the CSV file does not exist.
        DataQualityError: If columns are missing, dates fail to parse, repeat or
            leave gaps, values are negative, or missing values are found while
            ``allow_missing`` is False.

    """
    csv_path = Path(csv_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"Production data not found at {csv_path}")

    df = pd.read_csv(csv_path)
    if date_column not in df.columns:
        raise DataQualityError(
            f"Missing required column '{date_column}' in {csv_path.name}. "
            f"Available: {list(df.columns)}"
        )
    value_column = _resolve_value_column(df, date_column, value_column)

    dates = pd.to_datetime(df[date_column], errors="coerce")
    bad_dates = int(dates.isna().sum())
    if bad_dates > 0:
        raise DataQualityError(f"{bad_dates} dates failed to parse in {csv_path.name}")

    # Non-numeric entries (e.g. "." in FRED exports) count as missing
    values = pd.to_numeric(df[value_column], errors="coerce").astype(float)
    months = dates.dt.to_period("M").dt.to_timestamp()
    series = pd.Series(
        values.to_numpy(), index=pd.DatetimeIndex(months, name="date"), name=value_column
    )
    series = series.sort_index()

    duplicates = series.index[series.index.duplicated()]
    if len(duplicates) > 0:
        raise DataQualityError(
            f"Duplicate months in {csv_path.name}: {[d.strftime('%Y-%m') for d in duplicates]}"
        )

    if start is not None or end is not None:
        series = series.loc[start:end]
    if series.empty:
        raise DataQualityError(f"No observations in {csv_path.name} between {start} and {end}")

    full_range = pd.date_range(series.index[0], series.index[-1], freq=MONTHLY_FREQ)
    if len(full_range) != len(series):
        gaps = full_range.difference(series.index)
        raise DataQualityError(
            f"{len(gaps)} missing months in {csv_path.name}, first: {gaps[0].strftime('%Y-%m')}"
        )
    series = series.asfreq(MONTHLY_FREQ)

    negative_count = int((series < 0).sum())
    if negative_count > 0:
        raise DataQualityError(f"{negative_count} negative values in {csv_path.name}")

    missing_count = int(series.isna().sum())
    if missing_count > 0:
        logger.warning(f"{csv_path.name}: {missing_count} missing values")
        if not allow_missing:
            raise DataQualityError(
                f"{missing_count} missing values in {csv_path.name}; "
                f"pass allow_missing=True to interpolate them downstream"
            )

    logger.info(
        f"Loaded {len(series)} months from {csv_path.name} "
        f"({series.index[0]:%Y-%m} to {series.index[-1]:%Y-%m})"
    )
    return series


def load_vintages(
    original_path: Union[str, Path],
    updated_path: Union[str, Path],
    date_column: str = DATE_COLUMN,
    value_column: Optional[str] = None,
    start: DateLike = None,
    original_end: DateLike = None,
) -> tuple[pd.Series, pd.Series]:
    """Load the original and updated data vintages.

    Args:
        original_path: CSV of the earlier vintage.
        updated_path: CSV of the later vintage.
        date_column: Name of the date column.
        value_column: Name of the value column, inferred if None.
        start: Optional first month for both vintages.
        original_end: Optional last month for the original vintage.

    Returns:
        Tuple of (original, updated) series.

    Raises:
        DataQualityError: If either file fails validation, or the updated vintage
            does not extend past the original.

    """
    original = load_production_csv(
        original_path, date_column, value_column, start=start, end=original_end
    )
    updated = load_production_csv(updated_path, date_column, value_column, start=start)

    if updated.index[-1] <= original.index[-1]:
        raise DataQualityError(
            f"Updated vintage ends {updated.index[-1]:%Y-%m}, "
            f"not after the original vintage ({original.index[-1]:%Y-%m})"
        )
    if not original.index.isin(updated.index).all():
        raise DataQualityError("Updated vintage does not cover every month of the original")

    return original, updated
