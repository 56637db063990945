"""Forecast-versus-actual comparison.

Aligns a forecast with later-realized observations over their explicit date
overlap and computes the percent error per date.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Union

import numpy as np
import pandas as pd

from autoprod.exceptions import DataQualityError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ComparisonResult:
    """Per-date percent errors of a forecast against actual values.

    Attributes:
        table: DataFrame indexed by date with 'forecast', 'actual' and
            'percent_error' columns; percent_error is NaN where actual is zero
            or missing.
        defined_count: Number of dates with a defined percent error.
        skipped_dates: Dates skipped because the actual value was zero or missing.
    """

    table: pd.DataFrame
    defined_count: int
    skipped_dates: List[pd.Timestamp] = field(default_factory=list)

    @property
    def window(self) -> tuple[pd.Timestamp, pd.Timestamp]:
        """First and last date of the overlap."""
        return self.table.index[0], self.table.index[-1]

    @property
    def mean_absolute_percent_error(self) -> float:
        """Mean of |percent_error| over dates where it is defined."""
        defined = self.table["percent_error"].dropna()
        if defined.empty:
            return float("nan")
        return float(defined.abs().mean())


def percent_error(forecast: float, actual: float) -> float:
    """``(forecast - actual) / actual * 100``; NaN when actual is zero."""
    if actual == 0:
        return float("nan")
    return (forecast - actual) / actual * 100.0


def compare_forecast(
    forecast: Union[pd.DataFrame, pd.Series],
    actual: pd.Series,
) -> ComparisonResult:
    """Compare forecasts with realized values over the dates both cover.

    Args:
        forecast: Forecast frame with a 'forecast' column, or a Series of point
            forecasts, indexed by date on the raw scale.
        actual: Realized observations indexed by date.

    Returns:
        ComparisonResult over the intersection of the two date indexes.

    Raises:
        DataQualityError: If the forecast and actual series share no dates.

    """
    point = forecast["forecast"] if isinstance(forecast, pd.DataFrame) else forecast

    overlap = point.index.intersection(actual.index).sort_values()
    if len(overlap) == 0:
        raise DataQualityError(
            f"Forecast ({point.index[0]:%Y-%m} to {point.index[-1]:%Y-%m}) and actual "
            f"({actual.index[0]:%Y-%m} to {actual.index[-1]:%Y-%m}) do not overlap"
        )

    table = pd.DataFrame(
        {
            "forecast": point.loc[overlap].astype(float).to_numpy(),
            "actual": actual.loc[overlap].astype(float).to_numpy(),
        },
        index=pd.DatetimeIndex(overlap, name="date"),
    )

    skipped: List[pd.Timestamp] = []
    errors = []
    for date, row in table.iterrows():
        if pd.isna(row["actual"]):
            logger.warning(f"Actual value is missing on {date:%Y-%m}; percent error skipped")
            skipped.append(date)
            errors.append(np.nan)
            continue
        if row["actual"] == 0:
            logger.warning(f"Actual value is zero on {date:%Y-%m}; percent error skipped")
            skipped.append(date)
            errors.append(np.nan)
            continue
        errors.append(percent_error(row["forecast"], row["actual"]))
    table["percent_error"] = errors

    defined_count = int(table["percent_error"].notna().sum())
    logger.info(
        f"Compared {len(table)} months ({overlap[0]:%Y-%m} to {overlap[-1]:%Y-%m}): "
        f"{defined_count} defined, {len(skipped)} skipped"
    )
    return ComparisonResult(table=table, defined_count=defined_count, skipped_dates=skipped)
