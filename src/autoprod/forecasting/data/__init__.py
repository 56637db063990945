"""Data loading and preparation utilities."""

from autoprod.forecasting.data.loaders import load_production_csv, load_vintages
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

__all__ = [
    "difference",
    "exp_transform",
    "load_production_csv",
    "load_vintages",
    "log_transform",
    "positions_for_dates",
    "seasonal_difference",
    "smooth_outliers",
    "stationary_transform",
    "tag_raw",
]
