"""Forecasting models module.

SARIMAModel is the only model family used by the analysis. It implements the
ForecastModel interface: train() returns an immutable FittedModel and
forecast() returns a frame of point forecasts and interval bounds on the raw
scale, indexed by the months after the fitting series' last date.

search_orders() fits every candidate in an OrderSearchSpace and suggests the
lowest-AIC converged model for comparison with the fixed orders.
"""

from autoprod.forecasting.models.base import ForecastModel
from autoprod.forecasting.models.sarima import (
    FittedModel,
    OrderSearchResult,
    OrderSearchSpace,
    SARIMAModel,
    search_orders,
)

__all__ = [
    "FittedModel",
    "ForecastModel",
    "OrderSearchResult",
    "OrderSearchSpace",
    "SARIMAModel",
    "search_orders",
]
