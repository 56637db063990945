"""Base model interface for forecasting models.

This module defines the abstract base class that forecasting models implement,
so the analysis can fit and forecast without knowing the model family.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import pandas as pd

from autoprod.forecasting.types import TaggedSeries


class ForecastModel(ABC):
    """Abstract base class for forecasting models.

    Models implement train() and forecast(). Forecasts are always returned on
    the raw scale, whatever scale the model was trained on.
    """

    @abstractmethod
    def train(self, series: TaggedSeries, **kwargs) -> object:
        """Train the forecasting model on a tagged series.

        Args:
            series: Undifferenced series on the raw or log scale
            **kwargs: Model-specific options

        Returns:
            Trained model object (type depends on implementation)

        Raises:
            ModelFitError: If training fails or does not converge
        """
        pass

    @abstractmethod
    def forecast(self, model: object, steps: int, **kwargs) -> pd.DataFrame:
        """Generate a forecast from a trained model.

        Args:
            model: Trained model object (from train() method)
            steps: Number of periods to forecast ahead
            **kwargs: Model-specific forecast parameters

        Returns:
            DataFrame indexed by forecast date with 'forecast', 'lower' and
            'upper' columns on the raw scale
        """
        pass
