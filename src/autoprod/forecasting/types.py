"""Shared types for the forecasting analysis."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import pandas as pd


class Scale(str, Enum):
    """Scale a series' values live on."""

    RAW = "raw"
    LOG = "log"


@dataclass(frozen=True)
class TaggedSeries:
    """A monthly series tagged with the transforms applied to it.

    Each transform returns a new TaggedSeries, so the scale and differencing
    state travel with the values instead of living in variable names.

    Attributes:
        values: Series with a monthly DatetimeIndex. Differenced series keep the
            dates of the observations they were computed at.
        scale: Scale of the values (raw counts or natural log).
        diff_lags: Lags of the differencing steps applied, in order, e.g.
            ``(12, 1)`` for seasonal then first differencing.

    Note:
        The dataclass is frozen but pandas objects are mutable; transforms
        always copy before changing values.

    """

    values: pd.Series
    scale: Scale = Scale.RAW
    diff_lags: tuple[int, ...] = field(default_factory=tuple)

    @property
    def is_differenced(self) -> bool:
        """True if any differencing has been applied."""
        return len(self.diff_lags) > 0

    @property
    def label(self) -> str:
        """Short description of the transform state, e.g. ``log, diff(12, 1)``."""
        if not self.diff_lags:
            return self.scale.value
        lags = ", ".join(str(lag) for lag in self.diff_lags)
        return f"{self.scale.value}, diff({lags})"

    def __len__(self) -> int:
        return len(self.values)
