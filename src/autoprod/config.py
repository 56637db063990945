"""Filesystem configuration for autoprod.

This module provides a single configuration class for the paths used by
the report CLI and example scripts.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass
class AnalysisPaths:
    """All filesystem paths used by the production analysis.

    Attributes:
        data_root: Directory holding the vintage CSV files.
        output_root: Directory where figures and saved tables are written.

    Directory Structure:
        data_root/
        ├── production_original.csv   # earlier vintage
        └── production_updated.csv    # later vintage, superset of dates
        output_root/
        └── figures/
    """

    data_root: Path
    output_root: Path

    @classmethod
    def from_root(
        cls,
        data_root: str | Path,
        output_root: str | Path = "output",
    ) -> AnalysisPaths:
        """Create AnalysisPaths from a data directory and an output directory.

        Args:
            data_root: Directory holding the vintage CSV files.
            output_root: Directory for generated artifacts (default: "output").

        Returns:
            AnalysisPaths instance.

        Examples:
            >>> paths = AnalysisPaths.from_root("data")
            >>> paths.original_csv
            PosixPath('data/production_original.csv')

        """
        if isinstance(data_root, str):
            data_root = Path(data_root)
        if isinstance(output_root, str):
            output_root = Path(output_root)

        return cls(data_root=data_root, output_root=output_root)

    @property
    def original_csv(self) -> Path:
        """Earlier data vintage used to fit the forecasting models."""
        return self.data_root / "production_original.csv"

    @property
    def updated_csv(self) -> Path:
        """Later data vintage used to check forecasts against realized values."""
        return self.data_root / "production_updated.csv"

    @property
    def figures(self) -> Path:
        """Directory for diagnostic figures."""
        return self.output_root / "figures"

    def ensure_dirs(self) -> None:
        """Create the output directories."""
        for path in [self.output_root, self.figures]:
            path.mkdir(parents=True, exist_ok=True)
