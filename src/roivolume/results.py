"""Tabulate measurements as ``(label, metric, value)`` triples."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pandas as pd

from roivolume.models import VolumeFractionResult

logger = logging.getLogger(__name__)

LABEL_COLUMN = "label"


def volume_metric_names(unit: str) -> tuple[str, str, str]:
    """Column names of a volume fraction measurement in ``unit``."""
    return (f"Bone volume ({unit}³)", f"Total volume ({unit}³)", "Volume ratio")


class ResultsTable:
    """A results table with one or more rows per image label.

    A measurement goes into the first row of its label whose metric cell is
    still empty; when every row of the label already has that metric, a new
    row is appended. Empty cells read as ``nan``.
    """

    def __init__(self, frame: pd.DataFrame | None = None) -> None:
        self._frame = frame.copy() if frame is not None else pd.DataFrame(columns=[LABEL_COLUMN])

    def __len__(self) -> int:
        return len(self._frame)

    def set_measurement(self, label: str, metric: str, value: float) -> None:
        """Store ``value`` under ``metric`` for the image ``label``.

        Empty labels or metric names are ignored.
        """
        if not label or not metric:
            logger.debug("Ignoring measurement with empty label or metric: %r, %r", label, metric)
            return

        if metric not in self._frame.columns:
            self._frame[metric] = np.nan

        rows = self._frame.index[self._frame[LABEL_COLUMN] == label]
        free = [row for row in rows if pd.isna(self._frame.at[row, metric])]
        if free:
            self._frame.at[free[0], metric] = value
            return

        new_row = {column: np.nan for column in self._frame.columns}
        new_row[LABEL_COLUMN] = label
        new_row[metric] = value
        self._frame = pd.concat([self._frame, pd.DataFrame([new_row])], ignore_index=True)

    def add_volume_fraction(self, label: str, result: VolumeFractionResult, unit: str = "pixel") -> None:
        """Record the volumes and ratio of a volume fraction result."""
        foreground, total, ratio = volume_metric_names(unit)
        self.set_measurement(label, foreground, result.foreground_volume)
        self.set_measurement(label, total, result.total_volume)
        self.set_measurement(label, ratio, result.ratio)

    def to_frame(self) -> pd.DataFrame:
        return self._frame.copy()

    def write(self, path: Path) -> Path:
        """Write the table as a tab separated file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        self._frame.to_csv(path, sep="\t", index=False)
        logger.debug("Wrote %d result rows to %s", len(self._frame), path)
        return path
