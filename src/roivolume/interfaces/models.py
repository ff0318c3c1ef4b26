"""Structured representations of workflow inputs and outputs."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

import pandas as pd

from roivolume.models import VolumeFractionConfig, VolumeFractionResult


@dataclass
class MeasurementConfig:
    """Configuration of a volume fraction workflow.

    Collects everything the command line and TOML configuration can set.
    """

    images: list[Path] = field(default_factory=list)
    output_dir: Path = Path("volumefraction")
    rois: Path | None = None
    algorithm: str = "voxel"
    min_threshold: int | None = None
    max_threshold: int | None = None
    resampling: int = 6
    crop: bool = False
    padding: int = 0
    fill_background: bool = False
    fill_value: int = 0
    force: bool = False
    log_level: int = logging.INFO
    n_jobs: int = 1
    n_procs: int = 1

    def fraction_config(self) -> VolumeFractionConfig:
        """The estimator parameters of this workflow."""
        return VolumeFractionConfig(
            min_threshold=self.min_threshold,
            max_threshold=self.max_threshold,
            resampling=self.resampling,
            n_jobs=self.n_jobs,
        )


@dataclass(frozen=True)
class MeasurementOutput:
    """Result of measuring one image."""

    image_path: Path
    label: str
    unit: str
    result: VolumeFractionResult
    stats_table: pd.DataFrame
    cropped_path: Path | None = None
