"""Shared utility functions for the workflow interfaces.

Configuration parsing helpers and provenance sidecars.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version
from pathlib import Path

from roivolume.interfaces.models import MeasurementConfig

logger = logging.getLogger(__name__)


def _parse_log_level(value: str | int | None) -> int:
    """Return a logging level from common string/int inputs.

    Parameters
    ----------
    value
        The value to parse.

    Returns
    -------
    int
        The logging level.

    Examples
    --------
    >>> _parse_log_level("INFO")
    20
    >>> _parse_log_level("DEBUG")
    10
    >>> _parse_log_level(logging.WARNING)
    30
    >>> _parse_log_level(None)
    20
    """
    if value is None:
        return logging.INFO
    if isinstance(value, int):
        return value
    return getattr(logging, str(value).upper(), logging.INFO)


def _as_list(value: Iterable[str] | str | None) -> list[str] | None:
    """Normalize configuration values into a list of strings."""
    if value is None:
        return None
    if isinstance(value, str):
        return [value]
    return list(value)


def _as_path(value: str | Path | None) -> Path | None:
    """Return an expanded, absolute path or None for empty values."""
    if not value:
        return None
    return Path(value).expanduser().resolve()


def _optional_int(value: object) -> int | None:
    if value is None:
        return None
    return int(value)  # type: ignore[call-overload]


def output_stem(label: str, config: MeasurementConfig) -> str:
    """Base file name of the outputs for image ``label``.

    Examples
    --------
    >>> output_stem("femur", MeasurementConfig(algorithm="surface"))
    'femur_algorithm-surface'
    """
    entities = [label, f"algorithm-{config.algorithm}"]
    if config.rois is not None:
        entities.append("roi-catalog")
    return "_".join(entities)


def write_measurement_sidecar(
    tsv_path: Path,
    original_file: Path,
    config: MeasurementConfig,
    thresholds: tuple[int, int] | None = None,
    cropped_file: Path | None = None,
) -> Path:
    """Write a JSON sidecar file alongside a volume fraction TSV.

    The sidecar records which image was measured, with which ROI table,
    algorithm and thresholds.

    Parameters
    ----------
    tsv_path
        Path to the results TSV file. The JSON will share its stem.
    original_file
        Path to the measured image.
    config
        Workflow configuration.
    thresholds
        The foreground range actually used, when known.
    cropped_file
        Path of the cropped image written alongside the results, if any.

    Returns
    -------
    Path
        Path to the written JSON sidecar file.
    """
    try:
        software_version = pkg_version("roivolume")
    except PackageNotFoundError:
        software_version = "unknown"

    sidecar: dict = {
        "original_file": str(original_file),
        "roi_table": str(config.rois) if config.rois is not None else None,
        "algorithm": config.algorithm,
        "thresholds": list(thresholds) if thresholds is not None else None,
        "surface_resampling": config.resampling if config.algorithm == "surface" else None,
        "cropped_file": str(cropped_file) if cropped_file is not None else None,
        "software_version": software_version,
        "timestamp": datetime.now(tz=timezone.utc).isoformat(),
    }

    json_path = tsv_path.with_suffix(".json")
    json_path.write_text(json.dumps(sidecar, indent=2) + "\n")
    logger.debug("Wrote measurement sidecar to %s", json_path)
    return json_path
