"""CLI argument handling, TOML config loading and output writing."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover - fallback for older environments
    import tomli as tomllib  # type: ignore[import]

from roivolume.fraction.volume_fraction import VolumeFraction
from roivolume.interfaces.models import MeasurementConfig, MeasurementOutput
from roivolume.interfaces.utils import (
    _as_list,
    _as_path,
    _optional_int,
    _parse_log_level,
    output_stem,
    write_measurement_sidecar,
)

LOGGER = logging.getLogger(__name__)


def add_cli_args(parser: argparse.ArgumentParser) -> None:
    """Add the workflow arguments to ``parser``."""
    parser.add_argument(
        "images",
        type=Path,
        nargs="*",
        help="NIfTI images to measure (8 or 16-bit, binary or grayscale).",
    )
    parser.add_argument(
        "--rois",
        type=Path,
        help=(
            "Tab separated ROI table with columns name, x, y, width, height and an optional mask. "
            "Names like 0003-0000-0001 place a ROI on plane 3; other names apply to every plane."
        ),
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        dest="output_dir",
        help="Destination directory for result tables.",
    )
    parser.add_argument(
        "--algorithm",
        choices=list(VolumeFraction.ALGORITHMS),
        help="Count voxels or measure triangulated surfaces. Default: voxel.",
    )
    parser.add_argument(
        "--min-threshold",
        type=int,
        dest="min_threshold",
        help="Lowest foreground intensity. Default: 128 (8-bit) or 2424 (16-bit).",
    )
    parser.add_argument(
        "--max-threshold",
        type=int,
        dest="max_threshold",
        help="Highest foreground intensity. Default: 255 (8-bit) or 11215 (16-bit).",
    )
    parser.add_argument(
        "--resampling",
        type=int,
        help="Voxel resampling of the surface algorithm; higher values give simpler surfaces. Default: 6.",
    )
    parser.add_argument(
        "--crop",
        action="store_true",
        help="Also write each image cropped to the ROIs.",
    )
    parser.add_argument(
        "--padding",
        type=int,
        help="Background pixels added to each side of a cropped image. Default: 0.",
    )
    parser.add_argument(
        "--fill-value",
        type=int,
        dest="fill_value",
        help="Fill the background of cropped images with this value.",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite existing result tables.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a TOML configuration file.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        help="Logging verbosity (e.g., INFO, DEBUG).",
    )
    parser.add_argument(
        "--n-jobs",
        type=int,
        dest="n_jobs",
        help="Number of planes processed in parallel within an image.",
    )
    parser.add_argument(
        "--n-procs",
        type=int,
        dest="n_procs",
        help="Number of images measured in parallel.",
    )


def _pick(cli_value: object, data: dict[str, object], key: str, default: object = None) -> object:
    """Prefer an explicit CLI value, then the TOML value, then ``default``."""
    if cli_value is not None:
        return cli_value
    return data.get(key, default)


def load_config(args: argparse.Namespace) -> MeasurementConfig:
    """Parse a TOML configuration file and override it with CLI arguments.

    Recognised TOML keys mirror the CLI options: ``images``, ``rois``,
    ``output_dir``, ``algorithm``, ``min_threshold``, ``max_threshold``,
    ``resampling``, ``crop``, ``padding``, ``fill_value``, ``force``,
    ``log_level``, ``n_jobs`` and ``n_procs``.
    """
    data: dict[str, object] = {}
    if getattr(args, "config", None):
        with args.config.open("rb") as f:
            data = tomllib.load(f)

    images = list(args.images) if getattr(args, "images", None) else _as_list(data.get("images")) or []
    output_dir = _as_path(_pick(getattr(args, "output_dir", None), data, "output_dir", "volumefraction"))
    fill_value = _pick(getattr(args, "fill_value", None), data, "fill_value")

    return MeasurementConfig(
        images=[Path(image).expanduser().resolve() for image in images],
        output_dir=output_dir,
        rois=_as_path(_pick(getattr(args, "rois", None), data, "rois")),
        algorithm=str(_pick(getattr(args, "algorithm", None), data, "algorithm", "voxel")),
        min_threshold=_optional_int(_pick(getattr(args, "min_threshold", None), data, "min_threshold")),
        max_threshold=_optional_int(_pick(getattr(args, "max_threshold", None), data, "max_threshold")),
        resampling=int(_pick(getattr(args, "resampling", None), data, "resampling", 6)),
        crop=bool(getattr(args, "crop", False) or data.get("crop", False)),
        padding=int(_pick(getattr(args, "padding", None), data, "padding", 0)),
        fill_background=fill_value is not None,
        fill_value=int(fill_value) if fill_value is not None else 0,
        force=bool(getattr(args, "force", False) or data.get("force", False)),
        log_level=_parse_log_level(_pick(getattr(args, "log_level", None), data, "log_level")),
        n_jobs=int(_pick(getattr(args, "n_jobs", None), data, "n_jobs", 1)),
        n_procs=int(_pick(getattr(args, "n_procs", None), data, "n_procs", 1)),
    )


def build_output_path(label: str, config: MeasurementConfig) -> Path:
    """Path of the results table for image ``label``."""
    return config.output_dir / f"{output_stem(label, config)}_volumefraction.tsv"


def build_crop_path(label: str, config: MeasurementConfig) -> Path:
    """Path of the cropped copy of image ``label``."""
    return config.output_dir / f"{label}_desc-cropped.nii.gz"


def write_output(
    result: MeasurementOutput,
    config: MeasurementConfig,
    thresholds: tuple[int, int] | None = None,
) -> Path:
    """Write a measurement (TSV + JSON sidecar) to disk.

    Returns
    -------
    Path
        Path to the written TSV file.
    """
    out_path = build_output_path(result.label, config)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    result.stats_table.to_csv(out_path, sep="\t", index=False)
    LOGGER.debug("Wrote volume fraction output to %s", out_path)

    write_measurement_sidecar(
        tsv_path=out_path,
        original_file=result.image_path,
        config=config,
        thresholds=thresholds,
        cropped_file=result.cropped_path,
    )
    return out_path
