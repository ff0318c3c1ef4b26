"""Command line entry point for roivolume.

Usage::

    roivolume IMAGE [IMAGE ...] \\
        [--rois ROIS.tsv] [--output-dir DIR] \\
        [--algorithm {voxel,surface}] \\
        [--min-threshold N] [--max-threshold N] [--resampling N] \\
        [--crop] [--padding N] [--fill-value N] \\
        [--config CONFIG.toml] [--force] [--n-jobs N] [--n-procs N]
"""

from __future__ import annotations

import argparse
import logging
import sys

from roivolume.interfaces.runner import run_measurement_workflow
from roivolume.interfaces.shared import add_cli_args, load_config

LOGGER = logging.getLogger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="roivolume",
        description=(
            "Measure the volume fraction of thresholded foreground in 3D images, "
            "optionally restricted to regions of interest."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    add_cli_args(parser)
    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for CLI execution."""
    argv = list(argv) if argv is not None else sys.argv[1:]

    if not argv:
        _build_parser().print_help()
        return 1

    args = _build_parser().parse_args(argv)

    try:
        config = load_config(args)
        logging.basicConfig(level=config.log_level, format="%(asctime)s [%(levelname)s] %(message)s")
        run_measurement_workflow(config)
    except Exception:
        LOGGER.exception("Volume fraction workflow failed")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
