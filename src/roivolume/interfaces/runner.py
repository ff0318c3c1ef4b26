"""Run volume fraction workflows.

This module measures a batch of images against an optional ROI table and
writes one result table per image.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Optional

from roivolume.fraction.base import check_volume, resolve_thresholds
from roivolume.fraction.volume_fraction import VolumeFraction
from roivolume.interfaces.models import MeasurementConfig, MeasurementOutput
from roivolume.interfaces.shared import build_crop_path, build_output_path, write_output
from roivolume.results import ResultsTable
from roivolume.roi.catalog import RoiCatalog, load_roi_catalog
from roivolume.roi.crop import crop_to_rois
from roivolume.utils.image import load_volume, save_volume

logger = logging.getLogger(__name__)


def _measure_image(
    image_path: Path,
    catalog: Optional[RoiCatalog],
    config: MeasurementConfig,
) -> Optional[Path]:
    """Measure a single image and write its outputs."""
    logger.debug("Measuring %s", image_path)
    try:
        volume = load_volume(image_path)
        thresholds = resolve_thresholds(check_volume(volume), config.fraction_config())

        cropped_path = None
        if config.crop:
            cropped = crop_to_rois(
                volume,
                catalog,
                fill_background=config.fill_background,
                fill_value=config.fill_value,
                padding=config.padding,
                n_jobs=config.n_jobs,
            )
            if cropped is None:
                logger.warning("No ROI lies inside %s; skipping crop", image_path)
            else:
                cropped_path = save_volume(cropped, build_crop_path(volume.title, config))

        fraction = VolumeFraction(config.algorithm, config.fraction_config())
        result = fraction.measure(volume, catalog=catalog)

        table = ResultsTable()
        table.add_volume_fraction(volume.title, result, unit=volume.calibration.unit)
        output = MeasurementOutput(
            image_path=image_path,
            label=volume.title,
            unit=volume.calibration.unit,
            result=result,
            stats_table=table.to_frame(),
            cropped_path=cropped_path,
        )
        out_path = write_output(output, config, thresholds=(thresholds.minimum, thresholds.maximum))
        logger.info(
            "Successfully measured %s: %.6g / %.6g (ratio %.4f)",
            image_path.name,
            result.foreground_volume,
            result.total_volume,
            result.ratio,
        )
        return out_path  # noqa: TRY300
    except Exception:  # noqa: BLE001
        logger.exception("Failed to measure %s", image_path)
        return None


def _pending_images(config: MeasurementConfig) -> tuple[list[Path], list[Path]]:
    """Split images into those to measure and existing outputs to reuse."""
    pending: list[Path] = []
    reused: list[Path] = []
    for image_path in config.images:
        label = image_path.name.split(".")[0]
        out_path = build_output_path(label, config)
        if not config.force and out_path.exists():
            logger.info("Reusing existing volume fraction output at %s", out_path)
            reused.append(out_path)
        else:
            pending.append(image_path)
    return pending, reused


def run_measurement_workflow(config: MeasurementConfig) -> list[Path]:
    """Measure every image of a workflow configuration.

    Parameters
    ----------
    config
        Configuration for the workflow.

    Returns
    -------
    list[Path]
        Result tables written or reused.
    """
    if not config.images:
        logger.warning("No images to measure. Nothing to do.")
        return []

    catalog = None
    if config.rois is not None:
        catalog = load_roi_catalog(config.rois)
        logger.info("Loaded %d ROIs from %s", len(catalog), config.rois)

    pending, outputs = _pending_images(config)
    logger.info("Found %d images to measure.", len(pending))

    with ThreadPoolExecutor(max_workers=max(config.n_procs, 1)) as executor:
        future_to_image = {executor.submit(_measure_image, image, catalog, config): image for image in pending}
        for future in as_completed(future_to_image):
            result = future.result()
            if result:
                outputs.append(result)

    logger.info("Finished writing %d volume fraction files", len(outputs))
    return outputs
