"""Volume fraction by counting voxels."""

from __future__ import annotations

import logging

import numpy as np

from roivolume.fraction.base import Thresholds, check_catalog, check_volume, resolve_thresholds
from roivolume.models import Calibration, Volume, VolumeFractionConfig, VolumeFractionResult
from roivolume.roi.bounds import clip_region
from roivolume.roi.catalog import RoiCatalog, rois_on_plane
from roivolume.utils.parallel import for_each_plane

logger = logging.getLogger(__name__)


def _count_foreground(pixels: np.ndarray, thresholds: Thresholds) -> int:
    return int(np.count_nonzero((pixels >= thresholds.minimum) & (pixels <= thresholds.maximum)))


class VoxelVolumeFraction:
    """Measure foreground and total volume by counting voxels.

    A voxel is foreground if its intensity lies in the inclusive threshold
    range. With a catalog, only voxels under the regions active on each
    plane are counted; overlapping regions count their shared voxels once
    per region.
    """

    def __init__(self, config: VolumeFractionConfig | None = None) -> None:
        self.config = config or VolumeFractionConfig()

    def run(
        self,
        volume: Volume,
        catalog: RoiCatalog | None = None,
        calibration: Calibration | None = None,
    ) -> VolumeFractionResult:
        """Count the foreground and total voxels of a volume.

        Parameters
        ----------
        volume : Volume
            8 or 16-bit binary or grayscale image.
        catalog : RoiCatalog | None, optional
            Restrict the measurement to these regions. Must not be empty.
        calibration : Calibration | None, optional
            Voxel size, by default the volume's own calibration.

        Returns
        -------
        VolumeFractionResult
            Calibrated foreground and total volumes.
        """
        volume = check_volume(volume)
        thresholds = resolve_thresholds(volume, self.config)
        catalog = check_catalog(catalog)
        calibration = calibration or volume.calibration

        total_voxels = np.zeros(volume.depth + 1, dtype=np.int64)
        foreground_voxels = np.zeros(volume.depth + 1, dtype=np.int64)

        def count_plane(plane_index: int) -> None:
            plane = volume.plane(plane_index)
            if catalog is None:
                total_voxels[plane_index] = plane.size
                foreground_voxels[plane_index] = _count_foreground(plane, thresholds)
                return

            rois = rois_on_plane(catalog, plane_index, depth=volume.depth)
            if not rois:
                return
            total = 0
            foreground = 0
            for roi in rois:
                clipped = clip_region(roi, volume.width, volume.height)
                if clipped is None:
                    continue
                pixels = clipped.select(plane)
                total += pixels.size
                foreground += _count_foreground(pixels, thresholds)
            total_voxels[plane_index] = total
            foreground_voxels[plane_index] = foreground

        for_each_plane(count_plane, volume.planes(), n_jobs=self.config.n_jobs)

        scale = calibration.voxel_volume
        result = VolumeFractionResult(
            foreground_volume=float(foreground_voxels.sum()) * scale,
            total_volume=float(total_voxels.sum()) * scale,
        )
        logger.debug(
            "Voxel volume fraction of %s: %d/%d voxels in [%d, %d]",
            volume.title,
            foreground_voxels.sum(),
            total_voxels.sum(),
            thresholds.minimum,
            thresholds.maximum,
        )
        return result


def voxel_volume_fraction(
    volume: Volume,
    min_threshold: int | None = None,
    max_threshold: int | None = None,
    catalog: RoiCatalog | None = None,
    calibration: Calibration | None = None,
    *,
    n_jobs: int = 1,
) -> VolumeFractionResult:
    """Functional shortcut for :class:`VoxelVolumeFraction`."""
    config = VolumeFractionConfig(min_threshold=min_threshold, max_threshold=max_threshold, n_jobs=n_jobs)
    return VoxelVolumeFraction(config).run(volume, catalog=catalog, calibration=calibration)
