"""Volume fraction from the enclosed volume of triangulated surfaces."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import numpy as np

from roivolume.fraction.base import (
    Thresholds,
    check_catalog,
    check_resampling,
    check_volume,
    resolve_thresholds,
)
from roivolume.fraction.mesh import DEFAULT_ISOVALUE, MarchingCubesTriangulator, Mesh, Triangulator
from roivolume.models import Volume, VolumeFractionConfig, VolumeFractionResult
from roivolume.roi.bounds import clip_region
from roivolume.roi.catalog import RoiCatalog, rois_on_plane
from roivolume.utils.image import BINARY_WHITE
from roivolume.utils.parallel import for_each_plane

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceVolumeFractionResult(VolumeFractionResult):
    """Volume fraction together with the surfaces it was measured from."""

    foreground_surface: Mesh = field(default_factory=Mesh)
    total_surface: Mesh = field(default_factory=Mesh)


@dataclass(frozen=True)
class IndicatorVolumes:
    """White-on-black volumes marking the sampled pixels.

    ``foreground`` is white where a pixel is inside a region and within the
    threshold range, ``total`` wherever a pixel is inside a region.
    """

    foreground: np.ndarray
    total: np.ndarray


def build_indicator_volumes(
    volume: Volume,
    thresholds: Thresholds,
    catalog: RoiCatalog | None = None,
    *,
    n_jobs: int = 1,
) -> IndicatorVolumes:
    """Draw the foreground and total indicator volumes of a measurement.

    Without a catalog every pixel of the volume belongs to the sample.
    """
    foreground = np.zeros(volume.shape, dtype=np.uint8)
    total = np.zeros(volume.shape, dtype=np.uint8)

    def draw_plane(plane_index: int) -> None:
        plane = volume.plane(plane_index)
        out_plane = foreground[plane_index - 1]
        mask_plane = total[plane_index - 1]
        in_range = (plane >= thresholds.minimum) & (plane <= thresholds.maximum)

        if catalog is None:
            mask_plane[...] = BINARY_WHITE
            out_plane[in_range] = BINARY_WHITE
            return

        for roi in rois_on_plane(catalog, plane_index, depth=volume.depth):
            clipped = clip_region(roi, volume.width, volume.height)
            if clipped is None:
                continue
            window = np.ones((clipped.bounds.height, clipped.bounds.width), dtype=bool)
            if clipped.mask is not None:
                window = clipped.mask
            mask_plane[clipped.rows, clipped.columns][window] = BINARY_WHITE
            selected = window & in_range[clipped.rows, clipped.columns]
            out_plane[clipped.rows, clipped.columns][selected] = BINARY_WHITE

    for_each_plane(draw_plane, volume.planes(), n_jobs=n_jobs)
    return IndicatorVolumes(foreground=foreground, total=total)


class SurfaceVolumeFraction:
    """Measure foreground and total volume from surface meshes.

    The sampled region and its foreground are drawn into two indicator
    volumes, each is triangulated, and the enclosed volumes of the two
    surfaces give the result. Takes the same inputs and returns the same
    result shape as :class:`~roivolume.fraction.voxel.VoxelVolumeFraction`.
    """

    isovalue = DEFAULT_ISOVALUE

    def __init__(self, config: VolumeFractionConfig | None = None, triangulator: Triangulator | None = None) -> None:
        self.config = config or VolumeFractionConfig()
        self.triangulator = triangulator or MarchingCubesTriangulator()

    def run(self, volume: Volume, catalog: RoiCatalog | None = None) -> SurfaceVolumeFractionResult:
        """Triangulate the sample and its foreground and measure both.

        Parameters
        ----------
        volume : Volume
            8 or 16-bit binary or grayscale image.
        catalog : RoiCatalog | None, optional
            Restrict the measurement to these regions. Must not be empty.

        Returns
        -------
        SurfaceVolumeFractionResult
            Enclosed volumes in calibrated units and the two surfaces.
        """
        volume = check_volume(volume)
        thresholds = resolve_thresholds(volume, self.config)
        catalog = check_catalog(catalog)
        resampling = check_resampling(self.config.resampling)

        indicators = build_indicator_volumes(volume, thresholds, catalog, n_jobs=self.config.n_jobs)
        spacing = volume.calibration.spacing

        foreground_surface = self.triangulator.triangulate(indicators.foreground, self.isovalue, resampling, spacing)
        total_surface = self.triangulator.triangulate(indicators.total, self.isovalue, resampling, spacing)

        result = SurfaceVolumeFractionResult(
            foreground_volume=foreground_surface.volume,
            total_volume=total_surface.volume,
            foreground_surface=foreground_surface,
            total_surface=total_surface,
        )
        logger.debug(
            "Surface volume fraction of %s: %.3f / %.3f (resampling %d)",
            volume.title,
            result.foreground_volume,
            result.total_volume,
            resampling,
        )
        return result
