"""Choose between the voxel and surface volume fraction algorithms."""

from __future__ import annotations

import logging
from typing import ClassVar, Literal

from roivolume.errors import InvalidParameterError
from roivolume.fraction.base import check_catalog, check_resampling, check_volume
from roivolume.fraction.mesh import Triangulator
from roivolume.fraction.surface import SurfaceVolumeFraction
from roivolume.fraction.voxel import VoxelVolumeFraction
from roivolume.models import Volume, VolumeFractionConfig, VolumeFractionResult
from roivolume.roi.catalog import RoiCatalog

logger = logging.getLogger(__name__)

Algorithm = Literal["voxel", "surface"]


class VolumeFraction:
    """Measure the volume fraction of a sample with a selectable algorithm.

    Parameters
    ----------
    algorithm : {"voxel", "surface"}, optional
        Count voxels, or measure triangulated surfaces, by default "voxel".
    config : VolumeFractionConfig | None, optional
        Thresholds, surface resampling and worker count.
    triangulator : Triangulator | None, optional
        Surface extraction used by the surface algorithm.
    """

    ALGORITHMS: ClassVar[tuple[str, ...]] = ("voxel", "surface")
    DEFAULT_ALGORITHM: ClassVar[str] = "voxel"

    def __init__(
        self,
        algorithm: Algorithm = "voxel",
        config: VolumeFractionConfig | None = None,
        triangulator: Triangulator | None = None,
    ) -> None:
        if algorithm not in self.ALGORITHMS:
            raise InvalidParameterError(f"No such volume algorithm: {algorithm!r}")
        self.algorithm = algorithm
        self.config = config or VolumeFractionConfig()
        check_resampling(self.config.resampling)
        self.triangulator = triangulator

    def measure(self, volume: Volume, catalog: RoiCatalog | None = None) -> VolumeFractionResult:
        """Run the selected algorithm on ``volume``."""
        check_volume(volume)
        check_catalog(catalog)
        logger.info("Measuring %s with the %s algorithm", volume.title, self.algorithm)
        if self.algorithm == "surface":
            return SurfaceVolumeFraction(self.config, triangulator=self.triangulator).run(volume, catalog=catalog)
        return VoxelVolumeFraction(self.config).run(volume, catalog=catalog)
