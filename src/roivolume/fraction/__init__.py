"""Volume fraction estimators.

Two estimators share the same inputs and result shape:

- :class:`VoxelVolumeFraction` counts the voxels inside the threshold range.
- :class:`SurfaceVolumeFraction` triangulates the sample and its foreground
  and compares the enclosed volumes.

:class:`VolumeFraction` picks one of them by name.
"""

from roivolume.fraction.base import DEFAULT_THRESHOLDS, Thresholds, default_thresholds, threshold_bound
from roivolume.fraction.mesh import MarchingCubesTriangulator, Mesh, Triangulator
from roivolume.fraction.surface import (
    IndicatorVolumes,
    SurfaceVolumeFraction,
    SurfaceVolumeFractionResult,
    build_indicator_volumes,
)
from roivolume.fraction.volume_fraction import VolumeFraction
from roivolume.fraction.voxel import VoxelVolumeFraction, voxel_volume_fraction

__all__ = [
    "DEFAULT_THRESHOLDS",
    "IndicatorVolumes",
    "MarchingCubesTriangulator",
    "Mesh",
    "SurfaceVolumeFraction",
    "SurfaceVolumeFractionResult",
    "Thresholds",
    "Triangulator",
    "VolumeFraction",
    "VoxelVolumeFraction",
    "build_indicator_volumes",
    "default_thresholds",
    "threshold_bound",
    "voxel_volume_fraction",
]
