"""Volume fraction measurement of 3D images within regions of interest.

This package estimates the fraction of a sample volume occupied by
thresholded foreground, either by counting voxels or by comparing
triangulated surfaces. Measurements may be restricted to a catalog of
per-plane regions of interest, and images may be cropped to those regions.
"""

from roivolume.fraction import SurfaceVolumeFraction, VolumeFraction, VoxelVolumeFraction
from roivolume.models import Calibration, Limits, Rect, Volume, VolumeFractionConfig, VolumeFractionResult
from roivolume.roi import Region, RoiCatalog, crop_to_rois, region_limits

__all__ = [
    "Calibration",
    "Limits",
    "Rect",
    "Region",
    "RoiCatalog",
    "SurfaceVolumeFraction",
    "Volume",
    "VolumeFraction",
    "VolumeFractionConfig",
    "VolumeFractionResult",
    "VoxelVolumeFraction",
    "crop_to_rois",
    "region_limits",
]
