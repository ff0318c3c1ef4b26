"""Regions of interest: catalog queries, bounds and cropping."""

from roivolume.roi.bounds import ClippedRegion, clamp, clip_region, region_limits
from roivolume.roi.catalog import ALL_PLANES, Region, RoiCatalog, load_roi_catalog, parse_plane_tag, rois_on_plane
from roivolume.roi.crop import crop_to_rois

__all__ = [
    "ALL_PLANES",
    "ClippedRegion",
    "Region",
    "RoiCatalog",
    "clamp",
    "clip_region",
    "crop_to_rois",
    "load_roi_catalog",
    "parse_plane_tag",
    "region_limits",
    "rois_on_plane",
]
