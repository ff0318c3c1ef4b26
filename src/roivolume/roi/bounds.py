"""Fit regions inside a volume and find the box that encloses them."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from roivolume.models import FIRST_PLANE, Limits, Rect
from roivolume.roi.catalog import Region, RoiCatalog

logger = logging.getLogger(__name__)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def clamp(rect: Rect, width: int, height: int) -> tuple[Rect, bool]:
    """Crop a rectangle to the area ``[0, width] x [0, height]``.

    Parameters
    ----------
    rect : Rect
        The rectangle to fit.
    width, height : int
        Size of the plane.

    Returns
    -------
    tuple[Rect, bool]
        The fitted rectangle and whether it still covers any pixels. A
        rectangle completely outside the plane collapses to zero size at the
        nearest edge and is reported invalid.
    """
    x_min = _clamp(rect.x, 0, width)
    x_max = _clamp(rect.right, 0, width)
    y_min = _clamp(rect.y, 0, height)
    y_max = _clamp(rect.bottom, 0, height)
    new_width = max(x_max - x_min, 0)
    new_height = max(y_max - y_min, 0)
    return Rect(x_min, y_min, new_width, new_height), new_width > 0 and new_height > 0


@dataclass(frozen=True)
class ClippedRegion:
    """The part of a region that lies inside a plane."""

    bounds: Rect
    mask: np.ndarray | None

    @property
    def rows(self) -> slice:
        return slice(self.bounds.y, self.bounds.bottom)

    @property
    def columns(self) -> slice:
        return slice(self.bounds.x, self.bounds.right)

    def select(self, plane: np.ndarray) -> np.ndarray:
        """Return the plane's pixels covered by the region as a flat array."""
        window = plane[self.rows, self.columns]
        if self.mask is None:
            return window.ravel()
        return window[self.mask]


def clip_region(region: Region, width: int, height: int) -> ClippedRegion | None:
    """Fit a region inside a ``width`` x ``height`` plane.

    The mask window is cut relative to the region's original rectangle, so a
    region hanging over the left or top edge keeps its shape.

    Returns
    -------
    ClippedRegion | None
        The visible part of the region, or None if nothing is visible.
    """
    bounds, valid = clamp(region.bounds, width, height)
    if not valid:
        logger.debug("Skipping ROI %r: no pixels inside %dx%d plane", region.name, width, height)
        return None
    if region.mask is None:
        return ClippedRegion(bounds=bounds, mask=None)

    dx = bounds.x - region.bounds.x
    dy = bounds.y - region.bounds.y
    mask = region.mask[dy : dy + bounds.height, dx : dx + bounds.width] != 0
    return ClippedRegion(bounds=bounds, mask=mask)


def region_limits(catalog: RoiCatalog | None, width: int, height: int, depth: int) -> Limits | None:
    """Find the x, y and z limits of the regions in a catalog.

    Regions that do not overlap the ``width`` x ``height`` plane are ignored.
    If any region is active on every plane the z range spans the whole
    volume, whatever the other regions' planes are.

    Parameters
    ----------
    catalog : RoiCatalog | None
        The regions to enclose.
    width, height, depth : int
        Size of the volume the regions must fit into.

    Returns
    -------
    Limits | None
        The enclosing box, or None if the catalog is missing, empty, or no
        region lies inside the volume.
    """
    if catalog is None or catalog.count() == 0:
        return None

    x_min, x_max = width, 0
    y_min, y_max = height, 0
    z_min, z_max = depth, FIRST_PLANE
    all_planes = False
    found_plane = False

    for roi in catalog.all_rois():
        bounds, valid = clamp(roi.bounds, width, height)
        if not valid:
            continue

        x_min = min(bounds.x, x_min)
        x_max = max(bounds.right, x_max)
        y_min = min(bounds.y, y_min)
        y_max = max(bounds.bottom, y_max)

        if roi.is_on_all_planes:
            all_planes = True
        elif FIRST_PLANE <= roi.plane <= depth:
            z_min = min(roi.plane, z_min)
            z_max = max(roi.plane, z_max)
            found_plane = True
        else:
            logger.debug("ROI %r is tagged to plane %d outside 1..%d", roi.name, roi.plane, depth)

    if not (found_plane or all_planes):
        return None

    if all_planes:
        z_min, z_max = FIRST_PLANE, depth

    return Limits(x_min, x_max, y_min, y_max, z_min, z_max)
