"""Crop a volume to the regions of a catalog."""

from __future__ import annotations

import logging

import numpy as np

from roivolume.errors import InvalidInputError, InvalidParameterError
from roivolume.models import Volume
from roivolume.roi.bounds import clip_region, region_limits
from roivolume.roi.catalog import RoiCatalog, rois_on_plane
from roivolume.utils.parallel import for_each_plane

logger = logging.getLogger(__name__)


def _check_fill_value(fill_value: int, dtype: np.dtype) -> None:
    if np.issubdtype(dtype, np.integer):
        info = np.iinfo(dtype)
        if not info.min <= fill_value <= info.max:
            raise InvalidParameterError(
                f"Fill value {fill_value} does not fit in {dtype} ({info.min}..{info.max})",
            )


def crop_to_rois(
    volume: Volume,
    catalog: RoiCatalog | None,
    fill_background: bool = False,
    fill_value: int = 0,
    padding: int = 0,
    *,
    n_jobs: int = 1,
) -> Volume | None:
    """Crop a volume to the limits of the regions in a catalog.

    Only pixels covered by a region active on their plane are copied; the
    rest of each output plane is background (``fill_value`` when
    ``fill_background`` is set, otherwise 0). Planes inside the z limits that
    have no active region are still emitted so the output stays contiguous.

    Parameters
    ----------
    volume : Volume
        The image to crop. It is not modified.
    catalog : RoiCatalog | None
        Regions selecting the pixels to keep.
    fill_background : bool, optional
        Fill the background of the cropped image, by default False.
    fill_value : int, optional
        Background value used when ``fill_background`` is set, by default 0.
    padding : int, optional
        Number of background pixels added to each side in x, y and z, by
        default 0.
    n_jobs : int, optional
        Number of planes filled concurrently, by default 1.

    Returns
    -------
    Volume | None
        A new volume with the source dtype and calibration, or None if the
        catalog has no region inside the volume.

    Raises
    ------
    InvalidInputError
        If ``volume`` is None.
    InvalidParameterError
        If ``padding`` is negative or ``fill_value`` does not fit the dtype.
    """
    if volume is None:
        raise InvalidInputError("Must have an input image")
    if padding < 0:
        raise InvalidParameterError(f"Padding must be >= 0, got {padding}")
    if fill_background:
        _check_fill_value(fill_value, volume.data.dtype)

    limits = region_limits(catalog, volume.width, volume.height, volume.depth)
    if limits is None:
        logger.info("No ROI lies inside %s; nothing to crop", volume.title)
        return None

    cropped_width = limits.x_max - limits.x_min + 2 * padding
    cropped_height = limits.y_max - limits.y_min + 2 * padding
    cropped_depth = limits.z_max - limits.z_min + 1 + 2 * padding
    background = fill_value if fill_background else 0

    target = np.full((cropped_depth, cropped_height, cropped_width), background, dtype=volume.data.dtype)
    x_offset = padding - limits.x_min
    y_offset = padding - limits.y_min

    def copy_plane(source_z: int) -> None:
        target_plane = target[source_z - limits.z_min + padding]
        source_plane = volume.plane(source_z)
        for roi in rois_on_plane(catalog, source_z, depth=volume.depth):
            clipped = clip_region(roi, volume.width, volume.height)
            if clipped is None:
                continue
            rows = slice(clipped.bounds.y + y_offset, clipped.bounds.bottom + y_offset)
            columns = slice(clipped.bounds.x + x_offset, clipped.bounds.right + x_offset)
            source = source_plane[clipped.rows, clipped.columns]
            if clipped.mask is None:
                target_plane[rows, columns] = source
            else:
                target_plane[rows, columns][clipped.mask] = source[clipped.mask]

    for_each_plane(copy_plane, range(limits.z_min, limits.z_max + 1), n_jobs=n_jobs)

    logger.debug(
        "Cropped %s to x=%d..%d y=%d..%d z=%d..%d with padding %d",
        volume.title,
        *limits.as_tuple(),
        padding,
    )
    return Volume(target, calibration=volume.calibration, title=f"{volume.title}_cropped")
