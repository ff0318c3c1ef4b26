"""Image loading, saving and type checks."""

from __future__ import annotations

import logging
from pathlib import Path

import nibabel as nib
import numpy as np

from roivolume.models import Calibration, Volume

logger = logging.getLogger(__name__)

BINARY_BLACK = 0x00
BINARY_WHITE = 0xFF

_GRAYSCALE_DTYPES = (np.dtype(np.uint8), np.dtype(np.uint16))
_NIFTI_UNITS = {"mm", "micron", "meter"}


def _load_nifti(img: nib.Nifti1Image | str | Path) -> nib.Nifti1Image:
    """Return a NIfTI image, loading it from disk when given a path."""
    if isinstance(img, (str, Path)):
        return nib.load(str(img))
    return img


def is_binary(volume: Volume | None) -> bool:
    """Check if a volume is 8-bit and holds only black (0) and white (255)."""
    if volume is None or volume.data.dtype != np.uint8:
        return False
    black = np.count_nonzero(volume.data == BINARY_BLACK)
    white = np.count_nonzero(volume.data == BINARY_WHITE)
    return black + white == volume.data.size


def is_grayscale(volume: Volume | None) -> bool:
    """Check if a volume holds unsigned 8 or 16-bit intensities."""
    if volume is None:
        return False
    return volume.data.dtype in _GRAYSCALE_DTYPES


def is_voxel_isotropic(volume: Volume | None, tolerance: float = 0.0) -> bool:
    """Check if voxel width, height and depth are equal within a tolerance.

    Parameters
    ----------
    volume : Volume | None
        Volume to test.
    tolerance : float, optional
        Accepted fractional deviation from equal length, clamped to
        ``[0.0, 1.0]``, by default 0.0.

    Returns
    -------
    bool
        True if the voxels sit on a cubic grid. Depth is ignored for a single
        plane.
    """
    if volume is None:
        return False

    tolerance = min(max(tolerance, 0.0), 1.0)
    low = 1.0 - tolerance
    high = 1.0 + tolerance
    cal = volume.calibration

    def _ratio(a: float, b: float) -> float:
        return a / b if a > b else b / a

    if not low <= _ratio(cal.pixel_width, cal.pixel_height) <= high:
        return False
    if volume.depth == 1:
        return True
    return low <= _ratio(cal.pixel_width, cal.pixel_depth) <= high


def load_volume(img: nib.Nifti1Image | str | Path, title: str | None = None) -> Volume:
    """Read a NIfTI image into a :class:`~roivolume.models.Volume`.

    NIfTI stores data as ``(x, y, z)``; planes are taken along z. The raw
    on-disk dtype is kept so 8 and 16-bit images stay integer.

    Parameters
    ----------
    img : nib.Nifti1Image | str | Path
        Image or path to one.
    title : str | None, optional
        Title of the volume, by default the file name without extensions.

    Raises
    ------
    ValueError
        If the image has more than three dimensions.
    """
    nifti = _load_nifti(img)
    data = np.asanyarray(nifti.dataobj)
    if data.ndim == 2:
        data = data[..., np.newaxis]
    if data.ndim != 3:
        raise ValueError(f"Expected a 2D or 3D image, got shape {data.shape}.")

    zooms = tuple(float(z) for z in nifti.header.get_zooms()[:3])
    zooms = zooms + (1.0,) * (3 - len(zooms))
    spatial_unit = nifti.header.get_xyzt_units()[0]
    unit = spatial_unit if spatial_unit in _NIFTI_UNITS else "pixel"
    calibration = Calibration(
        pixel_width=zooms[0] or 1.0,
        pixel_height=zooms[1] or 1.0,
        pixel_depth=zooms[2] or 1.0,
        unit=unit,
    )

    if title is None:
        if isinstance(img, (str, Path)):
            title = Path(img).name.split(".")[0]
        else:
            title = "volume"

    volume = Volume(np.ascontiguousarray(np.transpose(data, (2, 1, 0))), calibration=calibration, title=title)
    logger.debug("Loaded %s with shape %s and dtype %s", title, volume.shape, volume.data.dtype)
    return volume


def save_volume(volume: Volume, path: str | Path) -> Path:
    """Write a volume to a NIfTI file, keeping its dtype and voxel size."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    cal = volume.calibration
    affine = np.diag([cal.pixel_width, cal.pixel_height, cal.pixel_depth, 1.0])
    nifti = nib.Nifti1Image(np.transpose(volume.data, (2, 1, 0)), affine)
    if cal.unit in _NIFTI_UNITS:
        nifti.header.set_xyzt_units(xyz=cal.unit)
    nib.save(nifti, str(path))
    logger.debug("Wrote %s to %s", volume.title, path)
    return path
