"""Shared validation for the volume fraction estimators."""

from __future__ import annotations

from dataclasses import dataclass

from roivolume.errors import (
    InvalidInputError,
    InvalidParameterError,
    InvalidThresholdError,
    UnsupportedFormatError,
)
from roivolume.models import Volume, VolumeFractionConfig
from roivolume.roi.catalog import RoiCatalog
from roivolume.utils.image import is_binary, is_grayscale

SUPPORTED_BIT_DEPTHS = (8, 16)

#: Default foreground range per bit depth.
DEFAULT_THRESHOLDS: dict[int, tuple[int, int]] = {
    8: (128, 255),
    16: (2424, 11_215),
}


@dataclass(frozen=True)
class Thresholds:
    """Inclusive foreground intensity range."""

    minimum: int
    maximum: int


def threshold_bound(bit_depth: int) -> int:
    """Largest intensity representable with ``bit_depth`` bits."""
    return (1 << bit_depth) - 1


def default_thresholds(bit_depth: int) -> Thresholds:
    """Return the default foreground range of an 8 or 16-bit image."""
    try:
        low, high = DEFAULT_THRESHOLDS[bit_depth]
    except KeyError:
        raise UnsupportedFormatError(f"Input image bit depth must be 8 or 16, got {bit_depth}") from None
    return Thresholds(low, high)


def check_volume(volume: Volume | None) -> Volume:
    """Validate that a volume can be measured.

    Raises
    ------
    InvalidInputError
        If there is no volume.
    UnsupportedFormatError
        If the bit depth is not 8 or 16, or the image is neither binary nor
        grayscale.
    """
    if volume is None:
        raise InvalidInputError("Must have an input image")
    if volume.bit_depth not in SUPPORTED_BIT_DEPTHS:
        raise UnsupportedFormatError("Input image bit depth must be 8 or 16")
    if not (is_binary(volume) or is_grayscale(volume)):
        raise UnsupportedFormatError("Need a binary or grayscale image")
    return volume


def resolve_thresholds(volume: Volume, config: VolumeFractionConfig) -> Thresholds:
    """Fill in missing thresholds and check them against the bit depth.

    Raises
    ------
    InvalidThresholdError
        If a threshold is out of range or ``min > max``.
    """
    defaults = default_thresholds(volume.bit_depth)
    low = defaults.minimum if config.min_threshold is None else int(config.min_threshold)
    high = defaults.maximum if config.max_threshold is None else int(config.max_threshold)
    bound = threshold_bound(volume.bit_depth)

    if not 0 <= low <= bound:
        raise InvalidThresholdError(low, high, bound, "Min threshold out of bounds")
    if not 0 <= high <= bound:
        raise InvalidThresholdError(low, high, bound, "Max threshold out of bounds")
    if low > high:
        raise InvalidThresholdError(low, high, bound, "Minimum threshold must be less or equal to maximum threshold")
    return Thresholds(low, high)


def check_catalog(catalog: RoiCatalog | None) -> RoiCatalog | None:
    """Reject a catalog that was passed explicitly but holds no regions."""
    if catalog is not None and catalog.count() == 0:
        raise InvalidParameterError("May not use an empty ROI catalog")
    return catalog


def check_resampling(resampling: int) -> int:
    """Reject negative surface resampling."""
    if resampling < 0:
        raise InvalidParameterError(f"Resampling value must be >= 0, got {resampling}")
    return resampling
