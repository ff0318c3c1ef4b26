"""Exceptions raised by the region engine and the volume estimators.

Empty regions are not errors: :func:`~roivolume.roi.bounds.region_limits` and
:func:`~roivolume.roi.crop.crop_to_rois` return ``None`` instead of raising.
"""

from __future__ import annotations


class VolumeFractionError(ValueError):
    """Base class for invalid calls into the volume fraction engine."""


class InvalidInputError(VolumeFractionError):
    """Raised when a required volume (or catalog) is missing."""


class UnsupportedFormatError(VolumeFractionError):
    """Raised for bit depths other than 8/16 or non binary/grayscale images."""


class InvalidThresholdError(VolumeFractionError):
    """Raised when thresholds are inverted or outside the bit depth's range."""

    def __init__(self, min_threshold: int, max_threshold: int, bound: int, reason: str):
        """Initialize the error."""
        self.min_threshold = min_threshold
        self.max_threshold = max_threshold
        self.bound = bound
        super().__init__(f"{reason} (min={min_threshold}, max={max_threshold}, range=0..{bound})")


class InvalidParameterError(VolumeFractionError):
    """Raised for negative padding/resampling or an explicitly empty catalog."""
