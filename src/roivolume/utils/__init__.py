"""Utility functions for image loading and processing.

Internal utilities for reading and writing NIfTI volumes, checking image
types and running per-plane work in parallel.
"""

from roivolume.utils.image import _load_nifti, is_binary, is_grayscale, load_volume, save_volume

__all__ = ["_load_nifti", "is_binary", "is_grayscale", "load_volume", "save_volume"]
