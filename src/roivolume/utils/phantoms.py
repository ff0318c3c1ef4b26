"""Synthetic test volumes."""

from __future__ import annotations

import numpy as np

from roivolume.errors import InvalidParameterError
from roivolume.models import Volume


def _check_box(width: int, height: int, depth: int, padding: int) -> None:
    if width <= 0:
        raise InvalidParameterError("Width must be positive")
    if height <= 0:
        raise InvalidParameterError("Height must be positive")
    if depth <= 0:
        raise InvalidParameterError("Depth must be positive")
    if padding < 0:
        raise InvalidParameterError("Padding must be >= 0")


def create_cuboid(width: int, height: int, depth: int, color: int = 0xFF, padding: int = 10) -> Volume:
    """Create an 8-bit volume holding a solid cuboid.

    The cuboid is surrounded by ``padding`` black voxels on every side, so
    the volume measures ``(depth + 2p, height + 2p, width + 2p)``.
    """
    _check_box(width, height, depth, padding)
    data = np.zeros((depth + 2 * padding, height + 2 * padding, width + 2 * padding), dtype=np.uint8)
    data[padding : padding + depth, padding : padding + height, padding : padding + width] = color
    return Volume(data, title="Cuboid")


def create_wireframe_cuboid(width: int, height: int, depth: int, padding: int = 0) -> Volume:
    """Create an 8-bit volume with the 1-pixel wide edges of a box.

    The first and last planes of the box hold its rectangular outline; the
    planes in between only hold the four corner pixels.
    """
    _check_box(width, height, depth, padding)
    data = np.zeros((depth + 2 * padding, height + 2 * padding, width + 2 * padding), dtype=np.uint8)
    top, bottom = padding, padding + height - 1
    left, right = padding, padding + width - 1
    first, last = padding, padding + depth - 1

    for z in (first, last):
        data[z, top, left : right + 1] = 0xFF
        data[z, bottom, left : right + 1] = 0xFF
        data[z, top : bottom + 1, left] = 0xFF
        data[z, top : bottom + 1, right] = 0xFF

    data[first + 1 : last, top, left] = 0xFF
    data[first + 1 : last, top, right] = 0xFF
    data[first + 1 : last, bottom, left] = 0xFF
    data[first + 1 : last, bottom, right] = 0xFF
    return Volume(data, title="Wire-frame cuboid")
