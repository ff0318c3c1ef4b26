"""Core data model: volumes, calibration, rectangles, limits and results."""

from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

FIRST_PLANE = 1


@dataclass(frozen=True)
class Calibration:
    """Physical size of one voxel along each axis."""

    pixel_width: float = 1.0
    pixel_height: float = 1.0
    pixel_depth: float = 1.0
    unit: str = "pixel"

    def __post_init__(self) -> None:
        for name in ("pixel_width", "pixel_height", "pixel_depth"):
            if not getattr(self, name) > 0:
                raise ValueError(f"Calibration {name} must be positive, got {getattr(self, name)}")

    @property
    def voxel_volume(self) -> float:
        """Volume of a single voxel in ``unit`` cubed."""
        return self.pixel_width * self.pixel_height * self.pixel_depth

    @property
    def spacing(self) -> tuple[float, float, float]:
        """Voxel size in array axis order ``(z, y, x)``."""
        return (self.pixel_depth, self.pixel_height, self.pixel_width)


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in plane pixel coordinates."""

    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return max(self.width, 0) * max(self.height, 0)


@dataclass(eq=False)
class Volume:
    """A stack of equally sized 2D planes.

    Pixel data is held as a numpy array of shape ``(depth, height, width)``.
    Planes are addressed 1-based through :meth:`plane`; the estimators and the
    cropper only ever read from it.

    Parameters
    ----------
    data : np.ndarray
        2D (single plane) or 3D integer image data.
    calibration : Calibration, optional
        Voxel size, by default ``1 x 1 x 1`` pixels.
    title : str, optional
        Label used when reporting results.
    """

    data: np.ndarray
    calibration: Calibration = field(default_factory=Calibration)
    title: str = "volume"

    def __post_init__(self) -> None:
        data = np.asarray(self.data)
        if data.ndim == 2:
            data = data[np.newaxis, ...]
        if data.ndim != 3:
            raise ValueError(f"Volume data must be 2D or 3D, got {data.ndim} dimensions.")
        if min(data.shape) < 1:
            raise ValueError(f"Volume dimensions must be positive, got shape {data.shape}.")
        self.data = data

    @property
    def width(self) -> int:
        return int(self.data.shape[2])

    @property
    def height(self) -> int:
        return int(self.data.shape[1])

    @property
    def depth(self) -> int:
        return int(self.data.shape[0])

    @property
    def shape(self) -> tuple[int, int, int]:
        return (self.depth, self.height, self.width)

    @property
    def bit_depth(self) -> int:
        """Bits per sample as reported by the dtype (8 for ``uint8`` etc.)."""
        return int(self.data.dtype.itemsize * 8)

    def plane(self, index: int) -> np.ndarray:
        """Return a read-only view of the 1-based plane ``index``."""
        if index < FIRST_PLANE or index > self.depth:
            raise IndexError(f"Plane {index} out of range 1..{self.depth}")
        view = self.data[index - 1].view()
        view.flags.writeable = False
        return view

    def planes(self) -> range:
        """1-based indices of all planes."""
        return range(FIRST_PLANE, self.depth + 1)


@dataclass(frozen=True)
class Limits:
    """Bounding box of a catalog's valid regions over a volume.

    ``x``/``y`` ranges are half-open pixel edges, ``z`` is an inclusive range
    of 1-based plane indices.
    """

    x_min: int
    x_max: int
    y_min: int
    y_max: int
    z_min: int
    z_max: int

    def as_tuple(self) -> tuple[int, int, int, int, int, int]:
        return (self.x_min, self.x_max, self.y_min, self.y_max, self.z_min, self.z_max)


@dataclass(frozen=True)
class VolumeFractionResult:
    """Foreground and total volume of a sample in physical units."""

    foreground_volume: float
    total_volume: float

    @property
    def ratio(self) -> float:
        """Foreground over total volume, ``nan`` when the total is zero."""
        if self.total_volume == 0:
            return math.nan
        return self.foreground_volume / self.total_volume


@dataclass(frozen=True)
class VolumeFractionConfig:
    """Immutable parameters of a volume fraction run.

    Thresholds left as ``None`` resolve to the defaults of the image's bit
    depth (see :func:`roivolume.fraction.base.default_thresholds`).
    """

    min_threshold: int | None = None
    max_threshold: int | None = None
    resampling: int = 6
    n_jobs: int = 1
