"""Regions of interest and the catalog that holds them.

Each :class:`Region` carries the plane it is drawn on. The plane is decoded
once, when the region is built from its label, following the naming scheme
of interactive ROI managers: a label such as ``"0003-0012-0040"`` places the
region on plane 3, while a label that does not follow the scheme leaves the
region active on every plane.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

import numpy as np
import pandas as pd

from roivolume.models import FIRST_PLANE, Rect

logger = logging.getLogger(__name__)

#: Plane tag of regions that are active on every plane.
ALL_PLANES = None

# (minimum label length, separator offsets, width of the leading plane field)
_LABEL_FORMATS: tuple[tuple[int, tuple[int, int], int], ...] = (
    (14, (4, 9), 4),
    (17, (5, 11), 5),
    (20, (6, 13), 6),
)

REQUIRED_TABLE_COLUMNS = {"name", "x", "y", "width", "height"}

#: Plane field value that also marks a region active on every plane.
NO_PLANE_TAG = -1

# Decimal numbers as written by ROI managers: no underscores, no hex, an
# optional float/double suffix.
_NUMBER = re.compile(r"[+-]?(?:NaN|Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?[fFdD]?)")
_WHITESPACE = "".join(chr(code) for code in range(0x21))
_INT_MIN, _INT_MAX = -(2**31), 2**31 - 1


def _parse_plane_field(field: str) -> int | None:
    """Convert a label's leading field to an int, or None if it is not a number."""
    text = field.strip(_WHITESPACE)
    if not _NUMBER.fullmatch(text):
        return None
    value = float(text.rstrip("fFdD"))
    if math.isnan(value):
        return 0
    return int(max(_INT_MIN, min(value, _INT_MAX)))


def parse_plane_tag(label: str | None) -> int | None:
    """Decode the plane number encoded at the start of a ROI label.

    Parameters
    ----------
    label : str | None
        ROI name, e.g. ``"0003-0012-0040"``.

    Returns
    -------
    int | None
        The plane number, or :data:`ALL_PLANES` when the label does not
        encode one or encodes -1. A number outside the volume (``"0000-..."``) is returned
        as is; such a region is active on no plane.

    Examples
    --------
    >>> parse_plane_tag("0003-0012-0040")
    3
    >>> parse_plane_tag("00012-00001-00001")
    12
    >>> parse_plane_tag("tumour") is None
    True
    """
    if not label:
        return ALL_PLANES
    for min_length, (first_dash, second_dash), digits in _LABEL_FORMATS:
        if len(label) >= min_length and label[first_dash] == "-" and label[second_dash] == "-":
            plane = _parse_plane_field(label[:digits])
            if plane is None or plane == NO_PLANE_TAG:
                return ALL_PLANES
            return plane
    return ALL_PLANES


@dataclass(frozen=True, eq=False)
class Region:
    """A rectangle with an optional shape mask, tagged to a plane.

    A pixel at ``(x, y)`` belongs to the region iff it lies inside
    ``bounds`` and, when ``mask`` is given, ``mask[y - bounds.y, x - bounds.x]``
    is nonzero.
    """

    name: str | None
    bounds: Rect
    mask: np.ndarray | None = None
    plane: int | None = ALL_PLANES

    def __post_init__(self) -> None:
        if self.mask is not None:
            mask = np.asarray(self.mask)
            expected = (self.bounds.height, self.bounds.width)
            if mask.shape != expected:
                raise ValueError(f"Mask of ROI {self.name!r} has shape {mask.shape}, expected {expected}")
            object.__setattr__(self, "mask", mask)

    @classmethod
    def from_label(
        cls,
        name: str | None,
        x: int,
        y: int,
        width: int,
        height: int,
        mask: np.ndarray | None = None,
    ) -> Region:
        """Build a region whose plane tag is decoded from ``name``."""
        bounds = Rect(int(x), int(y), int(width), int(height))
        return cls(name=name, bounds=bounds, mask=mask, plane=parse_plane_tag(name))

    @property
    def is_on_all_planes(self) -> bool:
        return self.plane is ALL_PLANES


class RoiCatalog:
    """Ordered collection of regions owned by the host application.

    The measuring code only queries a catalog; adding and removing regions is
    left to whoever owns it. Do not modify a catalog while a measurement that
    reads it is running.
    """

    def __init__(self, rois: Iterable[Region] | None = None) -> None:
        self._rois = list(rois) if rois is not None else []

    def __len__(self) -> int:
        return len(self._rois)

    def __iter__(self) -> Iterator[Region]:
        return iter(tuple(self._rois))

    def count(self) -> int:
        return len(self._rois)

    def all_rois(self) -> tuple[Region, ...]:
        return tuple(self._rois)

    def rois_on_plane(self, plane: int, depth: int | None = None) -> list[Region]:
        return rois_on_plane(self, plane, depth=depth)

    def add(self, roi: Region) -> None:
        self._rois.append(roi)

    def remove(self, roi: Region) -> None:
        self._rois.remove(roi)

    def clear(self) -> None:
        self._rois.clear()


def rois_on_plane(catalog: RoiCatalog | None, plane: int, depth: int | None = None) -> list[Region]:
    """Return the regions active on a 1-based plane.

    Regions tagged to ``plane`` come first, followed by the regions that are
    active on every plane; both groups keep catalog order.

    Parameters
    ----------
    catalog : RoiCatalog | None
        The regions to search.
    plane : int
        1-based plane index.
    depth : int | None, optional
        Number of planes in the volume. When given, planes beyond it yield no
        regions.

    Returns
    -------
    list[Region]
        Active regions, empty when the catalog is missing or the plane is out
        of range.
    """
    if catalog is None or plane < FIRST_PLANE:
        return []
    if depth is not None and plane > depth:
        return []

    tagged: list[Region] = []
    everywhere: list[Region] = []
    for roi in catalog.all_rois():
        if roi.is_on_all_planes:
            everywhere.append(roi)
        elif roi.plane == plane:
            tagged.append(roi)
    return tagged + everywhere


def load_roi_catalog(table: pd.DataFrame | str | Path) -> RoiCatalog:
    """Read a catalog from a ROI table.

    The table is tab separated with columns ``name``, ``x``, ``y``,
    ``width`` and ``height``. An optional ``mask`` column holds paths to
    ``.npy`` arrays of shape ``(height, width)``; relative paths are resolved
    against the table's directory.

    Raises
    ------
    ValueError
        If required columns are missing.
    """
    base_dir: Path | None = None
    if isinstance(table, pd.DataFrame):
        df = table
    else:
        base_dir = Path(table).expanduser().resolve().parent
        df = pd.read_csv(table, sep="\t", dtype={"name": str})

    if not REQUIRED_TABLE_COLUMNS.issubset(df.columns):
        missing = REQUIRED_TABLE_COLUMNS - set(df.columns)
        raise ValueError(f"ROI table is missing required columns: {missing}")

    catalog = RoiCatalog()
    for row in df.itertuples(index=False):
        name = row.name if isinstance(row.name, str) else None
        mask = None
        mask_value = getattr(row, "mask", None)
        if isinstance(mask_value, str) and mask_value:
            mask_path = Path(mask_value).expanduser()
            if not mask_path.is_absolute() and base_dir is not None:
                mask_path = base_dir / mask_path
            mask = np.load(mask_path)
        catalog.add(Region.from_label(name, row.x, row.y, row.width, row.height, mask=mask))

    logger.debug("Loaded %d ROIs", len(catalog))
    return catalog
