"""Triangulated surfaces of indicator volumes and their enclosed volume."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

import numpy as np
from skimage import measure

logger = logging.getLogger(__name__)

#: Isovalue between the black (0) and white (255) voxels of an indicator volume.
DEFAULT_ISOVALUE = 128


@dataclass(frozen=True, eq=False)
class Mesh:
    """A triangular surface.

    ``vertices`` is an ``(N, 3)`` float array in physical units, ``faces`` an
    ``(M, 3)`` integer array of vertex indices.
    """

    vertices: np.ndarray = field(default_factory=lambda: np.empty((0, 3), dtype=np.float64))
    faces: np.ndarray = field(default_factory=lambda: np.empty((0, 3), dtype=np.int64))

    @property
    def is_empty(self) -> bool:
        return len(self.faces) == 0

    @property
    def signed_volume(self) -> float:
        """Oriented enclosed volume by the divergence theorem.

        Each face ``(v0, v1, v2)`` contributes ``v0 . (v1 x v2) / 6``; the sign
        follows the face winding.
        """
        if self.is_empty:
            return 0.0
        v0 = self.vertices[self.faces[:, 0]]
        v1 = self.vertices[self.faces[:, 1]]
        v2 = self.vertices[self.faces[:, 2]]
        return float(np.einsum("ij,ij->i", v0, np.cross(v1, v2)).sum() / 6.0)

    @property
    def volume(self) -> float:
        """Absolute enclosed volume."""
        return abs(self.signed_volume)


class Triangulator(Protocol):
    """Turns an indicator volume into a closed surface."""

    def triangulate(
        self,
        indicator: np.ndarray,
        isovalue: float,
        resampling: int,
        spacing: tuple[float, float, float],
    ) -> Mesh: ...


class MarchingCubesTriangulator:
    """Surface extraction with scikit-image's marching cubes.

    The indicator is zero padded on every side so surfaces touching the
    volume border still close. ``resampling`` is used as the marching cubes
    step size; higher values give coarser, simpler surfaces.
    """

    def __init__(self, allow_degenerate: bool = False) -> None:
        self.allow_degenerate = allow_degenerate

    def triangulate(
        self,
        indicator: np.ndarray,
        isovalue: float = DEFAULT_ISOVALUE,
        resampling: int = 1,
        spacing: tuple[float, float, float] = (1.0, 1.0, 1.0),
    ) -> Mesh:
        """Extract the isosurface of ``indicator`` at ``isovalue``.

        Parameters
        ----------
        indicator : np.ndarray
            3D array in ``(z, y, x)`` order.
        isovalue : float, optional
            Surface level, by default 128.
        resampling : int, optional
            Step between sampled voxels, values below 1 mean 1.
        spacing : tuple[float, float, float], optional
            Voxel size in ``(z, y, x)`` order.

        Returns
        -------
        Mesh
            The surface, empty if no voxel reaches ``isovalue``.
        """
        if indicator.size == 0 or indicator.max() < isovalue:
            return Mesh()

        step = max(int(resampling), 1)
        padded = np.pad(indicator.astype(np.float32), step, mode="constant", constant_values=0)
        vertices, faces, _, _ = measure.marching_cubes(
            padded,
            level=isovalue,
            spacing=spacing,
            step_size=step,
            allow_degenerate=self.allow_degenerate,
        )
        logger.debug("Marching cubes produced %d vertices and %d faces", len(vertices), len(faces))
        return Mesh(vertices=vertices.astype(np.float64), faces=faces.astype(np.int64))
