"""Height grid model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from ..errors import InvalidGeometryError
from ..utils import grid_dimension
from .geometry import BoundingRect

if TYPE_CHECKING:
    from numpy.typing import NDArray


@dataclass(frozen=True, eq=False)
class HeightGrid:
    """
    Immutable raster of surface elevations (terrain plus building tops).

    Layout: ``heights[row, col]`` with column index growing east (x) and row
    index growing north (y); row 0 lies along ``bounds.min_y``.

    Invariant: ``columns == ceil(bounds.width / cell_size)`` and
    ``rows == ceil(bounds.height / cell_size)``.

    Attributes:
        heights: Read-only (rows, columns) float64 array of elevations in meters.
        bounds: Planar rectangle the grid covers.
        cell_size: Edge length of a square cell in meters.
        building_count: Number of buildings rasterised into the grid.
        building_cell_count: Number of cells raised by at least one building.
    """

    heights: NDArray[np.float64]
    bounds: BoundingRect
    cell_size: float
    building_count: int = 0
    building_cell_count: int = 0

    def __post_init__(self):
        if not self.cell_size > 0:
            raise InvalidGeometryError(
                f"Cell size must be positive, got {self.cell_size}", field="cell_size", got=str(self.cell_size)
            )
        arr = np.array(self.heights, dtype=np.float64)
        if arr.ndim != 2 or arr.size == 0:
            raise InvalidGeometryError(
                "Height grid has no cells", field="grid", expected="non-empty 2D array", got=str(arr.shape)
            )
        if not np.all(np.isfinite(arr)):
            raise InvalidGeometryError("Height grid contains NaN or infinite values", field="grid")

        expected = (
            grid_dimension(
                self.bounds.height, self.cell_size, scale=max(abs(self.bounds.min_y), abs(self.bounds.max_y))
            ),
            grid_dimension(
                self.bounds.width, self.cell_size, scale=max(abs(self.bounds.min_x), abs(self.bounds.max_x))
            ),
        )
        if arr.shape != expected:
            raise InvalidGeometryError(
                "Height grid shape does not match its bounds and cell size",
                field="grid",
                expected=str(expected),
                got=str(arr.shape),
            )

        arr.flags.writeable = False
        object.__setattr__(self, "heights", arr)

    @classmethod
    def from_array(
        cls,
        heights: NDArray[np.floating],
        cell_size: float,
        origin: tuple[float, float] = (0.0, 0.0),
    ) -> HeightGrid:
        """
        Wrap an existing (rows, columns) height array.

        Args:
            heights: Elevations, row 0 along the southern edge.
            cell_size: Cell size in meters.
            origin: (x, y) of the south-west grid corner.

        Example:
            >>> grid = HeightGrid.from_array(np.zeros((50, 50)), cell_size=2.0)
            >>> grid.bounds
            BoundingRect(min_x=0.0, max_x=100.0, min_y=0.0, max_y=100.0)
        """
        arr = np.asarray(heights, dtype=np.float64)
        if arr.ndim != 2 or arr.size == 0:
            raise InvalidGeometryError(
                "Height grid has no cells", field="grid", expected="non-empty 2D array", got=str(arr.shape)
            )
        if not cell_size > 0:
            raise InvalidGeometryError(f"Cell size must be positive, got {cell_size}", field="cell_size")
        rows, cols = arr.shape
        x0, y0 = origin
        bounds = BoundingRect(
            min_x=float(x0),
            max_x=float(x0) + cols * cell_size,
            min_y=float(y0),
            max_y=float(y0) + rows * cell_size,
        )
        return cls(heights=arr, bounds=bounds, cell_size=float(cell_size))

    @property
    def rows(self) -> int:
        return self.heights.shape[0]

    @property
    def columns(self) -> int:
        return self.heights.shape[1]

    @property
    def shape(self) -> tuple[int, int]:
        return self.heights.shape

    @property
    def cell_count(self) -> int:
        return self.heights.size

    @property
    def relief(self) -> float:
        """Elevation range (max - min) in meters."""
        return float(self.heights.max() - self.heights.min())

    @property
    def diagonal(self) -> float:
        """Length of the grid diagonal in meters."""
        return float(np.hypot(self.columns, self.rows) * self.cell_size)

    def cell_center(self, ix: int, iy: int) -> tuple[float, float]:
        """Planar (x, y) of the center of cell column ``ix``, row ``iy``."""
        return (
            self.bounds.min_x + (ix + 0.5) * self.cell_size,
            self.bounds.min_y + (iy + 0.5) * self.cell_size,
        )

    def cell_centers(self) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """(x, y) arrays of all cell centers, each shaped like ``heights``."""
        xs = self.bounds.min_x + (np.arange(self.columns) + 0.5) * self.cell_size
        ys = self.bounds.min_y + (np.arange(self.rows) + 0.5) * self.cell_size
        return np.meshgrid(xs, ys)
