"""
Terrain grid sampling component.

Rasterises a continuous terrain surface and building massing into a
HeightGrid:
- Terrain is sampled at every cell center
- Building tops overlay the terrain wherever a cell center falls inside a
  footprint; overlapping footprints keep the tallest top
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np
import shapely

from ..constants import DEFAULT_CELL_SIZE_M, MAX_GRID_CELLS
from ..errors import GridTooLargeError, InvalidGeometryError
from ..models.geometry import BoundingRect, BuildingMass, TerrainSurface
from ..models.grid import HeightGrid
from ..shadow_logging import get_logger
from ..utils import grid_dimension

logger = get_logger(__name__)


def build_grid(
    terrain: TerrainSurface | None,
    buildings: Iterable[BuildingMass],
    bounds: BoundingRect,
    cell_size: float = DEFAULT_CELL_SIZE_M,
    max_cells: int = MAX_GRID_CELLS,
) -> HeightGrid:
    """
    Build the analysis height grid.

    Args:
        terrain: Ground surface sampled at cell centers.
        buildings: Building massing; an empty iterable gives a terrain-only grid.
        bounds: Planar analysis rectangle (meters).
        cell_size: Cell edge length in meters. Any positive value is valid;
            cardinality grows quadratically as it shrinks.
        max_cells: Largest grid accepted.

    Returns:
        HeightGrid with ``ceil(width / cell_size)`` columns and
        ``ceil(height / cell_size)`` rows, row 0 along ``bounds.min_y``.

    Raises:
        InvalidGeometryError: Missing terrain or non-positive cell size.
        GridTooLargeError: Grid would exceed ``max_cells``.
    """
    if terrain is None:
        raise InvalidGeometryError("Terrain surface is not available", field="terrain", expected="TerrainSurface")
    if bounds is None:
        raise InvalidGeometryError("Analysis bounds are not available", field="bounds", expected="BoundingRect")
    if not cell_size > 0:
        raise InvalidGeometryError(
            f"Cell size must be positive, got {cell_size}", field="cell_size", got=str(cell_size)
        )

    columns = grid_dimension(bounds.width, cell_size, scale=max(abs(bounds.min_x), abs(bounds.max_x)))
    rows = grid_dimension(bounds.height, cell_size, scale=max(abs(bounds.min_y), abs(bounds.max_y)))
    if rows * columns == 0:
        raise InvalidGeometryError("Grid has no cells", field="grid", got=f"{rows}×{columns}")
    if rows * columns > max_cells:
        raise GridTooLargeError(rows * columns, max_cells)

    xs = bounds.min_x + (np.arange(columns) + 0.5) * cell_size
    ys = bounds.min_y + (np.arange(rows) + 0.5) * cell_size
    grid_x, grid_y = np.meshgrid(xs, ys)

    heights = np.asarray(terrain.sample(grid_x, grid_y), dtype=np.float64)
    if heights.shape != grid_x.shape:
        heights = np.broadcast_to(heights, grid_x.shape).astype(np.float64)
    if not np.all(np.isfinite(heights)):
        raise InvalidGeometryError("Terrain sampling produced NaN or infinite elevations", field="terrain")

    covered = np.zeros(heights.shape, dtype=bool)
    building_count = 0
    for building in buildings:
        building_count += 1
        inside = shapely.contains_xy(building.polygon, grid_x, grid_y)
        if not inside.any():
            logger.debug(f"Building {building.id or building_count} covers no cell centers")
            continue
        heights = np.where(inside, np.maximum(heights, building.top_height), heights)
        covered |= inside

    logger.debug(
        f"Height grid built: {columns}×{rows} cells at {cell_size:g} m, "
        f"{building_count} buildings over {int(covered.sum())} cells"
    )

    return HeightGrid(
        heights=heights,
        bounds=bounds,
        cell_size=float(cell_size),
        building_count=building_count,
        building_cell_count=int(covered.sum()),
    )
