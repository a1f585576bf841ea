"""
Shadow computation component.

Handles:
- Ray marching from every cell toward the sun over the height grid
- The below-horizon fast path (everything shaded)
- Packaging the shaded mask as an instant-mode ShadowAnalysisResult

The march is vectorised over the whole grid: step k moves every ray one
cell size toward the sun and compares the sampled height against the
clearance line ``k * cell_size * tan(altitude)`` above each origin cell.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

import numpy as np

from ..errors import InvalidGeometryError
from ..models.results import AnalysisMode, ShadowAnalysisResult, ShadowCell, ShadowStats
from ..shadow_logging import get_logger

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from ..models.grid import HeightGrid
    from ..models.sun import SunPosition

logger = get_logger(__name__)


def require_cells(grid: HeightGrid | None) -> None:
    """Raise InvalidGeometryError unless ``grid`` is a grid with cells."""
    if grid is None or getattr(grid, "cell_count", 0) == 0:
        raise InvalidGeometryError("Height grid is not available or has no cells", field="grid")


def compute_shadow_mask(sun: SunPosition, grid: HeightGrid) -> NDArray[np.bool_]:
    """
    Shade every cell of the grid for one sun position.

    A cell is shaded when any sample along its ray toward the sun rises
    above the line of sight, i.e. the elevation angle needed to clear the
    sample exceeds the sun altitude. Samples are taken every ``cell_size``
    meters, nearest-cell, up to ``relief / tan(altitude)`` (no obstruction
    can be higher than the grid relief), clamped to the grid diagonal.

    Args:
        sun: Sun position. Altitude <= 0 shades every cell.
        grid: Height grid.

    Returns:
        Boolean array shaped like ``grid.heights``; True = shaded.

    Raises:
        InvalidGeometryError: Grid missing or without cells.
    """
    require_cells(grid)

    shape = grid.shape
    if sun.altitude_degrees <= 0:
        return np.ones(shape, dtype=bool)

    relief = grid.relief
    # Zero relief caps the march distance at 0: no ray takes a step
    if relief <= 0:
        return np.zeros(shape, dtype=bool)

    heights = grid.heights
    rows, cols = shape
    cell_size = grid.cell_size
    tan_alt = math.tan(math.radians(sun.altitude_degrees))
    max_distance = min(relief / tan_alt, grid.diagonal)
    n_steps = math.ceil(max_distance / cell_size)

    # Unit step toward the sun in (column, row) space; rows grow north
    az = math.radians(sun.azimuth_degrees)
    step_col = math.sin(az)
    step_row = math.cos(az)

    row_idx, col_idx = np.indices(shape, dtype=np.float64)
    shaded = np.zeros(shape, dtype=bool)

    for k in range(1, n_steps + 1):
        c = np.floor(col_idx + k * step_col + 0.5).astype(np.intp)
        r = np.floor(row_idx + k * step_row + 0.5).astype(np.intp)
        inside = (c >= 0) & (c < cols) & (r >= 0) & (r < rows)
        if not inside.any():
            # Every ray has left the grid; later steps only move further out
            break
        sample = heights[np.clip(r, 0, rows - 1), np.clip(c, 0, cols - 1)]
        shaded |= inside & (sample - heights > k * cell_size * tan_alt)

    return shaded


def cells_from_grids(
    shaded: NDArray[np.bool_],
    sun_hours: NDArray[np.floating] | None = None,
) -> tuple[ShadowCell, ...]:
    """Per-cell records, row-major from the south-west corner."""
    rows, cols = shaded.shape
    cells = []
    for iy in range(rows):
        for ix in range(cols):
            hours = None if sun_hours is None else float(sun_hours[iy, ix])
            cells.append(ShadowCell(x=ix, y=iy, is_shaded=bool(shaded[iy, ix]), sun_hours=hours))
    return tuple(cells)


def cast_shadows(sun: SunPosition, grid: HeightGrid) -> list[ShadowCell]:
    """
    Instant shadow test for every cell.

    Returns:
        ShadowCell per grid cell with ``is_shaded`` populated and
        ``sun_hours`` unset.
    """
    return list(cells_from_grids(compute_shadow_mask(sun, grid)))


def compute_instant_shadows(sun: SunPosition, grid: HeightGrid) -> ShadowAnalysisResult:
    """
    Instant-mode analysis: which cells are in shadow at one sun position.

    ``percent_shaded`` is exact; use ``percent_shaded_display`` for the
    one-decimal display value.

    Raises:
        InvalidGeometryError: Grid missing or without cells.
    """
    shaded = compute_shadow_mask(sun, grid)
    total = int(shaded.size)
    shaded_count = int(shaded.sum())
    percent = shaded_count / total * 100.0

    logger.info(
        f"Instant shadows at altitude {sun.altitude_degrees:.1f}°, azimuth {sun.azimuth_degrees:.1f}°: "
        f"{percent:.1f}% shaded"
    )

    return ShadowAnalysisResult(
        mode=AnalysisMode.INSTANT,
        cells=cells_from_grids(shaded),
        cell_size=grid.cell_size,
        grid_width=grid.columns,
        grid_height=grid.rows,
        bounds=grid.bounds,
        stats=ShadowStats(total_cells=total, shaded_cells=shaded_count, lit_cells=total - shaded_count),
        percent_shaded=percent,
        timestamp=sun.timestamp,
        building_count=grid.building_count,
        shaded=shaded,
    )
