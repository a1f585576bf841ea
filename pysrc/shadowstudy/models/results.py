"""Result data models."""

from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

import numpy as np

from .geometry import BoundingRect

if TYPE_CHECKING:
    from numpy.typing import NDArray


class AnalysisMode(str, Enum):
    INSTANT = "instant"
    DAILY = "daily"


@dataclass(frozen=True)
class ShadowCell:
    """
    One analysis cell.

    Attributes:
        x: Column index (grows east).
        y: Row index (grows north).
        is_shaded: Instant mode: True if the sun is blocked. Daily mode:
            True if the cell never received direct sun.
        sun_hours: Daily mode only: hours of direct sun (>= 0). None in
            instant mode.
    """

    x: int
    y: int
    is_shaded: bool
    sun_hours: float | None = None


@dataclass(frozen=True)
class ShadowStats:
    """
    Summary counts for a result.

    Attributes:
        total_cells: Number of analysed cells.
        shaded_cells: Instant mode: shaded cells. Daily mode: cells with no sun.
        lit_cells: ``total_cells - shaded_cells``.
        mean_sun_hours: Daily mode: mean sun hours over cells.
        min_sun_hours: Daily mode: minimum sun hours.
        max_sun_hours: Daily mode: maximum sun hours.
        daylight_hours: Daily mode: sampled daylight (samples x step), capped
            at the sunrise-to-sunset daylight when the site and date are known.
        sun_positions: Number of sun positions evaluated.
    """

    total_cells: int
    shaded_cells: int
    lit_cells: int
    mean_sun_hours: float | None = None
    min_sun_hours: float | None = None
    max_sun_hours: float | None = None
    daylight_hours: float | None = None
    sun_positions: int = 1


@dataclass(frozen=True, eq=False)
class ShadowAnalysisResult:
    """
    Results from one instant or daily shadow analysis.

    Produced fresh by every analysis and never mutated; re-running an
    analysis yields a new result. Grids share the HeightGrid layout
    (row 0 along the southern edge).

    Attributes:
        mode: INSTANT or DAILY.
        cells: Per-cell values, row-major from the south-west corner.
        cell_size: Cell size in meters.
        grid_width: Number of columns.
        grid_height: Number of rows.
        bounds: Planar rectangle covered.
        percent_shaded: Instant mode: exact shaded share in percent.
            None in daily mode.
        stats: Summary counts.
        timestamp: Instant mode: sun-position timestamp.
        date: Daily mode: analysed date.
        building_count: Buildings rasterised into the analysed grid.
        shaded: Instant mode: read-only boolean grid (True = shaded).
        sun_hours: Daily mode: read-only grid of sun hours.
    """

    mode: AnalysisMode
    cells: tuple[ShadowCell, ...]
    cell_size: float
    grid_width: int
    grid_height: int
    bounds: BoundingRect
    stats: ShadowStats
    percent_shaded: float | None = None
    timestamp: _dt.datetime | None = None
    date: _dt.date | None = None
    building_count: int = 0
    shaded: NDArray[np.bool_] | None = field(default=None, repr=False)
    sun_hours: NDArray[np.float64] | None = field(default=None, repr=False)

    def __post_init__(self):
        for name in ("shaded", "sun_hours"):
            grid = getattr(self, name)
            if grid is not None:
                grid = np.array(grid)
                grid.flags.writeable = False
                object.__setattr__(self, name, grid)

    @property
    def percent_shaded_display(self) -> float | None:
        """``percent_shaded`` rounded to one decimal place, for display only."""
        if self.percent_shaded is None:
            return None
        return round(self.percent_shaded, 1)

    def report(self) -> str:
        """Return a human-readable summary report."""
        lines = [
            f"Shadow analysis ({self.mode.value}): "
            f"{self.grid_width}×{self.grid_height} cells at {self.cell_size:g} m",
        ]
        if self.building_count:
            lines.append(f"  Buildings: {self.building_count}")
        if self.mode is AnalysisMode.INSTANT:
            when = f" at {self.timestamp:%Y-%m-%d %H:%M} UTC" if self.timestamp is not None else ""
            lines.append(f"  Shaded: {self.percent_shaded_display:.1f}%{when}")
        else:
            s = self.stats
            when = f" on {self.date.isoformat()}" if self.date is not None else ""
            lines.append(
                f"  Sun hours{when}: {s.min_sun_hours:.1f} to {s.max_sun_hours:.1f} h (mean {s.mean_sun_hours:.1f} h)"
            )
            lines.append(f"  Daylight: {s.daylight_hours:.2f} h over {s.sun_positions} sun positions")
            lines.append(f"  Never sunlit: {s.shaded_cells} of {s.total_cells} cells")
        return "\n".join(lines)


@dataclass(frozen=True)
class FacadeExposure:
    """
    Direct-sun hours per cardinal facade of one building.

    Orientation only: facades are not occluded by neighbours.
    """

    building_id: str | None
    north: float
    east: float
    south: float
    west: float
