"""
Sun-hours aggregation component.

Runs the shadow caster for every sample of a sun path and accumulates, per
cell, the time spent in direct sun. Lit samples are counted as integers and
converted to hours once at the end, so identical inputs always give
bit-identical grids. When the path knows its site and date, hours are
capped at the sunrise-to-sunset daylight of that day: a whole step per
sample can otherwise overshoot it by up to one step.

Progress and cancellation happen only between sun-path steps; a single
ray march always completes.
"""

from __future__ import annotations

import datetime as _dt
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from ..errors import ConfigurationError, NoDaylightError
from ..models.results import AnalysisMode, ShadowAnalysisResult, ShadowStats
from ..progress import CancellationToken, ProgressCallback, ProgressReporter
from ..shadow_logging import get_logger
from .shadows import cells_from_grids, compute_shadow_mask, require_cells
from .sun_position import solar_times

if TYPE_CHECKING:
    from numpy.typing import NDArray

    from ..models.grid import HeightGrid
    from ..models.sun import SunPosition

logger = get_logger(__name__)


@dataclass(frozen=True, eq=False)
class SunHoursStep:
    """
    One processed sun-path step.

    Attributes:
        completed: Steps fully processed so far, including this one.
        total: Number of steps in the path.
        sun_position: Sun position of this step.
        lit: Boolean grid, True where the cell receives direct sun.
    """

    completed: int
    total: int
    sun_position: SunPosition
    lit: NDArray[np.bool_]


def _daylight_positions(path: Iterable[SunPosition]) -> tuple[SunPosition, ...]:
    positions = tuple(p for p in path if p.altitude_degrees > 0)
    if not positions:
        raise NoDaylightError(latitude=getattr(path, "latitude", None), date=getattr(path, "date", None))
    return positions


def iter_sun_hours(
    path: Iterable[SunPosition],
    grid: HeightGrid,
    cancel: CancellationToken | None = None,
) -> Iterator[SunHoursStep]:
    """
    Step through a sun path, yielding the lit mask of each step.

    Cancellation is checked before each step.

    Raises:
        InvalidGeometryError: Grid missing or without cells.
        NoDaylightError: The path holds no daylight samples.
        AnalysisCancelled: ``cancel`` was triggered.
    """
    require_cells(grid)
    positions = _daylight_positions(path)
    total = len(positions)

    for completed, position in enumerate(positions):
        if cancel is not None:
            cancel.raise_if_cancelled(completed, total)
        lit = ~compute_shadow_mask(position, grid)
        yield SunHoursStep(completed=completed + 1, total=total, sun_position=position, lit=lit)


def solar_daylight_hours(path: Iterable[SunPosition]) -> float | None:
    """Sunrise-to-sunset hours for the path's site and date, or None when the path does not carry them."""
    latitude = getattr(path, "latitude", None)
    longitude = getattr(path, "longitude", None)
    date = getattr(path, "date", None)
    if latitude is None or longitude is None or date is None:
        return None
    return solar_times(latitude, longitude, date).daylight_hours


def _resolve_step(path: Iterable[SunPosition], step_minutes: float | None) -> float:
    step = step_minutes if step_minutes is not None else getattr(path, "step_minutes", None)
    if step is None:
        raise ConfigurationError("step_minutes", "required when the sun path does not carry its own step")
    if not step > 0:
        raise ConfigurationError("step_minutes", f"must be positive, got {step}")
    return float(step)


def aggregate_sun_hours(
    path: Iterable[SunPosition],
    grid: HeightGrid,
    step_minutes: float | None = None,
    on_progress: ProgressCallback | None = None,
    cancel: CancellationToken | None = None,
    progress_bar: bool = False,
    max_hours: float | None = None,
) -> NDArray[np.float64]:
    """
    Hours of direct sun per cell over a sun path.

    Each lit sample adds ``step_minutes / 60`` hours to the cell, then every
    value is capped at ``max_hours``. Values lie in
    [0, min(samples * step_minutes / 60, max_hours)].

    Args:
        path: Daylight sun positions, e.g. a SunPath.
        grid: Height grid.
        step_minutes: Time represented by each sample. Defaults to the
            path's own ``step_minutes``.
        on_progress: ``on_progress(completed, total)`` after every step,
            including the last.
        cancel: Cooperative cancellation token.
        progress_bar: Show a tqdm bar.
        max_hours: Per-cell ceiling. Defaults to the sunrise-to-sunset
            daylight of the path's site and date; no cap for plain sequences.

    Returns:
        Sun-hours array shaped like ``grid.heights``.

    Raises:
        InvalidGeometryError: Grid missing or without cells.
        NoDaylightError: The path holds no daylight samples.
        AnalysisCancelled: ``cancel`` was triggered.
    """
    step = _resolve_step(path, step_minutes)
    require_cells(grid)
    positions = _daylight_positions(path)

    counts = np.zeros(grid.shape, dtype=np.int64)
    progress = ProgressReporter(
        total=len(positions), desc="Sun hours", callback=on_progress, progress_bar=progress_bar
    )
    logger.info(f"Aggregating sun hours over {len(positions)} sun positions ({step:g} min step)")
    try:
        for result in iter_sun_hours(positions, grid, cancel=cancel):
            counts += result.lit
            progress.update(1)
    finally:
        progress.close()

    hours = counts * (step / 60.0)
    if max_hours is None:
        max_hours = solar_daylight_hours(path)
    if max_hours is not None and hours.max() > max_hours:
        logger.debug(f"Capping sun hours at {max_hours:.3f} h of daylight (sampled {hours.max():.2f} h)")
        hours = np.minimum(hours, max_hours)
    return hours


def compute_sun_hours(
    path: Iterable[SunPosition],
    grid: HeightGrid,
    step_minutes: float | None = None,
    on_progress: ProgressCallback | None = None,
    cancel: CancellationToken | None = None,
    progress_bar: bool = False,
) -> ShadowAnalysisResult:
    """
    Daily-mode analysis: cumulative direct-sun hours per cell.

    Cells that never see the sun are flagged ``is_shaded``;
    ``percent_shaded`` is None in daily mode.

    See :func:`aggregate_sun_hours` for arguments and errors.
    """
    step = _resolve_step(path, step_minutes)
    require_cells(grid)
    positions = _daylight_positions(path)
    cap = solar_daylight_hours(path)

    sun_hours = aggregate_sun_hours(
        positions,
        grid,
        step_minutes=step,
        on_progress=on_progress,
        cancel=cancel,
        progress_bar=progress_bar,
        max_hours=cap,
    )
    never_lit = sun_hours == 0
    total = int(sun_hours.size)
    shaded_count = int(never_lit.sum())
    daylight = len(positions) * (step / 60.0)
    if cap is not None:
        daylight = min(daylight, cap)

    stats = ShadowStats(
        total_cells=total,
        shaded_cells=shaded_count,
        lit_cells=total - shaded_count,
        mean_sun_hours=float(sun_hours.mean()),
        min_sun_hours=float(sun_hours.min()),
        max_sun_hours=float(sun_hours.max()),
        daylight_hours=daylight,
        sun_positions=len(positions),
    )
    logger.info(
        f"Sun hours complete: mean {stats.mean_sun_hours:.2f} h of {daylight:.2f} h daylight, "
        f"{shaded_count} cells never lit"
    )

    date = getattr(path, "date", None)
    if date is None and positions[0].timestamp is not None:
        date = positions[0].timestamp.date()

    return ShadowAnalysisResult(
        mode=AnalysisMode.DAILY,
        cells=cells_from_grids(never_lit, sun_hours),
        cell_size=grid.cell_size,
        grid_width=grid.columns,
        grid_height=grid.rows,
        bounds=grid.bounds,
        stats=stats,
        percent_shaded=None,
        date=date if isinstance(date, _dt.date) else None,
        building_count=grid.building_count,
        sun_hours=sun_hours,
    )
