"""
Simplified shadow-study API

This module provides the entry points used by UI controls, overlay
renderers and report generators. It wraps the components with a few
conveniences:
- Settings default from an AnalysisConfig (bundled defaults if omitted)
- Season presets resolve to concrete dates
- ``run_analysis`` chains grid building, shadow analysis and validation

Example:
    import shadowstudy
    from datetime import date

    site = shadowstudy.GeoPoint(40.7128, -74.0060)
    study = shadowstudy.run_analysis(
        site,
        terrain=shadowstudy.FlatTerrain(),
        bounds=shadowstudy.BoundingRect(-50, 50, -50, 50),
        buildings=[shadowstudy.BuildingMass.extruded([(-5, -5), (5, -5), (5, 5), (-5, 5)], 30.0)],
        date=date(2024, 6, 21),
    )
    print(study.report())
"""

from __future__ import annotations

import datetime as _dt
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .components.accuracy import assess_accuracy, validate_result
from .components.facades import compute_facade_exposure as _compute_facade_exposure
from .components.shadows import compute_instant_shadows
from .components.sun_hours import compute_sun_hours as _compute_sun_hours
from .components.sun_path import SunPath, preset_date, sun_path
from .components.sun_position import compute_sun_position, solar_times
from .components.terrain import build_grid
from .errors import ConfigurationError
from .models.accuracy import DemAccuracy, ValidationReport
from .models.config import AnalysisConfig
from .models.geometry import BoundingRect, BuildingMass, GeoPoint, TerrainSurface
from .models.grid import HeightGrid
from .models.results import FacadeExposure, ShadowAnalysisResult
from .models.sun import SeasonPreset, SolarTimes, SunPosition
from .progress import CancellationToken, ProgressCallback
from .shadow_logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "ShadowStudy",
    "get_sun_position",
    "get_sun_path",
    "get_preset_date",
    "get_solar_times",
    "build_height_grid",
    "compute_instant_shadows",
    "compute_sun_hours",
    "assess_accuracy",
    "validate_result",
    "compute_facade_exposure",
    "run_analysis",
]


def get_sun_position(latitude: float, longitude: float, when: _dt.datetime) -> SunPosition:
    """Sun position at a site for one instant (naive datetimes are UTC)."""
    return compute_sun_position(latitude, longitude, when)


def get_sun_path(
    latitude: float,
    longitude: float,
    date: _dt.date,
    step_minutes: float | None = None,
    window: tuple[_dt.time, _dt.time] | None = None,
    config: AnalysisConfig | None = None,
) -> SunPath:
    """
    Daylight sun path for one day.

    ``step_minutes`` defaults to ``config.step_minutes``.
    """
    config = config or AnalysisConfig.defaults()
    step = step_minutes if step_minutes is not None else config.step_minutes
    return sun_path(latitude, longitude, date, step_minutes=step, window=window)


def get_preset_date(preset: SeasonPreset | str, year: int | None = None) -> _dt.date:
    """Solstice/equinox analysis date; the current year when ``year`` is None."""
    return preset_date(preset, year)


def get_solar_times(
    latitude: float,
    longitude: float,
    date: _dt.date,
    config: AnalysisConfig | None = None,
) -> SolarTimes:
    """Sunrise, solar noon, sunset and twilight times for one day."""
    config = config or AnalysisConfig.defaults()
    return solar_times(
        latitude,
        longitude,
        date,
        civil_twilight_deg=config.civil_twilight_deg,
        golden_hour_deg=config.golden_hour_deg,
    )


def build_height_grid(
    terrain: TerrainSurface | None,
    bounds: BoundingRect,
    buildings: Iterable[BuildingMass] = (),
    cell_size: float | None = None,
    config: AnalysisConfig | None = None,
) -> HeightGrid:
    """
    Rasterise terrain and buildings into an analysis grid.

    ``cell_size`` defaults to ``config.cell_size``; the cell cap comes from
    ``config.max_cells``.
    """
    config = config or AnalysisConfig.defaults()
    size = cell_size if cell_size is not None else config.cell_size
    return build_grid(terrain, buildings, bounds, cell_size=size, max_cells=config.max_cells)


def compute_sun_hours(
    path: Iterable[SunPosition],
    grid: HeightGrid,
    step_minutes: float | None = None,
    on_progress: ProgressCallback | None = None,
    cancel: CancellationToken | None = None,
    config: AnalysisConfig | None = None,
) -> ShadowAnalysisResult:
    """
    Cumulative direct-sun hours per cell over a sun path.

    Shows a tqdm bar when ``config.progress_bar`` is set.
    """
    config = config or AnalysisConfig.defaults()
    return _compute_sun_hours(
        path,
        grid,
        step_minutes=step_minutes,
        on_progress=on_progress,
        cancel=cancel,
        progress_bar=config.progress_bar,
    )


def compute_facade_exposure(
    path: Iterable[SunPosition],
    buildings: Iterable[BuildingMass],
    step_minutes: float | None = None,
    config: AnalysisConfig | None = None,
) -> list[FacadeExposure]:
    """
    Direct-sun hours on each cardinal facade of every building.

    The grazing angle comes from ``config.facade_grazing_angle_deg``.
    """
    config = config or AnalysisConfig.defaults()
    return _compute_facade_exposure(
        path,
        buildings,
        step_minutes=step_minutes,
        grazing_angle_deg=config.facade_grazing_angle_deg,
    )


@dataclass(frozen=True, eq=False)
class ShadowStudy:
    """
    Everything produced by one :func:`run_analysis` call.

    Attributes:
        result: The instant or daily analysis result.
        validation: Advisory quality report for the result.
        grid: The height grid the analysis ran on.
        sun_position: Instant mode: the sun position analysed.
        sun_path: Daily mode: the sun path analysed.
    """

    result: ShadowAnalysisResult
    validation: ValidationReport
    grid: HeightGrid
    sun_position: SunPosition | None = None
    sun_path: SunPath | None = None

    def report(self) -> str:
        return f"{self.result.report()}\n{self.validation.report()}"


def run_analysis(
    site: GeoPoint,
    terrain: TerrainSurface | None,
    bounds: BoundingRect,
    buildings: Iterable[BuildingMass] = (),
    when: _dt.datetime | None = None,
    date: _dt.date | None = None,
    preset: SeasonPreset | str | None = None,
    dem: DemAccuracy | None = None,
    building_warnings: Sequence[str] = (),
    config: AnalysisConfig | None = None,
    on_progress: ProgressCallback | None = None,
    cancel: CancellationToken | None = None,
) -> ShadowStudy:
    """
    Build the grid, run one analysis and validate it.

    Exactly one of ``when`` (instant mode), ``date`` or ``preset`` (daily
    mode) selects the analysis.

    Args:
        site: Site location; the sun is computed here.
        terrain: Ground surface in the site's planar frame.
        bounds: Analysis rectangle in the site's planar frame.
        buildings: Building massing.
        when: Instant to analyse.
        date: Day to analyse.
        preset: Season preset for the day to analyse (current year).
        dem: DEM accuracy metadata for the validation report.
        building_warnings: Building ingestion messages for the report.
        config: Settings; bundled defaults if None.
        on_progress: Daily mode progress callback.
        cancel: Daily mode cancellation token.

    Returns:
        ShadowStudy with the result and its validation report.

    Raises:
        ConfigurationError: Zero or several of when/date/preset given.
        InvalidGeometryError: Missing terrain, bad bounds or oversize grid.
        NoDaylightError: Daily mode on a day without daylight.
        AnalysisCancelled: ``cancel`` was triggered.
    """
    selected = [name for name, value in (("when", when), ("date", date), ("preset", preset)) if value is not None]
    if len(selected) != 1:
        raise ConfigurationError("when/date/preset", f"exactly one must be given, got {selected or 'none'}")

    config = config or AnalysisConfig.defaults()
    buildings = list(buildings)
    grid = build_height_grid(terrain, bounds, buildings, config=config)

    if when is not None:
        position = get_sun_position(site.latitude, site.longitude, when)
        result = compute_instant_shadows(position, grid)
        path = None
    else:
        day = date if date is not None else get_preset_date(preset)
        path = get_sun_path(site.latitude, site.longitude, day, config=config)
        result = compute_sun_hours(path, grid, on_progress=on_progress, cancel=cancel, config=config)
        position = None

    validation = validate_result(result, dem=dem, building_count=len(buildings), building_warnings=building_warnings)
    logger.info(f"Analysis complete: {result.mode.value} mode, quality score {validation.score_percent:.0f}%")
    return ShadowStudy(result=result, validation=validation, grid=grid, sun_position=position, sun_path=path)
