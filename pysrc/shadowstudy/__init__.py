"""shadowstudy - Solar position and shadow-casting engine for site analysis.

Converts a site's terrain and building massing plus a sun position (or a
day's worth of sampled sun positions) into a per-cell shading or
sun-hours map, and grades the result's expected accuracy against the
quality of the elevation data.

Quick start::

    import shadowstudy
    from datetime import datetime

    grid = shadowstudy.build_height_grid(
        terrain=shadowstudy.FlatTerrain(),
        bounds=shadowstudy.BoundingRect(0, 100, 0, 100),
        buildings=[shadowstudy.BuildingMass.extruded([(45, 45), (55, 45), (55, 55), (45, 55)], 30.0)],
        cell_size=1.0,
    )
    sun = shadowstudy.get_sun_position(40.7128, -74.0060, datetime(2024, 6, 21, 16, 58))
    result = shadowstudy.compute_instant_shadows(sun, grid)
    print(f"{result.percent_shaded_display}% shaded")
"""

import logging
from importlib.metadata import PackageNotFoundError, version

logger = logging.getLogger(__name__)

# Version: single source of truth is pyproject.toml
try:
    __version__ = version("shadowstudy")
except PackageNotFoundError:
    __version__ = "0.0.0.dev0"  # Fallback for source checkouts without metadata

from . import progress  # noqa: E402
from .api import (  # noqa: E402
    ShadowStudy,
    assess_accuracy,
    build_height_grid,
    compute_facade_exposure,
    compute_instant_shadows,
    compute_sun_hours,
    get_preset_date,
    get_solar_times,
    get_sun_path,
    get_sun_position,
    run_analysis,
    validate_result,
)
from .components.sun_path import SunPath  # noqa: E402
from .errors import (  # noqa: E402
    AccuracyWarning,
    AnalysisCancelled,
    ConfigurationError,
    GridTooLargeError,
    InvalidGeometryError,
    NoDaylightError,
    ShadowStudyError,
)
from .models import (  # noqa: E402
    AccuracyAssessment,
    AnalysisConfig,
    BoundingRect,
    BuildingMass,
    DemAccuracy,
    FacadeExposure,
    FlatTerrain,
    GeoPoint,
    HeightGrid,
    PointTerrain,
    QualityGrade,
    RasterTerrain,
    SeasonPreset,
    ShadowAnalysisResult,
    ShadowCell,
    SolarTimes,
    SunPosition,
    ValidationReport,
    terrain_from_geojson,
)
from .progress import CancellationToken  # noqa: E402
from .projection import LocalProjection  # noqa: E402

__all__ = [
    "__version__",
    # Entry points
    "run_analysis",
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
    # Models
    "SunPosition",
    "SolarTimes",
    "SeasonPreset",
    "SunPath",
    "GeoPoint",
    "BoundingRect",
    "BuildingMass",
    "FlatTerrain",
    "RasterTerrain",
    "PointTerrain",
    "terrain_from_geojson",
    "HeightGrid",
    "ShadowCell",
    "ShadowAnalysisResult",
    "FacadeExposure",
    "DemAccuracy",
    "AccuracyAssessment",
    "QualityGrade",
    "ValidationReport",
    "AnalysisConfig",
    "LocalProjection",
    "CancellationToken",
    "progress",
    # Errors
    "ShadowStudyError",
    "InvalidGeometryError",
    "GridTooLargeError",
    "NoDaylightError",
    "AnalysisCancelled",
    "ConfigurationError",
    "AccuracyWarning",
]
