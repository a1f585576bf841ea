"""Data models for shadow analyses.

Modules
-------
sun
    ``SunPosition``, ``SolarTimes`` and the ``SeasonPreset`` dates.
geometry
    ``GeoPoint``, ``BoundingRect``, ``BuildingMass`` and the terrain
    surfaces (``FlatTerrain``, ``RasterTerrain``, ``PointTerrain``).
grid
    ``HeightGrid``: rasterised terrain plus building tops.
results
    ``ShadowAnalysisResult``, ``ShadowCell``, ``ShadowStats`` and
    ``FacadeExposure``.
accuracy
    ``DemAccuracy``, ``AccuracyAssessment`` and ``ValidationReport``.
config
    ``AnalysisConfig``: run-time settings.
"""

from .accuracy import (
    AccuracyAssessment,
    CheckStatus,
    DemAccuracy,
    QualityCheck,
    QualityGrade,
    ValidationReport,
)
from .config import AnalysisConfig
from .geometry import (
    BoundingRect,
    BuildingMass,
    FlatTerrain,
    GeoPoint,
    PointTerrain,
    RasterTerrain,
    TerrainSurface,
    parse_geometry,
    terrain_from_geojson,
)
from .grid import HeightGrid
from .results import AnalysisMode, FacadeExposure, ShadowAnalysisResult, ShadowCell, ShadowStats
from .sun import SeasonPreset, SolarTimes, SunPosition

__all__ = [
    # Sun
    "SunPosition",
    "SolarTimes",
    "SeasonPreset",
    # Geometry
    "GeoPoint",
    "BoundingRect",
    "BuildingMass",
    "TerrainSurface",
    "FlatTerrain",
    "RasterTerrain",
    "PointTerrain",
    "parse_geometry",
    "terrain_from_geojson",
    # Grid
    "HeightGrid",
    # Results
    "AnalysisMode",
    "ShadowCell",
    "ShadowStats",
    "ShadowAnalysisResult",
    "FacadeExposure",
    # Accuracy
    "DemAccuracy",
    "QualityGrade",
    "CheckStatus",
    "QualityCheck",
    "AccuracyAssessment",
    "ValidationReport",
    # Configuration
    "AnalysisConfig",
]
