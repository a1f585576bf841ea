"""
Accuracy assessment component.

Grades the expected error of a shadow result from the quality of the
elevation data behind it, and runs the advisory quality checks shown in
validation reports. Nothing here raises or blocks a result: poor or
unknown inputs downgrade the grade instead.

Reference:
    Expected shadow-edge error (empirical, NREL benchmark studies):
        shadow_edge_m = dem_resolution_m * 0.15 + dem_vertical_error_m * 0.5
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from ..constants import (
    DEM_PASS_MAX_RESOLUTION_M,
    GRADE_EXCELLENT_BELOW_M,
    GRADE_GOOD_BELOW_M,
    GRID_PASS_MAX_CELL_M,
    GRID_WARN_MAX_CELL_M,
    SHADOW_EDGE_RESOLUTION_COEFF,
    SHADOW_EDGE_VERTICAL_COEFF,
    SUN_HOURS_PERCENT_PER_EDGE_M,
)
from ..errors import AccuracyWarning
from ..models.accuracy import (
    AccuracyAssessment,
    CheckStatus,
    DemAccuracy,
    QualityCheck,
    QualityGrade,
    ValidationReport,
)
from ..models.results import ShadowAnalysisResult
from ..shadow_logging import get_logger

logger = get_logger(__name__)


def _grade(shadow_edge_m: float) -> QualityGrade:
    if shadow_edge_m < GRADE_EXCELLENT_BELOW_M:
        return QualityGrade.EXCELLENT
    if shadow_edge_m < GRADE_GOOD_BELOW_M:
        return QualityGrade.GOOD
    return QualityGrade.FAIR


def _usable(value: float) -> bool:
    try:
        return math.isfinite(value) and value >= 0
    except TypeError:
        return False


def assess_accuracy(
    cell_size: float,
    dem_vertical_error_m: float,
    dem_nominal_resolution_m: float,
) -> AccuracyAssessment:
    """
    Expected accuracy of a shadow result.

    Args:
        cell_size: Analysis grid cell size (recorded, not part of the formula).
        dem_vertical_error_m: DEM vertical error in meters.
        dem_nominal_resolution_m: DEM horizontal resolution in meters.

    Returns:
        AccuracyAssessment. Negative or non-finite DEM figures give an
        infinite shadow-edge error graded Fair; this function never raises.

    Example:
        >>> assess_accuracy(1.0, 0.5, 5.0).quality_grade
        <QualityGrade.EXCELLENT: 'Excellent'>
    """
    if not (_usable(dem_vertical_error_m) and _usable(dem_nominal_resolution_m)):
        logger.warning(
            f"Unusable DEM accuracy figures (vertical {dem_vertical_error_m!r}, "
            f"resolution {dem_nominal_resolution_m!r}); grading Fair"
        )
        return AccuracyAssessment(
            shadow_edge_m=math.inf,
            quality_grade=QualityGrade.FAIR,
            sun_hours_percent=math.inf,
            cell_size=cell_size,
        )

    shadow_edge = (
        dem_nominal_resolution_m * SHADOW_EDGE_RESOLUTION_COEFF + dem_vertical_error_m * SHADOW_EDGE_VERTICAL_COEFF
    )
    return AccuracyAssessment(
        shadow_edge_m=shadow_edge,
        quality_grade=_grade(shadow_edge),
        sun_hours_percent=shadow_edge * SUN_HOURS_PERCENT_PER_EDGE_M,
        cell_size=cell_size,
    )


def _grid_check(result: ShadowAnalysisResult) -> QualityCheck:
    cell_size = result.cell_size
    if cell_size <= GRID_PASS_MAX_CELL_M:
        status, details = CheckStatus.PASS, "High resolution provides excellent accuracy"
    elif cell_size <= GRID_WARN_MAX_CELL_M:
        status, details = CheckStatus.WARN, "Medium resolution - consider using finer grid for critical areas"
    else:
        status, details = CheckStatus.FAIL, "Low resolution may miss small shadow features"
    return QualityCheck(
        id="grid_resolution",
        label="Analysis Grid Resolution",
        status=status,
        message=f"{cell_size:g}m cell size • {len(result.cells):,} analysis points",
        details=details,
    )


def _dem_check(dem: DemAccuracy | None) -> QualityCheck:
    good = dem is not None and dem.nominal_resolution_m <= DEM_PASS_MAX_RESOLUTION_M
    if dem is None:
        message = "DEM accuracy unknown"
    else:
        message = f"{dem.nominal_resolution_m:g}m DEM • ±{dem.vertical_error_m:g}m vertical"
    return QualityCheck(
        id="dem_quality",
        label="Terrain Data Quality",
        status=CheckStatus.PASS if good else CheckStatus.WARN,
        message=message,
        details=(
            "High-quality elevation data meets industry standards"
            if good
            else "Consider using higher resolution DEM for improved accuracy"
        ),
    )


def _building_check(building_count: int, building_warnings: Sequence[str]) -> QualityCheck:
    if building_count > 0:
        return QualityCheck(
            id="building_data",
            label="Building Data Integration",
            status=CheckStatus.PASS,
            message=f"{building_count} buildings included in analysis",
            details=(
                "Buildings loaded with some height assumptions"
                if building_warnings
                else "Complete building data with measured heights"
            ),
        )
    return QualityCheck(
        id="building_data",
        label="Building Data Integration",
        status=CheckStatus.WARN,
        message="No building data - analysis is terrain-only",
        details="Add building massing data for comprehensive shadow analysis",
    )


def _coverage_check(result: ShadowAnalysisResult) -> QualityCheck:
    stats = result.stats
    if stats is not None and stats.total_cells > 0:
        return QualityCheck(
            id="coverage",
            label="Analysis Coverage",
            status=CheckStatus.PASS,
            message=f"{stats.total_cells} cells analyzed",
            details="Complete site coverage achieved",
        )
    return QualityCheck(
        id="coverage",
        label="Analysis Coverage",
        status=CheckStatus.WARN,
        message="Coverage statistics unavailable",
        details="Complete site coverage achieved",
    )


def validate_result(
    result: ShadowAnalysisResult,
    dem: DemAccuracy | None = None,
    building_count: int | None = None,
    building_warnings: Sequence[str] = (),
) -> ValidationReport:
    """
    Advisory quality report for a finished analysis.

    Args:
        result: The analysis result.
        dem: Accuracy metadata of the DEM used; None when unknown.
        building_count: Buildings included. Defaults to ``result.building_count``.
        building_warnings: Messages from building ingestion (e.g. assumed heights).

    Returns:
        ValidationReport with the grid, DEM, building and coverage checks.
        ``score_percent`` is the share of passing checks.
    """
    if building_count is None:
        building_count = result.building_count

    checks = (
        _grid_check(result),
        _dem_check(dem),
        _building_check(building_count, building_warnings),
        _coverage_check(result),
    )

    assessment = None
    if dem is not None:
        assessment = assess_accuracy(result.cell_size, dem.vertical_error_m, dem.nominal_resolution_m)

    warnings = [
        AccuracyWarning(f"{c.label}: {c.message}", check=c.id) for c in checks if c.status is not CheckStatus.PASS
    ]
    warnings.extend(AccuracyWarning(w, check="building_data") for w in building_warnings)
    if assessment is not None and assessment.quality_grade is QualityGrade.FAIR:
        warnings.append(
            AccuracyWarning(f"Expected shadow-edge error ±{assessment.shadow_edge_m:.1f} m (Fair)", check="accuracy")
        )
    for warning in warnings:
        logger.warning(str(warning))

    passes = sum(1 for c in checks if c.status is CheckStatus.PASS)
    recommendations = []
    if passes / len(checks) < 0.75:
        recommendations.append("Consider using higher resolution analysis for critical applications")
    if building_count == 0:
        recommendations.append("Include building data for comprehensive shadow analysis")
    if dem is None:
        recommendations.append("Load terrain data to enable accuracy validation")
    recommendations.append("Verify results with on-site measurements for highest confidence")
    recommendations.append("Re-run analysis at different times/dates for seasonal variations")

    return ValidationReport(
        checks=checks,
        assessment=assessment,
        warnings=tuple(warnings),
        recommendations=tuple(recommendations),
    )
