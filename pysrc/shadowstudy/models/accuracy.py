"""Accuracy assessment and validation report models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from ..errors import AccuracyWarning


class QualityGrade(str, Enum):
    EXCELLENT = "Excellent"
    GOOD = "Good"
    FAIR = "Fair"


class CheckStatus(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


@dataclass(frozen=True)
class DemAccuracy:
    """
    Accuracy metadata of the elevation model behind a terrain surface.

    Attributes:
        vertical_error_m: Stated vertical error (RMSE) in meters.
        nominal_resolution_m: Nominal horizontal posting in meters
            (e.g. 10 for USGS 1/3 arc-second, 30 for SRTM).
    """

    vertical_error_m: float
    nominal_resolution_m: float


@dataclass(frozen=True)
class AccuracyAssessment:
    """
    Expected error of a shadow result, derived from DEM quality.

    Attributes:
        shadow_edge_m: Expected positional error of shadow boundaries (meters).
        quality_grade: Excellent (< 2 m), Good (< 5 m) or Fair.
        sun_hours_percent: Expected sun-hours error in percent.
        cell_size: Analysis grid cell size the assessment was made for.
    """

    shadow_edge_m: float
    quality_grade: QualityGrade
    sun_hours_percent: float
    cell_size: float


@dataclass(frozen=True)
class QualityCheck:
    id: str
    label: str
    status: CheckStatus
    message: str
    details: str


@dataclass(frozen=True)
class ValidationReport:
    """
    Advisory quality report attached to a successful result.

    Attributes:
        checks: The quality checks, in display order.
        assessment: Expected accuracy; None when no DEM metadata was supplied.
        warnings: Non-fatal accuracy concerns (never raised).
        recommendations: Suggested follow-ups for the user.
    """

    checks: tuple[QualityCheck, ...]
    assessment: AccuracyAssessment | None = None
    warnings: tuple[AccuracyWarning, ...] = field(default=())
    recommendations: tuple[str, ...] = field(default=())

    @property
    def score(self) -> float:
        """Share of passing checks in [0, 1]."""
        if not self.checks:
            return 0.0
        return sum(1 for c in self.checks if c.status is CheckStatus.PASS) / len(self.checks)

    @property
    def score_percent(self) -> float:
        return self.score * 100.0

    def check(self, check_id: str) -> QualityCheck:
        """Look up a check by id."""
        for c in self.checks:
            if c.id == check_id:
                return c
        raise KeyError(check_id)

    def report(self) -> str:
        """Return a human-readable validation summary."""
        lines = [f"Validation: {round(self.score_percent)}% quality score"]
        if self.assessment is not None:
            a = self.assessment
            lines.append(
                f"  Expected accuracy: shadow edge ±{a.shadow_edge_m:.1f} m, "
                f"sun hours ±{a.sun_hours_percent:.1f}% ({a.quality_grade.value})"
            )
        for c in self.checks:
            lines.append(f"  [{c.status.value}] {c.label}: {c.message}")
        for r in self.recommendations:
            lines.append(f"  - {r}")
        return "\n".join(lines)
