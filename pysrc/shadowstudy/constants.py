"""
Constants and default parameters for the shadow engine.

This module consolidates the constants shared across components so the
accuracy formula, sampling defaults and grid limits are defined once.
"""

# =============================================================================
# Sun position
# =============================================================================

# Julian date of the J2000.0 epoch (2000-01-01 12:00 TT)
JULIAN_DATE_J2000 = 2451545.0

# Julian date of the Unix epoch (1970-01-01 00:00 UTC)
JULIAN_DATE_UNIX_EPOCH = 2440587.5

# Days per Julian century
DAYS_PER_JULIAN_CENTURY = 36525.0

# Sun altitude at which civil dawn/dusk occur (degrees)
CIVIL_TWILIGHT_DEG = -6.0

# Sun altitude bounding the golden hour (degrees)
GOLDEN_HOUR_DEG = 6.0


# =============================================================================
# Sampling and grid defaults
# =============================================================================

# Default sun-path step (minutes)
DEFAULT_STEP_MINUTES = 15

# Default analysis cell size (meters)
DEFAULT_CELL_SIZE_M = 2.0

# Cell-size presets offered to users as a speed/accuracy trade-off (meters)
CELL_SIZE_PRESETS_M = (1.0, 2.0, 5.0)

# Maximum analysis grid cardinality
MAX_GRID_CELLS = 500_000

# Facades are lit only when the sun is within this angle of the facade normal
FACADE_GRAZING_ANGLE_DEG = 85.0


# =============================================================================
# Accuracy assessment
# =============================================================================
# Expected shadow-edge error (empirical, NREL benchmark studies):
#     shadow_edge_m = dem_resolution_m * 0.15 + dem_vertical_error_m * 0.5
# =============================================================================

SHADOW_EDGE_RESOLUTION_COEFF = 0.15
SHADOW_EDGE_VERTICAL_COEFF = 0.5

# Sun-hours error (%) per meter of shadow-edge error
SUN_HOURS_PERCENT_PER_EDGE_M = 0.15

# Grade thresholds on shadow_edge_m (strict upper bounds)
GRADE_EXCELLENT_BELOW_M = 2.0
GRADE_GOOD_BELOW_M = 5.0

# Quality-check thresholds
GRID_PASS_MAX_CELL_M = 2.0
GRID_WARN_MAX_CELL_M = 5.0
DEM_PASS_MAX_RESOLUTION_M = 30.0


__all__ = [
    "JULIAN_DATE_J2000",
    "JULIAN_DATE_UNIX_EPOCH",
    "DAYS_PER_JULIAN_CENTURY",
    "CIVIL_TWILIGHT_DEG",
    "GOLDEN_HOUR_DEG",
    "DEFAULT_STEP_MINUTES",
    "DEFAULT_CELL_SIZE_M",
    "CELL_SIZE_PRESETS_M",
    "MAX_GRID_CELLS",
    "FACADE_GRAZING_ANGLE_DEG",
    "SHADOW_EDGE_RESOLUTION_COEFF",
    "SHADOW_EDGE_VERTICAL_COEFF",
    "SUN_HOURS_PERCENT_PER_EDGE_M",
    "GRADE_EXCELLENT_BELOW_M",
    "GRADE_GOOD_BELOW_M",
    "GRID_PASS_MAX_CELL_M",
    "GRID_WARN_MAX_CELL_M",
    "DEM_PASS_MAX_RESOLUTION_M",
]
