"""Shadow-study error types for actionable error messages.

These exceptions provide structured information about what went wrong
and how to fix it, rather than generic error messages.

Example:
    try:
        result = shadowstudy.compute_sun_hours(path, grid)
    except shadowstudy.NoDaylightError as e:
        print(f"No daylight at {e.latitude}° on {e.date}; pick another date")
    except shadowstudy.InvalidGeometryError as e:
        print(f"Bad geometry for '{e.field}': {e}")
"""

from __future__ import annotations

import datetime as _dt


class ShadowStudyError(Exception):
    """Base class for all shadow engine errors."""

    pass


class InvalidGeometryError(ShadowStudyError):
    """Raised when terrain, bounds, footprints or grids are unusable.

    Fatal for the invocation: raised before any ray marching begins.

    Attributes:
        message: Human-readable error description.
        field: Name of the problematic input (e.g., "terrain", "bounds").
        expected: What was expected (optional).
        got: What was actually provided (optional).
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        expected: str | None = None,
        got: str | None = None,
    ):
        self.field = field
        self.expected = expected
        self.got = got
        super().__init__(message)


class GridTooLargeError(InvalidGeometryError):
    """Raised when the analysis grid would exceed the cell cap.

    Example:
        >>> build_grid(FlatTerrain(), [], BoundingRect(0, 5000, 0, 5000), cell_size=1)
        GridTooLargeError: Grid too large: 25000000 cells (limit 500000).
          Use a coarser cell size or a smaller area.
    """

    def __init__(self, cell_count: int, max_cells: int):
        message = (
            f"Grid too large: {cell_count} cells (limit {max_cells}).\n"
            "  Use a coarser cell size or a smaller area."
        )
        super().__init__(message, field="cell_size", expected=f"<= {max_cells} cells", got=f"{cell_count} cells")
        self.cell_count = cell_count
        self.max_cells = max_cells


class NoDaylightError(ShadowStudyError):
    """Raised when a sampled sun path holds no daylight samples.

    Recoverable only by choosing another date (polar night otherwise).

    Attributes:
        latitude: Site latitude in degrees, when known.
        date: Analysis date, when known.
    """

    def __init__(self, latitude: float | None = None, date: _dt.date | None = None):
        self.latitude = latitude
        self.date = date
        if latitude is not None and date is not None:
            message = f"No daylight on {date.isoformat()} at latitude {latitude:.4f}°"
        else:
            message = "Sun path contains no daylight samples"
        message += "\nChoose a different analysis date."
        super().__init__(message)


class AnalysisCancelled(ShadowStudyError):
    """Raised when a daily analysis observes a cancellation request.

    Attributes:
        completed: Sun-path steps fully processed before cancellation.
        total: Total number of sun-path steps.
    """

    def __init__(self, completed: int, total: int):
        self.completed = completed
        self.total = total
        super().__init__(f"Analysis cancelled after {completed}/{total} sun positions")


class ConfigurationError(ShadowStudyError):
    """Raised when configuration is invalid or inconsistent.

    Attributes:
        parameter: The problematic parameter name.
        reason: Why the configuration is invalid.
    """

    def __init__(self, parameter: str, reason: str):
        self.parameter = parameter
        self.reason = reason
        message = f"Invalid configuration for '{parameter}': {reason}"
        super().__init__(message)


class AccuracyWarning(UserWarning):
    """Non-fatal accuracy concern attached to a validation report.

    Never raised by the engine; collected on :class:`ValidationReport`.

    Attributes:
        check: Id of the quality check that produced the warning.
    """

    def __init__(self, message: str, check: str | None = None):
        self.check = check
        super().__init__(message)
