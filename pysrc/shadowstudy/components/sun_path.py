"""
Sun path sampling component.

A sun path is the day's sequence of daylight sun positions at a fixed time
step. The sweep covers one local mean-solar day (00:00 to 24:00 local mean
time at the site longitude); samples with altitude <= 0 are dropped.

The path is lazy and restartable: positions are computed while iterating,
and every new iteration starts again from the first sample.
"""

from __future__ import annotations

import datetime as _dt
import math
from collections.abc import Iterator
from dataclasses import dataclass

from ..constants import DEFAULT_STEP_MINUTES
from ..errors import ConfigurationError
from ..models.geometry import GeoPoint
from ..models.sun import SeasonPreset, SunPosition
from .sun_position import compute_sun_position

_MINUTES_PER_DAY = 1440.0


@dataclass(frozen=True)
class SunPath:
    """
    Daylight sun positions over one day.

    Attributes:
        latitude: Site latitude in degrees.
        longitude: Site longitude in degrees.
        date: Calendar date at the site (local mean solar time).
        step_minutes: Time between samples.
        window: Optional (start, end) local mean-solar times; samples outside
            the window are skipped. Both ends inclusive.

    Example:
        >>> path = SunPath(40.7128, -74.0060, date(2024, 6, 21))
        >>> for position in path:
        ...     print(position.timestamp, position.altitude_degrees)
    """

    latitude: float
    longitude: float
    date: _dt.date
    step_minutes: float = DEFAULT_STEP_MINUTES
    window: tuple[_dt.time, _dt.time] | None = None

    def __post_init__(self):
        GeoPoint(self.latitude, self.longitude)
        if isinstance(self.date, _dt.datetime):
            object.__setattr__(self, "date", self.date.date())
        if not self.step_minutes > 0 or not math.isfinite(self.step_minutes):
            raise ConfigurationError("step_minutes", f"must be a positive number of minutes, got {self.step_minutes}")
        if self.window is not None:
            start, end = self.window
            if end < start:
                raise ConfigurationError("window", f"end {end} is before start {start}")

    @property
    def start(self) -> _dt.datetime:
        """UTC instant of local mean-solar midnight that opens the sweep."""
        midnight = _dt.datetime(self.date.year, self.date.month, self.date.day, tzinfo=_dt.timezone.utc)
        return midnight - _dt.timedelta(hours=self.longitude / 15.0)

    def sample_times(self) -> Iterator[_dt.datetime]:
        """UTC instants of every sample in the sweep, daylight or not."""
        start = self.start
        window = None
        if self.window is not None:
            window = tuple(t.hour * 60 + t.minute + t.second / 60.0 for t in self.window)
        k = 0
        while k * self.step_minutes < _MINUTES_PER_DAY:
            minutes = k * self.step_minutes
            k += 1
            if window is not None and not window[0] <= minutes <= window[1]:
                continue
            yield start + _dt.timedelta(minutes=minutes)

    def __iter__(self) -> Iterator[SunPosition]:
        for when in self.sample_times():
            position = compute_sun_position(self.latitude, self.longitude, when)
            if position.altitude_degrees > 0:
                yield position

    def positions(self) -> tuple[SunPosition, ...]:
        """Materialise the path."""
        return tuple(self)

    def __len__(self) -> int:
        return sum(1 for _ in self)

    @property
    def is_empty(self) -> bool:
        return next(iter(self), None) is None

    @property
    def daylight_hours(self) -> float:
        """Sampled daylight: number of daylight samples times the step, in hours."""
        return len(self) * self.step_minutes / 60.0


def sun_path(
    latitude: float,
    longitude: float,
    date: _dt.date,
    step_minutes: float = DEFAULT_STEP_MINUTES,
    window: tuple[_dt.time, _dt.time] | None = None,
) -> SunPath:
    """
    Daylight sun path for one day.

    An empty path (polar night) is a valid return value; analyses that need
    daylight raise NoDaylightError when given one.
    """
    return SunPath(latitude, longitude, date, step_minutes=step_minutes, window=window)


def preset_date(preset: SeasonPreset | str, year: int | None = None) -> _dt.date:
    """
    Canonical analysis date for a season preset.

    Args:
        preset: SeasonPreset or one of "summer", "winter", "spring", "fall".
        year: Calendar year. None uses the current UTC year.

    Returns:
        Jun 21, Dec 21, Mar 20 or Sep 22 of the year.

    Raises:
        ConfigurationError: Unknown preset.
    """
    try:
        preset = SeasonPreset(preset)
    except ValueError:
        choices = ", ".join(p.value for p in SeasonPreset)
        raise ConfigurationError("preset", f"unknown preset {preset!r}, expected one of {choices}") from None
    if year is None:
        year = _dt.datetime.now(_dt.timezone.utc).year
    month, day = preset.month_day
    return _dt.date(year, month, day)
