"""Sun position and solar-time data models."""

from __future__ import annotations

import datetime as _dt
import math
from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class SunPosition:
    """
    Apparent sun position for one instant.

    Attributes:
        altitude_degrees: Angle above the horizon, in [-90, 90].
            Values <= 0 mean the sun is below the horizon (no direct light).
        azimuth_degrees: Compass direction, degrees from north clockwise,
            in [0, 360).
        timestamp: The instant (UTC-aware) the position was computed for.
    """

    altitude_degrees: float
    azimuth_degrees: float
    timestamp: _dt.datetime | None = None

    def __post_init__(self):
        if not -90 <= self.altitude_degrees <= 90:
            raise ValueError(f"Sun altitude must be in [-90, 90], got {self.altitude_degrees}")
        if not 0 <= self.azimuth_degrees < 360:
            raise ValueError(f"Sun azimuth must be in [0, 360), got {self.azimuth_degrees}")

    @property
    def zenith_degrees(self) -> float:
        return 90.0 - self.altitude_degrees

    @property
    def is_up(self) -> bool:
        """True when the sun is above the horizon."""
        return self.altitude_degrees > 0

    def direction_vector(self) -> tuple[float, float, float]:
        """
        Unit vector pointing from the ground to the sun.

        Local ENU frame: x = east, y = north, z = up.
        """
        az = math.radians(self.azimuth_degrees)
        alt = math.radians(self.altitude_degrees)
        return (
            math.sin(az) * math.cos(alt),
            math.cos(az) * math.cos(alt),
            math.sin(alt),
        )


@dataclass(frozen=True)
class SolarTimes:
    """
    Solar event times for one local solar day, all UTC-aware.

    An event that does not happen on that day (polar day or polar night)
    is None.

    Attributes:
        solar_noon: Instant of maximum sun altitude.
        sunrise: Morning crossing of altitude 0.
        sunset: Evening crossing of altitude 0.
        dawn: Morning crossing of the civil-twilight altitude.
        dusk: Evening crossing of the civil-twilight altitude.
        golden_hour_end: Morning crossing of the golden-hour altitude.
        golden_hour: Evening crossing of the golden-hour altitude.
        noon_altitude_degrees: Sun altitude at solar noon.
        midnight_altitude_degrees: Sun altitude at the solar midnight before noon.
        daylight_hours: Hours with the sun above the horizon over the solar
            day (24 in polar day, 0 in polar night).
    """

    solar_noon: _dt.datetime
    sunrise: _dt.datetime | None
    sunset: _dt.datetime | None
    dawn: _dt.datetime | None
    dusk: _dt.datetime | None
    golden_hour_end: _dt.datetime | None
    golden_hour: _dt.datetime | None
    noon_altitude_degrees: float
    midnight_altitude_degrees: float
    daylight_hours: float

    @property
    def is_polar_day(self) -> bool:
        return self.sunrise is None and self.sunset is None and self.midnight_altitude_degrees > 0

    @property
    def is_polar_night(self) -> bool:
        return self.noon_altitude_degrees <= 0


class SeasonPreset(str, Enum):
    """Canonical analysis dates (solstices and equinoxes)."""

    SUMMER = "summer"
    WINTER = "winter"
    SPRING_EQUINOX = "spring"
    FALL_EQUINOX = "fall"

    @property
    def month_day(self) -> tuple[int, int]:
        return _PRESET_MONTH_DAY[self]


_PRESET_MONTH_DAY = {
    SeasonPreset.SUMMER: (6, 21),
    SeasonPreset.WINTER: (12, 21),
    SeasonPreset.SPRING_EQUINOX: (3, 20),
    SeasonPreset.FALL_EQUINOX: (9, 22),
}
