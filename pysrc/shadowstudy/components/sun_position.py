"""
Sun position component.

NOAA solar-calculator formulation:
- Julian century from the UTC instant
- Geometric mean longitude, mean anomaly and equation of centre
- Apparent longitude and corrected obliquity -> declination
- Equation of time -> true solar time -> hour angle
- Hour angle, declination, latitude -> altitude and azimuth

Altitude is geometric (no atmospheric refraction). Valid for all
latitudes including the poles; altitudes below the horizon are returned
as-is.

Reference:
    NOAA Global Monitoring Laboratory, Solar Calculation Details
    (after Meeus, Astronomical Algorithms, 1991)
"""

from __future__ import annotations

import datetime as _dt
import math

from ..constants import (
    CIVIL_TWILIGHT_DEG,
    DAYS_PER_JULIAN_CENTURY,
    GOLDEN_HOUR_DEG,
    JULIAN_DATE_J2000,
    JULIAN_DATE_UNIX_EPOCH,
)
from ..models.geometry import GeoPoint
from ..models.sun import SolarTimes, SunPosition
from ..shadow_logging import get_logger
from ..utils import normalize_azimuth

logger = get_logger(__name__)

_ECCENTRICITY = 0.016708634

# Bisection stops once the bracket is narrower than this
_CROSSING_TOLERANCE = _dt.timedelta(milliseconds=500)


def to_utc(when: _dt.datetime) -> _dt.datetime:
    """Return ``when`` as a UTC-aware datetime; naive datetimes are taken as UTC."""
    if when.tzinfo is None:
        return when.replace(tzinfo=_dt.timezone.utc)
    return when.astimezone(_dt.timezone.utc)


def _solar_coordinates(julian_day: float) -> tuple[float, float]:
    """
    Declination (radians) and equation of time (minutes) for a Julian day.
    """
    jc = (julian_day - JULIAN_DATE_J2000) / DAYS_PER_JULIAN_CENTURY

    # Geometric mean longitude and mean anomaly (degrees)
    l0 = (280.46646 + jc * (36000.76983 + 0.0003032 * jc)) % 360.0
    m = (357.52911 + jc * (35999.05029 - 0.0001537 * jc)) % 360.0
    m_rad = math.radians(m)
    e = _ECCENTRICITY - jc * (0.000042037 + 0.0000001267 * jc)

    # Equation of centre
    c = (
        math.sin(m_rad) * (1.914602 - jc * (0.004817 + 0.000014 * jc))
        + math.sin(2 * m_rad) * (0.019993 - 0.000101 * jc)
        + math.sin(3 * m_rad) * 0.000289
    )

    omega = math.radians(125.04 - 1934.136 * jc)
    apparent_longitude = math.radians(l0 + c - 0.00569 - 0.00478 * math.sin(omega))

    mean_obliquity = 23 + (26 + (21.448 - jc * (46.815 + jc * (0.00059 - jc * 0.001813))) / 60) / 60
    obliquity = math.radians(mean_obliquity + 0.00256 * math.cos(omega))

    declination = math.asin(math.sin(obliquity) * math.sin(apparent_longitude))

    y = math.tan(obliquity / 2) ** 2
    l0_rad = math.radians(l0)
    eot = 4 * math.degrees(
        y * math.sin(2 * l0_rad)
        - 2 * e * math.sin(m_rad)
        + 4 * e * y * math.sin(m_rad) * math.cos(2 * l0_rad)
        - 0.5 * y * y * math.sin(4 * l0_rad)
        - 1.25 * e * e * math.sin(2 * m_rad)
    )
    return declination, eot


def _julian_day(when: _dt.datetime) -> float:
    return when.timestamp() / 86400.0 + JULIAN_DATE_UNIX_EPOCH


def compute_sun_position(latitude: float, longitude: float, when: _dt.datetime) -> SunPosition:
    """
    Apparent sun position for one instant.

    Args:
        latitude: Site latitude in degrees, [-90, 90].
        longitude: Site longitude in degrees, [-180, 180].
        when: The instant. Naive datetimes are interpreted as UTC.

    Returns:
        SunPosition with altitude in [-90, 90] and azimuth in [0, 360)
        measured clockwise from north. Timestamp is UTC-aware.

    Raises:
        ValueError: Latitude or longitude out of range.

    Example:
        >>> pos = compute_sun_position(40.7128, -74.0060, datetime(2024, 6, 21, 16, 58))
        >>> round(pos.altitude_degrees)
        73
    """
    GeoPoint(latitude, longitude)
    when = to_utc(when)

    declination, eot = _solar_coordinates(_julian_day(when))

    midnight = when.replace(hour=0, minute=0, second=0, microsecond=0)
    utc_minutes = (when - midnight).total_seconds() / 60.0
    true_solar_minutes = utc_minutes + eot + 4.0 * longitude
    hour_angle = math.radians(true_solar_minutes / 4.0 - 180.0)

    phi = math.radians(latitude)
    sin_alt = math.sin(phi) * math.sin(declination) + math.cos(phi) * math.cos(declination) * math.cos(hour_angle)
    altitude = math.degrees(math.asin(max(-1.0, min(1.0, sin_alt))))

    # Azimuth from south (westward positive), then rotated to north-clockwise
    azimuth_south = math.atan2(
        math.sin(hour_angle),
        math.cos(hour_angle) * math.sin(phi) - math.tan(declination) * math.cos(phi),
    )
    azimuth = normalize_azimuth(math.degrees(azimuth_south) + 180.0)

    return SunPosition(altitude_degrees=altitude, azimuth_degrees=azimuth, timestamp=when)


def solar_noon(longitude: float, date: _dt.date) -> _dt.datetime:
    """
    UTC instant of solar noon on the local mean-solar ``date`` at ``longitude``.

    Closed form ``12:00 - longitude/15 h - EoT``, iterated so the equation of
    time is evaluated at the noon it produces.
    """
    midnight = _dt.datetime(date.year, date.month, date.day, tzinfo=_dt.timezone.utc)
    noon = midnight + _dt.timedelta(minutes=720.0 - 4.0 * longitude)
    for _ in range(3):
        _, eot = _solar_coordinates(_julian_day(noon))
        noon = midnight + _dt.timedelta(minutes=720.0 - 4.0 * longitude - eot)
    return noon


def _find_crossing(
    latitude: float,
    longitude: float,
    start: _dt.datetime,
    end: _dt.datetime,
    threshold: float,
) -> _dt.datetime | None:
    """
    Instant in [start, end] where altitude crosses ``threshold``.

    Altitude must be monotonic over the bracket (solar midnight to noon, or
    noon to the following midnight). Returns None when both ends lie on the
    same side of the threshold.
    """

    def offset(t: _dt.datetime) -> float:
        return compute_sun_position(latitude, longitude, t).altitude_degrees - threshold

    lo_val = offset(start)
    hi_val = offset(end)
    if (lo_val > 0) == (hi_val > 0):
        return None

    lo, hi = start, end
    while hi - lo > _CROSSING_TOLERANCE:
        mid = lo + (hi - lo) / 2
        mid_val = offset(mid)
        if (mid_val > 0) == (lo_val > 0):
            lo, lo_val = mid, mid_val
        else:
            hi = mid
    return lo + (hi - lo) / 2


def solar_times(
    latitude: float,
    longitude: float,
    date: _dt.date,
    civil_twilight_deg: float = CIVIL_TWILIGHT_DEG,
    golden_hour_deg: float = GOLDEN_HOUR_DEG,
) -> SolarTimes:
    """
    Solar events on one local mean-solar day.

    Solar noon comes from the iterated closed form; every horizon crossing
    is found by bisection between solar midnight and noon (morning) or noon
    and the following solar midnight (evening). A crossing that does not
    happen that day is None.

    Args:
        latitude: Site latitude in degrees.
        longitude: Site longitude in degrees.
        date: Calendar date at the site (local mean solar time).
        civil_twilight_deg: Altitude defining dawn and dusk.
        golden_hour_deg: Altitude bounding the golden hour.

    Returns:
        SolarTimes. ``daylight_hours`` is 24 for polar day and 0 for
        polar night.
    """
    GeoPoint(latitude, longitude)
    if isinstance(date, _dt.datetime):
        date = date.date()

    noon = solar_noon(longitude, date)
    before = noon - _dt.timedelta(hours=12)
    after = noon + _dt.timedelta(hours=12)

    def crossings(threshold: float) -> tuple[_dt.datetime | None, _dt.datetime | None]:
        return (
            _find_crossing(latitude, longitude, before, noon, threshold),
            _find_crossing(latitude, longitude, noon, after, threshold),
        )

    sunrise, sunset = crossings(0.0)
    dawn, dusk = crossings(civil_twilight_deg)
    golden_hour_end, golden_hour = crossings(golden_hour_deg)

    noon_altitude = compute_sun_position(latitude, longitude, noon).altitude_degrees
    midnight_altitude = compute_sun_position(latitude, longitude, before).altitude_degrees

    if sunrise is not None and sunset is not None:
        daylight = (sunset - sunrise).total_seconds() / 3600.0
    elif sunrise is not None:
        daylight = (after - sunrise).total_seconds() / 3600.0
    elif sunset is not None:
        daylight = (sunset - before).total_seconds() / 3600.0
    elif noon_altitude > 0:
        daylight = 24.0
    else:
        daylight = 0.0

    if sunrise is None or sunset is None:
        logger.debug(f"No complete sunrise/sunset at latitude {latitude:.4f} on {date.isoformat()}")

    return SolarTimes(
        solar_noon=noon,
        sunrise=sunrise,
        sunset=sunset,
        dawn=dawn,
        dusk=dusk,
        golden_hour_end=golden_hour_end,
        golden_hour=golden_hour,
        noon_altitude_degrees=noon_altitude,
        midnight_altitude_degrees=midnight_altitude,
        daylight_hours=daylight,
    )
