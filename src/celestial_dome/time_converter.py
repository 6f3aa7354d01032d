"""
Time conversions for the sky model.

Provides:
- Julian Date from a civil datetime (Meeus, "Astronomical Algorithms", ch. 7)
- Greenwich and local mean sidereal time
- Angle normalization helpers shared by the other modules

All functions are pure; naive datetimes are taken to be UTC.
"""

import math
from datetime import datetime, timezone

J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0


def normalize_degrees(angle: float) -> float:
    """Wrap an angle to [0, 360)."""
    wrapped = angle % 360.0
    # -1e-17 % 360.0 == 360.0 in floating point
    if wrapped >= 360.0:
        wrapped = 0.0
    return wrapped


def normalize_hours(hours: float) -> float:
    """Wrap a right ascension to [0, 24)."""
    wrapped = hours % 24.0
    if wrapped >= 24.0:
        wrapped = 0.0
    return wrapped


def shortest_arc(from_deg: float, to_deg: float) -> float:
    """
    Signed shortest angular step from one heading to another.

    Args:
        from_deg: Starting angle in degrees
        to_deg: Target angle in degrees

    Returns:
        Difference in (-180, 180]
    """
    delta = (to_deg - from_deg) % 360.0
    if delta > 180.0:
        delta -= 360.0
    return delta


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def julian_date(dt: datetime) -> float:
    """
    Calculate Julian Date from datetime.

    Args:
        dt: Datetime, UTC if naive

    Returns:
        Julian Date
    """
    dt = _as_utc(dt)

    year = dt.year
    month = dt.month
    seconds = dt.second + dt.microsecond / 1e6
    day = dt.day + (dt.hour + dt.minute / 60.0 + seconds / 3600.0) / 24.0

    if month <= 2:
        year -= 1
        month += 12

    A = math.floor(year / 100)
    B = 2 - A + math.floor(A / 4)

    return (math.floor(365.25 * (year + 4716)) + math.floor(30.6001 * (month + 1))
            + day + B - 1524.5)


def days_since_j2000(jd: float) -> float:
    return jd - J2000


def centuries_since_j2000(jd: float) -> float:
    """Julian centuries from J2000.0"""
    return (jd - J2000) / DAYS_PER_CENTURY


def greenwich_sidereal_time(jd: float) -> float:
    """
    Greenwich Mean Sidereal Time in degrees [0, 360).

    Cubic polynomial in centuries since J2000 (Meeus 12.4).
    """
    T = centuries_since_j2000(jd)
    gmst = (280.46061837 + 360.98564736629 * (jd - J2000)
            + 0.000387933 * T**2 - T**3 / 38710000.0)
    return normalize_degrees(gmst)


def local_sidereal_time_jd(jd: float, longitude_deg: float) -> float:
    """Local Sidereal Time in degrees for a Julian Date and east longitude."""
    return normalize_degrees(greenwich_sidereal_time(jd) + longitude_deg)


def local_sidereal_time(dt: datetime, longitude_deg: float) -> float:
    """
    Calculate Local Sidereal Time.

    Args:
        dt: Datetime, UTC if naive
        longitude_deg: Degrees East (positive) / West (negative)

    Returns:
        LST in degrees (0-360)
    """
    return local_sidereal_time_jd(julian_date(dt), longitude_deg)
