"""
Low-precision Sun and Moon ephemerides.

Provides:
- Sun ecliptic position (mean elements + 3-term equation of center)
- Moon ecliptic position (leading terms of the lunar series only)
- Moon phase

Accuracy is roughly 0.01 deg for the Sun and a few tenths of a degree for the
Moon, adequate for an interactive sky display.

Based on astronomical algorithms from:
- Jean Meeus "Astronomical Algorithms", ch. 25 and 47
"""

import math
from dataclasses import dataclass
from typing import Tuple

from .coordinates import (
    EclipticPosition,
    EquatorialPosition,
    HorizontalPosition,
    ecliptic_to_equatorial,
    equatorial_to_horizontal,
)
from .time_converter import centuries_since_j2000, normalize_degrees


@dataclass(frozen=True)
class LunarArguments:
    """Fundamental lunar arguments in degrees, normalized to [0, 360)."""
    elongation: float            # D, mean elongation of the Moon
    sun_anomaly: float           # M, Sun's mean anomaly
    moon_anomaly: float          # M', Moon's mean anomaly
    moon_longitude: float        # L', Moon's mean longitude
    latitude_argument: float     # F, Moon's argument of latitude


@dataclass(frozen=True)
class MoonPhase:
    """
    Moon phase information.

    ``phase`` is a phase-angle fraction, not an illuminated area; use
    ``illumination`` for the lit fraction of the disk.
    """
    phase: float         # ((D + M' - M) mod 360) / 360, in [0, 1)
    elongation: float    # D in degrees
    illumination: float  # Illuminated fraction of the disk (0-1)
    brightness: float    # |sin(pi * phase)|, shading value for the moon model
    name: str            # Phase name


def solar_mean_anomaly(T: float) -> float:
    """Sun's mean anomaly in degrees (not normalized)."""
    return 357.52911 + 35999.05029 * T - 0.0001537 * T**2


def solar_mean_longitude(T: float) -> float:
    """Sun's geometric mean longitude in degrees (not normalized)."""
    return 280.46646 + 36000.76983 * T + 0.0003032 * T**2


def sun_ecliptic(jd: float) -> EclipticPosition:
    """
    Calculate the Sun's apparent ecliptic position.

    Args:
        jd: Julian Date

    Returns:
        Ecliptic longitude (true longitude) and latitude (always 0)
    """
    T = centuries_since_j2000(jd)

    L0 = normalize_degrees(solar_mean_longitude(T))
    M_rad = math.radians(normalize_degrees(solar_mean_anomaly(T)))

    # Equation of center
    C = (1.914602 - 0.004817 * T - 0.000014 * T**2) * math.sin(M_rad) + \
        (0.019993 - 0.000101 * T) * math.sin(2 * M_rad) + \
        0.000289 * math.sin(3 * M_rad)

    return EclipticPosition(longitude=normalize_degrees(L0 + C), latitude=0.0)


def lunar_arguments(jd: float) -> LunarArguments:
    """Linear fundamental arguments of the lunar theory at a Julian Date."""
    T = centuries_since_j2000(jd)
    return LunarArguments(
        elongation=normalize_degrees(297.8501921 + 445267.1114034 * T),
        sun_anomaly=normalize_degrees(357.5291092 + 35999.0502909 * T),
        moon_anomaly=normalize_degrees(134.9633964 + 477198.8675055 * T),
        moon_longitude=normalize_degrees(218.3164477 + 481267.88123421 * T),
        latitude_argument=normalize_degrees(93.2720950 + 483202.0175233 * T),
    )


def moon_ecliptic(jd: float) -> EclipticPosition:
    """
    Calculate the Moon's ecliptic position from the leading periodic terms.

    Longitude uses the four largest terms (evection, variation, ...), latitude
    the three largest; the truncation error is a few tenths of a degree.
    """
    args = lunar_arguments(jd)
    D = math.radians(args.elongation)
    Mp = math.radians(args.moon_anomaly)
    F = math.radians(args.latitude_argument)

    longitude = (args.moon_longitude
                 + 6.289 * math.sin(Mp)
                 + 1.274 * math.sin(2 * D - Mp)
                 + 0.658 * math.sin(2 * D)
                 + 0.214 * math.sin(2 * Mp))

    latitude = (5.128 * math.sin(F)
                + 0.281 * math.sin(Mp + F)
                + 0.278 * math.sin(Mp - F))

    return EclipticPosition(longitude=normalize_degrees(longitude), latitude=latitude)


def _phase_name(fraction: float) -> str:
    if fraction < 0.03 or fraction > 0.97:
        return "New Moon"
    elif fraction < 0.22:
        return "Waxing Crescent"
    elif fraction < 0.28:
        return "First Quarter"
    elif fraction < 0.47:
        return "Waxing Gibbous"
    elif fraction < 0.53:
        return "Full Moon"
    elif fraction < 0.72:
        return "Waning Gibbous"
    elif fraction < 0.78:
        return "Last Quarter"
    return "Waning Crescent"


def moon_phase(jd: float) -> MoonPhase:
    """
    Calculate the Moon phase.

    Args:
        jd: Julian Date

    Returns:
        MoonPhase with the phase-angle fraction and derived display values
    """
    args = lunar_arguments(jd)

    phase = normalize_degrees(args.elongation + args.moon_anomaly - args.sun_anomaly) / 360.0
    illumination = (1 - math.cos(math.radians(args.elongation))) / 2
    brightness = abs(math.sin(phase * math.pi))

    return MoonPhase(
        phase=phase,
        elongation=args.elongation,
        illumination=illumination,
        brightness=brightness,
        name=_phase_name(args.elongation / 360.0),
    )


def sun_position(jd: float, latitude: float,
                 longitude: float) -> Tuple[EquatorialPosition, HorizontalPosition]:
    """
    Calculate Sun position.

    Returns:
        Tuple of (equatorial, horizontal) positions
    """
    ecl = sun_ecliptic(jd)
    eq = ecliptic_to_equatorial(ecl.longitude, ecl.latitude, jd)
    return eq, equatorial_to_horizontal(eq.ra, eq.dec, jd, latitude, longitude)


def moon_position(jd: float, latitude: float,
                  longitude: float) -> Tuple[EquatorialPosition, HorizontalPosition, MoonPhase]:
    """
    Calculate Moon position and phase.

    Returns:
        Tuple of (equatorial, horizontal, phase)
    """
    ecl = moon_ecliptic(jd)
    eq = ecliptic_to_equatorial(ecl.longitude, ecl.latitude, jd)
    horiz = equatorial_to_horizontal(eq.ra, eq.dec, jd, latitude, longitude)
    return eq, horiz, moon_phase(jd)


def daylight_intensity(sun_altitude: float) -> float:
    """Sunlight intensity (0-1), ramping from -6 deg (civil twilight) to +6 deg."""
    return max(0.0, min(1.0, (sun_altitude + 6.0) / 12.0))
