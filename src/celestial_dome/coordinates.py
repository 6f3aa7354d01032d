"""
Coordinate transformations between the ecliptic, equatorial and horizontal
frames, plus the unit-vector mappings used by the two dome view modes.

Frames:
- Equatorial unit vectors: x toward the vernal equinox, z toward the north
  celestial pole (right-handed).
- Horizontal unit vectors: East-North-Up, x East, y North, z Up.

Based on astronomical algorithms from:
- Jean Meeus "Astronomical Algorithms", ch. 13 and 22
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

from .errors import MathDomainError
from .time_converter import (
    centuries_since_j2000,
    local_sidereal_time_jd,
    normalize_degrees,
    normalize_hours,
)

logger = logging.getLogger(__name__)

# Below this the acos azimuth formula divides by ~0 (pole observer or zenith body)
_DEGENERATE_DENOMINATOR = 1e-12


class ViewMode(Enum):
    """How body positions are mapped onto the dome."""
    CENTER = "center"    # fixed RA/Dec mapping, all stars visible
    HORIZON = "horizon"  # apparent Alt/Az for the observer


@dataclass(frozen=True)
class EclipticPosition:
    """Position in ecliptic coordinates."""
    longitude: float    # Degrees (0-360)
    latitude: float     # Degrees (-90 to +90)


@dataclass(frozen=True)
class EquatorialPosition:
    """Position in equatorial coordinates."""
    ra: float           # Right Ascension in hours (0-24)
    dec: float          # Declination in degrees (-90 to +90)

    @property
    def ra_degrees(self) -> float:
        """RA in degrees."""
        return self.ra * 15.0

    def to_unit_vector(self) -> np.ndarray:
        return equatorial_to_unit_vector(self.ra, self.dec)


@dataclass(frozen=True)
class HorizontalPosition:
    """Position in horizontal coordinates."""
    altitude: float     # Degrees above horizon (-90 to +90)
    azimuth: float      # Degrees from North through East (0-360)

    @property
    def above_horizon(self) -> bool:
        return self.altitude > 0.0

    def to_unit_vector(self) -> np.ndarray:
        return horizontal_to_unit_vector(self.altitude, self.azimuth)


def clamp_unit(value: float) -> float:
    """
    Clamp a sine/cosine value into the domain of asin/acos.

    Floating-point drift just outside [-1, 1] is clamped silently. A NaN or
    infinity means an upstream fault and is never passed on.

    Raises:
        MathDomainError: If value is not finite
    """
    if not math.isfinite(value):
        raise MathDomainError(f"non-finite argument to inverse trig function: {value}")
    if value > 1.0:
        return 1.0
    if value < -1.0:
        return -1.0
    return value


def clamp_latitude(value: float) -> float:
    """Clamp a declination/altitude to [-90, 90]."""
    return max(-90.0, min(90.0, value))


def mean_obliquity(T: float) -> float:
    """
    Mean obliquity of the ecliptic in degrees (Meeus 22.2, degree form).

    Args:
        T: Julian centuries since J2000.0
    """
    return 23.439291 - 0.0130042 * T - 1.64e-7 * T**2 + 5.04e-7 * T**3


def ecliptic_to_equatorial(longitude: float, latitude: float, jd: float) -> EquatorialPosition:
    """
    Convert ecliptic longitude/latitude to right ascension/declination.

    Args:
        longitude: Ecliptic longitude (lambda) in degrees
        latitude: Ecliptic latitude (beta) in degrees
        jd: Julian Date, selects the obliquity

    Returns:
        Equatorial position (RA hours, Dec degrees)
    """
    epsilon_rad = math.radians(mean_obliquity(centuries_since_j2000(jd)))
    lambda_rad = math.radians(longitude)
    beta_rad = math.radians(latitude)

    ra = math.degrees(math.atan2(
        math.sin(lambda_rad) * math.cos(epsilon_rad) - math.tan(beta_rad) * math.sin(epsilon_rad),
        math.cos(lambda_rad)
    ))

    sin_dec = (math.sin(beta_rad) * math.cos(epsilon_rad) +
               math.cos(beta_rad) * math.sin(epsilon_rad) * math.sin(lambda_rad))
    dec = math.degrees(math.asin(clamp_unit(sin_dec)))

    return EquatorialPosition(ra=normalize_hours(ra / 15.0), dec=clamp_latitude(dec))


def hour_angle(ra_hours: float, jd: float, longitude: float) -> float:
    """Local hour angle in degrees [0, 360)."""
    lst = local_sidereal_time_jd(jd, longitude)
    return normalize_degrees(lst - ra_hours * 15.0)


def equatorial_to_horizontal(ra_hours: float, dec: float, jd: float,
                             latitude: float, longitude: float) -> HorizontalPosition:
    """
    Convert equatorial coordinates to horizontal (azimuth/altitude).

    Args:
        ra_hours: Right ascension in hours
        dec: Declination in degrees
        jd: Julian Date of the observation
        latitude: Observer latitude in degrees
        longitude: Observer east longitude in degrees

    Returns:
        Horizontal position (altitude, azimuth)
    """
    ha_rad = math.radians(hour_angle(ra_hours, jd, longitude))
    dec_rad = math.radians(dec)
    lat_rad = math.radians(latitude)

    # Altitude
    sin_alt = clamp_unit(math.sin(dec_rad) * math.sin(lat_rad) +
                         math.cos(dec_rad) * math.cos(lat_rad) * math.cos(ha_rad))
    alt_rad = math.asin(sin_alt)

    # Azimuth
    denominator = math.cos(lat_rad) * math.cos(alt_rad)
    if abs(denominator) > _DEGENERATE_DENOMINATOR:
        cos_az = clamp_unit((math.sin(dec_rad) - math.sin(lat_rad) * sin_alt) / denominator)
        az = math.degrees(math.acos(cos_az))
        if math.sin(ha_rad) > 0:
            az = 360.0 - az
    else:
        az = math.degrees(math.atan2(
            -math.sin(ha_rad) * math.cos(dec_rad),
            math.sin(dec_rad) * math.cos(lat_rad) - math.cos(dec_rad) * math.sin(lat_rad) * math.cos(ha_rad)
        ))

    return HorizontalPosition(altitude=clamp_latitude(math.degrees(alt_rad)),
                              azimuth=normalize_degrees(az))


def equatorial_to_unit_vector(ra_hours: float, dec: float) -> np.ndarray:
    """
    Map RA/Dec directly onto the unit sphere ("center" view).

    Independent of the observer's horizon.
    """
    ra_rad = math.radians(ra_hours * 15.0)
    dec_rad = math.radians(dec)
    cos_dec = math.cos(dec_rad)
    return np.array([
        cos_dec * math.cos(ra_rad),
        cos_dec * math.sin(ra_rad),
        math.sin(dec_rad),
    ])


def horizontal_to_unit_vector(altitude: float, azimuth: float) -> np.ndarray:
    """Convert Alt/Az to an East-North-Up unit vector."""
    alt_rad = math.radians(altitude)
    az_rad = math.radians(azimuth)
    return np.array([
        math.cos(alt_rad) * math.sin(az_rad),  # East
        math.cos(alt_rad) * math.cos(az_rad),  # North
        math.sin(alt_rad),                     # Up
    ])


def unit_vector_to_horizontal(vector: np.ndarray) -> HorizontalPosition:
    """Recover Alt/Az from an East-North-Up direction (any length > 0)."""
    v = np.asarray(vector, dtype=float)
    norm = float(np.linalg.norm(v))
    if not math.isfinite(norm) or norm == 0.0:
        raise MathDomainError("cannot derive a direction from a zero or non-finite vector")
    east, north, up = v / norm
    altitude = math.degrees(math.asin(clamp_unit(float(up))))
    azimuth = normalize_degrees(math.degrees(math.atan2(east, north)))
    return HorizontalPosition(altitude=altitude, azimuth=azimuth)


def unit_vector_to_ecliptic(vector: np.ndarray) -> Tuple[float, float]:
    """Ecliptic (longitude, latitude) in degrees of an ecliptic-frame vector."""
    x, y, z = (float(c) for c in vector)
    r = math.sqrt(x * x + y * y + z * z)
    if not math.isfinite(r) or r == 0.0:
        raise MathDomainError("cannot derive a direction from a zero or non-finite vector")
    longitude = normalize_degrees(math.degrees(math.atan2(y, x)))
    latitude = math.degrees(math.asin(clamp_unit(z / r)))
    return longitude, latitude


def equatorial_to_horizontal_arrays(ra_hours: np.ndarray, dec: np.ndarray, jd: float,
                                    latitude: float, longitude: float) -> Tuple[np.ndarray, np.ndarray]:
    """
    Vectorized equatorial -> horizontal conversion for many bodies.

    Same convention as ``equatorial_to_horizontal`` (azimuth from North
    through East) but using the atan2 form, which needs no special case
    for pole observers.

    Returns:
        (altitude, azimuth) arrays in degrees
    """
    lst = local_sidereal_time_jd(jd, longitude)
    ha = np.radians(np.mod(lst - np.asarray(ra_hours, dtype=float) * 15.0, 360.0))
    dec_rad = np.radians(np.asarray(dec, dtype=float))
    lat_rad = math.radians(latitude)

    sin_alt = np.clip(np.sin(dec_rad) * math.sin(lat_rad) +
                      np.cos(dec_rad) * math.cos(lat_rad) * np.cos(ha), -1.0, 1.0)
    altitude = np.degrees(np.arcsin(sin_alt))
    azimuth = np.degrees(np.arctan2(
        -np.sin(ha) * np.cos(dec_rad),
        np.sin(dec_rad) * math.cos(lat_rad) - np.cos(dec_rad) * math.sin(lat_rad) * np.cos(ha)
    ))
    azimuth = np.mod(azimuth, 360.0)
    azimuth = np.where(azimuth >= 360.0, 0.0, azimuth)
    return altitude, azimuth


def horizontal_to_unit_vectors(altitude: np.ndarray, azimuth: np.ndarray) -> np.ndarray:
    """(N,) Alt/Az arrays in degrees to (N, 3) East-North-Up unit vectors."""
    alt = np.radians(altitude)
    az = np.radians(azimuth)
    return np.column_stack([np.cos(alt) * np.sin(az), np.cos(alt) * np.cos(az), np.sin(alt)])
