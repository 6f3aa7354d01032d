"""
Stellar astrophysics helpers for catalog records.

Simple textbook relations: magnitude/luminosity, Stefan-Boltzmann radius,
distance modulus, and a fixed temperature-to-color table.
"""

import math
from enum import Enum
from typing import Tuple

SUN_ABSOLUTE_MAGNITUDE = 4.83
SUN_TEMPERATURE_K = 5778.0
LIGHT_YEARS_PER_PARSEC = 3.26156

RGB = Tuple[float, float, float]


class StarClass(Enum):
    """Harvard spectral class, hottest first."""
    O = 0  # Blue - hottest
    B = 1  # Blue-white
    A = 2  # White
    F = 3  # Yellow-white
    G = 4  # Yellow (Sun is G2)
    K = 5  # Orange
    M = 6  # Red - coolest


class StarType(Enum):
    """Luminosity / evolutionary classification."""
    MAIN_SEQUENCE = "MainSequence"
    GIANT = "Giant"
    SUPERGIANT = "Supergiant"
    HYPERGIANT = "Hypergiant"
    DWARF = "Dwarf"
    SUBDWARF = "SubDwarf"
    WHITE_DWARF = "WhiteDwarf"
    NEUTRON_STAR = "NeutronStar"
    UNKNOWN = "Unknown"


_CLASS_TEMPERATURE = {
    StarClass.O: 40000.0,
    StarClass.B: 20000.0,
    StarClass.A: 10000.0,
    StarClass.F: 7500.0,
    StarClass.G: 5800.0,
    StarClass.K: 4200.0,
    StarClass.M: 3500.0,
}

_CLASS_DESCRIPTION = {
    StarClass.O: "O-type: Blue, extremely hot, massive, luminous",
    StarClass.B: "B-type: Blue-white, hot, massive",
    StarClass.A: "A-type: White, hot",
    StarClass.F: "F-type: Yellow-white",
    StarClass.G: "G-type: Yellow, medium (Sun is G2V)",
    StarClass.K: "K-type: Orange, cooler",
    StarClass.M: "M-type: Red, cool, common",
}

# (upper temperature bound in K, RGB), checked in order
_COLOR_TABLE = (
    (3500.0, (1.0, 0.5, 0.3)),
    (5000.0, (1.0, 0.7, 0.4)),
    (6000.0, (1.0, 0.9, 0.6)),
    (7500.0, (1.0, 1.0, 0.8)),
    (10000.0, (0.9, 0.95, 1.0)),
    (28000.0, (0.7, 0.8, 1.0)),
)
_HOTTEST_COLOR = (0.5, 0.6, 1.0)


def star_class_from_spectral_type(spectral_type: str) -> StarClass:
    """Spectral class from a type string such as "K2III"; G when unknown."""
    if not spectral_type:
        return StarClass.G
    try:
        return StarClass[spectral_type[0].upper()]
    except KeyError:
        return StarClass.G


def temperature_from_class(star_class: StarClass) -> float:
    """Representative effective temperature (K) of a spectral class."""
    return _CLASS_TEMPERATURE[star_class]


def class_description(star_class: StarClass) -> str:
    return _CLASS_DESCRIPTION[star_class]


def luminosity_from_magnitude(absolute_magnitude: float) -> float:
    """
    Luminosity relative to the Sun from absolute magnitude.

    L/L_sun = 10^((M_sun - M) / 2.5)
    """
    return 10.0 ** ((SUN_ABSOLUTE_MAGNITUDE - absolute_magnitude) / 2.5)


def radius_from_luminosity(luminosity: float, temperature_k: float) -> float:
    """
    Radius relative to the Sun (Stefan-Boltzmann).

    R/R_sun = sqrt(L/L_sun) * (T_sun / T)^2
    """
    if temperature_k <= 0:
        return 1.0
    ratio = SUN_TEMPERATURE_K / temperature_k
    return math.sqrt(luminosity) * ratio * ratio


def distance_from_magnitudes(apparent: float, absolute: float) -> float:
    """Distance in parsecs from the distance modulus."""
    return 10.0 ** ((apparent - absolute + 5.0) / 5.0)


def parsecs_to_light_years(parsecs: float) -> float:
    return parsecs * LIGHT_YEARS_PER_PARSEC


def light_years_to_parsecs(light_years: float) -> float:
    return light_years / LIGHT_YEARS_PER_PARSEC


def star_type_from_spectral_type(spectral_type: str) -> StarType:
    """Luminosity class from the roman numeral suffix ("III" giant, "I" supergiant)."""
    if "III" in spectral_type:
        return StarType.GIANT
    if "I" in spectral_type and "II" not in spectral_type and "IV" not in spectral_type:
        return StarType.SUPERGIANT
    return StarType.MAIN_SEQUENCE


def color_from_temperature(temperature_k: float) -> RGB:
    """
    Display color for a surface temperature from a fixed piecewise table.

    Args:
        temperature_k: Effective temperature, clamped to 1000-40000 K

    Returns:
        (r, g, b) in 0-1
    """
    temperature_k = max(1000.0, min(40000.0, temperature_k))
    for upper, rgb in _COLOR_TABLE:
        if temperature_k < upper:
            return rgb
    return _HOTTEST_COLOR
