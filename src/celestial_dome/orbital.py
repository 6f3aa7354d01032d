"""
Keplerian propagation of planet positions.

Each planet is propagated from fixed J2000 mean elements:
mean anomaly -> eccentric anomaly (fixed-iteration Kepler solve) ->
heliocentric orbital-plane position -> ecliptic frame -> geocentric direction.

Approximations (deliberate, documented):
- Kepler's equation is iterated a fixed number of times without a
  convergence check; error grows with eccentricity (Mercury, Pluto).
- Elements have no secular rates and no perturbations.
- Earth is held at a fixed heliocentric point, (1, 0, 0) AU, instead of being
  propagated. Every geocentric direction depends on this; changing it moves
  all planets.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import numpy as np

from .coordinates import (
    EquatorialPosition,
    ecliptic_to_equatorial,
    unit_vector_to_ecliptic,
)
from .time_converter import days_since_j2000, normalize_degrees

logger = logging.getLogger(__name__)

KEPLER_ITERATIONS = 5

# Fixed heliocentric ecliptic position used for the observer's planet (AU)
EARTH_POSITION_AU = np.array([1.0, 0.0, 0.0])


@dataclass(frozen=True)
class OrbitalElements:
    """
    Keplerian orbital elements at the J2000.0 epoch.

    Units:
        semi_major_axis        : AU
        eccentricity           : dimensionless
        inclination            : degrees
        ascending_node         : degrees (Omega)
        argument_of_periapsis  : degrees (omega)
        mean_longitude         : degrees at epoch (L)
        period_days            : sidereal period in days
    """
    name: str
    semi_major_axis: float
    eccentricity: float
    inclination: float
    ascending_node: float
    argument_of_periapsis: float
    mean_longitude: float
    period_days: float

    @property
    def longitude_of_periapsis(self) -> float:
        return self.ascending_node + self.argument_of_periapsis


PLANET_ELEMENTS: Dict[str, OrbitalElements] = {
    e.name: e for e in (
        OrbitalElements("Mercury", 0.387, 0.2056, 7.005, 48.331, 29.124, 252.251, 87.97),
        OrbitalElements("Venus", 0.723, 0.0068, 3.394, 76.680, 54.852, 181.979, 224.70),
        OrbitalElements("Mars", 1.524, 0.0934, 1.850, 49.558, 286.502, 355.453, 686.98),
        OrbitalElements("Jupiter", 5.203, 0.0484, 1.303, 100.464, 273.867, 34.396, 4332.59),
        OrbitalElements("Saturn", 9.537, 0.0542, 2.485, 113.665, 339.392, 49.954, 10759.22),
        OrbitalElements("Uranus", 19.191, 0.0472, 0.773, 74.006, 96.998, 313.238, 30685.4),
        OrbitalElements("Neptune", 30.068, 0.0086, 1.770, 131.784, 273.187, -55.120, 60190.0),
        OrbitalElements("Pluto", 39.482, 0.2488, 17.140, 110.299, 113.834, 238.929, 90560.0),
    )
}


@dataclass
class PlanetPosition:
    """Geocentric apparent direction of a planet at one instant."""
    name: str
    direction: np.ndarray          # (3,) unit vector, ecliptic frame
    heliocentric: np.ndarray       # (3,) AU, ecliptic frame
    ecliptic_longitude: float      # degrees
    ecliptic_latitude: float       # degrees
    equatorial: EquatorialPosition
    eccentric_anomaly: float       # radians
    shell_position: np.ndarray     # (3,) direction * shell radius


def mean_anomaly(elements: OrbitalElements, days: float) -> float:
    """
    Mean anomaly in degrees [0, 360).

    Args:
        elements: Orbital elements
        days: Days elapsed since J2000.0
    """
    return normalize_degrees(
        elements.mean_longitude - elements.longitude_of_periapsis
        + 360.0 * days / elements.period_days
    )


def solve_kepler(M: float, eccentricity: float, iterations: int = KEPLER_ITERATIONS) -> float:
    """
    Solve Kepler's equation E = M + e sin(E) by fixed-point iteration.

    Runs exactly ``iterations`` steps from E = M with no convergence test.
    For e = 0 the result equals M exactly.

    Args:
        M: Mean anomaly in radians
        eccentricity: Orbital eccentricity (0 <= e < 1)
        iterations: Number of fixed-point steps

    Returns:
        Eccentric anomaly in radians
    """
    E = M
    for _ in range(iterations):
        E = M + eccentricity * math.sin(E)
    return E


def kepler_residual(E: float, M: float, eccentricity: float) -> float:
    """Residual of Kepler's equation, |E - e sin E - M| in radians."""
    return abs(E - eccentricity * math.sin(E) - M)


def eccentric_anomaly(elements: OrbitalElements, days: float) -> float:
    """Eccentric anomaly in radians after the fixed-iteration solve."""
    return solve_kepler(math.radians(mean_anomaly(elements, days)), elements.eccentricity)


def heliocentric_position(elements: OrbitalElements, days: float) -> np.ndarray:
    """
    Heliocentric ecliptic position in AU.

    Args:
        elements: Orbital elements
        days: Days elapsed since J2000.0

    Returns:
        (3,) array [x, y, z]
    """
    e = elements.eccentricity
    a = elements.semi_major_axis
    E = eccentric_anomaly(elements, days)

    # Position in the orbital plane, x toward periapsis
    xv = a * (math.cos(E) - e)
    yv = a * math.sqrt(1.0 - e * e) * math.sin(E)
    v = math.atan2(yv, xv)
    r = math.hypot(xv, yv)

    node = math.radians(elements.ascending_node)
    incl = math.radians(elements.inclination)
    u = v + math.radians(elements.argument_of_periapsis)

    return np.array([
        r * (math.cos(node) * math.cos(u) - math.sin(node) * math.sin(u) * math.cos(incl)),
        r * (math.sin(node) * math.cos(u) + math.cos(node) * math.sin(u) * math.cos(incl)),
        r * math.sin(u) * math.sin(incl),
    ])


def geocentric_vector(heliocentric: np.ndarray) -> np.ndarray:
    """Vector from the (fixed) Earth position to a heliocentric point, in AU."""
    return np.asarray(heliocentric, dtype=float) - EARTH_POSITION_AU


def planet_position(planet: Union[str, OrbitalElements], jd: float,
                    shell_radius: float = 180.0) -> PlanetPosition:
    """
    Compute a planet's geocentric direction and its point on the planet shell.

    Args:
        planet: Planet name or explicit orbital elements
        jd: Julian Date
        shell_radius: Radius of the planet shell (beyond the star sphere)

    Returns:
        PlanetPosition
    """
    elements = PLANET_ELEMENTS[planet] if isinstance(planet, str) else planet
    days = days_since_j2000(jd)

    helio = heliocentric_position(elements, days)
    geo = geocentric_vector(helio)
    norm = float(np.linalg.norm(geo))
    if norm < 1e-12:
        logger.debug("%s coincides with the fixed Earth position", elements.name)
        direction = -EARTH_POSITION_AU / np.linalg.norm(EARTH_POSITION_AU)
    else:
        direction = geo / norm

    lon, lat = unit_vector_to_ecliptic(direction)

    return PlanetPosition(
        name=elements.name,
        direction=direction,
        heliocentric=helio,
        ecliptic_longitude=lon,
        ecliptic_latitude=lat,
        equatorial=ecliptic_to_equatorial(lon, lat, jd),
        eccentric_anomaly=eccentric_anomaly(elements, days),
        shell_position=direction * shell_radius,
    )


def planet_positions(jd: float, shell_radius: float = 180.0,
                     names: Optional[List[str]] = None) -> List[PlanetPosition]:
    """Positions for all (or the named) planets, in table order."""
    selected = names if names is not None else list(PLANET_ELEMENTS)
    return [planet_position(name, jd, shell_radius) for name in selected]
