"""
Celestial Dome
==============

A real-time sky model for a device-aligned star dome: star, Sun, Moon and
planet positions for an observer, plus a dome rotation fused from compass,
tilt and sidereal time.

Main components:
- time_converter: Julian Date and sidereal time
- coordinates: Ecliptic / equatorial / horizontal transforms and dome vectors
- ephemeris: Low-precision Sun and Moon positions, Moon phase
- orbital: Keplerian planet propagation
- catalog: Named bright stars plus a seeded procedural extension
- orientation: Compass / tilt / sidereal fusion into the dome rotation
- sky: Tick-driven engine producing one SkyFrame per update
"""

__version__ = "0.1.0"

from .config import Config, ObserverConfig, ViewConfig, OrientationConfig, CatalogConfig
from .errors import CelestialDomeError, InvalidInput, SensorUnavailable, MathDomainError
from .coordinates import ViewMode, EquatorialPosition, HorizontalPosition, equatorial_to_horizontal
from .time_converter import julian_date, local_sidereal_time
from .ephemeris import MoonPhase, moon_phase, sun_position, moon_position
from .orbital import OrbitalElements, PLANET_ELEMENTS, planet_position, solve_kepler
from .catalog import StarCatalog, StarRecord, BodyKind, build_catalog
from .sensors import SensorReading, SensorSource, SimulatedSensors, StaticSensors
from .orientation import OrientationFusion, FusionMode, TrackingState
from .sky import SkyDome, SkyFrame, BodyPosition, ObserverState

__all__ = [
    "Config",
    "ObserverConfig",
    "ViewConfig",
    "OrientationConfig",
    "CatalogConfig",
    "CelestialDomeError",
    "InvalidInput",
    "SensorUnavailable",
    "MathDomainError",
    "ViewMode",
    "EquatorialPosition",
    "HorizontalPosition",
    "equatorial_to_horizontal",
    "julian_date",
    "local_sidereal_time",
    "MoonPhase",
    "moon_phase",
    "sun_position",
    "moon_position",
    "OrbitalElements",
    "PLANET_ELEMENTS",
    "planet_position",
    "solve_kepler",
    "StarCatalog",
    "StarRecord",
    "BodyKind",
    "build_catalog",
    "SensorReading",
    "SensorSource",
    "SimulatedSensors",
    "StaticSensors",
    "OrientationFusion",
    "FusionMode",
    "TrackingState",
    "SkyDome",
    "SkyFrame",
    "BodyPosition",
    "ObserverState",
    "__version__",
]
