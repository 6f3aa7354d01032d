"""
Sky dome engine.

Ties the time, ephemeris, catalog and orientation pieces together behind an
explicit ``initialize()`` / ``tick(elapsed)`` interface. Each tick produces a
SkyFrame: one BodyPosition per star, the Sun, the Moon and each planet, plus
the sidereal time, dome rotation, moon phase and daylight level.

Usage:
    dome = SkyDome(Config())
    dome.initialize()
    frame = dome.tick(0.1)
    print(frame.lst, frame.find("Sirius").direction)
"""

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Iterator, List, Optional, Tuple, Union

import numpy as np

from .catalog import SOLAR_SYSTEM_BODIES, BodyKind, StarCatalog, build_catalog
from .config import Config
from .coordinates import (
    EquatorialPosition,
    ViewMode,
    equatorial_to_horizontal,
    equatorial_to_horizontal_arrays,
    horizontal_to_unit_vector,
    horizontal_to_unit_vectors,
)
from .ephemeris import MoonPhase, daylight_intensity, moon_position, sun_position
from .errors import CelestialDomeError, InvalidInput
from .orbital import planet_positions
from .orientation import FusionMode, OrientationFusion, TrackingState
from .sensors import SensorSource
from .time_converter import julian_date, local_sidereal_time_jd

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

# Marks "leave the observer time as it is" in set_observer
_UNCHANGED = object()

_DATETIME_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%dT%H:%M:%S",
    "%Y-%m-%dT%H:%M",
    "%Y-%m-%d",
)


def system_clock() -> datetime:
    return datetime.now(timezone.utc)


def _local_timezone(utc_offset_hours: Optional[float]) -> timezone:
    if utc_offset_hours is None:
        return datetime.now().astimezone().tzinfo
    return timezone(timedelta(hours=utc_offset_hours))


def parse_datetime_text(text: str, time_mode: str = "utc",
                        utc_offset_hours: Optional[float] = None) -> datetime:
    """
    Parse a user-entered civil date/time into an aware UTC datetime.

    Args:
        text: "YYYY-MM-DD[ HH:MM[:SS]]" (a "T" separator is accepted)
        time_mode: "utc" or "local"; naive input is read in this zone
        utc_offset_hours: Offset for "local"; None uses the host time zone

    Raises:
        InvalidInput: If the text is not a valid date/time
    """
    text = (text or "").strip()
    for fmt in _DATETIME_FORMATS:
        try:
            parsed = datetime.strptime(text, fmt)
            break
        except ValueError:
            continue
    else:
        raise InvalidInput(f"unrecognized date/time {text!r}, expected YYYY-MM-DD HH:MM[:SS]")

    tz = timezone.utc if time_mode == "utc" else _local_timezone(utc_offset_hours)
    return parsed.replace(tzinfo=tz).astimezone(timezone.utc)


def _parse_coordinate(text: str, name: str) -> float:
    try:
        value = float(str(text).strip())
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"{name} is not a number: {text!r}") from e
    return value


@dataclass
class ObserverState:
    """Live observer location and optional fixed instant (aware, UTC)."""
    latitude: float
    longitude: float
    time_override: Optional[datetime] = None


def _as_degrees(value, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise InvalidInput(f"{name} is not a number: {value!r}") from e


def validate_observer(latitude: float, longitude: float) -> Tuple[float, float]:
    """
    Check an observer location.

    Returns:
        (latitude, longitude) as floats

    Raises:
        InvalidInput: Unless both are finite numbers in range
    """
    lat = _as_degrees(latitude, "latitude")
    lon = _as_degrees(longitude, "longitude")
    if not math.isfinite(lat) or not -90.0 <= lat <= 90.0:
        raise InvalidInput(f"latitude must be within [-90, 90], got {latitude!r}")
    if not math.isfinite(lon) or not -180.0 <= lon <= 180.0:
        raise InvalidInput(f"longitude must be within [-180, 180], got {longitude!r}")
    return lat, lon


@dataclass(frozen=True)
class BodyPosition:
    """
    Where one body sits on the dome.

    ``direction`` is an equatorial unit vector in center view and an
    East-North-Up unit vector in horizon view. Altitude and azimuth are only
    set in horizon view.
    """
    name: str
    kind: BodyKind
    direction: np.ndarray
    position: np.ndarray                 # direction * sphere (or planet shell) radius
    altitude: Optional[float] = None
    azimuth: Optional[float] = None
    magnitude: Optional[float] = None

    @property
    def above_horizon(self) -> Optional[bool]:
        return None if self.altitude is None else self.altitude > 0.0


@dataclass
class SkyFrame:
    """Snapshot of one tick's outputs."""
    time: datetime
    jd: float
    lst: float                           # local sidereal time, degrees
    view_mode: ViewMode
    stars: List[BodyPosition]
    sun: Optional[BodyPosition]
    moon: Optional[BodyPosition]
    planets: List[BodyPosition]
    dome_rotation: np.ndarray            # quaternion [x, y, z, w]
    moon_phase: MoonPhase
    daylight: float
    fusion_mode: FusionMode
    tracking: TrackingState
    tick: int = 0

    def bodies(self) -> Iterator[BodyPosition]:
        yield from self.stars
        if self.sun is not None:
            yield self.sun
        if self.moon is not None:
            yield self.moon
        yield from self.planets

    def find(self, name: str) -> Optional[BodyPosition]:
        wanted = name.lower()
        return next((b for b in self.bodies() if b.name.lower() == wanted), None)


class SkyDome:
    """
    Tick-driven sky engine with a last-known-good error boundary.

    Single-threaded: every mutation happens inside the caller's thread, and
    ``frame`` always holds the most recent successfully computed SkyFrame.
    """

    def __init__(self, config: Optional[Config] = None,
                 catalog: Optional[StarCatalog] = None,
                 sensors: Optional[SensorSource] = None,
                 clock: Optional[Clock] = None):
        self.config = config if config is not None else Config()
        self.catalog = catalog
        self.clock = clock if clock is not None else system_clock
        self.fusion = OrientationFusion(sensors, self.config.orientation)

        obs = self.config.observer
        self.observer = ObserverState(obs.latitude, obs.longitude)
        if obs.datetime_override:
            self.observer.time_override = parse_datetime_text(
                obs.datetime_override, obs.time_mode, obs.utc_offset_hours)

        self.view_mode = ViewMode(self.config.view.mode)
        self.frame: Optional[SkyFrame] = None
        self.ticks = 0
        self.failures = 0
        self._star_ra = np.empty(0)
        self._star_dec = np.empty(0)
        self._star_equatorial = np.empty((0, 3))

    # -- lifecycle ---------------------------------------------------------

    @property
    def initialized(self) -> bool:
        return self.frame is not None

    def initialize(self) -> SkyFrame:
        """Build the catalog (unless injected) and compute the first frame."""
        if self.catalog is None:
            self.catalog = build_catalog(self.config.catalog)

        self._star_ra = np.array([s.ra for s in self.catalog])
        self._star_dec = np.array([s.dec for s in self.catalog])
        ra_rad = np.radians(self._star_ra * 15.0)
        dec_rad = np.radians(self._star_dec)
        self._star_equatorial = np.column_stack([
            np.cos(dec_rad) * np.cos(ra_rad),
            np.cos(dec_rad) * np.sin(ra_rad),
            np.sin(dec_rad),
        ])

        logger.info("Sky dome initialized: %d stars, view=%s, observer=(%.4f, %.4f)",
                    len(self.catalog), self.view_mode.value,
                    self.observer.latitude, self.observer.longitude)
        try:
            self.frame = self._compute(0.0)
        except Exception as e:
            self.failures += 1
            logger.error("Initial frame failed: %s", e, exc_info=True)
            raise CelestialDomeError(f"could not compute the initial sky frame: {e}") from e
        return self.frame

    def tick(self, elapsed: float) -> Optional[SkyFrame]:
        """
        Advance the engine by ``elapsed`` seconds and return the new frame.

        Any failure inside the tick is logged and the previous frame is
        returned unchanged (None until a first frame has been computed).
        """
        if not self.initialized:
            try:
                return self.initialize()
            except CelestialDomeError:
                return None

        try:
            frame = self._compute(elapsed)
        except Exception as e:
            self.failures += 1
            logger.error("Tick %d failed, keeping last frame: %s", self.ticks, e, exc_info=True)
            return self.frame

        self.frame = frame
        return frame

    # -- observer / controls -----------------------------------------------

    def current_time(self) -> datetime:
        if self.observer.time_override is not None:
            return self.observer.time_override
        now = self.clock()
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        return now

    def set_observer(self, latitude: Optional[float] = None,
                     longitude: Optional[float] = None,
                     when=_UNCHANGED):
        """
        Update the observer. Omitted fields keep their value.

        Args:
            latitude: Degrees [-90, 90]
            longitude: Degrees [-180, 180]
            when: Fixed instant (naive = UTC), None to follow the clock again,
                or omitted to leave the time unchanged

        Raises:
            InvalidInput: The update is rejected and the previous state kept
        """
        lat, lon = validate_observer(
            self.observer.latitude if latitude is None else latitude,
            self.observer.longitude if longitude is None else longitude)

        override = self.observer.time_override
        if when is None:
            override = None
        elif isinstance(when, datetime):
            override = when.replace(tzinfo=timezone.utc) if when.tzinfo is None else when.astimezone(timezone.utc)
        elif when is not _UNCHANGED:
            raise InvalidInput(f"when must be a datetime or None, got {when!r}")

        self.observer = ObserverState(float(lat), float(lon), override)
        logger.info("Observer set to (%.4f, %.4f), time=%s", lat, lon,
                    override.isoformat() if override else "clock")

    def set_observer_from_text(self, latitude: Optional[str] = None,
                               longitude: Optional[str] = None,
                               datetime_text: Optional[str] = None):
        """Parse user-entered text fields and apply them via ``set_observer``."""
        lat = None if latitude in (None, "") else _parse_coordinate(latitude, "latitude")
        lon = None if longitude in (None, "") else _parse_coordinate(longitude, "longitude")
        when = _UNCHANGED
        if datetime_text:
            obs = self.config.observer
            when = parse_datetime_text(datetime_text, obs.time_mode, obs.utc_offset_hours)
        self.set_observer(lat, lon, when)

    def set_view_mode(self, mode: Union[ViewMode, str]):
        try:
            self.view_mode = ViewMode(mode)
        except ValueError as e:
            raise InvalidInput(f"unknown view mode {mode!r}") from e
        logger.info("View mode: %s", self.view_mode.value)

    def _lst(self) -> float:
        return local_sidereal_time_jd(julian_date(self.current_time()), self.observer.longitude)

    def set_ar_tracking(self, enabled: bool):
        self.fusion.set_ar_tracking(enabled, self._lst())

    def set_smoothing_factor(self, factor: float):
        self.fusion.set_smoothing_factor(factor)

    def recalibrate(self, samples: Optional[int] = None):
        self.fusion.recalibrate(self._lst(), samples)

    def quick_realign(self):
        self.fusion.quick_realign(self._lst())

    def reset(self):
        """Discard derived orientation state; re-derived on the next tick."""
        self.fusion.reset()

    # -- per-tick computation ----------------------------------------------

    def _stars(self, jd: float) -> List[BodyPosition]:
        radius = self.config.view.sphere_radius
        if self.view_mode is ViewMode.CENTER:
            directions = self._star_equatorial
            alt = az = None
        else:
            alt, az = equatorial_to_horizontal_arrays(
                self._star_ra, self._star_dec, jd,
                self.observer.latitude, self.observer.longitude)
            directions = horizontal_to_unit_vectors(alt, az)

        positions = directions * radius
        stars = []
        for i, star in enumerate(self.catalog):
            stars.append(BodyPosition(
                name=star.name,
                kind=BodyKind.STAR,
                direction=directions[i],
                position=positions[i],
                altitude=None if alt is None else float(alt[i]),
                azimuth=None if az is None else float(az[i]),
                magnitude=star.magnitude,
            ))
        return stars

    def _place(self, name: str, kind: BodyKind, eq: EquatorialPosition,
               jd: float, radius: float) -> BodyPosition:
        if self.view_mode is ViewMode.CENTER:
            direction = eq.to_unit_vector()
            return BodyPosition(name, kind, direction, direction * radius)
        horiz = equatorial_to_horizontal(eq.ra, eq.dec, jd,
                                         self.observer.latitude, self.observer.longitude)
        direction = horizontal_to_unit_vector(horiz.altitude, horiz.azimuth)
        return BodyPosition(name, kind, direction, direction * radius,
                            altitude=horiz.altitude, azimuth=horiz.azimuth)

    def _compute(self, elapsed: float) -> SkyFrame:
        if not math.isfinite(elapsed) or elapsed < 0:
            raise CelestialDomeError(f"invalid elapsed time {elapsed!r}")

        view = self.config.view
        now = self.current_time()
        jd = julian_date(now)
        lat, lon = self.observer.latitude, self.observer.longitude
        lst = local_sidereal_time_jd(jd, lon)

        rotation = self.fusion.update(elapsed, lst)

        sun_eq, sun_horiz = sun_position(jd, lat, lon)
        moon_eq, _, phase = moon_position(jd, lat, lon)

        equatorial = {"Sun": sun_eq, "Moon": moon_eq}
        if view.show_planets:
            names = [b.name for b in SOLAR_SYSTEM_BODIES if b.kind is BodyKind.PLANET]
            for planet in planet_positions(jd, view.shell_radius, names):
                equatorial[planet.name] = planet.equatorial

        placed = []
        for body in SOLAR_SYSTEM_BODIES:
            shown = view.show_planets if body.kind is BodyKind.PLANET else view.show_sun_and_moon
            if not shown:
                continue
            radius = view.shell_radius if body.shell else view.sphere_radius
            placed.append(self._place(body.name, body.kind, equatorial[body.name], jd, radius))

        sun = next((b for b in placed if b.kind is BodyKind.SUN), None)
        moon = next((b for b in placed if b.kind is BodyKind.MOON), None)
        planets = [b for b in placed if b.kind is BodyKind.PLANET]

        self.ticks += 1
        return SkyFrame(
            time=now,
            jd=jd,
            lst=lst,
            view_mode=self.view_mode,
            stars=self._stars(jd),
            sun=sun,
            moon=moon,
            planets=planets,
            dome_rotation=rotation.as_quat(),
            moon_phase=phase,
            daylight=daylight_intensity(sun_horiz.altitude),
            fusion_mode=self.fusion.state.mode,
            tracking=self.fusion.state.tracking,
            tick=self.ticks,
        )
