"""
Device sensor sources for orientation fusion.

Every read returns a SensorReading instead of raising, so the fusion step can
handle an unsupported or misbehaving sensor in one place.

Device frame: x right, y forward (top of the device), z out of the screen.
A device lying flat, screen up, measures gravity as (0, 0, -1) g.

Usage:
    sensors = SimulatedSensors(true_heading=90.0)
    reading = sensors.read_heading()
    if reading.ok:
        print(resolve_heading(*reading.value))
"""

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)

# Below this |a| (in g) the accelerometer gives no usable gravity direction
MIN_ACCELERATION = 0.01


class SensorStatus(Enum):
    OK = "ok"
    UNAVAILABLE = "unavailable"  # not supported / not enabled
    INVALID = "invalid"          # supported, but this sample is unusable


@dataclass(frozen=True)
class SensorReading:
    """Result of one sensor read."""
    status: SensorStatus
    value: Any = None
    detail: str = ""

    @classmethod
    def success(cls, value: Any) -> "SensorReading":
        return cls(SensorStatus.OK, value)

    @classmethod
    def unavailable(cls, detail: str = "") -> "SensorReading":
        return cls(SensorStatus.UNAVAILABLE, None, detail)

    @classmethod
    def invalid(cls, detail: str = "") -> "SensorReading":
        return cls(SensorStatus.INVALID, None, detail)

    @property
    def ok(self) -> bool:
        return self.status is SensorStatus.OK


def _usable_heading(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value != 0.0 and value <= 360.0


def resolve_heading(true_heading: Optional[float],
                    magnetic_heading: Optional[float]) -> Optional[float]:
    """
    Pick the compass heading to use, in degrees [0, 360).

    True heading is preferred; it is treated as missing when it is 0, NaN or
    above 360 (platforms report 0 when no location fix is available) and the
    magnetic heading is used instead.

    Returns:
        Heading in degrees, or None if neither value is usable
    """
    heading = true_heading if _usable_heading(true_heading) else magnetic_heading
    if heading is None or not math.isfinite(heading):
        return None
    heading = math.fmod(heading, 360.0)
    if heading < 0.0:
        heading += 360.0
    return heading


def tilt_from_acceleration(acceleration: Sequence[float],
                           min_acceleration: float = MIN_ACCELERATION) -> Optional[Tuple[float, float]]:
    """
    Device pitch and roll from the measured gravity vector.

    Args:
        acceleration: (ax, ay, az) in g, device frame
        min_acceleration: Magnitude below which the vector is ignored

    Returns:
        (pitch, roll) in degrees, or None if the vector is too small
    """
    g = np.asarray(acceleration, dtype=float)
    if g.shape != (3,) or not np.all(np.isfinite(g)):
        return None
    magnitude = float(np.linalg.norm(g))
    if magnitude < min_acceleration:
        return None
    gx, gy, gz = g / magnitude
    pitch = math.degrees(math.atan2(-gy, -gz))
    roll = math.degrees(math.atan2(gx, math.hypot(gy, gz)))
    return pitch, roll


def normalize_quaternion(quaternion: Sequence[float]) -> Optional[np.ndarray]:
    """Unit [x, y, z, w] quaternion, or None for a malformed or degenerate sample."""
    q = np.asarray(quaternion, dtype=float)
    if q.shape != (4,):
        return None
    norm = float(np.linalg.norm(q))
    if not math.isfinite(norm) or norm < 1e-9:
        return None
    return q / norm


class SensorSource:
    """
    Base sensor source. Every sensor is unavailable unless overridden.

    read_heading  -> value (true_heading, magnetic_heading) in degrees
    read_acceleration -> value (3,) array in g
    read_attitude -> value (4,) quaternion [x, y, z, w], device to world
    """

    name = "none"

    def read_heading(self) -> SensorReading:
        return SensorReading.unavailable("no compass")

    def read_acceleration(self) -> SensorReading:
        return SensorReading.unavailable("no accelerometer")

    def read_attitude(self) -> SensorReading:
        return SensorReading.unavailable("no gyroscope")


class StaticSensors(SensorSource):
    """A device without orientation sensors (desktop, headless)."""

    name = "static"


class SimulatedSensors(SensorSource):
    """
    Scriptable sensor source for tests and the ``simulate`` command.

    Any quantity left as None reports UNAVAILABLE. The heading can drift at a
    fixed rate and carry deterministic jitter, advanced by ``advance()``.
    """

    name = "simulated"

    def __init__(self,
                 true_heading: Optional[float] = None,
                 magnetic_heading: Optional[float] = None,
                 acceleration: Optional[Sequence[float]] = None,
                 attitude: Optional[Sequence[float]] = None,
                 heading_rate: float = 0.0,
                 jitter: float = 0.0):
        self.true_heading = true_heading
        self.magnetic_heading = magnetic_heading
        self.acceleration = None if acceleration is None else np.asarray(acceleration, dtype=float)
        self.attitude = None if attitude is None else np.asarray(attitude, dtype=float)
        self.heading_rate = heading_rate
        self.jitter = jitter
        self._t = 0.0
        self.reads = 0

    def advance(self, dt: float):
        """Move simulated time forward, rotating the headings by heading_rate."""
        self._t += dt
        if self.heading_rate:
            if self.true_heading is not None:
                self.true_heading = (self.true_heading + self.heading_rate * dt) % 360.0
            if self.magnetic_heading is not None:
                self.magnetic_heading = (self.magnetic_heading + self.heading_rate * dt) % 360.0

    def _jittered(self, value: Optional[float]) -> Optional[float]:
        if value is None or not self.jitter:
            return value
        return value + self.jitter * math.sin(7.3 * self._t + 0.37 * self.reads)

    def read_heading(self) -> SensorReading:
        if self.true_heading is None and self.magnetic_heading is None:
            return SensorReading.unavailable("compass not supported")
        self.reads += 1
        return SensorReading.success((self._jittered(self.true_heading),
                                      self._jittered(self.magnetic_heading)))

    def read_acceleration(self) -> SensorReading:
        if self.acceleration is None:
            return SensorReading.unavailable("accelerometer not supported")
        if not np.all(np.isfinite(self.acceleration)):
            return SensorReading.invalid("non-finite acceleration sample")
        return SensorReading.success(self.acceleration.copy())

    def read_attitude(self) -> SensorReading:
        if self.attitude is None:
            return SensorReading.unavailable("gyroscope not supported")
        quaternion = normalize_quaternion(self.attitude)
        if quaternion is None:
            return SensorReading.invalid("degenerate attitude quaternion")
        return SensorReading.success(quaternion)
