"""
Orientation fusion: aligns the sky dome with the real sky around the device.

Combines a smoothed compass heading, the device tilt and the local sidereal
time into one dome rotation:

    target = tilt_compensation * compass_correction * sidereal_rotation

and moves the current rotation a fixed fraction toward the target on every
sensor sample (slerp), so sensor noise never makes the dome snap.

Rotations act on equatorial unit vectors and use scipy's Rotation, with z
as the local up axis. Heading is a circular quantity: every difference goes
through ``shortest_arc``.
"""

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Set, Tuple

import numpy as np
from scipy.spatial.transform import Rotation, Slerp

from .config import OrientationConfig
from .errors import InvalidInput, SensorUnavailable
from .sensors import (
    SensorReading,
    SensorSource,
    SensorStatus,
    normalize_quaternion,
    resolve_heading,
    tilt_from_acceleration,
)
from .time_converter import normalize_degrees, shortest_arc

logger = logging.getLogger(__name__)


class TrackingState(Enum):
    UNINITIALIZED = "uninitialized"  # waiting for the first valid heading
    TRACKING = "tracking"


class FusionMode(Enum):
    """Which sensors contributed to the last solve."""
    FULL = "full"                  # heading + tilt
    TILT_ONLY = "tilt_only"        # no compass
    HEADING_ONLY = "heading_only"  # no accelerometer / gyroscope
    STATIC = "static"              # no sensors, pure sidereal rotation


@dataclass
class OrientationState:
    """Mutable fusion state, owned by OrientationFusion."""
    tracking: TrackingState = TrackingState.UNINITIALIZED
    mode: FusionMode = FusionMode.STATIC
    smoothed_heading: float = 0.0      # degrees [0, 360)
    raw_heading: Optional[float] = None
    pitch: float = 0.0                 # degrees
    roll: float = 0.0                  # degrees
    rotation: Rotation = field(default_factory=Rotation.identity)
    target: Rotation = field(default_factory=Rotation.identity)
    last_correction: float = 0.0       # last heading step in degrees
    samples: int = 0

    @property
    def quaternion(self) -> np.ndarray:
        """Current dome rotation as [x, y, z, w]."""
        return self.rotation.as_quat()


def sidereal_rotation(lst_deg: float) -> Rotation:
    """Earth-rotation part: turns the equatorial frame by -LST about the pole."""
    return Rotation.from_euler("z", -lst_deg, degrees=True)


def compass_correction(heading_deg: float) -> Rotation:
    """Cancels the device heading so dome north stays on real north."""
    return Rotation.from_euler("z", heading_deg, degrees=True)


def tilt_compensation(pitch_deg: float, roll_deg: float) -> Rotation:
    """Cancels device pitch and roll only; yaw is left to the compass."""
    return Rotation.from_euler("xy", [pitch_deg, roll_deg], degrees=True).inv()


def circular_mean(angles_deg: List[float]) -> float:
    """Mean of headings on the circle, degrees [0, 360)."""
    rad = np.radians(angles_deg)
    return normalize_degrees(math.degrees(math.atan2(float(np.mean(np.sin(rad))),
                                                     float(np.mean(np.cos(rad))))))


def slerp(current: Rotation, target: Rotation, fraction: float) -> Rotation:
    """Spherical interpolation from current (0) to target (1)."""
    fraction = max(0.0, min(1.0, fraction))
    interpolator = Slerp([0.0, 1.0], Rotation.concatenate([current, target]))
    return interpolator([fraction])[0]


class OrientationFusion:
    """
    Throttled compass/tilt/sidereal fusion.

    Usage:
        fusion = OrientationFusion(SimulatedSensors(true_heading=45.0))
        rotation = fusion.update(elapsed=0.1, lst_deg=120.0)
    """

    def __init__(self, sensors: Optional[SensorSource] = None,
                 config: Optional[OrientationConfig] = None):
        self.sensors = sensors if sensors is not None else SensorSource()
        self.config = config if config is not None else OrientationConfig()

        self.state = OrientationState()
        self.ar_tracking = self.config.ar_tracking
        self.smoothing_factor = self.config.smoothing_factor
        self._since_sample = math.inf
        self._reported: Set[str] = set()

    # -- sensor access -----------------------------------------------------

    def _report(self, sensor: str, reading: SensorReading):
        """Log a missing sensor once; invalid samples are logged at debug."""
        if reading.status is SensorStatus.UNAVAILABLE:
            if sensor not in self._reported:
                self._reported.add(sensor)
                logger.warning("%s; continuing in reduced-fidelity mode",
                               SensorUnavailable(sensor, reading.detail))
        elif reading.status is SensorStatus.INVALID:
            logger.debug("Ignoring %s sample: %s", sensor, reading.detail)

    def read_heading(self) -> Optional[float]:
        """One fresh compass sample, or None."""
        reading = self.sensors.read_heading()
        if not reading.ok:
            self._report("compass", reading)
            return None
        try:
            true_heading, magnetic_heading = reading.value
            heading = resolve_heading(true_heading, magnetic_heading)
        except (TypeError, ValueError):
            heading = None
        if heading is None:
            self._report("compass", SensorReading.invalid("no usable true or magnetic heading"))
        return heading

    def read_tilt(self) -> Optional[Tuple[float, float]]:
        """
        Device (pitch, roll) in degrees.

        The gyroscope attitude is used when available, else the gravity
        vector from the accelerometer.
        """
        attitude = self.sensors.read_attitude()
        if attitude.ok:
            quaternion = normalize_quaternion(attitude.value)
            if quaternion is not None:
                _, pitch, roll = Rotation.from_quat(quaternion).as_euler("zxy", degrees=True)
                return float(pitch), float(roll)
            attitude = SensorReading.invalid("degenerate attitude quaternion")
        self._report("gyroscope", attitude)

        acceleration = self.sensors.read_acceleration()
        if not acceleration.ok:
            self._report("accelerometer", acceleration)
            return None
        tilt = tilt_from_acceleration(acceleration.value, self.config.min_acceleration)
        if tilt is None:
            logger.debug("Acceleration below %.3f g, tilt held", self.config.min_acceleration)
        return tilt

    # -- fusion ------------------------------------------------------------

    def update(self, elapsed: float, lst_deg: float) -> Rotation:
        """
        Advance the fusion clock and solve if a sample is due.

        Args:
            elapsed: Seconds since the previous update
            lst_deg: Local sidereal time in degrees

        Returns:
            The current dome rotation
        """
        if not self.ar_tracking:
            rotation = sidereal_rotation(lst_deg)
            self.state.rotation = rotation
            self.state.target = rotation
            self.state.mode = FusionMode.STATIC
            return rotation

        self._since_sample += elapsed
        if self._since_sample < self.config.sample_interval:
            return self.state.rotation

        self._since_sample = 0.0
        return self.step(lst_deg)

    def _update_heading(self, heading: Optional[float]):
        state = self.state
        state.raw_heading = heading
        state.last_correction = 0.0
        if heading is None:
            return

        if state.tracking is TrackingState.UNINITIALIZED:
            state.smoothed_heading = heading
            state.tracking = TrackingState.TRACKING
            logger.info("Initial alignment - heading: %.1f°", heading)
            return

        delta = shortest_arc(state.smoothed_heading, heading)
        if abs(delta) > self.config.heading_threshold:
            state.last_correction = delta * self.smoothing_factor
            state.smoothed_heading = normalize_degrees(state.smoothed_heading + state.last_correction)

    def solve_target(self, lst_deg: float) -> Rotation:
        """Target rotation from the current smoothed heading and tilt."""
        state = self.state
        celestial = compass_correction(state.smoothed_heading) * sidereal_rotation(lst_deg)
        return tilt_compensation(state.pitch, state.roll) * celestial

    def step(self, lst_deg: float) -> Rotation:
        """Take one sensor sample and move the dome toward the new target."""
        state = self.state
        heading = self.read_heading()
        tilt = self.read_tilt()

        self._update_heading(heading)
        if tilt is not None:
            state.pitch, state.roll = tilt

        if heading is not None:
            state.mode = FusionMode.FULL if tilt is not None else FusionMode.HEADING_ONLY
        else:
            state.mode = FusionMode.TILT_ONLY if tilt is not None else FusionMode.STATIC

        state.target = self.solve_target(lst_deg)
        state.rotation = slerp(state.rotation, state.target,
                               self.smoothing_factor * self.config.slerp_scale)
        state.samples += 1

        if state.samples % 120 == 0:
            logger.debug("Alignment - compass: %.1f°, sidereal: %.1f°, tilt: (%.1f, %.1f), mode: %s",
                         state.smoothed_heading, lst_deg, state.pitch, state.roll, state.mode.value)
        return state.rotation

    # -- control -----------------------------------------------------------

    def recalibrate(self, lst_deg: float, samples: Optional[int] = None) -> Rotation:
        """
        Re-acquire the heading baseline and re-solve immediately.

        Reads ``samples`` fresh headings (default from config), averages them
        on the circle and uses the mean as the new smoothed heading. Missing
        sensors are reported again afterwards.
        """
        count = samples if samples is not None else self.config.recalibration_samples
        if count < 1:
            raise InvalidInput(f"recalibration needs at least one sample, got {count}")

        self._reported.clear()
        self.state.tracking = TrackingState.UNINITIALIZED

        headings = [h for h in (self.read_heading() for _ in range(count)) if h is not None]
        if headings:
            self.state.smoothed_heading = circular_mean(headings)
            self.state.tracking = TrackingState.TRACKING
            logger.info("Precise realignment - average heading: %.1f° (readings: %s)",
                        self.state.smoothed_heading, ", ".join(f"{h:.1f}" for h in headings))
        else:
            logger.warning("Recalibration found no valid heading; waiting for the compass")

        self._since_sample = 0.0
        return self.step(lst_deg)

    def quick_realign(self, lst_deg: float) -> Rotation:
        """Adopt one fresh heading sample as the baseline and re-solve."""
        heading = self.read_heading()
        if heading is None:
            logger.info("Quick realignment skipped: no compass heading")
            return self.state.rotation
        self.state.smoothed_heading = heading
        self.state.tracking = TrackingState.TRACKING
        logger.info("Quick realignment - current heading: %.1f°", heading)
        self._since_sample = 0.0
        return self.step(lst_deg)

    def reset(self):
        """Discard derived state; the next sample re-initializes."""
        self.state = OrientationState()
        self._since_sample = math.inf
        logger.info("Orientation reset")

    def set_ar_tracking(self, enabled: bool, lst_deg: Optional[float] = None):
        """
        Toggle live sensor fusion.

        Enabling restarts alignment from UNINITIALIZED; disabling switches the
        dome to pure sidereal rotation.
        """
        self.ar_tracking = bool(enabled)
        if self.ar_tracking:
            self.state.tracking = TrackingState.UNINITIALIZED
            self._since_sample = math.inf
            logger.info("AR tracking on - realigning with the real sky")
        else:
            if lst_deg is not None:
                self.state.rotation = sidereal_rotation(lst_deg)
                self.state.target = self.state.rotation
            self.state.mode = FusionMode.STATIC
            logger.info("AR tracking off - using sidereal rotation only")

    def set_smoothing_factor(self, factor: float):
        """Set the smoothing factor, clamped to [0, 1]."""
        if factor is None or not math.isfinite(factor):
            raise InvalidInput(f"smoothing factor must be a finite number, got {factor!r}")
        self.smoothing_factor = max(0.0, min(1.0, float(factor)))
        logger.info("Smoothing factor set to %.3f", self.smoothing_factor)
