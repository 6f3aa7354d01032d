"""
Exception types for the celestial dome engine.

Per-tick failures are caught at the engine boundary (see ``sky.SkyDome.tick``);
these types let that boundary tell a rejected user edit apart from a missing
sensor or a numeric fault.
"""


class CelestialDomeError(Exception):
    """Base class for all errors raised by this package."""


class InvalidInput(CelestialDomeError, ValueError):
    """Malformed or out-of-range location/time supplied by the caller.

    The update is rejected and the last valid observer state is kept.
    """


class SensorUnavailable(CelestialDomeError):
    """A heading, accelerometer or gyroscope source is not supported."""

    def __init__(self, sensor: str, detail: str = ""):
        self.sensor = sensor
        self.detail = detail
        message = f"{sensor} sensor unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MathDomainError(CelestialDomeError, ArithmeticError):
    """A non-finite value reached an inverse trigonometric function."""
