"""
Configuration management for the celestial dome engine.

Sections are frozen: configuration is read once, while the live observer and
orientation state live in the engine (see ``sky.ObserverState``).
"""

import dataclasses
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional

import yaml

from .errors import InvalidInput


def _check_range(name: str, value: float, low: float, high: float):
    if value is None or not math.isfinite(value) or not low <= value <= high:
        raise InvalidInput(f"{name} must be within [{low}, {high}], got {value!r}")


@dataclass(frozen=True)
class ObserverConfig:
    """Initial observer location and time interpretation."""

    latitude: float = 18.6056704     # degrees, north positive
    longitude: float = 73.7804288    # degrees, east positive
    time_mode: Literal["utc", "local"] = "utc"
    # Offset used for "local" overrides; None means the host time zone
    utc_offset_hours: Optional[float] = None
    # Fixed "YYYY-MM-DD HH:MM[:SS]" instant instead of the system clock
    datetime_override: Optional[str] = None

    def __post_init__(self):
        _check_range("latitude", self.latitude, -90.0, 90.0)
        _check_range("longitude", self.longitude, -180.0, 180.0)
        if self.time_mode not in ("utc", "local"):
            raise InvalidInput(f"time_mode must be 'utc' or 'local', got {self.time_mode!r}")
        if self.utc_offset_hours is not None:
            _check_range("utc_offset_hours", self.utc_offset_hours, -14.0, 14.0)


@dataclass(frozen=True)
class ViewConfig:
    """Dome geometry and view mode."""

    mode: Literal["center", "horizon"] = "center"
    sphere_radius: float = 40.0
    planet_shell_scale: float = 4.5   # planets sit beyond the star sphere
    show_planets: bool = True
    show_sun_and_moon: bool = True

    def __post_init__(self):
        if self.mode not in ("center", "horizon"):
            raise InvalidInput(f"view mode must be 'center' or 'horizon', got {self.mode!r}")
        if not self.sphere_radius > 0:
            raise InvalidInput(f"sphere_radius must be positive, got {self.sphere_radius!r}")
        if not self.planet_shell_scale >= 1.0:
            raise InvalidInput(f"planet_shell_scale must be >= 1, got {self.planet_shell_scale!r}")

    @property
    def shell_radius(self) -> float:
        return self.sphere_radius * self.planet_shell_scale


@dataclass(frozen=True)
class OrientationConfig:
    """Sensor fusion configuration."""

    ar_tracking: bool = True
    smoothing_factor: float = 0.1
    sample_interval: float = 0.1      # seconds between sensor samples
    heading_threshold: float = 0.5    # degrees, smaller changes are noise
    slerp_scale: float = 0.3          # slerp fraction = smoothing_factor * slerp_scale
    min_acceleration: float = 0.01    # g
    recalibration_samples: int = 3

    def __post_init__(self):
        _check_range("smoothing_factor", self.smoothing_factor, 0.0, 1.0)
        _check_range("slerp_scale", self.slerp_scale, 0.0, 1.0)
        if not self.sample_interval >= 0:
            raise InvalidInput(f"sample_interval must be >= 0, got {self.sample_interval!r}")
        if not self.heading_threshold >= 0:
            raise InvalidInput(f"heading_threshold must be >= 0, got {self.heading_threshold!r}")
        if self.recalibration_samples < 1:
            raise InvalidInput("recalibration_samples must be at least 1")


@dataclass(frozen=True)
class CatalogConfig:
    """Star catalog generation."""

    seed: int = 42
    target_count: int = 2000

    def __post_init__(self):
        if self.target_count < 0:
            raise InvalidInput(f"target_count must be >= 0, got {self.target_count}")


@dataclass(frozen=True)
class Config:
    """Main configuration container."""

    observer: ObserverConfig = field(default_factory=ObserverConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    orientation: OrientationConfig = field(default_factory=OrientationConfig)
    catalog: CatalogConfig = field(default_factory=CatalogConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f)
        return cls._from_dict(data or {})

    @classmethod
    def _from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        sections = {
            "observer": ObserverConfig,
            "view": ViewConfig,
            "orientation": OrientationConfig,
            "catalog": CatalogConfig,
        }
        unknown = set(data) - set(sections)
        if unknown:
            raise InvalidInput(f"unknown configuration section(s): {', '.join(sorted(unknown))}")

        kwargs = {}
        for name, section_cls in sections.items():
            if name in data:
                try:
                    kwargs[name] = section_cls(**(data[name] or {}))
                except TypeError as e:
                    raise InvalidInput(f"bad '{name}' section: {e}") from e
        return cls(**kwargs)

    def to_dict(self) -> dict:
        return dataclasses.asdict(self)

    def to_yaml(self, path: Path) -> None:
        """Save configuration to YAML file."""
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
