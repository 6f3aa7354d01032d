# tests/conftest.py
"""
Shared fixtures for the celestial dome suite.

- Registers Hypothesis profiles for local dev and CI.
- Provides fixed instants, a small catalog and a controllable clock.
"""

import os
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import HealthCheck, settings

from celestial_dome.catalog import StarCatalog
from celestial_dome.config import CatalogConfig, Config, ObserverConfig, OrientationConfig, ViewConfig


settings.register_profile(
    "dev",
    settings(deadline=None, max_examples=60, suppress_health_check=[HealthCheck.too_slow]),
)
settings.register_profile(
    "ci",
    settings(deadline=None, max_examples=200, suppress_health_check=[HealthCheck.too_slow]),
)
settings.load_profile("ci" if os.getenv("CI") else os.getenv("HYPOTHESIS_PROFILE", "dev"))


J2000_UTC = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime = J2000_UTC):
        self.now = start

    def advance(self, seconds: float):
        self.now += timedelta(seconds=seconds)

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def j2000():
    return J2000_UTC


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 20, 21, 30, 0, tzinfo=timezone.utc))


@pytest.fixture(scope="session")
def small_catalog():
    """Named stars plus a handful of procedural ones."""
    return StarCatalog(seed=42, target_count=120)


@pytest.fixture
def config():
    return Config(
        observer=ObserverConfig(latitude=51.4779, longitude=-0.0015),
        view=ViewConfig(mode="center"),
        orientation=OrientationConfig(ar_tracking=True),
        catalog=CatalogConfig(seed=42, target_count=120),
    )
