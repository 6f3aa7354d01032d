# tests/test_sky.py
from datetime import datetime, timezone

import numpy as np
import pytest

from celestial_dome.catalog import SOLAR_SYSTEM_BODIES, BodyKind, StarCatalog
from celestial_dome.config import Config, ObserverConfig, OrientationConfig, ViewConfig
from celestial_dome.coordinates import ViewMode, equatorial_to_horizontal, equatorial_to_unit_vector
from celestial_dome.errors import CelestialDomeError, InvalidInput
from celestial_dome.orientation import FusionMode, TrackingState, sidereal_rotation
from celestial_dome.sensors import SensorReading, SensorSource, SimulatedSensors
from celestial_dome.sky import SkyDome, parse_datetime_text
from celestial_dome.time_converter import J2000

from conftest import J2000_UTC, FakeClock


@pytest.fixture
def dome(config, small_catalog, clock):
    return SkyDome(config, catalog=small_catalog, clock=clock)


def test_initialize_builds_frame(dome, small_catalog):
    frame = dome.initialize()
    assert dome.initialized
    assert len(frame.stars) == len(small_catalog) == 120
    assert frame.sun.kind is BodyKind.SUN
    assert frame.moon.kind is BodyKind.MOON
    assert [p.name for p in frame.planets] == [
        "Mercury", "Venus", "Mars", "Jupiter", "Saturn", "Uranus", "Neptune", "Pluto",
    ]
    assert frame.tick == 1


def test_tick_initializes_lazily(dome):
    frame = dome.tick(0.1)
    assert dome.initialized
    assert frame is dome.frame


def test_center_view_uses_equatorial_vectors(dome):
    frame = dome.initialize()
    sirius = frame.find("Sirius")
    star = dome.catalog.find("Sirius")
    np.testing.assert_allclose(sirius.direction, equatorial_to_unit_vector(star.ra, star.dec), atol=1e-12)
    np.testing.assert_allclose(sirius.position, sirius.direction * 40.0)
    assert sirius.altitude is None
    assert sirius.above_horizon is None


def test_horizon_view_matches_scalar_conversion(dome, clock):
    dome.set_view_mode("horizon")
    frame = dome.initialize()
    for name in ("Sirius", "Vega", "Deneb"):
        star = dome.catalog.find(name)
        body = frame.find(name)
        expected = equatorial_to_horizontal(star.ra, star.dec, frame.jd, 51.4779, -0.0015)
        assert body.altitude == pytest.approx(expected.altitude, abs=1e-6)
        assert body.azimuth == pytest.approx(expected.azimuth, abs=1e-6)
        assert np.linalg.norm(body.direction) == pytest.approx(1.0)


def test_planets_sit_on_outer_shell(dome):
    frame = dome.initialize()
    for planet in frame.planets:
        assert np.linalg.norm(planet.position) == pytest.approx(180.0)
    assert np.linalg.norm(frame.sun.position) == pytest.approx(40.0)


def test_hidden_bodies():
    config = Config(view=ViewConfig(show_planets=False, show_sun_and_moon=False))
    dome = SkyDome(config, catalog=StarCatalog(target_count=0),
                   clock=FakeClock())
    frame = dome.initialize()
    assert frame.sun is None and frame.moon is None and frame.planets == []
    assert len(list(frame.bodies())) == 82


def test_greenwich_at_j2000():
    dome = SkyDome(Config(observer=ObserverConfig(latitude=0.0, longitude=0.0)),
                   catalog=StarCatalog(target_count=0),
                   clock=FakeClock(J2000_UTC))
    frame = dome.initialize()
    assert frame.jd == 2451545.0
    assert frame.lst == pytest.approx(280.46061837, abs=1e-8)


def test_invalid_observer_keeps_previous_state(dome):
    dome.set_observer(10.0, 20.0)
    for lat, lon in ((91.0, 0.0), (0.0, 181.0), (float("nan"), 0.0)):
        with pytest.raises(InvalidInput):
            dome.set_observer(lat, lon)
    assert (dome.observer.latitude, dome.observer.longitude) == (10.0, 20.0)


def test_observer_time_override(dome, clock):
    dome.set_observer(when=datetime(2000, 1, 1, 12, 0))
    assert dome.current_time() == J2000_UTC
    dome.set_observer(latitude=5.0)
    assert dome.current_time() == J2000_UTC
    dome.set_observer(when=None)
    assert dome.current_time() == clock()
    with pytest.raises(InvalidInput):
        dome.set_observer(when="noon")


def test_observer_from_text(dome):
    dome.set_observer_from_text("-33.86", "151.21", "2000-01-01 12:00")
    assert dome.observer.latitude == pytest.approx(-33.86)
    assert dome.observer.longitude == pytest.approx(151.21)
    assert dome.current_time() == J2000_UTC
    with pytest.raises(InvalidInput):
        dome.set_observer_from_text("north", None)
    with pytest.raises(InvalidInput):
        dome.set_observer_from_text(None, None, "yesterday")
    assert dome.observer.latitude == pytest.approx(-33.86)


def test_local_time_with_offset():
    when = parse_datetime_text("2000-01-01 17:30", "local", 5.5)
    assert when == J2000_UTC
    dome = SkyDome(Config(observer=ObserverConfig(time_mode="local", utc_offset_hours=5.5,
                                                  datetime_override="2000-01-01 17:30")),
                   catalog=StarCatalog(target_count=0))
    assert dome.initialize().jd == J2000


def test_failed_tick_keeps_last_frame(dome, clock):
    first = dome.initialize()

    def broken():
        raise RuntimeError("clock failure")

    dome.clock = broken
    assert dome.tick(0.1) is first
    assert dome.failures == 1

    dome.clock = clock
    clock.advance(60)
    recovered = dome.tick(0.1)
    assert recovered is not first
    assert recovered.jd > first.jd


def test_negative_elapsed_fails_gracefully(dome):
    first = dome.initialize()
    assert dome.tick(-1.0) is first
    assert dome.tick(float("nan")) is first
    assert dome.failures == 2


def test_view_mode_validation(dome):
    dome.set_view_mode(ViewMode.HORIZON)
    assert dome.view_mode is ViewMode.HORIZON
    with pytest.raises(InvalidInput):
        dome.set_view_mode("fisheye")
    assert dome.view_mode is ViewMode.HORIZON


def test_ar_off_frame_uses_sidereal_rotation(small_catalog, clock):
    config = Config(orientation=OrientationConfig(ar_tracking=False))
    dome = SkyDome(config, catalog=small_catalog, clock=clock)
    frame = dome.initialize()
    expected = sidereal_rotation(frame.lst).as_quat()
    assert abs(np.dot(frame.dome_rotation, expected)) == pytest.approx(1.0)
    assert frame.fusion_mode is FusionMode.STATIC


def test_tracking_with_simulated_compass(config, small_catalog, clock):
    dome = SkyDome(config, catalog=small_catalog,
                   sensors=SimulatedSensors(true_heading=45.0, acceleration=(0.0, 0.0, -1.0)),
                   clock=clock)
    dome.initialize()
    for _ in range(20):
        clock.advance(0.1)
        frame = dome.tick(0.1)
    assert frame.tracking is TrackingState.TRACKING
    assert frame.fusion_mode is FusionMode.FULL
    assert dome.failures == 0


def test_controls_delegate_to_fusion(dome):
    dome.initialize()
    dome.set_smoothing_factor(0.5)
    assert dome.fusion.smoothing_factor == 0.5
    dome.set_ar_tracking(False)
    assert dome.fusion.state.mode is FusionMode.STATIC
    dome.set_ar_tracking(True)
    dome.recalibrate()
    dome.quick_realign()
    dome.reset()
    assert dome.fusion.state.samples == 0


def test_daylight_and_phase_reported(dome):
    frame = dome.initialize()
    assert 0.0 <= frame.daylight <= 1.0
    assert 0.0 <= frame.moon_phase.phase < 1.0
    assert frame.time == datetime(2024, 3, 20, 21, 30, tzinfo=timezone.utc)


class FlakyGyro(SensorSource):
    """Level attitude at first, then OK-flagged zero quaternions."""

    def __init__(self, good_samples: int = 1):
        self.good_samples = good_samples

    def read_attitude(self):
        if self.good_samples > 0:
            self.good_samples -= 1
            return SensorReading.success(np.array([0.0, 0.0, 0.0, 1.0]))
        return SensorReading.success(np.zeros(4))


def test_bad_gyro_sample_does_not_stall_the_sky(config, small_catalog, clock):
    dome = SkyDome(config, catalog=small_catalog, sensors=FlakyGyro(), clock=clock)
    first = dome.initialize()
    clock.advance(3600)
    frame = dome.tick(0.1)
    assert dome.failures == 0
    assert frame is not first
    assert frame.jd == pytest.approx(first.jd + 1.0 / 24.0)
    assert frame.lst != pytest.approx(first.lst)


def test_first_tick_failure_is_contained(small_catalog, clock):
    def broken():
        raise RuntimeError("clock failure")

    dome = SkyDome(Config(), catalog=small_catalog, clock=broken)
    assert dome.tick(0.1) is None
    assert dome.failures == 1
    assert not dome.initialized

    with pytest.raises(CelestialDomeError):
        dome.initialize()
    assert dome.failures == 2

    dome.clock = clock
    frame = dome.tick(0.1)
    assert frame is not None and dome.initialized


def test_bodies_follow_solar_system_table(dome):
    frame = dome.initialize()
    placed = [frame.sun, frame.moon] + frame.planets
    assert [(b.name, b.kind) for b in placed] == [(b.name, b.kind) for b in SOLAR_SYSTEM_BODIES]
    for body, table_entry in zip(placed, SOLAR_SYSTEM_BODIES):
        expected = 180.0 if table_entry.shell else 40.0
        assert np.linalg.norm(body.position) == pytest.approx(expected)


@pytest.mark.parametrize("latitude, longitude", [("abc", None), (None, "east"), ([1.0], None)])
def test_non_numeric_observer_rejected(dome, latitude, longitude):
    dome.set_observer(10.0, 20.0)
    with pytest.raises(InvalidInput):
        dome.set_observer(latitude, longitude)
    assert (dome.observer.latitude, dome.observer.longitude) == (10.0, 20.0)


def test_numeric_strings_accepted(dome):
    dome.set_observer("45.5", "-3")
    assert (dome.observer.latitude, dome.observer.longitude) == (45.5, -3.0)
