# tests/test_time_converter.py
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st

from celestial_dome.time_converter import (
    J2000,
    centuries_since_j2000,
    greenwich_sidereal_time,
    julian_date,
    local_sidereal_time,
    normalize_degrees,
    normalize_hours,
    shortest_arc,
)


def test_j2000_epoch_is_exact(j2000):
    assert julian_date(j2000) == 2451545.0
    assert julian_date(j2000) == J2000


def test_naive_datetime_is_utc():
    assert julian_date(datetime(2000, 1, 1, 12, 0, 0)) == 2451545.0


def test_aware_datetime_converted_to_utc():
    ist = timezone(timedelta(hours=5, minutes=30))
    assert julian_date(datetime(2000, 1, 1, 17, 30, tzinfo=ist)) == 2451545.0


@pytest.mark.parametrize(
    "dt, expected",
    [
        (datetime(1957, 10, 4, 19, 26, 24), 2436116.31),   # Sputnik 1
        (datetime(1987, 1, 27, 0, 0, 0), 2446822.5),
        (datetime(1988, 6, 19, 12, 0, 0), 2447332.0),
        (datetime(1600, 1, 1, 0, 0, 0), 2305447.5),
    ],
)
def test_julian_date_reference_values(dt, expected):
    assert julian_date(dt) == pytest.approx(expected, abs=1e-6)


def test_centuries_zero_at_epoch():
    assert centuries_since_j2000(J2000) == 0.0
    assert centuries_since_j2000(J2000 + 36525.0) == pytest.approx(1.0)


def test_gmst_at_epoch_is_constant_term():
    assert greenwich_sidereal_time(J2000) == pytest.approx(280.46061837, abs=1e-9)


def test_gmst_reference_value():
    # 1987 April 10, 0h UT: 13h10m46.3668s
    expected = (13 + 10 / 60 + 46.3668 / 3600) * 15
    assert greenwich_sidereal_time(2446895.5) == pytest.approx(expected, abs=1e-4)


def test_lst_adds_east_longitude(j2000):
    assert local_sidereal_time(j2000, 90.0) == pytest.approx(normalize_degrees(280.46061837 + 90.0))
    assert local_sidereal_time(j2000, -180.0) == pytest.approx(100.46061837)


@given(
    start_minutes=st.integers(min_value=-10_000_000, max_value=10_000_000),
    longitude=st.floats(min_value=-180.0, max_value=180.0, allow_nan=False),
)
def test_lst_advances_monotonically_modulo_360(start_minutes, longitude):
    t0 = datetime(2000, 1, 1, 12, tzinfo=timezone.utc) + timedelta(minutes=start_minutes)
    previous = local_sidereal_time(t0, longitude)
    for step in range(1, 6):
        current = local_sidereal_time(t0 + timedelta(minutes=step), longitude)
        advance = (current - previous) % 360.0
        # one minute of UT is ~0.2507 deg of sidereal rotation
        assert advance == pytest.approx(0.25068, abs=1e-3)
        previous = current


@pytest.mark.parametrize(
    "angle, expected",
    [(0.0, 0.0), (360.0, 0.0), (720.5, 0.5), (-90.0, 270.0), (-1e-17, 0.0)],
)
def test_normalize_degrees(angle, expected):
    result = normalize_degrees(angle)
    assert 0.0 <= result < 360.0
    assert result == pytest.approx(expected)


def test_normalize_hours_wraps():
    assert normalize_hours(25.5) == pytest.approx(1.5)
    assert normalize_hours(-1.0) == pytest.approx(23.0)
    assert normalize_hours(-1e-17) < 24.0


@pytest.mark.parametrize(
    "a, b, expected",
    [(350.0, 10.0, 20.0), (10.0, 350.0, -20.0), (0.0, 180.0, 180.0), (90.0, 90.0, 0.0), (359.0, 0.0, 1.0)],
)
def test_shortest_arc(a, b, expected):
    assert shortest_arc(a, b) == pytest.approx(expected)


@given(st.floats(-1e4, 1e4), st.floats(-1e4, 1e4))
def test_shortest_arc_range(a, b):
    delta = shortest_arc(a, b)
    assert -180.0 < delta <= 180.0
