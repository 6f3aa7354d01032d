# tests/test_coordinates.py
import math

import numpy as np
import pytest
from hypothesis import given, strategies as st

from celestial_dome.coordinates import (
    clamp_unit,
    ecliptic_to_equatorial,
    equatorial_to_horizontal,
    equatorial_to_horizontal_arrays,
    equatorial_to_unit_vector,
    horizontal_to_unit_vector,
    mean_obliquity,
    unit_vector_to_ecliptic,
    unit_vector_to_horizontal,
)
from celestial_dome.errors import MathDomainError
from celestial_dome.time_converter import J2000, local_sidereal_time_jd, shortest_arc

finite = dict(allow_nan=False, allow_infinity=False)


@given(
    ra=st.floats(min_value=0.0, max_value=24.0, exclude_max=True, **finite),
    dec=st.floats(min_value=-90.0, max_value=90.0, **finite),
    lat=st.floats(min_value=-90.0, max_value=90.0, **finite),
    lon=st.floats(min_value=-180.0, max_value=180.0, **finite),
    days=st.floats(min_value=-36525.0, max_value=36525.0, **finite),
)
def test_horizontal_ranges(ra, dec, lat, lon, days):
    horiz = equatorial_to_horizontal(ra, dec, J2000 + days, lat, lon)
    assert -90.0 <= horiz.altitude <= 90.0
    assert 0.0 <= horiz.azimuth < 360.0


def test_pole_star_altitude_equals_latitude():
    for lat in (-30.0, 0.0, 18.6, 51.5, 78.0):
        horiz = equatorial_to_horizontal(3.0, 90.0, J2000 + 123.4, lat, 10.0)
        assert horiz.altitude == pytest.approx(lat, abs=1e-9)


def test_observer_at_pole_uses_fallback():
    # cos(latitude) ~ 0: the acos form is undefined, the result must still be finite
    horiz = equatorial_to_horizontal(6.0, 45.0, J2000, 90.0, 0.0)
    assert horiz.altitude == pytest.approx(45.0, abs=1e-9)
    assert 0.0 <= horiz.azimuth < 360.0


def test_body_on_meridian_is_due_south():
    lst = local_sidereal_time_jd(J2000, 0.0)
    horiz = equatorial_to_horizontal(lst / 15.0, 0.0, J2000, 40.0, 0.0)
    assert horiz.altitude == pytest.approx(50.0, abs=1e-6)
    # acos loses precision next to cos(az) = -1
    assert abs(shortest_arc(horiz.azimuth, 180.0)) < 1e-5


def test_rising_body_is_east():
    lst = local_sidereal_time_jd(J2000, 0.0)
    # six hours east of the meridian on the equator: rising due east
    horiz = equatorial_to_horizontal((lst / 15.0 + 6.0) % 24.0, 0.0, J2000, 40.0, 0.0)
    assert horiz.altitude == pytest.approx(0.0, abs=1e-6)
    assert horiz.azimuth == pytest.approx(90.0, abs=1e-6)


def test_mean_obliquity_at_epoch():
    assert mean_obliquity(0.0) == 23.439291
    assert mean_obliquity(1.0) < mean_obliquity(0.0)


def test_ecliptic_to_equatorial_cardinal_points():
    eq = ecliptic_to_equatorial(0.0, 0.0, J2000)
    assert eq.ra == pytest.approx(0.0, abs=1e-9)
    assert eq.dec == pytest.approx(0.0, abs=1e-9)

    eq = ecliptic_to_equatorial(90.0, 0.0, J2000)
    assert eq.ra == pytest.approx(6.0, abs=1e-9)
    assert eq.dec == pytest.approx(23.439291, abs=1e-9)

    eq = ecliptic_to_equatorial(0.0, 90.0, J2000)
    assert eq.dec == pytest.approx(90.0 - 23.439291, abs=1e-9)


def test_clamp_unit():
    assert clamp_unit(1.0000000002) == 1.0
    assert clamp_unit(-1.0000000002) == -1.0
    assert clamp_unit(0.25) == 0.25
    with pytest.raises(MathDomainError):
        clamp_unit(float("nan"))
    with pytest.raises(MathDomainError):
        clamp_unit(float("inf"))


def test_equatorial_unit_vector_axes():
    np.testing.assert_allclose(equatorial_to_unit_vector(0.0, 0.0), [1, 0, 0], atol=1e-12)
    np.testing.assert_allclose(equatorial_to_unit_vector(6.0, 0.0), [0, 1, 0], atol=1e-12)
    np.testing.assert_allclose(equatorial_to_unit_vector(17.3, 90.0), [0, 0, 1], atol=1e-12)


def test_horizontal_unit_vector_is_east_north_up():
    np.testing.assert_allclose(horizontal_to_unit_vector(0.0, 0.0), [0, 1, 0], atol=1e-12)
    np.testing.assert_allclose(horizontal_to_unit_vector(0.0, 90.0), [1, 0, 0], atol=1e-12)
    np.testing.assert_allclose(horizontal_to_unit_vector(90.0, 200.0), [0, 0, 1], atol=1e-12)


def test_unit_vector_to_horizontal_inverts_mapping():
    horiz = unit_vector_to_horizontal(3.0 * horizontal_to_unit_vector(30.0, 120.0))
    assert horiz.altitude == pytest.approx(30.0)
    assert horiz.azimuth == pytest.approx(120.0)


def test_degenerate_vectors_rejected():
    with pytest.raises(MathDomainError):
        unit_vector_to_horizontal(np.zeros(3))
    with pytest.raises(MathDomainError):
        unit_vector_to_ecliptic([0.0, 0.0, 0.0])


def test_unit_vector_to_ecliptic():
    lon, lat = unit_vector_to_ecliptic([0.0, -2.0, 0.0])
    assert lon == pytest.approx(270.0)
    assert lat == pytest.approx(0.0)


def test_vectorized_conversion_matches_scalar():
    rng = np.random.default_rng(7)
    ra = rng.uniform(0.0, 24.0, 200)
    dec = rng.uniform(-89.0, 89.0, 200)
    jd = J2000 + 8765.4321
    alt, az = equatorial_to_horizontal_arrays(ra, dec, jd, 51.48, -0.0015)
    for i in range(len(ra)):
        horiz = equatorial_to_horizontal(ra[i], dec[i], jd, 51.48, -0.0015)
        assert alt[i] == pytest.approx(horiz.altitude, abs=1e-7)
        if abs(horiz.altitude) < 89.9:
            diff = (az[i] - horiz.azimuth + 180.0) % 360.0 - 180.0
            assert abs(diff) < 1e-5
    assert np.all((az >= 0.0) & (az < 360.0))
    assert math.isfinite(float(alt.sum()))
