# tests/test_astrophysics.py
import pytest

from celestial_dome.astrophysics import (
    StarClass,
    StarType,
    class_description,
    color_from_temperature,
    distance_from_magnitudes,
    light_years_to_parsecs,
    luminosity_from_magnitude,
    parsecs_to_light_years,
    radius_from_luminosity,
    star_class_from_spectral_type,
    star_type_from_spectral_type,
    temperature_from_class,
)
from celestial_dome.rng import SplitMix64, splitmix64, u01_from_u64


def test_sun_reference_values():
    assert luminosity_from_magnitude(4.83) == pytest.approx(1.0)
    assert radius_from_luminosity(1.0, 5778.0) == pytest.approx(1.0)
    assert luminosity_from_magnitude(-0.17) == pytest.approx(100.0)


def test_distance_modulus():
    assert distance_from_magnitudes(1.0, 1.0) == pytest.approx(10.0)
    assert distance_from_magnitudes(6.0, 1.0) == pytest.approx(100.0)


def test_distance_units():
    assert parsecs_to_light_years(1.0) == pytest.approx(3.26156)
    assert light_years_to_parsecs(parsecs_to_light_years(8.0)) == pytest.approx(8.0)


@pytest.mark.parametrize(
    "spectral, expected",
    [("K2III", StarClass.K), ("b8ia", StarClass.B), ("", StarClass.G), ("X9", StarClass.G)],
)
def test_star_class_from_spectral_type(spectral, expected):
    assert star_class_from_spectral_type(spectral) is expected


@pytest.mark.parametrize(
    "spectral, expected",
    [
        ("K0III", StarType.GIANT),
        ("F7Ib", StarType.SUPERGIANT),
        ("G2V", StarType.MAIN_SEQUENCE),
        ("F5IV-V", StarType.MAIN_SEQUENCE),
        ("A9II", StarType.MAIN_SEQUENCE),
    ],
)
def test_star_type_from_spectral_type(spectral, expected):
    assert star_type_from_spectral_type(spectral) is expected


def test_class_tables():
    assert temperature_from_class(StarClass.G) == 5800.0
    assert temperature_from_class(StarClass.O) > temperature_from_class(StarClass.M)
    assert "G2V" in class_description(StarClass.G)


@pytest.mark.parametrize(
    "temperature, expected",
    [
        (500.0, (1.0, 0.5, 0.3)),
        (3000.0, (1.0, 0.5, 0.3)),
        (4200.0, (1.0, 0.7, 0.4)),
        (5778.0, (1.0, 0.9, 0.6)),
        (7000.0, (1.0, 1.0, 0.8)),
        (9999.0, (0.9, 0.95, 1.0)),
        (20000.0, (0.7, 0.8, 1.0)),
        (40000.0, (0.5, 0.6, 1.0)),
    ],
)
def test_color_from_temperature(temperature, expected):
    assert color_from_temperature(temperature) == expected


def test_splitmix64_reference_stream():
    rng = SplitMix64(1234567)
    assert [rng.next_u64() for _ in range(5)] == [
        6457827717110365317,
        3203168211198807973,
        9817491932198370423,
        4593380528125082431,
        16408922859458223821,
    ]


def test_splitmix64_function_matches_stream():
    assert splitmix64(1234567) == SplitMix64(1234567).next_u64()


def test_uniform_draws_in_range():
    rng = SplitMix64(42)
    for _ in range(1000):
        assert 0.0 <= rng.random() < 1.0
        assert 2.5 <= rng.uniform(2.5, 6.5) < 6.5
        assert 0 <= rng.randrange(24) < 24
    assert u01_from_u64(0) == 0.0
    assert u01_from_u64(2**64 - 1) < 1.0


def test_randrange_rejects_empty_range():
    with pytest.raises(ValueError):
        SplitMix64(1).randrange(0)
