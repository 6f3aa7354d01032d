# tests/test_cli.py
import pytest
from click.testing import CliRunner

from celestial_dome import __version__
from celestial_dome.cli import main
from celestial_dome.config import Config


@pytest.fixture
def runner():
    return CliRunner()


def test_version(runner):
    result = runner.invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_positions_at_j2000(runner):
    result = runner.invoke(main, ["positions", "--lat", "0", "--lon", "0",
                                  "-t", "2000-01-01 12:00", "--utc"])
    assert result.exit_code == 0, result.output
    assert "Julian Date: 2451545.00000" in result.output
    assert "Local sidereal time: 280.461°" in result.output
    for name in ("Sun", "Moon", "Mercury", "Pluto"):
        assert name in result.output


def test_positions_local_time(runner):
    result = runner.invoke(main, ["positions", "--lat", "0", "--lon", "0",
                                  "-t", "2000-01-01 12:00", "--local"])
    assert result.exit_code == 0, result.output
    assert "Julian Date:" in result.output


def test_positions_rejects_bad_latitude(runner):
    result = runner.invoke(main, ["positions", "--lat", "95", "--lon", "0", "-t", "2000-01-01 12:00"])
    assert result.exit_code == 1
    assert "✗ Error" in result.output


def test_positions_rejects_bad_time(runner):
    result = runner.invoke(main, ["positions", "-t", "tomorrow"])
    assert result.exit_code == 1


def test_positions_with_config_override(runner, tmp_path):
    path = tmp_path / "dome.yaml"
    path.write_text("observer:\n  latitude: 0.0\n  longitude: 0.0\n"
                    "  datetime_override: '2000-01-01 12:00'\n")
    result = runner.invoke(main, ["positions", "-c", str(path)])
    assert result.exit_code == 0, result.output
    assert "Julian Date: 2451545.00000" in result.output


def test_moon_full(runner):
    result = runner.invoke(main, ["moon", "-t", "2000-01-21 04:40", "--utc"])
    assert result.exit_code == 0, result.output
    assert "Full Moon" in result.output


def test_moon_table(runner):
    result = runner.invoke(main, ["moon", "-t", "2000-01-06 18:14", "-d", "5"])
    assert result.exit_code == 0, result.output
    assert "New Moon" in result.output
    assert len(result.output.strip().splitlines()) == 6


def test_catalog_find(runner):
    result = runner.invoke(main, ["catalog", "-n", "0", "-f", "Sirius"])
    assert result.exit_code == 0, result.output
    assert "Catalog: 82 stars (82 named, seed 42)" in result.output
    assert "Canis Major" in result.output


def test_catalog_unknown_star(runner):
    result = runner.invoke(main, ["catalog", "-n", "0", "-f", "Krypton"])
    assert result.exit_code == 1
    assert "No star named" in result.output


def test_catalog_brightest_and_constellation(runner):
    result = runner.invoke(main, ["catalog", "-n", "200", "-b", "3"])
    assert result.exit_code == 0, result.output
    assert "Sirius" in result.output and "Canopus" in result.output
    result = runner.invoke(main, ["catalog", "-n", "0", "--constellation", "Orion"])
    assert "Betelgeuse" in result.output


def test_simulate(runner):
    result = runner.invoke(main, ["simulate", "--duration", "1", "--rate", "10",
                                  "--heading", "30", "-t", "2024-01-01 00:00"])
    assert result.exit_code == 0, result.output
    assert "0 failed" in result.output
    assert "tracking" in result.output


def test_simulate_without_sensors(runner):
    result = runner.invoke(main, ["simulate", "--duration", "0.5", "--rate", "10", "--no-tilt"])
    assert result.exit_code == 0, result.output
    assert "static" in result.output


def test_simulate_rejects_zero_rate(runner):
    result = runner.invoke(main, ["simulate", "--rate", "0"])
    assert result.exit_code == 1


def test_init_config(runner, tmp_path):
    path = tmp_path / "dome.yaml"
    result = runner.invoke(main, ["init-config", str(path)])
    assert result.exit_code == 0, result.output
    assert Config.from_yaml(path) == Config()

    result = runner.invoke(main, ["init-config", str(path)])
    assert result.exit_code == 1
    result = runner.invoke(main, ["init-config", str(path), "--force"])
    assert result.exit_code == 0


def test_catalog_find_shows_class_description(runner):
    result = runner.invoke(main, ["catalog", "-n", "0", "-f", "Sirius"])
    assert result.exit_code == 0, result.output
    assert "A-type: White, hot (typical 10000 K)" in result.output


def test_catalog_constellation_shows_centre(runner):
    result = runner.invoke(main, ["catalog", "-n", "0", "--constellation", "Orion"])
    assert result.exit_code == 0, result.output
    assert "Centre: RA 05h30.00m, Dec 0.0°" in result.output
