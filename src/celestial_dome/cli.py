"""
Command-line interface for the celestial dome engine.
"""

import logging
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

import click

from . import __version__
from .astrophysics import class_description, temperature_from_class
from .catalog import StarCatalog, constellation_center
from .config import Config
from .coordinates import equatorial_to_horizontal
from .ephemeris import moon_phase, moon_position, sun_position
from .errors import CelestialDomeError
from .orbital import planet_positions
from .sensors import SimulatedSensors, StaticSensors
from .sky import SkyDome, parse_datetime_text
from .time_converter import julian_date, local_sidereal_time_jd


# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def _load_config(path: Optional[Path]) -> Config:
    return Config.from_yaml(path) if path else Config()


def _resolve_time(text: Optional[str], cfg: Config, local: Optional[bool]) -> datetime:
    if not text:
        return datetime.now(timezone.utc)
    mode = cfg.observer.time_mode
    if local is not None:
        mode = "local" if local else "utc"
    return parse_datetime_text(text, mode, cfg.observer.utc_offset_hours)


def _fail(e: Exception, verbose: bool):
    click.echo(click.style(f"✗ Error: {e}", fg="red"))
    if verbose:
        import traceback
        traceback.print_exc()
    sys.exit(1)


def _format_ra(hours: float) -> str:
    h = int(hours)
    m = (hours - h) * 60
    return f"{h:02d}h{m:05.2f}m"


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx, verbose: bool):
    """Celestial Dome - real-time sky model for a device-aligned star dome."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@main.command()
@click.option("--lat", type=float, help="Observer latitude (degrees, north positive)")
@click.option("--lon", type=float, help="Observer longitude (degrees, east positive)")
@click.option("-t", "--time", "time_text", help="Date/time 'YYYY-MM-DD HH:MM[:SS]' (default: now)")
@click.option("--local/--utc", "local", default=None, help="Interpret --time as local time or UTC")
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path),
              help="Configuration YAML file")
@click.pass_context
def positions(ctx, lat: Optional[float], lon: Optional[float], time_text: Optional[str],
              local: Optional[bool], config: Optional[Path]):
    """
    Show Sun, Moon and planet positions for an observer.
    """
    try:
        cfg = _load_config(config)
        dome = SkyDome(cfg, catalog=StarCatalog(target_count=0))
        when = _resolve_time(time_text, cfg, local) if time_text else dome.current_time()
        dome.set_observer(lat, lon, when)
    except CelestialDomeError as e:
        _fail(e, ctx.obj["verbose"])

    obs = dome.observer
    when = obs.time_override
    jd = julian_date(when)
    lst = local_sidereal_time_jd(jd, obs.longitude)

    click.echo(f"Observer: {obs.latitude:.4f}°, {obs.longitude:.4f}°")
    click.echo(f"Time (UTC): {when.isoformat()}")
    click.echo(f"  Julian Date: {jd:.5f}")
    click.echo(f"  Local sidereal time: {lst:.3f}° ({lst / 15.0:.4f}h)")
    click.echo()

    sun_eq, sun_h = sun_position(jd, obs.latitude, obs.longitude)
    moon_eq, moon_h, phase = moon_position(jd, obs.latitude, obs.longitude)
    rows = [("Sun", sun_eq, sun_h), ("Moon", moon_eq, moon_h)]
    for planet in planet_positions(jd, cfg.view.shell_radius):
        eq = planet.equatorial
        rows.append((planet.name, eq,
                     equatorial_to_horizontal(eq.ra, eq.dec, jd, obs.latitude, obs.longitude)))

    click.echo(f"{'Body':<10} {'RA':>10} {'Dec':>8} {'Alt':>8} {'Az':>8}")
    for name, eq, horiz in rows:
        line = (f"{name:<10} {_format_ra(eq.ra):>10} {eq.dec:>7.2f}° "
                f"{horiz.altitude:>7.2f}° {horiz.azimuth:>7.2f}°")
        click.echo(click.style(line, fg="green") if horiz.above_horizon else line)
    click.echo()
    click.echo(f"Moon: {phase.name}, {phase.illumination * 100:.0f}% illuminated")


@main.command()
@click.option("-t", "--time", "time_text", help="Date/time 'YYYY-MM-DD HH:MM[:SS]' (default: now)")
@click.option("--local/--utc", "local", default=None, help="Interpret --time as local time or UTC")
@click.option("-d", "--days", type=int, default=1, help="Number of days to tabulate")
@click.pass_context
def moon(ctx, time_text: Optional[str], local: Optional[bool], days: int):
    """
    Show the Moon phase, optionally for several consecutive days.
    """
    try:
        start = _resolve_time(time_text, Config(), local)
    except CelestialDomeError as e:
        _fail(e, ctx.obj["verbose"])

    click.echo(f"{'Date (UTC)':<17} {'Phase':>6} {'Lit':>5}  Name")
    for i in range(max(1, days)):
        when = start + timedelta(days=i)
        phase = moon_phase(julian_date(when))
        click.echo(f"{when:%Y-%m-%d %H:%M} {phase.phase:>6.3f} {phase.illumination * 100:>4.0f}%  {phase.name}")


@main.command()
@click.option("--seed", type=int, default=42, help="Procedural generation seed")
@click.option("-n", "--count", type=int, default=2000, help="Total number of stars")
@click.option("-b", "--brightest", type=int, default=10, help="List the N brightest stars")
@click.option("--constellation", help="List stars in a constellation")
@click.option("-f", "--find", "name", help="Show one star by name or Bayer designation")
def catalog(seed: int, count: int, brightest: int, constellation: Optional[str], name: Optional[str]):
    """
    Build the star catalog and show summary information.
    """
    stars = StarCatalog(seed=seed, target_count=count)
    click.echo(f"Catalog: {len(stars)} stars ({stars.named_count} named, seed {seed})")

    if name:
        star = stars.find(name)
        if star is None:
            click.echo(click.style(f"✗ No star named {name!r}", fg="red"))
            sys.exit(1)
        click.echo(f"  {star.name} ({star.label}) in {star.constellation}")
        click.echo(f"  RA {_format_ra(star.ra)}, Dec {star.dec:.4f}°, mag {star.magnitude:.2f}")
        click.echo(f"  Spectral type {star.spectral_type}, {star.temperature:.0f} K, {star.star_type.value}")
        click.echo(f"  {class_description(star.star_class)} "
                   f"(typical {temperature_from_class(star.star_class):.0f} K)")
        click.echo(f"  Distance {star.distance_ly:.1f} ly, luminosity {star.luminosity:.3g} L☉, "
                   f"radius {star.radius:.3g} R☉")
        return

    selected = stars.in_constellation(constellation) if constellation else stars.brightest(brightest)
    if constellation:
        click.echo(f"  {len(selected)} stars in {constellation}")
        center = constellation_center(constellation)
        if center is not None:
            click.echo(f"  Centre: RA {_format_ra(center[0])}, Dec {center[1]:.1f}°")
    for star in selected:
        click.echo(f"  {star.name:<16} {star.label:<8} {star.magnitude:>6.2f}  "
                   f"{_format_ra(star.ra)} {star.dec:>7.2f}°  {star.spectral_type}")


@main.command()
@click.option("-c", "--config", type=click.Path(exists=True, path_type=Path),
              help="Configuration YAML file")
@click.option("--duration", type=float, default=5.0, help="Simulated seconds")
@click.option("--rate", type=float, default=30.0, help="Ticks per second")
@click.option("--heading", type=float, default=None, help="Simulated compass heading (omit for no compass)")
@click.option("--heading-rate", type=float, default=0.0, help="Heading drift in degrees per second")
@click.option("--jitter", type=float, default=0.0, help="Heading noise amplitude in degrees")
@click.option("--tilt/--no-tilt", default=True, help="Simulate a level accelerometer")
@click.option("-t", "--time", "time_text", help="Start date/time (default: now)")
@click.pass_context
def simulate(ctx, config: Optional[Path], duration: float, rate: float, heading: Optional[float],
             heading_rate: float, jitter: float, tilt: bool, time_text: Optional[str]):
    """
    Run the tick loop against simulated sensors and report fusion progress.
    """
    if rate <= 0:
        _fail(click.BadParameter("rate must be positive"), False)

    try:
        cfg = _load_config(config)
        start = _resolve_time(time_text, cfg, None)
    except CelestialDomeError as e:
        _fail(e, ctx.obj["verbose"])

    if heading is None and not tilt:
        sensors = StaticSensors()
    else:
        sensors = SimulatedSensors(
            true_heading=heading,
            acceleration=(0.0, 0.0, -1.0) if tilt else None,
            heading_rate=heading_rate,
            jitter=jitter,
        )

    clock_state = {"now": start}
    dome = SkyDome(cfg, sensors=sensors, clock=lambda: clock_state["now"])
    try:
        dome.initialize()
    except CelestialDomeError as e:
        _fail(e, ctx.obj["verbose"])

    dt = 1.0 / rate
    steps = int(round(duration * rate))
    report_every = max(1, int(round(rate)))
    click.echo(f"Simulating {duration:.1f}s at {rate:.0f} Hz ({steps} ticks)")
    for i in range(1, steps + 1):
        clock_state["now"] += timedelta(seconds=dt)
        if isinstance(sensors, SimulatedSensors):
            sensors.advance(dt)
        frame = dome.tick(dt)
        if i % report_every == 0 or i == steps:
            state = dome.fusion.state
            click.echo(f"  t={i * dt:6.2f}s  LST {frame.lst:7.3f}°  "
                       f"heading {state.smoothed_heading:7.2f}°  "
                       f"{frame.fusion_mode.value:<12} {frame.tracking.value}")

    status = "green" if dome.failures == 0 else "yellow"
    click.echo(click.style(f"✓ {dome.ticks} ticks, {dome.failures} failed", fg=status))


@main.command("init-config")
@click.argument("path", type=click.Path(path_type=Path), default="celestial_dome.yaml")
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init_config(path: Path, force: bool):
    """
    Write a configuration file with default values.
    """
    if path.exists() and not force:
        click.echo(click.style(f"✗ {path} exists (use --force to overwrite)", fg="red"))
        sys.exit(1)
    Config().to_yaml(path)
    click.echo(click.style(f"✓ Default configuration written to {path}", fg="green"))


if __name__ == "__main__":
    main()
