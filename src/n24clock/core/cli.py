"""CLI for n24clock."""

import datetime
import logging
import pathlib
import zoneinfo
from typing import Dict, NoReturn, Optional

import typer

from n24clock.core import config, exceptions, models
from n24clock.io.readers import readers
from n24clock.io.writers import writers
from n24clock.processing import cycle, sleep

logger = config.get_logger()
app = typer.Typer(
    help="Show and configure your non-24-hour biological clock.",
    epilog="Settings are stored as JSON, by default in ~/.n24clock/parameters.json.",
)

SETTINGS_OPTION = typer.Option(
    config.DEFAULT_SETTINGS_PATH,
    "-s",
    "--settings",
    help="Path of the JSON file holding the clock parameters.",
)
TIME_ZONE_OPTION = typer.Option(
    None,
    "--tz",
    help="IANA time zone, e.g. 'Europe/Berlin'. Defaults to the current UTC offset "
    "of the system, which does not follow daylight saving changes. Pass an IANA "
    "zone for correct results on dates across a daylight saving change.",
)


def version_check(version: bool) -> None:
    """Print the current version of n24clock and exit."""
    if version:
        typer.echo(f"n24clock version: {config.get_version()}")
        raise typer.Exit()


def _now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _resolve_time_zone(name: Optional[str]) -> datetime.tzinfo:
    """Look up an IANA time zone, falling back to the system's current UTC offset.

    Raises:
        typer.BadParameter: If the time zone is unknown.
    """
    if name is None:
        local_zone = datetime.datetime.now().astimezone().tzinfo
        return local_zone if local_zone is not None else datetime.timezone.utc
    try:
        return zoneinfo.ZoneInfo(name)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError):
        raise typer.BadParameter(f"Unknown time zone: {name}")


def _parse_clock_time(value: str) -> datetime.time:
    """Parse an HH:MM string.

    Raises:
        typer.BadParameter: If the value is not a valid time of day.
    """
    try:
        return datetime.time.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid time of day, expected HH:MM: {value}")


def _parse_instant(value: str, time_zone: datetime.tzinfo) -> datetime.datetime:
    """Parse an ISO 8601 datetime. Naive values are read in the given time zone.

    Raises:
        typer.BadParameter: If the value is not a valid datetime.
    """
    try:
        parsed = datetime.datetime.fromisoformat(value)
    except ValueError:
        raise typer.BadParameter(f"Invalid ISO 8601 datetime: {value}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=time_zone)
    return parsed


def _format_instant(
    instant: Optional[datetime.datetime], time_zone: datetime.tzinfo
) -> str:
    if instant is None:
        return "-"
    return instant.astimezone(time_zone).strftime("%Y-%m-%d %H:%M %Z")


def _require_parameters(settings: pathlib.Path) -> models.ClockParameters:
    """Load stored clock parameters.

    Raises:
        SettingsNotFoundError: If no valid parameters are stored.
    """
    parameters = readers.load_parameters(settings)
    if parameters is None:
        raise exceptions.SettingsNotFoundError(
            f"No clock parameters found in {settings}. Run 'n24clock setup' first."
        )
    return parameters


def _fail(error: Exception) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


@app.callback()
def main(
    verbosity: bool = typer.Option(
        False,
        "-v",
        "--verbosity",
        help="Determines the level of verbosity. Use -v for DEBUG. "
        "Defaults to INFO if not included.",
    ),
    version: bool = typer.Option(
        False,
        "-V",
        "--version",
        help="Print the current version of n24clock and exit.",
        is_eager=True,
        callback=version_check,
    ),
) -> None:
    """Show and configure your non-24-hour biological clock."""
    log_level = logging.INFO
    if verbosity:
        log_level = logging.DEBUG
    logger.setLevel(log_level)


@app.command()
def status(
    settings: pathlib.Path = SETTINGS_OPTION,
    latitude: Optional[float] = typer.Option(
        None,
        "--lat",
        help="Latitude in degrees, for the next sunrise.",
        min=-90,
        max=90,
    ),
    longitude: Optional[float] = typer.Option(
        None,
        "--lon",
        help="Longitude in degrees, positive East, for the next sunrise.",
        min=-180,
        max=180,
    ),
    time_zone: Optional[str] = TIME_ZONE_OPTION,
) -> None:
    """Show the current biological time, drift and upcoming events."""
    from n24clock.core import orchestrator

    zone = _resolve_time_zone(time_zone)
    if (latitude is None) != (longitude is None):
        raise typer.BadParameter("--lat and --lon must be given together.")
    coordinate = None
    if latitude is not None and longitude is not None:
        coordinate = models.GeoCoordinate(latitude=latitude, longitude=longitude)

    try:
        parameters = _require_parameters(settings)
    except exceptions.SettingsNotFoundError as e:
        _fail(e)

    dashboard = orchestrator.snapshot(
        parameters=parameters, now=_now(), time_zone=zone, coordinate=coordinate
    )
    typer.echo(f"Biological time: {dashboard.formatted_offset}")
    typer.echo(f"Biological day: {dashboard.state.day_index}")
    typer.echo(
        f"Next biological day in {dashboard.remaining_hours} h "
        f"{dashboard.remaining_minutes} min"
    )
    typer.echo(dashboard.drift_info.destination_description)
    typer.echo(f"Difference from local time: {dashboard.drift_info.difference_text}")
    typer.echo(f"Sleep time: {'yes' if dashboard.is_sleep_time else 'no'}")
    typer.echo(f"Next wake: {_format_instant(dashboard.next_wake, zone)}")
    typer.echo(f"Next bedtime: {_format_instant(dashboard.next_bedtime, zone)}")
    if coordinate is None:
        typer.echo("Next sunrise: location unknown")
    elif dashboard.next_sunrise is None:
        typer.echo("Next sunrise: the sun does not rise here in the next two days")
    else:
        typer.echo(f"Next sunrise: {_format_instant(dashboard.next_sunrise, zone)}")


@app.command()
def setup(
    yesterday_wake: str = typer.Option(
        ..., "-w", "--yesterday-wake", help="When you woke up yesterday, as HH:MM."
    ),
    cycle_days: int = typer.Option(
        30,
        "-c",
        "--cycle-days",
        help="Days your rhythm takes to drift around the full 24-hour clock. "
        f"Clamped to {cycle.CYCLE_RANGE[0]}-{cycle.CYCLE_RANGE[1]}.",
    ),
    wake_hour: int = typer.Option(
        6,
        "--wake-hour",
        help="The biological hour you want your wake-up to read as.",
        min=0,
        max=23,
    ),
    time_zone: Optional[str] = TIME_ZONE_OPTION,
    settings: pathlib.Path = SETTINGS_OPTION,
) -> None:
    """Set up the biological clock from a few simple answers."""
    zone = _resolve_time_zone(time_zone)
    wake_time = _parse_clock_time(yesterday_wake)
    yesterday = _now().astimezone(zone).date() - datetime.timedelta(days=1)
    wake_instant = datetime.datetime.combine(yesterday, wake_time, tzinfo=zone)

    try:
        parameters = cycle.onboarding_parameters(
            cycle_days=cycle_days,
            yesterday_wake=wake_instant,
            preferred_wake_hour=wake_hour,
        )
    except exceptions.InvalidInputError as e:
        _fail(e)

    writers.save_parameters(parameters, settings)
    typer.echo(f"Biological day: {cycle.describe_day_length(parameters.day_length)}")
    logger.info("Clock parameters saved in: %s", settings)


@app.command()
def configure(
    hours: Optional[int] = typer.Option(
        None, "-H", "--hours", help="Hours of the biological day."
    ),
    minutes: int = typer.Option(
        0, "-M", "--minutes", help="Minutes of the biological day."
    ),
    seconds: int = typer.Option(
        0, "-S", "--seconds", help="Seconds of the biological day."
    ),
    cycle_days: Optional[int] = typer.Option(
        None,
        "-c",
        "--cycle-days",
        help="Set the day length from the days your rhythm takes to drift around "
        "the full 24-hour clock, instead of --hours. "
        f"Clamped to {cycle.CYCLE_RANGE[0]}-{cycle.CYCLE_RANGE[1]}.",
    ),
    reference_start: Optional[str] = typer.Option(
        None,
        "-r",
        "--reference-start",
        help="ISO 8601 instant at which the reference biological day starts. "
        "Defaults to the stored value, or now.",
    ),
    day_index: int = typer.Option(
        0, "-d", "--day-index", help="Label of the reference biological day."
    ),
    time_zone: Optional[str] = TIME_ZONE_OPTION,
    settings: pathlib.Path = SETTINGS_OPTION,
) -> None:
    """Set the biological day length directly or from a cycle length."""
    if (hours is None) == (cycle_days is None):
        raise typer.BadParameter("Give exactly one of --hours and --cycle-days.")
    zone = _resolve_time_zone(time_zone)
    stored = readers.load_parameters(settings)

    if reference_start is not None:
        start = _parse_instant(reference_start, zone)
    elif stored is not None:
        start = stored.reference_start
    else:
        start = _now()

    try:
        if cycle_days is not None:
            parameters = models.parameters_from_day_length(
                cycle.day_length_for_cycle(cycle_days), start, day_index
            )
        else:
            parameters = models.DayLengthInput(
                hours=hours,
                minutes=minutes,
                seconds=seconds,
                reference_start=start,
                reference_day_index=day_index,
            ).build_parameters()
    except exceptions.InvalidInputError as e:
        _fail(e)

    if stored is not None:
        parameters = parameters.model_copy(
            update={
                "preferred_wake_offset": stored.preferred_wake_offset,
                "preferred_sleep_duration": stored.preferred_sleep_duration,
            }
        )
    writers.save_parameters(sleep.normalize(parameters), settings)
    typer.echo(f"Biological day: {cycle.describe_day_length(parameters.day_length)}")
    typer.echo(f"Cycle: ~{cycle.estimated_cycle_days(parameters.day_length)} days")


@app.command()
def preferences(
    wake_time: Optional[str] = typer.Option(
        None, "-w", "--wake-time", help="Biological wake-up time, as HH:MM."
    ),
    sleep_minutes: Optional[int] = typer.Option(
        None,
        "-d",
        "--sleep-duration",
        help="Preferred sleep duration in minutes. Floored to "
        f"{sleep.MINUTE_STEP}-minute steps and clamped to 3-14 hours.",
    ),
    settings: pathlib.Path = SETTINGS_OPTION,
) -> None:
    """Update the preferred wake time and sleep duration."""
    try:
        parameters = _require_parameters(settings)
    except exceptions.SettingsNotFoundError as e:
        _fail(e)

    update: Dict[str, float] = {}
    if wake_time is not None:
        parsed = _parse_clock_time(wake_time)
        update["preferred_wake_offset"] = float(
            parsed.hour * models.SECONDS_PER_HOUR
            + parsed.minute * models.SECONDS_PER_MINUTE
            + parsed.second
        )
    if sleep_minutes is not None:
        update["preferred_sleep_duration"] = float(
            sleep_minutes * models.SECONDS_PER_MINUTE
        )

    parameters = sleep.normalize(parameters.model_copy(update=update))
    writers.save_parameters(parameters, settings)

    window = sleep.sleep_window(parameters)
    typer.echo(
        f"Sleep window: {models.format_offset(window.onset_offset)}"
        f" - {models.format_offset(window.wake_offset)}"
    )


@app.command("adjust-phase")
def adjust_phase(
    steps: int = typer.Option(
        ...,
        "-n",
        "--steps",
        help=f"Number of {cycle.PHASE_STEP_MINUTES}-minute steps. Positive values "
        "delay the rhythm, negative values advance it.",
    ),
    settings: pathlib.Path = SETTINGS_OPTION,
) -> None:
    """Shift the phase of the biological clock."""
    try:
        parameters = _require_parameters(settings)
    except exceptions.SettingsNotFoundError as e:
        _fail(e)

    adjusted = cycle.adjust_phase_steps(parameters, steps)
    writers.save_parameters(adjusted, settings)
    typer.echo(f"Reference start: {adjusted.reference_start.isoformat()}")


@app.command()
def reset(settings: pathlib.Path = SETTINGS_OPTION) -> None:
    """Forget the stored clock parameters."""
    writers.clear_parameters(settings)
    typer.echo("Clock parameters cleared.")


@app.command()
def sunrise(
    latitude: float = typer.Option(
        ..., "--lat", help="Latitude in degrees.", min=-90, max=90
    ),
    longitude: float = typer.Option(
        ..., "--lon", help="Longitude in degrees, positive East.", min=-180, max=180
    ),
    date: Optional[str] = typer.Option(
        None, "--date", help="Calendar date as YYYY-MM-DD. Defaults to today."
    ),
    sunset: bool = typer.Option(
        False, "--sunset", help="Compute the sunset instead of the sunrise."
    ),
    time_zone: Optional[str] = TIME_ZONE_OPTION,
) -> None:
    """Compute the sunrise or sunset at a location."""
    from n24clock.processing import solar

    zone = _resolve_time_zone(time_zone)
    if date is None:
        day = _now().astimezone(zone).date()
    else:
        try:
            day = datetime.date.fromisoformat(date)
        except ValueError:
            raise typer.BadParameter(f"Invalid date, expected YYYY-MM-DD: {date}")

    coordinate = models.GeoCoordinate(latitude=latitude, longitude=longitude)
    event_name = "Sunset" if sunset else "Sunrise"
    event = solar.solar_event(coordinate, day, zone, is_sunrise=not sunset)
    if event is None:
        typer.echo(f"{event_name}: does not occur on {day.isoformat()}")
    else:
        typer.echo(f"{event_name}: {_format_instant(event, zone)}")


@app.command()
def timeline(
    start: str = typer.Argument(..., help="ISO 8601 start of the timeline."),
    end: str = typer.Argument(..., help="ISO 8601 end of the timeline, inclusive."),
    output: Optional[pathlib.Path] = typer.Option(
        None,
        "-o",
        "--output",
        help="Path where data will be saved. Supports .csv and .parquet formats.",
    ),
    step_minutes: float = typer.Option(
        60, "-e", "--step", help="Minutes between samples.", min=0.001
    ),
    time_zone: Optional[str] = TIME_ZONE_OPTION,
    settings: pathlib.Path = SETTINGS_OPTION,
) -> None:
    """Sample the biological clock over a period of time."""
    from n24clock.core import orchestrator

    zone = _resolve_time_zone(time_zone)
    start_instant = _parse_instant(start, zone)
    end_instant = _parse_instant(end, zone)

    try:
        parameters = _require_parameters(settings)
        results = orchestrator.run_timeline(
            parameters=parameters,
            start=start_instant,
            end=end_instant,
            step_seconds=step_minutes * models.SECONDS_PER_MINUTE,
            output=output,
            verbosity=logger.level,
        )
    except (
        exceptions.SettingsNotFoundError,
        exceptions.InvalidFileTypeError,
        ValueError,
    ) as e:
        _fail(e)

    if output is None:
        typer.echo(results.states)


if __name__ == "__main__":
    app()
