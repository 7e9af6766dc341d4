"""Assemble the dashboard and timeline views of the biological clock."""

import datetime
import logging
import pathlib
from typing import Optional, Union

import polars as pl
import pydantic

from n24clock.core import computations, config, models
from n24clock.io.writers import writers
from n24clock.processing import clock, drift, sleep, solar

logger = config.get_logger()


class DashboardSnapshot(pydantic.BaseModel):
    """Everything the dashboard shows for a single instant.

    Attributes:
        instant: The real-world instant the snapshot describes.
        state: The biological state at that instant.
        formatted_offset: The biological time of day as HH:MM:SS.
        remaining_hours: Whole hours left in the biological day.
        remaining_minutes: Minutes left in the biological day, after the hours.
        drift_info: How far the biological clock has drifted from local time.
        is_sleep_time: Whether the instant is inside the preferred sleep window.
        next_wake: The next real-world instant of the preferred wake offset.
        next_bedtime: The next real-world instant the sleep window opens.
        next_sunrise: The next local sunrise, if a location was given and the sun
            rises.
    """

    model_config = pydantic.ConfigDict(frozen=True)

    instant: datetime.datetime
    state: models.ClockState
    formatted_offset: str
    remaining_hours: int
    remaining_minutes: int
    drift_info: drift.DriftInfo
    is_sleep_time: bool
    next_wake: datetime.datetime
    next_bedtime: datetime.datetime
    next_sunrise: Optional[datetime.datetime] = None


def snapshot(
    parameters: models.ClockParameters,
    now: datetime.datetime,
    time_zone: datetime.tzinfo,
    coordinate: Optional[models.GeoCoordinate] = None,
) -> DashboardSnapshot:
    """Compute the dashboard for an instant.

    Args:
        parameters: The clock parameters.
        now: The instant to describe. Naive datetimes are interpreted as UTC.
        time_zone: The local time zone, used for drift and calendar days.
        coordinate: The last known location. Without it there is no sunrise.

    Returns:
        The dashboard snapshot.
    """
    now = models.as_utc(now)
    state = clock.state_at(parameters, now)
    remaining = int(state.remaining_in_day)

    next_sunrise = None
    if coordinate is not None:
        next_sunrise = solar.next_sunrise(coordinate, now, time_zone)

    result = DashboardSnapshot(
        instant=now,
        state=state,
        formatted_offset=state.formatted_offset,
        remaining_hours=remaining // models.SECONDS_PER_HOUR,
        remaining_minutes=(remaining % models.SECONDS_PER_HOUR)
        // models.SECONDS_PER_MINUTE,
        drift_info=drift.drift_info(state, now, time_zone),
        is_sleep_time=sleep.is_sleep_time(parameters, state),
        next_wake=sleep.next_wake(parameters, now).astimezone(time_zone),
        next_bedtime=sleep.next_bedtime(parameters, now).astimezone(time_zone),
        next_sunrise=next_sunrise,
    )
    logger.debug("Dashboard snapshot: %s", result)
    return result


def run_timeline(
    parameters: models.ClockParameters,
    start: datetime.datetime,
    end: datetime.datetime,
    step_seconds: float = 3600,
    output: Optional[Union[pathlib.Path, str]] = None,
    verbosity: int = logging.WARNING,
) -> writers.TimelineResults:
    """Sample the biological clock from start to end.

    Args:
        parameters: The clock parameters.
        start: The first instant to sample.
        end: The last instant to sample, inclusive.
        step_seconds: Spacing between samples, in seconds.
        output: Path to save the samples to, as a .csv or .parquet file. Nothing
            is saved when None.
        verbosity: The logging level for the logger.

    Returns:
        The sampled states, one row per instant, with an extra 'is_sleep_time'
        column.

    Raises:
        ValueError: If step_seconds is not positive or end is before start.
        InvalidFileTypeError: If the output file type is not supported.
    """
    logger.setLevel(verbosity)
    output = pathlib.Path(output) if output is not None else None
    if output is not None:
        writers.TimelineResults.validate_output(output=output)

    times = computations.sample_times(start, end, step_seconds)
    logger.debug("Sampling %s instants.", len(times))
    states = computations.clock_states(parameters, times)

    window = sleep.sleep_window(parameters)
    offset = pl.col("offset_within_day")
    if window.covers_whole_day:
        asleep = pl.lit(True)
    elif window.wraps_day_boundary:
        asleep = (offset >= window.onset_offset) | (offset < window.wake_offset)
    else:
        asleep = (offset >= window.onset_offset) & (offset < window.wake_offset)
    states = states.with_columns(asleep.alias("is_sleep_time"))

    results = writers.TimelineResults(
        states=states,
        processing_params={
            "parameters": parameters.model_dump(mode="json", by_alias=True),
            "start": models.as_utc(start).isoformat(),
            "end": models.as_utc(end).isoformat(),
            "step_seconds": step_seconds,
        },
    )
    if output is not None:
        results.save_results(output=output)
    return results
