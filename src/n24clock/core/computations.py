"""Vectorized evaluation of the biological clock over many instants."""

import datetime

import numpy as np
import polars as pl

from n24clock.core import models

_UNIX_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
_MICROSECONDS = datetime.timedelta(microseconds=1)


def sample_times(
    start: datetime.datetime, end: datetime.datetime, step_seconds: float
) -> pl.Series:
    """Create evenly spaced UTC instants from start to end, inclusive.

    Args:
        start: The first instant. Naive datetimes are interpreted as UTC.
        end: The last instant. Naive datetimes are interpreted as UTC.
        step_seconds: Spacing between instants, in seconds. Rounded to the
            nearest microsecond.

    Returns:
        A polars datetime series named 'time' in the UTC time zone.

    Raises:
        ValueError: If step_seconds is not positive or end is before start.
    """
    if step_seconds <= 0:
        raise ValueError("step_seconds must be positive.")
    start_utc = models.as_utc(start).astimezone(datetime.timezone.utc)
    end_utc = models.as_utc(end).astimezone(datetime.timezone.utc)
    if end_utc < start_utc:
        raise ValueError("end must not be before start.")

    step_microseconds = max(round(step_seconds * 1_000_000), 1)
    return (
        pl.datetime_range(
            start_utc.replace(tzinfo=None),
            end_utc.replace(tzinfo=None),
            interval=f"{step_microseconds}us",
            time_unit="us",
            eager=True,
        )
        .dt.replace_time_zone("UTC")
        .alias("time")
    )


def clock_states(
    parameters: models.ClockParameters, times: pl.Series
) -> pl.DataFrame:
    """Evaluate the biological clock at every instant of a series.

    Follows the same rules as BiologicalClock.state_at, on numpy arrays.

    Args:
        parameters: The clock parameters.
        times: A polars datetime series. Naive values are interpreted as UTC.

    Returns:
        A DataFrame with columns 'time', 'day_index', 'offset_within_day',
        'progress' and 'remaining_in_day'.

    Raises:
        ValueError: If times is not a datetime series.
    """
    if not isinstance(times.dtype, pl.datatypes.Datetime):
        raise ValueError("Time must be a datetime series")

    day_length = parameters.day_length
    reference_us = (parameters.reference_start - _UNIX_EPOCH) // _MICROSECONDS
    epoch_us = times.dt.epoch("us").to_numpy().astype(np.int64)
    elapsed = (epoch_us - reference_us).astype(np.float64) / 1_000_000

    completed_days = np.floor(elapsed / day_length)
    offset = elapsed - completed_days * day_length

    below = offset < 0
    offset = np.where(below, offset + day_length, offset)
    completed_days = np.where(below, completed_days - 1, completed_days)
    above = offset >= day_length
    offset = np.where(above, offset - day_length, offset)
    completed_days = np.where(above, completed_days + 1, completed_days)

    return pl.DataFrame(
        {
            "time": times.alias("time"),
            "day_index": parameters.reference_day_index
            + completed_days.astype(np.int64),
            "offset_within_day": offset,
            "progress": np.clip(offset / day_length, 0.0, 1.0),
            "remaining_in_day": np.maximum(day_length - offset, 0.0),
        }
    )
