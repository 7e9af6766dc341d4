"""Sleep preferences and the sleep window they imply on the biological day."""

import datetime
import math
from dataclasses import dataclass
from typing import Optional

from n24clock.core import config, models
from n24clock.processing import clock

logger = config.get_logger()

MINUTE_STEP = 5
MIN_DURATION = 3.0 * models.SECONDS_PER_HOUR
MAX_DURATION = 14.0 * models.SECONDS_PER_HOUR
DEFAULT_WAKE_OFFSET = 6.0 * models.SECONDS_PER_HOUR
DEFAULT_SLEEP_DURATION = 7.5 * models.SECONDS_PER_HOUR

_STEP_SECONDS = MINUTE_STEP * models.SECONDS_PER_MINUTE


@dataclass(frozen=True)
class SleepWindow:
    """Dataclass to store the preferred sleep window on the biological day.

    Attributes:
        onset_offset: Biological offset, in seconds, at which sleep begins. May be
            larger than wake_offset when the window wraps over the day boundary.
        wake_offset: Biological offset, in seconds, at which sleep ends.
        duration: Length of the window, in seconds. Never longer than day_length.
        day_length: Length of the biological day the window lies on, in seconds.
    """

    onset_offset: float
    wake_offset: float
    duration: float
    day_length: float

    @property
    def wraps_day_boundary(self) -> bool:
        """True if the window starts on the previous biological day."""
        return self.onset_offset > self.wake_offset

    @property
    def covers_whole_day(self) -> bool:
        """True if the window spans the entire biological day."""
        return self.duration >= self.day_length


def normalized_duration(duration: float) -> float:
    """Floor a sleep duration to the minute step and clamp it into range.

    Args:
        duration: The sleep duration, in seconds.

    Returns:
        The duration floored to a multiple of MINUTE_STEP minutes and clamped into
        [MIN_DURATION, MAX_DURATION].
    """
    floored = math.floor(duration / _STEP_SECONDS) * _STEP_SECONDS
    return float(min(max(floored, MIN_DURATION), MAX_DURATION))


def normalized_duration_or_default(duration: Optional[float]) -> float:
    """Normalize a sleep duration, substituting the default when it is missing."""
    return normalized_duration(
        DEFAULT_SLEEP_DURATION if duration is None else duration
    )


def normalize(parameters: models.ClockParameters) -> models.ClockParameters:
    """Fill in and normalize the sleep preferences of clock parameters.

    Applying this twice gives the same result as applying it once.

    Args:
        parameters: The clock parameters to normalize.

    Returns:
        A copy of the parameters with a wake offset (defaulting to
        DEFAULT_WAKE_OFFSET) and a normalized sleep duration.
    """
    wake_offset = parameters.preferred_wake_offset
    if wake_offset is None:
        wake_offset = DEFAULT_WAKE_OFFSET
    normalized = parameters.model_copy(
        update={
            "preferred_wake_offset": wake_offset,
            "preferred_sleep_duration": normalized_duration_or_default(
                parameters.preferred_sleep_duration
            ),
        }
    )
    if normalized != parameters:
        logger.debug("Normalized sleep preferences: %s", normalized)
    return normalized


def sleep_window(parameters: models.ClockParameters) -> SleepWindow:
    """Compute the sleep window ending at the preferred wake offset.

    Args:
        parameters: The clock parameters. Missing preferences use the defaults.

    Returns:
        The sleep window, with both offsets in [0, day_length). The duration is
        capped at day_length.
    """
    biological_clock = clock.BiologicalClock(parameters)
    raw_wake_offset = parameters.preferred_wake_offset
    if raw_wake_offset is None:
        raw_wake_offset = DEFAULT_WAKE_OFFSET
    wake_offset = biological_clock.normalized_offset(raw_wake_offset)
    duration = min(
        normalized_duration_or_default(parameters.preferred_sleep_duration),
        parameters.day_length,
    )
    onset_offset = biological_clock.normalized_offset(wake_offset - duration)
    return SleepWindow(
        onset_offset=onset_offset,
        wake_offset=wake_offset,
        duration=duration,
        day_length=parameters.day_length,
    )


def next_wake(
    parameters: models.ClockParameters, after: datetime.datetime
) -> datetime.datetime:
    """Return the next real-world instant of the preferred wake offset."""
    window = sleep_window(parameters)
    return clock.next_occurrence(parameters, window.wake_offset, after)


def next_bedtime(
    parameters: models.ClockParameters, after: datetime.datetime
) -> datetime.datetime:
    """Return the next real-world instant at which the sleep window opens."""
    window = sleep_window(parameters)
    return clock.next_occurrence(parameters, window.onset_offset, after)


def is_sleep_time(
    parameters: models.ClockParameters, state: models.ClockState
) -> bool:
    """Check whether a biological state falls inside the sleep window.

    Args:
        parameters: The clock parameters holding the sleep preferences.
        state: The biological state to check.

    Returns:
        True if the offset lies in [onset, wake), wrapping over the day boundary
        when needed. Always True when the window covers the whole day.
    """
    window = sleep_window(parameters)
    offset = state.offset_within_day
    if window.covers_whole_day:
        return True
    if window.wraps_day_boundary:
        return offset >= window.onset_offset or offset < window.wake_offset
    return window.onset_offset <= offset < window.wake_offset
