"""Describe how far the biological clock has drifted from local time.

The drift is expressed as the time zone the user's body currently "lives" in: if
the biological clock reads 8 hours later than the local wall clock in London, the
user has drifted to Beijing (UTC+8).
"""

import datetime
import math
from dataclasses import dataclass

from n24clock.core import config, models

logger = config.get_logger()

SECONDS_PER_DAY = 24.0 * models.SECONDS_PER_HOUR
MAX_SHIFT_HOURS = 12

UNKNOWN_CITY = "Unknown city"

CITY_BY_UTC_OFFSET = {
    -12: "Baker Island",
    -11: "Pago Pago",
    -10: "Honolulu",
    -9: "Anchorage",
    -8: "Los Angeles",
    -7: "Denver",
    -6: "Chicago",
    -5: "New York",
    -4: "San Juan",
    -3: "São Paulo",
    -2: "South Georgia",
    -1: "Azores",
    0: "London",
    1: "Berlin",
    2: "Athens",
    3: "Moscow",
    4: "Dubai",
    5: "Karachi",
    6: "Dhaka",
    7: "Bangkok",
    8: "Beijing",
    9: "Tokyo",
    10: "Sydney",
    11: "Solomon Islands",
    12: "Auckland",
}


@dataclass(frozen=True)
class DriftInfo:
    """Dataclass to store the drift of the biological clock.

    Attributes:
        difference_seconds: Biological time minus local time, in [-12h, 12h].
        difference_text: The difference formatted as e.g. "+3h05min".
        shift_hours: The difference rounded to whole hours, in [-12, 12].
        utc_offset_hours: The UTC offset the biological clock corresponds to.
        city: A representative city for that UTC offset.
        utc_description: The UTC offset formatted as e.g. "UTC+8".
    """

    difference_seconds: float
    difference_text: str
    shift_hours: int
    utc_offset_hours: int
    city: str
    utc_description: str

    @property
    def destination_description(self) -> str:
        """One-line description of where the body clock has drifted to."""
        return f"You drifted to {self.city} {self.utc_description} today"


def _round_half_away_from_zero(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _clamp_hours(hours: int) -> int:
    return max(-MAX_SHIFT_HOURS, min(MAX_SHIFT_HOURS, hours))


def wrap_to_half_day(seconds: float) -> float:
    """Wrap a time difference into [-12h, 12h]."""
    wrapped = math.fmod(seconds, SECONDS_PER_DAY)
    half_day = SECONDS_PER_DAY / 2
    if wrapped > half_day:
        wrapped -= SECONDS_PER_DAY
    elif wrapped < -half_day:
        wrapped += SECONDS_PER_DAY
    return wrapped


def difference_seconds(
    state: models.ClockState,
    instant: datetime.datetime,
    time_zone: datetime.tzinfo,
) -> float:
    """Compute biological time minus local wall-clock time.

    The biological day is scaled onto 24 hours before comparing.

    Args:
        state: The biological state at the instant.
        instant: The real-world instant.
        time_zone: The local time zone.

    Returns:
        The difference in seconds, wrapped into [-12h, 12h].
    """
    biological_seconds = state.progress * SECONDS_PER_DAY
    local = models.as_utc(instant).astimezone(time_zone)
    local_seconds = (
        local.hour * models.SECONDS_PER_HOUR
        + local.minute * models.SECONDS_PER_MINUTE
        + local.second
    )
    return wrap_to_half_day(biological_seconds - local_seconds)


def format_difference(seconds: float) -> str:
    """Format a difference as signed hours and minutes, e.g. "-1h30min"."""
    total_minutes = int(seconds / models.SECONDS_PER_MINUTE)
    sign = "-" if total_minutes < 0 else "+"
    hours, minutes = divmod(abs(total_minutes), 60)
    return f"{sign}{hours}h{minutes:02d}min"


def rounded_shift_hours(seconds: float) -> int:
    """Round a difference to whole hours, clamped into [-12, 12]."""
    return _clamp_hours(_round_half_away_from_zero(seconds / models.SECONDS_PER_HOUR))


def format_utc_offset(hours: int) -> str:
    """Format a UTC offset, e.g. "UTC+8", "UTC-5" or "UTC+0"."""
    return f"UTC{hours:+d}"


def city_for_offset(hours: int) -> str:
    """Return a representative city for a whole-hour UTC offset."""
    return CITY_BY_UTC_OFFSET.get(hours, UNKNOWN_CITY)


def drift_info(
    state: models.ClockState,
    instant: datetime.datetime,
    time_zone: datetime.tzinfo,
) -> DriftInfo:
    """Describe the drift of the biological clock at an instant.

    Args:
        state: The biological state at the instant.
        instant: The real-world instant.
        time_zone: The local time zone.

    Returns:
        The drift of the biological clock relative to local time.
    """
    difference = difference_seconds(state, instant, time_zone)
    shift_hours = rounded_shift_hours(difference)

    local_offset = models.as_utc(instant).astimezone(time_zone).utcoffset()
    local_offset_hours = (
        local_offset.total_seconds() / models.SECONDS_PER_HOUR
        if local_offset is not None
        else 0.0
    )
    utc_offset_hours = _clamp_hours(
        _round_half_away_from_zero(local_offset_hours + shift_hours)
    )

    info = DriftInfo(
        difference_seconds=difference,
        difference_text=format_difference(difference),
        shift_hours=shift_hours,
        utc_offset_hours=utc_offset_hours,
        city=city_for_offset(utc_offset_hours),
        utc_description=format_utc_offset(utc_offset_hours),
    )
    logger.debug("Drift at %s: %s", instant, info)
    return info
