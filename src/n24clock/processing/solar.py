"""Calculate sunrise and sunset with the Sunrise Equation.

This is the classic almanac algorithm (U.S. Naval Observatory, 1990) using an
official zenith of 90.833 degrees, which accounts for atmospheric refraction and
the solar disc. Accuracy is about a minute at mid latitudes.

All angles are in degrees; conversion to radians happens right at the
trigonometric calls. When the sun never crosses the horizon on a date (polar day
or polar night) the event does not exist and None is returned; this is a normal
result, not an error.
"""

import datetime
import math
from typing import Optional, Union

from n24clock.core import config, models

logger = config.get_logger()

OFFICIAL_ZENITH = 90.833


def _sin_deg(degrees: float) -> float:
    return math.sin(math.radians(degrees))


def _cos_deg(degrees: float) -> float:
    return math.cos(math.radians(degrees))


def normalize_degrees(degrees: float) -> float:
    """Wrap an angle into [0, 360) using a floored modulo."""
    return _floored_mod(degrees, 360.0)


def normalize_hours(hours: float) -> float:
    """Wrap an hour value into [0, 24) using a floored modulo."""
    return _floored_mod(hours, 24.0)


def _floored_mod(value: float, period: float) -> float:
    wrapped = math.fmod(value, period)
    if wrapped < 0:
        wrapped += period
    return 0.0 if wrapped >= period else wrapped


def _local_day_start(
    day: datetime.date, time_zone: datetime.tzinfo
) -> datetime.datetime:
    return datetime.datetime.combine(day, datetime.time(0), tzinfo=time_zone)


def _local_date(
    day: Union[datetime.date, datetime.datetime], time_zone: datetime.tzinfo
) -> datetime.date:
    if isinstance(day, datetime.datetime):
        return models.as_utc(day).astimezone(time_zone).date()
    return day


def _utc_event_hours(
    latitude: float, longitude: float, day_of_year: int, is_sunrise: bool
) -> Optional[float]:
    """Compute the event time in UTC hours, [0, 24), or None if it does not occur."""
    lng_hour = longitude / 15.0
    approx_time = day_of_year + ((6.0 if is_sunrise else 18.0) - lng_hour) / 24.0
    mean_anomaly = 0.9856 * approx_time - 3.289

    true_longitude = normalize_degrees(
        mean_anomaly
        + 1.916 * _sin_deg(mean_anomaly)
        + 0.020 * _sin_deg(2 * mean_anomaly)
        + 282.634
    )

    right_ascension = normalize_degrees(
        math.degrees(math.atan(0.91764 * math.tan(math.radians(true_longitude))))
    )
    # Right ascension must sit in the same quadrant as the true longitude.
    longitude_quadrant = math.floor(true_longitude / 90.0) * 90.0
    ascension_quadrant = math.floor(right_ascension / 90.0) * 90.0
    right_ascension = (right_ascension + longitude_quadrant - ascension_quadrant) / 15.0

    sin_declination = 0.39782 * _sin_deg(true_longitude)
    cos_declination = math.cos(math.asin(sin_declination))

    cos_hour_angle = (
        _cos_deg(OFFICIAL_ZENITH) - sin_declination * _sin_deg(latitude)
    ) / (cos_declination * _cos_deg(latitude))
    if not -1.0 <= cos_hour_angle <= 1.0:
        return None

    hour_angle = math.degrees(math.acos(cos_hour_angle))
    if is_sunrise:
        hour_angle = 360.0 - hour_angle
    hour_angle /= 15.0

    local_mean_time = hour_angle + right_ascension - 0.06571 * approx_time - 6.622
    return normalize_hours(local_mean_time - lng_hour)


def solar_event(
    coordinate: models.GeoCoordinate,
    day: Union[datetime.date, datetime.datetime],
    time_zone: datetime.tzinfo,
    is_sunrise: bool,
) -> Optional[datetime.datetime]:
    """Compute the instant of sunrise or sunset on a calendar date.

    Args:
        coordinate: Where to compute the event.
        day: The calendar date. Datetimes are converted into time_zone first and
            their local date is used.
        time_zone: The time zone the calendar date is interpreted in. Its UTC
            offset is evaluated at the local start of the day.
        is_sunrise: True for sunrise, False for sunset.

    Returns:
        The instant of the event as an aware datetime in time_zone, or None when
        the sun does not rise (or set) on that date.
    """
    local_date = _local_date(day, time_zone)
    day_start = _local_day_start(local_date, time_zone)
    day_of_year = local_date.timetuple().tm_yday

    universal_time = _utc_event_hours(
        coordinate.latitude, coordinate.longitude, day_of_year, is_sunrise
    )
    if universal_time is None:
        logger.debug(
            "No %s at %s on %s.",
            "sunrise" if is_sunrise else "sunset",
            coordinate,
            local_date,
        )
        return None

    utc_offset = day_start.utcoffset()
    offset_hours = (
        utc_offset.total_seconds() / models.SECONDS_PER_HOUR
        if utc_offset is not None
        else 0.0
    )
    local_hours = universal_time + offset_hours
    day_offset = 0
    while local_hours < 0:
        local_hours += 24.0
        day_offset -= 1
    while local_hours >= 24:
        local_hours -= 24.0
        day_offset += 1

    adjusted_start = _local_day_start(
        local_date + datetime.timedelta(days=day_offset), time_zone
    )
    event = adjusted_start.astimezone(datetime.timezone.utc) + datetime.timedelta(
        seconds=local_hours * models.SECONDS_PER_HOUR
    )
    return event.astimezone(time_zone)


def sunrise(
    coordinate: models.GeoCoordinate,
    day: Union[datetime.date, datetime.datetime],
    time_zone: datetime.tzinfo,
) -> Optional[datetime.datetime]:
    """Compute the instant of sunrise on a calendar date, if the sun rises."""
    return solar_event(coordinate, day, time_zone, is_sunrise=True)


def sunset(
    coordinate: models.GeoCoordinate,
    day: Union[datetime.date, datetime.datetime],
    time_zone: datetime.tzinfo,
) -> Optional[datetime.datetime]:
    """Compute the instant of sunset on a calendar date, if the sun sets."""
    return solar_event(coordinate, day, time_zone, is_sunrise=False)


def next_sunrise(
    coordinate: models.GeoCoordinate,
    after: datetime.datetime,
    time_zone: datetime.tzinfo,
) -> Optional[datetime.datetime]:
    """Find the first sunrise strictly after an instant.

    Only the calendar day containing `after` and the following day are searched.

    Args:
        coordinate: Where to compute the sunrise.
        after: The instant to search from.
        time_zone: The time zone that defines calendar days.

    Returns:
        The next sunrise, or None if the sun rises on neither day.
    """
    after = models.as_utc(after)
    today = after.astimezone(time_zone).date()

    sunrise_today = sunrise(coordinate, today, time_zone)
    if sunrise_today is not None and sunrise_today > after:
        return sunrise_today

    sunrise_tomorrow = sunrise(
        coordinate, today + datetime.timedelta(days=1), time_zone
    )
    if sunrise_tomorrow is None:
        logger.warning("No sunrise at %s after %s.", coordinate, after)
    return sunrise_tomorrow
