"""Test the sunrise and sunset calculations."""

import datetime
import zoneinfo

import pytest

from n24clock.core import models
from n24clock.processing import solar

UTC = datetime.timezone.utc
EQUATOR = models.GeoCoordinate(latitude=0, longitude=0)
BERLIN = models.GeoCoordinate(latitude=52.52, longitude=13.405)
NEW_YORK = models.GeoCoordinate(latitude=40.7128, longitude=-74.006)
SVALBARD = models.GeoCoordinate(latitude=75, longitude=20)


def _minutes_apart(first: datetime.datetime, second: datetime.datetime) -> float:
    return abs((first - second).total_seconds()) / 60


@pytest.mark.parametrize(
    "degrees, expected", [(-30, 330), (725, 5), (360, 0), (0, 0), (359.5, 359.5)]
)
def test_normalize_degrees(degrees: float, expected: float) -> None:
    """Test wrapping angles into [0, 360)."""
    assert solar.normalize_degrees(degrees) == pytest.approx(expected)


@pytest.mark.parametrize("hours, expected", [(-1, 23), (49, 1), (24, 0), (6.5, 6.5)])
def test_normalize_hours(hours: float, expected: float) -> None:
    """Test wrapping hours into [0, 24)."""
    assert solar.normalize_hours(hours) == pytest.approx(expected)


def test_equinox_at_equator() -> None:
    """Test that the equinox sun rises near 06:00 and sets near 18:00."""
    day = datetime.date(2024, 3, 20)

    sunrise = solar.sunrise(EQUATOR, day, UTC)
    sunset = solar.sunset(EQUATOR, day, UTC)

    assert sunrise is not None and sunset is not None
    assert _minutes_apart(sunrise, datetime.datetime(2024, 3, 20, 6, tzinfo=UTC)) < 30
    assert _minutes_apart(sunset, datetime.datetime(2024, 3, 20, 18, tzinfo=UTC)) < 30
    assert sunrise < sunset


def test_equinox_at_equator_fixed_offset() -> None:
    """Test that local solar time follows the longitude."""
    plus_six = datetime.timezone(datetime.timedelta(hours=6))
    coordinate = models.GeoCoordinate(latitude=0, longitude=90)

    sunrise = solar.sunrise(coordinate, datetime.date(2024, 3, 20), plus_six)

    assert sunrise is not None
    assert sunrise.utcoffset() == datetime.timedelta(hours=6)
    expected = datetime.datetime(2024, 3, 20, 6, tzinfo=plus_six)
    assert _minutes_apart(sunrise, expected) < 30


def test_midsummer_in_berlin() -> None:
    """Test against the published Berlin times of 04:43 and 21:33."""
    berlin = zoneinfo.ZoneInfo("Europe/Berlin")
    day = datetime.date(2024, 6, 21)

    sunrise = solar.sunrise(BERLIN, day, berlin)
    sunset = solar.sunset(BERLIN, day, berlin)

    assert sunrise is not None and sunset is not None
    assert sunrise.tzinfo is berlin
    assert sunrise.date() == day
    published_sunrise = datetime.datetime(2024, 6, 21, 4, 43, tzinfo=berlin)
    published_sunset = datetime.datetime(2024, 6, 21, 21, 33, tzinfo=berlin)
    assert _minutes_apart(sunrise, published_sunrise) < 10
    assert _minutes_apart(sunset, published_sunset) < 10


def test_datetime_uses_local_date() -> None:
    """Test that a datetime is converted to the local calendar date first."""
    berlin = zoneinfo.ZoneInfo("Europe/Berlin")
    late_evening_utc = datetime.datetime(2024, 6, 21, 23, 30, tzinfo=UTC)

    sunrise = solar.sunrise(BERLIN, late_evening_utc, berlin)

    assert sunrise is not None
    assert sunrise.date() == datetime.date(2024, 6, 22)


def test_daylight_saving_transition() -> None:
    """Test that the day DST starts still gets the right instant."""
    new_york = zoneinfo.ZoneInfo("America/New_York")

    before = solar.sunrise(NEW_YORK, datetime.date(2024, 3, 9), new_york)
    transition = solar.sunrise(NEW_YORK, datetime.date(2024, 3, 10), new_york)

    assert before is not None and transition is not None
    assert before.hour == 6
    assert transition.hour == 7
    elapsed = transition.astimezone(UTC) - before.astimezone(UTC)
    daily_change = elapsed - datetime.timedelta(days=1)
    assert abs(daily_change.total_seconds()) < 3 * 60


@pytest.mark.parametrize(
    "day", [datetime.date(2024, 12, 21), datetime.date(2024, 6, 21)]
)
def test_polar_night_and_day(day: datetime.date) -> None:
    """Test that no event is returned when the sun never crosses the horizon."""
    oslo = zoneinfo.ZoneInfo("Europe/Oslo")

    assert solar.sunrise(SVALBARD, day, oslo) is None
    assert solar.sunset(SVALBARD, day, oslo) is None


@pytest.mark.parametrize("longitude", range(-180, 181, 30))
@pytest.mark.parametrize("offset_hours", range(-12, 15))
def test_event_near_requested_day(longitude: int, offset_hours: int) -> None:
    """Test that extreme longitudes and offsets stay within a day of the date."""
    coordinate = models.GeoCoordinate(latitude=0, longitude=longitude)
    zone = datetime.timezone(datetime.timedelta(hours=offset_hours))
    day = datetime.date(2024, 6, 1)
    day_start = datetime.datetime.combine(day, datetime.time(0), tzinfo=zone)

    for is_sunrise in (True, False):
        event = solar.solar_event(coordinate, day, zone, is_sunrise=is_sunrise)

        assert event is not None
        assert event.utcoffset() == datetime.timedelta(hours=offset_hours)
        assert day_start - datetime.timedelta(days=1) <= event
        assert event < day_start + datetime.timedelta(days=2)


def test_next_sunrise_today() -> None:
    """Test that a sunrise later today is returned."""
    after = datetime.datetime(2024, 3, 20, 0, 0, tzinfo=UTC)

    result = solar.next_sunrise(EQUATOR, after, UTC)

    assert result == solar.sunrise(EQUATOR, datetime.date(2024, 3, 20), UTC)


@pytest.mark.parametrize("minutes_after_sunrise", [0, 1, 600])
def test_next_sunrise_tomorrow(minutes_after_sunrise: int) -> None:
    """Test that once today's sunrise has passed, tomorrow's is returned."""
    today = solar.sunrise(EQUATOR, datetime.date(2024, 3, 20), UTC)
    assert today is not None
    after = today + datetime.timedelta(minutes=minutes_after_sunrise)

    result = solar.next_sunrise(EQUATOR, after, UTC)

    assert result == solar.sunrise(EQUATOR, datetime.date(2024, 3, 21), UTC)
    assert result is not None and result > after


def test_next_sunrise_polar_night(caplog: pytest.LogCaptureFixture) -> None:
    """Test that no sunrise is found during the polar night."""
    after = datetime.datetime(2024, 12, 21, 12, 0, tzinfo=UTC)

    assert solar.next_sunrise(SVALBARD, after, UTC) is None
    assert "No sunrise" in caplog.text
