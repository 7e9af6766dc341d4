"""Test the location authorization state."""

import datetime

import pydantic
import pytest

from n24clock.core import models
from n24clock.processing import location, solar

UTC = datetime.timezone.utc
COORDINATE = models.GeoCoordinate(latitude=52.52, longitude=13.405)
OTHER_COORDINATE = models.GeoCoordinate(latitude=48.85, longitude=2.35)


@pytest.mark.parametrize(
    "state, expected",
    [
        (location.NotDetermined(), None),
        (location.Denied(), None),
        (location.Authorized(), None),
        (location.Authorized(last_known=COORDINATE), COORDINATE),
        (location.LocationAvailable(coordinate=COORDINATE), COORDINATE),
        (location.LocationFailed(error="timeout"), None),
        (location.LocationFailed(error="timeout", last_known=COORDINATE), COORDINATE),
    ],
)
def test_coordinate_of(
    state: location.LocationState, expected: models.GeoCoordinate
) -> None:
    """Test which states expose a known coordinate."""
    assert location.coordinate_of(state) == expected


def test_authorization_granted() -> None:
    """Test granting access before any fix arrived."""
    state = location.on_authorization_changed(location.NotDetermined(), True)

    assert state == location.Authorized(last_known=None)


@pytest.mark.parametrize(
    "state",
    [
        location.NotDetermined(),
        location.Authorized(last_known=COORDINATE),
        location.LocationAvailable(coordinate=COORDINATE),
    ],
)
def test_authorization_revoked(state: location.LocationState) -> None:
    """Test that revoking access always ends in Denied."""
    assert location.on_authorization_changed(state, False) == location.Denied()


def test_authorization_granted_keeps_available_location() -> None:
    """Test that a repeated grant keeps the current fix."""
    available = location.LocationAvailable(coordinate=COORDINATE)

    assert location.on_authorization_changed(available, True) is available


def test_authorization_regranted_after_failure() -> None:
    """Test that the last known coordinate survives a new grant."""
    failed = location.LocationFailed(error="timeout", last_known=COORDINATE)

    state = location.on_authorization_changed(failed, True)

    assert state == location.Authorized(last_known=COORDINATE)


@pytest.mark.parametrize(
    "state",
    [
        location.Authorized(),
        location.LocationAvailable(coordinate=COORDINATE),
        location.LocationFailed(error="timeout"),
    ],
)
def test_location_update(state: location.LocationState) -> None:
    """Test that a fix makes the location available once authorized."""
    result = location.on_location_update(state, OTHER_COORDINATE)

    assert result == location.LocationAvailable(coordinate=OTHER_COORDINATE)


@pytest.mark.parametrize("state", [location.NotDetermined(), location.Denied()])
def test_location_update_ignored(state: location.LocationState) -> None:
    """Test that fixes are ignored without authorization."""
    assert location.on_location_update(state, COORDINATE) is state


def test_location_failed_keeps_last_known(caplog: pytest.LogCaptureFixture) -> None:
    """Test that a failure remembers the previous fix."""
    available = location.LocationAvailable(coordinate=COORDINATE)

    state = location.on_location_failed(available, "timeout")

    assert state == location.LocationFailed(error="timeout", last_known=COORDINATE)
    assert location.coordinate_of(state) == COORDINATE
    assert "Location request failed: timeout" in caplog.text


def test_location_failed_ignored_when_denied() -> None:
    """Test that failures are ignored without authorization."""
    denied = location.Denied()

    assert location.on_location_failed(denied, "timeout") is denied


def test_location_state_discriminator() -> None:
    """Test that stored states are parsed into the right variant."""
    adapter = pydantic.TypeAdapter(location.LocationState)

    state = adapter.validate_python(
        {"status": "available", "coordinate": {"latitude": 1, "longitude": 2}}
    )

    assert isinstance(state, location.LocationAvailable)
    assert state.coordinate == models.GeoCoordinate(latitude=1, longitude=2)


def test_next_sunrise_for_unknown_location() -> None:
    """Test that no sunrise is computed without a coordinate."""
    after = datetime.datetime(2024, 6, 21, 12, tzinfo=UTC)

    assert location.next_sunrise_for(location.Denied(), after, UTC) is None


def test_next_sunrise_for_last_known() -> None:
    """Test that the last known coordinate is used for the sunrise."""
    after = datetime.datetime(2024, 6, 21, 12, tzinfo=UTC)
    failed = location.LocationFailed(error="timeout", last_known=COORDINATE)

    result = location.next_sunrise_for(failed, after, UTC)

    assert result is not None
    assert result == solar.next_sunrise(COORDINATE, after, UTC)
