"""Location authorization state, as seen by the dashboard.

The platform's location service is modelled as a tagged variant that moves
through: not determined -> authorized or denied -> location available or failed.
Transitions are pure functions; nothing in n24clock ever requests a location.
"""

import datetime
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from n24clock.core import config, models
from n24clock.processing import solar

logger = config.get_logger()


class NotDetermined(BaseModel):
    """The user has not been asked for location access yet."""

    model_config = ConfigDict(frozen=True)

    status: Literal["not_determined"] = "not_determined"


class Denied(BaseModel):
    """The user refused location access."""

    model_config = ConfigDict(frozen=True)

    status: Literal["denied"] = "denied"


class Authorized(BaseModel):
    """Location access was granted but no fix has arrived yet."""

    model_config = ConfigDict(frozen=True)

    status: Literal["authorized"] = "authorized"
    last_known: Optional[models.GeoCoordinate] = None


class LocationAvailable(BaseModel):
    """A location fix is available."""

    model_config = ConfigDict(frozen=True)

    status: Literal["available"] = "available"
    coordinate: models.GeoCoordinate


class LocationFailed(BaseModel):
    """The latest location request failed. A previous fix may still be known."""

    model_config = ConfigDict(frozen=True)

    status: Literal["failed"] = "failed"
    error: str
    last_known: Optional[models.GeoCoordinate] = None


LocationState = Annotated[
    Union[NotDetermined, Denied, Authorized, LocationAvailable, LocationFailed],
    Field(discriminator="status"),
]


def coordinate_of(state: LocationState) -> Optional[models.GeoCoordinate]:
    """Return the most recent known coordinate of a location state, if any."""
    if isinstance(state, LocationAvailable):
        return state.coordinate
    if isinstance(state, (Authorized, LocationFailed)):
        return state.last_known
    return None


def on_authorization_changed(state: LocationState, authorized: bool) -> LocationState:
    """Apply a change of the user's authorization decision.

    Args:
        state: The current state.
        authorized: Whether location access is now granted.

    Returns:
        Denied when access was revoked. When access is granted, an already
        available location is kept, otherwise the state becomes Authorized and
        keeps any previously known coordinate.
    """
    if not authorized:
        return Denied()
    if isinstance(state, LocationAvailable):
        return state
    return Authorized(last_known=coordinate_of(state))


def on_location_update(
    state: LocationState, coordinate: models.GeoCoordinate
) -> LocationState:
    """Apply a new location fix. Fixes arriving while denied are ignored."""
    if isinstance(state, (NotDetermined, Denied)):
        logger.debug("Ignoring location update while %s.", state.status)
        return state
    return LocationAvailable(coordinate=coordinate)


def on_location_failed(state: LocationState, error: str) -> LocationState:
    """Record a failed location request, keeping the last known coordinate."""
    if isinstance(state, (NotDetermined, Denied)):
        return state
    logger.warning("Location request failed: %s", error)
    return LocationFailed(error=error, last_known=coordinate_of(state))


def next_sunrise_for(
    state: LocationState,
    after: datetime.datetime,
    time_zone: datetime.tzinfo,
) -> Optional[datetime.datetime]:
    """Find the next sunrise at the last known location.

    Args:
        state: The location state.
        after: The instant to search from.
        time_zone: The time zone that defines calendar days.

    Returns:
        The next sunrise, or None when no coordinate is known or the sun does not
        rise.
    """
    coordinate = coordinate_of(state)
    if coordinate is None:
        return None
    return solar.next_sunrise(coordinate, after, time_zone)
