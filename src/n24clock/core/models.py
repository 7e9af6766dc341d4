"""Internal data model."""

import datetime
import math
from dataclasses import dataclass
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from n24clock.core import config, exceptions

logger = config.get_logger()

SECONDS_PER_MINUTE = 60
SECONDS_PER_HOUR = 3600


def as_utc(instant: datetime.datetime) -> datetime.datetime:
    """Attach UTC to a naive datetime.

    Args:
        instant: The datetime to check. Aware datetimes are returned unchanged.

    Returns:
        A timezone aware datetime.
    """
    if instant.tzinfo is None or instant.utcoffset() is None:
        return instant.replace(tzinfo=datetime.timezone.utc)
    return instant


class ClockParameters(BaseModel):
    """The parameters describing a user's non-24-hour biological clock.

    Serialised (by alias) as the persisted settings record:
    `{dayLength, referenceStart, referenceDayIndex, preferredWakeOffset,
    preferredSleepDuration}`.

    Attributes:
        day_length: Length of one biological day, in seconds.
        reference_start: The real-world instant at biological offset 0 of the
            reference day. Naive datetimes are interpreted as UTC.
        reference_day_index: The label of the biological day that starts at
            reference_start.
        preferred_wake_offset: Offset within the biological day, in seconds, that
            is treated as wake time.
        preferred_sleep_duration: Preferred sleep duration, in seconds.
    """

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True
    )

    day_length: float
    reference_start: datetime.datetime
    reference_day_index: int = 0
    preferred_wake_offset: Optional[float] = None
    preferred_sleep_duration: Optional[float] = None

    @field_validator("day_length")
    @classmethod
    def validate_day_length(cls, v: float) -> float:
        """Validate that the day length is a positive, finite number of seconds.

        Args:
            cls: The class.
            v: The day length to validate.

        Returns:
            v: The day length if it is valid.

        Raises:
            InvalidParametersError: If the day length is not positive.
        """
        if not math.isfinite(v) or v <= 0:
            raise exceptions.InvalidParametersError(
                f"Biological day length must be positive, got {v}."
            )
        return v

    @field_validator("reference_start")
    @classmethod
    def validate_reference_start(cls, v: datetime.datetime) -> datetime.datetime:
        """Store the reference start in UTC. Naive values are read as UTC."""
        return as_utc(v).astimezone(datetime.timezone.utc)


@dataclass(frozen=True)
class OffsetComponents:
    """Hour, minute and second split of an offset within a biological day."""

    hours: int
    minutes: int
    seconds: int


class ClockState(BaseModel):
    """Snapshot of where an instant falls within the biological rhythm.

    Attributes:
        day_index: The biological day containing the instant.
        offset_within_day: Seconds since the start of that biological day, in
            [0, day_length).
        day_length: Length of the biological day, in seconds.
    """

    model_config = ConfigDict(frozen=True)

    day_index: int
    offset_within_day: float
    day_length: float

    @property
    def progress(self) -> float:
        """Progress through the current biological day, within [0, 1]."""
        if self.day_length <= 0:
            return 0.0
        return min(max(self.offset_within_day / self.day_length, 0.0), 1.0)

    @property
    def remaining_in_day(self) -> float:
        """Seconds until the next biological day begins."""
        return max(self.day_length - self.offset_within_day, 0.0)

    @property
    def offset_components(self) -> OffsetComponents:
        """The floored offset split into hours, minutes and seconds."""
        return split_offset(self.offset_within_day)

    @property
    def formatted_offset(self) -> str:
        """The offset as a HH:MM:SS string."""
        return format_offset(self.offset_within_day)


def split_offset(offset: float) -> OffsetComponents:
    """Split a non-negative offset, floored to whole seconds, into components."""
    total_seconds = int(math.floor(offset))
    return OffsetComponents(
        hours=total_seconds // SECONDS_PER_HOUR,
        minutes=(total_seconds % SECONDS_PER_HOUR) // SECONDS_PER_MINUTE,
        seconds=total_seconds % SECONDS_PER_MINUTE,
    )


def format_offset(offset: float) -> str:
    """Format a non-negative offset as HH:MM:SS. Hours may exceed 23."""
    components = split_offset(offset)
    return f"{components.hours:02d}:{components.minutes:02d}:{components.seconds:02d}"


class GeoCoordinate(BaseModel):
    """A point on the earth, in degrees. Longitude is positive East."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(ge=-90.0, le=90.0)
    longitude: float = Field(ge=-180.0, le=180.0)


class DayLengthInput(BaseModel):
    """Raw user input used to configure the biological clock.

    Components are deliberately unvalidated here; build_parameters() reports
    problems as InvalidInputError so that callers can re-prompt.
    """

    hours: int
    minutes: int
    seconds: int = 0
    reference_start: datetime.datetime
    reference_day_index: int = 0

    def build_parameters(self) -> ClockParameters:
        """Convert the input components into clock parameters.

        Returns:
            The clock parameters described by this input.

        Raises:
            InvalidInputError: If a component is negative or the components sum to
                zero.
        """
        if self.hours < 0 or self.minutes < 0 or self.seconds < 0:
            raise exceptions.InvalidInputError(
                exceptions.InputErrorReason.negative_component,
                "Day length components must not be negative.",
            )

        total_seconds = float(
            self.hours * SECONDS_PER_HOUR
            + self.minutes * SECONDS_PER_MINUTE
            + self.seconds
        )
        if total_seconds <= 0:
            raise exceptions.InvalidInputError(
                exceptions.InputErrorReason.zero_length_day,
                "Day length must be longer than zero seconds.",
            )

        logger.debug("Built day length of %s seconds from user input.", total_seconds)
        return ClockParameters(
            day_length=total_seconds,
            reference_start=self.reference_start,
            reference_day_index=self.reference_day_index,
        )


def parameters_from_day_length(
    day_length: float,
    reference_start: datetime.datetime,
    reference_day_index: int = 0,
) -> ClockParameters:
    """Build clock parameters from a numeric day length, e.g. from a slider.

    Args:
        day_length: Length of the biological day, in seconds.
        reference_start: The real-world instant at biological offset 0.
        reference_day_index: The label of the reference biological day.

    Returns:
        The clock parameters.

    Raises:
        InvalidInputError: If the day length is not positive.
    """
    if not day_length > 0:
        raise exceptions.InvalidInputError(
            exceptions.InputErrorReason.zero_length_day,
            "Day length must be longer than zero seconds.",
        )
    return ClockParameters(
        day_length=day_length,
        reference_start=reference_start,
        reference_day_index=reference_day_index,
    )
