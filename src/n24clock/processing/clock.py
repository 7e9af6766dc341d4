"""Map real-world instants onto a non-24-hour biological day and back."""

import datetime
import math

from n24clock.core import config, exceptions, models

logger = config.get_logger()


class BiologicalClock:
    """Derives biological time information from fixed clock parameters.

    Attributes:
        parameters: The clock parameters. Never mutated.
    """

    def __init__(self, parameters: models.ClockParameters) -> None:
        """Initialize the clock.

        Args:
            parameters: The clock parameters to evaluate.
        """
        self.parameters = parameters

    def state_at(self, instant: datetime.datetime) -> models.ClockState:
        """Find the biological day and offset of a real-world instant.

        Args:
            instant: The real-world instant. Naive datetimes are interpreted as UTC.

        Returns:
            The biological state at the instant, with the offset within
            [0, day_length).

        Raises:
            InvalidParametersError: If the day length is not positive.
        """
        day_length = self.parameters.day_length
        if not day_length > 0:
            raise exceptions.InvalidParametersError(
                f"Biological day length must be positive, got {day_length}."
            )

        elapsed = (
            models.as_utc(instant) - self.parameters.reference_start
        ).total_seconds()
        completed_days = math.floor(elapsed / day_length)
        offset = elapsed - completed_days * day_length
        day_index = self.parameters.reference_day_index + completed_days

        # Rounding at the boundary can leave the offset a hair outside the day.
        if offset < 0:
            offset += day_length
            day_index -= 1
        if offset >= day_length:
            offset -= day_length
            day_index += 1

        return models.ClockState(
            day_index=day_index, offset_within_day=offset, day_length=day_length
        )

    def next_occurrence(
        self, target_offset: float, after: datetime.datetime
    ) -> datetime.datetime:
        """Find the next real-world instant at which a biological offset recurs.

        Args:
            target_offset: The offset within the biological day, in seconds. Any
                value is accepted and wrapped into [0, day_length).
            after: The instant to search from.

        Returns:
            The first instant after `after` whose offset equals the target.
            A target equal to the current offset resolves to the next cycle.
        """
        target = self.normalized_offset(target_offset)
        state = self.state_at(after)

        if target > state.offset_within_day:
            delta = target - state.offset_within_day
        else:
            delta = (self.parameters.day_length - state.offset_within_day) + target

        after_utc = models.as_utc(after).astimezone(datetime.timezone.utc)
        return after_utc + datetime.timedelta(seconds=delta)

    def normalized_offset(self, raw_offset: float) -> float:
        """Wrap an offset into [0, day_length) using a floored modulo."""
        day_length = self.parameters.day_length
        if day_length <= 0:
            return 0.0
        wrapped = math.fmod(raw_offset, day_length)
        if wrapped < 0:
            wrapped += day_length
        return 0.0 if wrapped >= day_length else wrapped


def state_at(
    parameters: models.ClockParameters, instant: datetime.datetime
) -> models.ClockState:
    """Return the biological state of an instant for the given parameters."""
    return BiologicalClock(parameters).state_at(instant)


def next_occurrence(
    parameters: models.ClockParameters,
    target_offset: float,
    after: datetime.datetime,
) -> datetime.datetime:
    """Return the next instant at which the target offset recurs."""
    return BiologicalClock(parameters).next_occurrence(target_offset, after)
