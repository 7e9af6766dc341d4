"""Cycle length conversions, onboarding and phase adjustment.

A non-24-hour rhythm that drifts all the way around the 24-hour clock in `n`
days has a biological day of `24 + 24 / n` hours. These helpers convert between
the two descriptions, build the initial clock parameters from what a user can
easily answer during onboarding, and shift the phase of an existing clock.
"""

import datetime

from n24clock.core import config, exceptions, models
from n24clock.processing import sleep

logger = config.get_logger()

CYCLE_RANGE = (10, 60)
PHASE_STEP_MINUTES = sleep.MINUTE_STEP

_HOURS_PER_DAY = 24.0


def _clamp_cycle_days(days: int) -> int:
    return min(max(days, CYCLE_RANGE[0]), CYCLE_RANGE[1])


def day_length_for_cycle(days: int) -> float:
    """Compute the biological day length of a rhythm that cycles in `days` days.

    Args:
        days: Number of real days for the rhythm to drift a full 24 hours. Values
            outside CYCLE_RANGE are clamped into it.

    Returns:
        The biological day length, in seconds.

    Raises:
        InvalidInputError: If days is 1 or less.
    """
    if days <= 1:
        raise exceptions.InvalidInputError(
            exceptions.InputErrorReason.invalid_cycle_length,
            f"Cycle length must be more than 1 day, got {days}.",
        )
    clamped_days = _clamp_cycle_days(days)
    if clamped_days != days:
        logger.debug("Cycle length %s clamped to %s days.", days, clamped_days)
    hours = _HOURS_PER_DAY + _HOURS_PER_DAY / clamped_days
    return hours * models.SECONDS_PER_HOUR


def estimated_cycle_days(day_length: float) -> int:
    """Estimate the cycle length in days of a biological day length.

    Args:
        day_length: The biological day length, in seconds.

    Returns:
        The number of days needed to drift a full 24 hours, clamped into
        CYCLE_RANGE.
    """
    hours = max(day_length / models.SECONDS_PER_HOUR, 24.01)
    drift = hours - _HOURS_PER_DAY
    return _clamp_cycle_days(round(_HOURS_PER_DAY / drift))


def daily_drift_hours(day_length: float) -> float:
    """Hours the rhythm is delayed each real day. Never negative."""
    return max(day_length / models.SECONDS_PER_HOUR - _HOURS_PER_DAY, 0.0)


def describe_day_length(day_length: float) -> str:
    """Describe a day length and its daily drift for display.

    Args:
        day_length: The biological day length, in seconds.

    Returns:
        A description such as "≈ 24.80 h | drifts ~48 min per day".
    """
    hours = day_length / models.SECONDS_PER_HOUR
    drift_hours = daily_drift_hours(day_length)
    if drift_hours >= 1:
        return f"≈ {hours:.2f} h | drifts ~{drift_hours:.1f} h per day"
    if drift_hours > 0:
        return f"≈ {hours:.2f} h | drifts ~{drift_hours * 60:.0f} min per day"
    return f"≈ {hours:.2f} h"


def onboarding_parameters(
    cycle_days: int,
    yesterday_wake: datetime.datetime,
    preferred_wake_hour: int = 6,
) -> models.ClockParameters:
    """Build the initial clock parameters from the onboarding answers.

    The biological clock is anchored so that yesterday's real wake-up happened at
    the preferred biological wake hour.

    Args:
        cycle_days: Days the rhythm takes to drift a full 24 hours.
        yesterday_wake: When the user woke up yesterday.
        preferred_wake_hour: The biological hour the user wants to read as their
            wake-up time.

    Returns:
        Normalized clock parameters for biological day 0.

    Raises:
        InvalidInputError: If the cycle length is too short or the wake hour is
            negative.
    """
    if preferred_wake_hour < 0:
        raise exceptions.InvalidInputError(
            exceptions.InputErrorReason.negative_component,
            f"Preferred wake hour must not be negative, got {preferred_wake_hour}.",
        )

    day_length = day_length_for_cycle(cycle_days)
    wake_offset = float(preferred_wake_hour * models.SECONDS_PER_HOUR)
    reference_start = models.as_utc(yesterday_wake).astimezone(
        datetime.timezone.utc
    ) - datetime.timedelta(seconds=wake_offset)
    logger.debug(
        "Onboarding: day length %s s, reference start %s.",
        day_length,
        reference_start,
    )
    return sleep.normalize(
        models.ClockParameters(
            day_length=day_length,
            reference_start=reference_start,
            reference_day_index=0,
            preferred_wake_offset=wake_offset,
        )
    )


def adjust_phase(
    parameters: models.ClockParameters, delta_seconds: float
) -> models.ClockParameters:
    """Shift the phase of the biological clock.

    Moving the reference start forward subtracts the same amount from every
    computed offset.

    Args:
        parameters: The clock parameters to adjust.
        delta_seconds: The shift, in seconds. Positive values delay the rhythm,
            negative values advance it.

    Returns:
        A copy of the parameters with the shifted reference start.
    """
    if delta_seconds == 0:
        return parameters
    reference_start = parameters.reference_start + datetime.timedelta(
        seconds=delta_seconds
    )
    logger.debug("Phase adjusted by %s s to %s.", delta_seconds, reference_start)
    return parameters.model_copy(update={"reference_start": reference_start})


def adjust_phase_steps(
    parameters: models.ClockParameters, steps: int
) -> models.ClockParameters:
    """Shift the phase by a number of PHASE_STEP_MINUTES steps."""
    return adjust_phase(
        parameters, float(steps * PHASE_STEP_MINUTES * models.SECONDS_PER_MINUTE)
    )
