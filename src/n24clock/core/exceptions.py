"""Custom exceptions for n24clock."""

from enum import Enum

from n24clock.core import config

logger = config.get_logger()


class LoggedException(Exception):
    """Base class that automatically logs messages."""

    def __init__(self, message: str) -> None:
        """Initialize a new instance of the LoggedException class.

        Args:
            message: The message to display.
        """
        logger.exception(message)
        super().__init__(message)


class InputErrorReason(str, Enum):
    """Reasons a piece of raw user input was rejected."""

    negative_component = "negative_component"
    zero_length_day = "zero_length_day"
    invalid_cycle_length = "invalid_cycle_length"


class InvalidParametersError(LoggedException):
    """Clock parameters are malformed, e.g. a non-positive day length."""

    pass


class InvalidInputError(LoggedException):
    """Raw user input could not be turned into clock parameters."""

    def __init__(self, reason: InputErrorReason, message: str) -> None:
        """Initialize a new instance of the InvalidInputError class.

        Args:
            reason: Which validation rule the input broke.
            message: The message to display.
        """
        self.reason = reason
        super().__init__(message)


class InvalidFileTypeError(LoggedException):
    """n24clock did not expect this file extension."""

    pass


class SettingsNotFoundError(LoggedException):
    """No stored clock parameters were found."""

    pass
