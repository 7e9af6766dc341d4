"""Test the custom exceptions."""

import pytest

from n24clock.core import exceptions


def test_logged_exception_logs_message(caplog: pytest.LogCaptureFixture) -> None:
    """Test that raising a logged exception writes its message to the log."""
    with pytest.raises(exceptions.SettingsNotFoundError):
        raise exceptions.SettingsNotFoundError("Nothing stored here.")

    assert "Nothing stored here." in caplog.text


def test_invalid_input_error_reason() -> None:
    """Test that the input error exposes the broken rule."""
    error = exceptions.InvalidInputError(
        exceptions.InputErrorReason.zero_length_day, "Too short."
    )

    assert error.reason == exceptions.InputErrorReason.zero_length_day
    assert str(error) == "Too short."
