"""Test the function for reading stored clock parameters."""

import datetime
import json
import pathlib

import pytest

from n24clock.core import models
from n24clock.io.readers import readers
from n24clock.processing import sleep


def test_load_parameters_missing_file(settings_path: pathlib.Path) -> None:
    """Test that a missing settings file reads as no parameters."""
    assert readers.load_parameters(settings_path) is None


def test_load_parameters_normalized(
    stored_parameters: models.ClockParameters, settings_path: pathlib.Path
) -> None:
    """Test that stored parameters come back normalized."""
    parameters = readers.load_parameters(settings_path)

    assert parameters == sleep.normalize(stored_parameters)
    assert parameters is not None
    assert parameters.reference_day_index == 3


def test_load_parameters_string_path(
    stored_parameters: models.ClockParameters, settings_path: pathlib.Path
) -> None:
    """Test reading from a path given as a string."""
    assert readers.load_parameters(str(settings_path)) == sleep.normalize(
        stored_parameters
    )


def test_load_parameters_record(tmp_path: pathlib.Path) -> None:
    """Test reading a complete camelCase record."""
    settings = tmp_path / "parameters.json"
    settings.write_text(
        json.dumps(
            {
                "dayLength": 89280,
                "referenceStart": "2024-05-01T03:30:00Z",
                "referenceDayIndex": 12,
                "preferredWakeOffset": 25200,
                "preferredSleepDuration": 28800,
            }
        )
    )

    parameters = readers.load_parameters(settings)

    assert parameters == models.ClockParameters(
        day_length=89280,
        reference_start=datetime.datetime(
            2024, 5, 1, 3, 30, tzinfo=datetime.timezone.utc
        ),
        reference_day_index=12,
        preferred_wake_offset=25200,
        preferred_sleep_duration=28800,
    )


def test_load_parameters_legacy_record(tmp_path: pathlib.Path) -> None:
    """Test that records without sleep preferences get the defaults."""
    settings = tmp_path / "parameters.json"
    settings.write_text(
        json.dumps({"dayLength": 90000, "referenceStart": "2024-05-01T03:30:00Z"})
    )

    parameters = readers.load_parameters(settings)

    assert parameters is not None
    assert parameters.reference_day_index == 0
    assert parameters.preferred_wake_offset == sleep.DEFAULT_WAKE_OFFSET
    assert parameters.preferred_sleep_duration == sleep.DEFAULT_SLEEP_DURATION


def test_load_parameters_unix_timestamp(tmp_path: pathlib.Path) -> None:
    """Test that a numeric reference start is read as a UTC unix timestamp."""
    settings = tmp_path / "parameters.json"
    settings.write_text(json.dumps({"dayLength": 90000, "referenceStart": 1714629600}))

    parameters = readers.load_parameters(settings)

    assert parameters is not None
    assert parameters.reference_start == datetime.datetime(
        2024, 5, 2, 6, 0, tzinfo=datetime.timezone.utc
    )


@pytest.mark.parametrize(
    "content",
    [
        b"not json",
        json.dumps({"dayLength": 0, "referenceStart": "2024-05-01T03:30:00Z"}).encode(),
        json.dumps({"dayLength": 90000}).encode(),
        b"\xff\xfe\x00garbage",
    ],
)
def test_load_parameters_invalid(
    content: bytes, tmp_path: pathlib.Path, caplog: pytest.LogCaptureFixture
) -> None:
    """Test that an invalid or undecodable record is ignored with a warning."""
    settings = tmp_path / "parameters.json"
    settings.write_bytes(content)

    assert readers.load_parameters(settings) is None
    assert "Ignoring invalid clock parameters" in caplog.text
