"""Fixtures used by pytest."""

import datetime
import pathlib

import pytest
from typer import testing

from n24clock.core import models
from n24clock.io.writers import writers


@pytest.fixture
def reference_start() -> datetime.datetime:
    """Start of the reference biological day."""
    return datetime.datetime(2024, 5, 2, 6, 0, tzinfo=datetime.timezone.utc)


@pytest.fixture
def parameters(reference_start: datetime.datetime) -> models.ClockParameters:
    """A 25 hour biological day starting on day 3."""
    return models.ClockParameters(
        day_length=25 * 3600, reference_start=reference_start, reference_day_index=3
    )


@pytest.fixture
def settings_path(tmp_path: pathlib.Path) -> pathlib.Path:
    """Location of a settings file that does not exist yet."""
    return tmp_path / "settings" / "parameters.json"


@pytest.fixture
def stored_parameters(
    parameters: models.ClockParameters, settings_path: pathlib.Path
) -> models.ClockParameters:
    """The 25 hour parameters, written to settings_path."""
    writers.save_parameters(parameters, settings_path)
    return parameters


@pytest.fixture
def create_typer_cli_runner() -> testing.CliRunner:
    """Create a Typer CLI runner."""
    return testing.CliRunner()
