"""Function to read stored clock parameters from a file."""

import pathlib
from typing import Optional, Union

import pydantic

from n24clock.core import config, exceptions, models
from n24clock.processing import sleep

logger = config.get_logger()


def load_parameters(
    file_name: Union[pathlib.Path, str] = config.DEFAULT_SETTINGS_PATH,
) -> Optional[models.ClockParameters]:
    """Read stored clock parameters.

    Loaded parameters are normalized, so records written before sleep preferences
    existed come back with the default wake offset and sleep duration.

    Args:
        file_name: The JSON settings file to read.

    Returns:
        The normalized clock parameters, or None if the file does not exist or
        does not hold a valid record.
    """
    path = pathlib.Path(file_name)
    if not path.exists():
        logger.debug("No stored clock parameters in %s.", path)
        return None

    try:
        parameters = models.ClockParameters.model_validate_json(path.read_bytes())
    except (pydantic.ValidationError, exceptions.InvalidParametersError) as e:
        logger.warning("Ignoring invalid clock parameters in %s: %s", path, e)
        return None

    logger.debug("Loaded clock parameters from %s.", path)
    return sleep.normalize(parameters)
