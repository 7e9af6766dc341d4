"""Module containing the output classes for writing data to files."""

import datetime
import json
import pathlib
from typing import Any, Dict, Optional, Union

import polars as pl
import pydantic

from n24clock.core import config, exceptions, models

VALID_FILE_TYPES = (".csv", ".parquet")

logger = config.get_logger()


def save_parameters(
    parameters: models.ClockParameters,
    file_name: Union[pathlib.Path, str] = config.DEFAULT_SETTINGS_PATH,
) -> None:
    """Store clock parameters as a JSON record.

    The parameters are written as given; normalize them first if needed.

    Args:
        parameters: The clock parameters to store.
        file_name: The JSON settings file to write. Parent directories are
            created.
    """
    path = pathlib.Path(file_name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        parameters.model_dump_json(by_alias=True, exclude_none=True, indent=4)
    )
    logger.debug("Clock parameters saved in: %s", path)


def clear_parameters(
    file_name: Union[pathlib.Path, str] = config.DEFAULT_SETTINGS_PATH,
) -> None:
    """Remove stored clock parameters. Missing files are ignored."""
    path = pathlib.Path(file_name)
    path.unlink(missing_ok=True)
    logger.debug("Clock parameters cleared from: %s", path)


class TimelineResults(pydantic.BaseModel):
    """Biological clock states sampled over a period of time."""

    states: pl.DataFrame
    processing_params: Optional[Dict[str, Any]] = None

    model_config = pydantic.ConfigDict(arbitrary_types_allowed=True)

    def save_results(self, output: pathlib.Path) -> None:
        """Save the sampled states as a csv or parquet file.

        Args:
            output: The path and file name of the data to be saved. as either a csv or
                parquet files.
        """
        logger.debug("Saving results.")
        self.validate_output(output=output)
        output.parent.mkdir(parents=True, exist_ok=True)

        if output.suffix == ".csv":
            self.states.write_csv(output, separator=",")
        elif output.suffix == ".parquet":
            self.states.write_parquet(output)

        logger.info("Results saved in: %s", output)

        if self.processing_params:
            self.save_config_as_json(output)

    def save_config_as_json(self, output_path: pathlib.Path) -> None:
        """Save processing parameters as a JSON configuration file.

        Args:
            output_path: Path where the data file was saved. The JSON file will use
                the same name but with .json extension.
        """
        if not self.processing_params:
            logger.warning("No processing parameters to save as JSON")
            return

        config_data = {
            "processing_time": datetime.datetime.now().isoformat(timespec="seconds"),
            "n24clock_version": config.get_version(),
            "processing_parameters": self.processing_params,
        }

        config_path = output_path.with_suffix(".json")

        with open(config_path, "w") as f:
            json.dump(config_data, f, indent=4, default=str)

        logger.debug("Configuration saved in: %s", config_path)

    @classmethod
    def validate_output(cls, output: pathlib.Path) -> None:
        """Validates that the output path is a valid format.

        Args:
            output: the name of the file to be saved, and the directory it will
                be saved in. Must be a .csv or .parquet file.

        Raises:
            InvalidFileTypeError:If the output file path ends with any extension other
                    than csv or parquet.
        """
        if output.suffix not in VALID_FILE_TYPES:
            raise exceptions.InvalidFileTypeError(
                f"The extension: {output.suffix} is not supported."
                "Please save the file as .csv or .parquet",
            )
