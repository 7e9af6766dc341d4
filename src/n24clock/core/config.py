"""Configuration module for n24clock."""

import logging
import pathlib
from importlib import metadata

DEFAULT_SETTINGS_PATH = pathlib.Path.home() / ".n24clock" / "parameters.json"


def get_version() -> str:
    """Return n24clock version."""
    try:
        return metadata.version("n24clock")
    except metadata.PackageNotFoundError:
        return "Version unknown"


def get_logger() -> logging.Logger:
    """Gets the n24clock logger."""
    logger = logging.getLogger("n24clock")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)s - %(funcName)s - %(message)s",  # noqa: E501
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
