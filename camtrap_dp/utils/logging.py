"""
Logger factory for the camtrap_dp package.

Console-only: the package is a library plus a few scripts, so log files are
left to the application that embeds it.
"""

import logging
import os
from typing import Optional

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


def level_from_name(name: Optional[str], default: int = logging.INFO) -> int:
    """Map a level name such as "debug" to its logging constant."""
    if not name:
        return default
    return _LEVELS.get(name.upper(), default)


def get_logger(name: str, level: Optional[str] = None) -> logging.Logger:
    """
    Return a logger with a single console handler.

    Level comes from `level`, else the CAMTRAP_LOG_LEVEL environment variable,
    else INFO. Idempotent: calling twice returns the same configured logger.
    """
    logger = logging.getLogger(name)
    if logger.handlers:  # already configured
        return logger

    log_level = level_from_name(level or os.getenv("CAMTRAP_LOG_LEVEL"))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.setLevel(log_level)

    logger.addHandler(handler)
    logger.setLevel(log_level)
    logger.propagate = False
    return logger
