"""Logging helpers for respack.

The library only creates loggers; it never installs handlers on import.
Applications that want respack's records on stderr call configure_logging().
"""

import logging
import sys
from typing import IO, Optional

_LOGGER_NAME = "respack"
_FORMAT = "%(levelname)s %(name)s: %(message)s"

__all__ = [
    "get_logger",
    "configure_logging",
]


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


def configure_logging(verbosity: int = 0, stream: Optional[IO] = None) -> logging.Logger:
    """
    Send respack log records to a stream.

    Args:
        verbosity: 0 for INFO and above, 1 or more for DEBUG
        stream: Output stream (stderr if None)

    Returns:
        The package logger
    """
    logger = get_logger()
    logger.setLevel(logging.DEBUG if verbosity >= 1 else logging.INFO)

    for h in list(logger.handlers):
        logger.removeHandler(h)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    return logger
