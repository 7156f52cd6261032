"""
Logging helpers.

All loggers live under the ``forgesdk`` namespace so applications can tune
the SDK's verbosity without touching their own handlers.
"""

import logging
import sys

ROOT_LOGGER_NAME = "forgesdk"

_LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under ``forgesdk``."""
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the SDK root logger with a single stderr handler.

    Safe to call more than once; the handler is replaced, not duplicated.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
