"""Logging setup for the fortune service and tools."""

import logging
import sys

ROOT_LOGGER = "fortune"
HANDLER_NAME = "fortune-stderr"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a stream handler to the package logger and set its level.

    Safe to call more than once; the level is updated and no duplicate
    handler is added.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler.set_name(HANDLER_NAME)
        logger.addHandler(handler)
    logger.setLevel(level.upper())


def get_log_level() -> str:
    """Return the effective level name of the package logger."""
    return logging.getLevelName(logging.getLogger(ROOT_LOGGER).getEffectiveLevel())
