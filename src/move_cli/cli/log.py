"""Logging setup for the move CLI."""

from __future__ import annotations

import logging
from typing import TextIO

LOGGER_NAME = "move_cli"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def configure_logging(*, level: str, verbose: bool, stream: TextIO) -> logging.Logger:
    """Route ``move_cli`` log records to ``stream``.

    ``verbose`` (``-v``) forces DEBUG regardless of the configured level.
    Calling this again replaces the previously installed handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else getattr(logging, level.upper()))
    logger.propagate = False
    return logger
