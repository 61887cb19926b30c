"""File logging setup. stderr is unusable while the alternate screen is active."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

_LOGGER_NAME = "celltui"

DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(threadName)s %(name)s: %(message)s"


def get_logger() -> logging.Logger:
    return logging.getLogger(_LOGGER_NAME)


def configure_logging(path: Union[str, Path], level: Union[int, str] = logging.INFO) -> logging.Logger:
    """
    Send the package's log records to a file.

    Calling again with the same path is a no-op; a different path replaces
    the previous file handler.
    """
    logger = get_logger()
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"unknown log level: {level!r}")
        level = resolved

    path = Path(path).expanduser()
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            if handler.baseFilename == os.path.abspath(path):
                logger.setLevel(level)
                return logger
            logger.removeHandler(handler)
            handler.close()

    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.info("logging configured (level=%s)", logging.getLevelName(level))
    return logger
