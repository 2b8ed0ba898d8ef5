"""Logging for OutboundChecker.

One named logger for the whole package. Records go to stderr (stdout carries
the report and the whitelist prompt) and, optionally, to a rotating file::

    from outbound_checker.logger import logger
    logger.info("Crawling %s", url)
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "OutboundChecker"


class _StderrHandler(logging.StreamHandler):
    """Writes to whatever ``sys.stderr`` is at emit time."""

    def __init__(self) -> None:
        logging.Handler.__init__(self)

    @property
    def stream(self):
        return sys.stderr


def setup_logging(
    level: Union[int, str] = "INFO",
    log_file: Union[str, Path, None] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Replace the handlers of the package logger and apply *level*.

    A *log_file* is rotated at 5 MiB, keeping three backups.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    for old in lg.handlers:
        old.close()
    lg.handlers.clear()

    formatter = logging.Formatter(log_format)
    handlers: list[logging.Handler] = [_StderrHandler()]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(str(log_file), maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
        lg.addHandler(handler)

    lg.propagate = False
    return lg


logger: logging.Logger = setup_logging()

__all__ = ["logger", "setup_logging", "LOGGER_NAME", "DEFAULT_FORMAT"]
