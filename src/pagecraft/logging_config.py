"""Logging configuration for pagecraft.

Library modules log through ``get_logger(__name__)`` and stay silent until
the CLI calls ``setup_logging``. Console output is split in two: messages
below WARNING go to an info stream, warnings and errors go to stderr. The
CLI points the info stream at stderr when it writes the recipe to stdout.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

LOGGER_NAME = "pagecraft"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_CONSOLE_PREFIXES = {
    logging.DEBUG: "[debug] ",
    logging.INFO: "",
    logging.WARNING: "Warning: ",
    logging.ERROR: "Error: ",
}


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``pagecraft`` hierarchy.

    Accepts a module ``__name__`` (``pagecraft.store``) or a bare suffix
    (``store``).
    """
    if name == LOGGER_NAME or name.startswith(f"{LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


class ConsoleFormatter(logging.Formatter):
    """Plain messages for INFO, short level prefixes for everything else."""

    def format(self, record: logging.LogRecord) -> str:
        prefix = _CONSOLE_PREFIXES.get(record.levelno)
        if prefix is None:
            return super().format(record)
        return f"{prefix}{record.getMessage()}"


class InfoFilter(logging.Filter):
    """Pass records below WARNING only."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


def _console_handler(stream: TextIO, level: int) -> logging.StreamHandler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(ConsoleFormatter())
    return handler


def setup_logging(
    verbosity: int = 0,
    quiet: bool = False,
    log_file: Path | None = None,
    info_stream: TextIO | None = None,
) -> None:
    """Configure the ``pagecraft`` logger for CLI use.

    Replaces any handlers from a previous call.

    Args:
        verbosity: 0 or 1 shows INFO, 2 or more (-vv) adds DEBUG
        quiet: Show errors only on the console
        log_file: Also write every record, DEBUG included, to this file
        info_stream: Stream for records below WARNING (default stdout)
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG)

    if quiet:
        info_level = logging.ERROR
    elif verbosity >= 2:
        info_level = logging.DEBUG
    else:
        info_level = logging.INFO

    info_handler = _console_handler(info_stream or sys.stdout, info_level)
    info_handler.addFilter(InfoFilter())
    logger.addHandler(info_handler)
    logger.addHandler(_console_handler(sys.stderr, logging.WARNING))

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        logger.addHandler(file_handler)


def is_quiet_mode() -> bool:
    """True when the console info handler only lets errors through.

    The CLI skips the recipe summary in quiet mode.
    """
    for handler in logging.getLogger(LOGGER_NAME).handlers:
        if any(isinstance(f, InfoFilter) for f in handler.filters):
            return handler.level >= logging.ERROR
    return False
