"""Logging setup for blockinfile runs."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "blockinfile"
_CONSOLE_FORMAT = "[blockinfile] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def get_logger(component: str | None = None) -> logging.Logger:
    """Return the logger for one blockinfile component, e.g. ``resolver``."""
    return logging.getLogger(f"{_LOGGER_NAME}.{component}" if component else _LOGGER_NAME)


def configure_logging(
    *, verbose: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send blockinfile records to stderr and, when given, to ``log_file``.

    The console shows INFO (DEBUG with ``verbose``). The log file always
    receives the full DEBUG trace, so a failed run on a managed host can be
    inspected afterwards without re-running it verbosely.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else console_level)
    logger.propagate = False
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler()
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(_CONSOLE_FORMAT))
    logger.addHandler(console)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(logging.DEBUG)
        sink.setFormatter(logging.Formatter(_FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(sink)

    return logger


__all__ = ["configure_logging", "get_logger"]
