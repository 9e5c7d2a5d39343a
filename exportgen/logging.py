"""Logger hierarchy and handler setup for exportgen runs."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "exportgen"
_CONSOLE_FORMAT = "[exportgen] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return `exportgen.<name>`, or the package logger when no name is given."""
    return logging.getLogger(f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME)


def configure_logging(
    *, verbose: bool = False, log_file: Path | str | None = None
) -> logging.Logger:
    """Send exportgen records to stderr and, optionally, to a log file.

    The console shows INFO and above (DEBUG with `verbose`). A log file
    always records DEBUG, so the per-target detail of a quiet run can still
    be inspected afterwards.
    """
    console_level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.propagate = False
    close_handlers(logger)

    logger.addHandler(_with_format(logging.StreamHandler(), console_level, _CONSOLE_FORMAT))
    if log_file is None:
        logger.setLevel(console_level)
        return logger

    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logger.addHandler(
        _with_format(logging.FileHandler(log_path, encoding="utf-8"), logging.DEBUG, _FILE_FORMAT)
    )
    logger.setLevel(logging.DEBUG)
    return logger


def close_handlers(logger: logging.Logger) -> None:
    """Detach and close every handler, so repeated runs never duplicate output."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def _with_format(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


__all__ = ["close_handlers", "configure_logging", "get_logger"]
