"""Logging utilities for classsplit commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

_LOGGER_NAME = "classsplit"

ProgressSink = Callable[[str], None]


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the classsplit hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def progress_sink(logger: logging.Logger, level: int = logging.INFO) -> ProgressSink:
    """Adapt a logger into the fire-and-forget progress callable used by the orchestrator."""

    def _report(message: str) -> None:
        logger.log(level, message)

    return _report


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Configure the classsplit logger with console output and optional file sink.

    ``quiet`` wins over ``verbose`` and limits console output to warnings,
    which keeps recoverable extraction problems visible while hiding progress.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if log_file is not None else level)
    logger.propagate = False

    # Reset handlers so repeated CLI invocations in one process do not duplicate output.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(logging.Formatter("[classsplit] %(levelname)s %(message)s"))
    logger.addHandler(stream_handler)

    if log_file is not None:
        # The file sink always records the full per-site trace.
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["ProgressSink", "configure_logging", "get_logger", "progress_sink"]
