from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console output of a report run.

A run prints, in order: where the project CSV is loaded from, how many raw
rows it held, how many survived cleaning and why the rest were rejected
(INFO), any malformed CSV lines that were skipped (WARN), one ``Saved``
line per report artifact (INFO) and a single closing ``SUMMARY`` line.
Fatal config or processing failures come out as ``ERROR`` before exit 1.

Modules log through ``logging.getLogger(__name__)``; everything under the
``flood_reports`` namespace ends up on the one stdout handler set up here.
"""

__all__ = [
    "setup_logging",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_debug",
]

LOGGER_NAME = "flood_reports"

# SUMMARY は INFO(20) と WARNING(30) の間
SUMMARY_LEVEL = 25

_RUN_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
    SUMMARY_LEVEL: "SUMMARY",
}

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """Render a record as ``<LABEL> <message>``; no timestamp, no logger name."""

    LEVEL_LABELS = _RUN_LABELS

    def format(self, record: logging.LogRecord) -> str:
        label = self.LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def _console_handler(stream: TextIO) -> logging.Handler:
    handler = logging.StreamHandler(stream)
    handler.setLevel(logging.INFO)
    handler.setFormatter(LabeledFormatter())
    return handler


def setup_logging(stream: TextIO | None = None) -> logging.Logger:
    """Attach the run's console handler to the ``flood_reports`` logger.

    Calling it again returns the logger already configured; after
    ``reset_logging()`` the handler is rebuilt against the current
    ``sys.stdout`` (or ``stream``).
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.INFO)
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(_console_handler(stream or sys.stdout))
    # root に流さない (二重出力防止)
    logger.propagate = False

    _logger = logger
    return logger


def get_logger() -> logging.Logger:
    return _logger if _logger is not None else setup_logging()


def set_debug(logger: logging.Logger) -> None:
    """``--debug``: also print the per-row rejection lines."""
    logger.setLevel(logging.DEBUG)
    for h in logger.handlers:
        h.setLevel(logging.DEBUG)


def log_summary(message: str) -> None:
    """Emit the closing ``SUMMARY rows=... elapsed_sec=...`` line.

    ``message`` is the text after the label.
    """
    get_logger().log(SUMMARY_LEVEL, message)


def reset_logging() -> None:
    """Forget the configured logger so the next setup starts fresh (tests)."""
    global _logger
    _logger = None
