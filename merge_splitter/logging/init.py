from __future__ import annotations

import logging
import sys
from typing import TextIO

"""Console logging with labeled prefixes.

Every line the tool prints carries one of the labels INFO|WARN|ERROR|SUMMARY so
that a calling shell can show them as-is; the per-run transcript
(merge_splitter.logging.transcript) uses the same labels.

Standard logging only; the issue JSON Lines file is handled separately in
merge_splitter.logging.issue_log.
"""

__all__ = [
    "LEVEL_LABELS",
    "LabeledFormatter",
    "SUMMARY_LEVEL",
    "get_logger",
    "log_summary",
    "reset_logging",
    "set_level",
    "setup_logging",
]

LOGGER_NAME = "merge_splitter"

# between INFO=20 and WARNING=30
SUMMARY_LEVEL = 25

LEVEL_LABELS = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "INFO",
    logging.WARNING: "WARN",
    logging.ERROR: "ERROR",
    logging.CRITICAL: "CRITICAL",
    SUMMARY_LEVEL: "SUMMARY",
}

_logger: logging.Logger | None = None


class LabeledFormatter(logging.Formatter):
    """`LABEL message`, one line per record.

    - INFO: progress of a run
    - WARN: non-fatal conditions (unsupported merge, zero quantity, text in a number column)
    - ERROR: fatal conditions ending a run
    - SUMMARY: one line per workbook with the figures
    """

    def format(self, record: logging.LogRecord) -> str:
        label = LEVEL_LABELS.get(record.levelno, record.levelname)
        return f"{label} {record.getMessage()}"


def setup_logging(level: int = logging.INFO, stream: TextIO | None = None) -> logging.Logger:
    """Attach the labeled console handler to the `merge_splitter` logger (idempotent).

    Child loggers (`merge_splitter.process`, `merge_splitter.services...`) reach
    the handler through propagation; the root logger is left alone.
    """
    global _logger
    if _logger is not None:
        return _logger

    logging.addLevelName(SUMMARY_LEVEL, "SUMMARY")
    logger = logging.getLogger(LOGGER_NAME)
    _detach_handlers(logger)

    handler = logging.StreamHandler(stream if stream is not None else sys.stdout)
    handler.setFormatter(LabeledFormatter())
    logger.addHandler(handler)
    logger.propagate = False

    _logger = logger
    set_level(level)
    return logger


def set_level(level: int) -> None:
    """Change the threshold of the logger and its handlers (e.g. for --debug)."""
    logger = get_logger()
    logger.setLevel(level)
    for handler in logger.handlers:
        handler.setLevel(level)


def get_logger() -> logging.Logger:
    if _logger is None:
        return setup_logging()
    return _logger


def log_summary(message: str) -> None:
    get_logger().log(SUMMARY_LEVEL, message)


def _detach_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)


def reset_logging() -> None:
    """Forget the configured logger and drop its handlers. Mainly for tests."""
    global _logger
    if _logger is not None:
        _detach_handlers(_logger)
    _logger = None
