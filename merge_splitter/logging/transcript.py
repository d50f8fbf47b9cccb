from __future__ import annotations

import logging

from ..models.issue_record import IssueRecord
from .init import LEVEL_LABELS

"""Per-invocation transcript.

Each processing run owns one ProcessTranscript. Lines are kept in order with
the same labels the console formatter uses, so ProcessResult.logs reads the
same as the console output. Lines are mirrored to the given logger (nothing is
printed unless the caller configured handlers for it).
"""

__all__ = [
    "ProcessTranscript",
]


class ProcessTranscript:
    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._lines: list[str] = []
        self._logger = logger or logging.getLogger("merge_splitter.process")

    def _add(self, level: int, message: str) -> None:
        self._lines.append(f"{LEVEL_LABELS[level]} {message}")
        self._logger.log(level, message)

    def info(self, message: str) -> None:
        self._add(logging.INFO, message)

    def warn(self, message: str) -> None:
        self._add(logging.WARNING, message)

    def error(self, message: str) -> None:
        self._add(logging.ERROR, message)

    def issue(self, record: IssueRecord) -> None:
        self.warn(record.to_log_line())

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)
