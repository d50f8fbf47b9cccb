from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from ..models.issue_record import IssueRecord

"""Issue log buffering (JSON Lines).

- Fixed key set per line (see IssueRecord.to_json_line)
- File path decided on first access: explicit path, or
  `logs/issues-YYYYMMDD-HHMMSS.log` (UTC) under the current directory
- Records are buffered per file and appended on flush()
"""

__all__ = [
    "IssueLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class IssueLogBuffer:
    """In-memory buffer of (file name, IssueRecord). Not thread safe (serial runs)."""

    def __init__(self, path: Path | None = None) -> None:
        self._records: list[tuple[str, IssueRecord]] = []
        self._file_path: Path | None = path

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = LOGS_DIR / f"issues-{stamp}.log"
        return self._file_path

    def extend(self, file: str, records: list[IssueRecord]) -> None:
        self._records.extend((file, r) for r in records)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path:
        fp = self.file_path
        if not self._records:
            return fp
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for file, record in self._records:
                f.write(record.to_json_line(file) + "\n")
        self._records.clear()
        return fp
