from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from enum import Enum

"""IssueRecord model for non-fatal processing conditions.

The engine keeps going when it hits one of these; each occurrence becomes an
IssueRecord which is rendered into the processing transcript and can be
flushed as JSON Lines (see merge_splitter.logging.issue_log).

row / column are 1-based. Use -1 when the condition is not tied to a single
cell (e.g. a whole merged region).
"""

__all__ = [
    "IssueKind",
    "IssueRecord",
]


class IssueKind(str, Enum):
    UNSUPPORTED_MERGE_SHAPE = "UNSUPPORTED_MERGE_SHAPE"
    DIVISION_BY_ZERO = "DIVISION_BY_ZERO"
    NON_NUMERIC_CELL = "NON_NUMERIC_CELL"


@dataclass(frozen=True)
class IssueRecord:
    """Structured record of one non-fatal condition.

    Attributes:
        kind: Issue classification (UPPER_SNAKE)
        message: Human readable description
        sheet: Sheet title the issue was found on
        row: Row number (1-based) or -1
        column: Column number (1-based) or -1
        ref: A1 reference of the cell or region involved
    """
    kind: IssueKind
    message: str
    sheet: str = ""
    row: int = -1
    column: int = -1
    ref: str = ""

    def to_log_line(self) -> str:
        where = f" {self.ref}" if self.ref else ""
        return f"{self.kind.value}{where}: {self.message}"

    def to_json_line(self, file: str = "") -> str:
        """Serialize to one JSON line (fixed key set)."""
        data = asdict(self)
        data["kind"] = self.kind.value
        data["file"] = file
        data["timestamp"] = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return json.dumps(data, ensure_ascii=False)
