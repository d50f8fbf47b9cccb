from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .issue_record import IssueRecord
from .merge_layout import MergedRange
from .sheet_grid import SheetGrid

"""Result models for one workbook transformation.

Redistribution is what the engine hands to the writer; ProcessResult is what
the caller gets back (and may show verbatim in a log panel).
"""

__all__ = [
    "ProcessResult",
    "RangeOutcome",
    "Redistribution",
    "SplitStats",
]


@dataclass(frozen=True)
class RangeOutcome:
    """What happened to one dissolved merge."""
    ref: str
    policy: str  # "weight" | "box"
    start_row: int
    end_row: int
    original: Any  # value held by the merge anchor
    assigned: tuple[Any, ...]  # per-row values written back, top to bottom

    @property
    def assigned_total(self) -> float:
        return sum(v for v in self.assigned if isinstance(v, (int, float)) and not isinstance(v, bool))


@dataclass(frozen=True)
class Redistribution:
    grid: SheetGrid
    dissolved: list[MergedRange] = field(default_factory=list)
    outcomes: list[RangeOutcome] = field(default_factory=list)
    issues: list[IssueRecord] = field(default_factory=list)

    def count(self, policy: str) -> int:
        return sum(1 for o in self.outcomes if o.policy == policy)


@dataclass(frozen=True)
class SplitStats:
    """Per-file figures for the SUMMARY line."""
    file_name: str
    rows: int
    weight_ranges: int
    box_ranges: int
    unsupported: int
    warnings: int
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessResult:
    success: bool
    output_path: str
    message: str
    logs: list[str] = field(default_factory=list)
    issues: list[IssueRecord] = field(default_factory=list)
    stats: SplitStats | None = None

    @classmethod
    def failure(cls, message: str, logs: list[str], issues: list[IssueRecord] | None = None) -> ProcessResult:
        return cls(success=False, output_path="", message=message, logs=list(logs), issues=list(issues or []))

    def to_dict(self) -> dict[str, Any]:
        """Response shape handed back to the calling shell."""
        return {
            "success": self.success,
            "output_path": self.output_path,
            "message": self.message,
            "logs": list(self.logs),
        }
