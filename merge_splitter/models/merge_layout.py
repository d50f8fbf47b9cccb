from __future__ import annotations

from dataclasses import dataclass, field

from openpyxl.utils.cell import get_column_letter

"""Merge topology recovered from the sheet markup.

MergedRange only describes single-column vertical merges; anything else that
touches a processed column ends up as an UnsupportedRegion and is left merged.
"""

__all__ = [
    "MergeLayout",
    "MergedRange",
    "UnsupportedRegion",
]


@dataclass(frozen=True, order=True)
class MergedRange:
    start_row: int
    end_row: int
    column: int

    def __post_init__(self) -> None:
        if self.start_row > self.end_row:
            raise ValueError(f"start_row {self.start_row} > end_row {self.end_row}")

    @property
    def rows(self) -> range:
        return range(self.start_row, self.end_row + 1)

    @property
    def ref(self) -> str:
        letter = get_column_letter(self.column)
        return f"{letter}{self.start_row}:{letter}{self.end_row}"

    def __len__(self) -> int:
        return self.end_row - self.start_row + 1

    def overlaps(self, other: MergedRange) -> bool:
        return (
            self.column == other.column
            and self.start_row <= other.end_row
            and other.start_row <= self.end_row
        )


@dataclass(frozen=True)
class UnsupportedRegion:
    ref: str
    min_row: int
    max_row: int
    min_column: int
    max_column: int
    reason: str


@dataclass(frozen=True)
class MergeLayout:
    """Merges relevant to the weight and box columns of one sheet."""
    sheet_name: str
    weight_ranges: list[MergedRange] = field(default_factory=list)
    box_ranges: list[MergedRange] = field(default_factory=list)
    unsupported: list[UnsupportedRegion] = field(default_factory=list)
    total_merges: int = 0  # every <mergeCell> on the sheet, relevant or not

    @property
    def is_empty(self) -> bool:
        return not (self.weight_ranges or self.box_ranges or self.unsupported)
