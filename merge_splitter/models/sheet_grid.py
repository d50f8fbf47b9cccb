from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any

"""In-memory cell grid for one worksheet.

SheetGrid is the logical view produced by the workbook reader: one CellData per
physical cell (1-based coordinates), each with the style identifier it points at
in the source workbook. The redistribution engine never mutates a grid; it derives
a new one with `with_updates`, which also records the rewritten coordinates in
`dirty` so the writer knows which cells to emit.
"""

__all__ = [
    "CellData",
    "SheetGrid",
]

Coordinate = tuple[int, int]


@dataclass(frozen=True)
class CellData:
    """One physical cell.

    style is the openpyxl StyleArray of the cell (indices into the source
    workbook's font/fill/border/number-format tables). None when the source
    file carries no <c> element for the coordinate.
    """
    row: int
    column: int
    value: Any = None
    style: Any = None
    number_format: str = "General"

    @property
    def coordinate(self) -> Coordinate:
        return (self.row, self.column)

    @property
    def is_empty(self) -> bool:
        return self.value is None or (isinstance(self.value, str) and self.value.strip() == "")


@dataclass(frozen=True)
class SheetGrid:
    sheet_title: str
    max_row: int
    max_column: int
    cells: dict[Coordinate, CellData] = field(default_factory=dict)
    dirty: frozenset[Coordinate] = frozenset()

    def get(self, row: int, column: int) -> CellData:
        """Return the cell at (row, column); a blank CellData if absent."""
        cell = self.cells.get((row, column))
        if cell is None:
            return CellData(row=row, column=column)
        return cell

    def value(self, row: int, column: int) -> Any:
        return self.get(row, column).value

    def with_updates(self, updates: Iterable[CellData]) -> SheetGrid:
        cells = dict(self.cells)
        dirty = set(self.dirty)
        max_row, max_column = self.max_row, self.max_column
        for cell in updates:
            cells[cell.coordinate] = cell
            dirty.add(cell.coordinate)
            max_row = max(max_row, cell.row)
            max_column = max(max_column, cell.column)
        return replace(self, cells=cells, dirty=frozenset(dirty), max_row=max_row, max_column=max_column)

    def iter_dirty(self) -> Iterator[CellData]:
        """Rewritten cells in row-major order."""
        for coord in sorted(self.dirty):
            yield self.cells[coord]

    def column_values(self, column: int) -> list[Any]:
        return [self.value(r, column) for r in range(1, self.max_row + 1)]

    def __len__(self) -> int:
        return self.max_row
