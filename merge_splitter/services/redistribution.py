from __future__ import annotations

from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from openpyxl.utils.cell import get_column_letter

from ..excel.reader import coerce_number
from ..models.issue_record import IssueKind, IssueRecord
from ..models.merge_layout import MergedRange, MergeLayout
from ..models.process_config import ProcessConfig
from ..models.processing_result import RangeOutcome, Redistribution
from ..models.sheet_grid import CellData, SheetGrid

"""Redistribution engine.

Joins the logical grid (reader) with the physical merge topology (extractor) by
coordinate and dissolves every supported merge on the two configured columns:

- weight column: the anchor value is split across the rows of the merge in
  proportion to the quantity column (weight_column - 1), rounded to 2 places.
- box column: the anchor keeps the merged count, every other row gets 0.

Pure: no I/O, no logging. Non-fatal conditions come back as IssueRecords.
"""

__all__ = [
    "WEIGHT_NUMBER_FORMAT",
    "redistribute",
    "round_half_up",
    "split_weight",
]

WEIGHT_NUMBER_FORMAT = "0.00"
_CENTS = Decimal("0.01")


def round_half_up(value: float, places: Decimal = _CENTS) -> float:
    """Round to 2 decimals, halves away from zero.

    Works on the shortest repr of the float so that e.g. 2.675 rounds to 2.68
    rather than following its binary expansion.
    """
    return float(Decimal(repr(value)).quantize(places, rounding=ROUND_HALF_UP))


def split_weight(total_weight: float, quantities: list[float]) -> list[float] | None:
    """Proportional split of total_weight by quantities.

    Returns None when the quantities sum to zero (no basis for a split).
    """
    total_quantity = sum(quantities)
    if total_quantity == 0:
        return None
    unit_weight = total_weight / total_quantity
    return [round_half_up(unit_weight * q) for q in quantities]


class _Collector:
    """Per-run accumulator for issues and rewritten cells."""

    def __init__(self, grid: SheetGrid) -> None:
        self.grid = grid
        self.issues: list[IssueRecord] = []
        self.updates: list[CellData] = []
        self.outcomes: list[RangeOutcome] = []

    def issue(self, kind: IssueKind, message: str, *, row: int = -1, column: int = -1, ref: str = "") -> None:
        self.issues.append(
            IssueRecord(kind=kind, message=message, sheet=self.grid.sheet_title, row=row, column=column, ref=ref)
        )

    def number(self, row: int, column: int, role: str) -> float:
        """Numeric value of a cell; 0 with a NON_NUMERIC_CELL issue otherwise."""
        cell = self.grid.get(row, column)
        number = coerce_number(cell.value)
        if number is None:
            shown = "empty" if cell.is_empty else repr(cell.value)
            self.issue(
                IssueKind.NON_NUMERIC_CELL,
                f"{role} cell is {shown}; counted as 0",
                row=row,
                column=column,
                ref=_a1(row, column),
            )
            return 0.0
        return number

    def rewrite(self, rng: MergedRange, row: int, value: Any, *, number_format: str | None = None) -> None:
        anchor = self.grid.get(rng.start_row, rng.column)
        current = self.grid.get(row, rng.column)
        # physical cells without their own <c> element inherit the anchor's look
        style = current.style if current.style is not None else anchor.style
        fmt = current.number_format if current.style is not None else anchor.number_format
        if number_format is not None and fmt == "General":
            fmt = number_format
        self.updates.append(replace(current, value=value, style=style, number_format=fmt))


def _a1(row: int, column: int) -> str:
    return f"{get_column_letter(column)}{row}"


def _dissolve_weight(col: _Collector, rng: MergedRange, quantity_column: int) -> None:
    original = col.grid.value(rng.start_row, rng.column)
    total_weight = col.number(rng.start_row, rng.column, "weight")
    quantities = [col.number(r, quantity_column, "quantity") for r in rng.rows]
    shares = split_weight(total_weight, quantities)
    if shares is None:
        col.issue(
            IssueKind.DIVISION_BY_ZERO,
            f"total quantity of rows {rng.start_row}-{rng.end_row} is 0; weight {original!r} set to 0 on every row",
            column=rng.column,
            ref=rng.ref,
        )
        shares = [0.0] * len(rng)
    for row, share in zip(rng.rows, shares, strict=True):
        col.rewrite(rng, row, share, number_format=WEIGHT_NUMBER_FORMAT)
    col.outcomes.append(
        RangeOutcome(
            ref=rng.ref,
            policy="weight",
            start_row=rng.start_row,
            end_row=rng.end_row,
            original=original,
            assigned=tuple(shares),
        )
    )


def _dissolve_box(col: _Collector, rng: MergedRange) -> None:
    original = col.grid.value(rng.start_row, rng.column)
    assigned: list[Any] = []
    for row in rng.rows:
        value = original if row == rng.start_row else 0
        col.rewrite(rng, row, value)
        assigned.append(value)
    col.outcomes.append(
        RangeOutcome(
            ref=rng.ref,
            policy="box",
            start_row=rng.start_row,
            end_row=rng.end_row,
            original=original,
            assigned=tuple(assigned),
        )
    )


def redistribute(grid: SheetGrid, layout: MergeLayout, config: ProcessConfig) -> Redistribution:
    """Dissolve supported merges on the weight and box columns.

    Rows outside every merged range keep their values; unsupported regions are
    reported and left merged.
    """
    col = _Collector(grid)

    for region in layout.unsupported:
        col.issue(
            IssueKind.UNSUPPORTED_MERGE_SHAPE,
            f"{region.reason} over rows {region.min_row}-{region.max_row}; left merged and copied as-is",
            ref=region.ref,
        )

    for rng in layout.weight_ranges:
        _dissolve_weight(col, rng, config.quantity_column)
    for rng in layout.box_ranges:
        _dissolve_box(col, rng)

    return Redistribution(
        grid=grid.with_updates(col.updates),
        dissolved=[*layout.weight_ranges, *layout.box_ranges],
        outcomes=col.outcomes,
        issues=col.issues,
    )
