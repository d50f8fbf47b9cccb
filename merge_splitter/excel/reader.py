from __future__ import annotations

import math
import zipfile
from pathlib import Path
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from ..models.sheet_grid import CellData, SheetGrid

"""Workbook reader.

Reads the active sheet into a SheetGrid using openpyxl's read-only mode, which
streams the physical <c> elements as they are stored: every cell keeps its own
style index, and merged regions are NOT expanded (only the anchor carries the
value, the other cells read as empty). Merge topology comes from
merge_splitter.excel.merge_regions instead.

Formulas are read as their cached results (data_only) since the engine needs
numbers; cells the engine does not rewrite are copied from the source file by
the writer, so formulas there survive untouched.
"""

__all__ = [
    "ReadError",
    "coerce_number",
    "read_sheet_grid",
]


class ReadError(Exception):
    """Raised when the input cannot be opened as a workbook or has no readable sheet."""


def coerce_number(value: Any) -> float | None:
    """Return value as float when it is numeric (or numeric text), else None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        text = value.strip().replace(",", "")
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def read_sheet_grid(path: Path) -> SheetGrid:
    """Read the active sheet of an .xlsx/.xlsm file.

    Parameters
    ----------
    path: workbook path

    Raises
    ------
    ReadError: file missing / not a workbook container / active sheet unreadable
    """
    path = Path(path)
    if not path.is_file():
        raise ReadError(f"input file not found: {path}")
    try:
        wb = load_workbook(path, read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
        raise ReadError(f"cannot open workbook {path.name}: {e}") from e

    try:
        ws = wb.active
        if ws is None or not hasattr(ws, "iter_rows"):
            raise ReadError(f"no readable worksheet in {path.name}")
        cells: dict[tuple[int, int], CellData] = {}
        max_row = 0
        max_column = 0
        # rows may be ragged when the file has no <dimension>; enumerate instead of cell.row
        for row_idx, row in enumerate(ws.iter_rows(min_row=1), start=1):
            for col_idx, cell in enumerate(row, start=1):
                # EMPTY_CELL fillers carry neither value nor style
                style = getattr(cell, "style_array", None)
                value = cell.value
                if value is None and style is None:
                    continue
                cells[(row_idx, col_idx)] = CellData(
                    row=row_idx,
                    column=col_idx,
                    value=value,
                    style=style,
                    number_format=cell.number_format or "General",
                )
                max_row = max(max_row, row_idx)
                max_column = max(max_column, col_idx)
        title = ws.title
    except ReadError:
        raise
    except (zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
        raise ReadError(f"cannot read sheet data from {path.name}: {e}") from e
    finally:
        wb.close()

    return SheetGrid(sheet_title=title, max_row=max_row, max_column=max_column, cells=cells)
