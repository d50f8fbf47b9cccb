from __future__ import annotations

import os
import zipfile
from copy import copy
from pathlib import Path

from openpyxl import load_workbook
from openpyxl.cell.cell import MergedCell
from openpyxl.utils.exceptions import InvalidFileException

from ..models.processing_result import Redistribution
from .reader import ReadError

"""Style-preserving writer.

The source workbook is reopened as a template so that its style tables,
column widths, row heights, untouched merges and formulas carry over as they
are. Only the dissolved ranges are unmerged, and only the cells the engine
rewrote are written; each gets back the style identifier captured by the
reader (a StyleArray indexing the same style tables).
"""

__all__ = [
    "OUTPUT_MARKER",
    "WriteError",
    "derive_output_path",
    "write_split_workbook",
]

OUTPUT_MARKER = "_拆分表"


class WriteError(Exception):
    """Raised when the output workbook cannot be created."""


def derive_output_path(input_path: Path) -> Path:
    """<dir>/<stem>_拆分表<suffix>, next to the input."""
    input_path = Path(input_path)
    suffix = input_path.suffix or ".xlsx"
    return input_path.with_name(f"{input_path.stem}{OUTPUT_MARKER}{suffix}")


def _check_target(source: Path, target: Path) -> None:
    if target.resolve() == source.resolve():
        raise WriteError(f"output path is the input file: {target}")
    if target.exists() and not target.is_file():
        raise WriteError(f"output path exists and is not a file: {target}")
    if not target.parent.is_dir():
        raise WriteError(f"output directory does not exist: {target.parent}")


def write_split_workbook(source: Path, target: Path, result: Redistribution) -> Path:
    """Write `result` over a copy of `source` and save it to `target`.

    An existing file at `target` is replaced. The source file is never written.

    Raises:
        ReadError: the source can no longer be opened as a template
        WriteError: target path unusable, or saving fails
    """
    source, target = Path(source), Path(target)
    _check_target(source, target)
    try:
        wb = load_workbook(source, keep_vba=source.suffix.lower() == ".xlsm")
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
        raise ReadError(f"cannot reopen {source.name} as template: {e}") from e

    try:
        grid = result.grid
        try:
            ws = wb[grid.sheet_title]
        except KeyError as e:
            raise WriteError(f"sheet {grid.sheet_title!r} vanished from {source.name}") from e

        for rng in result.dissolved:
            if rng.ref in ws.merged_cells:
                ws.unmerge_cells(rng.ref)

        for data in grid.iter_dirty():
            cell = ws.cell(row=data.row, column=data.column)
            if isinstance(cell, MergedCell):
                # still inside a merge we did not dissolve; leave it alone
                continue
            cell.value = data.value
            if data.style is not None:
                cell._style = copy(data.style)
            if data.number_format:
                cell.number_format = data.number_format

        # save beside the target, then swap in; a failed save leaves no partial output
        partial = target.with_name(f".{target.name}.partial")
        try:
            wb.save(partial)
            os.replace(partial, target)
        except OSError as e:
            partial.unlink(missing_ok=True)
            raise WriteError(f"cannot save {target}: {e}") from e
    finally:
        wb.close()
    return target
