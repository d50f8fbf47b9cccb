from __future__ import annotations

import posixpath
import zipfile
from pathlib import Path
from xml.etree import ElementTree as ET

from openpyxl.utils.cell import range_boundaries

from ..models.merge_layout import MergedRange, MergeLayout, UnsupportedRegion

"""Merge-region extractor.

Spreadsheet APIs resolve a merged region to one value at its top-left cell and
report the rest as empty, which loses how many physical rows the value spans.
This module reads <mergeCells> straight from the sheet part inside the .xlsx
container so the engine can rebuild that span:

    [Content]  xl/workbook.xml             -> <sheet name=.. r:id=..>, activeTab
               xl/_rels/workbook.xml.rels  -> r:id -> worksheets/sheetN.xml
               xl/worksheets/sheetN.xml    -> <mergeCell ref="M5:M7"/>

Only merges touching the configured weight / box columns are classified; every
other merge is counted and otherwise ignored.
"""

__all__ = [
    "MergeParseError",
    "classify_merges",
    "extract_merge_layout",
    "parse_merge_refs",
    "resolve_sheet_part",
]

MAIN_NS = "http://schemas.openxmlformats.org/spreadsheetml/2006/main"
REL_OFFICE_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"
REL_PKG_NS = "http://schemas.openxmlformats.org/package/2006/relationships"

WORKBOOK_PART = "xl/workbook.xml"
WORKBOOK_RELS_PART = "xl/_rels/workbook.xml.rels"

_MERGE_CELL_TAG = f"{{{MAIN_NS}}}mergeCell"
_ROW_TAG = f"{{{MAIN_NS}}}row"


class MergeParseError(Exception):
    """Raised when the merge markup of the container cannot be parsed."""


def _read_xml(archive: zipfile.ZipFile, part: str) -> ET.Element:
    try:
        return ET.fromstring(archive.read(part))
    except KeyError as e:
        raise MergeParseError(f"missing part in container: {part}") from e
    except ET.ParseError as e:
        raise MergeParseError(f"malformed XML in {part}: {e}") from e


def _normalize_target(target: str) -> str:
    # Targets are relative to xl/ unless absolute within the package
    if target.startswith("/"):
        return posixpath.normpath(target.lstrip("/"))
    return posixpath.normpath(posixpath.join("xl", target))


def resolve_sheet_part(archive: zipfile.ZipFile, sheet_name: str | None = None) -> tuple[str, str]:
    """Return (sheet title, part path) for a sheet by name, or the active tab."""
    ns = {"m": MAIN_NS}
    workbook = _read_xml(archive, WORKBOOK_PART)
    sheets = workbook.findall("m:sheets/m:sheet", ns)
    if not sheets:
        raise MergeParseError("workbook declares no sheets")

    if sheet_name is not None:
        sheet = next((s for s in sheets if s.get("name") == sheet_name), None)
        if sheet is None:
            raise MergeParseError(f"sheet not found in workbook: {sheet_name!r}")
    else:
        view = workbook.find("m:bookViews/m:workbookView", ns)
        try:
            active = int(view.get("activeTab", "0")) if view is not None else 0
        except ValueError:
            active = 0
        sheet = sheets[active] if 0 <= active < len(sheets) else sheets[0]

    rid = sheet.get(f"{{{REL_OFFICE_NS}}}id")
    if not rid:
        raise MergeParseError(f"sheet {sheet.get('name')!r} has no relationship id")
    rels = _read_xml(archive, WORKBOOK_RELS_PART)
    for rel in rels.findall(f"{{{REL_PKG_NS}}}Relationship"):
        if rel.get("Id") == rid:
            target = rel.get("Target")
            if not target:
                break
            return sheet.get("name", ""), _normalize_target(target)
    raise MergeParseError(f"relationship {rid} for sheet {sheet.get('name')!r} not found")


def parse_merge_refs(archive: zipfile.ZipFile, part: str) -> list[str]:
    """Stream the sheet part and collect every <mergeCell ref>."""
    refs: list[str] = []
    try:
        with archive.open(part) as src:
            for _event, elem in ET.iterparse(src, events=("end",)):
                if elem.tag == _MERGE_CELL_TAG:
                    ref = elem.get("ref")
                    if ref:
                        refs.append(ref)
                elif elem.tag == _ROW_TAG:
                    # sheetData can be large; rows are of no interest here
                    elem.clear()
    except KeyError as e:
        raise MergeParseError(f"missing part in container: {part}") from e
    except ET.ParseError as e:
        raise MergeParseError(f"malformed XML in {part}: {e}") from e
    return refs


def _bounds(ref: str) -> tuple[int, int, int, int]:
    """(min_col, min_row, max_col, max_row) for an A1 range ref."""
    try:
        min_col, min_row, max_col, max_row = range_boundaries(ref)
    except (ValueError, TypeError) as e:
        raise MergeParseError(f"invalid merge reference: {ref!r}") from e
    if None in (min_col, min_row, max_col, max_row):
        # whole-row / whole-column refs ("A:A", "3:3") are not cell merges
        raise MergeParseError(f"invalid merge reference: {ref!r}")
    # tolerate refs written bottom-right first
    return min(min_col, max_col), min(min_row, max_row), max(min_col, max_col), max(min_row, max_row)


def classify_merges(
    refs: list[str], weight_column: int, box_column: int, sheet_name: str = ""
) -> MergeLayout:
    """Split raw refs into weight / box ranges and unsupported regions."""
    weight_ranges: list[MergedRange] = []
    box_ranges: list[MergedRange] = []
    unsupported: list[UnsupportedRegion] = []
    targets = {weight_column: weight_ranges, box_column: box_ranges}

    for ref in refs:
        min_col, min_row, max_col, max_row = _bounds(ref)
        touched = [c for c in targets if min_col <= c <= max_col]
        if not touched:
            continue
        if min_col != max_col:
            unsupported.append(
                UnsupportedRegion(ref, min_row, max_row, min_col, max_col, "multi-column merge")
            )
            continue
        if min_row == max_row:
            # single cell "merge": nothing to redistribute
            continue
        candidate = MergedRange(start_row=min_row, end_row=max_row, column=min_col)
        bucket = targets[min_col]
        if any(candidate.overlaps(existing) for existing in bucket):
            unsupported.append(
                UnsupportedRegion(ref, min_row, max_row, min_col, max_col, "overlapping merge")
            )
            continue
        bucket.append(candidate)

    return MergeLayout(
        sheet_name=sheet_name,
        weight_ranges=sorted(weight_ranges),
        box_ranges=sorted(box_ranges),
        unsupported=unsupported,
        total_merges=len(refs),
    )


def extract_merge_layout(
    path: Path, weight_column: int, box_column: int, *, sheet_name: str | None = None
) -> MergeLayout:
    """Recover merged regions on the weight and box columns of one sheet.

    Parameters
    ----------
    path: workbook path (.xlsx / .xlsm)
    weight_column, box_column: 1-based column indices
    sheet_name: sheet to inspect; the workbook's active tab when None

    Raises
    ------
    MergeParseError: not a zip container, required part missing, malformed XML,
        or a merge ref that is not a cell range
    """
    try:
        with zipfile.ZipFile(path) as archive:
            title, part = resolve_sheet_part(archive, sheet_name)
            refs = parse_merge_refs(archive, part)
    except zipfile.BadZipFile as e:
        raise MergeParseError(f"not a valid workbook container: {e}") from e
    except OSError as e:
        raise MergeParseError(f"cannot open {path}: {e}") from e
    return classify_merges(refs, weight_column, box_column, sheet_name=title)
