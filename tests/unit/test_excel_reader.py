from __future__ import annotations

from pathlib import Path

import pytest
from openpyxl import Workbook

from merge_splitter.excel.reader import ReadError, coerce_number, read_sheet_grid
from tests.workbooks import BOX_COL, QTY_COL, WEIGHT_COL, write_workbook


def test_reads_values_and_dimensions(shipment_workbook: Path):
    grid = read_sheet_grid(shipment_workbook)
    assert grid.sheet_title == "Sheet1"
    assert grid.max_row == 5
    assert grid.max_column == WEIGHT_COL
    assert grid.value(2, WEIGHT_COL) == 90
    assert grid.value(3, QTY_COL) == 2
    assert grid.value(5, WEIGHT_COL) == 10.5


def test_merged_non_anchor_cells_read_as_empty(shipment_workbook: Path):
    grid = read_sheet_grid(shipment_workbook)
    assert grid.value(3, WEIGHT_COL) is None
    assert grid.value(4, BOX_COL) is None


def test_style_identifier_is_captured(shipment_workbook: Path):
    grid = read_sheet_grid(shipment_workbook)
    bold = grid.get(2, WEIGHT_COL).style
    plain = grid.get(5, WEIGHT_COL).style
    assert bold is not None and plain is not None
    assert bold.fontId != plain.fontId


def test_number_format_is_captured(tmp_path: Path):
    path = write_workbook(tmp_path / "fmt.xlsx", [[1.5]], number_formats={"A1": "0.000"})
    assert read_sheet_grid(path).get(1, 1).number_format == "0.000"


def test_reads_the_active_sheet(tmp_path: Path):
    wb = Workbook()
    wb.active.title = "Cover"
    wb.active["A1"] = "cover"
    detail = wb.create_sheet("Detail")
    detail["A1"] = "detail"
    wb.active = 1
    path = tmp_path / "two.xlsx"
    wb.save(path)

    grid = read_sheet_grid(path)
    assert grid.sheet_title == "Detail"
    assert grid.value(1, 1) == "detail"


def test_empty_sheet(tmp_path: Path):
    path = tmp_path / "empty.xlsx"
    Workbook().save(path)
    grid = read_sheet_grid(path)
    assert grid.max_row == 0
    assert len(grid.cells) == 0


def test_missing_file(tmp_path: Path):
    with pytest.raises(ReadError) as e:
        read_sheet_grid(tmp_path / "nope.xlsx")
    assert "not found" in str(e.value)


def test_not_a_workbook(tmp_path: Path):
    path = tmp_path / "fake.xlsx"
    path.write_text("this is not a zip container", encoding="utf-8")
    with pytest.raises(ReadError):
        read_sheet_grid(path)


@pytest.mark.parametrize(
    "value, expected",
    [
        (3, 3.0),
        (2.5, 2.5),
        ("12", 12.0),
        (" 1,234.5 ", 1234.5),
        ("abc", None),
        ("", None),
        (None, None),
        (True, None),
        (float("nan"), None),
        (float("inf"), None),
    ],
)
def test_coerce_number(value, expected):
    assert coerce_number(value) == expected
