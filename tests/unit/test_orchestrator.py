from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from merge_splitter.excel.writer import WriteError, derive_output_path
from merge_splitter.logging.issue_log import IssueLogBuffer
from merge_splitter.models.process_config import ProcessConfig, ProcessType
from merge_splitter.services.orchestrator import plan_workbook, process_all, process_file, process_workbook
from tests.workbooks import write_workbook


def test_plan_workbook_does_not_write(shipment_workbook: Path, sea_rail_config):
    result = plan_workbook(shipment_workbook, sea_rail_config)
    assert result.count("weight") == 1
    assert result.count("box") == 1
    assert list(shipment_workbook.parent.iterdir()) == [shipment_workbook]


def test_write_failure_becomes_failed_result(shipment_workbook: Path, sea_rail_config):
    with patch(
        "merge_splitter.services.orchestrator.write_split_workbook",
        side_effect=WriteError("disk full"),
    ):
        result = process_workbook(shipment_workbook, sea_rail_config)
    assert result.success is False
    assert result.output_path == ""
    assert result.message == "disk full"
    assert result.logs[-1] == "ERROR WriteError: disk full"


def test_explicit_output_path(shipment_workbook: Path, sea_rail_config, tmp_path: Path):
    target = tmp_path / "elsewhere.xlsx"
    result = process_workbook(shipment_workbook, sea_rail_config, output_path=target)
    assert result.success
    assert result.output_path == str(target)
    assert target.exists()


def test_process_file_uses_store(shipment_workbook: Path, store):
    result = process_file(shipment_workbook, "sea-rail-no-image", store)
    assert result.success
    assert result.stats.weight_ranges == 1


def test_process_all_continues_after_failure(shipment_workbook: Path, sea_rail_config, tmp_path: Path):
    missing = tmp_path / "missing.xlsx"
    log = IssueLogBuffer(tmp_path / "issues.log")
    results = process_all([missing, shipment_workbook], sea_rail_config, issue_log=log)
    assert [r.success for r in results] == [False, True]
    assert len(log) == 0


@pytest.mark.parametrize(
    "weight, box, fragment",
    [
        (1, 2, "weight_column must be >= 2"),
        (13, 13, "must differ"),
    ],
)
def test_invalid_layout_is_a_failed_result(tmp_path: Path, weight, box, fragment):
    src = write_workbook(
        tmp_path / "layout.xlsx",
        [["a", 1, 10], ["b", 2, None]],
        merges=["A1:A2", "M1:M2"],
    )
    config = ProcessConfig(ProcessType.AIR_FREIGHT, weight_column=weight, box_column=box)
    result = process_workbook(src, config)

    assert result.success is False
    assert result.output_path == ""
    assert fragment in result.message
    assert result.logs[-1].startswith("ERROR invalid config for air-freight")
    assert not derive_output_path(src).exists()
