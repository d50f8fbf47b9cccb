# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from merge_splitter.config.loader import CONFIG_DIR_ENV, ProcessConfigStore
from merge_splitter.logging.init import reset_logging
from merge_splitter.models.process_config import ProcessConfig, ProcessType
from tests.workbooks import HEADER, shipment_row, write_workbook


@pytest.fixture(autouse=True)
def _clean_logging():
    # the stdout handler is bound to whatever sys.stdout was on first setup
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def config_dir(tmp_path: Path, monkeypatch) -> Path:
    d = tmp_path / "config"
    monkeypatch.setenv(CONFIG_DIR_ENV, str(d))
    return d


@pytest.fixture()
def store(config_dir: Path) -> ProcessConfigStore:
    return ProcessConfigStore(config_dir / "process_configs.yml")


@pytest.fixture()
def sea_rail_config() -> ProcessConfig:
    return ProcessConfig.default_for_type(ProcessType.SEA_RAIL_NO_IMAGE)


@pytest.fixture()
def shipment_rows() -> list[list[Any]]:
    return [
        HEADER,
        shipment_row("A-001", qty=1, weight=90, box=6),
        shipment_row("A-002", qty=2),
        shipment_row("A-003", qty=3),
        shipment_row("B-001", qty=4, weight=10.5, box=1),
    ]


@pytest.fixture()
def shipment_workbook(tmp_path: Path, shipment_rows) -> Path:
    """rows 2-4 merged on weight (M) and box (K); row 5 stands alone."""
    return write_workbook(
        tmp_path / "shipment.xlsx",
        shipment_rows,
        merges=["M2:M4", "K2:K4"],
        bold=["M2"],
    )
