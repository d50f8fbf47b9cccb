from __future__ import annotations

import json
import re
from pathlib import Path

from merge_splitter.logging.issue_log import IssueLogBuffer
from merge_splitter.models.issue_record import IssueKind, IssueRecord


def _record(ref: str = "M2:M4") -> IssueRecord:
    return IssueRecord(IssueKind.DIVISION_BY_ZERO, "total quantity is 0", sheet="Sheet1", column=13, ref=ref)


def test_flush_writes_json_lines(tmp_path: Path):
    buf = IssueLogBuffer(tmp_path / "logs" / "issues.log")
    buf.extend("a.xlsx", [_record(), _record("M7:M9")])
    assert len(buf) == 2

    path = buf.flush()
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert set(first) == {"kind", "message", "sheet", "row", "column", "ref", "file", "timestamp"}
    assert first["file"] == "a.xlsx"
    assert json.loads(lines[1])["ref"] == "M7:M9"
    assert len(buf) == 0


def test_flush_appends(tmp_path: Path):
    buf = IssueLogBuffer(tmp_path / "issues.log")
    buf.extend("a.xlsx", [_record()])
    buf.flush()
    buf.extend("b.xlsx", [_record()])
    path = buf.flush()
    assert len(path.read_text(encoding="utf-8").splitlines()) == 2


def test_empty_flush_creates_nothing(tmp_path: Path):
    buf = IssueLogBuffer(tmp_path / "issues.log")
    path = buf.flush()
    assert not path.exists()


def test_default_path_is_timestamped(tmp_path: Path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    buf = IssueLogBuffer()
    assert re.fullmatch(r"issues-\d{8}-\d{6}\.log", buf.file_path.name)
    assert buf.file_path.parent == Path("logs")
    first = buf.file_path
    assert buf.file_path is first
