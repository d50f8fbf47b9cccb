"""Domain models for the merge-cell redistribution engine."""

from .issue_record import IssueKind, IssueRecord
from .merge_layout import MergedRange, MergeLayout, UnsupportedRegion
from .process_config import ProcessConfig, ProcessType
from .processing_result import ProcessResult, RangeOutcome, Redistribution, SplitStats
from .sheet_grid import CellData, SheetGrid

__all__ = [
    # Configuration models
    "ProcessConfig",
    "ProcessType",
    # Sheet models
    "CellData",
    "SheetGrid",
    "MergedRange",
    "MergeLayout",
    "UnsupportedRegion",
    # Processing models
    "IssueKind",
    "IssueRecord",
    "RangeOutcome",
    "Redistribution",
    "ProcessResult",
    "SplitStats",
]
