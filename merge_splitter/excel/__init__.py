"""Workbook I/O: logical reader, merge markup extractor, style-preserving writer."""

from .merge_regions import MergeParseError, extract_merge_layout
from .reader import ReadError, coerce_number, read_sheet_grid
from .writer import OUTPUT_MARKER, WriteError, derive_output_path, write_split_workbook

__all__ = [
    "MergeParseError",
    "OUTPUT_MARKER",
    "ReadError",
    "WriteError",
    "coerce_number",
    "derive_output_path",
    "extract_merge_layout",
    "read_sheet_grid",
    "write_split_workbook",
]
