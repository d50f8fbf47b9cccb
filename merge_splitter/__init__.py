"""Merge-cell redistribution for shipment workbooks.

Dissolves vertically merged weight / box-count cells of a shipment sheet into
per-row values and writes the result next to the source as `<stem>_拆分表<ext>`.
"""

from .services.orchestrator import process_file, process_workbook

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "process_file",
    "process_workbook",
]
