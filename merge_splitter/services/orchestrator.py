from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from pathlib import Path

from ..config.loader import ProcessConfigStore
from ..excel.merge_regions import MergeParseError, extract_merge_layout
from ..excel.reader import ReadError, read_sheet_grid
from ..excel.writer import WriteError, derive_output_path, write_split_workbook
from ..logging.issue_log import IssueLogBuffer
from ..logging.transcript import ProcessTranscript
from ..models.issue_record import IssueKind
from ..models.process_config import ProcessConfig, ProcessType
from ..models.processing_result import ProcessResult, Redistribution, SplitStats
from .progress import ProgressTracker
from .redistribution import redistribute

"""Orchestration of one workbook transformation.

    read grid ─┐
               ├─> redistribute ─> write copy ─> ProcessResult
    read merges┘

Synchronous and single-threaded: a call runs to completion on the calling
thread. There is no cancellation; callers that must stay responsive should run
it on a worker thread. Calls on different files share nothing; calls on the
same input path must be serialized by the caller.
"""

logger = logging.getLogger(__name__)

__all__ = [
    "plan_workbook",
    "process_all",
    "process_file",
    "process_workbook",
]

FATAL_ERRORS = (ReadError, MergeParseError, WriteError)


def plan_workbook(
    file_path: Path, config: ProcessConfig, transcript: ProcessTranscript | None = None
) -> Redistribution:
    """Read both views of the workbook and compute the redistribution (no output).

    Raises:
        ReadError / MergeParseError: fatal input problems
    """
    transcript = transcript or ProcessTranscript()
    grid = read_sheet_grid(file_path)
    transcript.info(
        f"sheet {grid.sheet_title!r}: {grid.max_row} rows x {grid.max_column} columns"
    )
    # both views must describe the same sheet; the grid decides which one
    layout = extract_merge_layout(
        file_path, config.weight_column, config.box_column, sheet_name=grid.sheet_title
    )
    transcript.info(
        f"merged regions: {layout.total_merges} total, "
        f"{len(layout.weight_ranges)} on weight column {config.weight_column}, "
        f"{len(layout.box_ranges)} on box column {config.box_column}"
    )
    if config.copy_images:
        # image copying is not implemented; the flag is accepted and ignored
        logger.debug("copy_images=True for %s: images are not copied", file_path)
    result = redistribute(grid, layout, config)
    for record in result.issues:
        transcript.issue(record)
    return result


def process_workbook(
    file_path: Path, config: ProcessConfig, *, output_path: Path | None = None
) -> ProcessResult:
    """Transform one workbook into its split copy.

    Never raises for input/output problems or an invalid column layout: both
    come back as ProcessResult(success=False) with the transcript up to the failure.
    """
    file_path = Path(file_path)
    start = time.perf_counter()
    transcript = ProcessTranscript()
    transcript.info(f"processing {file_path}")
    # configs built in code never went through ProcessConfigStore.save
    errors = config.validation_errors()
    if errors:
        message = f"invalid config for {config.process_type.value}: {'; '.join(errors)}"
        transcript.error(message)
        return ProcessResult.failure(message, transcript.lines)
    transcript.info(
        f"process type {config.process_type.value}: weight column {config.weight_column}, "
        f"quantity column {config.quantity_column}, box column {config.box_column}"
    )

    try:
        result = plan_workbook(file_path, config, transcript)
        target = Path(output_path) if output_path is not None else derive_output_path(file_path)
        transcript.info(f"writing {target}")
        write_split_workbook(file_path, target, result)
    except FATAL_ERRORS as e:
        transcript.error(f"{type(e).__name__}: {e}")
        return ProcessResult.failure(str(e), transcript.lines)

    stats = SplitStats(
        file_name=file_path.name,
        rows=result.grid.max_row,
        weight_ranges=result.count("weight"),
        box_ranges=result.count("box"),
        unsupported=sum(1 for i in result.issues if i.kind is IssueKind.UNSUPPORTED_MERGE_SHAPE),
        warnings=len(result.issues),
        elapsed_seconds=round(time.perf_counter() - start, 3),
    )
    transcript.info(
        f"done: {stats.weight_ranges} weight and {stats.box_ranges} box regions split, "
        f"{stats.warnings} warnings"
    )
    return ProcessResult(
        success=True,
        output_path=str(target),
        message="processing complete",
        logs=transcript.lines,
        issues=list(result.issues),
        stats=stats,
    )


def process_file(
    file_path: Path, process_type: ProcessType | str, store: ProcessConfigStore
) -> ProcessResult:
    """Resolve the config for `process_type` from `store`, then process.

    Raises:
        ConfigError: unknown process type or broken config file
    """
    config = store.get(process_type)
    return process_workbook(file_path, config)


def process_all(
    file_paths: Sequence[Path],
    config: ProcessConfig,
    *,
    issue_log: IssueLogBuffer | None = None,
) -> list[ProcessResult]:
    """Process several files one after another (one invocation each)."""
    results: list[ProcessResult] = []
    with ProgressTracker(len(file_paths), description="Splitting") as progress:
        for file_path in file_paths:
            file_path = Path(file_path)
            progress.start_file(file_path)
            result = process_workbook(file_path, config)
            results.append(result)
            if issue_log is not None:
                issue_log.extend(file_path.name, result.issues)
            progress.finish_file(result.success)
    return results
