from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from pathlib import Path

from dotenv import load_dotenv

from ..config.loader import ConfigError, ProcessConfigStore
from ..logging.init import log_summary, set_level, setup_logging
from ..logging.issue_log import IssueLogBuffer
from ..models.process_config import ProcessConfig, ProcessType
from ..services.orchestrator import FATAL_ERRORS, plan_workbook, process_all
from ..services.preview import build_preview_frame
from ..services.summary import render_summary_line

"""CLI entrypoint.

A stand-in for the calling shell, for scripted runs and manual checks; the
engine itself is the Python API (process_workbook / process_file), and this
module adds no behaviour of its own beyond config resolution and reporting.
It resolves the process type config, runs one transformation per file, and
prints the labeled log lines and a SUMMARY line per file.

Exit codes:
- 0: every file succeeded
- 2: at least one file failed (the others are still processed)
- 1: fatal (configuration)
"""

EXIT_SUCCESS_ALL = 0
EXIT_PARTIAL_FAILURE = 2
EXIT_FATAL = 1


def _load_env_file(path: Path) -> None:
    """Load .env (MERGE_SPLITTER_CONFIG_DIR etc.) without overriding the environment."""
    if path.exists():
        load_dotenv(dotenv_path=path, override=False)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="merge-splitter",
        description="Split merged weight / box-count cells of shipment workbooks",
    )
    p.add_argument("files", nargs="+", type=Path, help="Workbooks to process (.xlsx/.xlsm)")
    p.add_argument(
        "--type",
        dest="process_type",
        required=True,
        choices=[t.value for t in ProcessType],
        help="Process type (document layout)",
    )
    p.add_argument("--config", type=Path, default=None, help="Process config YAML file")
    p.add_argument("--weight-column", type=int, default=None, help="Override weight column (1-based)")
    p.add_argument("--box-column", type=int, default=None, help="Override box column (1-based)")
    p.add_argument(
        "--save-config",
        action="store_true",
        help="Persist the --weight-column/--box-column overrides for this type",
    )
    p.add_argument(
        "--inspect",
        action="store_true",
        help="Print the planned redistribution per file and exit without writing",
    )
    p.add_argument("--issue-log", type=Path, default=None, help="Append issues as JSON Lines here")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _resolve_config(args: argparse.Namespace, store: ProcessConfigStore) -> ProcessConfig:
    config = store.get(args.process_type)
    overrides = {}
    if args.weight_column is not None:
        overrides["weight_column"] = args.weight_column
    if args.box_column is not None:
        overrides["box_column"] = args.box_column
    if overrides:
        config = replace(config, **overrides)
        errors = config.validation_errors()
        if errors:
            raise ConfigError("; ".join(errors))
    if args.save_config:
        saved = store.save(config)
        logging.getLogger("merge_splitter.cli").info(f"config saved: {saved}")
    return config


def _inspect(files: list[Path], config: ProcessConfig) -> int:
    failed = 0
    for f in files:
        print(f"FILE: {f.name}")
        try:
            result = plan_workbook(f, config)
        except FATAL_ERRORS as e:
            print(f"  error: {e}")
            failed += 1
            continue
        frame = build_preview_frame(result)
        if frame.empty:
            print("  (no merged weight / box regions)")
        else:
            print(frame.to_string(index=False))
    return EXIT_PARTIAL_FAILURE if failed else EXIT_SUCCESS_ALL


def main(argv: list[str] | None = None) -> int:
    # None only: an explicit [] must not fall back to sys.argv
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    _load_env_file(Path(".env"))

    logger = setup_logging()
    if args.debug:
        set_level(logging.DEBUG)
        logger.debug("debug mode enabled")

    store = ProcessConfigStore(args.config)
    try:
        config = _resolve_config(args, store)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    if args.inspect:
        return _inspect(args.files, config)

    issue_log = IssueLogBuffer(args.issue_log) if args.issue_log is not None else None
    results = process_all(args.files, config, issue_log=issue_log)

    for path, result in zip(args.files, results):
        if result.success:
            logger.info(f"{path.name} -> {result.output_path}")
        else:
            logger.error(f"{path.name}: {result.message}")
        # log_summary adds the SUMMARY label itself
        log_summary(render_summary_line(result, path.name).removeprefix("SUMMARY "))

    if issue_log is not None and len(issue_log):
        logger.info(f"issues written to {issue_log.flush()}")

    if any(not r.success for r in results):
        return EXIT_PARTIAL_FAILURE
    return EXIT_SUCCESS_ALL
