from __future__ import annotations

import sys
from pathlib import Path
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Batch progress bar (tqdm, TTY only).

One tick per workbook, with the running ok / failed counts as postfix. No bar
for a single workbook or when stdout is not a TTY, so the labeled log lines
reach a calling shell free of control sequences.
"""

__all__ = [
    "ProgressTracker",
    "is_tty_enabled",
]

# workbook names longer than this are shortened in the bar description
NAME_WIDTH = 24


def is_tty_enabled() -> bool:
    return sys.stdout.isatty()


def _short_name(path: Path) -> str:
    name = path.name
    if len(name) <= NAME_WIDTH:
        return name
    return name[: NAME_WIDTH - 3] + "..."


class ProgressTracker:
    """Counts workbooks of a batch and mirrors the counts to a tqdm bar."""

    def __init__(self, total_files: int, *, description: str = "Splitting") -> None:
        self.total_files = total_files
        self.description = description
        self.current: Path | None = None
        self.succeeded = 0
        self.failed = 0

        self.enabled = is_tty_enabled() and total_files > 1
        self.pbar: TqdmType[Any] | None = None
        if self.enabled:
            self.pbar = tqdm(
                total=total_files,
                desc=description,
                unit="book",
                leave=True,
                ncols=80,
                ascii=True,
            )

    @property
    def done(self) -> int:
        return self.succeeded + self.failed

    def start_file(self, file_path: Path) -> None:
        self.current = Path(file_path)
        if self.pbar is not None:
            self.pbar.set_description(f"{self.description} {_short_name(self.current)}")

    def finish_file(self, success: bool) -> None:
        if success:
            self.succeeded += 1
        else:
            self.failed += 1
        self.current = None
        if self.pbar is not None:
            self.pbar.set_postfix(ok=self.succeeded, failed=self.failed)
            self.pbar.update(1)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.set_description(self.description)
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> ProgressTracker:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
