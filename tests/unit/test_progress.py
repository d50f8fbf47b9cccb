from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from merge_splitter.services.progress import ProgressTracker, is_tty_enabled

PATCH_TTY = "merge_splitter.services.progress.is_tty_enabled"
PATCH_TQDM = "merge_splitter.services.progress.tqdm"


def test_is_tty_enabled_returns_stdout_isatty():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True
    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:
    def test_bar_created_for_several_files_on_tty(self):
        with patch(PATCH_TTY, return_value=True), patch(PATCH_TQDM) as mock_tqdm:
            tracker = ProgressTracker(3)
            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=3, desc="Splitting", unit="book", leave=True, ncols=80, ascii=True
            )

    def test_no_bar_for_single_file(self):
        with patch(PATCH_TTY, return_value=True), patch(PATCH_TQDM) as mock_tqdm:
            tracker = ProgressTracker(1)
            assert tracker.enabled is False
            assert tracker.pbar is None
            mock_tqdm.assert_not_called()

    def test_counts_without_tty(self):
        with patch(PATCH_TTY, return_value=False), patch(PATCH_TQDM) as mock_tqdm:
            with ProgressTracker(3) as tracker:
                for ok in (True, False, True):
                    tracker.start_file(Path("a.xlsx"))
                    tracker.finish_file(ok)
            mock_tqdm.assert_not_called()
            assert (tracker.succeeded, tracker.failed, tracker.done) == (2, 1, 3)

    def test_ticks_with_postfix_and_closes(self):
        with patch(PATCH_TTY, return_value=True), patch(PATCH_TQDM) as mock_tqdm:
            pbar = mock_tqdm.return_value
            with ProgressTracker(2) as tracker:
                tracker.start_file(Path("/data/a.xlsx"))
                pbar.set_description.assert_called_with("Splitting a.xlsx")
                assert tracker.current == Path("/data/a.xlsx")
                tracker.finish_file(False)
                pbar.set_postfix.assert_called_with(ok=0, failed=1)
                pbar.update.assert_called_once_with(1)
                assert tracker.current is None
            pbar.close.assert_called_once()
            assert tracker.pbar is None

    def test_long_names_are_shortened(self):
        with patch(PATCH_TTY, return_value=True), patch(PATCH_TQDM) as mock_tqdm:
            tracker = ProgressTracker(2)
            tracker.start_file(Path("a_really_long_shipment_workbook_name.xlsx"))
            desc = mock_tqdm.return_value.set_description.call_args.args[0]
            assert desc.endswith("...")
            assert len(desc) == len("Splitting ") + 24
