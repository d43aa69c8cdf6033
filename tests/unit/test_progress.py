from __future__ import annotations

from unittest.mock import MagicMock, patch

from flood_reports.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_follows_stdout():
    with patch("sys.stdout.isatty", return_value=True):
        assert is_tty_enabled() is True
    with patch("sys.stdout.isatty", return_value=False):
        assert is_tty_enabled() is False


def test_tracker_disabled_without_tty():
    with patch("flood_reports.services.progress.is_tty_enabled", return_value=False):
        with ProgressTracker(4) as progress:
            assert progress.enabled is False
            assert progress.pbar is None
            progress.start("report1.csv")
            progress.finish()
        assert progress.completed == 1


def test_tracker_updates_tqdm_on_tty():
    bar = MagicMock()
    with patch("flood_reports.services.progress.is_tty_enabled", return_value=True), patch(
        "flood_reports.services.progress.tqdm", return_value=bar
    ) as tqdm_cls:
        with ProgressTracker(2, description="Writing reports") as progress:
            progress.start("report1.csv")
            progress.finish()
        tqdm_cls.assert_called_once()
        assert tqdm_cls.call_args.kwargs["total"] == 2
        bar.set_description.assert_any_call("Writing reports (report1.csv)")
        bar.update.assert_called_once_with(1)
        bar.close.assert_called_once()
        assert progress.pbar is None
