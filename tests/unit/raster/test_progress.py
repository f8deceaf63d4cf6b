"""Unit tests for progress reporting."""

from __future__ import annotations

import pytest

from discarta.raster import ProgressReporter, Status


class TestStatus:
    def test_percent(self) -> None:
        assert Status(current=1, total=4).percent == 0.25

    def test_percent_without_total(self) -> None:
        """Test an unknown total reports zero rather than dividing by zero."""
        assert Status(current=3).percent == 0.0

    def test_rejects_negative(self) -> None:
        with pytest.raises(ValueError):
            Status(current=-1)


class TestProgressReporter:
    """Tests for forward-only progress."""

    def test_observers_see_every_update(self) -> None:
        """Test each call notifies subscribers with the new status."""
        reporter = ProgressReporter()
        seen: list[Status] = []
        reporter.subscribe(seen.append)

        reporter.start(4, "Tiling")
        reporter.advance()
        reporter.advance(2, "Halfway")
        reporter.finish()

        assert [status.current for status in seen] == [0, 1, 3, 4]
        assert [status.message for status in seen] == ["Tiling", "Tiling", "Halfway", "Done"]
        assert seen[-1].percent == 1.0

    def test_start_accumulates_total(self) -> None:
        """Test starting more work grows the job instead of resetting it."""
        reporter = ProgressReporter()
        reporter.start(4)
        reporter.advance()
        reporter.start(6)
        assert reporter.status.total == 10
        assert reporter.status.current == 1

    def test_progress_never_goes_backwards(self) -> None:
        """Test lower values are ignored."""
        reporter = ProgressReporter()
        reporter.start(10)
        reporter.report(5)
        reporter.report(2)
        assert reporter.status.current == 5

    def test_current_capped_at_total(self) -> None:
        """Test overshooting is clamped to the total."""
        reporter = ProgressReporter()
        reporter.start(3)
        reporter.advance(10)
        assert reporter.status.current == 3
        assert reporter.status.percent == 1.0

    def test_negative_start_ignored(self) -> None:
        reporter = ProgressReporter()
        reporter.start(-5)
        assert reporter.status.total == 0
