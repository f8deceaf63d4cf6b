"""Progress reporting for long running preprocessing jobs."""

from __future__ import annotations

from collections.abc import Callable

from pydantic import BaseModel, Field


class Status(BaseModel, frozen=True):
    """A snapshot of job progress.

    Attributes:
        message: What the job is doing right now.
        current: Units of work done.
        total: Units of work in the job.
    """

    message: str = Field(default="", description="Current activity")
    current: float = Field(default=0, ge=0, description="Work done")
    total: float = Field(default=0, ge=0, description="Total work")

    @property
    def percent(self) -> float:
        """Fraction of the job completed, 0.0 when the total is unknown."""
        if self.total == 0:
            return 0.0
        return self.current / self.total


ProgressObserver = Callable[[Status], None]


class ProgressReporter:
    """Tracks progress and notifies observers of every update.

    Progress only moves forward: attempts to lower ``current`` or ``total``
    are ignored.

    Example:
        >>> reporter = ProgressReporter()
        >>> reporter.subscribe(lambda status: print(f"{status.percent:.0%}"))
        >>> reporter.start(4, "Tiling")
        0%
        >>> reporter.advance()
        25%
    """

    def __init__(self) -> None:
        self._status = Status()
        self._observers: list[ProgressObserver] = []

    @property
    def status(self) -> Status:
        return self._status

    def subscribe(self, observer: ProgressObserver) -> None:
        self._observers.append(observer)

    def start(self, total: float, message: str = "") -> None:
        """Grow the job by ``total`` units of work."""
        self._update(
            current=self._status.current,
            total=self._status.total + max(0.0, total),
            message=message,
        )

    def advance(self, step: float = 1, message: str | None = None) -> None:
        """Mark ``step`` more units of work as done."""
        self.report(self._status.current + step, message)

    def report(self, current: float, message: str | None = None) -> None:
        """Report absolute progress. Values below the current one are ignored."""
        self._update(
            current=max(self._status.current, current),
            total=self._status.total,
            message=self._status.message if message is None else message,
        )

    def finish(self, message: str = "Done") -> None:
        self._update(current=self._status.total, total=self._status.total, message=message)

    def _update(self, current: float, total: float, message: str) -> None:
        self._status = Status(
            message=message, current=min(current, total) if total else current, total=total
        )
        for observer in list(self._observers):
            observer(self._status)
