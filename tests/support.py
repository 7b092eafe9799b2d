"""Test helpers shared across modules."""

from __future__ import annotations

from datetime import datetime, timedelta


class TickingClock:
    """Clock that advances a fixed step every time it is read."""

    def __init__(self, start: datetime, step: timedelta = timedelta(seconds=1)) -> None:
        self.current = start
        self.step = step
        self.calls = 0

    def __call__(self) -> datetime:
        value = self.current
        self.current += self.step
        self.calls += 1
        return value
