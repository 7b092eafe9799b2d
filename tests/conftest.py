"""Shared fixtures for Saitama tests."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from .support import TickingClock


@pytest.fixture
def start_time() -> datetime:
    return datetime(2024, 3, 1, 9, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(start_time: datetime) -> TickingClock:
    """Return a clock that ticks one second per read."""
    return TickingClock(start_time)
