"""Root conftest: shared test configuration."""

import os
from datetime import datetime, timedelta, timezone

import pytest

# Ensure tests never reach a real database
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
os.environ.setdefault("AUTO_CREATE_TABLES", "false")


class FakeMonotonic:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TickingClock:
    """UTC clock that moves forward by `step` on every read."""

    def __init__(
        self,
        start: datetime = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc),
        step: timedelta = timedelta(seconds=1),
    ):
        self.now = start
        self.step = step

    def __call__(self) -> datetime:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def fake_clock():
    return FakeMonotonic()


@pytest.fixture
def ticking_clock():
    return TickingClock()
