"""Shared pytest fixtures."""

from datetime import UTC, datetime, timedelta

import pytest

from sessionkeeper.core.modules.session.models import SessionPolicy
from sessionkeeper.core.modules.session.service import SessionService
from sessionkeeper.core.modules.session.store import SessionStore


class FakeClock:
    """Manually advanced clock for deterministic expiry tests."""

    def __init__(self, start: datetime) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> None:
        self.current += timedelta(**kwargs)


@pytest.fixture
def clock():
    """Clock starting at a fixed moment."""
    return FakeClock(datetime(2025, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def store():
    return SessionStore()


@pytest.fixture
def policy():
    """Default policy: 30 minute window, 5 minute threshold, 24 hour cap."""
    return SessionPolicy()


@pytest.fixture
def service(store, policy, clock):
    """Session service wired to the fake clock."""
    return SessionService(store, policy=policy, clock=clock)
