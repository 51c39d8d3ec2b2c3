"""Shared fixtures: a controllable clock and ledgers backed by memory."""

from datetime import datetime, timedelta, timezone

import pytest

from debt_tracker.ledger.recorder import TransactionRecorder
from debt_tracker.ledger.store import IdGenerator, LedgerStore
from debt_tracker.orchestrator import LedgerSession
from debt_tracker.services.storage import InMemoryStorage, SnapshotRepository


class FixedClock:
    """Clock that only moves when a test moves it."""

    def __init__(self, moment: datetime):
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

    def advance(self, **kwargs) -> None:
        self.moment = self.moment + timedelta(**kwargs)

    def set(self, moment: datetime) -> None:
        self.moment = moment


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 5, 20, 10, 30, tzinfo=timezone.utc))


@pytest.fixture
def store(clock):
    return LedgerStore(id_generator=IdGenerator(clock))


@pytest.fixture
def recorder(store, clock):
    return TransactionRecorder(store, clock=clock)


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def repository(storage):
    return SnapshotRepository(storage)


@pytest.fixture
def session(repository, clock):
    return LedgerSession.open("alice", repository, clock=clock)
