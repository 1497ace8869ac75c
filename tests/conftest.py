from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest

from scoreguard.anticheat import AntiCheatService, SessionStore
from scoreguard.config import AntiCheatConfig


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@asynccontextmanager
async def _yielding(value):
    yield value


class FakeConnection:
    def __init__(self, row=None):
        self.fetchrow = AsyncMock(return_value=row)
        self.fetch = AsyncMock(return_value=[])
        self.execute = AsyncMock(return_value="DELETE 1")
        self.executemany = AsyncMock()

    def transaction(self):
        return _yielding(None)


class FakePool:
    def __init__(self, conn):
        self.conn = conn

    def acquire(self):
        return _yielding(self.conn)


class FakeDatabase:
    """Stands in for DatabaseConnection: a pool plus the query semaphore."""

    def __init__(self, conn=None):
        self.conn = conn or FakeConnection()
        self.pool = FakePool(self.conn)
        self.held = 0

    async def acquire_connection_semaphore(self):
        self.held += 1

    def release_connection_semaphore(self):
        self.held -= 1


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def config():
    return AntiCheatConfig(checksum_secret="test-secret")


@pytest.fixture()
def sessions(clock, config):
    return SessionStore(timeout_ms=config.session_timeout_ms, clock=clock)


@pytest.fixture()
def service(config, sessions):
    return AntiCheatService(config, sessions=sessions)
