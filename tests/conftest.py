# Area: Shared Tests
"""Shared fixtures: fast timings, controllable clock, stores."""

import asyncio

import pytest

from victordle._store import InMemoryDocumentStore, SqliteDocumentStore
from victordle.config import EngineConfig


class FakeClock:
    """Manually advanced clock (epoch seconds)."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def fast_config(**overrides) -> EngineConfig:
    """Config with every protocol delay shrunk to a few milliseconds."""
    values = {
        "heartbeat_interval_seconds": 0.05,
        "staleness_threshold_seconds": 5.0,
        "listener_settle_seconds": 0.01,
        "min_join_settle_seconds": 0.05,
        "other_then_self_delay_seconds": 0.01,
        "cleanup_grace_seconds": 0.05,
        "turn_seconds": 5.0,
        "turn_tick_seconds": 0.5,
        "log_file": None,
    }
    values.update(overrides)
    return EngineConfig(**values)


async def wait_until(predicate, timeout: float = 3.0, interval: float = 0.01) -> None:
    """Poll ``predicate`` until true; fail the test on timeout."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(interval)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def config():
    return fast_config()


@pytest.fixture
def memory_store(clock):
    return InMemoryDocumentStore(clock=clock)


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path, clock):
    """Each store test runs against both backends."""
    if request.param == "memory":
        return InMemoryDocumentStore(clock=clock)
    return SqliteDocumentStore(str(tmp_path / "store.db"), clock=clock)
