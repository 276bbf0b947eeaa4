"""
Tests for the session stores and the inventory lock registry.
"""

import asyncio
import gc

import pytest

from eventspot.services.interfaces.memory_session_store import InMemorySessionStore
from eventspot.services.inventory_locks import InventoryLocks


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store(clock) -> InMemorySessionStore:
    return InMemorySessionStore(ttl_seconds=60, clock=clock)


@pytest.mark.asyncio
async def test_create_and_get(store):
    session_id = await store.create(42)
    assert await store.get(session_id) == 42
    assert len(store) == 1


@pytest.mark.asyncio
async def test_session_ids_are_unique_and_opaque(store):
    first = await store.create(1)
    second = await store.create(1)
    assert first != second
    assert len(first) >= 32


@pytest.mark.asyncio
async def test_unknown_session(store):
    assert await store.get("does-not-exist") is None


@pytest.mark.asyncio
async def test_session_expires(store, clock):
    session_id = await store.create(7)
    clock.advance(61)
    assert await store.get(session_id) is None
    assert len(store) == 0


@pytest.mark.asyncio
async def test_lookup_extends_session(store, clock):
    """Each successful lookup restarts the expiry window."""
    session_id = await store.create(7)
    for _ in range(3):
        clock.advance(45)
        assert await store.get(session_id) == 7
    clock.advance(61)
    assert await store.get(session_id) is None


@pytest.mark.asyncio
async def test_destroy(store):
    session_id = await store.create(3)
    await store.destroy(session_id)
    assert await store.get(session_id) is None
    # Destroying twice is harmless
    await store.destroy(session_id)


@pytest.mark.asyncio
async def test_create_prunes_expired(store, clock):
    await store.create(1)
    await store.create(2)
    clock.advance(120)
    await store.create(3)
    assert len(store) == 1


@pytest.mark.asyncio
async def test_same_event_shares_lock():
    locks = InventoryLocks()
    assert locks.for_event(1) is locks.for_event(1)
    assert locks.for_event(1) is not locks.for_event(2)


@pytest.mark.asyncio
async def test_lock_serializes_one_event():
    """Critical sections for one event never interleave."""
    locks = InventoryLocks()
    trace = []

    async def critical(name: str):
        async with locks.for_event(1):
            trace.append(f"{name}-in")
            await asyncio.sleep(0.01)
            trace.append(f"{name}-out")

    await asyncio.gather(critical("a"), critical("b"))
    assert trace in (
        ["a-in", "a-out", "b-in", "b-out"],
        ["b-in", "b-out", "a-in", "a-out"],
    )


@pytest.mark.asyncio
async def test_unused_locks_are_released():
    locks = InventoryLocks()
    async with locks.for_event(5):
        assert len(locks) == 1
    gc.collect()
    assert len(locks) == 0
