"""
Per-event inventory locks.

Booking and cancellation for one event run one at a time inside this
process; different events never wait on each other. The conditional UPDATE
in booking_service is what protects inventory across processes.
"""

import asyncio
import weakref


class InventoryLocks:
    """
    Registry of asyncio locks keyed by event id.

    Locks are held weakly: a lock disappears once no coroutine references
    it, so the registry does not grow with the number of events ever booked.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[int, asyncio.Lock]" = weakref.WeakValueDictionary()

    def for_event(self, event_id: int) -> asyncio.Lock:
        lock = self._locks.get(event_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[event_id] = lock
        return lock

    def __len__(self) -> int:
        return len(self._locks)


_locks = InventoryLocks()


def get_inventory_locks() -> InventoryLocks:
    """FastAPI dependency returning the process-wide lock registry."""
    return _locks
