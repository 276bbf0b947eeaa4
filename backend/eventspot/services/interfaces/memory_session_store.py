"""
In-memory session store - the default for a single worker process.
"""

import time
from dataclasses import dataclass
from typing import Callable, Optional

from eventspot.core.metrics import active_sessions
from eventspot.services.interfaces.session_store import SessionStore


@dataclass
class _Entry:
    user_id: int
    expires_at: float


class InMemorySessionStore(SessionStore):
    """
    Sessions held in a dict owned by this store.

    No method awaits while touching the dict, so each call is atomic with
    respect to other requests on the event loop. Expired entries are pruned
    lazily on lookup and on every create.
    """

    def __init__(self, ttl_seconds: int, clock: Callable[[], float] = time.monotonic):
        super().__init__(ttl_seconds)
        self._clock = clock
        self._sessions: dict[str, _Entry] = {}

    async def create(self, user_id: int) -> str:
        self._prune()
        session_id = self.new_session_id()
        self._sessions[session_id] = _Entry(user_id, self._clock() + self.ttl_seconds)
        active_sessions.set(len(self._sessions))
        return session_id

    async def get(self, session_id: str) -> Optional[int]:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None
        now = self._clock()
        if entry.expires_at <= now:
            del self._sessions[session_id]
            active_sessions.set(len(self._sessions))
            return None
        entry.expires_at = now + self.ttl_seconds
        return entry.user_id

    async def destroy(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)
        active_sessions.set(len(self._sessions))

    def __len__(self) -> int:
        return len(self._sessions)

    def _prune(self) -> None:
        now = self._clock()
        expired = [sid for sid, entry in self._sessions.items() if entry.expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
