"""
Redis-backed session store.
Implements SessionStore using Redis key expiry for the sliding lifetime.

Use when several worker processes serve the same users: a session created
by one worker must be visible to the others, which a process-local dict
cannot offer.
"""

from typing import Optional

import redis.asyncio as redis

from eventspot.services.interfaces.session_store import SessionStore

KEY_PREFIX = "session:"


class RedisSessionStore(SessionStore):

    def __init__(self, client: redis.Redis, ttl_seconds: int):
        super().__init__(ttl_seconds)
        self.redis = client

    @staticmethod
    def _key(session_id: str) -> str:
        return f"{KEY_PREFIX}{session_id}"

    async def create(self, user_id: int) -> str:
        session_id = self.new_session_id()
        await self.redis.set(self._key(session_id), user_id, ex=self.ttl_seconds)
        return session_id

    async def get(self, session_id: str) -> Optional[int]:
        # GETEX reads and renews in one round trip
        value = await self.redis.getex(self._key(session_id), ex=self.ttl_seconds)
        if value is None:
            return None
        return int(value)

    async def destroy(self, session_id: str) -> None:
        await self.redis.delete(self._key(session_id))
