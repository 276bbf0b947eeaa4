"""
Session store factory.
Configures where server-side session state is kept.
"""

from typing import Optional

from eventspot.core.config import get_settings
from eventspot.core.logging import get_logger
from eventspot.infrastructure.redis_client import get_redis
from eventspot.services.interfaces.session_store import SessionStore
from eventspot.services.interfaces.memory_session_store import InMemorySessionStore
from eventspot.services.redis_session_store import RedisSessionStore

logger = get_logger(__name__)
settings = get_settings()


async def build_session_store() -> SessionStore:
    """
    Pick the store for this process.

    - REDIS_ENABLED and Redis reachable: RedisSessionStore
    - otherwise: InMemorySessionStore
    """
    client = await get_redis()
    if client is not None:
        logger.info("session_store_selected", store="redis")
        return RedisSessionStore(client, settings.SESSION_TTL_SECONDS)
    logger.info("session_store_selected", store="memory")
    return InMemorySessionStore(settings.SESSION_TTL_SECONDS)


# Singleton instance
_store: Optional[SessionStore] = None


async def get_session_store() -> SessionStore:
    """FastAPI dependency returning the process-wide session store."""
    global _store
    if _store is None:
        _store = await build_session_store()
    return _store


def reset_session_store() -> None:
    """Drop the singleton so the next request builds a fresh store."""
    global _store
    _store = None
