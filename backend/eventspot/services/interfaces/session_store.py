"""
Session store interface.
Allows swapping where server-side session state lives without touching
the auth routes.
"""

import secrets
from abc import ABC, abstractmethod
from typing import Optional


class SessionStore(ABC):
    """
    Maps opaque session ids to authenticated user ids.

    Implementations:
    - InMemorySessionStore: process-local dict, the default
    - RedisSessionStore: shared across workers, TTL handled by Redis

    Expiry is sliding: every successful `get` renews the session's lifetime.
    """

    def __init__(self, ttl_seconds: int):
        self.ttl_seconds = ttl_seconds

    @staticmethod
    def new_session_id() -> str:
        return secrets.token_urlsafe(32)

    @abstractmethod
    async def create(self, user_id: int) -> str:
        """
        Start a session for a user.

        Returns:
            The new session id, to be sent back as the cookie value
        """
        pass

    @abstractmethod
    async def get(self, session_id: str) -> Optional[int]:
        """
        Resolve a session id and renew its expiry.

        Returns:
            The user id, or None for unknown or expired sessions
        """
        pass

    @abstractmethod
    async def destroy(self, session_id: str) -> None:
        """Forget a session. Unknown ids are ignored."""
        pass
