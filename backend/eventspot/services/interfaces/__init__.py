"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .session_store import SessionStore
from .memory_session_store import InMemorySessionStore

__all__ = ['SessionStore', 'InMemorySessionStore']
