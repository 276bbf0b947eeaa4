"""
Per-request session context.

The session cookie carries only an opaque id. `get_session_context` resolves
it against the session store and hands routes an explicit `SessionContext`;
routes that require a user depend on `get_current_user_id` instead.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request, Response

from eventspot.core.config import get_settings
from eventspot.core.exceptions import UnauthorizedError
from eventspot.core.metrics import sessions_created
from eventspot.services.interfaces.session_store import SessionStore
from eventspot.services.session_factory import get_session_store

settings = get_settings()


@dataclass(frozen=True)
class SessionContext:
    session_id: Optional[str] = None
    user_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


async def get_session_context(
    request: Request,
    store: SessionStore = Depends(get_session_store),
) -> SessionContext:
    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not session_id:
        return SessionContext()
    user_id = await store.get(session_id)
    if user_id is None:
        return SessionContext()
    return SessionContext(session_id=session_id, user_id=user_id)


async def get_current_user_id(
    response: Response,
    session: SessionContext = Depends(get_session_context),
) -> int:
    if not session.is_authenticated:
        raise UnauthorizedError()
    # Sliding expiry: the store renewed the session, renew the cookie too
    _set_session_cookie(response, session.session_id)
    return session.user_id


def _set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=session_id,
        max_age=settings.SESSION_TTL_SECONDS,
        httponly=True,
        samesite="lax",
        secure=settings.ENVIRONMENT == "production",
    )


async def start_session(
    response: Response,
    store: SessionStore,
    user_id: int,
    previous: SessionContext,
) -> str:
    """Bind a user to a fresh session id, dropping any previous session."""
    if previous.session_id:
        await store.destroy(previous.session_id)
    session_id = await store.create(user_id)
    sessions_created.inc()
    _set_session_cookie(response, session_id)
    return session_id


async def end_session(response: Response, store: SessionStore, session: SessionContext) -> None:
    if session.session_id:
        await store.destroy(session.session_id)
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, httponly=True, samesite="lax")
