"""
Authentication endpoints: register, login, logout and session status.
"""

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventspot.db.session import get_db
from eventspot.schemas.user import UserCreate, UserLogin, UserResponse, UserEnvelope, AuthStatus
from eventspot.schemas.common import MessageResponse
from eventspot.services.auth_service import register_user, authenticate_user
from eventspot.services.user_service import get_user
from eventspot.services.interfaces.session_store import SessionStore
from eventspot.services.session_factory import get_session_store
from eventspot.core.sessions import SessionContext, get_session_context, start_session, end_session
from eventspot.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/register", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    response: Response,
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    session: SessionContext = Depends(get_session_context),
):
    """Register a new account and log it in straight away."""
    user = await register_user(db, user_data)
    await start_session(response, store, user.id, session)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("/login", response_model=UserEnvelope)
async def login(
    login_data: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db),
    store: SessionStore = Depends(get_session_store),
    session: SessionContext = Depends(get_session_context),
):
    """Check credentials and start a session (the cookie is set on the response)."""
    user = await authenticate_user(db, login_data)
    await start_session(response, store, user.id, session)
    return UserEnvelope(user=UserResponse.model_validate(user))


@router.post("/logout", response_model=MessageResponse)
async def logout(
    response: Response,
    store: SessionStore = Depends(get_session_store),
    session: SessionContext = Depends(get_session_context),
):
    await end_session(response, store, session)
    if session.is_authenticated:
        logger.info("user_logged_out", user_id=session.user_id)
    return MessageResponse(message="Logged out successfully")


@router.get("/status", response_model=AuthStatus)
async def auth_status(
    session: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_db),
):
    """Report whether the caller's cookie maps to a live session."""
    if session.is_authenticated:
        user = await get_user(db, session.user_id)
        if user is not None:
            return AuthStatus(is_authenticated=True, user=UserResponse.model_validate(user))
    return AuthStatus(is_authenticated=False)
