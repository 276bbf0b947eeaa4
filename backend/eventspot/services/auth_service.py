"""
Authentication service handling user registration and login.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from eventspot.models import User
from eventspot.schemas.user import UserCreate, UserLogin
from eventspot.core.exceptions import ConflictError, UnauthorizedError
from eventspot.core.security import hash_password, verify_password
from eventspot.core.logging import get_logger
from eventspot.services.user_service import create_user, get_user_by_email, get_user_by_username

logger = get_logger(__name__)


async def register_user(db: AsyncSession, user_data: UserCreate) -> User:
    """
    Register a new user with a hashed password.
    Raises ConflictError if the username or email already exists.
    """
    if await get_user_by_username(db, user_data.username):
        logger.warning("registration_failed", reason="username_exists", username=user_data.username)
        raise ConflictError("Username already exists")

    if await get_user_by_email(db, user_data.email):
        logger.warning("registration_failed", reason="email_exists", email=user_data.email)
        raise ConflictError("Email already exists")

    try:
        user = await create_user(
            db,
            username=user_data.username,
            password=hash_password(user_data.password),
            name=user_data.name,
            email=user_data.email,
            phone=user_data.phone,
            city=user_data.city,
        )
        # Commit here so the session cookie is never issued for an uncommitted user
        await db.commit()
    except IntegrityError:
        # A concurrent registration won the race between our check and insert
        await db.rollback()
        logger.warning("registration_failed", reason="unique_violation", username=user_data.username)
        raise ConflictError("Username or email already exists")

    logger.info("user_registered", user_id=user.id, username=user.username)
    return user


async def authenticate_user(db: AsyncSession, login_data: UserLogin) -> User:
    """
    Check credentials and return the user.
    Raises UnauthorizedError if the username is unknown or the password is wrong.
    """
    user = await get_user_by_username(db, login_data.username)

    if not user or not verify_password(login_data.password, user.password):
        logger.warning("login_failed", username=login_data.username)
        raise UnauthorizedError("Invalid username or password")

    logger.info("user_logged_in", user_id=user.id)
    return user
