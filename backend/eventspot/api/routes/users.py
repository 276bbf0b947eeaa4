"""
User profile endpoint.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventspot.db.session import get_db
from eventspot.schemas.user import UserResponse
from eventspot.services.user_service import get_user
from eventspot.core.exceptions import UnauthorizedError
from eventspot.core.sessions import get_current_user_id

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/profile", response_model=UserResponse)
async def profile(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    user = await get_user(db, user_id)
    if user is None:
        # Session outlived its user
        raise UnauthorizedError()
    return user
