"""
Event endpoints with Redis caching on list operations.
"""

from typing import Any, Awaitable, Callable, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventspot.db.session import get_db
from eventspot.models import Event
from eventspot.schemas.event import EventCreate, EventResponse
from eventspot.services.event_service import (
    create_event,
    get_event,
    list_events,
    list_events_by_category,
    list_featured_events,
    list_trending_events,
)
from eventspot.services.cache_service import (
    category_scope,
    get_cached_events,
    set_cached_events,
    invalidate_event_cache,
)
from eventspot.core.exceptions import NotFoundError
from eventspot.core.sessions import get_current_user_id
from eventspot.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/events", tags=["Events"])


async def _cached_list(
    scope: str,
    load: Callable[[], Awaitable[list[Event]]],
) -> list[dict[str, Any]]:
    """
    Serve an event list from cache, falling back to the database.
    Cache is invalidated when events are created or seats change.
    """
    cached = await get_cached_events(scope)
    if cached is not None:
        logger.info("events_list_cache_hit", scope=scope)
        return cached

    events = await load()
    data = [EventResponse.model_validate(e).model_dump(mode="json", by_alias=True) for e in events]
    await set_cached_events(scope, data)
    return data


@router.get("", response_model=list[EventResponse])
async def list_events_endpoint(
    category_id: Optional[int] = Query(None, alias="categoryId"),
    db: AsyncSession = Depends(get_db),
):
    """List all events, or only those of one category."""
    if category_id is not None:
        return await _cached_list(
            category_scope(category_id),
            lambda: list_events_by_category(db, category_id),
        )
    return await _cached_list("all", lambda: list_events(db))


@router.get("/featured", response_model=list[EventResponse])
async def list_featured_endpoint(db: AsyncSession = Depends(get_db)):
    return await _cached_list("featured", lambda: list_featured_events(db))


@router.get("/trending", response_model=list[EventResponse])
async def list_trending_endpoint(db: AsyncSession = Depends(get_db)):
    return await _cached_list("trending", lambda: list_trending_events(db))


@router.get("/{event_id}", response_model=EventResponse)
async def get_event_endpoint(
    event_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Get a single event by ID. Not cached (needs real-time seat counts)."""
    event = await get_event(db, event_id)
    if event is None:
        raise NotFoundError("Event not found")
    return event


@router.post("", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    event_data: EventCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Create a new event. Requires authentication."""
    event = await create_event(db, event_data)
    await db.commit()
    await invalidate_event_cache()
    logger.info("event_published", event_id=event.id, user_id=user_id)
    return event
