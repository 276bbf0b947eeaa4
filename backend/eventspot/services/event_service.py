"""
Event service handling CRUD operations.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventspot.models import Artist, Category, Event, Venue
from eventspot.schemas.event import EventCreate
from eventspot.core.exceptions import NotFoundError, ValidationError
from eventspot.core.logging import get_logger

logger = get_logger(__name__)


async def create_event(db: AsyncSession, event_data: EventCreate) -> Event:
    """
    Create a new event. Unless given, all seats start out available.
    The referenced venue, category and artist must exist.
    """
    event_date = event_data.date
    if event_date.tzinfo is None:
        event_date = event_date.replace(tzinfo=timezone.utc)
    if event_date <= datetime.now(timezone.utc):
        raise ValidationError("Event date must be in the future")

    if await db.get(Venue, event_data.venue_id) is None:
        raise NotFoundError("Venue not found")
    if await db.get(Category, event_data.category_id) is None:
        raise NotFoundError("Category not found")
    if event_data.artist_id is not None and await db.get(Artist, event_data.artist_id) is None:
        raise NotFoundError("Artist not found")

    available = event_data.available_seats
    event = Event(
        title=event_data.title,
        description=event_data.description,
        image=event_data.image,
        date=event_date,
        price=event_data.price,
        venue_id=event_data.venue_id,
        category_id=event_data.category_id,
        artist_id=event_data.artist_id,
        is_featured=event_data.is_featured,
        is_trending=event_data.is_trending,
        total_seats=event_data.total_seats,
        available_seats=event_data.total_seats if available is None else available,
    )
    db.add(event)
    await db.flush()
    await db.refresh(event)

    logger.info("event_created", event_id=event.id, title=event.title, seats=event.total_seats)
    return event


async def get_event(db: AsyncSession, event_id: int) -> Optional[Event]:
    return await db.get(Event, event_id)


async def list_events(db: AsyncSession) -> list[Event]:
    result = await db.execute(select(Event).order_by(Event.id))
    return list(result.scalars().all())


async def list_featured_events(db: AsyncSession) -> list[Event]:
    result = await db.execute(select(Event).where(Event.is_featured.is_(True)).order_by(Event.id))
    return list(result.scalars().all())


async def list_trending_events(db: AsyncSession) -> list[Event]:
    result = await db.execute(select(Event).where(Event.is_trending.is_(True)).order_by(Event.id))
    return list(result.scalars().all())


async def list_events_by_category(db: AsyncSession, category_id: int) -> list[Event]:
    """Uses the ix_events_category_id index."""
    result = await db.execute(
        select(Event).where(Event.category_id == category_id).order_by(Event.id)
    )
    return list(result.scalars().all())
