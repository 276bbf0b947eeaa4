"""
Accessors for the static reference data: categories, venues and artists.
"""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventspot.models import Artist, Category, Venue


async def list_categories(db: AsyncSession) -> list[Category]:
    result = await db.execute(select(Category).order_by(Category.id))
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: int) -> Optional[Category]:
    return await db.get(Category, category_id)


async def create_category(db: AsyncSession, **fields) -> Category:
    category = Category(**fields)
    db.add(category)
    await db.flush()
    return category


async def list_venues(db: AsyncSession) -> list[Venue]:
    result = await db.execute(select(Venue).order_by(Venue.id))
    return list(result.scalars().all())


async def get_venue(db: AsyncSession, venue_id: int) -> Optional[Venue]:
    return await db.get(Venue, venue_id)


async def create_venue(db: AsyncSession, **fields) -> Venue:
    venue = Venue(**fields)
    db.add(venue)
    await db.flush()
    return venue


async def list_artists(db: AsyncSession) -> list[Artist]:
    result = await db.execute(select(Artist).order_by(Artist.id))
    return list(result.scalars().all())


async def get_artist(db: AsyncSession, artist_id: int) -> Optional[Artist]:
    return await db.get(Artist, artist_id)


async def create_artist(db: AsyncSession, **fields) -> Artist:
    artist = Artist(**fields)
    db.add(artist)
    await db.flush()
    return artist
