"""
Read-only endpoints for categories, venues and artists.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventspot.db.session import get_db
from eventspot.schemas.catalog import CategoryResponse, VenueResponse, ArtistResponse
from eventspot.services import catalog_service
from eventspot.core.exceptions import NotFoundError

router = APIRouter(tags=["Catalog"])


@router.get("/categories", response_model=list[CategoryResponse])
async def list_categories(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_categories(db)


@router.get("/venues", response_model=list[VenueResponse])
async def list_venues(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_venues(db)


@router.get("/venues/{venue_id}", response_model=VenueResponse)
async def get_venue(venue_id: int, db: AsyncSession = Depends(get_db)):
    venue = await catalog_service.get_venue(db, venue_id)
    if venue is None:
        raise NotFoundError("Venue not found")
    return venue


@router.get("/artists", response_model=list[ArtistResponse])
async def list_artists(db: AsyncSession = Depends(get_db)):
    return await catalog_service.list_artists(db)


@router.get("/artists/{artist_id}", response_model=ArtistResponse)
async def get_artist(artist_id: int, db: AsyncSession = Depends(get_db)):
    artist = await catalog_service.get_artist(db, artist_id)
    if artist is None:
        raise NotFoundError("Artist not found")
    return artist
