"""
Response schemas for the static reference data.
"""

from typing import Optional

from eventspot.schemas.common import CamelModel


class CategoryResponse(CamelModel):
    id: int
    name: str
    icon: str
    color: str


class VenueResponse(CamelModel):
    id: int
    name: str
    address: str
    city: str
    state: str
    capacity: int
    image: str


class ArtistResponse(CamelModel):
    id: int
    name: str
    type: str
    image: str
    bio: Optional[str] = None
