"""
Pydantic schemas for event-related request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import Field, model_validator

from eventspot.schemas.common import CamelModel


class EventCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1, max_length=1000)
    date: datetime
    price: int = Field(..., ge=0)
    venue_id: int
    category_id: int
    artist_id: Optional[int] = None
    is_featured: bool = False
    is_trending: bool = False
    total_seats: int = Field(..., gt=0, le=1_000_000)
    available_seats: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_inventory(self) -> "EventCreate":
        if self.available_seats is not None and self.available_seats > self.total_seats:
            raise ValueError("availableSeats cannot exceed totalSeats")
        return self


class EventResponse(CamelModel):
    id: int
    title: str
    description: str
    image: str
    date: datetime
    price: int
    venue_id: int
    category_id: int
    artist_id: Optional[int] = None
    is_featured: bool
    is_trending: bool
    total_seats: int
    available_seats: int
