"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from pydantic import Field

from eventspot.schemas.common import CamelModel
from eventspot.schemas.event import EventResponse


class BookingCreate(CamelModel):
    event_id: int
    number_of_seats: int = Field(..., ge=1)
    # Empty means "allocate for me"
    seat_numbers: list[int] = Field(default_factory=list)


class BookingResponse(CamelModel):
    id: int
    user_id: int
    event_id: int
    booking_date: datetime
    number_of_seats: int
    total_amount: int
    status: str
    seat_numbers: list[int]


class BookingWithEvent(BookingResponse):
    event: EventResponse
