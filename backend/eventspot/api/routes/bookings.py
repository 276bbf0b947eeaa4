"""
Booking endpoints with concurrency-safe seat reservation.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from eventspot.db.session import get_db
from eventspot.schemas.booking import BookingCreate, BookingResponse, BookingWithEvent
from eventspot.services.booking_service import book_seats, cancel_booking, get_user_bookings
from eventspot.services.cache_service import invalidate_event_cache
from eventspot.services.inventory_locks import InventoryLocks, get_inventory_locks
from eventspot.core.sessions import get_current_user_id

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: InventoryLocks = Depends(get_inventory_locks),
):
    """
    Book seats for an event.

    Bookings for the same event are serialized and the seat decrement is
    conditional, so concurrent requests can never oversell an event.
    Omit seatNumbers to have the lowest free seats assigned.
    """
    booking = await book_seats(db, locks, user_id, booking_data)
    # Event lists embed available seat counts
    await invalidate_event_cache()
    return booking


@router.get("/user", response_model=list[BookingWithEvent])
async def list_user_bookings(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Get all bookings of the logged-in user, each with its event."""
    return await get_user_bookings(db, user_id)


@router.delete("/{booking_id}", response_model=BookingResponse)
async def cancel_booking_endpoint(
    booking_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
    locks: InventoryLocks = Depends(get_inventory_locks),
):
    """Cancel a booking and release its seats back to the event."""
    booking = await cancel_booking(db, locks, booking_id, user_id)
    await invalidate_event_cache()
    return booking
