"""
Booking service with concurrency-safe seat reservation.

CONCURRENCY STRATEGY: Per-event serialization + conditional decrement
=====================================================================

Problem:
  Two users book the last 150 of 200 seats simultaneously.
  Both read available_seats=200, both pass the check, both decrement.
  Result: 300 seats sold out of 200. Overbooking.

Solution:
  1. Every booking or cancellation for an event runs while holding that
     event's asyncio lock (InventoryLocks). Inside one process the
     check, the seat assignment, the decrement and the commit form one
     critical section, so the availability check always sees the result
     of the previous booking.

  2. The decrement itself is conditional:
       UPDATE events SET available_seats = available_seats - N, version = version + 1
       WHERE id = :event_id AND available_seats >= N
     If rows_affected == 0, another process took the seats first and the
     booking fails with InsufficientInventoryError. The CHECK constraint
     (available_seats >= 0) is the final safety net.

  The lock is released only after commit, so a waiting booking never reads
  a value that is about to change.
"""

import time
from itertools import islice
from typing import Optional

from sqlalchemy import case, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventspot.models import Booking, Event
from eventspot.models.booking import STATUS_CANCELLED, STATUS_CONFIRMED
from eventspot.schemas.booking import BookingCreate
from eventspot.core.exceptions import InsufficientInventoryError, NotFoundError, ValidationError
from eventspot.core.logging import get_logger
from eventspot.core.metrics import booking_cancellations, booking_latency, record_booking_attempt
from eventspot.services.inventory_locks import InventoryLocks

logger = get_logger(__name__)


async def book_seats(
    db: AsyncSession,
    locks: InventoryLocks,
    user_id: int,
    booking_data: BookingCreate,
) -> Booking:
    """
    Book seats for an event.

    seatNumbers is a preference: when it is unusable (wrong length, repeats,
    outside the venue, or already held) the lowest free seats are assigned.

    Raises:
        NotFoundError: the event does not exist
        InsufficientInventoryError: more seats requested than available
    """
    event_id = booking_data.event_id
    async with locks.for_event(event_id):
        started = time.perf_counter()
        try:
            booking = await _book_locked(db, user_id, booking_data)
        except NotFoundError:
            record_booking_attempt("not_found")
            raise
        except InsufficientInventoryError:
            record_booking_attempt("insufficient")
            raise
        except Exception:
            await db.rollback()
            raise
        finally:
            booking_latency.observe(time.perf_counter() - started)

    record_booking_attempt("success")
    logger.info(
        "booking_created",
        booking_id=booking.id,
        user_id=user_id,
        event_id=event_id,
        seats=booking.number_of_seats,
        total_amount=booking.total_amount,
    )
    return booking


async def _book_locked(db: AsyncSession, user_id: int, booking_data: BookingCreate) -> Booking:
    event_id = booking_data.event_id
    seat_count = booking_data.number_of_seats

    # Step 1: Read current event state, bypassing anything cached in the session
    event = await db.get(Event, event_id, populate_existing=True)
    if event is None:
        raise NotFoundError("Event not found")

    # Step 2: Availability check
    if seat_count > event.available_seats:
        logger.warning(
            "booking_failed_no_seats",
            event_id=event_id,
            requested=seat_count,
            available=event.available_seats,
        )
        raise InsufficientInventoryError(seat_count, event.available_seats)

    # Step 3: Seat assignment and price, fixed at booking time
    seat_numbers = await _assign_seats(db, event, seat_count, booking_data.seat_numbers)
    total_amount = event.price * seat_count

    # Step 4: Conditional decrement
    result = await db.execute(
        update(Event)
        .where(Event.id == event_id, Event.available_seats >= seat_count)
        .values(
            available_seats=Event.available_seats - seat_count,
            version=Event.version + 1,
        )
    )
    if result.rowcount == 0:
        # Another process sold these seats between our read and our write
        await db.rollback()
        logger.warning("booking_failed_lost_race", event_id=event_id, requested=seat_count)
        raise InsufficientInventoryError(seat_count, 0)

    # Step 5: Create booking record and commit before the lock is released
    booking = Booking(
        user_id=user_id,
        event_id=event_id,
        number_of_seats=seat_count,
        total_amount=total_amount,
        status=STATUS_CONFIRMED,
        seat_numbers=seat_numbers,
    )
    db.add(booking)
    await db.commit()
    await db.refresh(booking)
    return booking


async def _taken_seats(db: AsyncSession, event_id: int) -> set[int]:
    result = await db.execute(
        select(Booking.seat_numbers).where(
            Booking.event_id == event_id,
            Booking.status == STATUS_CONFIRMED,
        )
    )
    taken: set[int] = set()
    for seats in result.scalars():
        taken.update(seats or [])
    return taken


async def _assign_seats(db: AsyncSession, event: Event, seat_count: int, requested: list[int]) -> list[int]:
    """
    Honour the client's seat choice when it is usable, else pick the lowest
    free seats. Seat numbers are unique across the confirmed bookings of an
    event, and a usable choice lists exactly seat_count distinct free seats.

    Seats counted as sold without a booking holding them (seeded sales) are
    the highest numbers of the venue and are never handed out.
    """
    taken = await _taken_seats(db, event.id)
    unnumbered = max(event.total_seats - event.available_seats - len(taken), 0)
    last_seat = event.total_seats - unnumbered

    if requested:
        usable = (
            len(requested) == seat_count
            and len(set(requested)) == seat_count
            and all(1 <= seat <= last_seat and seat not in taken for seat in requested)
        )
        if usable:
            return list(requested)
        logger.info("booking_seats_reassigned", event_id=event.id, requested=requested)

    free = (seat for seat in range(1, last_seat + 1) if seat not in taken)
    return list(islice(free, seat_count))


async def cancel_booking(
    db: AsyncSession,
    locks: InventoryLocks,
    booking_id: int,
    user_id: int,
) -> Booking:
    """
    Cancel a booking and release its seats back to the event.
    Seats are restored under the same per-event lock used for booking.
    """
    booking = await get_user_booking(db, booking_id, user_id)
    if booking is None:
        raise NotFoundError("Booking not found")

    async with locks.for_event(booking.event_id):
        # Re-read under the lock: a concurrent cancel may have won
        await db.refresh(booking)
        if booking.status == STATUS_CANCELLED:
            raise ValidationError("Booking is already cancelled")

        restored = Event.available_seats + booking.number_of_seats
        try:
            await db.execute(
                update(Event)
                .where(Event.id == booking.event_id)
                .values(
                    available_seats=case(
                        (restored > Event.total_seats, Event.total_seats),
                        else_=restored,
                    ),
                    version=Event.version + 1,
                )
                .execution_options(synchronize_session=False)
            )
            booking.status = STATUS_CANCELLED
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        await db.refresh(booking)

    booking_cancellations.inc()
    logger.info(
        "booking_cancelled",
        booking_id=booking.id,
        user_id=user_id,
        event_id=booking.event_id,
        seats_restored=booking.number_of_seats,
    )
    return booking


async def get_booking(db: AsyncSession, booking_id: int) -> Optional[Booking]:
    return await db.get(Booking, booking_id)


async def get_user_booking(db: AsyncSession, booking_id: int, user_id: int) -> Optional[Booking]:
    result = await db.execute(
        select(Booking).where(Booking.id == booking_id, Booking.user_id == user_id)
    )
    return result.scalar_one_or_none()


async def list_bookings(db: AsyncSession) -> list[Booking]:
    result = await db.execute(select(Booking).order_by(Booking.id))
    return list(result.scalars().all())


async def get_user_bookings(db: AsyncSession, user_id: int) -> list[Booking]:
    """Get all bookings for a user, newest first, each with its event loaded."""
    result = await db.execute(
        select(Booking)
        .options(selectinload(Booking.event))
        .where(Booking.user_id == user_id)
        .order_by(Booking.booking_date.desc(), Booking.id.desc())
    )
    return list(result.scalars().all())
