"""
Tests for booking endpoints including the concurrency guarantees.
"""

import asyncio

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select, update

from eventspot.models import Booking, Event
from eventspot.services.booking_service import get_booking, list_bookings


async def _available(session_factory, event_id: int) -> int:
    async with session_factory() as session:
        event = await session.get(Event, event_id)
        return event.available_seats


async def _booking_count(session_factory) -> int:
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(Booking))).scalar()


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, logged_in, test_event, session_factory):
    """3 seats at 800 each: 2400 total, seats 1-3, 197 left."""
    response = await client.post("/api/bookings", json={
        "eventId": test_event.id,
        "numberOfSeats": 3,
    })
    assert response.status_code == 201
    data = response.json()
    assert data["userId"] == logged_in.id
    assert data["eventId"] == test_event.id
    assert data["numberOfSeats"] == 3
    assert data["totalAmount"] == 2400
    assert data["status"] == "confirmed"
    assert data["seatNumbers"] == [1, 2, 3]
    assert "bookingDate" in data

    assert await _available(session_factory, test_event.id) == 197

    event = (await client.get(f"/api/events/{test_event.id}")).json()
    assert event["availableSeats"] == 197


@pytest.mark.asyncio
async def test_booking_requires_auth(client: AsyncClient, test_event, session_factory):
    response = await client.post("/api/bookings", json={
        "eventId": test_event.id,
        "numberOfSeats": 1,
    })
    assert response.status_code == 401
    assert await _available(session_factory, test_event.id) == 200


@pytest.mark.asyncio
async def test_booking_insufficient_seats(client: AsyncClient, logged_in, test_event, session_factory):
    """Asking for more than available fails and changes nothing."""
    response = await client.post("/api/bookings", json={
        "eventId": test_event.id,
        "numberOfSeats": 201,
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Not enough seats available"
    assert await _available(session_factory, test_event.id) == 200
    assert await _booking_count(session_factory) == 0


@pytest.mark.asyncio
async def test_booking_all_remaining_seats(client: AsyncClient, logged_in, small_event, session_factory):
    response = await client.post("/api/bookings", json={
        "eventId": small_event.id,
        "numberOfSeats": 5,
    })
    assert response.status_code == 201
    assert await _available(session_factory, small_event.id) == 0


@pytest.mark.asyncio
async def test_booking_sold_out(client: AsyncClient, logged_in, sold_out_event):
    response = await client.post("/api/bookings", json={
        "eventId": sold_out_event.id,
        "numberOfSeats": 1,
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Not enough seats available"


@pytest.mark.asyncio
async def test_booking_event_not_found(client: AsyncClient, logged_in):
    response = await client.post("/api/bookings", json={
        "eventId": 99999,
        "numberOfSeats": 1,
    })
    assert response.status_code == 404
    assert response.json()["message"] == "Event not found"


@pytest.mark.asyncio
async def test_booking_zero_seats(client: AsyncClient, logged_in, test_event):
    response = await client.post("/api/bookings", json={
        "eventId": test_event.id,
        "numberOfSeats": 0,
    })
    assert response.status_code == 400
    assert response.json()["message"] == "Invalid input data"


@pytest.mark.asyncio
async def test_booking_chosen_seats(client: AsyncClient, logged_in, small_event):
    response = await client.post("/api/bookings", json={
        "eventId": small_event.id,
        "numberOfSeats": 2,
        "seatNumbers": [4, 2],
    })
    assert response.status_code == 201
    assert response.json()["seatNumbers"] == [4, 2]

    # Auto-assignment skips the seats already held
    response = await client.post("/api/bookings", json={
        "eventId": small_event.id,
        "numberOfSeats": 2,
    })
    assert response.json()["seatNumbers"] == [1, 3]


@pytest.mark.asyncio
async def test_booking_taken_seats_are_reassigned(client: AsyncClient, logged_in, test_event, session_factory):
    """The web client always asks for seats 1..N; later bookings still succeed."""
    payload = {"eventId": test_event.id, "numberOfSeats": 2, "seatNumbers": [1, 2]}
    first = await client.post("/api/bookings", json=payload)
    assert first.status_code == 201
    assert first.json()["seatNumbers"] == [1, 2]

    second = await client.post("/api/bookings", json=payload)
    assert second.status_code == 201
    assert second.json()["seatNumbers"] == [3, 4]
    assert await _available(session_factory, test_event.id) == 196


@pytest.mark.asyncio
async def test_booking_partly_taken_seats(client: AsyncClient, logged_in, small_event, session_factory):
    await client.post("/api/bookings", json={
        "eventId": small_event.id,
        "numberOfSeats": 2,
        "seatNumbers": [1, 2],
    })
    response = await client.post("/api/bookings", json={
        "eventId": small_event.id,
        "numberOfSeats": 2,
        "seatNumbers": [2, 3],
    })
    assert response.status_code == 201
    assert response.json()["seatNumbers"] == [3, 4]
    assert await _available(session_factory, small_event.id) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("seats", [[1], [1, 1], [0, 1], [5, 6]])
async def test_booking_unusable_seat_numbers(client: AsyncClient, logged_in, small_event, seats):
    """Wrong length, repeats or seats outside the venue fall back to the lowest free seats."""
    response = await client.post("/api/bookings", json={
        "eventId": small_event.id,
        "numberOfSeats": 2,
        "seatNumbers": seats,
    })
    assert response.status_code == 201
    assert response.json()["seatNumbers"] == [1, 2]


@pytest.mark.asyncio
async def test_user_bookings(client: AsyncClient, logged_in, test_event, small_event):
    """Lists the user's bookings newest first, each with its event."""
    await client.post("/api/bookings", json={"eventId": test_event.id, "numberOfSeats": 1})
    await client.post("/api/bookings", json={"eventId": small_event.id, "numberOfSeats": 2})

    response = await client.get("/api/bookings/user")
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 2
    assert data[0]["event"]["id"] == small_event.id
    assert data[0]["event"]["title"] == "Intimate Set"
    assert data[1]["event"]["id"] == test_event.id
    assert data[1]["event"]["availableSeats"] == 199


@pytest.mark.asyncio
async def test_user_bookings_empty(client: AsyncClient, logged_in):
    response = await client.get("/api/bookings/user")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_user_bookings_requires_auth(client: AsyncClient):
    response = await client.get("/api/bookings/user")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_cancel_booking(client: AsyncClient, logged_in, test_event, session_factory):
    """Cancelling returns the seats; a second cancel is rejected."""
    booking = (await client.post("/api/bookings", json={
        "eventId": test_event.id,
        "numberOfSeats": 3,
    })).json()
    assert await _available(session_factory, test_event.id) == 197

    response = await client.delete(f"/api/bookings/{booking['id']}")
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"
    assert await _available(session_factory, test_event.id) == 200

    again = await client.delete(f"/api/bookings/{booking['id']}")
    assert again.status_code == 400
    assert again.json()["message"] == "Booking is already cancelled"
    assert await _available(session_factory, test_event.id) == 200


@pytest.mark.asyncio
async def test_cancelled_seats_can_be_rebooked(client: AsyncClient, logged_in, small_event):
    booking = (await client.post("/api/bookings", json={
        "eventId": small_event.id,
        "numberOfSeats": 1,
        "seatNumbers": [3],
    })).json()
    await client.delete(f"/api/bookings/{booking['id']}")

    response = await client.post("/api/bookings", json={
        "eventId": small_event.id,
        "numberOfSeats": 1,
        "seatNumbers": [3],
    })
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_cancel_unknown_booking(client: AsyncClient, logged_in):
    response = await client.delete("/api/bookings/99999")
    assert response.status_code == 404
    assert response.json()["message"] == "Booking not found"


@pytest.mark.asyncio
async def test_cancel_other_users_booking(client: AsyncClient, logged_in, test_event):
    """Another user's booking is reported as not found."""
    booking = (await client.post("/api/bookings", json={
        "eventId": test_event.id,
        "numberOfSeats": 1,
    })).json()
    await client.post("/api/auth/logout")
    await client.post("/api/auth/register", json={
        "username": "otheruser",
        "password": "otherpassword",
        "name": "Other User",
        "email": "other@example.com",
    })

    response = await client.delete(f"/api/bookings/{booking['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_concurrent_bookings_no_overbooking(client: AsyncClient, logged_in, test_event, session_factory):
    """
    Two simultaneous 150-seat bookings against 200 available seats:
    exactly one succeeds and 50 seats remain.
    """
    payload = {"eventId": test_event.id, "numberOfSeats": 150}
    r1, r2 = await asyncio.gather(
        client.post("/api/bookings", json=payload),
        client.post("/api/bookings", json=payload),
    )

    assert sorted([r1.status_code, r2.status_code]) == [201, 400]
    failed = r1 if r1.status_code == 400 else r2
    assert failed.json()["message"] == "Not enough seats available"

    assert await _available(session_factory, test_event.id) == 50
    assert await _booking_count(session_factory) == 1


@pytest.mark.asyncio
async def test_many_concurrent_small_bookings(client: AsyncClient, logged_in, small_event, session_factory):
    """Ten one-seat bookings for five seats: five win, seats never repeat."""
    payload = {"eventId": small_event.id, "numberOfSeats": 1}
    responses = await asyncio.gather(*[
        client.post("/api/bookings", json=payload) for _ in range(10)
    ])

    won = [r for r in responses if r.status_code == 201]
    assert len(won) == 5
    assert all(r.status_code == 400 for r in responses if r.status_code != 201)
    seats = sorted(r.json()["seatNumbers"][0] for r in won)
    assert seats == [1, 2, 3, 4, 5]
    assert await _available(session_factory, small_event.id) == 0


@pytest.mark.asyncio
async def test_rejected_bookings_do_not_undo_others(
    client: AsyncClient, logged_in, test_event, sold_out_event, session_factory
):
    """Failing requests on one event interleaved with bookings on another."""
    good = {"eventId": test_event.id, "numberOfSeats": 1}
    bad = {"eventId": sold_out_event.id, "numberOfSeats": 1}
    requests = []
    for _ in range(30):
        requests.append(client.post("/api/bookings", json=good))
        requests.append(client.post("/api/bookings", json=bad))
    responses = await asyncio.gather(*requests)

    assert sorted(r.status_code for r in responses) == [201] * 30 + [400] * 30
    assert await _available(session_factory, test_event.id) == 170
    assert await _available(session_factory, sold_out_event.id) == 0
    assert await _booking_count(session_factory) == 30


@pytest.mark.asyncio
async def test_sessions_do_not_share_transactions(test_user, test_event, session_factory):
    """A rollback in one session leaves another session's pending decrement intact."""
    async with session_factory() as writer, session_factory() as other:
        await writer.execute(
            update(Event)
            .where(Event.id == test_event.id)
            .values(available_seats=Event.available_seats - 3)
        )
        await other.get(Event, test_event.id)
        await other.rollback()
        writer.add(Booking(
            user_id=test_user.id,
            event_id=test_event.id,
            number_of_seats=3,
            total_amount=2400,
            seat_numbers=[1, 2, 3],
        ))
        await writer.commit()

    assert await _available(session_factory, test_event.id) == 197
    assert await _booking_count(session_factory) == 1


@pytest.mark.asyncio
async def test_booking_lookups(client: AsyncClient, logged_in, test_event, small_event, db_session):
    first = (await client.post("/api/bookings", json={"eventId": test_event.id, "numberOfSeats": 2})).json()
    second = (await client.post("/api/bookings", json={"eventId": small_event.id, "numberOfSeats": 1})).json()

    booking = await get_booking(db_session, first["id"])
    assert booking.event_id == test_event.id
    assert booking.seat_numbers == [1, 2]
    assert await get_booking(db_session, 99999) is None

    assert [b.id for b in await list_bookings(db_session)] == [first["id"], second["id"]]


@pytest.mark.asyncio
async def test_seats_sold_before_any_booking_stay_unassigned(client: AsyncClient, logged_in, test_event):
    """500 seats with 200 available: seats 201-500 count as sold and are never handed out."""
    response = await client.post("/api/bookings", json={
        "eventId": test_event.id,
        "numberOfSeats": 2,
        "seatNumbers": [450, 451],
    })
    assert response.status_code == 201
    assert response.json()["seatNumbers"] == [1, 2]

    rest = await client.post("/api/bookings", json={"eventId": test_event.id, "numberOfSeats": 198})
    assert rest.status_code == 201
    assert max(rest.json()["seatNumbers"]) == 200
