"""
Booking model representing a user's reservation of seats for an event.

Key design decisions:
- Status field allows cancellation without deleting records
- total_amount is fixed at creation from the event price of that moment
- seat_numbers is a JSON list; uniqueness across confirmed bookings of an
  event is enforced by the booking service, which serializes per event
"""

from datetime import datetime, timezone

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, CheckConstraint
from sqlalchemy.orm import relationship

from eventspot.db.base import Base

STATUS_CONFIRMED = "confirmed"
STATUS_CANCELLED = "cancelled"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    booking_date = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    number_of_seats = Column(Integer, nullable=False)
    total_amount = Column(Integer, nullable=False)
    status = Column(String(20), nullable=False, default=STATUS_CONFIRMED)
    seat_numbers = Column(JSON, nullable=False, default=list)

    user = relationship("User", back_populates="bookings", lazy="raise")
    event = relationship("Event", lazy="raise")

    __table_args__ = (
        CheckConstraint("number_of_seats > 0", name="check_booking_seats_positive"),
        CheckConstraint("status IN ('confirmed', 'cancelled')", name="check_booking_status"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, event={self.event_id}, status={self.status})>"
