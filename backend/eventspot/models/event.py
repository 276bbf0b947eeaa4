"""
Event model with seat inventory tracking.

Key design decisions:
- `available_seats` is the live inventory counter, decremented by bookings
  and restored by cancellations
- CHECK constraints keep 0 <= available_seats <= total_seats at the DB level
- `version` is bumped on every inventory change so concurrent writers can
  detect each other
- Indexes on category_id and the featured/trending flags back the list queries
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from eventspot.db.base import Base


class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    image = Column(String(1000), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    price = Column(Integer, nullable=False)
    venue_id = Column(Integer, ForeignKey("venues.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    artist_id = Column(Integer, ForeignKey("artists.id"), nullable=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    is_trending = Column(Boolean, nullable=False, default=False)
    total_seats = Column(Integer, nullable=False)
    available_seats = Column(Integer, nullable=False)

    version = Column(Integer, nullable=False, default=1)

    venue = relationship("Venue", lazy="raise")
    category = relationship("Category", lazy="raise")
    artist = relationship("Artist", lazy="raise")

    __table_args__ = (
        CheckConstraint("available_seats >= 0", name="check_available_seats_non_negative"),
        CheckConstraint("total_seats > 0", name="check_total_seats_positive"),
        CheckConstraint("available_seats <= total_seats", name="check_available_lte_total"),
        CheckConstraint("price >= 0", name="check_price_non_negative"),
        Index("ix_events_category_id", "category_id"),
        Index("ix_events_featured", "is_featured"),
        Index("ix_events_trending", "is_trending"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, available={self.available_seats}/{self.total_seats})>"
