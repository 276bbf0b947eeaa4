from sqlalchemy import Column, Integer, String, CheckConstraint

from eventspot.db.base import Base


class Venue(Base):
    __tablename__ = "venues"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    capacity = Column(Integer, nullable=False)
    image = Column(String(1000), nullable=False)

    __table_args__ = (
        CheckConstraint("capacity > 0", name="check_venue_capacity_positive"),
    )

    def __repr__(self) -> str:
        return f"<Venue(id={self.id}, name={self.name}, city={self.city})>"
