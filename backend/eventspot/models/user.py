"""
User model. Passwords are stored as bcrypt hashes, never in plain text.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from eventspot.db.base import Base


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    password = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone = Column(String(32), nullable=True)
    city = Column(String(100), nullable=True)

    bookings = relationship("Booking", back_populates="user", lazy="raise")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username})>"
