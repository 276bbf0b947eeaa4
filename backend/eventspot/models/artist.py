from sqlalchemy import Column, Integer, String, Text

from eventspot.db.base import Base


class Artist(Base):
    __tablename__ = "artists"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    image = Column(String(1000), nullable=False)
    bio = Column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Artist(id={self.id}, name={self.name})>"
