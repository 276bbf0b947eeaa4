from eventspot.models.user import User
from eventspot.models.category import Category
from eventspot.models.venue import Venue
from eventspot.models.artist import Artist
from eventspot.models.event import Event
from eventspot.models.booking import Booking

__all__ = ["User", "Category", "Venue", "Artist", "Event", "Booking"]
