from eventspot.schemas.user import UserCreate, UserLogin, UserResponse, UserEnvelope, AuthStatus
from eventspot.schemas.catalog import CategoryResponse, VenueResponse, ArtistResponse
from eventspot.schemas.event import EventCreate, EventResponse
from eventspot.schemas.booking import BookingCreate, BookingResponse, BookingWithEvent
from eventspot.schemas.common import MessageResponse

__all__ = [
    "UserCreate", "UserLogin", "UserResponse", "UserEnvelope", "AuthStatus",
    "CategoryResponse", "VenueResponse", "ArtistResponse",
    "EventCreate", "EventResponse",
    "BookingCreate", "BookingResponse", "BookingWithEvent",
    "MessageResponse",
]
