from festivals.domain.models import Booking, BookingEntry, Festival, IncomingSession, Session, SessionDetails
from festivals.domain.value_objects import (
    BookingId,
    CanonicalDate,
    Capacity,
    DisplayOrder,
    FestivalId,
    SessionId,
)

__all__ = [
    "Festival",
    "Session",
    "SessionDetails",
    "Booking",
    "BookingEntry",
    "IncomingSession",
    "FestivalId",
    "SessionId",
    "BookingId",
    "DisplayOrder",
    "Capacity",
    "CanonicalDate",
]
