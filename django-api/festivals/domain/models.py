"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in festivals/models.py (persistence layer).
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

from festivals.domain.value_objects import BookingId, FestivalId, SessionId

CARD_TYPES = ("full", "simplified", "photo-only")

NaturalKey = tuple[str, str, str]


@dataclass(frozen=True)
class Festival:
    """Domain representation of a Festival."""

    id: FestivalId
    name: str
    slug: str
    start_date: date | None = None
    end_date: date | None = None
    owner_id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class Booking:
    """Domain representation of a Booking. ``names`` is never empty."""

    names: tuple[str, ...]
    email: str = ""
    device_id: str = ""
    created_at: datetime | None = None
    id: BookingId | None = None

    @property
    def spots(self) -> int:
        return len(self.names)


@dataclass(frozen=True)
class SessionDetails:
    """Descriptive schedule fields shared by stored and imported sessions."""

    description: str = ""
    location: str = ""
    level: str = ""
    styles: tuple[str, ...] = ()
    teachers: tuple[str, ...] = ()
    prerequisites: str = ""
    capacity: int | None = None
    card_type: str = "full"


@dataclass(frozen=True)
class Session:
    """Domain representation of a Session."""

    id: SessionId
    festival_id: FestivalId
    title: str
    day: str
    start_time: str
    end_time: str
    display_order: Decimal | None = Decimal(0)
    details: SessionDetails = field(default_factory=SessionDetails)
    booking_enabled: bool = False
    booking_capacity: int | None = None
    bookings: tuple[Booking, ...] = ()
    created_at: datetime | None = None

    @property
    def natural_key(self) -> NaturalKey:
        return (self.day, self.start_time, self.title)

    @property
    def is_protected(self) -> bool:
        """A session with bookings may not be deleted by reconciliation."""
        return len(self.bookings) > 0

    @property
    def booked_spots(self) -> int:
        return sum(booking.spots for booking in self.bookings)


@dataclass(frozen=True)
class IncomingSession:
    """A session parsed from an import, not yet persisted."""

    title: str
    day: str
    start_time: str
    end_time: str
    details: SessionDetails = field(default_factory=SessionDetails)
    row: int = 0

    @property
    def natural_key(self) -> NaturalKey:
        return (self.day, self.start_time, self.title)


@dataclass(frozen=True)
class BookingEntry:
    """A booking together with the session it holds spots on."""

    session: Session
    booking: Booking
