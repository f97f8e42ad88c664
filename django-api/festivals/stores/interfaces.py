"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from decimal import Decimal

from festivals.domain import Booking, BookingId, Festival, FestivalId, IncomingSession, Session, SessionId


class FestivalStore(ABC):
    """Interface for festival schedule persistence operations."""

    @abstractmethod
    def get_festival(self, festival_id: FestivalId) -> Festival | None:
        """Return a festival by ID, or None if not found."""
        ...

    @abstractmethod
    def get_festival_by_slug(self, slug: str) -> Festival | None:
        """Return a festival by its public slug, or None if not found."""
        ...

    @abstractmethod
    def list_sessions(self, festival_id: FestivalId) -> list[Session]:
        """Return all sessions of a festival with their bookings, in storage order."""
        ...

    @abstractmethod
    def get_session(self, festival_id: FestivalId, session_id: SessionId) -> Session | None:
        """Return one session of a festival, or None if it belongs elsewhere."""
        ...

    @abstractmethod
    def locked(self, festival_id: FestivalId) -> AbstractContextManager[None]:
        """Serialize writes for one festival.

        Writes issued inside the block commit together or not at all, and no
        other locked block for the same festival runs concurrently.
        """
        ...

    @abstractmethod
    def set_display_orders(self, orders: dict[SessionId, Decimal]) -> int:
        """Overwrite display orders. Returns the number of sessions written."""
        ...

    @abstractmethod
    def create_sessions(self, festival_id: FestivalId, sessions: list[IncomingSession]) -> int:
        """Insert imported sessions with display order 0. Returns the count."""
        ...

    @abstractmethod
    def update_sessions(self, updates: list[tuple[SessionId, IncomingSession]]) -> int:
        """Overwrite schedule fields in place, keeping ids and bookings."""
        ...

    @abstractmethod
    def create_session(
        self,
        festival_id: FestivalId,
        incoming: IncomingSession,
        booking_enabled: bool = False,
        booking_capacity: int | None = None,
    ) -> Session:
        """Insert one session with display order 0 and return it."""
        ...

    @abstractmethod
    def update_session(
        self,
        session_id: SessionId,
        incoming: IncomingSession,
        booking_enabled: bool,
        booking_capacity: int | None,
    ) -> None:
        """Overwrite every editable field of one session, keeping display order and bookings."""
        ...

    @abstractmethod
    def delete_sessions(self, session_ids: list[SessionId]) -> int:
        """Delete sessions. Returns the number deleted."""
        ...

    @abstractmethod
    def find_booking(self, session_id: SessionId, device_id: str) -> Booking | None:
        """Return the booking a device holds on a session, if any."""
        ...

    @abstractmethod
    def add_booking(self, festival_id: FestivalId, session_id: SessionId, booking: Booking) -> Booking:
        """Persist a booking and return it."""
        ...

    @abstractmethod
    def delete_booking(self, session_id: SessionId, device_id: str) -> bool:
        """Delete a device's booking. Returns False when there was none."""
        ...

    @abstractmethod
    def remove_booking(self, festival_id: FestivalId, booking_id: BookingId) -> bool:
        """Delete a booking by ID within a festival. Returns False when there was none."""
        ...
