"""Django ORM implementation of the FestivalStore."""

from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal

from django.db import transaction
from django.db.models import Prefetch

from festivals import models
from festivals.cache import invalidate_festival_schedule
from festivals.domain import (
    Booking,
    BookingId,
    Festival,
    FestivalId,
    IncomingSession,
    Session,
    SessionDetails,
    SessionId,
)
from festivals.stores.interfaces import FestivalStore

SCHEDULE_FIELDS = (
    "end_time",
    "description",
    "location",
    "level",
    "styles",
    "teachers",
    "prerequisites",
    "capacity",
    "card_type",
)


def to_festival(row: models.Festival) -> Festival:
    return Festival(
        id=FestivalId(row.id),
        name=row.name,
        slug=row.slug,
        start_date=row.start_date,
        end_date=row.end_date,
        owner_id=row.owner_id,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def to_booking(row: models.Booking) -> Booking:
    return Booking(
        names=tuple(row.names),
        email=row.email,
        device_id=row.device_id,
        created_at=row.created_at,
        id=BookingId(row.id),
    )


def to_session(row: models.Session) -> Session:
    return Session(
        id=SessionId(row.id),
        festival_id=FestivalId(row.festival_id),
        title=row.title,
        day=row.day,
        start_time=row.start_time,
        end_time=row.end_time,
        display_order=row.display_order,
        details=SessionDetails(
            description=row.description,
            location=row.location,
            level=row.level,
            styles=tuple(row.styles or ()),
            teachers=tuple(row.teachers or ()),
            prerequisites=row.prerequisites,
            capacity=row.capacity,
            card_type=row.card_type,
        ),
        booking_enabled=row.booking_enabled,
        booking_capacity=row.booking_capacity,
        bookings=tuple(to_booking(b) for b in row.bookings.all()),
        created_at=row.created_at,
    )


def _bookings_prefetch() -> Prefetch:
    return Prefetch("bookings", queryset=models.Booking.objects.order_by("created_at", "id"))


def _schedule_values(incoming: IncomingSession) -> dict:
    details = incoming.details
    return {
        "end_time": incoming.end_time,
        "description": details.description,
        "location": details.location,
        "level": details.level,
        "styles": list(details.styles),
        "teachers": list(details.teachers),
        "prerequisites": details.prerequisites,
        "capacity": details.capacity,
        "card_type": details.card_type,
    }


class DjangoFestivalStore(FestivalStore):
    """PostgreSQL-backed festival store using Django ORM."""

    def get_festival(self, festival_id: FestivalId) -> Festival | None:
        row = models.Festival.objects.filter(pk=festival_id.value).first()
        return to_festival(row) if row else None

    def get_festival_by_slug(self, slug: str) -> Festival | None:
        row = models.Festival.objects.filter(slug=slug).first()
        return to_festival(row) if row else None

    def list_sessions(self, festival_id: FestivalId) -> list[Session]:
        rows = (
            models.Session.objects.filter(festival_id=festival_id.value)
            .prefetch_related(_bookings_prefetch())
            .order_by("created_at", "id")
        )
        return [to_session(row) for row in rows]

    def get_session(self, festival_id: FestivalId, session_id: SessionId) -> Session | None:
        row = (
            models.Session.objects.filter(festival_id=festival_id.value, pk=session_id.value)
            .prefetch_related(_bookings_prefetch())
            .first()
        )
        return to_session(row) if row else None

    @contextmanager
    def locked(self, festival_id: FestivalId) -> Iterator[None]:
        with transaction.atomic():
            # Row lock on the festival; a no-op on SQLite, which serializes writers anyway.
            list(models.Festival.objects.select_for_update().filter(pk=festival_id.value).values_list("pk"))
            # Bulk writes skip model signals, so the public schedule is dropped on commit.
            transaction.on_commit(lambda: invalidate_festival_schedule(festival_id.value))
            yield

    def set_display_orders(self, orders: dict[SessionId, Decimal]) -> int:
        written = 0
        for session_id, display_order in orders.items():
            written += models.Session.objects.filter(pk=session_id.value).update(display_order=display_order)
        return written

    def create_sessions(self, festival_id: FestivalId, sessions: list[IncomingSession]) -> int:
        rows = [
            models.Session(
                festival_id=festival_id.value,
                title=incoming.title,
                day=incoming.day,
                start_time=incoming.start_time,
                display_order=0,
                **_schedule_values(incoming),
            )
            for incoming in sessions
        ]
        return len(models.Session.objects.bulk_create(rows))

    def update_sessions(self, updates: list[tuple[SessionId, IncomingSession]]) -> int:
        rows = []
        for session_id, incoming in updates:
            row = models.Session(pk=session_id.value)
            for name, value in _schedule_values(incoming).items():
                setattr(row, name, value)
            rows.append(row)
        if not rows:
            return 0
        return models.Session.objects.bulk_update(rows, SCHEDULE_FIELDS)

    def create_session(
        self,
        festival_id: FestivalId,
        incoming: IncomingSession,
        booking_enabled: bool = False,
        booking_capacity: int | None = None,
    ) -> Session:
        row = models.Session.objects.create(
            festival_id=festival_id.value,
            title=incoming.title,
            day=incoming.day,
            start_time=incoming.start_time,
            display_order=0,
            booking_enabled=booking_enabled,
            booking_capacity=booking_capacity,
            **_schedule_values(incoming),
        )
        return to_session(row)

    def update_session(
        self,
        session_id: SessionId,
        incoming: IncomingSession,
        booking_enabled: bool,
        booking_capacity: int | None,
    ) -> None:
        models.Session.objects.filter(pk=session_id.value).update(
            title=incoming.title,
            day=incoming.day,
            start_time=incoming.start_time,
            booking_enabled=booking_enabled,
            booking_capacity=booking_capacity,
            **_schedule_values(incoming),
        )

    def delete_sessions(self, session_ids: list[SessionId]) -> int:
        if not session_ids:
            return 0
        _, per_model = models.Session.objects.filter(pk__in=[s.value for s in session_ids]).delete()
        return per_model.get(models.Session._meta.label, 0)

    def find_booking(self, session_id: SessionId, device_id: str) -> Booking | None:
        row = models.Booking.objects.filter(session_id=session_id.value, device_id=device_id).first()
        return to_booking(row) if row else None

    def add_booking(self, festival_id: FestivalId, session_id: SessionId, booking: Booking) -> Booking:
        row = models.Booking.objects.create(
            festival_id=festival_id.value,
            session_id=session_id.value,
            names=list(booking.names),
            email=booking.email,
            device_id=booking.device_id,
        )
        return to_booking(row)

    def delete_booking(self, session_id: SessionId, device_id: str) -> bool:
        deleted, _ = models.Booking.objects.filter(session_id=session_id.value, device_id=device_id).delete()
        return deleted > 0

    def remove_booking(self, festival_id: FestivalId, booking_id: BookingId) -> bool:
        deleted, _ = models.Booking.objects.filter(festival_id=festival_id.value, pk=booking_id.value).delete()
        return deleted > 0
