"""Schedule service - all business logic lives here.

Services:
- Depend only on interfaces (stores, clients)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every write runs inside ``store.locked(festival_id)`` so that imports,
reorders and bookings for the same festival never interleave.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Iterable

import structlog

from festivals.domain import (
    Booking,
    BookingEntry,
    BookingId,
    Festival,
    FestivalId,
    IncomingSession,
    Session,
    SessionDetails,
    SessionId,
)
from festivals.domain.errors import (
    BookingNotFoundError,
    BookingRejectedError,
    EmptyImportError,
    FestivalNotFoundError,
    InvalidBookingIdError,
    InvalidFestivalIdError,
    InvalidReorderError,
    InvalidSessionError,
    InvalidSessionIdError,
    ProtectedDeletionAttemptError,
    RowWarning,
    SessionNotFoundError,
    SheetUnavailableError,
)
from festivals.domain.ordering import DisplayOrderChange, normalize_display_orders, sort_sessions
from festivals.domain.reconcile import MergePlan, SuggestedMatch, reconcile, suggest_matches
from festivals.domain.schedule_csv import (
    ParsedImport,
    export_schedule_csv,
    normalize_day,
    normalize_time,
    parse_schedule_csv,
)
from festivals.domain.value_objects import DISPLAY_ORDER_LIMIT, DISPLAY_ORDER_PLACES, DISPLAY_ORDER_STEP
from festivals.integrations.google_sheets import GoogleSheetsClient
from festivals.stores.interfaces import FestivalStore

logger = structlog.get_logger(__name__)

MERGE = "merge"
REPLACE = "replace"
IMPORT_MODES = (MERGE, REPLACE)


@dataclass
class ImportPreview:
    """What an import would do. Produced without writing anything."""

    plan: MergePlan
    parsed: ParsedImport
    current: list[Session]
    suggested_matches: list[SuggestedMatch] = field(default_factory=list)

    def to_dict(self) -> dict:
        booked = [s for s in self.current if s.is_protected]
        return {
            "incoming_count": len(self.parsed.sessions),
            "current_count": len(self.current),
            "skipped": self.parsed.skipped,
            "warnings": [w.to_dict() for w in self.parsed.warnings],
            "sessions_with_bookings": len(booked),
            "total_participants": sum(s.booked_spots for s in booked),
            "plan": self.plan.summary(),
            "suggested_matches": [m.to_dict() for m in self.suggested_matches],
        }


@dataclass
class ImportResult:
    mode: str
    created: int = 0
    updated: int = 0
    kept: int = 0
    deleted: int = 0
    skipped: int = 0
    warnings: list[RowWarning] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.mode == REPLACE:
            return f"Replaced all sessions. Created {self.created} new sessions."
        return (
            f"Merge complete: updated {self.updated}, created {self.created}, "
            f"kept {self.kept} with bookings, deleted {self.deleted} empty sessions."
        )

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "created": self.created,
            "updated": self.updated,
            "kept": self.kept,
            "deleted": self.deleted,
            "skipped": self.skipped,
            "warnings": [w.to_dict() for w in self.warnings],
            "message": self.message,
        }


def parse_festival_id(value: str) -> FestivalId:
    try:
        return FestivalId.from_string(str(value))
    except ValueError:
        raise InvalidFestivalIdError() from None


def parse_session_id(value: str) -> SessionId:
    try:
        return SessionId.from_string(str(value))
    except ValueError:
        raise InvalidSessionIdError() from None


class ScheduleService:
    """Service for festival schedule operations."""

    def __init__(self, store: FestivalStore, sheets: GoogleSheetsClient | None = None) -> None:
        self._store = store
        self._sheets = sheets

    # Festivals

    def get_festival(self, festival_id: str) -> Festival:
        """Return a festival by ID.

        Raises:
            InvalidFestivalIdError: If the festival_id is not a valid UUID.
            FestivalNotFoundError: If the festival does not exist.
        """
        festival = self._store.get_festival(parse_festival_id(festival_id))
        if festival is None:
            raise FestivalNotFoundError(festival_id)
        return festival

    def get_public_festival(self, slug: str) -> Festival:
        festival = self._store.get_festival_by_slug(slug)
        if festival is None:
            raise FestivalNotFoundError(slug)
        return festival

    # Ordering

    def list_sessions(self, festival_id: str) -> list[Session]:
        """Return a festival's sessions in display order."""
        festival = self.get_festival(festival_id)
        return sort_sessions(self._store.list_sessions(festival.id))

    def get_public_schedule(self, slug: str) -> tuple[Festival, list[Session]]:
        festival = self.get_public_festival(slug)
        return festival, sort_sessions(self._store.list_sessions(festival.id))

    def reorder_sessions(self, festival_id: str, orders: Iterable[tuple[str, object]]) -> int:
        """Set explicit display orders for sessions of one festival.

        Raises:
            InvalidSessionIdError: If a session id is not a valid UUID.
            InvalidReorderError: If a display order is not a finite number.
            SessionNotFoundError: If a session is not part of the festival.
        """
        festival = self.get_festival(festival_id)
        requested: dict[SessionId, Decimal] = {}
        for raw_id, raw_order in orders:
            requested[parse_session_id(raw_id)] = self._parse_display_order(raw_order)

        with self._store.locked(festival.id):
            known = {s.id for s in self._store.list_sessions(festival.id)}
            for session_id in requested:
                if session_id not in known:
                    raise SessionNotFoundError(str(session_id))
            written = self._store.set_display_orders(requested)

        logger.info("sessions_reordered", festival_id=str(festival.id), count=written)
        return written

    @staticmethod
    def _parse_display_order(value: object) -> Decimal:
        if isinstance(value, bool) or value is None:
            raise InvalidReorderError("Display order must be a number")
        try:
            number = Decimal(str(value))
        except InvalidOperation:
            raise InvalidReorderError(f"Display order must be a number, got {value!r}") from None
        if not number.is_finite():
            raise InvalidReorderError("Display order must be a finite number")
        if abs(number) >= DISPLAY_ORDER_LIMIT:
            raise InvalidReorderError(f"Display order must be below {DISPLAY_ORDER_LIMIT} in magnitude")
        if number != number.quantize(DISPLAY_ORDER_STEP):
            raise InvalidReorderError(f"Display order allows at most {DISPLAY_ORDER_PLACES} decimal places")
        return number

    def normalize_display_orders(self, festival_id: str, dry_run: bool = False) -> list[DisplayOrderChange]:
        """Renumber display orders 0..n-1 within each start slot.

        With ``dry_run`` the changes are computed and returned but not written.
        """
        festival = self.get_festival(festival_id)
        if dry_run:
            return normalize_display_orders(self._store.list_sessions(festival.id))

        with self._store.locked(festival.id):
            changes = normalize_display_orders(self._store.list_sessions(festival.id))
            pending = {c.session.id: Decimal(c.new) for c in changes if c.changed}
            if pending:
                self._store.set_display_orders(pending)

        logger.info(
            "display_orders_normalized",
            festival_id=str(festival.id),
            sessions=len(changes),
            changed=len(pending),
        )
        return changes

    # Import

    def _parse(self, festival: Festival, text: str) -> ParsedImport:
        parsed = parse_schedule_csv(text, festival_start=festival.start_date, festival_end=festival.end_date)
        if not parsed.sessions:
            raise EmptyImportError(parsed.skipped)
        if parsed.warnings:
            logger.info(
                "import_rows_flagged",
                festival_id=str(festival.id),
                skipped=parsed.skipped,
                warnings=len(parsed.warnings),
            )
        return parsed

    def preview_import(self, festival_id: str, text: str) -> ImportPreview:
        """Compute the merge plan for an import without writing.

        Raises:
            ImportFormatError: If the text has no usable header.
            EmptyImportError: If no row is usable.
        """
        return self._preview(self.get_festival(festival_id), text)

    def _preview(self, festival: Festival, text: str) -> ImportPreview:
        parsed = self._parse(festival, text)
        current = self._store.list_sessions(festival.id)
        plan = reconcile(current, parsed.sessions)
        return ImportPreview(
            plan=plan,
            parsed=parsed,
            current=current,
            suggested_matches=suggest_matches(plan),
        )

    def apply_import(self, festival_id: str, text: str, mode: str = MERGE) -> ImportResult:
        """Import a schedule into a festival.

        Merge mode updates matching sessions in place, creates new ones and
        deletes unmatched sessions without bookings. Replace mode deletes
        every session first and is refused while any session holds bookings.
        The whole import commits atomically.

        Raises:
            ImportFormatError: If the text has no usable header.
            EmptyImportError: If no row is usable.
            ProtectedDeletionAttemptError: In replace mode, if a session has bookings.
        """
        if mode not in IMPORT_MODES:
            raise ValueError(f"Unknown import mode: {mode!r}")
        return self._apply(self.get_festival(festival_id), text, mode)

    def _apply(self, festival: Festival, text: str, mode: str) -> ImportResult:
        parsed = self._parse(festival, text)
        result = ImportResult(mode=mode, skipped=parsed.skipped, warnings=parsed.warnings)

        # Plan from a read taken under the same lock as the writes.
        with self._store.locked(festival.id):
            current = self._store.list_sessions(festival.id)

            if mode == REPLACE:
                protected = [s for s in current if s.is_protected]
                if protected:
                    raise ProtectedDeletionAttemptError(len(protected))
                result.deleted = self._store.delete_sessions([s.id for s in current])
                result.created = self._store.create_sessions(festival.id, parsed.sessions)
            else:
                plan = reconcile(current, parsed.sessions)
                result.updated = self._store.update_sessions([(u.existing.id, u.incoming) for u in plan.to_update])
                result.created = self._store.create_sessions(festival.id, plan.to_create)
                result.deleted = self._store.delete_sessions([s.id for s in plan.to_delete])
                result.kept = len(plan.to_keep)
                for session in plan.to_keep:
                    logger.info("session_kept_with_bookings", festival_id=str(festival.id), title=session.title)

        logger.info(
            "import_applied",
            festival_id=str(festival.id),
            mode=mode,
            created=result.created,
            updated=result.updated,
            kept=result.kept,
            deleted=result.deleted,
            skipped=result.skipped,
        )
        return result

    def _fetch_sheet(self, url: str) -> str:
        if self._sheets is None:
            raise SheetUnavailableError("Google Sheets import is not configured")
        return self._sheets.fetch_csv(url)

    def preview_google_sheet(self, festival_id: str, url: str) -> ImportPreview:
        festival = self.get_festival(festival_id)
        return self._preview(festival, self._fetch_sheet(url))

    def import_google_sheet(self, festival_id: str, url: str, mode: str = MERGE) -> ImportResult:
        if mode not in IMPORT_MODES:
            raise ValueError(f"Unknown import mode: {mode!r}")
        festival = self.get_festival(festival_id)
        return self._apply(festival, self._fetch_sheet(url), mode)

    def export_sessions_csv(self, festival_id: str) -> str:
        return export_schedule_csv(self.list_sessions(festival_id))

    # Manual editing

    def create_session(self, festival_id: str, fields: dict) -> Session:
        """Add one session to a festival with display order 0.

        Raises:
            InvalidSessionError: If the day or times cannot be read.
        """
        festival = self.get_festival(festival_id)
        incoming = self._incoming_from_fields(festival, fields)
        with self._store.locked(festival.id):
            session = self._store.create_session(
                festival.id,
                incoming,
                booking_enabled=bool(fields.get("booking_enabled", False)),
                booking_capacity=fields.get("booking_capacity"),
            )
        logger.info("session_created", festival_id=str(festival.id), session_id=str(session.id))
        return session

    def update_session(self, festival_id: str, session_id: str, fields: dict) -> Session:
        """Overwrite a session's fields, keeping its display order and bookings.

        Raises:
            InvalidSessionIdError, SessionNotFoundError
            InvalidSessionError: If the day or times cannot be read, or the
                booking capacity is below the spots already booked.
        """
        festival = self.get_festival(festival_id)
        sid = parse_session_id(session_id)
        incoming = self._incoming_from_fields(festival, fields)
        capacity = fields.get("booking_capacity")

        with self._store.locked(festival.id):
            existing = self._store.get_session(festival.id, sid)
            if existing is None:
                raise SessionNotFoundError(session_id)
            if capacity is not None and capacity < existing.booked_spots:
                raise InvalidSessionError(
                    f"Booking capacity {capacity} is below the {existing.booked_spots} spot(s) already booked"
                )
            self._store.update_session(
                sid,
                incoming,
                booking_enabled=bool(fields.get("booking_enabled", False)),
                booking_capacity=capacity,
            )
            session = self._store.get_session(festival.id, sid)

        logger.info("session_updated", festival_id=str(festival.id), session_id=session_id)
        return session

    def delete_session(self, festival_id: str, session_id: str) -> None:
        """Delete one session.

        Raises:
            InvalidSessionIdError, SessionNotFoundError
            ProtectedDeletionAttemptError: If the session holds bookings.
        """
        festival = self.get_festival(festival_id)
        sid = parse_session_id(session_id)
        with self._store.locked(festival.id):
            session = self._store.get_session(festival.id, sid)
            if session is None:
                raise SessionNotFoundError(session_id)
            if session.is_protected:
                raise ProtectedDeletionAttemptError(1)
            self._store.delete_sessions([sid])
        logger.info("session_deleted", festival_id=str(festival.id), session_id=session_id)

    @staticmethod
    def _incoming_from_fields(festival: Festival, fields: dict) -> IncomingSession:
        title = (fields.get("title") or "").strip()
        if not title:
            raise InvalidSessionError("Title is required")

        raw_day = (fields.get("day") or "").strip()
        raw_start = (fields.get("start_time") or "").strip()
        raw_end = (fields.get("end_time") or "").strip()
        day = normalize_day(raw_day, raw_start, raw_end, festival.start_date)
        if day is None:
            raise InvalidSessionError(f'Could not read day "{raw_day}"')
        start_time = normalize_time(raw_start)
        end_time = normalize_time(raw_end)
        if not start_time or not end_time:
            raise InvalidSessionError("Start and end times must look like HH:MM")

        return IncomingSession(
            title=title,
            day=day,
            start_time=start_time,
            end_time=end_time,
            details=SessionDetails(
                description=fields.get("description") or "",
                styles=tuple(fields.get("styles") or ()),
                level=fields.get("level") or "",
                capacity=fields.get("capacity"),
                location=fields.get("location") or "",
                teachers=tuple(fields.get("teachers") or ()),
                prerequisites=fields.get("prerequisites") or "",
                card_type=fields.get("card_type") or "full",
            ),
        )

    # Bookings

    def book_session(
        self,
        slug: str,
        session_id: str,
        names: list[str],
        email: str,
        device_id: str,
    ) -> Booking:
        """Book spots on a session for the names given.

        Raises:
            FestivalNotFoundError, InvalidSessionIdError, SessionNotFoundError
            BookingRejectedError: If booking is closed, the request is
                incomplete, capacity would be exceeded or the device already
                holds a booking.
        """
        festival = self.get_public_festival(slug)
        sid = parse_session_id(session_id)

        cleaned = tuple(name.strip() for name in names or () if isinstance(name, str) and name.strip())
        if not cleaned:
            raise BookingRejectedError("At least one name is required")
        if not email or not device_id:
            raise BookingRejectedError("Email and device ID are required")

        with self._store.locked(festival.id):
            session = self._store.get_session(festival.id, sid)
            if session is None:
                raise SessionNotFoundError(session_id)
            if not session.booking_enabled:
                raise BookingRejectedError("Booking is not enabled for this session")

            if session.booking_capacity is not None:
                available = session.booking_capacity - session.booked_spots
                if len(cleaned) > available:
                    raise BookingRejectedError(
                        f"Not enough spots available. Only {max(available, 0)} spot(s) left."
                    )

            if self._store.find_booking(sid, device_id) is not None:
                raise BookingRejectedError("You have already booked this session")

            booking = self._store.add_booking(
                festival.id,
                sid,
                Booking(names=cleaned, email=email, device_id=device_id),
            )

        logger.info("session_booked", festival_id=str(festival.id), session_id=session_id, spots=len(cleaned))
        return booking

    def cancel_booking(self, slug: str, session_id: str, device_id: str) -> None:
        festival = self.get_public_festival(slug)
        sid = parse_session_id(session_id)
        if not device_id:
            raise BookingRejectedError("Device ID is required")

        with self._store.locked(festival.id):
            if self._store.get_session(festival.id, sid) is None:
                raise SessionNotFoundError(session_id)
            if not self._store.delete_booking(sid, device_id):
                raise BookingNotFoundError()

        logger.info("booking_cancelled", festival_id=str(festival.id), session_id=session_id)

    def booking_count(self, slug: str, session_id: str) -> int:
        """Return the number of spots booked on a public session."""
        festival = self.get_public_festival(slug)
        sid = parse_session_id(session_id)
        session = self._store.get_session(festival.id, sid)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session.booked_spots

    def list_bookings(self, festival_id: str) -> list[BookingEntry]:
        """Return every booking of a festival, in schedule order then booking order."""
        festival = self.get_festival(festival_id)
        return [
            BookingEntry(session=session, booking=booking)
            for session in sort_sessions(self._store.list_sessions(festival.id))
            for booking in session.bookings
        ]

    def remove_booking(self, festival_id: str, booking_id: str) -> None:
        """Delete a booking on behalf of the festival's organizer.

        Raises:
            InvalidBookingIdError: If the booking_id is not a valid UUID.
            BookingNotFoundError: If the festival holds no such booking.
        """
        festival = self.get_festival(festival_id)
        try:
            bid = BookingId.from_string(str(booking_id))
        except ValueError:
            raise InvalidBookingIdError() from None

        with self._store.locked(festival.id):
            if not self._store.remove_booking(festival.id, bid):
                raise BookingNotFoundError()

        logger.info("booking_removed", festival_id=str(festival.id), booking_id=booking_id)
