"""Domain error codes for the festivals module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    FESTIVAL_NOT_FOUND = "FESTIVAL_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    INVALID_FESTIVAL_ID = "INVALID_FESTIVAL_ID"
    INVALID_SESSION_ID = "INVALID_SESSION_ID"
    INVALID_BOOKING_ID = "INVALID_BOOKING_ID"
    INVALID_SESSION = "INVALID_SESSION"
    INVALID_REORDER = "INVALID_REORDER"
    IMPORT_FORMAT = "IMPORT_FORMAT"
    IMPORT_EMPTY = "IMPORT_EMPTY"
    PROTECTED_DELETION_ATTEMPT = "PROTECTED_DELETION_ATTEMPT"
    BOOKING_REJECTED = "BOOKING_REJECTED"
    INVALID_SHEET_URL = "INVALID_SHEET_URL"
    SHEET_UNAVAILABLE = "SHEET_UNAVAILABLE"


class WarningCode(Enum):
    """Per-row import problems. Reported to the caller, never raised."""

    MALFORMED_ROW = "MALFORMED_ROW"
    AMBIGUOUS_DATE_KEY = "AMBIGUOUS_DATE_KEY"
    INVALID_CARD_TYPE = "INVALID_CARD_TYPE"


@dataclass
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


@dataclass(frozen=True)
class RowWarning:
    """A problem with one row of an import. The row number is 1-based and counts the header."""

    code: WarningCode
    row: int
    message: str

    def to_dict(self) -> dict:
        return {"code": self.code.value, "row": self.row, "message": self.message}


class FestivalNotFoundError(DomainError):
    """Raised when a festival is not found."""

    def __init__(self, festival_id: str) -> None:
        super().__init__(
            code=ErrorCode.FESTIVAL_NOT_FOUND,
            message="Festival not found",
        )
        self.festival_id = festival_id


class SessionNotFoundError(DomainError):
    """Raised when a session does not exist within the festival."""

    def __init__(self, session_id: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_NOT_FOUND,
            message="Session not found",
        )
        self.session_id = session_id


class BookingNotFoundError(DomainError):
    """Raised when cancelling a booking that does not exist."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )


class InvalidFestivalIdError(DomainError):
    """Raised when a festival ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_FESTIVAL_ID,
            message="Invalid festival ID format",
        )


class InvalidSessionIdError(DomainError):
    """Raised when a session ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_SESSION_ID,
            message="Invalid session ID format",
        )


class InvalidBookingIdError(DomainError):
    """Raised when a booking ID is invalid."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_BOOKING_ID,
            message="Invalid booking ID format",
        )


class InvalidSessionError(DomainError):
    """Raised when a manually entered session has unusable fields."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_SESSION, message=message)


class InvalidReorderError(DomainError):
    """Raised when a reorder request names unknown sessions or bad ranks."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_REORDER, message=message)


class ImportFormatError(DomainError):
    """Raised when import text cannot be read as a schedule at all."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.IMPORT_FORMAT, message=message)


class EmptyImportError(DomainError):
    """Raised when an import yields no usable session rows."""

    def __init__(self, skipped: int = 0) -> None:
        message = "No valid sessions found in import"
        if skipped:
            message = f"{message} ({skipped} rows skipped)"
        super().__init__(code=ErrorCode.IMPORT_EMPTY, message=message)


class ProtectedDeletionAttemptError(DomainError):
    """Raised when a write would delete sessions that hold bookings."""

    def __init__(self, count: int) -> None:
        super().__init__(
            code=ErrorCode.PROTECTED_DELETION_ATTEMPT,
            message=f"{count} session(s) have bookings and cannot be deleted",
        )
        self.count = count


class BookingRejectedError(DomainError):
    """Raised when a booking request breaks a booking rule."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.BOOKING_REJECTED, message=message)


class InvalidSheetUrlError(DomainError):
    """Raised when a Google Sheets URL has no spreadsheet ID."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.INVALID_SHEET_URL,
            message=(
                "Invalid Google Sheets URL. Expected "
                "https://docs.google.com/spreadsheets/d/<sheet id>/edit"
            ),
        )


class SheetUnavailableError(DomainError):
    """Raised when a Google Sheet cannot be fetched."""

    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.SHEET_UNAVAILABLE, message=message)
