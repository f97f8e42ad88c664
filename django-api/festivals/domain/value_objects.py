"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from datetime import date, timedelta
from decimal import Decimal
from typing import Self
from uuid import UUID

# Sessions without an explicit display order sort after every ranked session.
DISPLAY_ORDER_SENTINEL = Decimal(999999)

# Storage precision of display_order: numeric(12, 4).
DISPLAY_ORDER_MAX_DIGITS = 12
DISPLAY_ORDER_PLACES = 4
DISPLAY_ORDER_STEP = Decimal(1).scaleb(-DISPLAY_ORDER_PLACES)
DISPLAY_ORDER_LIMIT = Decimal(10) ** (DISPLAY_ORDER_MAX_DIGITS - DISPLAY_ORDER_PLACES)

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class FestivalId:
    """Unique identifier for a Festival."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class SessionId:
    """Unique identifier for a Session."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class BookingId:
    """Unique identifier for a Booking."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class DisplayOrder:
    """Rank among sessions sharing the same start slot. Lower sorts first."""

    value: Decimal

    def __post_init__(self) -> None:
        if not self.value.is_finite():
            raise ValueError("Display order must be a finite number")

    @classmethod
    def coerce(cls, value: "Decimal | int | float | str | None") -> Decimal:
        """Return the numeric rank for sorting, the sentinel when unset."""
        if value is None or value == "":
            return DISPLAY_ORDER_SENTINEL
        try:
            number = Decimal(str(value))
        except ArithmeticError:
            return DISPLAY_ORDER_SENTINEL
        return number if number.is_finite() else DISPLAY_ORDER_SENTINEL


@dataclass(frozen=True)
class Capacity:
    """Non-negative integer representing capacity."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Capacity cannot be negative")


@dataclass(frozen=True)
class CanonicalDate:
    """An ISO calendar date for a session's day.

    Schedules arrive with either ISO dates or weekday names. Weekday names
    are resolved against the festival's first day so stored rows share a
    single representation. Range checks against the last day are left to
    the caller.
    """

    value: date

    def __str__(self) -> str:
        return self.value.isoformat()

    @classmethod
    def from_iso(cls, value: str) -> Self:
        if not ISO_DATE_RE.match(value):
            raise ValueError(f"Not an ISO date: {value!r}")
        return cls(value=date.fromisoformat(value))

    @classmethod
    def from_weekday(cls, name: str, start: date) -> Self:
        """Resolve a weekday name to its first occurrence on or after ``start``."""
        try:
            target = WEEKDAYS.index(name.strip().lower())
        except ValueError:
            raise ValueError(f"Not a weekday name: {name!r}") from None

        offset = (target - start.weekday()) % 7
        return cls(value=start + timedelta(days=offset))
