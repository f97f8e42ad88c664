"""Unit tests for domain primitives.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

import uuid
from datetime import date
from decimal import Decimal

import pytest

from festivals.domain import Booking, CanonicalDate, Capacity, DisplayOrder, FestivalId, SessionId
from festivals.domain.errors import (
    EmptyImportError,
    ErrorCode,
    FestivalNotFoundError,
    ProtectedDeletionAttemptError,
    RowWarning,
    WarningCode,
)
from festivals.domain.value_objects import DISPLAY_ORDER_SENTINEL

from factories import make_session


class TestDisplayOrder:
    """Tests for DisplayOrder value object."""

    def test_accepts_fractional_value(self):
        """DisplayOrder keeps fractional ranks used for insert-between."""
        assert DisplayOrder(Decimal("1.5")).value == Decimal("1.5")

    def test_rejects_non_finite_value(self):
        """DisplayOrder raises ValueError for NaN."""
        with pytest.raises(ValueError):
            DisplayOrder(Decimal("NaN"))

    @pytest.mark.parametrize("value", [None, "", "abc", "Infinity", float("nan")])
    def test_coerce_unset_or_unreadable_to_sentinel(self, value):
        """Unset or unreadable ranks sort after every real rank."""
        assert DisplayOrder.coerce(value) == DISPLAY_ORDER_SENTINEL

    def test_coerce_keeps_numbers(self):
        """Numbers pass through coerce unchanged."""
        assert DisplayOrder.coerce(0) == Decimal(0)
        assert DisplayOrder.coerce("2.25") == Decimal("2.25")
        assert DisplayOrder.coerce(Decimal(-1)) == Decimal(-1)


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_zero(self):
        """Capacity can be created with zero."""
        assert Capacity(0).value == 0

    def test_capacity_rejects_negative_value(self):
        """Capacity raises ValueError for negative value."""
        with pytest.raises(ValueError):
            Capacity(-1)


class TestIds:
    """Tests for FestivalId and SessionId."""

    def test_from_string_valid_uuid(self):
        """FestivalId.from_string parses valid UUID."""
        value = uuid.uuid4()
        assert FestivalId.from_string(str(value)).value == value

    def test_from_string_invalid_uuid(self):
        """SessionId.from_string raises ValueError for invalid UUID."""
        with pytest.raises(ValueError):
            SessionId.from_string("not-a-uuid")

    def test_str_is_plain_uuid(self):
        value = uuid.uuid4()
        assert str(SessionId(value)) == str(value)


class TestCanonicalDate:
    """Tests for CanonicalDate resolution."""

    def test_from_iso(self):
        assert str(CanonicalDate.from_iso("2025-11-14")) == "2025-11-14"

    @pytest.mark.parametrize("value", ["14/11/2025", "2025-1-4", "Friday"])
    def test_from_iso_rejects_other_formats(self, value):
        with pytest.raises(ValueError):
            CanonicalDate.from_iso(value)

    def test_weekday_resolves_within_festival_week(self):
        """Weekday names resolve to the first matching date on or after the start."""
        # 2025-11-12 is a Wednesday.
        start = date(2025, 11, 12)
        assert str(CanonicalDate.from_weekday("Wednesday", start)) == "2025-11-12"
        assert str(CanonicalDate.from_weekday("friday", start)) == "2025-11-14"
        assert str(CanonicalDate.from_weekday(" SUNDAY ", start)) == "2025-11-16"
        assert str(CanonicalDate.from_weekday("Monday", start)) == "2025-11-17"

    def test_unknown_weekday_raises(self):
        with pytest.raises(ValueError):
            CanonicalDate.from_weekday("Funday", date(2025, 11, 12))


class TestSessionModel:
    """Tests for Session domain model properties."""

    def test_session_without_bookings_is_not_protected(self):
        assert make_session("Lindy Basics").is_protected is False

    def test_session_with_bookings_is_protected(self):
        assert make_session("Lindy Basics", bookings=1).is_protected is True

    def test_booked_spots_counts_names(self):
        session = make_session("Lindy Basics", bookings=2)
        assert session.booked_spots == 2
        assert Booking(names=("Ann", "Bo")).spots == 2

    def test_natural_key(self):
        session = make_session("Lindy Basics", day="2025-11-14", start_time="09:00")
        assert session.natural_key == ("2025-11-14", "09:00", "Lindy Basics")


class TestDomainErrors:
    """Tests for domain error types."""

    def test_error_carries_code_and_message(self):
        error = FestivalNotFoundError("abc")
        assert error.code == ErrorCode.FESTIVAL_NOT_FOUND
        assert error.festival_id == "abc"
        assert str(error) == "FESTIVAL_NOT_FOUND: Festival not found"

    def test_empty_import_mentions_skipped_rows(self):
        assert "3 rows skipped" in EmptyImportError(3).message

    def test_protected_deletion_reports_count(self):
        error = ProtectedDeletionAttemptError(2)
        assert error.count == 2
        assert error.code == ErrorCode.PROTECTED_DELETION_ATTEMPT

    def test_row_warning_to_dict(self):
        warning = RowWarning(code=WarningCode.MALFORMED_ROW, row=3, message="Missing title")
        assert warning.to_dict() == {"code": "MALFORMED_ROW", "row": 3, "message": "Missing title"}
