"""Unit tests for session ordering and display-order normalization.

Run with: pytest tests/test_ordering.py -v
"""

from decimal import Decimal
from itertools import permutations

import pytest

from festivals.domain.ordering import datetime_key, normalize_display_orders, sort_sessions

from factories import make_session


def titles(sessions):
    return [s.title for s in sessions]


class TestDatetimeKey:
    """Tests for the chronological sort key."""

    def test_day_and_time(self):
        assert datetime_key("2025-11-14", "09:00") == "2025-11-14T09:00:00"

    def test_full_datetime_in_start_time_wins(self):
        """A start time that already carries a date is used as-is."""
        assert datetime_key("2025-11-14", "2025-11-15T10:00:00") == "2025-11-15T10:00:00"

    def test_missing_start_time_falls_back_to_day(self):
        assert datetime_key("2025-11-14", "") == "2025-11-14"

    @pytest.mark.parametrize("day,start_time", [(None, None), ("", ""), (None, "09:00")])
    def test_missing_fields_never_raise(self, day, start_time):
        assert datetime_key(day, start_time) == ""

    def test_weekday_names_do_not_interleave_with_iso_dates(self):
        """Mixed day representations sort by string, not by calendar.

        Imports store ISO dates so stored rows never mix the two.
        """
        friday = make_session("Weekday", day="Friday", start_time="09:00")
        iso_saturday = make_session("Iso", day="2025-11-15", start_time="09:00")
        assert titles(sort_sessions([friday, iso_saturday])) == ["Iso", "Weekday"]


class TestSortSessions:
    """Tests for sort_sessions."""

    def test_iso_dates_sort_chronologically(self):
        sessions = [
            make_session("Late", day="2025-11-14", start_time="14:00"),
            make_session("Early next day", day="2025-11-14", start_time="07:00"),
            make_session("First day", day="2025-11-13", start_time="07:00"),
        ]
        assert titles(sort_sessions(sessions)) == ["First day", "Early next day", "Late"]

    def test_unset_display_order_does_not_beat_earlier_slot(self):
        sessions = [
            make_session("Lunch", day="2025-11-14", start_time="12:30", display_order=None),
            make_session("Workshop", day="2025-11-14", start_time="09:00", display_order=0),
        ]
        assert titles(sort_sessions(sessions)) == ["Workshop", "Lunch"]

    def test_display_order_breaks_slot_ties(self):
        sessions = [
            make_session("Second", display_order=1),
            make_session("First", display_order=0),
        ]
        assert titles(sort_sessions(sessions)) == ["First", "Second"]

    def test_fractional_display_order_sorts_between(self):
        sessions = [
            make_session("C", display_order=2),
            make_session("B", display_order="1.5"),
            make_session("A", display_order=1),
        ]
        assert titles(sort_sessions(sessions)) == ["A", "B", "C"]

    def test_unset_display_order_sorts_last_in_slot(self):
        sessions = [
            make_session("Unranked", display_order=None),
            make_session("Ranked", display_order=5),
        ]
        assert titles(sort_sessions(sessions)) == ["Ranked", "Unranked"]

    def test_equal_keys_keep_input_order_for_every_permutation(self):
        """Tied sessions keep their relative order however the rest is arranged."""
        tie_a = make_session("Tie A", display_order=None)
        tie_b = make_session("Tie B", display_order=None)
        others = [
            make_session("Earlier", start_time="08:00"),
            make_session("Later", start_time="11:00"),
            make_session("Same slot ranked", display_order=0),
        ]
        for arrangement in permutations([*others, tie_a, tie_b]):
            result = titles(sort_sessions(arrangement))
            expected_first = "Tie A" if arrangement.index(tie_a) < arrangement.index(tie_b) else "Tie B"
            tied = [t for t in result if t.startswith("Tie")]
            assert tied[0] == expected_first

    def test_does_not_mutate_input(self):
        sessions = [make_session("B", start_time="10:00"), make_session("A", start_time="09:00")]
        sort_sessions(sessions)
        assert titles(sessions) == ["B", "A"]

    def test_empty(self):
        assert sort_sessions([]) == []


class TestNormalizeDisplayOrders:
    """Tests for display-order normalization."""

    def test_renumbers_each_slot_from_zero(self):
        sessions = [
            make_session("A", start_time="09:00", display_order=10),
            make_session("B", start_time="09:00", display_order=20),
            make_session("C", start_time="11:00", display_order=7),
        ]
        changes = normalize_display_orders(sessions)
        assert [(c.session.title, c.new) for c in changes] == [("A", 0), ("B", 1), ("C", 0)]
        assert [c.slot for c in changes] == ["2025-11-14T09:00:00", "2025-11-14T09:00:00", "2025-11-14T11:00:00"]

    def test_unset_orders_are_ranked_after_set_ones(self):
        sessions = [
            make_session("Unset", display_order=None),
            make_session("Set", display_order=3),
        ]
        changes = normalize_display_orders(sessions)
        assert [(c.session.title, c.old, c.new, c.changed) for c in changes] == [
            ("Set", Decimal(3), 0, True),
            ("Unset", None, 1, True),
        ]

    def test_already_normalized_reports_no_changes(self):
        sessions = [make_session("A", display_order=0), make_session("B", display_order=1)]
        assert not any(c.changed for c in normalize_display_orders(sessions))

    def test_second_pass_is_a_no_op(self):
        sessions = [
            make_session("A", display_order=None),
            make_session("B", display_order="2.5"),
            make_session("C", display_order=None),
            make_session("D", start_time="10:00", display_order=4),
        ]
        first = normalize_display_orders(sessions)
        renumbered = [make_session(c.session.title, start_time=c.session.start_time, display_order=c.new) for c in first]

        second = normalize_display_orders(renumbered)
        assert [(c.session.title, c.new) for c in second] == [(c.session.title, c.new) for c in first]
        assert not any(c.changed for c in second)
