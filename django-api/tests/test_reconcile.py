"""Unit tests for import reconciliation.

Run with: pytest tests/test_reconcile.py -v
"""

from festivals.domain.models import SessionDetails
from festivals.domain.reconcile import describe_changes, reconcile, suggest_matches, title_similarity

from factories import make_incoming, make_session


def assert_each_record_classified_once(plan, current, incoming):
    current_buckets = [u.existing for u in plan.to_update] + plan.to_keep + plan.to_delete
    assert sorted(str(s.id) for s in current_buckets) == sorted(str(s.id) for s in current)

    incoming_buckets = [u.incoming for u in plan.to_update] + plan.to_create
    assert len(incoming_buckets) == len(incoming)
    assert all(any(row is other for other in incoming_buckets) for row in incoming)


class TestReconcile:
    """Tests for reconcile."""

    def test_absent_sessions_split_by_bookings(self):
        """Unbooked sessions missing from the import are deleted, booked ones kept."""
        empty = make_session("A")
        booked = make_session("B", bookings=1)

        plan = reconcile([empty, booked], [make_incoming("Brand new", start_time="18:00")])

        assert plan.to_delete == [empty]
        assert plan.to_keep == [booked]
        assert plan.to_update == []
        assert [row.title for row in plan.to_create] == ["Brand new"]

    def test_empty_import_keeps_booked_and_deletes_rest(self):
        empty = make_session("A")
        booked = make_session("B", bookings=1)

        plan = reconcile([empty, booked], [])

        assert plan.to_delete == [empty]
        assert plan.to_keep == [booked]
        assert plan.to_create == [] and plan.to_update == []

    def test_booked_sessions_are_never_deleted(self):
        current = [make_session(f"Booked {i}", bookings=i + 1) for i in range(3)]
        current += [make_session(f"Empty {i}") for i in range(3)]

        plan = reconcile(current, [make_incoming("Booked 0")])

        assert all(not s.is_protected for s in plan.to_delete)
        assert {s.title for s in plan.to_keep} == {"Booked 1", "Booked 2"}

    def test_matching_key_updates_in_place(self):
        existing = make_session("Shag Intro", day="2025-11-14", start_time="10:00", bookings=2)
        row = make_incoming("Shag Intro", day="2025-11-14", start_time="10:00", end_time="11:30")

        plan = reconcile([existing], [row])

        assert len(plan.to_update) == 1
        assert plan.to_update[0].existing is existing
        assert plan.to_update[0].incoming is row
        assert plan.to_update[0].changes == ["End time: 10:00 -> 11:30"]
        assert plan.to_keep == [] and plan.to_delete == []

    def test_key_comparison_is_exact(self):
        """Keys differing only in case or whitespace do not match."""
        existing = make_session("Balboa")
        plan = reconcile([existing], [make_incoming("balboa"), make_incoming("Balboa ")])

        assert plan.to_update == []
        assert len(plan.to_create) == 2
        assert plan.to_delete == [existing]

    def test_duplicate_incoming_keys_update_once_and_create_rest(self):
        existing = make_session("Jam")
        rows = [make_incoming("Jam"), make_incoming("Jam")]

        plan = reconcile([existing], rows)

        assert [u.incoming for u in plan.to_update] == [rows[0]]
        assert plan.to_create == [rows[1]]
        assert_each_record_classified_once(plan, [existing], rows)

    def test_duplicate_current_keys_only_first_matches(self):
        first = make_session("Jam")
        second = make_session("Jam", bookings=1)

        plan = reconcile([first, second], [make_incoming("Jam")])

        assert [u.existing for u in plan.to_update] == [first]
        assert plan.to_keep == [second]

    def test_every_record_lands_in_exactly_one_bucket(self):
        current = [
            make_session("Keep me", start_time="08:00", bookings=1),
            make_session("Drop me", start_time="08:00"),
            make_session("Update me", start_time="09:00"),
            make_session("Update me too", start_time="09:00", bookings=3),
            make_session("Dup", start_time="12:00"),
            make_session("Dup", start_time="12:00"),
        ]
        incoming = [
            make_incoming("Update me", start_time="09:00"),
            make_incoming("Update me too", start_time="09:00"),
            make_incoming("Dup", start_time="12:00"),
            make_incoming("Dup", start_time="12:00"),
            make_incoming("New", start_time="13:00"),
        ]

        plan = reconcile(current, incoming)

        assert_each_record_classified_once(plan, current, incoming)
        summary = plan.summary()
        assert (summary["to_update"], summary["to_create"], summary["to_keep"], summary["to_delete"]) == (3, 2, 1, 2)

    def test_summary_sample_lists_kept_sessions_first(self):
        plan = reconcile([make_session("Booked", bookings=2), make_session("Empty")], [make_incoming("New")])

        sample = plan.summary()["sample"]

        assert [entry["action"] for entry in sample] == ["keep", "delete", "create"]
        assert sample[0]["bookings"] == 2
        assert sample[0]["participants"] == 2


class TestDescribeChanges:
    """Tests for update change descriptions."""

    def test_no_changes(self):
        existing = make_session("A")
        assert describe_changes(existing, make_incoming("A")) == []

    def test_reports_changed_fields(self):
        existing = make_session("A", details=SessionDetails(level="Beginner", teachers=("Ann",)))
        row = make_incoming("A", details=SessionDetails(level="Advanced", teachers=("Ann", "Bo"), description="New"))

        assert describe_changes(existing, row) == [
            'Level: "Beginner" -> "Advanced"',
            'Teachers: "Ann" -> "Ann, Bo"',
            "Description changed",
        ]


class TestSuggestMatches:
    """Tests for suggested matches between created rows and leaving sessions."""

    def test_same_title_new_slot_is_suggested(self):
        moved = make_session("Blues Drills", start_time="09:00", bookings=1)
        row = make_incoming("Blues Drills", start_time="15:00")

        suggestions = suggest_matches(reconcile([moved], [row]))

        assert len(suggestions) == 1
        assert suggestions[0].existing is moved
        assert suggestions[0].similarity == 1.0
        assert suggestions[0].reason == "Same title, different schedule"

    def test_similar_title_is_suggested(self):
        existing = make_session("Lindy Hop Foundations")
        row = make_incoming("Lindy Hop Foundation")

        suggestions = suggest_matches(reconcile([existing], [row]))

        assert len(suggestions) == 1
        assert 0.7 <= suggestions[0].similarity < 1.0
        assert suggestions[0].reason.startswith("Similar title")
        assert suggestions[0].to_dict()["existing"]["id"] == str(existing.id)

    def test_unrelated_titles_are_not_suggested(self):
        plan = reconcile([make_session("Solo Jazz")], [make_incoming("Collegiate Shag")])
        assert suggest_matches(plan) == []

    def test_ambiguous_same_title_is_not_suggested(self):
        plan = reconcile(
            [make_session("Jam", start_time="20:00"), make_session("Jam", start_time="22:00")],
            [make_incoming("Jam", start_time="21:00")],
        )
        assert suggest_matches(plan) == []

    def test_suggestions_do_not_change_the_plan(self):
        plan = reconcile([make_session("Blues Drills", start_time="09:00")], [make_incoming("Blues Drills", start_time="15:00")])
        before = plan.summary()
        suggest_matches(plan)
        assert plan.summary() == before

    def test_limit(self):
        current = [make_session(f"Session {i}", start_time="09:00") for i in range(30)]
        incoming = [make_incoming(f"Session {i}", start_time="10:00") for i in range(30)]
        assert len(suggest_matches(reconcile(current, incoming))) == 20

    def test_title_similarity_ignores_case_and_padding(self):
        assert title_similarity(" Balboa ", "balboa") == 1.0
        assert title_similarity("abc", "xyz") == 0.0
