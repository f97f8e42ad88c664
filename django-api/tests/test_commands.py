"""Tests for management commands.

Run with: pytest tests/test_commands.py -v
"""

import uuid
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from festivals.models import Session


def add_session(festival, title: str, display_order, start_time: str = "09:00") -> Session:
    return Session.objects.create(
        festival=festival,
        title=title,
        day="2025-11-14",
        start_time=start_time,
        end_time="10:00",
        display_order=display_order,
    )


@pytest.mark.django_db
class TestNormalizeDisplayOrdersCommand:
    """Tests for the normalize_display_orders command."""

    def test_dry_run_reports_without_writing(self, festival):
        session = add_session(festival, "Unranked", None)
        out = StringIO()

        call_command("normalize_display_orders", "--dry-run", stdout=out)

        session.refresh_from_db()
        assert session.display_order is None
        assert "Dry run: 1 sessions would be updated" in out.getvalue()
        assert "null -> 0" in out.getvalue()

    def test_renumbers_each_slot(self, festival):
        a = add_session(festival, "A", 10)
        b = add_session(festival, "B", "2.5")
        c = add_session(festival, "C", 3, start_time="11:00")
        out = StringIO()

        call_command("normalize_display_orders", "--festival", str(festival.pk), stdout=out)

        for row in (a, b, c):
            row.refresh_from_db()
        assert (b.display_order, a.display_order, c.display_order) == (0, 1, 0)
        assert "Updated 3 sessions" in out.getvalue()

    def test_unknown_festival(self, db):
        with pytest.raises(CommandError):
            call_command("normalize_display_orders", "--festival", str(uuid.uuid4()), stdout=StringIO())
