"""Tests for public schedule cache behavior.

Run with: pytest tests/test_cache.py -v
"""

import pytest
from django.core.cache import cache
from django.core.files.uploadedfile import SimpleUploadedFile

from festivals.cache import schedule_cache_key
from festivals.models import Booking, Session

PUBLIC_URL = "/api/public/festivals/autumn-gathering"
KEY = schedule_cache_key("autumn-gathering")


def add_session(festival, title: str, **kwargs) -> Session:
    return Session.objects.create(
        festival=festival, title=title, day="2025-11-14", start_time="09:00", end_time="10:00", **kwargs
    )


@pytest.mark.django_db
class TestPublicScheduleCache:
    """Tests for caching of the public schedule."""

    def test_schedule_is_cached(self, api_client, festival):
        add_session(festival, "Social")

        api_client.get(PUBLIC_URL)

        assert cache.get(KEY)["sessions"][0]["title"] == "Social"

    def test_cached_schedule_is_served(self, api_client, festival):
        cache.set(KEY, {"festival": {"slug": "autumn-gathering"}, "sessions": []})

        response = api_client.get(PUBLIC_URL)

        assert response.data["sessions"] == []


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_festival_save_invalidates_schedule(self, festival):
        cache.set(KEY, {"stale": True})
        festival.name = "Renamed"
        festival.save()
        assert cache.get(KEY) is None

    def test_session_save_invalidates_schedule(self, festival):
        cache.set(KEY, {"stale": True})
        add_session(festival, "Social")
        assert cache.get(KEY) is None

    def test_session_delete_invalidates_schedule(self, festival):
        session = add_session(festival, "Social")
        cache.set(KEY, {"stale": True})
        session.delete()
        assert cache.get(KEY) is None

    def test_booking_save_invalidates_schedule(self, festival):
        session = add_session(festival, "Social")
        cache.set(KEY, {"stale": True})
        Booking.objects.create(festival=festival, session=session, names=["Ann"], email="a@example.com", device_id="d")
        assert cache.get(KEY) is None

    def test_import_invalidates_schedule_on_commit(
        self, owner_client, festival, django_capture_on_commit_callbacks
    ):
        owner_client.get(PUBLIC_URL)
        assert cache.get(KEY) is not None

        upload = SimpleUploadedFile(
            "schedule.csv", b"title,day,start,end\nNew,2025-11-14,09:00,10:00\n", content_type="text/csv"
        )
        with django_capture_on_commit_callbacks(execute=True):
            response = owner_client.post(
                f"/api/admin/festivals/{festival.pk}/sessions/csv", {"file": upload}, format="multipart"
            )

        assert response.status_code == 200
        assert cache.get(KEY) is None

    def test_reorder_invalidates_schedule_on_commit(self, owner_client, festival, django_capture_on_commit_callbacks):
        session = add_session(festival, "Social")
        cache.set(KEY, {"stale": True})

        with django_capture_on_commit_callbacks(execute=True):
            owner_client.post(
                f"/api/admin/festivals/{festival.pk}/sessions/reorder",
                {"sessions": [{"id": str(session.pk), "display_order": 3}]},
                format="json",
            )

        assert cache.get(KEY) is None
