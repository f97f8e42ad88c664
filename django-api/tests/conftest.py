"""Pytest configuration and shared fixtures."""

from datetime import date

import pytest
from rest_framework.test import APIClient

from factories import FESTIVAL_ID, InMemoryFestivalStore
from festivals.domain import Festival


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def memory_store() -> InMemoryFestivalStore:
    store = InMemoryFestivalStore()
    store.add_festival(
        Festival(
            id=FESTIVAL_ID,
            name="Autumn Gathering",
            slug="autumn-gathering",
            start_date=date(2025, 11, 12),
            end_date=date(2025, 11, 16),
        )
    )
    return store


@pytest.fixture
def organizer(django_user_model):
    return django_user_model.objects.create_user(username="organizer", password="secret-pass")


@pytest.fixture
def festival(organizer):
    from festivals.models import Festival as FestivalRow

    return FestivalRow.objects.create(
        owner=organizer,
        name="Autumn Gathering",
        slug="autumn-gathering",
        start_date=date(2025, 11, 12),
        end_date=date(2025, 11, 16),
    )


@pytest.fixture
def owner_client(api_client: APIClient, organizer) -> APIClient:
    api_client.force_authenticate(user=organizer)
    return api_client
