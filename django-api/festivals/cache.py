"""Public schedule cache keys and invalidation."""

import structlog
from django.conf import settings
from django.core.cache import cache

from festivals import models

logger = structlog.get_logger(__name__)


def schedule_cache_key(slug: str) -> str:
    return f"festivals:{slug}:schedule"


def get_cached_schedule(slug: str) -> dict | None:
    return cache.get(schedule_cache_key(slug))


def set_cached_schedule(slug: str, payload: dict) -> None:
    cache.set(schedule_cache_key(slug), payload, settings.PUBLIC_SCHEDULE_CACHE_TTL)


def invalidate_schedule(slug: str) -> None:
    cache.delete(schedule_cache_key(slug))
    logger.debug("schedule_cache_invalidated", slug=slug)


def invalidate_festival_schedule(festival_id) -> None:
    """Invalidate by festival primary key."""
    slug = models.Festival.objects.filter(pk=festival_id).values_list("slug", flat=True).first()
    if slug is not None:
        invalidate_schedule(slug)
