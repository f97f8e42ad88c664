"""Django signals for cache invalidation."""

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from festivals.cache import invalidate_festival_schedule, invalidate_schedule
from festivals.models import Booking, Festival, Session


@receiver([post_save, post_delete], sender=Festival)
def invalidate_festival_cache(sender, instance, **kwargs):
    """Invalidate the public schedule when a festival is saved or deleted."""
    invalidate_schedule(instance.slug)


@receiver([post_save, post_delete], sender=Session)
def invalidate_session_cache(sender, instance, **kwargs):
    """Invalidate the public schedule when a session is saved or deleted."""
    invalidate_festival_schedule(instance.festival_id)


@receiver([post_save, post_delete], sender=Booking)
def invalidate_booking_cache(sender, instance, **kwargs):
    """Invalidate the public schedule when booked spots change."""
    invalidate_festival_schedule(instance.festival_id)
