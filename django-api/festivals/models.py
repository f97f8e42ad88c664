"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.conf import settings
from django.db import models

from festivals.domain.value_objects import DISPLAY_ORDER_MAX_DIGITS, DISPLAY_ORDER_PLACES


class Festival(models.Model):
    """Persistence model for festivals."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="festivals",
        null=True,
        blank=True,
    )
    name = models.CharField(max_length=255)
    slug = models.SlugField(max_length=100, unique=True)
    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="festivals_f_created_6c1f2b_idx"),
        ]

    def __str__(self) -> str:
        return self.name


class Session(models.Model):
    """Persistence model for timetable sessions.

    ``day``, ``start_time`` and ``end_time`` are stored as text: imported
    schedules carry either ISO dates or weekday names, and either bare times
    or full ISO datetimes.
    """

    class CardType(models.TextChoices):
        FULL = "full"
        SIMPLIFIED = "simplified"
        PHOTO_ONLY = "photo-only"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    festival = models.ForeignKey(Festival, on_delete=models.CASCADE, related_name="sessions")
    title = models.CharField(max_length=255)
    day = models.CharField(max_length=32)
    start_time = models.CharField(max_length=32)
    end_time = models.CharField(max_length=32)
    display_order = models.DecimalField(
        max_digits=DISPLAY_ORDER_MAX_DIGITS,
        decimal_places=DISPLAY_ORDER_PLACES,
        default=0,
        null=True,
        blank=True,
    )
    description = models.TextField(blank=True, default="")
    location = models.CharField(max_length=255, blank=True, default="")
    level = models.CharField(max_length=100, blank=True, default="")
    styles = models.JSONField(default=list, blank=True)
    teachers = models.JSONField(default=list, blank=True)
    prerequisites = models.TextField(blank=True, default="")
    capacity = models.PositiveIntegerField(blank=True, null=True)
    card_type = models.CharField(max_length=20, choices=CardType.choices, default=CardType.FULL)
    booking_enabled = models.BooleanField(default=False)
    booking_capacity = models.PositiveIntegerField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["festival", "day", "start_time"], name="festivals_s_festiva_3a9d0e_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title} ({self.day} {self.start_time})"


class Booking(models.Model):
    """Persistence model for attendee bookings."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    festival = models.ForeignKey(Festival, on_delete=models.CASCADE, related_name="bookings")
    # A booked session cannot be deleted on its own, only with its festival.
    session = models.ForeignKey(Session, on_delete=models.RESTRICT, related_name="bookings")
    names = models.JSONField(default=list)
    email = models.EmailField()
    device_id = models.CharField(max_length=255)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["session", "device_id"], name="unique_booking_per_device"),
        ]
        indexes = [
            models.Index(fields=["session"], name="festivals_b_session_8e4b71_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.email} - {self.session_id}"
