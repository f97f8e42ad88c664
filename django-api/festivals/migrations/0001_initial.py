import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Festival",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("slug", models.SlugField(max_length=100, unique=True)),
                ("start_date", models.DateField(blank=True, null=True)),
                ("end_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "owner",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="festivals",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [models.Index(fields=["-created_at"], name="festivals_f_created_6c1f2b_idx")],
            },
        ),
        migrations.CreateModel(
            name="Session",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("day", models.CharField(max_length=32)),
                ("start_time", models.CharField(max_length=32)),
                ("end_time", models.CharField(max_length=32)),
                (
                    "display_order",
                    models.DecimalField(blank=True, decimal_places=4, default=0, max_digits=12, null=True),
                ),
                ("description", models.TextField(blank=True, default="")),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("level", models.CharField(blank=True, default="", max_length=100)),
                ("styles", models.JSONField(blank=True, default=list)),
                ("teachers", models.JSONField(blank=True, default=list)),
                ("prerequisites", models.TextField(blank=True, default="")),
                ("capacity", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "card_type",
                    models.CharField(
                        choices=[("full", "Full"), ("simplified", "Simplified"), ("photo-only", "Photo Only")],
                        default="full",
                        max_length=20,
                    ),
                ),
                ("booking_enabled", models.BooleanField(default=False)),
                ("booking_capacity", models.PositiveIntegerField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "festival",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sessions",
                        to="festivals.festival",
                    ),
                ),
            ],
            options={
                "indexes": [
                    models.Index(fields=["festival", "day", "start_time"], name="festivals_s_festiva_3a9d0e_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("names", models.JSONField(default=list)),
                ("email", models.EmailField(max_length=254)),
                ("device_id", models.CharField(max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "festival",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="bookings",
                        to="festivals.festival",
                    ),
                ),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.RESTRICT,
                        related_name="bookings",
                        to="festivals.session",
                    ),
                ),
            ],
            options={
                "indexes": [models.Index(fields=["session"], name="festivals_b_session_8e4b71_idx")],
                "constraints": [
                    models.UniqueConstraint(fields=("session", "device_id"), name="unique_booking_per_device")
                ],
            },
        ),
    ]
