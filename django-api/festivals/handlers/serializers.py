"""Serializers for transforming domain models to API responses, and for
validating request bodies."""

from rest_framework import serializers

from festivals.domain.models import CARD_TYPES
from festivals.services.schedule_service import IMPORT_MODES, MERGE


class FestivalSerializer(serializers.Serializer):
    """Serializer for Festival domain model."""

    id = serializers.UUIDField(source="id.value")
    name = serializers.CharField()
    slug = serializers.CharField()
    start_date = serializers.DateField(allow_null=True)
    end_date = serializers.DateField(allow_null=True)


class SessionSerializer(serializers.Serializer):
    """Serializer for Session domain model."""

    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    day = serializers.CharField()
    start_time = serializers.CharField()
    end_time = serializers.CharField()
    display_order = serializers.DecimalField(max_digits=12, decimal_places=4, coerce_to_string=False, allow_null=True)
    description = serializers.CharField(source="details.description")
    location = serializers.CharField(source="details.location")
    level = serializers.CharField(source="details.level")
    styles = serializers.ListField(source="details.styles", child=serializers.CharField())
    teachers = serializers.ListField(source="details.teachers", child=serializers.CharField())
    prerequisites = serializers.CharField(source="details.prerequisites")
    capacity = serializers.IntegerField(source="details.capacity", allow_null=True)
    card_type = serializers.CharField(source="details.card_type")
    booking_enabled = serializers.BooleanField()
    booking_capacity = serializers.IntegerField(allow_null=True)
    booked_spots = serializers.IntegerField()


class AdminSessionSerializer(SessionSerializer):
    bookings = serializers.SerializerMethodField()

    def get_bookings(self, session) -> int:
        return len(session.bookings)


class DisplayOrderChangeSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="session.id.value")
    title = serializers.CharField(source="session.title")
    slot = serializers.CharField()
    old = serializers.DecimalField(max_digits=12, decimal_places=4, coerce_to_string=False, allow_null=True)
    new = serializers.IntegerField()
    changed = serializers.BooleanField()


class BookingSerializer(serializers.Serializer):
    names = serializers.ListField(child=serializers.CharField())
    email = serializers.EmailField()
    device_id = serializers.CharField()
    created_at = serializers.DateTimeField(allow_null=True)


class BookedSessionSerializer(serializers.Serializer):
    id = serializers.UUIDField(source="id.value")
    title = serializers.CharField()
    day = serializers.CharField()
    start_time = serializers.CharField()
    end_time = serializers.CharField()
    location = serializers.CharField(source="details.location")


class AdminBookingSerializer(serializers.Serializer):
    """Serializer for a BookingEntry in the organizer's bookings list."""

    id = serializers.UUIDField(source="booking.id.value")
    names = serializers.ListField(source="booking.names", child=serializers.CharField())
    email = serializers.CharField(source="booking.email")
    device_id = serializers.CharField(source="booking.device_id")
    created_at = serializers.DateTimeField(source="booking.created_at", allow_null=True)
    session = BookedSessionSerializer()


# Request bodies


class ReorderItemSerializer(serializers.Serializer):
    id = serializers.CharField()
    display_order = serializers.JSONField()


class ReorderRequestSerializer(serializers.Serializer):
    sessions = ReorderItemSerializer(many=True)


class NormalizeRequestSerializer(serializers.Serializer):
    dry_run = serializers.BooleanField(default=False)


class CsvImportRequestSerializer(serializers.Serializer):
    file = serializers.FileField()
    mode = serializers.ChoiceField(choices=IMPORT_MODES, default=MERGE)


class GoogleSheetRequestSerializer(serializers.Serializer):
    url = serializers.CharField()
    mode = serializers.ChoiceField(choices=IMPORT_MODES, default=MERGE)


class BookingRequestSerializer(serializers.Serializer):
    names = serializers.ListField(child=serializers.CharField(allow_blank=True), allow_empty=False)
    email = serializers.EmailField()
    device_id = serializers.CharField()


class SessionWriteSerializer(serializers.Serializer):
    """Body of a manual session create or update."""

    title = serializers.CharField()
    day = serializers.CharField()
    start_time = serializers.CharField()
    end_time = serializers.CharField()
    description = serializers.CharField(allow_blank=True, default="")
    location = serializers.CharField(allow_blank=True, default="")
    level = serializers.CharField(allow_blank=True, default="")
    prerequisites = serializers.CharField(allow_blank=True, default="")
    styles = serializers.ListField(child=serializers.CharField(), default=list)
    teachers = serializers.ListField(child=serializers.CharField(), default=list)
    capacity = serializers.IntegerField(min_value=0, allow_null=True, default=None)
    card_type = serializers.ChoiceField(choices=CARD_TYPES, default="full")
    booking_enabled = serializers.BooleanField(default=False)
    booking_capacity = serializers.IntegerField(min_value=0, allow_null=True, default=None)
