from django.contrib import admin

from festivals.models import Booking, Festival, Session


class SessionInline(admin.TabularInline):
    model = Session
    extra = 1
    fields = ["title", "day", "start_time", "end_time", "display_order", "booking_enabled"]


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    fields = ["names", "email", "device_id"]


@admin.register(Festival)
class FestivalAdmin(admin.ModelAdmin):
    list_display = ["name", "slug", "start_date", "end_date", "created_at"]
    search_fields = ["name", "slug"]
    prepopulated_fields = {"slug": ["name"]}
    inlines = [SessionInline]


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = ["title", "festival", "day", "start_time", "display_order", "booking_enabled"]
    list_filter = ["festival", "booking_enabled"]
    search_fields = ["title"]
    inlines = [BookingInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["email", "session", "device_id", "created_at"]
    list_filter = ["festival"]
