from django.urls import path

from festivals.handlers import (
    BookingCountView,
    BookingDetailView,
    BookingListView,
    GoogleSheetImportView,
    PublicScheduleView,
    SessionBookingView,
    SessionCsvPreviewView,
    SessionCsvView,
    SessionDetailView,
    SessionListView,
    SessionNormalizeView,
    SessionReorderView,
)

urlpatterns = [
    path("admin/festivals/<str:festival_id>/sessions", SessionListView.as_view(), name="session-list"),
    path(
        "admin/festivals/<str:festival_id>/sessions/reorder",
        SessionReorderView.as_view(),
        name="session-reorder",
    ),
    path(
        "admin/festivals/<str:festival_id>/sessions/normalize",
        SessionNormalizeView.as_view(),
        name="session-normalize",
    ),
    path("admin/festivals/<str:festival_id>/sessions/csv", SessionCsvView.as_view(), name="session-csv"),
    path(
        "admin/festivals/<str:festival_id>/sessions/csv/preview",
        SessionCsvPreviewView.as_view(),
        name="session-csv-preview",
    ),
    path(
        "admin/festivals/<str:festival_id>/sessions/<str:session_id>",
        SessionDetailView.as_view(),
        name="session-detail",
    ),
    path(
        "admin/festivals/<str:festival_id>/import-google-sheet",
        GoogleSheetImportView.as_view(),
        name="google-sheet-import",
    ),
    path("admin/festivals/<str:festival_id>/bookings", BookingListView.as_view(), name="booking-list"),
    path(
        "admin/festivals/<str:festival_id>/bookings/<str:booking_id>",
        BookingDetailView.as_view(),
        name="booking-detail",
    ),
    path("public/festivals/<slug:slug>", PublicScheduleView.as_view(), name="public-schedule"),
    path(
        "public/festivals/<slug:slug>/sessions/<str:session_id>/book",
        SessionBookingView.as_view(),
        name="session-book",
    ),
    path(
        "public/festivals/<slug:slug>/sessions/<str:session_id>/booking-count",
        BookingCountView.as_view(),
        name="session-booking-count",
    ),
]
