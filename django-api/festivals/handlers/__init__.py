from festivals.handlers.views import (
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

__all__ = [
    "SessionListView",
    "SessionDetailView",
    "SessionReorderView",
    "SessionNormalizeView",
    "SessionCsvView",
    "SessionCsvPreviewView",
    "GoogleSheetImportView",
    "BookingListView",
    "BookingDetailView",
    "PublicScheduleView",
    "SessionBookingView",
    "BookingCountView",
]
