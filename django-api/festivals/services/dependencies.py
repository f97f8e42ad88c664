from django.conf import settings

from festivals.integrations.google_sheets import GoogleSheetsClient
from festivals.services.schedule_service import ScheduleService
from festivals.stores.django_store import DjangoFestivalStore


def get_schedule_service() -> ScheduleService:
    return ScheduleService(
        store=DjangoFestivalStore(),
        sheets=GoogleSheetsClient(timeout=settings.GOOGLE_SHEETS_TIMEOUT),
    )
