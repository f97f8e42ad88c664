"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import structlog
from django.http import HttpResponse
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from festivals.cache import get_cached_schedule, set_cached_schedule
from festivals.domain import Festival
from festivals.domain.errors import DomainError, ErrorCode, FestivalNotFoundError
from festivals.handlers.serializers import (
    AdminBookingSerializer,
    AdminSessionSerializer,
    BookingRequestSerializer,
    BookingSerializer,
    CsvImportRequestSerializer,
    DisplayOrderChangeSerializer,
    FestivalSerializer,
    GoogleSheetRequestSerializer,
    NormalizeRequestSerializer,
    ReorderRequestSerializer,
    SessionSerializer,
    SessionWriteSerializer,
)
from festivals.services.dependencies import get_schedule_service
from festivals.services.schedule_service import ScheduleService

logger = structlog.get_logger(__name__)

ERROR_STATUS = {
    ErrorCode.FESTIVAL_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.BOOKING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.INVALID_FESTIVAL_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_SESSION_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_BOOKING_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_SESSION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_REORDER: status.HTTP_400_BAD_REQUEST,
    ErrorCode.IMPORT_FORMAT: status.HTTP_400_BAD_REQUEST,
    ErrorCode.IMPORT_EMPTY: status.HTTP_400_BAD_REQUEST,
    ErrorCode.BOOKING_REJECTED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_SHEET_URL: status.HTTP_400_BAD_REQUEST,
    ErrorCode.PROTECTED_DELETION_ATTEMPT: status.HTTP_409_CONFLICT,
    ErrorCode.SHEET_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
}


def error_response(error: DomainError) -> Response:
    return Response(
        {"code": error.code.value, "message": error.message},
        status=ERROR_STATUS.get(error.code, status.HTTP_400_BAD_REQUEST),
    )


def read_upload(upload) -> str:
    """Decode an uploaded schedule file. Excel on Windows writes cp1252."""
    raw = upload.read()
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        return raw.decode("cp1252", errors="replace")


class ScheduleView(APIView):
    """Base view holding the schedule service."""

    service: ScheduleService | None = None

    def get_service(self) -> ScheduleService:
        return self.service or get_schedule_service()

    def handle_exception(self, exc):
        if isinstance(exc, DomainError):
            logger.info("domain_error", code=exc.code.value, path=self.request.path)
            return error_response(exc)
        return super().handle_exception(exc)


class AdminFestivalView(ScheduleView):
    """Views scoped to a festival the requesting user owns."""

    permission_classes = [IsAuthenticated]

    def get_owned_festival(self, request: Request, festival_id: str) -> Festival:
        festival = self.get_service().get_festival(festival_id)
        if not request.user.is_staff and festival.owner_id != request.user.pk:
            # Festivals of other organizers are indistinguishable from missing ones.
            raise FestivalNotFoundError(festival_id)
        return festival


class SessionListView(AdminFestivalView):
    """Handler for GET/POST /api/admin/festivals/{festival_id}/sessions"""

    def get(self, request: Request, festival_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        sessions = self.get_service().list_sessions(festival_id)
        return Response({"sessions": AdminSessionSerializer(sessions, many=True).data})

    def post(self, request: Request, festival_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        body = SessionWriteSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        session = self.get_service().create_session(festival_id, body.validated_data)
        return Response(AdminSessionSerializer(session).data, status=status.HTTP_201_CREATED)


class SessionDetailView(AdminFestivalView):
    """Handler for PUT/DELETE /api/admin/festivals/{festival_id}/sessions/{session_id}"""

    def put(self, request: Request, festival_id: str, session_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        body = SessionWriteSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        session = self.get_service().update_session(festival_id, session_id, body.validated_data)
        return Response(AdminSessionSerializer(session).data)

    def delete(self, request: Request, festival_id: str, session_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        self.get_service().delete_session(festival_id, session_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class SessionReorderView(AdminFestivalView):
    """Handler for POST /api/admin/festivals/{festival_id}/sessions/reorder"""

    def post(self, request: Request, festival_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        body = ReorderRequestSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        orders = [(item["id"], item["display_order"]) for item in body.validated_data["sessions"]]
        updated = self.get_service().reorder_sessions(festival_id, orders)
        return Response({"success": True, "updated": updated})


class SessionNormalizeView(AdminFestivalView):
    """Handler for POST /api/admin/festivals/{festival_id}/sessions/normalize"""

    def post(self, request: Request, festival_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        body = NormalizeRequestSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        dry_run = body.validated_data["dry_run"]
        changes = self.get_service().normalize_display_orders(festival_id, dry_run=dry_run)
        return Response(
            {
                "dry_run": dry_run,
                "changed": sum(1 for c in changes if c.changed),
                "changes": DisplayOrderChangeSerializer(changes, many=True).data,
            }
        )


class SessionCsvView(AdminFestivalView):
    """Handler for GET/POST /api/admin/festivals/{festival_id}/sessions/csv"""

    parser_classes = [MultiPartParser, FormParser]

    def get(self, request: Request, festival_id: str) -> HttpResponse:
        self.get_owned_festival(request, festival_id)
        content = self.get_service().export_sessions_csv(festival_id)
        response = HttpResponse(content, content_type="text/csv; charset=utf-8")
        response["Content-Disposition"] = 'attachment; filename="festival-sessions.csv"'
        return response

    def post(self, request: Request, festival_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        body = CsvImportRequestSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        text = read_upload(body.validated_data["file"])
        result = self.get_service().apply_import(festival_id, text, mode=body.validated_data["mode"])
        return Response(result.to_dict())


class SessionCsvPreviewView(AdminFestivalView):
    """Handler for POST /api/admin/festivals/{festival_id}/sessions/csv/preview"""

    parser_classes = [MultiPartParser, FormParser]

    def post(self, request: Request, festival_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        body = CsvImportRequestSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        preview = self.get_service().preview_import(festival_id, read_upload(body.validated_data["file"]))
        return Response(preview.to_dict())


class GoogleSheetImportView(AdminFestivalView):
    """Handler for GET/POST /api/admin/festivals/{festival_id}/import-google-sheet

    GET previews the import for ``?url=``; POST applies it.
    """

    parser_classes = [JSONParser, FormParser]

    def get(self, request: Request, festival_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        body = GoogleSheetRequestSerializer(data=request.query_params)
        body.is_valid(raise_exception=True)
        preview = self.get_service().preview_google_sheet(festival_id, body.validated_data["url"])
        return Response(preview.to_dict())

    def post(self, request: Request, festival_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        body = GoogleSheetRequestSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        result = self.get_service().import_google_sheet(
            festival_id, body.validated_data["url"], mode=body.validated_data["mode"]
        )
        return Response(result.to_dict())


class BookingListView(AdminFestivalView):
    """Handler for GET /api/admin/festivals/{festival_id}/bookings"""

    def get(self, request: Request, festival_id: str) -> Response:
        festival = self.get_owned_festival(request, festival_id)
        entries = self.get_service().list_bookings(festival_id)
        return Response(
            {
                "festival_name": festival.name,
                "bookings": AdminBookingSerializer(entries, many=True).data,
            }
        )


class BookingDetailView(AdminFestivalView):
    """Handler for DELETE /api/admin/festivals/{festival_id}/bookings/{booking_id}"""

    def delete(self, request: Request, festival_id: str, booking_id: str) -> Response:
        self.get_owned_festival(request, festival_id)
        self.get_service().remove_booking(festival_id, booking_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class PublicScheduleView(ScheduleView):
    """Handler for GET /api/public/festivals/{slug}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, slug: str) -> Response:
        cached = get_cached_schedule(slug)
        if cached is not None:
            return Response(cached)

        festival, sessions = self.get_service().get_public_schedule(slug)
        payload = {
            "festival": FestivalSerializer(festival).data,
            "sessions": SessionSerializer(sessions, many=True).data,
        }
        set_cached_schedule(slug, payload)
        return Response(payload)


class SessionBookingView(ScheduleView):
    """Handler for POST/DELETE /api/public/festivals/{slug}/sessions/{session_id}/book"""

    permission_classes = [AllowAny]

    def post(self, request: Request, slug: str, session_id: str) -> Response:
        body = BookingRequestSerializer(data=request.data)
        body.is_valid(raise_exception=True)
        booking = self.get_service().book_session(slug, session_id, **body.validated_data)
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    def delete(self, request: Request, slug: str, session_id: str) -> Response:
        device_id = request.query_params.get("device_id", "")
        self.get_service().cancel_booking(slug, session_id, device_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class BookingCountView(ScheduleView):
    """Handler for GET /api/public/festivals/{slug}/sessions/{session_id}/booking-count"""

    permission_classes = [AllowAny]

    def get(self, request: Request, slug: str, session_id: str) -> Response:
        return Response({"count": self.get_service().booking_count(slug, session_id)})
