"""Client for publicly shared Google Sheets.

Sheets are read through their CSV export, so no Google credentials are
needed; the sheet must be shared as "Anyone with the link can view".
"""

import re

import requests
import structlog

from festivals.domain.errors import InvalidSheetUrlError, SheetUnavailableError

logger = structlog.get_logger(__name__)

EXPORT_URL = "https://docs.google.com/spreadsheets/d/{sheet_id}/export?format=csv"

SHEET_ID_RE = re.compile(r"/spreadsheets/d/([a-zA-Z0-9_-]+)")


def extract_sheet_id(url: str) -> str:
    """Return the spreadsheet ID from a sharing or edit URL.

    Raises:
        InvalidSheetUrlError: If the URL holds no spreadsheet ID.
    """
    match = SHEET_ID_RE.search(url or "")
    if not match:
        raise InvalidSheetUrlError()
    return match.group(1)


class GoogleSheetsClient:
    """Fetches sheet contents as CSV text."""

    def __init__(self, timeout: float = 10.0, session: requests.Session | None = None) -> None:
        self._timeout = timeout
        self._session = session or requests.Session()

    def fetch_csv(self, url: str) -> str:
        """Download the first worksheet of a shared sheet.

        Raises:
            InvalidSheetUrlError: If ``url`` is not a Google Sheets URL.
            SheetUnavailableError: If the sheet is missing, private or unreachable.
        """
        sheet_id = extract_sheet_id(url)
        export_url = EXPORT_URL.format(sheet_id=sheet_id)

        try:
            response = self._session.get(export_url, timeout=self._timeout)
        except requests.RequestException as e:
            logger.warning("google_sheet_fetch_failed", sheet_id=sheet_id, error=str(e))
            raise SheetUnavailableError(
                "Network error while fetching the sheet. Please try again."
            ) from e

        if response.status_code == 404:
            raise SheetUnavailableError("Sheet not found. Please check the URL is correct.")
        if response.status_code in (401, 403):
            raise SheetUnavailableError(
                'Sheet is not publicly accessible. Share it with "Anyone with the link" can view.'
            )
        if not response.ok:
            logger.warning("google_sheet_fetch_failed", sheet_id=sheet_id, status=response.status_code)
            raise SheetUnavailableError(f"Unable to access sheet (HTTP {response.status_code}).")

        if "text/html" in response.headers.get("Content-Type", ""):
            # Private sheets redirect to a sign-in page instead of failing.
            raise SheetUnavailableError(
                'Sheet is not publicly accessible. Share it with "Anyone with the link" can view.'
            )

        response.encoding = "utf-8"
        logger.info("google_sheet_fetched", sheet_id=sheet_id, size=len(response.content))
        return response.text
