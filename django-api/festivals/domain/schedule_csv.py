"""Reading and writing schedule spreadsheets.

Schedules travel as delimited text: uploaded CSV files, Google Sheets CSV
exports, and the CSV download. Columns are found by header name, so column
order does not matter. Rows that cannot be used are skipped and reported;
they never fail the whole import.
"""

import csv
import io
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable

from festivals.domain.errors import ImportFormatError, RowWarning, WarningCode
from festivals.domain.models import IncomingSession, Session, SessionDetails
from festivals.domain.value_objects import ISO_DATE_RE, WEEKDAYS, CanonicalDate

BOM = "\ufeff"

REQUIRED_COLUMNS = ("title", "day", "start", "end")

COLUMN_ALIASES = {
    "id": ("id",),
    "title": ("title",),
    "day": ("day",),
    "start": ("start", "start time", "start_time"),
    "end": ("end", "end time", "end_time"),
    "level": ("level",),
    "capacity": ("capacity",),
    "styles": ("styles", "types", "style", "type"),
    "card_type": ("cardtype", "card type", "card_type"),
    "teachers": ("teachers", "teacher"),
    "location": ("location",),
    "description": ("description",),
    "prerequisites": ("prerequisites",),
}

CARD_TYPE_ALIASES = {
    "": "full",
    "full": "full",
    "detailed": "full",
    "simplified": "simplified",
    "minimal": "simplified",
    "photo-only": "photo-only",
    "photo": "photo-only",
}

EXPORT_HEADER = (
    "id",
    "day",
    "start",
    "end",
    "title",
    "level",
    "capacity",
    "styles",
    "CardType",
    "teachers",
    "location",
    "Description",
    "Prerequisites",
)

EMBEDDED_DATE_RE = re.compile(r"(\d{4}-\d{2}-\d{2})(?:[T\s]|$)")
CLOCK_RE = re.compile(r"^(\d{1,2})[:.](\d{2})(?::\d{2})?\s*([ap]\.?m\.?)?$", re.IGNORECASE)
EMBEDDED_CLOCK_RE = re.compile(r"[T\s](\d{2}:\d{2})")
HOUR_RE = re.compile(r"^(\d{1,2})\s*([ap]\.?m\.?)$", re.IGNORECASE)
LIST_SPLIT_RE = re.compile(r"[,&]")


@dataclass
class ParsedImport:
    sessions: list[IncomingSession] = field(default_factory=list)
    skipped: int = 0
    warnings: list[RowWarning] = field(default_factory=list)

    def warn(self, code: WarningCode, row: int, message: str) -> None:
        self.warnings.append(RowWarning(code=code, row=row, message=message))


def detect_delimiter(header_line: str) -> str:
    return ";" if ";" in header_line else ","


def split_list(value: str) -> tuple[str, ...]:
    if not value or not value.strip():
        return ()
    return tuple(item.strip() for item in LIST_SPLIT_RE.split(value) if item.strip())


def parse_capacity(value: str) -> int | None:
    match = re.match(r"^\s*(\d+)", value or "")
    if not match:
        return None
    return int(match.group(1)) or None


def normalize_time(value: str) -> str | None:
    """Return ``HH:MM`` for a bare or embedded clock time, None if unreadable."""
    value = (value or "").strip()
    if not value:
        return None

    match = CLOCK_RE.match(value)
    if match:
        hour, minute, meridiem = int(match.group(1)), int(match.group(2)), match.group(3)
        return _clock(hour, minute, meridiem)

    match = HOUR_RE.match(value)
    if match:
        return _clock(int(match.group(1)), 0, match.group(2))

    match = EMBEDDED_CLOCK_RE.search(value)
    if match:
        return match.group(1)
    return None


def _clock(hour: int, minute: int, meridiem: str | None) -> str | None:
    if meridiem:
        if not 1 <= hour <= 12:
            return None
        is_pm = meridiem.lower().startswith("p")
        hour = hour % 12 + (12 if is_pm else 0)
    if hour > 23 or minute > 59:
        return None
    return f"{hour:02d}:{minute:02d}"


def normalize_day(day: str, start: str, end: str, festival_start: date | None) -> str | None:
    """Resolve a row's day to an ISO date string.

    Tried in order: an ISO day, a date embedded in the start or end datetime,
    a weekday name anchored on the festival's first day.
    """
    if ISO_DATE_RE.match(day):
        try:
            return str(CanonicalDate.from_iso(day))
        except ValueError:
            return None

    for value in (start, end):
        match = EMBEDDED_DATE_RE.search(value or "")
        if match:
            return match.group(1)

    if festival_start is not None and day.strip().lower() in WEEKDAYS:
        return str(CanonicalDate.from_weekday(day, festival_start))
    return None


def within_dates(iso_day: str, start: date | None, end: date | None) -> bool:
    if start is not None and iso_day < start.isoformat():
        return False
    if end is not None and iso_day > end.isoformat():
        return False
    return True


class _Columns:
    """Header-name lookup over one parsed row."""

    def __init__(self, header: list[str]) -> None:
        positions = {name.strip().lower(): index for index, name in enumerate(header)}
        self._index: dict[str, int] = {}
        for column, aliases in COLUMN_ALIASES.items():
            for alias in aliases:
                if alias in positions:
                    self._index[column] = positions[alias]
                    break

    def missing(self, columns: Iterable[str]) -> list[str]:
        return [column for column in columns if column not in self._index]

    def get(self, row: list[str], column: str) -> str:
        index = self._index.get(column)
        if index is None or index >= len(row):
            return ""
        return row[index].strip()


def parse_schedule_csv(
    text: str,
    festival_start: date | None = None,
    festival_end: date | None = None,
) -> ParsedImport:
    """Parse delimited schedule text into incoming sessions.

    Weekday names resolve against ``festival_start``. Days that land outside
    ``festival_start``..``festival_end`` are kept and flagged.

    Raises:
        ImportFormatError: If there is no header and data row, or a required
            column is missing from the header.
    """
    text = (text or "").lstrip(BOM)
    lines = text.splitlines()
    if len([line for line in lines if line.strip()]) < 2:
        raise ImportFormatError("CSV file must contain headers and at least one row")

    delimiter = detect_delimiter(lines[0])
    reader = csv.reader(io.StringIO(text), delimiter=delimiter)
    header = next(reader)
    columns = _Columns(header)

    missing = columns.missing(REQUIRED_COLUMNS)
    if missing:
        raise ImportFormatError(
            f"Missing required columns: {', '.join(missing)}. Required: {', '.join(REQUIRED_COLUMNS)}"
        )

    result = ParsedImport()
    for row in reader:
        if not any(value.strip() for value in row):
            continue
        row_number = reader.line_num
        incoming = _parse_row(row, row_number, columns, festival_start, festival_end, result)
        if incoming is None:
            result.skipped += 1
        else:
            result.sessions.append(incoming)
    return result


def _parse_row(
    row: list[str],
    row_number: int,
    columns: _Columns,
    festival_start: date | None,
    festival_end: date | None,
    result: ParsedImport,
) -> IncomingSession | None:
    title = columns.get(row, "title")
    day = columns.get(row, "day")
    start = columns.get(row, "start")
    end = columns.get(row, "end")

    if not (title and day and start and end):
        result.warn(
            WarningCode.MALFORMED_ROW,
            row_number,
            f'Missing required fields (title="{title}", day="{day}", start="{start}", end="{end}")',
        )
        return None

    iso_day = normalize_day(day, start, end, festival_start)
    start_time = normalize_time(start)
    end_time = normalize_time(end)
    if iso_day is None or start_time is None or end_time is None:
        result.warn(
            WarningCode.AMBIGUOUS_DATE_KEY,
            row_number,
            f'Could not normalize day/time (day="{day}", start="{start}", end="{end}")',
        )
    elif not within_dates(iso_day, festival_start, festival_end):
        result.warn(
            WarningCode.AMBIGUOUS_DATE_KEY,
            row_number,
            f'Day "{day}" resolves to {iso_day}, outside the festival dates',
        )

    raw_card_type = columns.get(row, "card_type")
    card_type = CARD_TYPE_ALIASES.get(raw_card_type.lower())
    if card_type is None:
        result.warn(
            WarningCode.INVALID_CARD_TYPE,
            row_number,
            f'Invalid CardType "{raw_card_type}". Must be "minimal", "photo", or "detailed"',
        )
        card_type = "full"

    return IncomingSession(
        title=title,
        day=iso_day or day,
        start_time=start_time or start,
        end_time=end_time or end,
        details=SessionDetails(
            description=columns.get(row, "description"),
            location=columns.get(row, "location"),
            level=columns.get(row, "level"),
            styles=split_list(columns.get(row, "styles")),
            teachers=split_list(columns.get(row, "teachers")),
            prerequisites=columns.get(row, "prerequisites"),
            capacity=parse_capacity(columns.get(row, "capacity")),
            card_type=card_type,
        ),
        row=row_number,
    )


def export_schedule_csv(sessions: Iterable[Session]) -> str:
    """Render sessions as a semicolon-delimited CSV with a UTF-8 BOM.

    The layout matches the import template, so an export can be edited in a
    spreadsheet and imported back.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, delimiter=";", lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for index, session in enumerate(sessions, start=1):
        details = session.details
        writer.writerow(
            [
                index,
                session.day,
                session.start_time,
                session.end_time,
                session.title,
                details.level,
                details.capacity or "",
                ", ".join(details.styles),
                details.card_type,
                " & ".join(details.teachers),
                details.location,
                details.description,
                details.prerequisites,
            ]
        )
    return BOM + buffer.getvalue()
