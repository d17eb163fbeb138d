"""Lenient date parsing and display formatting for front-matter dates.

Dates stay opaque strings on the records; they are only turned into
timestamps here, for sorting and display.
"""

from datetime import date, datetime, timezone
from email.utils import parsedate_to_datetime

_FALLBACK_FORMATS = (
    "%Y/%m/%d",
    "%B %d, %Y",
    "%b %d, %Y",
    "%d %B %Y",
    "%d %b %Y",
)

ID_MONTHS = [
    "Januari",
    "Februari",
    "Maret",
    "April",
    "Mei",
    "Juni",
    "Juli",
    "Agustus",
    "September",
    "Oktober",
    "November",
    "Desember",
]


def parse_datetime(value: str) -> datetime | None:
    """Parse *value* into an aware datetime, or None if it isn't a date.

    Naive values are taken as UTC.
    """
    text = (value or "").strip()
    if not text:
        return None

    parsed: datetime | None = None
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        for fmt in _FALLBACK_FORMATS:
            try:
                parsed = datetime.strptime(text, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        try:
            parsed = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError):
            return None
        if parsed is None:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_timestamp(value: str) -> float | None:
    """POSIX timestamp for *value*, or None when unparseable."""
    parsed = parse_datetime(value)
    return parsed.timestamp() if parsed else None


def effective_timestamp(published_at: str, date_value: str) -> float | None:
    """Timestamp used for ordering: ``publishedAt``, falling back to ``date``."""
    return parse_timestamp(published_at or date_value)


def stringify_date(value: object) -> str:
    """Normalize a front-matter date value to a string.

    YAML turns unquoted ``2024-01-01`` into a ``date`` object; keep it as
    the ISO string the author wrote.
    """
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def format_date(value: str, locale: str = "id") -> str:
    """Human-readable date: ``1 Maret 2024`` (id) or ``March 1, 2024`` (en).

    Unparseable input is returned unchanged.
    """
    parsed = parse_datetime(value)
    if parsed is None:
        return value

    if locale == "id":
        return f"{parsed.day} {ID_MONTHS[parsed.month - 1]} {parsed.year}"
    return f"{parsed.strftime('%B')} {parsed.day}, {parsed.year}"
