"""Date coercion for front matter and RFC 2822 / RFC 3339 conversions for feed output"""

import re
from datetime import date, datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Any, Optional

from dateutil import parser as date_parser


DAY_RE = re.compile(r'^\d{4}-\d{2}-\d{2}$')
RFC3339_RE = re.compile(
    r'^\d{4}-\d{2}-\d{2}[Tt ]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$'
)


def _from_aware(dt: datetime) -> Optional[datetime]:
    """Only offset-qualified timestamps are accepted; naive ones are not RFC 3339."""
    if dt.tzinfo is None or dt.utcoffset() is None:
        return None
    return dt.astimezone(timezone.utc)


def parse_date(value: Any) -> Optional[datetime]:
    """Coerce a front matter date to an aware UTC datetime, or None.

    Accepts RFC 3339 timestamps and YYYY-MM-DD (UTC midnight), both as strings
    and as the date/datetime objects PyYAML produces for unquoted values.
    Anything else yields None.
    """
    if isinstance(value, datetime):
        return _from_aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)
    if not isinstance(value, str):
        return None

    text = value.strip()
    try:
        if RFC3339_RE.match(text):
            return _from_aware(date_parser.isoparse(text.upper().replace(' ', 'T', 1)))
        if DAY_RE.match(text):
            day = datetime.strptime(text, "%Y-%m-%d")
            return day.replace(tzinfo=timezone.utc)
    except ValueError:
        return None
    return None


def to_rfc2822(dt: datetime) -> str:
    """Format as an RSS pubDate, e.g. 'Fri, 05 Jan 2024 00:00:00 +0000'."""
    return format_datetime(dt.astimezone(timezone.utc))


def parse_rfc2822(value: Optional[str]) -> Optional[datetime]:
    """Re-parse an RSS pubDate; None when missing or malformed."""
    if not value:
        return None
    try:
        dt = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def to_rfc3339(dt: datetime) -> str:
    return dt.isoformat()
