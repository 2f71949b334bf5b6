"""Timestamp parsing for PHIVOLCS bulletin rows and query bounds."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone

# Philippine Standard Time. No DST, so a fixed offset is exact.
PHT = timezone(timedelta(hours=8), "PHT")

MONTHS: dict[str, int] = {
    "Jan": 1, "January": 1,
    "Feb": 2, "February": 2,
    "Mar": 3, "March": 3,
    "Apr": 4, "April": 4,
    "May": 5,
    "Jun": 6, "June": 6,
    "Jul": 7, "July": 7,
    "Aug": 8, "August": 8,
    "Sep": 9, "September": 9,
    "Oct": 10, "October": 10,
    "Nov": 11, "November": 11,
    "Dec": 12, "December": 12,
}

# e.g. "21 October 2024 - 10:15 AM"
_BULLETIN_TIME = re.compile(r"(\d{1,2}) (\w+) (\d{4}) - (\d{1,2}):(\d{2})(?: (\w{2}))?")


def parse_bulletin_time(text: str) -> datetime | None:
    """Parse a bulletin time cell into an aware datetime in PHT.

    Returns None when the text does not look like a bulletin timestamp or
    names an impossible date.
    """
    match = _BULLETIN_TIME.search(text or "")
    if not match:
        return None
    day, month_name, year, hour_text, minute_text, marker = match.groups()
    month = MONTHS.get(month_name)
    if month is None:
        return None

    hour = int(hour_text)
    if marker:
        marker = marker.upper()
        if marker == "PM" and hour < 12:
            hour += 12
        elif marker == "AM" and hour == 12:
            hour = 0

    try:
        return datetime(int(year), month, int(day), hour, int(minute_text), tzinfo=PHT)
    except ValueError:
        return None


def parse_query_bound(text: str) -> datetime:
    """Parse an ISO-8601 ``start``/``end`` query value.

    Date-only and naive values are taken as PHT wall-clock time so that
    ``start=2024-01-01`` means midnight in Manila. Raises ValueError on
    unparseable input.
    """
    value = datetime.fromisoformat(text.strip())
    if value.tzinfo is None:
        value = value.replace(tzinfo=PHT)
    return value
