"""
Field micro-parsers.

Each parser takes one raw text field of the schedule export and returns a
structured value, or None / an empty value when the text does not match.
None of them raise on malformed input.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time
from typing import List, Optional, Tuple

from dateutil.parser import ParserError
from dateutil.parser import parse as dateutil_parse


log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Time
# ---------------------------------------------------------------------------

_TIME_RE = re.compile(r"(\d{1,2}):(\d{2})\s*(AM|PM)", re.IGNORECASE)

# "2:30 PM - 3:50 PM"
_TIME_RANGE_RE = re.compile(
    r"(\d{1,2}:\d{2}\s*[AP]M)\s*-\s*(\d{1,2}:\d{2}\s*[AP]M)",
    re.IGNORECASE,
)


def parse_time(text: str) -> Optional[time]:
    """
    Parse a 12-hour clock string like "2:30 PM" into a 24-hour time.

    12 AM is midnight, 12 PM is noon.
    """
    match = _TIME_RE.search(text or "")
    if not match:
        return None

    hour = int(match.group(1))
    minute = int(match.group(2))
    meridiem = match.group(3).upper()

    if not (1 <= hour <= 12 and 0 <= minute <= 59):
        return None

    if meridiem == "PM" and hour != 12:
        hour += 12
    elif meridiem == "AM" and hour == 12:
        hour = 0

    return time(hour, minute)


def parse_time_range(text: str) -> Tuple[str, str]:
    """
    Split "<time> - <time>" into its two halves.

    Returns ("", "") when the text is not a time range.
    """
    match = _TIME_RANGE_RE.search(text or "")
    if not match:
        return "", ""
    return match.group(1).strip(), match.group(2).strip()


# ---------------------------------------------------------------------------
# Days
# ---------------------------------------------------------------------------

DAY_CODES = {
    "Mon": "MO",
    "Tue": "TU",
    "Wed": "WE",
    "Thu": "TH",
    "Fri": "FR",
    "Sat": "SA",
    "Sun": "SU",
}


def parse_days(text: str) -> List[str]:
    """
    Map a day list like "Tue/Thu" to weekday codes ["TU", "TH"].

    Unknown tokens are dropped. Order follows the input.
    """
    days: List[str] = []
    for token in (text or "").split("/"):
        code = DAY_CODES.get(token.strip())
        if code and code not in days:
            days.append(code)
    return days


# ---------------------------------------------------------------------------
# Location
# ---------------------------------------------------------------------------

_ROOM_LABEL_RE = re.compile(r"^Room\s+", re.IGNORECASE)


def parse_location(text: str) -> Tuple[Optional[str], Optional[str]]:
    """
    Split "MUSIC CLRM, Room 00102" into ("MUSIC CLRM", "00102").

    A single part is the location alone; an empty field gives (None, None).
    """
    parts = [p.strip() for p in (text or "").split(",")]

    if len(parts) >= 2:
        location = parts[0] or None
        room = _ROOM_LABEL_RE.sub("", parts[1]) or None
        return location, room

    if parts[0]:
        return parts[0], None

    return None, None


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

# Tried in order; strptime accepts both "1/5" and "01/05" for %m/%d.
DATE_FORMATS = (
    "%m/%d/%Y",
    "%m/%d/%y",
    "%m-%d-%Y",
    "%m-%d-%y",
)

# purely numeric month/day/year text belongs to DATE_FORMATS only
_NUMERIC_MDY_RE = re.compile(r"^\d{1,2}[/-]\d{1,2}[/-]\d{2,4}$")

# two defaults differing in every field; a field taken from the default shows up as a mismatch
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2001, 2, 2)


def _parse_generic(raw: str) -> Optional[date]:
    """
    Free-form parse ("January 13, 2025", "2025/01/13") that refuses partial dates.
    """
    if _NUMERIC_MDY_RE.match(raw):
        return None
    try:
        a = dateutil_parse(raw, default=_DEFAULT_A)
        b = dateutil_parse(raw, default=_DEFAULT_B)
    except (ParserError, ValueError, OverflowError):
        return None
    if a.date() != b.date():
        return None
    return a.date()


def parse_date(text: str) -> Optional[date]:
    """
    Parse a course start/end date such as "1/13/2025".

    Falls back to a generic parse ("2025-01-13", "Jan 13, 2025") as long as
    year, month and day are all present in the text.
    Logs a warning and returns None if nothing matches.
    """
    raw = (text or "").strip()
    if not raw:
        log.warning("Could not parse date: %r", text)
        return None

    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(raw, fmt).date()
        except ValueError:
            continue

    parsed = _parse_generic(raw)
    if parsed is not None:
        return parsed

    log.warning("Could not parse date: %r", text)
    return None
