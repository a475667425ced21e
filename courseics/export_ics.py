"""
iCalendar (.ics) export.

We convert the synthesized class meetings into a calendar file that can be imported into:
- Google Calendar
- Outlook
- Apple Calendar

Times are written as floating local times (no TZID), since the export
carries no time zone.
"""

from __future__ import annotations

import hashlib
from collections import Counter
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from courseics.model import CalendarEvent


class CalendarExportError(RuntimeError):
    """The event set cannot be turned into a calendar document."""


def _ics_escape(text: str) -> str:
    """
    Escape text for ICS fields (very small subset, sufficient for our use).
    """
    return (
        text.replace("\\", "\\\\").replace("\r\n", "\\n").replace("\n", "\\n").replace(";", "\\;").replace(",", "\\,")
    )


def _fold(line: str) -> str:
    """
    Fold a content line at 75 octets (RFC 5545, section 3.1).
    """
    raw = line.encode("utf-8")
    if len(raw) <= 75:
        return line

    chunks: list[str] = []
    limit = 75
    while raw:
        cut = min(limit, len(raw))
        # never split a multi-byte character
        while cut < len(raw) and (raw[cut] & 0xC0) == 0x80:
            cut -= 1
        chunks.append(raw[:cut].decode("utf-8"))
        raw = raw[cut:]
        limit = 74  # continuation lines start with a space
    return "\r\n ".join(chunks)


def _dt_local(value: datetime) -> str:
    """
    Convert a naive datetime to ICS local datetime string 'YYYYMMDDTHHMM00'.
    """
    return value.strftime("%Y%m%dT%H%M00")


def _uid(ev: CalendarEvent, occurrence: int = 0) -> str:
    key = f"{ev.title}|{ev.start.isoformat()}|{ev.location or ''}"
    # identical events (same slot listed twice) still need distinct UIDs
    if occurrence:
        key += f"|{occurrence}"
    return hashlib.sha1(key.encode("utf-8")).hexdigest() + "@courseics"


def events_to_ics(
    events: Sequence[CalendarEvent],
    calendar_name: Optional[str] = None,
    stamp: Optional[datetime] = None,
) -> str:
    """
    Build the full .ics document for the given events.

    Raises CalendarExportError if any event cannot be represented;
    the document is all-or-nothing.
    """
    dtstamp = (stamp or datetime.now(timezone.utc)).strftime("%Y%m%dT%H%M%SZ")

    seen: Counter[str] = Counter()

    lines: list[str] = []
    lines.append("BEGIN:VCALENDAR")
    lines.append("VERSION:2.0")
    lines.append("PRODID:-//courseics//Course Schedule//EN")
    lines.append("CALSCALE:GREGORIAN")
    lines.append("METHOD:PUBLISH")
    if calendar_name:
        lines.append(f"X-WR-CALNAME:{_ics_escape(calendar_name)}")

    for i, ev in enumerate(events, start=1):
        if not ev.title.strip():
            raise CalendarExportError(f"event {i} has no title")
        if ev.end <= ev.start:
            raise CalendarExportError(f"event {i} ({ev.title}) ends at {ev.end} before it starts at {ev.start}")

        lines.append("BEGIN:VEVENT")
        base_uid = _uid(ev)
        lines.append(f"UID:{_uid(ev, seen[base_uid])}")
        seen[base_uid] += 1
        lines.append(f"DTSTAMP:{dtstamp}")
        lines.append(f"DTSTART:{_dt_local(ev.start)}")
        lines.append(f"DTEND:{_dt_local(ev.end)}")
        lines.append(f"SUMMARY:{_ics_escape(ev.title)}")
        if ev.location:
            lines.append(f"LOCATION:{_ics_escape(ev.location)}")
        if ev.description:
            lines.append(f"DESCRIPTION:{_ics_escape(ev.description)}")
        if ev.categories:
            lines.append("CATEGORIES:" + ",".join(_ics_escape(c) for c in ev.categories))
        lines.append(f"STATUS:{ev.status}")
        lines.append("END:VEVENT")

    lines.append("END:VCALENDAR")

    # ICS standard uses CRLF
    return "\r\n".join(_fold(line) for line in lines) + "\r\n"


def export_events_to_ics(
    events: Sequence[CalendarEvent],
    out_path: str | Path,
    calendar_name: Optional[str] = None,
) -> int:
    """
    Export events to an .ics file. Returns number of exported events.
    """
    text = events_to_ics(events, calendar_name=calendar_name)

    out = Path(out_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8", newline="")
    return len(events)
