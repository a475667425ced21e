"""
Recurrence synthesis (courses -> dated calendar events).

Every meeting pattern repeats weekly on each of its days, from the first
matching weekday on/after the course start date up to and including the
course end date. One CalendarEvent is produced per occurrence.
"""

from __future__ import annotations

import logging
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Iterable, Iterator, List

from courseics.export_ics import export_events_to_ics
from courseics.fields import parse_date
from courseics.model import WEEKDAY_CODES, CalendarEvent, Course, MeetingPattern, ParsedCourseData


log = logging.getLogger(__name__)

ONE_WEEK = timedelta(days=7)


def first_weekday_on_or_after(start: date, weekday_code: str) -> date:
    """
    Return the first date >= start that falls on weekday_code ("MO".."SU").
    """
    target = WEEKDAY_CODES.index(weekday_code)
    return start + timedelta(days=(target - start.weekday()) % 7)


def weekly_dates(anchor: date, end: date) -> Iterator[date]:
    """
    Yield anchor, anchor + 7 days, ... while the date is <= end.
    """
    current = anchor
    while current <= end:
        yield current
        current += ONE_WEEK


def _format_location(pattern: MeetingPattern) -> str:
    if pattern.location and pattern.room:
        return f"{pattern.location}, {pattern.room}"
    return pattern.location or pattern.room or ""


def _format_description(course: Course) -> str:
    return "\n".join(
        [
            f"Course: {course.id} - {course.title}",
            f"Section: {course.section}",
            f"Instructor: {course.instructor}",
            f"Credit Hours: {course.credit_hours:g}",
            f"Format: {course.instructional_format}",
            f"Delivery: {course.delivery_mode}",
        ]
    )


def events_for_course(course: Course) -> List[CalendarEvent]:
    """
    Expand all meeting patterns of one course into individual events.

    Courses whose start or end date cannot be parsed produce no events.
    """
    events: List[CalendarEvent] = []
    if not course.meeting_patterns:
        return events

    term_start = parse_date(course.start_date)
    term_end = parse_date(course.end_date)
    if term_start is None or term_end is None:
        return events

    if term_start > term_end:
        log.warning("Course %s ends (%s) before it starts (%s)", course.id, term_end, term_start)
        return events

    title = f"{course.id} - {course.title}"
    description = _format_description(course)
    categories = ("Course", course.subject)

    for pattern in course.meeting_patterns:
        location = _format_location(pattern)
        for code in pattern.days:
            anchor = first_weekday_on_or_after(term_start, code)
            for day in weekly_dates(anchor, term_end):
                events.append(
                    CalendarEvent(
                        title=title,
                        start=datetime.combine(day, pattern.start_time),
                        end=datetime.combine(day, pattern.end_time),
                        location=location,
                        description=description,
                        categories=categories,
                        status="CONFIRMED",
                    )
                )

    return events


def generate_events(courses: Iterable[Course]) -> List[CalendarEvent]:
    """
    Expand every course, keeping course order, then pattern/day/week order.
    """
    events: List[CalendarEvent] = []
    for course in courses:
        events.extend(events_for_course(course))
    return events


def generate_calendar(data: ParsedCourseData, out_path: str | Path, calendar_name: str | None = None) -> int:
    """
    Parse result -> events -> .ics file. Returns the number of exported events.
    """
    events = generate_events(data.courses)
    return export_events_to_ics(events, out_path, calendar_name=calendar_name)
