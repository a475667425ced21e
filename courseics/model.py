"""
Central data model definitions used across the project.

This module defines the canonical structure of the parsed schedule so that:
- the row parser and the recurrence synthesizer share the same field names
- every stage passes typed objects instead of loose dicts
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, time
from typing import List, Optional, Tuple


WEEKDAY_CODES = ("MO", "TU", "WE", "TH", "FR", "SA", "SU")


@dataclass
class MeetingPattern:
    """
    One weekly time slot of a course, e.g. "Tue/Thu | 2:30 PM - 3:50 PM | MUSIC CLRM, Room 00102".
    """

    days: List[str]
    start_time: time
    end_time: time
    location: Optional[str] = None
    room: Optional[str] = None

    def __post_init__(self) -> None:
        # a slot with days must have a real, positive time span
        if self.days and not self.start_time < self.end_time:
            raise ValueError(f"start_time {self.start_time} must be before end_time {self.end_time}")


@dataclass
class Course:
    """
    Represents one registered course row of the schedule export.
    """

    id: str
    title: str
    section: str = ""
    credit_hours: float = 0.0
    grading_basis: str = ""
    registration_status: str = ""
    instructional_format: str = ""
    delivery_mode: str = ""
    meeting_patterns: List[MeetingPattern] = field(default_factory=list)
    instructor: str = ""
    start_date: str = ""
    end_date: str = ""

    @property
    def subject(self) -> str:
        # "CS 101" -> "CS"
        return self.id.split(" ")[0]


@dataclass
class StudentInfo:
    name: str
    id: str
    school: str
    program: str

    @classmethod
    def unknown(cls) -> "StudentInfo":
        return cls(name="Unknown Student", id="", school="", program="")

    @property
    def is_unknown(self) -> bool:
        return self == StudentInfo.unknown()


@dataclass
class RowWarning:
    """A dropped input row. row_number is 1-based, like a spreadsheet."""

    row_number: int
    message: str

    def __str__(self) -> str:
        return f"row {self.row_number}: {self.message}"


@dataclass
class ParsedCourseData:
    courses: List[Course]
    student_info: StudentInfo
    warnings: List[RowWarning] = field(default_factory=list)


@dataclass(frozen=True)
class CalendarEvent:
    """
    Represents one concrete class meeting (single date & time slot).

    Start and end are naive local wall-clock datetimes.
    """

    title: str
    start: datetime
    end: datetime
    location: Optional[str] = None
    description: Optional[str] = None
    categories: Tuple[str, ...] = ()
    status: str = "CONFIRMED"
