"""
Parsing (CSV export -> typed course records).

- Decodes the registered-courses CSV export into plain string rows
- Extracts the student identity line once
- Turns EACH course row into exactly ONE Course
- Expands the meeting-pattern field into MeetingPattern objects

Rules:
- A bad field never raises, it just parses to "no value"
- A bad row is dropped with a warning, the rest of the file is still parsed
"""

from __future__ import annotations

import csv
import io
import json
import logging
import re
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional, Sequence

from courseics.fields import parse_days, parse_location, parse_time, parse_time_range
from courseics.model import Course, MeetingPattern, ParsedCourseData, RowWarning, StudentInfo


log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Input layout
# ---------------------------------------------------------------------------

# 0-based row holding the student identity text; course rows start here too
DATA_START_ROW = 3

MIN_ROW_FIELDS = 14

COL_STUDENT = 0
COL_LISTING = 1
COL_CREDIT_HOURS = 4
COL_GRADING_BASIS = 5
COL_SECTION = 6
COL_REGISTRATION_STATUS = 7
COL_INSTRUCTIONAL_FORMAT = 8
COL_DELIVERY_MODE = 9
COL_MEETING_PATTERNS = 10
COL_INSTRUCTOR = 11
COL_START_DATE = 12
COL_END_DATE = 13


# "CS 101 - Intro to Computing"
_LISTING_RE = re.compile(r"^([A-Z][A-Z\s]*\s+\d+[A-Z]?)\s*-\s*(.+)$")

# "Doe, Jane Q (517853) - McKelvey School of Engineering/Undergraduate - ..."
_STUDENT_RE = re.compile(r"^([^(]+)\s*\((\d+)\)\s*-\s*([^/]+)/(.+?)\s*-")

_CREDIT_RE = re.compile(r"^\s*(\d*\.?\d+)")

# separates several "days | time | location" triplets within one field
_SUB_PATTERN_SPLIT_RE = re.compile(r"[\r\n;]+")


# ---------------------------------------------------------------------------
# Meeting patterns
# ---------------------------------------------------------------------------


def _parse_single_pattern(text: str) -> Optional[MeetingPattern]:
    """
    Parses one "Tue/Thu | 2:30 PM - 3:50 PM | MUSIC CLRM, Room 00102" triplet.
    """
    parts = [p.strip() for p in text.split("|")]

    # days, time range, location; anything after that is ignored
    if len(parts) < 3:
        return None

    days = parse_days(parts[0])
    start_text, end_text = parse_time_range(parts[1])
    location, room = parse_location(parts[2])

    start = parse_time(start_text) if start_text else None
    end = parse_time(end_text) if end_text else None

    if not days or start is None or end is None:
        return None

    if not start < end:
        log.debug("Dropping meeting pattern with non-positive span: %r", text)
        return None

    return MeetingPattern(days=days, start_time=start, end_time=end, location=location, room=room)


def parse_meeting_patterns(text: str) -> List[MeetingPattern]:
    """
    Parses the meeting-pattern field of a course row.

    Several triplets may be separated by line breaks or ";".
    Unusable triplets are skipped silently.
    """
    patterns: List[MeetingPattern] = []
    if not text or not text.strip():
        return patterns

    for chunk in _SUB_PATTERN_SPLIT_RE.split(text):
        if not chunk.strip():
            continue
        pattern = _parse_single_pattern(chunk)
        if pattern:
            patterns.append(pattern)

    return patterns


# ---------------------------------------------------------------------------
# Rows
# ---------------------------------------------------------------------------


def _parse_credit_hours(text: str) -> float:
    match = _CREDIT_RE.match(text or "")
    if not match:
        return 0.0
    return float(match.group(1))


def parse_course_row(row: Sequence[str]) -> Optional[Course]:
    """
    Parses one CSV row into a Course.

    Returns None for rows that are too short or whose course listing
    is not "<SUBJECT NUMBER> - <title>".
    """
    if len(row) < MIN_ROW_FIELDS:
        return None

    cells = [(c or "").strip() for c in row]

    match = _LISTING_RE.match(cells[COL_LISTING])
    if not match:
        return None

    course_id, title = match.group(1), match.group(2)

    return Course(
        id=course_id.strip(),
        title=title.strip(),
        section=cells[COL_SECTION],
        credit_hours=_parse_credit_hours(cells[COL_CREDIT_HOURS]),
        grading_basis=cells[COL_GRADING_BASIS],
        registration_status=cells[COL_REGISTRATION_STATUS],
        instructional_format=cells[COL_INSTRUCTIONAL_FORMAT],
        delivery_mode=cells[COL_DELIVERY_MODE],
        # keep raw line breaks so several triplets stay separable
        meeting_patterns=parse_meeting_patterns(row[COL_MEETING_PATTERNS] or ""),
        instructor=cells[COL_INSTRUCTOR],
        start_date=cells[COL_START_DATE],
        end_date=cells[COL_END_DATE],
    )


def extract_student_info(text: str) -> StudentInfo:
    """
    Extracts name, id, school and program from the student identity line.

    Falls back to StudentInfo.unknown() when the line does not match.
    """
    match = _STUDENT_RE.match((text or "").strip())
    if not match:
        return StudentInfo.unknown()

    return StudentInfo(
        name=match.group(1).strip(),
        id=match.group(2),
        school=match.group(3).strip(),
        program=match.group(4).split(" - ")[0].strip(),
    )


# ---------------------------------------------------------------------------
# Table
# ---------------------------------------------------------------------------


def _is_blank(row: Sequence[str]) -> bool:
    return not any(str(c).strip() for c in row if c is not None)


def parse_rows(rows: Sequence[Sequence[str]], start_row: int = DATA_START_ROW) -> ParsedCourseData:
    """
    Parses decoded CSV rows into courses and student info.

    Blank rows are removed first, then row `start_row` provides the student
    identity and every row from `start_row` on is a candidate course row.
    Rows without a course listing are skipped quietly; rows that fail
    to parse are dropped and reported in ParsedCourseData.warnings.
    """
    # keep the 1-based input row number for warnings
    numbered = [(i + 1, row) for i, row in enumerate(rows) if not _is_blank(row)]

    student_text = ""
    if len(numbered) > start_row and numbered[start_row][1]:
        student_text = str(numbered[start_row][1][COL_STUDENT] or "")
    student_info = extract_student_info(student_text)

    courses: List[Course] = []
    warnings: List[RowWarning] = []

    for row_number, row in numbered[start_row:]:
        # continuation rows carry no course listing
        if len(row) <= COL_LISTING or not (row[COL_LISTING] or "").strip():
            continue

        try:
            course = parse_course_row(row)
        except (ValueError, IndexError, TypeError, AttributeError) as exc:
            warning = RowWarning(row_number, f"failed to parse course row: {exc}")
        else:
            if course:
                courses.append(course)
                continue
            if len(row) < MIN_ROW_FIELDS:
                reason = f"expected at least {MIN_ROW_FIELDS} fields, got {len(row)}"
            else:
                reason = f"unrecognized course listing {row[COL_LISTING].strip()!r}"
            warning = RowWarning(row_number, reason)

        log.warning("Skipping %s", warning)
        warnings.append(warning)

    return ParsedCourseData(courses=courses, student_info=student_info, warnings=warnings)


def parse_csv_text(text: str, start_row: int = DATA_START_ROW) -> ParsedCourseData:
    """
    Decodes CSV text and parses it with parse_rows().
    """
    rows = list(csv.reader(io.StringIO(text)))
    return parse_rows(rows, start_row=start_row)


def read_csv_file(path: str | Path, start_row: int = DATA_START_ROW) -> ParsedCourseData:
    """
    Reads a UTF-8 CSV export from disk (a leading BOM is tolerated).
    """
    text = Path(path).read_text(encoding="utf-8-sig")
    return parse_csv_text(text, start_row=start_row)


# ---------------------------------------------------------------------------
# JSON output
# ---------------------------------------------------------------------------


def courses_to_json(data: ParsedCourseData) -> str:
    """
    Serializes parsed courses, student info and row warnings as JSON.
    """
    courses = []
    for course in data.courses:
        c = asdict(course)
        c["meeting_patterns"] = [
            {
                "days": list(p.days),
                "start_time": p.start_time.strftime("%H:%M"),
                "end_time": p.end_time.strftime("%H:%M"),
                "location": p.location,
                "room": p.room,
            }
            for p in course.meeting_patterns
        ]
        courses.append(c)

    payload = {
        "student_info": asdict(data.student_info),
        "courses": courses,
        "warnings": [asdict(w) for w in data.warnings],
    }
    return json.dumps(payload, ensure_ascii=False, indent=2)
