"""
Shared fixtures for building schedule export rows.
"""

import csv
import io

STUDENT_LINE = "Doe, Jane Q (517853) - McKelvey School of Engineering/Undergraduate - Computer Science"

HEADER_ROWS = [
    ["View My Courses"],
    ["Doe, Jane Q (517853)", "", "Spring 2025"],
    [
        "Student",
        "Course Listing",
        "Academic Period",
        "Units",
        "Credit Hours",
        "Grading Basis",
        "Section",
        "Registration Status",
        "Instructional Format",
        "Delivery Mode",
        "Meeting Patterns",
        "Instructor",
        "Start Date",
        "End Date",
    ],
]


def course_row(
    listing="CS 101 - Intro to Computing",
    pattern="Mon/Wed | 10:00 AM - 10:50 AM | ENGR, Room 100",
    start="1/13/2025",
    end="5/2/2025",
    credits="3",
    section="CS 101-01",
    instructor="Smith, Ann",
):
    return [
        STUDENT_LINE,
        listing,
        "Spring 2025",
        "3",
        credits,
        "Letter Grade",
        section,
        "Registered",
        "Lecture",
        "In-Person",
        pattern,
        instructor,
        start,
        end,
    ]


def to_csv(rows):
    buf = io.StringIO()
    csv.writer(buf).writerows(rows)
    return buf.getvalue()
