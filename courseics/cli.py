"""
CLI (Command Line Interface).

This module provides the terminal commands, e.g.:

    courseics convert View_My_Courses.csv courses.ics
    courseics courses View_My_Courses.csv
    courseics courses View_My_Courses.csv --json courses.json

Note:
- Parsing lives in courseics/parse.py, event synthesis in courseics/recurrence.py
- Dropped rows are reported as warnings, they never stop a conversion
"""

from __future__ import annotations

import argparse
import csv
import logging
from pathlib import Path

from rich import box
from rich.console import Console
from rich.table import Table

from courseics.export_ics import CalendarExportError
from courseics.model import ParsedCourseData
from courseics.parse import courses_to_json, read_csv_file
from courseics.recurrence import generate_calendar


console = Console()


def _load(path: str) -> ParsedCourseData | None:
    """
    Read and parse the CSV export. Prints an error and returns None on failure.
    """
    try:
        return read_csv_file(path)
    except FileNotFoundError:
        print(f"Input file not found: {path}")
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        print(f"Could not read {path}: {exc}")
    return None


def _print_warnings(data: ParsedCourseData) -> None:
    for w in data.warnings:
        print(f"Warning: skipped {w}")


def _cmd_convert(args: argparse.Namespace) -> int:
    """
    Convert a CSV export into an .ics file with one event per class meeting.
    """
    data = _load(args.input)
    if data is None:
        return 1

    _print_warnings(data)

    if not data.courses:
        print("No courses found.")
        return 1

    name = args.name
    if not name and not data.student_info.is_unknown:
        name = f"{data.student_info.name} – Courses"

    try:
        n = generate_calendar(data, args.out, calendar_name=name)
    except CalendarExportError as exc:
        print(f"Export failed: {exc}")
        return 1
    except OSError as exc:
        print(f"Could not write {args.out}: {exc}")
        return 1

    print(f"Parsed {len(data.courses)} courses, exported {n} events to: {args.out}")
    return 0


def _cmd_courses(args: argparse.Namespace) -> int:
    """
    Show the parsed student info and courses, optionally writing them as JSON.
    """
    data = _load(args.input)
    if data is None:
        return 1

    info = data.student_info
    if info.is_unknown:
        print("Student: (unknown)")
    else:
        print(f"Student: {info.name} ({info.id}) | {info.school} | {info.program}")

    table = Table(box=box.SIMPLE)
    table.add_column("Course")
    table.add_column("Title")
    table.add_column("Section")
    table.add_column("Credits", justify="right")
    table.add_column("Meets")
    table.add_column("Dates")

    for c in data.courses:
        meets = "; ".join(
            f"{'/'.join(p.days)} {p.start_time:%H:%M}-{p.end_time:%H:%M}" for p in c.meeting_patterns
        )
        table.add_row(
            c.id,
            c.title,
            c.section,
            f"{c.credit_hours:g}",
            meets or "-",
            f"{c.start_date} – {c.end_date}",
        )

    console.print(table)
    _print_warnings(data)

    if args.json:
        out = Path(args.json)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(courses_to_json(data), encoding="utf-8")
        print(f"Wrote {len(data.courses)} courses to: {out}")

    return 0


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser with sub-commands.
    """
    parser = argparse.ArgumentParser(prog="courseics", description="Course schedule CSV to calendar converter")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    p_convert = sub.add_parser("convert", help="Convert a schedule CSV export to .ics")
    p_convert.add_argument("input", type=str, help="CSV export (e.g. View_My_Courses.csv)")
    p_convert.add_argument("out", type=str, help="Output file path (e.g. courses.ics)")
    p_convert.add_argument("--name", type=str, default=None, help="Calendar name")

    p_courses = sub.add_parser("courses", help="List the courses found in a CSV export")
    p_courses.add_argument("input", type=str, help="CSV export (e.g. View_My_Courses.csv)")
    p_courses.add_argument("--json", type=str, default=None, help="Also write the parsed courses as JSON")

    return parser


def main(argv: list[str] | None = None) -> None:
    """
    CLI entry point. Parses args, dispatches to command handlers,
    and exits via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "convert":
        raise SystemExit(_cmd_convert(args))
    if args.command == "courses":
        raise SystemExit(_cmd_courses(args))

    raise SystemExit(2)
