"""
Tests for CLI entry points.

These tests run the commands against a temporary CSV export and check:
- exit codes
- that the .ics / .json output files are written
"""

import json
import tempfile
import unittest
from pathlib import Path

from courseics.cli import main
from tests.helpers import HEADER_ROWS, course_row, to_csv


class TestCLI(unittest.TestCase):
    def _write_input(self, d: str, rows) -> Path:
        p = Path(d) / "View_My_Courses.csv"
        p.write_text(to_csv(rows), encoding="utf-8")
        return p

    def test_convert_writes_ics(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            src = self._write_input(d, HEADER_ROWS + [course_row()])
            out = Path(d) / "courses.ics"
            with self.assertRaises(SystemExit) as ctx:
                main(["convert", str(src), str(out)])
            self.assertEqual(ctx.exception.code, 0)
            text = out.read_text(encoding="utf-8")
            self.assertEqual(text.count("BEGIN:VEVENT"), 32)
            self.assertIn("X-WR-CALNAME:Doe\\, Jane Q – Courses", text)

    def test_convert_missing_input(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            with self.assertRaises(SystemExit) as ctx:
                main(["convert", str(Path(d) / "missing.csv"), str(Path(d) / "out.ics")])
            self.assertNotEqual(ctx.exception.code, 0)

    def test_convert_without_courses_fails(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            src = self._write_input(d, HEADER_ROWS)
            out = Path(d) / "courses.ics"
            with self.assertRaises(SystemExit) as ctx:
                main(["convert", str(src), str(out)])
            self.assertEqual(ctx.exception.code, 1)
            self.assertFalse(out.exists())

    def test_courses_writes_json(self) -> None:
        with tempfile.TemporaryDirectory() as d:
            src = self._write_input(d, HEADER_ROWS + [course_row(), course_row(listing="bogus")])
            out = Path(d) / "courses.json"
            with self.assertRaises(SystemExit) as ctx:
                main(["courses", str(src), "--json", str(out)])
            self.assertEqual(ctx.exception.code, 0)

            data = json.loads(out.read_text(encoding="utf-8"))
            self.assertEqual(data["student_info"]["id"], "517853")
            self.assertEqual([c["id"] for c in data["courses"]], ["CS 101"])
            self.assertEqual(data["courses"][0]["meeting_patterns"][0]["start_time"], "10:00")
            self.assertEqual(data["warnings"][0]["row_number"], 5)

    def test_command_required(self) -> None:
        with self.assertRaises(SystemExit) as ctx:
            main([])
        self.assertNotEqual(ctx.exception.code, 0)


if __name__ == "__main__":
    unittest.main()
