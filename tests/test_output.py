import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from support import TWO_CALL_SITES

from calldist.analysis.analyzer import DistanceAnalyzer
from calldist.models import SearchSettings
from calldist.output import ConsoleFormatter, JSONFormatter, format_as_json, format_for_console
from calldist.program import load_program_text


class TestAnalyzerReports(unittest.TestCase):
    def setUp(self):
        self.analyzer = DistanceAnalyzer(load_program_text(TWO_CALL_SITES, name="two_sites"))

    def test_report_fields(self):
        report = self.analyzer.analyze("main", "other:entry:1")
        self.assertEqual("two_sites", report["program"])
        self.assertEqual("main:entry:0", report["start"])
        self.assertEqual(6, report["distance"])
        self.assertTrue(report["reachable"])
        self.assertEqual("found", report["stop_reason"])
        self.assertEqual(report["iterations"], report["stats"]["iterations"])

    def test_settings_are_applied(self):
        analyzer = DistanceAnalyzer(
            load_program_text(TWO_CALL_SITES), SearchSettings(max_iterations=2)
        )
        report = analyzer.analyze("main", "other:entry:1")
        self.assertFalse(report["reachable"])
        self.assertEqual("iteration_bound", report["stop_reason"])

    def test_summary(self):
        reports = self.analyzer.analyze_all(["main", "helper"], "other:entry:1")
        summary = DistanceAnalyzer.get_summary(reports)
        self.assertEqual(2, summary["queries"])
        self.assertEqual(1, summary["reachable"])
        self.assertEqual(1, summary["unreachable"])
        self.assertEqual(6, summary["min_distance"])
        self.assertEqual({"found": 1, "exhausted": 1}, summary["by_stop_reason"])

    def test_empty_summary(self):
        summary = DistanceAnalyzer.get_summary([])
        self.assertEqual(0, summary["queries"])
        self.assertIsNone(summary["min_distance"])

    def test_list_positions(self):
        positions = self.analyzer.list_positions()
        self.assertEqual(8, len(positions))
        self.assertEqual(
            {
                "ref": "main:entry:0",
                "function": "main",
                "block": "entry",
                "index": 0,
                "kind": "call",
                "line": 0,
                "text": "call helper",
            },
            positions[0],
        )


class TestFormatters(unittest.TestCase):
    def setUp(self):
        analyzer = DistanceAnalyzer(load_program_text(TWO_CALL_SITES, name="two_sites"))
        self.reports = [
            analyzer.analyze("main", "other:entry:1"),
            analyzer.analyze("helper", "other:entry:1"),
        ]

    def test_json(self):
        data = json.loads(format_as_json(self.reports, include_timestamp=False))
        self.assertNotIn("timestamp", data)
        self.assertEqual([6, None], [r["distance"] for r in data["reports"]])
        self.assertEqual(1, data["summary"]["unreachable"])

    def test_json_without_summary(self):
        data = json.loads(JSONFormatter().format_results(self.reports, include_summary=False))
        self.assertEqual({"reports", "timestamp"}, set(data))

    def test_console(self):
        text = format_for_console(self.reports, use_color=False, show_stats=True)
        self.assertIn("Program: two_sites", text)
        self.assertIn("[1] main:entry:0 -> other:entry:1", text)
        self.assertIn("Distance: 6", text)
        self.assertIn("Distance: UNREACHABLE (exhausted)", text)
        self.assertIn("Recursion pruned: 0", text)
        self.assertIn("Reachable: 1  Unreachable: 1", text)
        self.assertIn("Minimum distance: 6", text)

    def test_console_without_summary(self):
        text = ConsoleFormatter(use_color=False).format_results(self.reports, show_summary=False)
        self.assertNotIn("SUMMARY", text)

    def test_write_to_stdout_and_file(self):
        formatter = JSONFormatter()
        buffer = io.StringIO()
        with redirect_stdout(buffer):
            formatter.write_results(self.reports)
        self.assertTrue(buffer.getvalue().endswith("\n"))
        self.assertEqual(2, len(json.loads(buffer.getvalue())["reports"]))

        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, "out.json")
            formatter.write_results(self.reports, path, pretty=True)
            with open(path, encoding="utf-8") as f:
                self.assertEqual(2, len(json.load(f)["reports"]))


if __name__ == "__main__":
    unittest.main()
