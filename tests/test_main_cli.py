import json
import shutil
import sys
import tempfile
from pathlib import Path
import unittest
from unittest.mock import patch


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


import main as cli
from scraping.fpl_api import FPLAPIError

SNAPSHOT = {
    "leagueId": 22667,
    "generatedAt": "2025-10-19T11:05:00Z",
    "currentGW": 2,
    "managers": [
        {"entryId": 1, "teamName": "Gunners", "playerName": "a", "total": 90, "gwPoints": [50, 40]},
    ],
}


class TestParseArgs(unittest.TestCase):
    def test_render_options(self):
        args = cli.parse_args(["render", "--output", "out.html", "--sort", "gw_3", "--dir", "asc"])
        self.assertEqual(args.command, "render")
        self.assertEqual(args.output, "out.html")
        self.assertEqual(args.sort, "gw_3")
        self.assertEqual(args.direction, "asc")

    def test_defaults(self):
        args = cli.parse_args(["show"])
        self.assertIsNone(args.sort)
        self.assertIsNone(args.direction)
        self.assertFalse(args.no_colors)

        args = cli.parse_args(["serve"])
        self.assertEqual(args.port, 8000)

    def test_command_required(self):
        with self.assertRaises(SystemExit):
            cli.parse_args([])


class TestCommands(unittest.TestCase):
    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.snapshot = self.temp_dir / "data.json"
        self.output = self.temp_dir / "index.html"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_render_writes_page(self):
        self.snapshot.write_text(json.dumps(SNAPSHOT), encoding="utf-8")

        code = cli.main(["render", "--snapshot", str(self.snapshot), "--output", str(self.output)])

        self.assertEqual(code, 0)
        self.assertIn("Gunners", self.output.read_text(encoding="utf-8"))

    def test_rendered_file_is_sortable_without_server(self):
        self.snapshot.write_text(json.dumps(SNAPSHOT), encoding="utf-8")

        cli.main(["render", "--snapshot", str(self.snapshot), "--output", str(self.output)])

        html = self.output.read_text(encoding="utf-8")
        self.assertIn("<script>", html)
        self.assertIn('data-key="total" data-kind="numeric"', html)
        self.assertIn('<td data-key="total" data-value="90"', html)

    def test_render_missing_snapshot_writes_error_page(self):
        code = cli.main(["render", "--snapshot", str(self.snapshot), "--output", str(self.output)])

        self.assertEqual(code, 1)
        self.assertIn("Error loading data", self.output.read_text(encoding="utf-8"))

    def test_show_prints_table(self):
        self.snapshot.write_text(json.dumps(SNAPSHOT), encoding="utf-8")

        with patch("builtins.print") as mock_print:
            code = cli.main(["show", "--no-colors", "--snapshot", str(self.snapshot)])

        self.assertEqual(code, 0)
        self.assertIn("Gunners", mock_print.call_args[0][0])

    @patch("etl.pipeline.SnapshotBuilder")
    def test_build_failure_exit_code(self, mock_builder):
        mock_builder.return_value.run.side_effect = FPLAPIError("https://example.test/bootstrap-static/", 503)
        self.assertEqual(cli.main(["build"]), 1)


if __name__ == "__main__":
    unittest.main()
