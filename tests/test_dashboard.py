"""Dashboard API, snapshot job and scheduler."""

import json
import shutil
import sys
import tempfile
from pathlib import Path
import unittest
from unittest.mock import MagicMock, patch


REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))


from fastapi.testclient import TestClient

from dashboard.backend.jobs import snapshot_job
from dashboard.backend.main import app
from dashboard.backend.scheduler import shutdown_scheduler, start_scheduler
from dashboard.backend.status import clear_refresh_status, get_refresh_status
from etl.pipeline import BuildResult

SNAPSHOT = {
    "leagueId": 22667,
    "generatedAt": "2025-10-19T11:05:00Z",
    "currentGW": 3,
    "managers": [
        {"entryId": 1, "teamName": "Gunners", "playerName": "a", "total": 160, "gwPoints": [50, 40, 70]},
        {"entryId": 2, "teamName": "Villans", "playerName": "b", "total": 110, "gwPoints": [30, 60, 20]},
    ],
}


class TestLeaderboardRoutes(unittest.TestCase):
    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.path = self.temp_dir / "data.json"
        self.path.write_text(json.dumps(SNAPSHOT), encoding="utf-8")

        self.patchers = [
            patch("dashboard.backend.routers.leaderboard.get_snapshot_path", return_value=self.path),
            patch("dashboard.backend.routers.meta.get_snapshot_path", return_value=self.path),
        ]
        for p in self.patchers:
            p.start()
        self.client = TestClient(app)

    def tearDown(self):
        for p in self.patchers:
            p.stop()
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_page(self):
        response = self.client.get("/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["cache-control"], "no-store")
        self.assertIn("Gunners", response.text)
        self.assertIn("GW 3", response.text)

    def test_page_sorted_by_query(self):
        response = self.client.get("/", params={"sort": "gw_2", "dir": "desc"})
        self.assertEqual(response.status_code, 200)
        self.assertLess(response.text.index("Villans"), response.text.index("Gunners"))

    def test_page_error_when_snapshot_missing(self):
        self.path.unlink()
        response = self.client.get("/")
        self.assertEqual(response.status_code, 503)
        self.assertIn("Error loading data", response.text)

    def test_page_error_when_manager_record_malformed(self):
        self.path.write_text(json.dumps(dict(SNAPSHOT, managers=[None])), encoding="utf-8")

        response = self.client.get("/")
        self.assertEqual(response.status_code, 503)
        self.assertIn("Error loading data", response.text)
        self.assertEqual(self.client.get("/api/leaderboard").status_code, 503)

    def test_raw_snapshot(self):
        response = self.client.get("/data.json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.headers["cache-control"], "no-store")
        self.assertEqual(response.json(), SNAPSHOT)

    def test_raw_snapshot_missing(self):
        self.path.unlink()
        self.assertEqual(self.client.get("/data.json").status_code, 503)

    def test_display_tree(self):
        response = self.client.get("/api/leaderboard", params={"sort": "total", "dir": "asc"})
        self.assertEqual(response.status_code, 200)

        data = response.json()
        self.assertEqual(data["current_gw"], 3)
        teams = [next(c["text"] for c in row if c["key"] == "teamName") for row in data["rows"]]
        self.assertEqual(teams, ["Villans", "Gunners"])

    def test_meta(self):
        data = self.client.get("/api/meta").json()
        self.assertTrue(data["ready"])
        self.assertEqual(data["current_gameweek"], 3)
        self.assertEqual(data["managers"], 2)

    def test_meta_not_ready(self):
        self.path.unlink()
        self.assertFalse(self.client.get("/api/meta").json()["ready"])

    def test_health(self):
        data = self.client.get("/api/health").json()
        self.assertTrue(data["ok"])


class TestSnapshotJob(unittest.TestCase):
    def setUp(self):
        clear_refresh_status()

    def tearDown(self):
        clear_refresh_status()

    @patch("dashboard.backend.jobs.snapshot_job.SnapshotBuilder")
    def test_success_logged(self, mock_builder):
        result = BuildResult(path=Path("data.json"), league_id=1, current_gw=3, manager_count=12, mismatches=[])
        mock_builder.return_value.run.return_value = result

        self.assertIs(snapshot_job.run_snapshot_job(), result)

        status = get_refresh_status()["snapshot"]
        self.assertEqual(status["status"], "ok")
        self.assertIn("managers=12", status["message"])

    @patch("dashboard.backend.jobs.snapshot_job.SnapshotBuilder")
    def test_failure_logged_and_raised(self, mock_builder):
        mock_builder.return_value.run.side_effect = RuntimeError("boom")

        with self.assertRaises(RuntimeError):
            snapshot_job.run_snapshot_job()

        self.assertEqual(get_refresh_status()["snapshot"]["status"], "error")

    @patch("dashboard.backend.jobs.snapshot_job.SnapshotBuilder")
    def test_skips_while_running(self, mock_builder):
        with patch.object(snapshot_job, "_lock") as lock:
            lock.acquire.return_value = False
            self.assertIsNone(snapshot_job.run_snapshot_job())
        mock_builder.assert_not_called()


class TestScheduler(unittest.TestCase):
    def test_disabled_when_interval_not_positive(self):
        self.assertFalse(start_scheduler(0))

    @patch("dashboard.backend.scheduler.BackgroundScheduler")
    def test_registers_interval_job(self, mock_scheduler_cls):
        scheduler = MagicMock()
        mock_scheduler_cls.return_value = scheduler

        self.assertTrue(start_scheduler(15))

        scheduler.add_job.assert_called_once()
        self.assertEqual(scheduler.add_job.call_args.kwargs["max_instances"], 1)
        scheduler.start.assert_called_once()
        shutdown_scheduler()
        scheduler.shutdown.assert_called_once_with(wait=False)


if __name__ == "__main__":
    unittest.main()
