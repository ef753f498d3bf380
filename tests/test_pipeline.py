"""Tests for the snapshot build (fetch pacing, assembly, validation, publish)."""

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


from etl.fetchers import LeagueFetcher
from etl.pipeline import SnapshotBuilder, log_total_mismatches, write_snapshot
from etl.transformers import TotalMismatch
from scraping.fpl_api import FPLAPIError


def _standings_page(entries, has_next=False):
    return {"standings": {"has_next": has_next, "results": entries}}


def _entries(n, start=1):
    return [
        {"entry": i, "entry_name": f"Team {i}", "player_name": f"Manager {i}", "total": 100 + i}
        for i in range(start, start + n)
    ]


class FakeFetcher:
    """In-memory LeagueFetcher with per-entry payloads."""

    def __init__(self, standings, histories, transfers=None, picks=None, current_gw=2, fail_history_for=None):
        self.standings = standings
        self.histories = histories
        self.transfers = transfers or {}
        self.picks = picks or {}
        self.current_gw = current_gw
        self.fail_history_for = fail_history_for
        self.pauses = 0

    def pause(self):
        self.pauses += 1

    def get_bootstrap_static(self):
        return {
            "events": [{"id": gw, "is_current": gw == self.current_gw} for gw in range(1, 39)],
            "elements": [{"id": 1, "web_name": "Salah"}, {"id": 2, "web_name": "Palmer"}],
        }

    def get_standings(self):
        return self.standings

    def get_entry_history(self, entry_id):
        if entry_id == self.fail_history_for:
            raise FPLAPIError(f"https://example.test/entry/{entry_id}/history/", 500)
        return self.histories[entry_id]

    def get_entry_transfers(self, entry_id):
        return self.transfers.get(entry_id, [])

    def get_current_entry_history(self, entry_id, gameweek):
        return self.picks.get(entry_id)


class TestLeagueFetcher(unittest.TestCase):
    @patch("etl.fetchers.time.sleep")
    @patch("etl.fetchers.get_classic_league_standings")
    def test_single_page_issues_one_call(self, mock_standings, mock_sleep):
        mock_standings.return_value = _standings_page(_entries(12), has_next=False)

        entries = LeagueFetcher(league_id=22667, sleep_seconds=0.3).get_standings()

        self.assertEqual(mock_standings.call_count, 1)
        self.assertEqual(len(entries), 12)
        mock_sleep.assert_not_called()

    @patch("etl.fetchers.time.sleep")
    @patch("etl.fetchers.get_classic_league_standings")
    def test_pages_concatenated_with_pause(self, mock_standings, mock_sleep):
        mock_standings.side_effect = [
            _standings_page(_entries(50), has_next=True),
            _standings_page(_entries(3, start=51), has_next=False),
        ]

        entries = LeagueFetcher(league_id=1, sleep_seconds=0.3).get_standings()

        self.assertEqual(len(entries), 53)
        self.assertEqual([c[0] for c in mock_standings.call_args_list], [(1, 1), (1, 2)])
        mock_sleep.assert_called_once_with(0.3)

    @patch("etl.fetchers.get_classic_league_standings")
    def test_standings_error_is_fatal(self, mock_standings):
        mock_standings.side_effect = FPLAPIError("https://example.test/standings", 404)
        with self.assertRaises(FPLAPIError):
            LeagueFetcher(league_id=1, sleep_seconds=0).get_standings()

    @patch("etl.fetchers.get_entry_picks_for_gw")
    def test_picks_failure_degrades_to_none(self, mock_picks):
        mock_picks.side_effect = FPLAPIError("https://example.test/picks", 404)
        self.assertIsNone(LeagueFetcher(sleep_seconds=0).get_current_entry_history(5, 3))

    @patch("etl.fetchers.get_entry_picks_for_gw")
    def test_picks_entry_history_returned(self, mock_picks):
        mock_picks.return_value = {"entry_history": {"points": 70, "event_transfers_cost": 4}}
        self.assertEqual(
            LeagueFetcher(sleep_seconds=0).get_current_entry_history(5, 3),
            {"points": 70, "event_transfers_cost": 4},
        )


class TestSnapshotBuilder(unittest.TestCase):
    def setUp(self):
        self.temp_dir = Path(tempfile.mkdtemp())
        self.output = self.temp_dir / "data.json"

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _histories(self, entries, points=(40, 50)):
        return {
            e["entry"]: {
                "current": [
                    {"event": gw, "points": p, "event_transfers_cost": 0}
                    for gw, p in enumerate(points, start=1)
                ],
                "chips": [],
            }
            for e in entries
        }

    def test_twelve_entries_produce_twelve_records(self):
        entries = _entries(12)
        fetcher = FakeFetcher(entries, self._histories(entries))

        result = SnapshotBuilder(league_id=22667, fetcher=fetcher).run(self.output)

        document = json.loads(self.output.read_text(encoding="utf-8"))
        self.assertEqual(result.manager_count, 12)
        self.assertEqual(len(document["managers"]), 12)
        self.assertEqual(document["leagueId"], 22667)
        self.assertEqual(document["currentGW"], 2)
        self.assertIn("generatedAt", document)
        self.assertEqual(fetcher.pauses, 12)

    def test_managers_sorted_by_total_desc(self):
        entries = _entries(3)
        fetcher = FakeFetcher(entries, self._histories(entries))

        document = SnapshotBuilder(fetcher=fetcher).build()

        self.assertEqual([m["total"] for m in document["managers"]], [103, 102, 101])

    def test_mismatch_logged_but_published(self):
        entries = [
            {"entry": 1, "entry_name": "Exact", "player_name": "A", "total": 150},
            {"entry": 2, "entry_name": "Off", "player_name": "B", "total": 150},
        ]
        histories = {
            1: {"current": [{"event": 1, "points": 40}, {"event": 2, "points": 50}, {"event": 3, "points": 60}]},
            2: {"current": [{"event": 1, "points": 40}, {"event": 2, "points": 50}, {"event": 3, "points": 55}]},
        }
        fetcher = FakeFetcher(entries, histories, current_gw=3)

        with self.assertLogs("etl.pipeline", level="WARNING") as logs:
            result = SnapshotBuilder(fetcher=fetcher).run(self.output)

        joined = "\n".join(logs.output)
        self.assertIn("Off (#2): total=150, sumGW=145", joined)
        self.assertNotIn("Exact", joined)
        self.assertEqual([m.entry_id for m in result.mismatches], [2])

        document = json.loads(self.output.read_text(encoding="utf-8"))
        off = next(m for m in document["managers"] if m["entryId"] == 2)
        self.assertEqual(off["total"], 150)

    def test_current_gameweek_uses_picks_when_available(self):
        entries = _entries(2)
        picks = {1: {"points": 77, "event_transfers_cost": 4}}
        fetcher = FakeFetcher(entries, self._histories(entries), picks=picks)

        document = SnapshotBuilder(fetcher=fetcher).build()

        by_id = {m["entryId"]: m for m in document["managers"]}
        self.assertEqual(by_id[1]["gwPoints"], [40, 73])
        self.assertEqual(by_id[2]["gwPoints"], [40, 50])

    def test_required_fetch_failure_aborts_and_keeps_previous_snapshot(self):
        self.output.write_text('{"previous": true}', encoding="utf-8")
        entries = _entries(3)
        fetcher = FakeFetcher(entries, self._histories(entries), fail_history_for=2)

        with self.assertRaises(FPLAPIError):
            SnapshotBuilder(fetcher=fetcher).run(self.output)

        self.assertEqual(json.loads(self.output.read_text(encoding="utf-8")), {"previous": True})


class TestValidationLog(unittest.TestCase):
    def test_all_match_logged_at_info(self):
        with self.assertLogs("etl.pipeline", level="INFO") as logs:
            log_total_mismatches([])
        self.assertIn("All totals match", logs.output[0])

    def test_listing_is_capped(self):
        mismatches = [TotalMismatch(team=f"T{i}", entry_id=i, total=100, sum_gw=90) for i in range(25)]

        with self.assertLogs("etl.pipeline", level="WARNING") as logs:
            log_total_mismatches(mismatches)

        listed = [line for line in logs.output if "total=100, sumGW=90" in line]
        self.assertEqual(len(listed), 20)
        self.assertIn("...and 5 more", logs.output[-1])


class TestWriteSnapshot(unittest.TestCase):
    def test_overwrites_existing_file(self):
        temp_dir = Path(tempfile.mkdtemp())
        try:
            path = temp_dir / "data.json"
            write_snapshot({"currentGW": 1}, path)
            write_snapshot({"currentGW": 2}, path)

            self.assertEqual(json.loads(path.read_text(encoding="utf-8")), {"currentGW": 2})
            self.assertEqual([p.name for p in temp_dir.iterdir()], ["data.json"])
        finally:
            shutil.rmtree(temp_dir, ignore_errors=True)


if __name__ == "__main__":
    unittest.main()
