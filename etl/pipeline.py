"""ETL Pipeline Orchestrator

Coordinates the snapshot build from raw API data to the published JSON file.

Usage:
    python -m etl.pipeline                  # Build and write the snapshot
    python -m etl.pipeline --output x.json  # Write somewhere else

The pipeline produces one snapshot document:
    {leagueId, generatedAt, currentGW, managers}
overwriting any previous snapshot at the same path.
"""

import argparse
import json
import logging
import os
import sys
import tempfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from etl.fetchers import LeagueFetcher
from etl.transformers import (
    SnapshotBuildError,
    TotalMismatch,
    build_manager_record,
    find_total_mismatches,
    player_names,
    resolve_current_gameweek,
    sort_managers,
)
from utils.config import LEAGUE_ID, REQUEST_SLEEP_SECONDS, get_snapshot_path

logger = logging.getLogger(__name__)

# Individually listed validation mismatches before summarizing
MAX_LISTED_MISMATCHES = 20


@dataclass
class BuildResult:
    """Summary of one snapshot build."""
    path: Path
    league_id: int
    current_gw: int
    manager_count: int
    mismatches: List[TotalMismatch] = field(default_factory=list)


def log_total_mismatches(mismatches: List[TotalMismatch]) -> None:
    """Report total != sum(gwPoints) managers. Diagnostic only."""
    if not mismatches:
        logger.info("[VALIDATION] All totals match sum(gwPoints).")
        return

    logger.warning(f"[VALIDATION] {len(mismatches)} manager(s) have total != sum(gwPoints):")
    for m in mismatches[:MAX_LISTED_MISMATCHES]:
        logger.warning(f" - {m.team} (#{m.entry_id}): total={m.total}, sumGW={m.sum_gw}")
    if len(mismatches) > MAX_LISTED_MISMATCHES:
        logger.warning(f" ...and {len(mismatches) - MAX_LISTED_MISMATCHES} more")


def write_snapshot(document: Dict, path: Path) -> Path:
    """Write the snapshot, atomically replacing any previous file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    try:
        with os.fdopen(fd, 'w', encoding='utf-8') as f:
            json.dump(document, f, ensure_ascii=False)
        os.replace(tmp_name, path)
    except BaseException:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    return path


class SnapshotBuilder:
    """Builds one self-consistent leaderboard snapshot."""

    def __init__(self, league_id: int = LEAGUE_ID,
                 sleep_seconds: float = REQUEST_SLEEP_SECONDS,
                 fetcher: Optional[LeagueFetcher] = None):
        """Initialize the builder.

        Args:
            league_id: Classic league ID.
            sleep_seconds: Pause between API calls.
            fetcher: Pre-built fetcher (tests inject one).
        """
        self.league_id = league_id
        self.fetcher = fetcher or LeagueFetcher(league_id, sleep_seconds)
        self.mismatches: List[TotalMismatch] = []

    def build(self) -> Dict:
        """Fetch everything and return the snapshot document (not written)."""
        bootstrap = self.fetcher.get_bootstrap_static()
        current_gw = resolve_current_gameweek(bootstrap.get('events') or [])
        logger.info(f"Current gameweek: {current_gw}")

        standings = self.fetcher.get_standings()
        names = player_names(bootstrap.get('elements') or [])

        managers = []
        for standing in standings:
            entry_id = standing.get('entry')
            history = self.fetcher.get_entry_history(entry_id)
            transfers = self.fetcher.get_entry_transfers(entry_id)
            current_entry_history = self.fetcher.get_current_entry_history(entry_id, current_gw)

            managers.append(build_manager_record(
                standing, history, transfers, current_gw, current_entry_history, names
            ))
            self.fetcher.pause()

        self.mismatches = find_total_mismatches(managers)
        log_total_mismatches(self.mismatches)

        return {
            'leagueId': self.league_id,
            'generatedAt': datetime.now(timezone.utc).isoformat().replace('+00:00', 'Z'),
            'currentGW': current_gw,
            'managers': sort_managers(managers),
        }

    def run(self, output_path: Optional[Path] = None) -> BuildResult:
        """Build the snapshot and publish it.

        Args:
            output_path: Destination file; defaults to the configured path.

        Returns:
            BuildResult describing what was written.
        """
        path = Path(output_path) if output_path else get_snapshot_path()
        document = self.build()
        write_snapshot(document, path)

        logger.info(
            f"Wrote {path.name} for league {self.league_id}, "
            f"currentGW={document['currentGW']}, managers={len(document['managers'])}"
        )
        return BuildResult(
            path=path,
            league_id=self.league_id,
            current_gw=document['currentGW'],
            manager_count=len(document['managers']),
            mismatches=self.mismatches,
        )


def main() -> int:
    parser = argparse.ArgumentParser(description='Build the league leaderboard snapshot')
    parser.add_argument('--output', '-o', default=None, help='Snapshot path (default from config.yml)')
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format='%(levelname)s | %(message)s')
    try:
        SnapshotBuilder().run(args.output)
    except Exception:
        logger.exception("Snapshot build failed")
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
