"""Snapshot job - rebuilds the league leaderboard snapshot."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from dashboard.backend.status import log_refresh
from etl.pipeline import BuildResult, SnapshotBuilder

logger = logging.getLogger(__name__)

_lock = threading.Lock()


def run_snapshot_job(output_path: Path | None = None) -> BuildResult | None:
    """Build and publish a fresh snapshot.

    Failures are logged to the refresh log and re-raised; the previous
    snapshot stays in place because the write is atomic. Returns None when a
    build is already in progress.
    """
    if not _lock.acquire(blocking=False):
        logger.info("Snapshot job already running, skipping")
        return None

    logger.info("Snapshot job starting")
    try:
        result = SnapshotBuilder().run(output_path)

        message = (
            f"GW{result.current_gw} "
            f"managers={result.manager_count} "
            f"mismatches={len(result.mismatches)}"
        )
        log_refresh("snapshot", "ok", message)
        logger.info("Snapshot job completed: %s", message)
        return result

    except Exception as exc:
        logger.exception("Snapshot job failed")
        log_refresh("snapshot", "error", str(exc))
        raise
    finally:
        _lock.release()
