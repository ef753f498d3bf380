"""APScheduler setup for periodic snapshot rebuilds."""

import logging
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from utils.config import REFRESH_MINUTES

logger = logging.getLogger(__name__)

_scheduler: BackgroundScheduler = None


def _snapshot():
    from dashboard.backend.jobs.snapshot_job import run_snapshot_job
    try:
        run_snapshot_job()
    except Exception:
        logger.exception("Scheduled snapshot job failed")


def start_scheduler(refresh_minutes: int = REFRESH_MINUTES) -> bool:
    """Start the rebuild job; refresh_minutes <= 0 leaves it disabled."""
    global _scheduler
    if refresh_minutes <= 0:
        logger.info("Snapshot refresh disabled")
        return False

    _scheduler = BackgroundScheduler(daemon=True)
    _scheduler.add_job(_snapshot, IntervalTrigger(minutes=refresh_minutes), id="snapshot",
                       name="League snapshot (FPL API)", replace_existing=True,
                       max_instances=1, coalesce=True)
    _scheduler.start()
    logger.info("Scheduler started, snapshot rebuild every %d min", refresh_minutes)
    return True


def shutdown_scheduler():
    global _scheduler
    if _scheduler:
        _scheduler.shutdown(wait=False)
        _scheduler = None
