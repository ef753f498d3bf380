"""FastAPI application for the League Leaderboard.

Single process serving the rendered leaderboard page, the raw snapshot and
a JSON display tree. APScheduler runs in-process to rebuild the snapshot.
"""

import logging
import sys
import threading
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

# Ensure project root is importable
_project_root = str(Path(__file__).parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from dashboard.backend.status import get_refresh_status
from dashboard.backend.scheduler import start_scheduler, shutdown_scheduler
from utils.config import BUILD_ON_STARTUP

logger = logging.getLogger(__name__)


def _run_startup_build() -> None:
    """Build once on startup and keep failures isolated to refresh logs."""
    from dashboard.backend.jobs.snapshot_job import run_snapshot_job
    try:
        run_snapshot_job()
    except Exception:
        logger.exception("Startup snapshot job failed")


@asynccontextmanager
async def lifespan(app: FastAPI):
    if BUILD_ON_STARTUP:
        threading.Thread(target=_run_startup_build, daemon=True, name="startup-snapshot").start()

    # Start scheduler for periodic rebuilds
    start_scheduler()

    yield

    # Shutdown
    shutdown_scheduler()
    logger.info("Scheduler stopped")


app = FastAPI(
    title="League Leaderboard",
    version="1.0.0",
    lifespan=lifespan,
)

# --- Routers ---
from dashboard.backend.routers.meta import router as meta_router
from dashboard.backend.routers.leaderboard import router as leaderboard_router

app.include_router(meta_router)
app.include_router(leaderboard_router)


@app.get("/api/health")
async def health():
    """Liveness check with the last job outcomes."""
    return {
        "ok": True,
        "jobs": get_refresh_status(),
    }
