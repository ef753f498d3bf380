"""In-process refresh log for dashboard jobs.

Keeps the last outcome of each background job so /api/meta and /api/health
can report it. Nothing is persisted; a restart starts with an empty log.
"""

import threading
from datetime import datetime, timezone
from typing import Dict, Optional

_lock = threading.Lock()
_refresh_log: Dict[str, Dict[str, Optional[str]]] = {}


def log_refresh(job_name: str, status: str, message: Optional[str] = None) -> None:
    """Record the outcome of a job run."""
    with _lock:
        _refresh_log[job_name] = {
            "last_run_at": datetime.now(timezone.utc).isoformat(),
            "status": status,
            "message": message,
        }


def get_refresh_status() -> Dict[str, Dict[str, Optional[str]]]:
    """Snapshot of the refresh log keyed by job name."""
    with _lock:
        return {name: dict(entry) for name, entry in _refresh_log.items()}


def clear_refresh_status() -> None:
    with _lock:
        _refresh_log.clear()
