"""Meta endpoint - current GW, league, snapshot time, refresh status."""

from fastapi import APIRouter
from dashboard.backend.status import get_refresh_status
from reports.leaderboard import SnapshotLoadError, load_snapshot
from utils.config import LEAGUE_ID, get_snapshot_path

router = APIRouter(prefix="/api", tags=["meta"])


@router.get("/meta")
async def get_meta():
    status = get_refresh_status()

    try:
        snapshot = load_snapshot(get_snapshot_path())
    except SnapshotLoadError:
        return {"ready": False, "league_id": LEAGUE_ID, "refresh_status": status}

    return {
        "ready": True,
        "league_id": snapshot.league_id,
        "current_gameweek": snapshot.current_gw,
        "generated_at": snapshot.generated_at.isoformat(),
        "managers": len(snapshot.managers),
        "refresh_status": status,
    }
