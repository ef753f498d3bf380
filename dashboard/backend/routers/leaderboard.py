"""Leaderboard endpoints - rendered page, raw snapshot and display tree."""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import FileResponse, HTMLResponse, JSONResponse

from reports.leaderboard import LeaderboardView, SnapshotLoadError, load_snapshot
from reports.leaderboard.html_renderer import ERROR_MESSAGE, render_error_page, render_page
from utils.config import get_snapshot_path

logger = logging.getLogger(__name__)

router = APIRouter(tags=["leaderboard"])

# Every render must reflect the latest build
NO_STORE = {"Cache-Control": "no-store"}


def _load_view(sort: Optional[str], direction: Optional[str]) -> LeaderboardView:
    snapshot = load_snapshot(get_snapshot_path())
    return LeaderboardView.from_query(snapshot, sort, direction)


@router.get("/", response_class=HTMLResponse)
async def leaderboard_page(
    sort: Optional[str] = None,
    direction: Optional[str] = Query(None, alias="dir"),
):
    try:
        view = _load_view(sort, direction)
    except SnapshotLoadError as exc:
        logger.error("Failed to load snapshot: %s", exc)
        return HTMLResponse(render_error_page(), status_code=503, headers=NO_STORE)
    return HTMLResponse(render_page(view.to_table()), headers=NO_STORE)


@router.get("/data.json")
async def snapshot_document():
    path = get_snapshot_path()
    if not path.is_file():
        return JSONResponse(status_code=503, content={"error": ERROR_MESSAGE}, headers=NO_STORE)
    return FileResponse(str(path), media_type="application/json", headers=NO_STORE)


@router.get("/api/leaderboard")
async def leaderboard_table(
    sort: Optional[str] = None,
    direction: Optional[str] = Query(None, alias="dir"),
):
    try:
        view = _load_view(sort, direction)
    except SnapshotLoadError as exc:
        logger.error("Failed to load snapshot: %s", exc)
        return JSONResponse(status_code=503, content={"error": ERROR_MESSAGE}, headers=NO_STORE)
    return JSONResponse(content=view.to_table().to_dict(), headers=NO_STORE)
