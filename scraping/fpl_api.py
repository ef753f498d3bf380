"""FPL API getters.

Thin wrappers around the public Fantasy Premier League endpoints used by the
leaderboard build. Every getter returns decoded JSON and raises FPLAPIError
on a non-success status.
"""

import json
from typing import Any, Dict, List, Optional

import requests

from utils.config import REQUEST_TIMEOUT, USER_AGENT

BASE_URL = "https://fantasy.premierleague.com/api"

_session: Optional[requests.Session] = None


class FPLAPIError(Exception):
    """Raised when an FPL endpoint answers with a non-success status."""

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status_code = status_code
        super().__init__(f"HTTP {status_code} for {url}")


def get_session() -> requests.Session:
    """Return the shared session, creating it on first use."""
    global _session
    if _session is None:
        _session = requests.Session()
        _session.headers.update({"User-Agent": USER_AGENT})
    return _session


def _get_json(url: str) -> Any:
    response = get_session().get(url, timeout=REQUEST_TIMEOUT)
    if response.status_code != 200:
        raise FPLAPIError(url, response.status_code)
    return json.loads(response.text)


def get_data() -> Dict:
    """Retrieve the bootstrap-static data (events, players, teams)."""
    return _get_json(f"{BASE_URL}/bootstrap-static/")


def get_classic_league_standings(league_id: int, page: int = 1) -> Dict:
    """Retrieve one page of classic league standings.

    Args:
        league_id (int): ID of the classic league
        page (int): Page number (1-indexed), each page returns up to 50 entries

    Returns:
        dict: League info and standings data including:
            - league: {id, name, ...}
            - standings: {has_next, page, results: [{entry, player_name, entry_name, rank, total, ...}]}
    """
    return _get_json(f"{BASE_URL}/leagues-classic/{league_id}/standings/?page_standings={page}")


def get_entry_data(entry_id: int) -> Dict:
    """Retrieve the season history for a specific entry/team

    Args:
        entry_id (int) : ID of the team whose data is to be retrieved

    Returns:
        dict: current (per-GW points, event_transfers_cost, ...), past, chips
    """
    return _get_json(f"{BASE_URL}/entry/{entry_id}/history/")


def get_entry_transfers_data(entry_id: int) -> List[Dict]:
    """Retrieve the transfer log for a specific entry/team

    Args:
        entry_id (int) : ID of the team whose data is to be retrieved
    """
    return _get_json(f"{BASE_URL}/entry/{entry_id}/transfers/")


def get_entry_picks_for_gw(entry_id: int, gw: int) -> Dict:
    """Retrieve picks for a specific entry and gameweek

    Args:
        entry_id (int): ID of the team
        gw (int): Gameweek number

    Returns:
        dict: Picks data including picks list, entry_history, active_chip
    """
    return _get_json(f"{BASE_URL}/entry/{entry_id}/event/{gw}/picks/")
