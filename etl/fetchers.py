"""ETL Fetchers Module

Extracts the league data needed for one leaderboard snapshot from the FPL API.

Resources:
- /bootstrap-static/: events (gameweeks) and player metadata
- /leagues-classic/{id}/standings/: paginated league standings
- /entry/{id}/history/, /entry/{id}/transfers/: per-manager season data
- /entry/{id}/event/{gw}/picks/: fresher current-gameweek entry history

Calls are issued strictly one at a time with a fixed pause in between.
"""

import logging
import time
from typing import Dict, List, Optional

import requests

from scraping.fpl_api import (
    FPLAPIError,
    get_data,
    get_classic_league_standings,
    get_entry_data,
    get_entry_transfers_data,
    get_entry_picks_for_gw,
)
from utils.config import LEAGUE_ID, REQUEST_SLEEP_SECONDS

logger = logging.getLogger(__name__)


class LeagueFetcher:
    """Fetches standings and per-manager data for one classic league.

    Required resources propagate FPLAPIError; only the picks resource is
    best-effort.
    """

    def __init__(self, league_id: int = LEAGUE_ID, sleep_seconds: float = REQUEST_SLEEP_SECONDS):
        """Initialize league fetcher.

        Args:
            league_id: Classic league ID.
            sleep_seconds: Pause inserted between consecutive API calls.
        """
        self.league_id = league_id
        self.sleep_seconds = sleep_seconds

    def pause(self) -> None:
        """Wait between calls to respect the upstream rate limit."""
        if self.sleep_seconds > 0:
            time.sleep(self.sleep_seconds)

    def get_bootstrap_static(self) -> Dict:
        """Fetch bootstrap-static data (events + elements)."""
        return get_data()

    def get_standings(self) -> List[Dict]:
        """Fetch every standings page and concatenate the results."""
        entries: List[Dict] = []
        page = 1
        while True:
            data = get_classic_league_standings(self.league_id, page)
            standings = data.get('standings') or {}
            entries.extend(standings.get('results') or [])
            if not standings.get('has_next'):
                break
            page += 1
            self.pause()

        logger.info(f"Fetched {len(entries)} standings entries over {page} page(s)")
        return entries

    def get_entry_history(self, entry_id: int) -> Dict:
        """Fetch per-gameweek history and chip events for one manager."""
        return get_entry_data(entry_id)

    def get_entry_transfers(self, entry_id: int) -> List[Dict]:
        """Fetch the full transfer log for one manager."""
        return get_entry_transfers_data(entry_id) or []

    def get_current_entry_history(self, entry_id: int, gameweek: int) -> Optional[Dict]:
        """Fetch the picks entry_history for one gameweek, or None on failure."""
        try:
            picks = get_entry_picks_for_gw(entry_id, gameweek)
        except (FPLAPIError, requests.exceptions.RequestException, ValueError) as e:
            logger.debug(f"Picks unavailable for entry {entry_id} GW{gameweek}: {e}")
            return None
        return (picks or {}).get('entry_history') or None
