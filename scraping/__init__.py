"""Scraping module - FPL API fetchers.

This module contains the getters for the public FPL API (fpl_api.py):
bootstrap data, classic league standings, entry history, transfers and
per-gameweek picks.
"""

from .fpl_api import (
    FPLAPIError,
    get_data,
    get_entry_data,
    get_entry_transfers_data,
    get_classic_league_standings,
    get_entry_picks_for_gw
)
