"""Leaderboard view: one render pass over an immutable snapshot.

Holds the derived layout and metrics plus the current row order and sort
state, and hands display trees to the renderers.
"""

import logging
from typing import List, Optional

from .layout import build_layout
from .metrics import column_value, compute_metrics
from .models import Snapshot
from .periods import Period, load_periods
from .sorting import SortDirection, SortState, assign_ranks, default_order, sort_rows
from .table import DisplayTable, build_display_table

logger = logging.getLogger(__name__)


class LeaderboardView:
    """Sortable leaderboard for one snapshot."""

    def __init__(self, snapshot: Snapshot, periods: Optional[List[Period]] = None):
        """Initialize the view in default order (total descending).

        Args:
            snapshot: Loaded snapshot document.
            periods: Period configuration (defaults to config.yml).
        """
        self.snapshot = snapshot
        self.periods = load_periods() if periods is None else periods
        self.layout = build_layout(self.periods, snapshot.current_gw)
        self.metrics = compute_metrics(snapshot.managers, snapshot.current_gw, self.periods)
        self.rows = default_order(snapshot.managers)
        self.ranks = assign_ranks(self.rows)
        self.sort_state = SortState()

    @property
    def current_gw(self) -> int:
        return self.snapshot.current_gw

    def sort(self, key: str, direction: SortDirection) -> None:
        """Sort current rows by column key and recompute ranks."""
        column = self.layout.column(key)
        if column is None:
            raise KeyError(f"unknown column {key!r}")

        self.rows = sort_rows(
            self.rows, column, direction,
            lambda row: column_value(column, row, self.metrics, self.ranks),
        )
        self.ranks = assign_ranks(self.rows)
        self.sort_state = SortState(key, direction)

    def click(self, key: str) -> SortState:
        """Apply a header click: toggle the same column, else start descending."""
        state = self.sort_state.click(key)
        self.sort(key, state.direction)
        return self.sort_state

    def apply(self, state: SortState) -> None:
        """Apply a requested sort state; unknown columns keep the default order."""
        if state.key is None:
            return
        if self.layout.column(state.key) is None:
            logger.warning(f"Ignoring sort by unknown column {state.key!r}")
            return
        self.sort(state.key, state.direction)

    def to_table(self) -> DisplayTable:
        return build_display_table(
            self.rows,
            self.ranks,
            self.layout,
            self.metrics,
            self.sort_state,
            league_id=self.snapshot.league_id,
            generated_at=self.snapshot.generated_at,
        )

    @classmethod
    def from_query(cls, snapshot: Snapshot, sort: Optional[str] = None, direction: Optional[str] = None,
                   periods: Optional[List[Period]] = None) -> "LeaderboardView":
        view = cls(snapshot, periods)
        view.apply(SortState.from_query(sort, direction))
        return view
