"""Derived leaderboard metrics.

Everything computed here is derived from (rows, current_gw, periods) by a
pure function and kept apart from the persisted row fields:

- period running sums over start..min(end, current_gw)
- GW leads: one point per gameweek, split evenly among tied top scorers
- GW / period leader flags
- current-gameweek chip and transfer suppression
"""

from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Set

import numpy as np
import pandas as pd

from .layout import CHIPS, GW_LEADS, LATEST, RANK, TEAM, TOTAL, ColumnDescriptor
from .models import ManagerRow, Number
from .periods import Period, active_period, visible_periods

# Chips whose mass transfers are not shown as "latest transfers"
SUPPRESSING_CHIPS = frozenset({"wildcard", "freehit", "free_hit", "free hit"})


@dataclass
class DerivedMetrics:
    """Row-level values computed before the first render, keyed by entry_id."""

    current_gw: int
    period_sums: Dict[Any, Dict[str, Number]] = field(default_factory=dict)
    gw_leads: Dict[Any, float] = field(default_factory=dict)
    gw_leaders: Set[Any] = field(default_factory=set)
    period_leaders: Set[Any] = field(default_factory=set)
    current_chips: Dict[Any, str] = field(default_factory=dict)
    suppressed_transfers: Set[Any] = field(default_factory=set)
    active_period_key: Optional[str] = None

    def period_sum(self, entry_id: Any, period_key: str) -> Number:
        return self.period_sums.get(entry_id, {}).get(period_key, 0)

    def is_gw_leader(self, entry_id: Any) -> bool:
        return entry_id in self.gw_leaders

    def is_period_leader(self, entry_id: Any) -> bool:
        return entry_id in self.period_leaders


def current_chip(row: ManagerRow, current_gw: int) -> Optional[str]:
    """Name of the chip activated in current_gw, if any."""
    chip = next((c for c in row.chips if c.event == current_gw), None)
    return chip.name if chip else None


def suppresses_transfers(chip_name: Optional[str]) -> bool:
    return bool(chip_name) and chip_name.lower() in SUPPRESSING_CHIPS


def gw_points_frame(rows: List[ManagerRow], current_gw: int) -> pd.DataFrame:
    """Net points matrix: one row per manager, one column per GW 1..current_gw."""
    gameweeks = list(range(1, current_gw + 1))
    frame = pd.DataFrame(
        [[row.points_for(gw) for gw in gameweeks] for row in rows],
        index=[row.entry_id for row in rows],
        columns=gameweeks,
        dtype=float,
    )
    return frame.replace([np.inf, -np.inf], np.nan)


def compute_period_sums(frame: pd.DataFrame, periods: List[Period], current_gw: int) -> pd.DataFrame:
    """Running sum per visible period, missing slots counted as zero."""
    sums = {
        p.key: frame[list(p.elapsed_gameweeks(current_gw))].fillna(0).sum(axis=1)
        for p in visible_periods(periods, current_gw)
    }
    return pd.DataFrame(sums, index=frame.index)


def compute_gw_leads(frame: pd.DataFrame) -> pd.Series:
    """Accumulated top-score credit per manager.

    Gameweeks where nobody has a score award nothing.
    """
    maxima = frame.max(axis=0)
    on_top = frame.eq(maxima, axis=1)
    counts = on_top.sum(axis=0)
    shares = on_top.astype(float).div(counts.where(counts > 0), axis=1).fillna(0.0)
    return shares.sum(axis=1)


def top_scorers(values: pd.Series) -> Set[Any]:
    """Index labels tied at the maximum of values (NaN ignored)."""
    values = values.dropna()
    if values.empty:
        return set()
    return set(values.index[values.eq(values.max())])


def _as_number(value: float) -> Number:
    return int(value) if float(value).is_integer() else float(value)


def compute_metrics(rows: List[ManagerRow], current_gw: int, periods: List[Period]) -> DerivedMetrics:
    """Compute every derived value for a render pass."""
    active = active_period(periods, current_gw)
    metrics = DerivedMetrics(current_gw=current_gw, active_period_key=active.key if active else None)

    for row in rows:
        chip = current_chip(row, current_gw)
        metrics.current_chips[row.entry_id] = chip or ""
        if suppresses_transfers(chip):
            metrics.suppressed_transfers.add(row.entry_id)

    if not rows:
        return metrics

    frame = gw_points_frame(rows, current_gw)
    sums = compute_period_sums(frame, periods, current_gw)
    leads = compute_gw_leads(frame)

    for entry_id in frame.index:
        metrics.period_sums[entry_id] = {key: _as_number(v) for key, v in sums.loc[entry_id].items()}
        metrics.gw_leads[entry_id] = float(leads.loc[entry_id])

    metrics.gw_leaders = top_scorers(frame[current_gw])
    if active is not None:
        metrics.period_leaders = top_scorers(sums[active.key])

    return metrics


def format_gw_leads(value: Optional[float]) -> str:
    """One decimal, no fraction when whole, blank when zero."""
    if not value:
        return ""
    rounded = Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    if rounded == rounded.to_integral_value():
        return str(int(rounded))
    return str(rounded)


def transfers_summary(row: ManagerRow) -> str:
    return "; ".join(f"in: {t.in_name} out: {t.out_name}" for t in row.latest_transfers)


def column_value(column: ColumnDescriptor, row: ManagerRow, metrics: DerivedMetrics,
                 ranks: Dict[Any, int]) -> Any:
    """The raw (unformatted) value of a cell, as used for sorting."""
    if column.key == RANK:
        return ranks.get(row.entry_id)
    if column.key == TEAM:
        return row.team_name
    if column.key == TOTAL:
        return row.total
    if column.key == GW_LEADS:
        return metrics.gw_leads.get(row.entry_id, 0.0)
    if column.key == CHIPS:
        return metrics.current_chips.get(row.entry_id, "")
    if column.key == LATEST:
        if row.entry_id in metrics.suppressed_transfers:
            return ""
        return transfers_summary(row)
    if column.is_sum:
        return metrics.period_sum(row.entry_id, column.period_key)
    if column.gameweek is not None:
        return row.points_for(column.gameweek)
    return None
