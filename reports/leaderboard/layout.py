"""Column and header layout for the leaderboard table.

Turns the period configuration plus the current gameweek into a flat,
ordered list of column descriptors and a two-tier header description.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from .periods import Period, visible_periods

RANK = "rank"
TEAM = "teamName"
TOTAL = "total"
GW_LEADS = "gwLeads"
CHIPS = "chips"
LATEST = "latest"


class ValueKind(str, Enum):
    """How a column's values compare when sorting."""

    NUMERIC = "numeric"
    TEXT = "text"


def gw_key(gameweek: int) -> str:
    return f"gw_{gameweek}"


@dataclass(frozen=True)
class ColumnDescriptor:
    """One body column.

    Attributes:
        key: Stable column key (used in sort links)
        label: Bottom-tier (or spanning) header label
        kind: Value kind driving sort comparison
        gameweek: Gameweek number for per-GW columns
        period_key: Owning period for GW and sum columns
        is_sum: Period running-sum column
        is_future: Gameweek not yet reached
        boundary_left: Draw a separator before this column
    """

    key: str
    label: str
    kind: ValueKind
    gameweek: Optional[int] = None
    period_key: Optional[str] = None
    is_sum: bool = False
    is_future: bool = False
    boundary_left: bool = False

    @property
    def is_numeric(self) -> bool:
        return self.kind == ValueKind.NUMERIC


@dataclass(frozen=True)
class HeaderCell:
    label: str
    key: Optional[str] = None
    colspan: int = 1
    rowspan: int = 1
    boundary_left: bool = False
    is_sum: bool = False
    is_future: bool = False


@dataclass
class TableLayout:
    """Flat column list plus the two header tiers.

    The top tier holds the fixed columns (spanning both tiers) and one group
    cell per visible period; the sub tier labels each GW and Sum column.
    """

    current_gw: int
    periods: List[Period]
    columns: List[ColumnDescriptor] = field(default_factory=list)
    top_header: List[HeaderCell] = field(default_factory=list)
    sub_header: List[HeaderCell] = field(default_factory=list)

    def column(self, key: str) -> Optional[ColumnDescriptor]:
        return next((c for c in self.columns if c.key == key), None)


def _spanning(column: ColumnDescriptor) -> HeaderCell:
    return HeaderCell(label=column.label, key=column.key, rowspan=2, boundary_left=column.boundary_left)


def build_layout(periods: List[Period], current_gw: int) -> TableLayout:
    """Lay out columns for every period that has started by current_gw.

    Started periods show all their gameweeks, future ones flagged, followed
    by a running Sum column.
    """
    shown = visible_periods(periods, current_gw)
    layout = TableLayout(current_gw=current_gw, periods=shown)

    leading = [
        ColumnDescriptor(RANK, "Rank", ValueKind.NUMERIC),
        ColumnDescriptor(TEAM, "Team", ValueKind.TEXT),
        ColumnDescriptor(TOTAL, "Total", ValueKind.NUMERIC, boundary_left=True),
        ColumnDescriptor(GW_LEADS, "GW Leads", ValueKind.NUMERIC),
    ]
    layout.columns.extend(leading)
    layout.top_header.extend(_spanning(c) for c in leading)

    for idx, period in enumerate(shown):
        block = []
        for gw in period.gameweeks():
            is_future = gw > current_gw
            block.append(ColumnDescriptor(
                key=gw_key(gw),
                label=f"(GW{gw})" if is_future else f"GW{gw}",
                kind=ValueKind.NUMERIC,
                gameweek=gw,
                period_key=period.key,
                is_future=is_future,
                boundary_left=(gw == period.start and idx > 0),
            ))
        block.append(ColumnDescriptor(
            key=period.sum_key,
            label="Sum",
            kind=ValueKind.NUMERIC,
            period_key=period.key,
            is_sum=True,
        ))

        layout.columns.extend(block)
        layout.top_header.append(HeaderCell(
            label=period.name,
            colspan=len(block),
            boundary_left=idx > 0,
        ))
        layout.sub_header.extend(
            HeaderCell(
                label=c.label,
                key=c.key,
                boundary_left=c.boundary_left,
                is_sum=c.is_sum,
                is_future=c.is_future,
            )
            for c in block
        )

    trailing = [
        ColumnDescriptor(CHIPS, "Activated Chips", ValueKind.TEXT, boundary_left=True),
        ColumnDescriptor(LATEST, "Latest Transfers", ValueKind.TEXT),
    ]
    layout.columns.extend(trailing)
    layout.top_header.extend(_spanning(c) for c in trailing)

    return layout
