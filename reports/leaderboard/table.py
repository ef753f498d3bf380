"""Display tree for the leaderboard.

build_display_table() is a pure function mapping rows, column layout,
derived metrics and sort state to header and body cells. Output targets
(HTML page, terminal table, JSON) only walk this tree.
"""

import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from .layout import CHIPS, GW_LEADS, LATEST, TEAM, HeaderCell, TableLayout
from .metrics import DerivedMetrics, column_value, format_gw_leads
from .models import ManagerRow
from .sorting import SortState

logger = logging.getLogger(__name__)

PLACEHOLDER = "—"


@dataclass
class Badge:
    text: str
    kind: str = ""
    label: str = ""


@dataclass
class DisplayCell:
    key: str
    text: str = ""
    classes: List[str] = field(default_factory=list)
    badges: List[Badge] = field(default_factory=list)
    sort_value: Any = None


@dataclass
class DisplayHeader:
    """Header cell with its sort state.

    direction is the column's current sort direction (None when unsorted);
    next_direction is what clicking it would request; kind is the column's
    value kind. Group cells carry no key.
    """

    label: str
    key: Optional[str] = None
    colspan: int = 1
    rowspan: int = 1
    classes: List[str] = field(default_factory=list)
    direction: Optional[str] = None
    next_direction: Optional[str] = None
    kind: Optional[str] = None


@dataclass
class LegendItem:
    css_class: str
    label: str


@dataclass
class DisplayTable:
    league_id: Any
    current_gw: int
    generated_at: datetime
    header_rows: List[List[DisplayHeader]] = field(default_factory=list)
    rows: List[List[DisplayCell]] = field(default_factory=list)
    legend: List[LegendItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["generated_at"] = self.generated_at.isoformat()
        return data


def format_last_updated(ts: datetime, tz_name: str) -> str:
    """Render ts in tz_name with a short zone label, e.g. '2025-10-19 14:05 +03'."""
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.warning(f"Unknown display timezone {tz_name!r}, using UTC")
        tz = timezone.utc
    return ts.astimezone(tz).strftime("%Y-%m-%d %H:%M %Z")


def _header(cell: HeaderCell, layout: TableLayout, sort_state: SortState,
            rowspan: Optional[int] = None) -> DisplayHeader:
    classes = [name for name, flag in (
        ("sep-left", cell.boundary_left),
        ("sum-col", cell.is_sum),
        ("future", cell.is_future),
    ) if flag]
    direction = sort_state.direction_for(cell.key) if cell.key else None
    column = layout.column(cell.key) if cell.key else None
    return DisplayHeader(
        label=cell.label,
        key=cell.key,
        colspan=cell.colspan,
        rowspan=cell.rowspan if rowspan is None else rowspan,
        classes=classes,
        direction=direction.value if direction else None,
        next_direction=sort_state.click(cell.key).direction.value if cell.key else None,
        kind=column.kind.value if column else None,
    )


def build_header_rows(layout: TableLayout, sort_state: SortState) -> List[List[DisplayHeader]]:
    if not layout.sub_header:
        return [[_header(cell, layout, sort_state, rowspan=1) for cell in layout.top_header]]
    return [
        [_header(cell, layout, sort_state) for cell in layout.top_header],
        [_header(cell, layout, sort_state) for cell in layout.sub_header],
    ]


def _body_cell(column, row: ManagerRow, metrics: DerivedMetrics, ranks: Dict[Any, int]) -> DisplayCell:
    entry_id = row.entry_id
    value = column_value(column, row, metrics, ranks)

    if column.key == LATEST:
        if entry_id in metrics.suppressed_transfers or not row.latest_transfers:
            badges = [Badge(PLACEHOLDER)]
        else:
            badges = []
            for move in row.latest_transfers:
                badges.append(Badge(move.in_name, kind="in", label="in:"))
                badges.append(Badge(move.out_name, kind="out", label="out:"))
        return DisplayCell(column.key, classes=["transfers"], badges=badges, sort_value=value)

    if column.key == CHIPS:
        chip = metrics.current_chips.get(entry_id, "")
        badge = Badge(chip, kind="chip") if chip else Badge(PLACEHOLDER)
        return DisplayCell(column.key, classes=["sep-left"], badges=[badge], sort_value=value)

    if column.key == GW_LEADS:
        return DisplayCell(column.key, text=format_gw_leads(value), sort_value=value)

    if column.key == TEAM:
        classes = [name for name, flag in (
            ("gw-leader", metrics.is_gw_leader(entry_id)),
            ("period-leader", metrics.is_period_leader(entry_id)),
        ) if flag]
        return DisplayCell(column.key, text=row.team_name, classes=classes, sort_value=value)

    classes = [name for name, flag in (
        ("sep-left", column.boundary_left),
        ("sum-col", column.is_sum),
        ("future", column.is_future),
    ) if flag]
    return DisplayCell(column.key, text="" if value is None else str(value), classes=classes, sort_value=value)


def build_legend(layout: TableLayout, metrics: DerivedMetrics) -> List[LegendItem]:
    legend = [LegendItem("gw-leader", f"Top score in GW{layout.current_gw}")]
    active = next((p for p in layout.periods if p.key == metrics.active_period_key), None)
    if active is not None:
        legend.append(LegendItem("period-leader", f"Leading {active.name}"))
    legend.append(LegendItem("sum-col", "Period total so far"))
    legend.append(LegendItem("future", "Upcoming gameweek"))
    return legend


def build_display_table(
    rows: List[ManagerRow],
    ranks: Dict[Any, int],
    layout: TableLayout,
    metrics: DerivedMetrics,
    sort_state: SortState,
    league_id: Any = None,
    generated_at: Optional[datetime] = None,
) -> DisplayTable:
    """Map rows (already in display order) to a tree of display cells."""
    return DisplayTable(
        league_id=league_id,
        current_gw=layout.current_gw,
        generated_at=generated_at or datetime.now(timezone.utc),
        header_rows=build_header_rows(layout, sort_state),
        rows=[[_body_cell(c, row, metrics, ranks) for c in layout.columns] for row in rows],
        legend=build_legend(layout, metrics),
    )
