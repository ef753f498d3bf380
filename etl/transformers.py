"""ETL Transformers Module

Cleans and normalizes raw FPL API payloads into snapshot manager records.

Target schema (one record per manager, camelCase on the wire):
- teamName, playerName, entryId, total
- gwPoints: net points per gameweek 1..currentGW (None when missing)
- chips: [{event, name}]
- latestGwTransfers: [{in: {id, name}, out: {id, name}}]

All functions here are pure; fetching lives in etl.fetchers.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


class SnapshotBuildError(Exception):
    """Raised when upstream data cannot produce a snapshot."""


@dataclass
class TotalMismatch:
    """A manager whose reported total differs from sum(gwPoints)."""
    team: str
    entry_id: int
    total: Any
    sum_gw: int


def to_number(value: Any) -> Optional[float]:
    """Coerce an API value to a finite number, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def resolve_current_gameweek(events: List[Dict]) -> int:
    """Pick the current gameweek from bootstrap events.

    Prefers the event flagged is_current, then is_next, then the last event.
    """
    if not events:
        raise SnapshotBuildError("bootstrap-static returned no events")

    for flag in ('is_current', 'is_next'):
        for event in events:
            if event.get(flag):
                return int(event['id'])

    last = events[-1]
    return int(last.get('id') or len(events))


def net_points(entry: Dict) -> int:
    """Gross points minus the transfer-hit cost for one gameweek entry."""
    gross = to_number(entry.get('points')) or 0
    hit = to_number(entry.get('event_transfers_cost')) or 0
    return gross - hit


def history_net_points(history: Dict) -> Dict[int, int]:
    """Map gameweek -> net points from an entry history payload."""
    return {
        int(row['event']): net_points(row)
        for row in history.get('current') or []
        if row.get('event') is not None
    }


def current_net_points(entry_history: Optional[Dict]) -> Optional[int]:
    """Net points from a picks entry_history, when its points are usable."""
    if not entry_history or to_number(entry_history.get('points')) is None:
        return None
    return net_points(entry_history)


def build_gw_points(gw_map: Dict[int, Any], current_gw: int) -> List[Optional[Any]]:
    """One slot per gameweek 1..current_gw, None where no data exists."""
    return [gw_map.get(gw) for gw in range(1, current_gw + 1)]


def chip_events(history: Dict) -> List[Dict]:
    return [{'event': c.get('event'), 'name': c.get('name')} for c in history.get('chips') or []]


def current_gw_transfers(transfers: List[Dict], current_gw: int) -> List[Tuple[Any, Any]]:
    """(element_in, element_out) pairs recorded in the current gameweek."""
    return [
        (t.get('element_in'), t.get('element_out'))
        for t in transfers
        if t.get('event') == current_gw
    ]


def player_names(elements: List[Dict]) -> Dict[Any, str]:
    """Map element id -> web_name."""
    return {e.get('id'): e.get('web_name') for e in elements or []}


def resolve_transfer_names(pairs: List[Tuple[Any, Any]], names: Dict[Any, str]) -> List[Dict]:
    """Attach display names to transfer pairs, falling back to the raw id."""
    def _player(element_id):
        return {'id': element_id, 'name': names.get(element_id) or str(element_id)}

    return [{'in': _player(player_in), 'out': _player(player_out)} for player_in, player_out in pairs]


def build_manager_record(
    standing: Dict,
    history: Dict,
    transfers: List[Dict],
    current_gw: int,
    current_entry_history: Optional[Dict],
    names: Dict[Any, str],
) -> Dict:
    """Assemble one snapshot manager record.

    Args:
        standing: Row from the league standings results.
        history: Entry history payload.
        transfers: Entry transfer log.
        current_gw: Current gameweek.
        current_entry_history: picks entry_history for current_gw, or None.
        names: Element id -> display name lookup.
    """
    gw_map = history_net_points(history)
    fresh = current_net_points(current_entry_history)
    if fresh is not None:
        gw_map[current_gw] = fresh

    return {
        'teamName': standing.get('entry_name'),
        'playerName': standing.get('player_name'),
        'total': standing.get('total'),
        'entryId': standing.get('entry'),
        'chips': chip_events(history),
        'gwPoints': build_gw_points(gw_map, current_gw),
        'latestGwTransfers': resolve_transfer_names(current_gw_transfers(transfers, current_gw), names),
    }


def find_total_mismatches(managers: List[Dict]) -> List[TotalMismatch]:
    """Managers whose reported total differs from the sum of gwPoints."""
    mismatches = []
    for manager in managers:
        sum_gw = sum(to_number(v) or 0 for v in manager.get('gwPoints') or [])
        if sum_gw != manager.get('total'):
            mismatches.append(TotalMismatch(
                team=manager.get('teamName'),
                entry_id=manager.get('entryId'),
                total=manager.get('total'),
                sum_gw=sum_gw,
            ))
    return mismatches


def sort_managers(managers: List[Dict]) -> List[Dict]:
    """Default snapshot ordering: total descending."""
    return sorted(managers, key=lambda m: to_number(m.get('total')) or 0, reverse=True)
