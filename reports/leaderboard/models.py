"""Snapshot data structures for the leaderboard renderer.

The renderer only ever sees the published snapshot document; these
dataclasses mirror its camelCase wire format and are treated as read-only
for the lifetime of one render pass.
"""

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

Number = Union[int, float]


class SnapshotLoadError(Exception):
    """Raised when the snapshot document is missing, unparsable or invalid."""


def _require_dict(value: Any, what: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise SnapshotLoadError(f"{what} is not an object: {value!r}")
    return value


def _list_field(data: Dict[str, Any], key: str) -> List[Any]:
    """A list-valued field; absent or null means empty."""
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise SnapshotLoadError(f"{key} is not a list: {value!r}")
    return value


def finite_number(value: Any) -> Optional[Number]:
    """Return value as a finite int/float, or None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = value
    else:
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
    if not math.isfinite(number):
        return None
    if isinstance(number, float) and number.is_integer():
        return int(number)
    return number


@dataclass
class ChipEvent:
    """A chip activation (e.g. 'wildcard', 'bboost') in a gameweek."""

    event: Optional[int]
    name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChipEvent":
        data = _require_dict(data, "chip event")
        event = finite_number(data.get("event"))
        return cls(event=int(event) if event is not None else None, name=str(data.get("name") or ""))


@dataclass
class TransferMove:
    """One player swap made in the current gameweek."""

    in_id: Any
    in_name: str
    out_id: Any
    out_name: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TransferMove":
        data = _require_dict(data, "transfer")
        player_in = _require_dict(data.get("in") or {}, "transfer in")
        player_out = _require_dict(data.get("out") or {}, "transfer out")
        return cls(
            in_id=player_in.get("id"),
            in_name=str(player_in.get("name") or player_in.get("id") or ""),
            out_id=player_out.get("id"),
            out_name=str(player_out.get("name") or player_out.get("id") or ""),
        )


@dataclass
class ManagerRow:
    """Persisted fields of one league participant.

    Attributes:
        entry_id: FPL entry ID (unique within the league)
        team_name: Team display name
        player_name: Manager display name
        total: Season total from league standings
        gw_points: Net points for GW1..currentGW, None where missing
        chips: Chip activation events
        latest_transfers: Transfers made in the current gameweek
    """

    entry_id: Any
    team_name: str
    player_name: str
    total: Optional[Number]
    gw_points: List[Optional[Number]] = field(default_factory=list)
    chips: List[ChipEvent] = field(default_factory=list)
    latest_transfers: List[TransferMove] = field(default_factory=list)

    def points_for(self, gameweek: int) -> Optional[Number]:
        """Net points for a gameweek, None when absent."""
        if 1 <= gameweek <= len(self.gw_points):
            return self.gw_points[gameweek - 1]
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ManagerRow":
        data = _require_dict(data, "manager record")
        entry_id = data.get("entryId")
        if entry_id is None:
            raise SnapshotLoadError("manager record without entryId")
        if isinstance(entry_id, bool) or not isinstance(entry_id, (int, str)):
            raise SnapshotLoadError(f"invalid entryId: {entry_id!r}")
        return cls(
            entry_id=entry_id,
            team_name=str(data.get("teamName") or ""),
            player_name=str(data.get("playerName") or ""),
            total=finite_number(data.get("total")),
            gw_points=[finite_number(p) for p in _list_field(data, "gwPoints")],
            chips=[ChipEvent.from_dict(c) for c in _list_field(data, "chips")],
            latest_transfers=[TransferMove.from_dict(t) for t in _list_field(data, "latestGwTransfers")],
        )


@dataclass
class Snapshot:
    """The published leaderboard snapshot."""

    league_id: Any
    generated_at: datetime
    current_gw: int
    managers: List[ManagerRow]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        if not isinstance(data, dict):
            raise SnapshotLoadError("snapshot is not a JSON object")

        current_gw = finite_number(data.get("currentGW"))
        if current_gw is None or int(current_gw) != current_gw or current_gw < 1:
            raise SnapshotLoadError(f"invalid currentGW: {data.get('currentGW')!r}")

        managers = data.get("managers")
        if not isinstance(managers, list):
            raise SnapshotLoadError("snapshot has no managers list")
        rows = [ManagerRow.from_dict(m) for m in managers]

        entry_ids = [row.entry_id for row in rows]
        if len(set(entry_ids)) != len(entry_ids):
            raise SnapshotLoadError("duplicate entryId in managers")

        return cls(
            league_id=data.get("leagueId"),
            generated_at=parse_timestamp(data.get("generatedAt")),
            current_gw=int(current_gw),
            managers=rows,
        )


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""
    if not value:
        raise SnapshotLoadError("snapshot has no generatedAt")
    try:
        ts = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError as e:
        raise SnapshotLoadError(f"invalid generatedAt: {value!r}") from e
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts


def load_snapshot(path: Union[str, Path]) -> Snapshot:
    """Read and validate the snapshot file from disk.

    The file is re-read on every call so each render reflects the latest build.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError as e:
        raise SnapshotLoadError(f"snapshot not found: {path}") from e
    except (OSError, ValueError) as e:
        raise SnapshotLoadError(f"could not read snapshot {path}: {e}") from e
    return Snapshot.from_dict(data)
