"""Period configuration.

A period is a named, contiguous, inclusive block of gameweeks. Periods are
static configuration (config.yml), ordered by start and non-overlapping.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from utils.config import PERIODS


class PeriodConfigError(ValueError):
    """Raised for malformed, unordered or overlapping periods."""


@dataclass(frozen=True)
class Period:
    key: str
    name: str
    start: int
    end: int

    @property
    def sum_key(self) -> str:
        return f"sum_{self.key}"

    def gameweeks(self) -> range:
        return range(self.start, self.end + 1)

    def elapsed_gameweeks(self, current_gw: int) -> range:
        """Gameweeks played so far: start..min(end, current_gw)."""
        return range(self.start, min(self.end, current_gw) + 1)

    def contains(self, gameweek: int) -> bool:
        return self.start <= gameweek <= self.end

    def is_visible(self, current_gw: int) -> bool:
        return self.start <= current_gw


def validate_periods(periods: List[Period]) -> List[Period]:
    previous: Optional[Period] = None
    keys = set()
    for period in periods:
        if period.start < 1 or period.start > period.end:
            raise PeriodConfigError(f"period {period.key!r} has invalid range {period.start}..{period.end}")
        if period.key in keys:
            raise PeriodConfigError(f"duplicate period key {period.key!r}")
        if previous is not None and period.start <= previous.end:
            raise PeriodConfigError(
                f"period {period.key!r} starts at GW{period.start}, "
                f"before {previous.key!r} ends at GW{previous.end}"
            )
        keys.add(period.key)
        previous = period
    return periods


def load_periods(raw: Optional[Iterable[Dict[str, Any]]] = None) -> List[Period]:
    """Build validated periods from config dicts (defaults to config.yml)."""
    periods = []
    for item in PERIODS if raw is None else raw:
        try:
            periods.append(Period(
                key=str(item['key']),
                name=str(item.get('name') or item['key']),
                start=int(item['start']),
                end=int(item['end']),
            ))
        except (KeyError, TypeError, ValueError) as e:
            raise PeriodConfigError(f"malformed period entry {item!r}") from e
    return validate_periods(periods)


def visible_periods(periods: List[Period], current_gw: int) -> List[Period]:
    return [p for p in periods if p.is_visible(current_gw)]


def active_period(periods: List[Period], current_gw: int) -> Optional[Period]:
    """The period containing current_gw, if any."""
    return next((p for p in periods if p.contains(current_gw)), None)
