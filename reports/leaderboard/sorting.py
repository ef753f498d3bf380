"""Click-to-sort protocol and ranking.

Clicking a column toggles its direction (descending first); clicking a
different column forgets every other column's direction and starts that
column at descending. Ranks are recomputed from row order after every sort.
"""

import math
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .layout import ColumnDescriptor
from .models import ManagerRow, finite_number


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def flipped(self) -> "SortDirection":
        return SortDirection.DESC if self == SortDirection.ASC else SortDirection.ASC


DEFAULT_DIRECTION = SortDirection.DESC


@dataclass(frozen=True)
class SortState:
    """Which column is sorted and how; key None means the default order."""

    key: Optional[str] = None
    direction: Optional[SortDirection] = None

    def click(self, key: str) -> "SortState":
        """State after clicking the header of column key."""
        if key == self.key and self.direction is not None:
            return SortState(key, self.direction.flipped())
        return SortState(key, DEFAULT_DIRECTION)

    def direction_for(self, key: str) -> Optional[SortDirection]:
        return self.direction if key == self.key else None

    @classmethod
    def from_query(cls, key: Optional[str], direction: Optional[str]) -> "SortState":
        """Parse ?sort=&dir= parameters; an unknown direction means descending."""
        if not key:
            return cls()
        try:
            parsed = SortDirection(str(direction).lower())
        except ValueError:
            parsed = DEFAULT_DIRECTION
        return cls(key, parsed)


def numeric_sort_key(value: Any) -> float:
    """Missing or non-finite values sort as negative infinity."""
    number = finite_number(value)
    return float(number) if number is not None else -math.inf


def strip_accents(text: str) -> str:
    return "".join(ch for ch in unicodedata.normalize("NFKD", text) if not unicodedata.combining(ch))


def text_sort_key(value: Any) -> Tuple[str, str, str]:
    """Collation key independent of the process locale.

    Compares letters ignoring case and accents first, then accents, then
    puts lowercase before uppercase ('alpha' < 'Bravo' < 'charlie').
    """
    text = "" if value is None else str(value)
    folded = text.casefold()
    return strip_accents(folded), folded, text.swapcase()


def sort_rows(rows: List[ManagerRow], column: ColumnDescriptor, direction: SortDirection,
              value_of: Callable[[ManagerRow], Any]) -> List[ManagerRow]:
    """Stable sort of rows by one column.

    Args:
        rows: Rows in their current order.
        column: Column being sorted; its kind picks numeric or text comparison.
        direction: Requested direction.
        value_of: Extracts the column's raw value from a row.
    """
    key_fn = numeric_sort_key if column.is_numeric else text_sort_key
    return sorted(rows, key=lambda row: key_fn(value_of(row)), reverse=direction == SortDirection.DESC)


def default_order(rows: List[ManagerRow]) -> List[ManagerRow]:
    """Total descending, missing totals last."""
    return sorted(rows, key=lambda row: numeric_sort_key(row.total), reverse=True)


def assign_ranks(rows: List[ManagerRow]) -> Dict[Any, int]:
    """1-based rank for every row from its position."""
    return {row.entry_id: i for i, row in enumerate(rows, start=1)}
