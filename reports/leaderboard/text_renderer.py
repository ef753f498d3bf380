"""Terminal output for the leaderboard display tree.

Prints the same two-tier table as the HTML page, flattened into one header
line per column group, using tabulate.
"""

import logging
from typing import List

from tabulate import tabulate

from utils.config import DISPLAY_TIMEZONE, PAGE_TITLE

from .table import DisplayCell, DisplayTable, format_last_updated

logger = logging.getLogger(__name__)


# ANSI color codes for terminal
class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    UNDERLINE = '\033[4m'
    END = '\033[0m'


class TextLeaderboardReporter:
    """Formats a DisplayTable for the terminal."""

    def __init__(self, use_colors: bool = True, tz_name: str = DISPLAY_TIMEZONE):
        """Initialize reporter.

        Args:
            use_colors: Whether to use ANSI colors in output.
            tz_name: Timezone for the last-update line.
        """
        self.use_colors = use_colors
        self.tz_name = tz_name

    def _color(self, text: str, color: str) -> str:
        """Apply color to text if colors enabled."""
        if self.use_colors and text:
            return f"{color}{text}{Colors.END}"
        return text

    def column_headers(self, table: DisplayTable) -> List[str]:
        """One label per body column; period names head their first column."""
        if len(table.header_rows) == 1:
            return [cell.label for cell in table.header_rows[0]]

        top, sub = table.header_rows
        headers = []
        sub_iter = iter(sub)
        for cell in top:
            if cell.key is not None:
                headers.append(cell.label)
                continue
            for i in range(cell.colspan):
                sub_cell = next(sub_iter)
                group = cell.label if i == 0 else ''
                headers.append(f"{group}\n{sub_cell.label}")
        return headers

    def format_cell(self, cell: DisplayCell) -> str:
        if cell.badges:
            text = ' '.join(f"{b.label} {b.text}".strip() for b in cell.badges)
        else:
            text = cell.text

        if 'period-leader' in cell.classes:
            return self._color(text, Colors.GREEN + Colors.BOLD)
        if 'gw-leader' in cell.classes:
            return self._color(text, Colors.YELLOW)
        if 'sum-col' in cell.classes:
            return self._color(text, Colors.BOLD)
        return text

    def render(self, table: DisplayTable, title: str = PAGE_TITLE) -> str:
        """Full report text: title, metadata line, table."""
        updated = format_last_updated(table.generated_at, self.tz_name)
        legend = ', '.join(item.label for item in table.legend)
        body = [[self.format_cell(cell) for cell in row] for row in table.rows]

        lines = [
            self._color(title, Colors.BOLD),
            f"GW {table.current_gw} | Last update: {updated}",
            self._color(legend, Colors.CYAN),
            '',
            tabulate(body, headers=self.column_headers(table), tablefmt='simple', disable_numparse=True),
        ]
        return '\n'.join(lines)

    def print_report(self, table: DisplayTable, title: str = PAGE_TITLE) -> None:
        print(self.render(table, title))
