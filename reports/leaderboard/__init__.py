"""League Leaderboard Renderer Package

Loads the published snapshot, derives period columns and award metrics, sorts
rows and renders the two-tier leaderboard as HTML, terminal text or JSON.
"""

from .models import Snapshot, SnapshotLoadError, load_snapshot
from .periods import Period, PeriodConfigError, load_periods
from .layout import ColumnDescriptor, TableLayout, ValueKind, build_layout
from .metrics import DerivedMetrics, compute_metrics, format_gw_leads
from .sorting import SortDirection, SortState
from .table import DisplayTable, build_display_table
from .view import LeaderboardView
from .html_renderer import render_error_page, render_page
from .text_renderer import TextLeaderboardReporter

__all__ = [
    'Snapshot',
    'SnapshotLoadError',
    'load_snapshot',
    'Period',
    'PeriodConfigError',
    'load_periods',
    'ColumnDescriptor',
    'TableLayout',
    'ValueKind',
    'build_layout',
    'DerivedMetrics',
    'compute_metrics',
    'format_gw_leads',
    'SortDirection',
    'SortState',
    'DisplayTable',
    'build_display_table',
    'LeaderboardView',
    'render_error_page',
    'render_page',
    'TextLeaderboardReporter',
]
