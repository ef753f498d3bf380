"""Central Configuration Module

Provides a single source of truth for all leaderboard configuration values.
Loads settings from config.yml and exposes typed constants for use throughout
the codebase.

Usage:
    from utils.config import LEAGUE_ID, REQUEST_SLEEP_SECONDS
    from utils.config import PERIODS, get_snapshot_path
"""

from pathlib import Path
from typing import Dict, List, Optional, Any
import yaml


def _get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent


def load_config() -> Dict[str, Any]:
    """Load configuration from config.yml in the project root.

    Returns:
        Dict with config values or empty dict if not found.
    """
    config_path = _get_project_root() / 'config.yml'
    if config_path.exists():
        try:
            with open(config_path, 'r') as f:
                return yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}
    return {}


# Load config at module level (singleton pattern)
_CONFIG = load_config()


# =============================================================================
# DEFAULT PERIODS
# =============================================================================

# Named gameweek blocks of the 2025-26 league season ("Pole Position" skipped)
DEFAULT_PERIODS: List[Dict[str, Any]] = [
    {'key': 'here_we_go', 'name': 'Here We Go!', 'start': 1, 'end': 3},
    {'key': 'early_wildcard', 'name': 'Early Wildcard', 'start': 4, 'end': 7},
    {'key': 'false_9', 'name': 'False 9', 'start': 8, 'end': 11},
    {'key': 'black_friday', 'name': 'Black Friday', 'start': 12, 'end': 13},
    {'key': 'remembering_jota', 'name': 'Remembering Jota', 'start': 14, 'end': 16},
    {'key': 'afcon_drama', 'name': 'AFCON Drama', 'start': 17, 'end': 22},
    {'key': 'valentines', 'name': 'Valentines', 'start': 23, 'end': 26},
    {'key': 'ramadan_kareem', 'name': 'Ramadan Kareem', 'start': 27, 'end': 31},
    {'key': 'flowers', 'name': 'Flowers Everywhere', 'start': 32, 'end': 36},
    {'key': 'fergie_time', 'name': 'Fergie Time', 'start': 37, 'end': 38},
]


# =============================================================================
# LEAGUE & UPSTREAM API
# =============================================================================

_LEAGUE_CONFIG = _CONFIG.get('league', {})

LEAGUE: Dict[str, Any] = {
    'league_id': _LEAGUE_CONFIG.get('league_id', 22667),
    'sleep_seconds': _LEAGUE_CONFIG.get('sleep_seconds', 0.3),
    'user_agent': _LEAGUE_CONFIG.get('user_agent', 'iste-promiyer-lig'),
    'request_timeout': _LEAGUE_CONFIG.get('request_timeout', 30),
}

# Convenience accessors
LEAGUE_ID: int = LEAGUE['league_id']
REQUEST_SLEEP_SECONDS: float = LEAGUE['sleep_seconds']
USER_AGENT: str = LEAGUE['user_agent']
REQUEST_TIMEOUT: float = LEAGUE['request_timeout']


# =============================================================================
# SNAPSHOT
# =============================================================================

_SNAPSHOT_CONFIG = _CONFIG.get('snapshot', {})

SNAPSHOT: Dict[str, Any] = {
    'path': _SNAPSHOT_CONFIG.get('path', 'data.json'),
}

# Relative paths resolve against the project root
SNAPSHOT_PATH: str = SNAPSHOT['path']


# =============================================================================
# DISPLAY
# =============================================================================

_DISPLAY_CONFIG = _CONFIG.get('display', {})

DISPLAY: Dict[str, Any] = {
    'timezone': _DISPLAY_CONFIG.get('timezone', 'Europe/Istanbul'),
    'title': _DISPLAY_CONFIG.get('title', 'League Leaderboard'),
}

# Convenience accessors
DISPLAY_TIMEZONE: str = DISPLAY['timezone']
PAGE_TITLE: str = DISPLAY['title']


# =============================================================================
# DASHBOARD
# =============================================================================

_DASHBOARD_CONFIG = _CONFIG.get('dashboard', {})

DASHBOARD: Dict[str, Any] = {
    'refresh_minutes': _DASHBOARD_CONFIG.get('refresh_minutes', 60),
    'build_on_startup': _DASHBOARD_CONFIG.get('build_on_startup', False),
}

# Convenience accessors (refresh_minutes <= 0 disables the scheduler)
REFRESH_MINUTES: int = DASHBOARD['refresh_minutes']
BUILD_ON_STARTUP: bool = DASHBOARD['build_on_startup']


# =============================================================================
# PERIODS
# =============================================================================

PERIODS: List[Dict[str, Any]] = _CONFIG.get('periods') or DEFAULT_PERIODS


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def get_snapshot_path(path: Optional[str] = None) -> Path:
    """Resolve the snapshot file location.

    Args:
        path: Optional override; defaults to the configured snapshot path.

    Returns:
        Absolute path, relative values anchored at the project root.
    """
    resolved = Path(path or SNAPSHOT_PATH)
    if not resolved.is_absolute():
        resolved = _get_project_root() / resolved
    return resolved


def reload_config() -> None:
    """Reload configuration from disk.

    Updates all module-level constants. Useful for testing or when
    config.yml changes during runtime.
    """
    global _CONFIG, LEAGUE, LEAGUE_ID, REQUEST_SLEEP_SECONDS, USER_AGENT, REQUEST_TIMEOUT
    global SNAPSHOT, SNAPSHOT_PATH
    global DISPLAY, DISPLAY_TIMEZONE, PAGE_TITLE
    global DASHBOARD, REFRESH_MINUTES, BUILD_ON_STARTUP
    global PERIODS

    _CONFIG = load_config()

    _lg = _CONFIG.get('league', {})
    LEAGUE = {
        'league_id': _lg.get('league_id', 22667),
        'sleep_seconds': _lg.get('sleep_seconds', 0.3),
        'user_agent': _lg.get('user_agent', 'iste-promiyer-lig'),
        'request_timeout': _lg.get('request_timeout', 30),
    }
    LEAGUE_ID = LEAGUE['league_id']
    REQUEST_SLEEP_SECONDS = LEAGUE['sleep_seconds']
    USER_AGENT = LEAGUE['user_agent']
    REQUEST_TIMEOUT = LEAGUE['request_timeout']

    _snap = _CONFIG.get('snapshot', {})
    SNAPSHOT = {'path': _snap.get('path', 'data.json')}
    SNAPSHOT_PATH = SNAPSHOT['path']

    _disp = _CONFIG.get('display', {})
    DISPLAY = {'timezone': _disp.get('timezone', 'Europe/Istanbul'), 'title': _disp.get('title', 'League Leaderboard')}
    DISPLAY_TIMEZONE = DISPLAY['timezone']
    PAGE_TITLE = DISPLAY['title']

    _dash = _CONFIG.get('dashboard', {})
    DASHBOARD = {'refresh_minutes': _dash.get('refresh_minutes', 60), 'build_on_startup': _dash.get('build_on_startup', False)}
    REFRESH_MINUTES = DASHBOARD['refresh_minutes']
    BUILD_ON_STARTUP = DASHBOARD['build_on_startup']

    PERIODS = _CONFIG.get('periods') or DEFAULT_PERIODS
