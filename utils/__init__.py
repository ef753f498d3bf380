"""Utils module - shared configuration.

This module contains:
- Configuration loading from config.yml (config.py)
"""

from .config import get_snapshot_path, reload_config
