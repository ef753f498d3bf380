"""ETL Module for the league leaderboard snapshot.

This module builds the snapshot document consumed by the leaderboard renderer:

- fetchers.py: Paced access to the FPL league resources
- transformers.py: Normalize raw payloads into manager records
- pipeline.py: Orchestrate the build and publish the snapshot file

Usage:
    from etl.pipeline import SnapshotBuilder

    result = SnapshotBuilder().run()

    # Or run via CLI
    # python -m etl.pipeline
"""

from etl.fetchers import LeagueFetcher
from etl.transformers import SnapshotBuildError, TotalMismatch
from etl.pipeline import BuildResult, SnapshotBuilder, write_snapshot

__all__ = [
    'LeagueFetcher',
    'SnapshotBuildError',
    'TotalMismatch',
    'BuildResult',
    'SnapshotBuilder',
    'write_snapshot',
]
