#!/usr/bin/env python3
"""League Leaderboard - Main Orchestrator

Single entry point for the leaderboard:
1. build  - Fetch league data from the FPL API and publish the snapshot
2. render - Write the leaderboard page as static HTML
3. show   - Print the leaderboard table in the terminal
4. serve  - Run the dashboard (page + API + periodic rebuild)

Usage:
    python main.py build
    python main.py render --output index.html
    python main.py show --sort sum_here_we_go --dir asc
    python main.py serve --port 8000
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

# Project root
PROJECT_ROOT = Path(__file__).parent

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(levelname)s | %(message)s'
)
logger = logging.getLogger(__name__)


def run_build(output: Optional[str] = None) -> int:
    """Build and publish the snapshot.

    Returns:
        Process exit code (1 when any required API call fails).
    """
    logger.info("🚀 Building league snapshot...")

    from etl.pipeline import SnapshotBuilder
    from scraping.fpl_api import FPLAPIError

    try:
        result = SnapshotBuilder().run(output)
    except FPLAPIError as e:
        logger.error(f"❌ {e}")
        return 1

    if result.mismatches:
        logger.warning(f"⚠️ {len(result.mismatches)} total mismatch(es), snapshot published anyway")
    logger.info(f"✅ Snapshot written to {result.path}")
    return 0


def _load_view(snapshot_path: Optional[str], sort: Optional[str], direction: Optional[str]):
    from reports.leaderboard import LeaderboardView, load_snapshot
    from utils.config import get_snapshot_path

    snapshot = load_snapshot(get_snapshot_path(snapshot_path))
    return LeaderboardView.from_query(snapshot, sort, direction)


def run_render(output: str, snapshot_path: Optional[str] = None,
               sort: Optional[str] = None, direction: Optional[str] = None) -> int:
    """Render the leaderboard page to a static HTML file."""
    from reports.leaderboard import SnapshotLoadError, render_error_page, render_page

    out = Path(output)
    try:
        view = _load_view(snapshot_path, sort, direction)
    except SnapshotLoadError as e:
        logger.error(f"❌ {e}")
        out.write_text(render_error_page(), encoding='utf-8')
        return 1

    out.write_text(render_page(view.to_table()), encoding='utf-8')
    logger.info(f"✅ Leaderboard page written to {out}")
    return 0


def run_show(snapshot_path: Optional[str] = None, sort: Optional[str] = None,
             direction: Optional[str] = None, use_colors: bool = True) -> int:
    """Print the leaderboard in the terminal."""
    from reports.leaderboard import SnapshotLoadError, TextLeaderboardReporter

    try:
        view = _load_view(snapshot_path, sort, direction)
    except SnapshotLoadError as e:
        logger.error(f"❌ Error loading data: {e}")
        return 1

    TextLeaderboardReporter(use_colors=use_colors).print_report(view.to_table())
    return 0


def run_serve(host: str, port: int) -> int:
    """Start the dashboard under uvicorn."""
    import uvicorn

    logger.info(f"🌐 Serving leaderboard on http://{host}:{port}")
    uvicorn.run("dashboard.backend.main:app", host=host, port=port)
    return 0


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description='League Leaderboard - FPL mini-league snapshot builder and renderer',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Refresh data.json from the FPL API
  python main.py build

  # Static page sorted by GW3 ascending
  python main.py render --output index.html --sort gw_3 --dir asc

  # Terminal table
  python main.py show --no-colors
"""
    )

    # General options
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Verbose output')
    parser.add_argument('--quiet', '-q', action='store_true',
                        help='Minimal output')

    sub = parser.add_subparsers(dest='command', required=True)

    build = sub.add_parser('build', help='Fetch league data and write the snapshot')
    build.add_argument('--output', '-o', default=None,
                       help='Snapshot path (default: snapshot.path from config.yml)')

    def _add_view_options(p):
        p.add_argument('--snapshot', default=None,
                       help='Snapshot path (default: snapshot.path from config.yml)')
        p.add_argument('--sort', default=None, help='Column key to sort by (e.g. total, gw_3)')
        p.add_argument('--dir', dest='direction', choices=['asc', 'desc'], default=None,
                       help='Sort direction (default: desc)')

    render = sub.add_parser('render', help='Write the leaderboard as static HTML')
    render.add_argument('--output', '-o', default='index.html', help='HTML file to write')
    _add_view_options(render)

    show = sub.add_parser('show', help='Print the leaderboard table')
    show.add_argument('--no-colors', action='store_true', help='Disable terminal colors')
    _add_view_options(show)

    serve = sub.add_parser('serve', help='Run the leaderboard dashboard')
    serve.add_argument('--host', default='127.0.0.1')
    serve.add_argument('--port', type=int, default=8000)

    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point for the leaderboard."""
    args = parse_args(argv)

    # Configure logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    elif args.quiet:
        logging.getLogger().setLevel(logging.WARNING)

    try:
        if args.command == 'build':
            return run_build(args.output)
        if args.command == 'render':
            return run_render(args.output, args.snapshot, args.sort, args.direction)
        if args.command == 'show':
            return run_show(args.snapshot, args.sort, args.direction, use_colors=not args.no_colors)
        return run_serve(args.host, args.port)

    except KeyboardInterrupt:
        print("\n⚠️ Interrupted by user")
        return 130
    except Exception as e:
        logger.error(f"❌ Error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1


if __name__ == '__main__':
    sys.exit(main())
