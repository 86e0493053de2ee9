"""
CLI entry point for Presence Dashboard.

PURPOSE: Command-line interface for running the dashboard and reports.
AI CONTEXT: Main entry points for package execution.

USAGE:
    # Run web dashboard (default)
    python -m presence_dashboard

    # Or via CLI command (after install)
    presence-dashboard

    # Run with subcommands
    presence-dashboard dashboard --port 3000  # Launch web dashboard
    presence-dashboard report --period week   # Print text report
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from functools import lru_cache
from typing import TYPE_CHECKING

from .config import Config
from .periods import PERIODS

if TYPE_CHECKING:
    from .feed import FeedClient
    from .statistics import StatisticsEngine

# Constants
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
LOG_LEVELS = ("critical", "error", "warning", "info", "debug", "trace")


@lru_cache(maxsize=1)
def _get_logger() -> logging.Logger:
    """Get module logger (cached for thread safety)."""
    logging.basicConfig(level=logging.INFO)
    return logging.getLogger(__name__)


def _log(message: str, *, emoji: str = "") -> None:
    """Log message with optional emoji prefix for CLI output.

    Args:
        message: The message to log.
        emoji: Optional emoji prefix for visual CLI feedback.
    """
    prefix = f"{emoji} " if emoji else ""
    _get_logger().info(f"{prefix}{message}")


def run_dashboard(
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """
    Launch the web dashboard.

    Business context: The dashboard is the primary way to watch
    occupancy; it polls the upstream feed every
    Config.REFRESH_INTERVAL_SECONDS while a page is open.

    Args:
        host: Network interface to bind to. Default '127.0.0.1' for
            local-only access. Use '0.0.0.0' for network access.
        port: TCP port for the HTTP server. Default 8000.
        reload: Enable uvicorn auto-reload.
        log_level: uvicorn log level.

    Returns:
        None. Blocks until server shutdown (Ctrl+C).

    Example:
        >>> # From command line:
        >>> # presence-dashboard dashboard --port 3000
        >>> run_dashboard(port=3000)
        🚀 Starting dashboard at http://127.0.0.1:3000
    """
    from .web import run_dashboard as start_web

    _log(f"Starting dashboard at http://{host}:{port}", emoji="🚀")
    _log(f"Reading feed {Config.upstream_url()}")
    _log("Press Ctrl+C to stop")
    start_web(host=host, port=port, reload=reload, log_level=log_level)


async def _fetch_report(
    period: str,
    feed: FeedClient,
    engine: StatisticsEngine,
) -> str:
    from .parser import parse_samples
    from .periods import filter_by_period

    try:
        text = await feed.fetch_text()
    finally:
        await feed.aclose()
    now = Config.now()
    samples = filter_by_period(parse_samples(text), period, now)
    return engine.generate_summary_report(samples, period, now)


def run_report(
    period: str = Config.DEFAULT_PERIOD,
    url: str | None = None,
    feed: FeedClient | None = None,
    engine: StatisticsEngine | None = None,
) -> int:
    """
    Fetch the feed once and print a text report to stdout.

    Business context: Quick terminal summary of occupancy for one
    period without opening a browser. Can be redirected to files or
    used in scripts.

    Args:
        period: Period to report on (day, week, month, year).
        url: Feed URL. Defaults to Config.upstream_url().
        feed: Optional FeedClient for testability. Overrides url.
        engine: Optional StatisticsEngine for testability.

    Returns:
        0 on success, 1 if the feed could not be fetched.

    Example:
        >>> # From command line:
        >>> # presence-dashboard report --period week > presence.txt
        >>> run_report(period="week")
        ==================================================
        PRESENCE DASHBOARD - REPORT
        ...
    """
    from .feed import FeedClient as Client
    from .feed import FeedError
    from .statistics import StatisticsEngine as StatsEngine

    feed = feed or Client(url=url)
    engine = engine or StatsEngine()

    try:
        report = asyncio.run(_fetch_report(period, feed, engine))
    except FeedError as exc:
        _log(f"Could not fetch {feed.url}: {exc}", emoji="❌")
        return 1

    # Note: Using print() intentionally for stdout piping support
    print(report)
    return 0


def main(argv: list[str] | None = None) -> int:
    """
    Main CLI entry point for Presence Dashboard.

    Parses command-line arguments and dispatches to the appropriate
    subcommand handler. If no subcommand is specified, defaults to
    running the web dashboard.

    Subcommands:
    - dashboard [--host HOST] [--port PORT] [--reload] [--log-level LEVEL]
    - report [--period PERIOD] [--url URL]

    Args:
        argv: Argument list, defaults to sys.argv[1:].

    Returns:
        Exit code: 0 for success, 1 when the report fetch failed.

    Raises:
        SystemExit: On --help, --version or argument parsing errors.
    """
    from .__version__ import __version__

    parser = argparse.ArgumentParser(
        prog="presence-dashboard",
        description="Presence Dashboard - real-time occupancy from a remote CSV feed",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Dashboard command
    dashboard_parser = subparsers.add_parser(
        "dashboard",
        help="Launch web dashboard (default)",
    )
    dashboard_parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Bind address (default: {DEFAULT_HOST})",
    )
    dashboard_parser.add_argument(
        "--port",
        type=int,
        default=DEFAULT_PORT,
        help=f"Port number (default: {DEFAULT_PORT})",
    )
    dashboard_parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development",
    )
    dashboard_parser.add_argument(
        "--log-level",
        default="info",
        choices=LOG_LEVELS,
        help="uvicorn log level (default: info)",
    )

    # Report command
    report_parser = subparsers.add_parser(
        "report",
        help="Print occupancy report to stdout",
    )
    report_parser.add_argument(
        "--period",
        default=Config.DEFAULT_PERIOD,
        choices=tuple(PERIODS),
        help=f"Period to report on (default: {Config.DEFAULT_PERIOD})",
    )
    report_parser.add_argument(
        "--url",
        default=None,
        help="Feed URL (default: $PRESENCE_UPSTREAM_URL or the built-in feed)",
    )

    args = parser.parse_args(argv)

    if args.command == "report":
        return run_report(period=args.period, url=args.url)
    if args.command == "dashboard":
        run_dashboard(
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level=args.log_level,
        )
    else:
        # Default: dashboard with default settings
        run_dashboard()

    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
