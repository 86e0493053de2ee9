"""
Presence Dashboard.

PURPOSE: Poll a remote CSV feed of presence counts and render it as charts.
AI CONTEXT: This package provides the data pipeline and a FastAPI dashboard.

PACKAGE STRUCTURE:
- parser.py: CSV text -> ordered tuple of Sample records
- periods.py: day/week/month/year filtering relative to "now"
- statistics.py: totals, averages, hourly buckets, day segments
- presenters.py: chart-ready reshaping and matplotlib rendering
- pipeline.py: immutable dashboard state and the recompute() derivation
- feed.py: upstream HTTP fetch and the proxy envelope
- service.py: fetch cycle, single-flight guard, loading/loaded/error state
- web/: FastAPI app, routes, htmx partials, PNG charts
- config.py: Configuration constants and environment overrides

QUICK START:
    # Launch dashboard
    python -m presence_dashboard dashboard

    # Print a text report for today
    python -m presence_dashboard report --period day
"""

from presence_dashboard.__version__ import (
    __author__,
    __copyright__,
    __description__,
    __license__,
    __title__,
    __url__,
    __version__,
    __version_date__,
)

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__url__",
    "__author__",
    "__license__",
    "__copyright__",
]
