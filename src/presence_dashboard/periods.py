"""
Period filter for Presence Dashboard.

PURPOSE: Select the samples relevant to a user-chosen time window.
AI CONTEXT: Pure data processing - no I/O, no rendering.

PERIODS:
- day:   same calendar day as now (year, month, day compared as fields)
- week:  rolling window, timestamp >= now - 7 days
- month: same month and year as now
- year:  same year as now
Any other value returns the full set unchanged.

USAGE:
    today = filter_by_period(samples, "day", Config.now())
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta

from .models import Sample, SampleSet

__all__ = ["PERIODS", "WEEK_WINDOW", "filter_by_period", "period_label", "is_known_period"]

logger = logging.getLogger(__name__)

PERIODS: dict[str, str] = {
    "day": "Aujourd'hui",
    "week": "Cette semaine",
    "month": "Ce mois",
    "year": "Cette année",
}
"""Period value -> selector label, in selector order."""

WEEK_WINDOW = timedelta(days=7)


def is_known_period(period: str) -> bool:
    """Check whether period is one of the four selector values."""
    return period in PERIODS


def period_label(period: str) -> str:
    """
    Get the selector label for a period.

    Args:
        period: Period value such as "day".

    Returns:
        French label, or the raw value for unknown periods.

    Example:
        >>> period_label("month")
        'Ce mois'
    """
    return PERIODS.get(period, period)


def _predicate(period: str, now: datetime) -> Callable[[Sample], bool] | None:
    """
    Build the keep-predicate for a period.

    Args:
        period: Period value.
        now: Reference time, naive display-zone wall-clock.

    Returns:
        Predicate over Sample, or None for an unknown period.
    """
    if period == "day":
        today = now.date()
        return lambda s: s.timestamp.date() == today
    if period == "week":
        start = now - WEEK_WINDOW
        return lambda s: s.timestamp >= start
    if period == "month":
        return lambda s: s.month == now.month and s.year == now.year
    if period == "year":
        return lambda s: s.year == now.year
    return None


def filter_by_period(samples: SampleSet, period: str, now: datetime) -> SampleSet:
    """
    Keep the samples that fall in the selected period.

    Day matching compares calendar fields rather than formatted date
    strings, so it does not depend on locale formatting. The week period
    is a rolling seven-day window ending at now, not a calendar week.

    Business context: The period selector drives every card and chart on
    the dashboard. Filtering is re-run in full on each selection change.

    Args:
        samples: Full SampleSet from the latest fetch. Not modified.
        period: One of "day", "week", "month", "year". Anything else
            returns the full set.
        now: Reference time, naive wall-clock in the display timezone.

    Returns:
        New tuple with the matching samples in their original order.

    Example:
        >>> now = datetime(2024, 1, 15, 12, 0)
        >>> len(filter_by_period(samples, "day", now))
        3
    """
    keep = _predicate(period, now)
    if keep is None:
        logger.warning("Unknown period %r, returning unfiltered samples", period)
        return tuple(samples)
    return tuple(s for s in samples if keep(s))
