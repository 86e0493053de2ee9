"""
Dashboard pipeline: explicit state in, derived view out.

PURPOSE: Run parse output through filter, aggregate and presentation.
AI CONTEXT: recompute() is a pure function; the web layer calls it per request.

FLOW:
    DashboardState(samples, period, now)
        -> filter_by_period
        -> StatisticsEngine (stats, hourly, segments)
        -> presentation adapters (series, histogram, pie)
        -> DerivedView

There is no incremental update: every period change or new fetch
produces a new state, and recompute() is run on it from scratch.

USAGE:
    state = DashboardState(samples=samples, period="week", now=Config.now())
    view = recompute(state)
    view.stats.total
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from .config import Config
from .models import ChartPoint, DaySegments, HourlyBuckets, SampleSet, Stats
from .periods import filter_by_period, period_label
from .presenters import to_hourly_histogram, to_pie_slices, to_time_series
from .statistics import StatisticsEngine

__all__ = ["DashboardState", "DerivedView", "recompute"]


@dataclass(frozen=True)
class DashboardState:
    """
    Every input the dashboard view depends on.

    samples is the full SampleSet of the latest successful fetch; period
    is the selector value; now is the reference time for filtering.
    """

    samples: SampleSet = ()
    period: str = Config.DEFAULT_PERIOD
    now: datetime = field(default_factory=Config.now)

    def with_period(self, period: str) -> DashboardState:
        """Return a copy with another period selected."""
        return replace(self, period=period)

    def with_samples(self, samples: SampleSet) -> DashboardState:
        """Return a copy holding a new fetch's samples."""
        return replace(self, samples=samples)


@dataclass(frozen=True)
class DerivedView:
    """Everything the dashboard renders for one state."""

    period: str
    period_label: str
    filtered: SampleSet
    stats: Stats
    hourly: HourlyBuckets
    segments: DaySegments
    recent_series: list[ChartPoint]
    full_series: list[ChartPoint]
    histogram: list[ChartPoint]
    pie: list[ChartPoint]

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-serializable dictionary.

        Returns:
            Dict with period, period_label, sample_count, stats, hourly,
            segments and the four chart series.
        """
        return {
            "period": self.period,
            "period_label": self.period_label,
            "sample_count": len(self.filtered),
            "stats": self.stats.to_dict(),
            "hourly": list(self.hourly),
            "segments": dict(self.segments),
            "recent_series": [p.to_dict() for p in self.recent_series],
            "full_series": [p.to_dict() for p in self.full_series],
            "histogram": [p.to_dict() for p in self.histogram],
            "pie": [p.to_dict() for p in self.pie],
        }


def recompute(
    state: DashboardState,
    engine: StatisticsEngine | None = None,
    recent_window: int = Config.RECENT_WINDOW,
) -> DerivedView:
    """
    Derive the full dashboard view from a state.

    Business context: Replaces implicit re-render-triggers-recompute with
    one explicit call. The host calls it whenever the period changes or a
    fetch lands.

    Args:
        state: Samples, selected period and reference time.
        engine: StatisticsEngine to use. Defaults to a new instance.
        recent_window: Samples kept in recent_series.

    Returns:
        DerivedView for the state's period.

    Example:
        >>> view = recompute(DashboardState(samples, "day", datetime(2024, 1, 15, 12)))
        >>> view.stats
        Stats(total=35, average=11.7, peak=20, current=5)
    """
    engine = engine or StatisticsEngine()

    filtered = filter_by_period(state.samples, state.period, state.now)
    stats = engine.compute_stats(filtered)
    hourly = engine.compute_hourly_buckets(filtered)
    segments = engine.compute_day_segments(hourly)

    return DerivedView(
        period=state.period,
        period_label=period_label(state.period),
        filtered=filtered,
        stats=stats,
        hourly=hourly,
        segments=segments,
        recent_series=to_time_series(filtered, recent_window),
        full_series=to_time_series(filtered),
        histogram=to_hourly_histogram(hourly),
        pie=to_pie_slices(segments),
    )
