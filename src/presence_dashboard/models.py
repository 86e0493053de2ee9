"""
Data models for Presence Dashboard.

PURPOSE: Type-safe dataclasses representing core domain entities.
AI CONTEXT: These models define the records flowing through the pipeline.

MODEL HIERARCHY:
- Sample: One (timestamp, count) observation from the upstream feed
- SampleSet: Ordered tuple of Samples for one fetch cycle
- Stats: Summary statistics over a SampleSet
- ChartPoint: One labelled value handed to a chart

SERIALIZATION:
All models have to_dict() for JSON output. Timestamps are ISO 8601
naive wall-clock times in the display timezone (see Config).

USAGE:
    sample = Sample(datetime(2024, 1, 15, 8, 0), 10)
    sample.hour        # 8
    sample.date_label  # '15/01/2024'
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .config import Config

__all__ = [
    "Sample",
    "SampleSet",
    "HourlyBuckets",
    "DaySegments",
    "Stats",
    "ChartPoint",
]


@dataclass(frozen=True)
class Sample:
    """
    One ingested presence observation.

    Only timestamp and count are stored. Hour, day, month, year and the
    two locale labels are derived on access so they can never drift from
    the timestamp.

    INVARIANT: count >= 0
    """

    timestamp: datetime
    count: int

    def __post_init__(self) -> None:
        """
        Validate the non-negative count invariant.

        Raises:
            ValueError: If count is negative.
        """
        if self.count < 0:
            raise ValueError(f"count must be >= 0, got {self.count}")

    @property
    def hour(self) -> int:
        """Hour of day, 0-23."""
        return self.timestamp.hour

    @property
    def day(self) -> int:
        """Day of month, 1-31."""
        return self.timestamp.day

    @property
    def month(self) -> int:
        """Calendar month, 1-12."""
        return self.timestamp.month

    @property
    def year(self) -> int:
        """Calendar year."""
        return self.timestamp.year

    @property
    def time_label(self) -> str:
        """
        Format the time of day for chart axes.

        Returns:
            String like "08:30" (fr-FR hour/minute format).
        """
        return self.timestamp.strftime(Config.TIME_FORMAT)

    @property
    def date_label(self) -> str:
        """
        Format the calendar date for display.

        Returns:
            String like "15/01/2024" (fr-FR date format).
        """
        return self.timestamp.strftime(Config.DATE_FORMAT)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-serializable dictionary.

        Includes the derived fields so API consumers do not have to
        recompute them.

        Returns:
            Dict with timestamp (ISO 8601), count, hour, day, month, year,
            time_label and date_label.

        Example:
            >>> Sample(datetime(2024, 1, 15, 8, 0), 10).to_dict()["time_label"]
            '08:00'
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "count": self.count,
            "hour": self.hour,
            "day": self.day,
            "month": self.month,
            "year": self.year,
            "time_label": self.time_label,
            "date_label": self.date_label,
        }


SampleSet = tuple[Sample, ...]
"""Ordered samples in feed arrival order. Never re-sorted."""

HourlyBuckets = tuple[int, ...]
"""Exactly 24 totals, index = hour of day."""

DaySegments = dict[str, int]
"""Ordered segment name -> total, in Config.DAY_SEGMENTS order."""


@dataclass(frozen=True)
class Stats:
    """
    Summary statistics over a SampleSet.

    All fields are zero for an empty set.
    """

    total: int = 0
    average: float = 0.0
    peak: int = 0
    current: int = 0

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "total": self.total,
            "average": self.average,
            "peak": self.peak,
            "current": self.current,
        }


@dataclass(frozen=True)
class ChartPoint:
    """One labelled value in a chart series."""

    label: str
    value: int | float

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {"label": self.label, "value": self.value}
