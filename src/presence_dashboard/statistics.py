"""
Statistics engine for Presence Dashboard.

PURPOSE: Calculate summary statistics and hourly/day-segment aggregates.
AI CONTEXT: Pure data processing - no visualization, no I/O.

METRIC CATEGORIES:
1. Summary: total, average, peak, current
2. Hourly: 24 per-hour totals (hour of day, all days folded together)
3. Day Segments: Matin / Après-midi / Soir / Nuit, summed from hourly

PARTITION GUARANTEE:
Day segments are computed from the hourly buckets only, and the four
segment ranges cover hours 0-23 exactly once, so
    sum(segments) == sum(hourly) == stats.total
holds for every input.

USAGE:
    engine = StatisticsEngine()
    stats = engine.compute_stats(samples)
    hourly = engine.compute_hourly_buckets(samples)
    segments = engine.compute_day_segments(hourly)
"""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from .config import Config
from .models import DaySegments, HourlyBuckets, SampleSet, Stats
from .periods import period_label

HOURS_PER_DAY = 24


def _round_half_up(numerator: int, denominator: int, places: str = "0.1") -> float:
    """
    Divide and round half-up, the way a dashboard user expects.

    Args:
        numerator: Dividend.
        denominator: Divisor, must be non-zero.
        places: Quantization step as a decimal string.

    Returns:
        Rounded quotient as float. 35 / 3 -> 11.7, 1 / 4 -> 0.3.
    """
    value = Decimal(numerator) / Decimal(denominator)
    return float(value.quantize(Decimal(places), rounding=ROUND_HALF_UP))


class StatisticsEngine:
    """
    Calculator for presence statistics.

    DESIGN:
    - Stateless: Each method operates on provided data
    - Pure: No side effects, inputs are never modified
    - Total: Empty input yields zero values, never an error
    """

    def compute_stats(self, samples: SampleSet) -> Stats:
        """
        Compute total, average, peak and current presence.

        Business context: These four numbers fill the stat cards at the
        top of the dashboard ("Présence Actuelle", "Moyenne",
        "Pic Maximum", "Total Enregistré").

        Args:
            samples: Filtered SampleSet in feed order.

        Returns:
            Stats with total (sum), average (one decimal, half-up),
            peak (max) and current (count of the last sample). All zero
            when samples is empty.

        Example:
            >>> engine = StatisticsEngine()
            >>> engine.compute_stats(samples)  # counts 10, 20, 5
            Stats(total=35, average=11.7, peak=20, current=5)
        """
        if not samples:
            return Stats()

        counts = [s.count for s in samples]
        total = sum(counts)
        return Stats(
            total=total,
            average=_round_half_up(total, len(counts)),
            peak=max(counts),
            current=counts[-1],
        )

    def compute_hourly_buckets(self, samples: SampleSet) -> HourlyBuckets:
        """
        Sum counts per hour of day.

        Args:
            samples: Filtered SampleSet.

        Returns:
            Tuple of exactly 24 ints; index h is the total count of
            samples whose hour is h. Hours without samples are 0.

        Example:
            >>> buckets = StatisticsEngine().compute_hourly_buckets(samples)
            >>> buckets[8]
            30
        """
        buckets = [0] * HOURS_PER_DAY
        for sample in samples:
            buckets[sample.hour] += sample.count
        return tuple(buckets)

    def compute_day_segments(self, buckets: HourlyBuckets) -> DaySegments:
        """
        Fold hourly buckets into the four day segments.

        Business context: Feeds the "Répartition par Période" pie chart.

        Args:
            buckets: The 24 hourly totals from compute_hourly_buckets().

        Returns:
            Ordered dict Matin, Après-midi, Soir, Nuit -> total.

        Raises:
            ValueError: If buckets does not hold exactly 24 entries.

        Example:
            >>> StatisticsEngine().compute_day_segments(buckets)
            {'Matin': 30, 'Après-midi': 0, 'Soir': 5, 'Nuit': 0}
        """
        if len(buckets) != HOURS_PER_DAY:
            raise ValueError(f"expected {HOURS_PER_DAY} hourly buckets, got {len(buckets)}")

        return {
            name: sum(buckets[start:end])
            for name, _label, start, end in Config.DAY_SEGMENTS
        }

    def generate_summary_report(
        self,
        samples: SampleSet,
        period: str,
        now: datetime,
    ) -> str:
        """
        Generate a plain-text summary of a filtered SampleSet.

        The report is designed for terminal display and mirrors what the
        dashboard cards and charts show.

        Args:
            samples: Already-filtered SampleSet.
            period: Period the samples were filtered with (for the header).
            now: Reference time used for filtering (for the header).

        Returns:
            Multi-line report with the four stats, non-zero hourly totals
            and the day segments with their share of the total.

        Example:
            >>> print(engine.generate_summary_report(samples, "day", now))
            ==================================================
            PRESENCE DASHBOARD - REPORT
            ...
        """
        stats = self.compute_stats(samples)
        buckets = self.compute_hourly_buckets(samples)
        segments = self.compute_day_segments(buckets)

        lines = [
            "=" * 50,
            "PRESENCE DASHBOARD - REPORT",
            "=" * 50,
            "",
            f"Période : {period_label(period)} ({now.strftime(Config.DATE_FORMAT)} "
            f"{now.strftime(Config.TIME_FORMAT)})",
            f"Échantillons : {len(samples)}",
            "",
            "STATISTIQUES",
            f"  • Présence actuelle : {stats.current}",
            f"  • Moyenne : {stats.average:.1f}",
            f"  • Pic maximum : {stats.peak}",
            f"  • Total enregistré : {stats.total}",
            "",
            "PAR HEURE",
        ]

        hourly_lines = [f"  {hour:>2}h : {value}" for hour, value in enumerate(buckets) if value]
        lines.extend(hourly_lines or ["  (aucune donnée)"])

        lines.extend(["", "RÉPARTITION"])
        for name, value in segments.items():
            share = _round_half_up(value * 100, stats.total) if stats.total else 0.0
            lines.append(f"  • {name} : {value} ({share:.1f}%)")

        lines.extend(["", "=" * 50])
        return "\n".join(lines)
