"""Tests for statistics module."""

from __future__ import annotations

from datetime import datetime

import pytest

from presence_dashboard.models import Sample, Stats
from presence_dashboard.statistics import HOURS_PER_DAY, StatisticsEngine


@pytest.fixture
def engine() -> StatisticsEngine:
    """Create a StatisticsEngine instance."""
    return StatisticsEngine()


class TestComputeStats:
    """Tests for the four stat card values.

    Categories:
    1. Reference scenario (1 test)
    2. Rounding (2 tests)
    3. Empty and single-sample input (2 tests)
    """

    def test_scenario_stats(self, engine: StatisticsEngine, scenario_samples) -> None:
        """Verifies the reference payload's stats.

        Business context:
        Counts 10, 20, 5 must show total 35, average 11.7, peak 20 and
        current 5 on the dashboard cards.

        Assertion Strategy:
        Exact dataclass equality.
        """
        assert engine.compute_stats(scenario_samples) == Stats(
            total=35, average=11.7, peak=20, current=5
        )

    def test_average_rounds_half_up(self, engine: StatisticsEngine) -> None:
        """Verifies .x5 averages round away from zero.

        Arrangement:
        Counts 0 and 1 and 0 and 0 give 0.25 exactly.

        Assertion Strategy:
        Banker's rounding would give 0.2; half-up gives 0.3.
        """
        samples = tuple(
            Sample(timestamp=datetime(2024, 1, 15, h), count=c)
            for h, c in enumerate((0, 1, 0, 0))
        )
        assert engine.compute_stats(samples).average == 0.3

    def test_average_two_thirds(self, engine: StatisticsEngine) -> None:
        samples = tuple(
            Sample(timestamp=datetime(2024, 1, 15, h), count=c) for h, c in enumerate((1, 1, 0))
        )
        assert engine.compute_stats(samples).average == 0.7

    def test_empty_is_all_zero(self, engine: StatisticsEngine) -> None:
        assert engine.compute_stats(()) == Stats()

    def test_current_is_last_in_feed_order(self, engine: StatisticsEngine) -> None:
        """Verifies current is the last sample read, not the latest timestamp."""
        samples = (
            Sample(timestamp=datetime(2024, 1, 15, 9), count=4),
            Sample(timestamp=datetime(2024, 1, 15, 8), count=9),
        )
        assert engine.compute_stats(samples).current == 9


class TestHourlyBuckets:
    """Tests for per-hour totals."""

    def test_scenario_buckets(self, engine: StatisticsEngine, scenario_samples) -> None:
        buckets = engine.compute_hourly_buckets(scenario_samples)
        assert len(buckets) == HOURS_PER_DAY
        assert buckets[8] == 30
        assert buckets[23] == 5
        assert sum(buckets) == 35
        assert all(v == 0 for h, v in enumerate(buckets) if h not in (8, 23))

    def test_empty_is_24_zeros(self, engine: StatisticsEngine) -> None:
        assert engine.compute_hourly_buckets(()) == (0,) * 24

    def test_sum_equals_total(self, engine: StatisticsEngine) -> None:
        """Verifies bucket totals partition the stats total."""
        samples = tuple(
            Sample(timestamp=datetime(2024, 1, d, h), count=d + h)
            for d in range(1, 4)
            for h in range(0, 24, 5)
        )
        buckets = engine.compute_hourly_buckets(samples)
        assert sum(buckets) == engine.compute_stats(samples).total

    def test_adding_sample_never_decreases_bucket(self, engine: StatisticsEngine) -> None:
        """Verifies buckets are monotonic under additional samples."""
        base = (Sample(timestamp=datetime(2024, 1, 15, 8), count=3),)
        extra = base + (Sample(timestamp=datetime(2024, 1, 15, 8, 30), count=0),)
        more = extra + (Sample(timestamp=datetime(2024, 1, 15, 14), count=2),)
        before = engine.compute_hourly_buckets(base)
        after = engine.compute_hourly_buckets(more)
        assert all(a >= b for a, b in zip(after, before, strict=True))


class TestDaySegments:
    """Tests for the four-way day split."""

    def test_scenario_segments(self, engine: StatisticsEngine, scenario_samples) -> None:
        """Verifies the reference payload's segments.

        Business context:
        8h falls in Matin (6h-12h) and 23h in Soir (18h-24h).
        """
        segments = engine.compute_day_segments(engine.compute_hourly_buckets(scenario_samples))
        assert segments == {"Matin": 30, "Après-midi": 0, "Soir": 5, "Nuit": 0}
        assert list(segments) == ["Matin", "Après-midi", "Soir", "Nuit"]

    def test_segments_partition_buckets(self, engine: StatisticsEngine) -> None:
        buckets = tuple(range(24))
        segments = engine.compute_day_segments(buckets)
        assert sum(segments.values()) == sum(buckets)
        assert segments["Nuit"] == 0 + 1 + 2 + 3 + 4 + 5

    @pytest.mark.parametrize(
        ("hour", "segment"),
        [(5, "Nuit"), (6, "Matin"), (12, "Après-midi"), (18, "Soir")],
    )
    def test_boundaries(self, engine: StatisticsEngine, hour: int, segment: str) -> None:
        buckets = tuple(1 if h == hour else 0 for h in range(24))
        segments = engine.compute_day_segments(buckets)
        assert segments[segment] == 1

    def test_wrong_length_rejected(self, engine: StatisticsEngine) -> None:
        with pytest.raises(ValueError, match="expected 24 hourly buckets"):
            engine.compute_day_segments((0,) * 23)


class TestSummaryReport:
    """Tests for the CLI text report."""

    def test_report_sections(self, engine: StatisticsEngine, scenario_samples, scenario_now) -> None:
        """Verifies the report header, stats, hours and segments.

        Assertion Strategy:
        Checks for each section header and the key figures rather than
        the exact layout.
        """
        report = engine.generate_summary_report(scenario_samples, "day", scenario_now)
        assert "PRESENCE DASHBOARD - REPORT" in report
        assert "Aujourd'hui" in report
        assert "Échantillons : 3" in report
        assert "Moyenne : 11.7" in report
        assert " 8h : 30" in report
        assert "23h : 5" in report
        assert " 9h :" not in report
        assert "Matin : 30 (85.7%)" in report
        assert "Soir : 5 (14.3%)" in report

    def test_empty_report(self, engine: StatisticsEngine, scenario_now) -> None:
        report = engine.generate_summary_report((), "week", scenario_now)
        assert "(aucune donnée)" in report
        assert "Nuit : 0 (0.0%)" in report
