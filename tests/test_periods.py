"""Tests for periods module."""

from __future__ import annotations

from datetime import datetime, timedelta

from presence_dashboard.models import Sample
from presence_dashboard.periods import (
    PERIODS,
    filter_by_period,
    is_known_period,
    period_label,
)

NOW = datetime(2024, 1, 15, 12, 0)


def _sample(*args: int, count: int = 1) -> Sample:
    return Sample(timestamp=datetime(*args), count=count)


SAMPLES = (
    _sample(2023, 12, 31, 23, 0),  # previous year
    _sample(2024, 1, 3, 10, 0),  # same month, outside week
    _sample(2024, 1, 9, 11, 0),  # six days earlier
    _sample(2024, 1, 14, 22, 0),  # yesterday
    _sample(2024, 1, 15, 0, 5),  # today
    _sample(2024, 1, 15, 23, 0),  # today, after now
    _sample(2024, 6, 1, 8, 0),  # later this year
)


class TestPeriodLabels:
    """Tests for the selector labels."""

    def test_known_labels(self) -> None:
        assert period_label("day") == "Aujourd'hui"
        assert period_label("week") == "Cette semaine"
        assert period_label("month") == "Ce mois"
        assert period_label("year") == "Cette année"

    def test_unknown_label_passthrough(self) -> None:
        assert period_label("decade") == "decade"

    def test_selector_order(self) -> None:
        assert list(PERIODS) == ["day", "week", "month", "year"]

    def test_is_known_period(self) -> None:
        assert is_known_period("week")
        assert not is_known_period("Week")


class TestFilterByPeriod:
    """Tests for period filtering.

    Categories:
    1. Each period's inclusion rule (4 tests)
    2. Subset and ordering guarantees (2 tests)
    3. Unknown period fallback (1 test)
    """

    def test_day_same_calendar_date(self) -> None:
        """Verifies day keeps every sample with today's date.

        Business context:
        'Aujourd'hui' covers the whole calendar day, including samples
        later than now.
        """
        result = filter_by_period(SAMPLES, "day", NOW)
        assert result == (SAMPLES[4], SAMPLES[5])

    def test_week_is_rolling_seven_days(self) -> None:
        """Verifies week is now minus seven days, not a calendar week."""
        result = filter_by_period(SAMPLES, "week", NOW)
        assert SAMPLES[1] not in result
        assert SAMPLES[2] in result
        assert SAMPLES[3] in result

    def test_week_boundary_inclusive(self) -> None:
        boundary = _sample(2024, 1, 8, 12, 0)
        assert filter_by_period((boundary,), "week", NOW) == (boundary,)

    def test_month_and_year(self) -> None:
        month = filter_by_period(SAMPLES, "month", NOW)
        year = filter_by_period(SAMPLES, "year", NOW)
        assert SAMPLES[0] not in month
        assert SAMPLES[6] not in month
        assert SAMPLES[1] in month
        assert SAMPLES[0] not in year
        assert SAMPLES[6] in year

    def test_result_is_ordered_subset(self) -> None:
        for period in PERIODS:
            result = filter_by_period(SAMPLES, period, NOW)
            positions = [SAMPLES.index(s) for s in result]
            assert positions == sorted(positions)

    def test_input_not_modified(self) -> None:
        before = tuple(SAMPLES)
        filter_by_period(SAMPLES, "day", NOW)
        assert SAMPLES == before

    def test_unknown_period_returns_everything(self, caplog) -> None:
        """Verifies an unknown period returns the full set with a warning."""
        result = filter_by_period(SAMPLES, "decade", NOW)
        assert result == SAMPLES
        assert "Unknown period" in caplog.text

    def test_empty_input(self) -> None:
        assert filter_by_period((), "day", NOW) == ()


class TestPeriodNesting:
    def test_year_contains_month_contains_day(self) -> None:
        """Verifies wider calendar periods include narrower ones.

        Arrangement:
        Samples every 13 hours across two years around now.

        Assertion Strategy:
        set(year) >= set(month) >= set(day) and each is non-empty.
        """
        start = datetime(2023, 6, 1, 0, 0)
        samples = tuple(
            Sample(timestamp=start + timedelta(hours=13 * i), count=i) for i in range(2000)
        )
        day = set(filter_by_period(samples, "day", NOW))
        month = set(filter_by_period(samples, "month", NOW))
        year = set(filter_by_period(samples, "year", NOW))

        assert day
        assert year >= month >= day
        assert len(year) > len(month) > len(day)
