"""
Configuration for Presence Dashboard.

PURPOSE: Centralized configuration constants and runtime settings.
AI CONTEXT: All configurable values live here - modify this file to change behavior.

CONFIGURATION CATEGORIES:
- Upstream Feed: CSV source URL and HTTP timeout
- Periods: Default filter and refresh cadence
- Locale: Date/time label formats (fr-FR style)
- Day Segments: The four pie-chart slices of the day
- Presentation: Chart palette and mobile app download link

ENVIRONMENT VARIABLES:
- PRESENCE_UPSTREAM_URL: CSV feed URL (default: DEFAULT_UPSTREAM_URL)
- PRESENCE_TIMEZONE: IANA zone used to derive hours/days (default: system local)

USAGE:
    from presence_dashboard.config import Config
    url = Config.upstream_url()
    now = Config.now()
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class Config:
    """
    Immutable configuration container for Presence Dashboard.

    DESIGN: Frozen dataclass ensures configuration immutability at runtime.
    All values are class-level constants - no instance creation needed.

    TIME HANDLING:
    Every Sample timestamp and every "now" is a naive wall-clock datetime in
    the display timezone. Aware timestamps from the feed are converted to
    that zone at parse time so that hour/day derivation and period
    filtering compare like with like.
    """

    # =========================================================================
    # UPSTREAM FEED
    # =========================================================================
    DEFAULT_UPSTREAM_URL: ClassVar[str] = "http://4.211.255.87/people_daily_remote.csv"

    FETCH_TIMEOUT_SECONDS: ClassVar[float | None] = None
    """HTTP timeout for the upstream fetch. None waits indefinitely."""

    # =========================================================================
    # PERIODS AND REFRESH
    # =========================================================================
    DEFAULT_PERIOD: ClassVar[str] = "day"

    RECENT_WINDOW: ClassVar[int] = 20
    """Number of trailing samples shown in the recent activity chart."""

    REFRESH_INTERVAL_SECONDS: ClassVar[int] = 60
    """Age after which dashboard partials trigger a new fetch."""

    # =========================================================================
    # LOCALE
    # =========================================================================
    DATE_FORMAT: ClassVar[str] = "%d/%m/%Y"
    TIME_FORMAT: ClassVar[str] = "%H:%M"

    # =========================================================================
    # DAY SEGMENTS (name, label, start hour inclusive, end hour exclusive)
    # =========================================================================
    DAY_SEGMENTS: ClassVar[tuple[tuple[str, str, int, int], ...]] = (
        ("Matin", "Matin (6h-12h)", 6, 12),
        ("Après-midi", "Après-midi (12h-18h)", 12, 18),
        ("Soir", "Soir (18h-24h)", 18, 24),
        ("Nuit", "Nuit (0h-6h)", 0, 6),
    )

    # =========================================================================
    # PRESENTATION
    # =========================================================================
    CHART_COLORS: ClassVar[tuple[str, ...]] = (
        "#3b82f6",
        "#10b981",
        "#f59e0b",
        "#ef4444",
        "#8b5cf6",
    )

    APP_DOWNLOAD_PATH: ClassVar[str] = "/static/app-release.apk"
    APP_DOWNLOAD_NAME: ClassVar[str] = "Projet Cloud.apk"

    # =========================================================================
    # ENVIRONMENT-BASED SETTINGS (runtime configurable)
    # =========================================================================
    _upstream_url_override: ClassVar[str | None] = None
    _timezone_override: ClassVar[str | None] = None

    @classmethod
    def upstream_url(cls) -> str:
        """
        Get the URL of the upstream CSV feed.

        Priority: test override, then PRESENCE_UPSTREAM_URL, then the
        built-in default.

        Returns:
            Absolute URL of the CSV feed.

        Example:
            >>> Config.upstream_url()
            'http://4.211.255.87/people_daily_remote.csv'
        """
        if cls._upstream_url_override is not None:
            return cls._upstream_url_override
        return os.environ.get("PRESENCE_UPSTREAM_URL") or cls.DEFAULT_UPSTREAM_URL

    @classmethod
    def display_timezone(cls) -> ZoneInfo | None:
        """
        Get the timezone used to derive hours, days and labels.

        Priority: test override, then PRESENCE_TIMEZONE. An unset value
        means the system local timezone and is returned as None, which is
        what datetime.astimezone() expects for "local".

        Returns:
            ZoneInfo for the configured zone, or None for system local.

        Raises:
            zoneinfo.ZoneInfoNotFoundError: If the configured name is unknown.

        Example:
            >>> Config.set_test_overrides(timezone="Europe/Paris")
            >>> Config.display_timezone()
            zoneinfo.ZoneInfo(key='Europe/Paris')
        """
        name = cls._timezone_override
        if name is None:
            name = os.environ.get("PRESENCE_TIMEZONE") or None
        if name is None:
            return None
        return ZoneInfo(name)

    @classmethod
    def now(cls) -> datetime:
        """
        Get the current wall-clock time in the display timezone.

        Returns:
            Naive datetime, comparable with Sample.timestamp.
        """
        tz = cls.display_timezone()
        if tz is None:
            return datetime.now()
        return datetime.now(tz).replace(tzinfo=None)

    @classmethod
    def set_test_overrides(
        cls,
        upstream_url: str | None = None,
        timezone: str | None = None,
    ) -> None:
        """
        Set test overrides for environment-based settings.

        Must call reset_test_overrides() in test teardown to avoid
        affecting other tests.

        Args:
            upstream_url: Override for the feed URL. None to clear.
            timezone: Override for the display timezone name. None to clear.
        """
        cls._upstream_url_override = upstream_url
        cls._timezone_override = timezone

    @classmethod
    def reset_test_overrides(cls) -> None:
        """Clear overrides set via set_test_overrides()."""
        cls._upstream_url_override = None
        cls._timezone_override = None

    @classmethod
    def segment_names(cls) -> tuple[str, ...]:
        """
        Get the day segment names in display order.

        Example:
            >>> Config.segment_names()
            ('Matin', 'Après-midi', 'Soir', 'Nuit')
        """
        return tuple(name for name, _label, _start, _end in cls.DAY_SEGMENTS)
