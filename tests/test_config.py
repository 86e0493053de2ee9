"""Tests for config module."""

from __future__ import annotations

import os
from datetime import datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from presence_dashboard.config import Config


class TestConfigConstants:
    """Tests for static configuration values."""

    def test_default_upstream_url(self) -> None:
        """Verifies the built-in feed location.

        Business context:
        The people counter publishes its daily dump at this address;
        the proxy and the dashboard read it when nothing is configured.
        """
        assert Config.DEFAULT_UPSTREAM_URL == "http://4.211.255.87/people_daily_remote.csv"

    def test_dashboard_defaults(self) -> None:
        assert Config.DEFAULT_PERIOD == "day"
        assert Config.RECENT_WINDOW == 20
        assert Config.REFRESH_INTERVAL_SECONDS == 60
        assert Config.FETCH_TIMEOUT_SECONDS is None

    def test_day_segments_cover_every_hour_once(self) -> None:
        """Verifies the four segments partition 0..23."""
        hours = [h for _n, _l, start, end in Config.DAY_SEGMENTS for h in range(start, end)]
        assert sorted(hours) == list(range(24))

    def test_segment_names_order(self) -> None:
        assert Config.segment_names() == ("Matin", "Après-midi", "Soir", "Nuit")

    def test_download_link(self) -> None:
        assert Config.APP_DOWNLOAD_PATH == "/static/app-release.apk"
        assert Config.APP_DOWNLOAD_NAME == "Projet Cloud.apk"


class TestEnvironmentConfig:
    """Tests for environment-based configuration.

    Each test clears the autouse UTC override first so the environment
    is what is being read.
    """

    @pytest.fixture(autouse=True)
    def clear_overrides(self) -> None:
        Config.reset_test_overrides()

    def test_upstream_url_from_env(self) -> None:
        with patch.dict(os.environ, {"PRESENCE_UPSTREAM_URL": "http://feed.test/x.csv"}):
            assert Config.upstream_url() == "http://feed.test/x.csv"

    def test_upstream_url_default_when_unset(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert Config.upstream_url() == Config.DEFAULT_UPSTREAM_URL

    def test_override_wins_over_env(self) -> None:
        Config.set_test_overrides(upstream_url="http://override.test/")
        with patch.dict(os.environ, {"PRESENCE_UPSTREAM_URL": "http://feed.test/x.csv"}):
            assert Config.upstream_url() == "http://override.test/"

    def test_timezone_from_env(self) -> None:
        with patch.dict(os.environ, {"PRESENCE_TIMEZONE": "Europe/Paris"}):
            assert Config.display_timezone() == ZoneInfo("Europe/Paris")

    def test_timezone_unset_means_local(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            assert Config.display_timezone() is None

    def test_now_is_naive(self) -> None:
        Config.set_test_overrides(timezone="Asia/Tokyo")
        now = Config.now()
        assert isinstance(now, datetime)
        assert now.tzinfo is None

    def test_reset_clears_overrides(self) -> None:
        Config.set_test_overrides(upstream_url="http://override.test/", timezone="UTC")
        Config.reset_test_overrides()
        with patch.dict(os.environ, {}, clear=True):
            assert Config.upstream_url() == Config.DEFAULT_UPSTREAM_URL
            assert Config.display_timezone() is None
