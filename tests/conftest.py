"""
Pytest configuration and shared fixtures for Presence Dashboard tests.

This module contains:
- SCENARIO_CSV: The three-sample feed used across suites
- make_feed: FeedClient backed by an httpx.MockTransport
- Shared fixtures available to all test modules
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import datetime

import httpx
import pytest

from presence_dashboard.config import Config
from presence_dashboard.feed import FeedClient
from presence_dashboard.parser import parse_samples
from presence_dashboard.service import DashboardService

FEED_URL = "http://feed.test/people_daily_remote.csv"

SCENARIO_CSV = "2024-01-15T08:00:00,10\n2024-01-15T08:30:00,20\n2024-01-15T23:00:00,5"

SCENARIO_NOW = datetime(2024, 1, 15, 12, 0, 0)


def make_feed(handler: Callable[[httpx.Request], httpx.Response]) -> FeedClient:
    """
    Build a FeedClient whose HTTP traffic goes to an in-process handler.

    Business context: Tests must never reach the real feed host. An
    httpx.MockTransport answers every request with the handler's
    response, including network errors raised by the handler.

    Args:
        handler: Callable receiving the httpx.Request and returning the
            httpx.Response to serve.

    Returns:
        FeedClient pointed at FEED_URL.

    Example:
        >>> feed = make_feed(lambda request: httpx.Response(200, text="x"))
    """
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return FeedClient(url=FEED_URL, client=client)


def csv_handler(text: str, status_code: int = 200) -> Callable[[httpx.Request], httpx.Response]:
    """Return a MockTransport handler serving fixed text with a status code."""

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, text=text)

    return handler


def make_service(
    text: str = SCENARIO_CSV,
    status_code: int = 200,
    now: datetime = SCENARIO_NOW,
) -> DashboardService:
    """
    Build a DashboardService over a mocked feed and a frozen clock.

    Args:
        text: Body served by the mocked feed.
        status_code: HTTP status served by the mocked feed.
        now: Value returned by the service clock.

    Returns:
        DashboardService in its initial (idle) state.
    """
    return DashboardService(feed=make_feed(csv_handler(text, status_code)), clock=lambda: now)


@pytest.fixture(autouse=True)
def reset_config() -> Iterator[None]:
    """Pin the display timezone to UTC and clear overrides after each test.

    Business context:
    Hour buckets and period filters depend on the display timezone.
    Pinning it keeps the suites independent of the machine's zone.

    Yields:
        None. Config overrides are reset on teardown.
    """
    Config.set_test_overrides(timezone="UTC")
    yield
    Config.reset_test_overrides()


@pytest.fixture
def scenario_samples():
    """Parsed SCENARIO_CSV: three samples on 2024-01-15."""
    return parse_samples(SCENARIO_CSV)


@pytest.fixture
def scenario_now() -> datetime:
    """Reference time for SCENARIO_CSV: 2024-01-15 12:00."""
    return SCENARIO_NOW
