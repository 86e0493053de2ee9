"""
Dashboard Service - fetch cycle and current data for the web layer.

PURPOSE: Own the single current SampleSet and the loading/loaded/error state.
AI CONTEXT: Shared by web routes and the CLI report command.

ARCHITECTURE:
    Web routes ──┐
                 ├──► DashboardService ──► FeedClient ──► upstream CSV
    CLI report ──┘          │
                            └──► parse_samples / recompute

STATE MACHINE:
    idle ──refresh──► loading ──ok──► loaded
                         └──fail──► error
    loaded | error ──refresh──► loading

SINGLE-FLIGHT:
At most one upstream request is in flight. A refresh requested while one
is pending is coalesced into it: it returns immediately without starting
a second request.

USAGE:
    service = DashboardService()
    await service.refresh()
    view = service.view("week")
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime

from .config import Config
from .feed import FeedClient
from .models import SampleSet
from .parser import parse_samples
from .pipeline import DashboardState, DerivedView, recompute
from .statistics import StatisticsEngine

__all__ = [
    "DashboardService",
    "STATUS_IDLE",
    "STATUS_LOADING",
    "STATUS_LOADED",
    "STATUS_ERROR",
]

logger = logging.getLogger(__name__)

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_LOADED = "loaded"
STATUS_ERROR = "error"


class DashboardService:
    """
    Core dashboard service.

    Holds the SampleSet of the latest successful fetch and replaces it
    wholesale on the next one. A failed fetch keeps the previous samples
    and records the error; nothing is retried automatically.
    """

    def __init__(
        self,
        feed: FeedClient | None = None,
        engine: StatisticsEngine | None = None,
        clock: Callable[[], datetime] | None = None,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Initialize the service with its collaborators.

        Args:
            feed: FeedClient for the upstream CSV. Defaults to a new one
                using Config.upstream_url().
            engine: StatisticsEngine for aggregates. Defaults to a new one.
            clock: Returns "now" for period filtering. Defaults to
                Config.now.
            monotonic: Clock used for staleness checks. Injected in tests.
        """
        self.feed = feed or FeedClient()
        self.engine = engine or StatisticsEngine()
        self._clock = clock or Config.now
        self._monotonic = monotonic
        self._lock = asyncio.Lock()

        self.samples: SampleSet = ()
        self.status: str = STATUS_IDLE
        self.error: str | None = None
        self.last_attempt: float | None = None

    @property
    def is_loading(self) -> bool:
        """True while a fetch is in flight or before the first one."""
        return self.status in (STATUS_IDLE, STATUS_LOADING)

    async def refresh(self) -> bool:
        """
        Run one fetch cycle: fetch, parse, replace the current samples.

        Business context: This is the only recovery path after an error;
        the page's refresh button, POST /api/refresh and the stale-data
        poll all end up here.

        Returns:
            True if this call performed a fetch, False if it was coalesced
            into a fetch already in flight.
        """
        if self._lock.locked():
            logger.debug("Refresh requested while a fetch is in flight, coalescing")
            return False

        async with self._lock:
            self.status = STATUS_LOADING
            self.last_attempt = self._monotonic()
            try:
                result = await self.feed.fetch()
                samples = parse_samples(result.data or "") if result.success else ()
            except Exception as exc:
                logger.exception("Unexpected error during dashboard refresh")
                self.status = STATUS_ERROR
                self.error = str(exc) or exc.__class__.__name__
                return True

            if not result.success:
                self.status = STATUS_ERROR
                self.error = result.error
                logger.error("Dashboard refresh failed: %s", result.error)
                return True

            self.samples = samples
            self.status = STATUS_LOADED
            self.error = None
            logger.info("Loaded %d samples from %s", len(samples), self.feed.url)
            return True

    async def ensure_loaded(self) -> None:
        """Fetch once if nothing has been fetched yet."""
        if self.status == STATUS_IDLE:
            await self.refresh()

    def is_stale(self) -> bool:
        """
        Check whether the last fetch attempt is older than the poll period.

        Returns:
            True if no attempt was made yet or the last one is at least
            Config.REFRESH_INTERVAL_SECONDS old.
        """
        if self.last_attempt is None:
            return True
        return self._monotonic() - self.last_attempt >= Config.REFRESH_INTERVAL_SECONDS

    async def refresh_if_stale(self) -> bool:
        """
        Refresh when is_stale() says so.

        Returns:
            True if a fetch was performed.
        """
        if self.is_stale():
            return await self.refresh()
        return False

    def state(self, period: str = Config.DEFAULT_PERIOD) -> DashboardState:
        """
        Snapshot the current inputs for a period.

        Args:
            period: Selected period value.

        Returns:
            DashboardState with the current samples and clock time.
        """
        return DashboardState(samples=self.samples, period=period, now=self._clock())

    def view(self, period: str = Config.DEFAULT_PERIOD) -> DerivedView:
        """
        Derive the dashboard view for a period from the current samples.

        Args:
            period: Selected period value.

        Returns:
            DerivedView produced by pipeline.recompute().
        """
        return recompute(self.state(period), self.engine)

    async def aclose(self) -> None:
        """Release the feed's HTTP client."""
        await self.feed.aclose()
