"""
Upstream feed access for Presence Dashboard.

PURPOSE: Fetch the raw CSV text and wrap it in the proxy envelope.
AI CONTEXT: The only module that talks to the network.

ENVELOPE (GET /api/get):
    success: {"success": true,  "data": "<raw csv text>"}   HTTP 200
    failure: {"success": false, "error": "<message>"}       HTTP 500

ERROR TAXONOMY:
- FeedError: base class for feed problems
- FetchError: network failure or non-2xx upstream status

No retry and no backoff: a failed fetch is terminal for that cycle.

USAGE:
    client = FeedClient()
    result = await client.fetch()
    if result.success:
        samples = parse_samples(result.data)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .config import Config

__all__ = ["FeedError", "FetchError", "FetchResult", "FeedClient"]

logger = logging.getLogger(__name__)


class FeedError(Exception):
    """Base class for upstream feed failures."""


class FetchError(FeedError):
    """The upstream request failed or returned a non-2xx status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class FetchResult:
    """
    Result of one upstream fetch.

    Attributes:
        success: Whether the raw text was retrieved.
        data: Raw CSV text when success is True.
        error: Error message when success is False.
    """

    success: bool
    data: str | None = None
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to the proxy envelope.

        A successful result always carries 'data' (possibly an empty
        string); a failed one always carries 'error'.

        Returns:
            Dict with 'success' and either 'data' or 'error'.

        Example:
            >>> FetchResult(success=True, data="").to_dict()
            {'success': True, 'data': ''}
        """
        if self.success:
            return {"success": True, "data": self.data or ""}
        return {"success": False, "error": self.error or "Erreur de chargement"}


class FeedClient:
    """
    Async HTTP client for the upstream CSV feed.

    Wraps one httpx.AsyncClient. The client can be injected for tests
    (e.g. with an httpx.MockTransport); otherwise one is created with
    the configured timeout and owned by this instance.
    """

    def __init__(
        self,
        url: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float | None = Config.FETCH_TIMEOUT_SECONDS,
    ) -> None:
        """
        Initialize the feed client.

        Args:
            url: Feed URL. Defaults to Config.upstream_url() at fetch time.
            client: Pre-built httpx.AsyncClient. Not closed by aclose()
                when injected.
            timeout: Request timeout in seconds, None for no timeout.
                Ignored when client is injected.
        """
        self._url = url
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def url(self) -> str:
        """URL the next fetch will hit."""
        return self._url or Config.upstream_url()

    async def fetch_text(self) -> str:
        """
        Download the raw feed text.

        Returns:
            Response body decoded as text.

        Raises:
            FetchError: On an invalid URL, transport failure or a non-2xx status.
        """
        url = self.url
        logger.debug("Fetching upstream feed %s", url)
        try:
            response = await self._client.get(url)
        except httpx.InvalidURL as exc:
            raise FetchError(
                f"Invalid feed URL {url!r} (check PRESENCE_UPSTREAM_URL): {exc}"
            ) from exc
        except httpx.HTTPError as exc:
            raise FetchError(str(exc) or exc.__class__.__name__) from exc

        if not response.is_success:
            raise FetchError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )
        return response.text

    async def fetch(self) -> FetchResult:
        """
        Download the feed and wrap the outcome in a FetchResult.

        Returns:
            FetchResult with data on success, error message on failure.
            Never raises for feed problems.
        """
        try:
            text = await self.fetch_text()
        except FeedError as exc:
            logger.error("Error fetching CSV: %s", exc)
            return FetchResult(success=False, error=str(exc))
        return FetchResult(success=True, data=text)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()
