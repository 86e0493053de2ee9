"""
FastAPI application for Presence Dashboard.

PURPOSE: Main application factory and server runner.
AI CONTEXT: Creates app with all routes registered and one shared service.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from ..__version__ import __version__
from ..service import DashboardService
from .routes import router

__all__ = ["create_app", "run_dashboard"]

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """
    Manage application lifecycle with startup/shutdown hooks.

    Business context: Startup logging confirms which feed the dashboard
    reads; shutdown releases the service's HTTP connection pool.

    Args:
        app: The FastAPI application instance (provided by FastAPI).

    Yields:
        None. Control returns to FastAPI to handle requests.
    """
    service: DashboardService = app.state.dashboard_service
    logger.info("Presence dashboard starting (v%s), feed %s", __version__, service.feed.url)
    yield
    logger.info("Presence dashboard shutting down")
    await service.aclose()


def create_app(service: DashboardService | None = None) -> FastAPI:
    """
    Create and configure the FastAPI dashboard application.

    Args:
        service: DashboardService to serve. Defaults to a new one reading
            Config.upstream_url(). Tests inject one built on an
            httpx.MockTransport.

    Returns:
        Configured FastAPI application instance with:
        - All dashboard routes registered (/, /partials/*, /charts/*, /api/*)
        - The service stored on app.state.dashboard_service
        - Static files mounted at /static if the static directory exists

    Example:
        >>> from fastapi.testclient import TestClient
        >>> client = TestClient(create_app())
        >>> client.get('/api/get').json()['success']
        True
    """
    app = FastAPI(
        title="Presence Dashboard",
        description="Real-time occupancy dashboard over a remote CSV feed",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.dashboard_service = service or DashboardService()

    app.include_router(router)

    # Serves the companion app download
    static_dir = Path(__file__).parent / "static"
    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    return app


def run_dashboard(
    host: str = "127.0.0.1",
    port: int = 8000,
    reload: bool = False,
    log_level: str = "info",
) -> None:
    """
    Launch the Presence Dashboard web server.

    Args:
        host: Network interface to bind. '127.0.0.1' for local-only
            access (default) or '0.0.0.0' for network access.
        port: TCP port for the HTTP server. Default 8000.
        reload: Enable auto-reload on code changes for development.
        log_level: Uvicorn logging verbosity ('critical', 'error',
            'warning', 'info', 'debug' or 'trace').

    Returns:
        None. Blocks until the server is stopped (Ctrl+C).

    Raises:
        OSError: If the port is already in use or host is invalid.
    """
    uvicorn.run(
        "presence_dashboard.web.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )
