"""
FastAPI routes for Presence Dashboard.

PURPOSE: Thin route handlers that delegate to the service and presenters.
AI CONTEXT: Routes should be simple - business logic in pipeline/presenters.

ROUTE STRUCTURE:
- / : Main dashboard page (full HTML)
- /partials/* : htmx partial updates
- /charts/* : PNG chart images
- /api/* : JSON endpoints, including the /api/get upstream proxy

QUERY PARAMETERS:
- period: day | week | month | year (default Config.DEFAULT_PERIOD)
- theme: light | dark (charts and page palette only)
"""

from __future__ import annotations

import time
from html import escape
from typing import TYPE_CHECKING, Annotated
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response

from ..config import Config
from ..periods import PERIODS
from ..presenters import ChartPresenter
from ..service import STATUS_ERROR, DashboardService

if TYPE_CHECKING:
    from ..models import Stats

__all__ = [
    "router",
    "get_dashboard_service",
]

router = APIRouter()

# =============================================================================
# CSS Styles
# =============================================================================

_DASHBOARD_CSS = """
:root {
    --bg: #ffffff;
    --surface: #ffffff;
    --border: #e5e7eb;
    --text: #1f2937;
    --text-muted: #6b7280;
    --chip: #f3f4f6;
    --primary: #3b82f6;
    --danger: #ef4444;
}
body.dark {
    --bg: #111827;
    --surface: #1f2937;
    --border: #374151;
    --text: #f3f4f6;
    --text-muted: #9ca3af;
    --chip: #374151;
}
* { box-sizing: border-box; margin: 0; padding: 0; }
body {
    font-family: system-ui, -apple-system, sans-serif;
    background: var(--bg);
    color: var(--text);
    line-height: 1.6;
    padding: 2rem;
}
.container { max-width: 1280px; margin: 0 auto; }
header {
    display: flex;
    flex-wrap: wrap;
    justify-content: space-between;
    align-items: center;
    gap: 1rem;
    margin-bottom: 3rem;
}
h1 { font-size: 2.25rem; }
h2 { font-size: 1.25rem; margin-bottom: 1rem; }
.subtitle { color: var(--text-muted); font-size: 1.125rem; }
.controls { display: flex; align-items: center; gap: 1rem; }
select, .button {
    background: var(--chip);
    color: var(--text);
    border: none;
    border-radius: 0.5rem;
    padding: 0.5rem 0.75rem;
    font-size: 1rem;
    text-decoration: none;
    cursor: pointer;
}
.stats {
    display: grid;
    grid-template-columns: repeat(auto-fit, minmax(220px, 1fr));
    gap: 1.5rem;
    margin-bottom: 2rem;
}
.card, .panel {
    background: var(--surface);
    border: 1px solid var(--border);
    border-radius: 0.75rem;
    padding: 1.5rem;
}
.card-title { color: var(--text-muted); font-size: 0.875rem; font-weight: 500; }
.card-value { font-size: 1.875rem; font-weight: 700; }
.grid {
    display: grid;
    grid-template-columns: repeat(auto-fit, minmax(480px, 1fr));
    gap: 2rem;
}
.wide { grid-column: 1 / -1; }
.chart-container img { width: 100%; height: auto; }
.error-banner {
    border: 1px solid var(--danger);
    color: var(--danger);
    border-radius: 0.5rem;
    padding: 0.75rem 1rem;
    margin-bottom: 2rem;
}
.download {
    display: flex;
    flex-wrap: wrap;
    justify-content: space-between;
    align-items: center;
    gap: 1rem;
    margin-top: 2rem;
}
.download .button { background: var(--primary); color: #ffffff; }
.loading {
    min-height: 80vh;
    display: flex;
    align-items: center;
    justify-content: center;
    color: var(--text-muted);
    font-size: 1.5rem;
}
"""

_STAT_CARDS: tuple[tuple[str, str], ...] = (
    ("Présence Actuelle", "current"),
    ("Moyenne", "average"),
    ("Pic Maximum", "peak"),
    ("Total Enregistré", "total"),
)

_CHART_PANELS: tuple[tuple[str, str, str], ...] = (
    ("recent", "Évolution en Temps Réel", ""),
    ("hourly", "Moyenne par Heure", ""),
    ("popular", "Heures les Plus Populaires", ""),
    ("segments", "Répartition par Période", ""),
    ("history", "Historique Complet", "wide"),
)

# =============================================================================
# Dependency Factory Functions
# =============================================================================


def get_dashboard_service(request: Request) -> DashboardService:
    """
    Return the application's DashboardService.

    The service holds the current SampleSet in memory, so one instance
    lives on app.state for the lifetime of the application (see
    create_app) rather than being created per request.

    Args:
        request: Incoming request, used to reach app.state.

    Returns:
        The shared DashboardService.
    """
    service: DashboardService = request.app.state.dashboard_service
    return service


ServiceDep = Annotated[DashboardService, Depends(get_dashboard_service)]


# ============================================================================
# Full Page Routes
# ============================================================================


@router.get("/", response_class=HTMLResponse)
async def dashboard_page(
    service: ServiceDep,
    period: str = Config.DEFAULT_PERIOD,
    theme: str = "light",
) -> HTMLResponse:
    """
    Render the main dashboard page.

    Triggers the first fetch when nothing has been fetched yet. While
    the first fetch is still in flight the loading page is returned; it
    reloads itself every two seconds.

    Args:
        service: DashboardService injected via FastAPI Depends.
        period: Selected period.
        theme: "dark" for the dark palette, anything else for light.

    Returns:
        HTMLResponse with the full dashboard, or the loading page.

    Example:
        >>> # GET http://localhost:8000/?period=week&theme=dark
    """
    await service.ensure_loaded()
    dark = theme == "dark"

    if service.is_loading:
        html = _render_loading_html(dark)
    else:
        html = _render_dashboard_html(service, period, dark)
    return HTMLResponse(content=html, media_type="text/html; charset=utf-8")


# ============================================================================
# Partial Routes (htmx)
# ============================================================================


@router.get("/partials/stats", response_class=HTMLResponse)
async def stats_partial(
    service: ServiceDep,
    period: str = Config.DEFAULT_PERIOD,
) -> HTMLResponse:
    """
    Render the four stat cards as an htmx fragment.

    Polled every REFRESH_INTERVAL_SECONDS; re-fetches the feed when the
    last attempt is older than that.

    Returns:
        HTMLResponse containing the stat cards.
    """
    await service.refresh_if_stale()
    view = service.view(period)
    html = _render_stat_cards(view.stats)
    return HTMLResponse(content=html, media_type="text/html; charset=utf-8")


@router.get("/partials/charts", response_class=HTMLResponse)
async def charts_partial(
    service: ServiceDep,
    period: str = Config.DEFAULT_PERIOD,
    theme: str = "light",
) -> HTMLResponse:
    """
    Render the chart grid as an htmx fragment.

    Image URLs carry a cache-busting timestamp so browsers fetch fresh
    PNGs on every poll.

    Returns:
        HTMLResponse containing the chart panels.
    """
    await service.refresh_if_stale()
    html = _render_chart_grid(period, theme == "dark", cache_bust=int(time.time()))
    return HTMLResponse(content=html, media_type="text/html; charset=utf-8")


# ============================================================================
# Chart Routes (PNG images)
# ============================================================================


def _chart_presenter(service: DashboardService, period: str) -> ChartPresenter:
    return ChartPresenter(service.view(period))


@router.get("/charts/recent.png")
async def recent_chart(
    service: ServiceDep,
    period: str = Config.DEFAULT_PERIOD,
    theme: str = "light",
) -> Response:
    """Serve the recent activity area chart as PNG."""
    png_bytes = _chart_presenter(service, period).render_recent_chart(dark=theme == "dark")
    return Response(content=png_bytes, media_type="image/png")


@router.get("/charts/hourly.png")
async def hourly_chart(
    service: ServiceDep,
    period: str = Config.DEFAULT_PERIOD,
    theme: str = "light",
) -> Response:
    """Serve the per-hour bar chart as PNG."""
    png_bytes = _chart_presenter(service, period).render_hourly_chart(dark=theme == "dark")
    return Response(content=png_bytes, media_type="image/png")


@router.get("/charts/popular.png")
async def popular_chart(
    service: ServiceDep,
    period: str = Config.DEFAULT_PERIOD,
    theme: str = "light",
) -> Response:
    """Serve the popular hours horizontal bar chart as PNG."""
    png_bytes = _chart_presenter(service, period).render_popular_hours_chart(dark=theme == "dark")
    return Response(content=png_bytes, media_type="image/png")


@router.get("/charts/segments.png")
async def segments_chart(
    service: ServiceDep,
    period: str = Config.DEFAULT_PERIOD,
    theme: str = "light",
) -> Response:
    """Serve the day segment pie chart as PNG."""
    png_bytes = _chart_presenter(service, period).render_segments_chart(dark=theme == "dark")
    return Response(content=png_bytes, media_type="image/png")


@router.get("/charts/history.png")
async def history_chart(
    service: ServiceDep,
    period: str = Config.DEFAULT_PERIOD,
    theme: str = "light",
    start: int | None = None,
    end: int | None = None,
) -> Response:
    """
    Serve the full history line chart as PNG.

    Args:
        start: First sample index to draw (zoom), inclusive.
        end: Sample index to stop at (zoom), exclusive.
    """
    png_bytes = _chart_presenter(service, period).render_history_chart(
        dark=theme == "dark",
        start=start,
        end=end,
    )
    return Response(content=png_bytes, media_type="image/png")


# ============================================================================
# API Routes (JSON)
# ============================================================================


@router.get("/api/get")
async def api_get(service: ServiceDep) -> JSONResponse:
    """
    Proxy the upstream CSV feed.

    Returns:
        {"success": true, "data": "<csv>"} with HTTP 200, or
        {"success": false, "error": "<message>"} with HTTP 500.

    Example:
        >>> # GET /api/get
        >>> {"success": True, "data": "2024-01-15T08:00:00,10\\n..."}
    """
    result = await service.feed.fetch()
    return JSONResponse(content=result.to_dict(), status_code=200 if result.success else 500)


@router.get("/api/dashboard")
async def api_dashboard(
    service: ServiceDep,
    period: str = Config.DEFAULT_PERIOD,
) -> dict[str, object]:
    """
    Get the derived dashboard view as JSON.

    Returns:
        DerivedView.to_dict() plus 'status' and 'error' of the service.
    """
    await service.ensure_loaded()
    view = service.view(period)
    return {
        "status": service.status,
        "error": service.error,
        **view.to_dict(),
    }


@router.post("/api/refresh")
async def api_refresh(service: ServiceDep) -> dict[str, object]:
    """
    Run a fetch cycle now.

    Returns:
        Dict with 'refreshed' (False when coalesced into an in-flight
        fetch), 'status', 'samples' (current sample count) and 'error'.
    """
    refreshed = await service.refresh()
    return {
        "refreshed": refreshed,
        "status": service.status,
        "samples": len(service.samples),
        "error": service.error,
    }


# ============================================================================
# Template Rendering Helpers
# ============================================================================


def _query(**params: object) -> str:
    return urlencode({k: v for k, v in params.items() if v is not None})


def _render_loading_html(dark: bool) -> str:
    """
    Render the page shown until the first fetch completes.

    Returns:
        Complete HTML document that reloads itself every two seconds.
    """
    body_class = "dark" if dark else ""
    return f"""<!DOCTYPE html>
<html lang="fr">
<head>
    <meta charset="UTF-8">
    <meta http-equiv="refresh" content="2">
    <title>Dashboard de Présence</title>
    <style>
        {_DASHBOARD_CSS}
    </style>
</head>
<body class="{body_class}">
    <div class="loading">Chargement des données...</div>
</body>
</html>"""


def _render_dashboard_html(service: DashboardService, period: str, dark: bool) -> str:
    """
    Render the complete dashboard HTML page.

    Args:
        service: Service holding the current samples and status.
        period: Selected period.
        dark: Dark palette flag.

    Returns:
        Complete HTML string with header controls, stat cards, chart
        grid, download panel and htmx polling triggers.
    """
    view = service.view(period)
    theme = "dark" if dark else "light"
    other_theme = "light" if dark else "dark"
    interval = Config.REFRESH_INTERVAL_SECONDS

    options = "".join(
        f'<option value="{value}"{" selected" if value == period else ""}>{escape(label)}</option>'
        for value, label in PERIODS.items()
    )

    error_html = ""
    if service.status == STATUS_ERROR and service.error:
        error_html = (
            f'<div class="error-banner">Erreur de chargement : {escape(service.error)}</div>'
        )

    body_class = "dark" if dark else ""
    toggle_icon = "☀" if dark else "☾"
    return f"""<!DOCTYPE html>
<html lang="fr">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Dashboard de Présence</title>
    <script src="https://unpkg.com/htmx.org@1.9.10"></script>
    <style>
        {_DASHBOARD_CSS}
    </style>
</head>
<body class="{body_class}">
    <div class="container">
        <header>
            <div>
                <h1>Dashboard de Présence</h1>
                <p class="subtitle">Analyse en temps réel</p>
            </div>
            <div class="controls">
                <form method="get" action="/">
                    <input type="hidden" name="theme" value="{theme}">
                    <select name="period" onchange="this.form.submit()">{options}</select>
                </form>
                <button class="button" hx-post="/api/refresh" hx-swap="none">Actualiser</button>
                <a class="button" href="/?{_query(period=period, theme=other_theme)}"
                   title="Changer de thème">{toggle_icon}</a>
            </div>
        </header>

        {error_html}

        <div class="stats" id="stats-panel"
             hx-get="/partials/stats?{_query(period=period)}"
             hx-trigger="every {interval}s"
             hx-swap="innerHTML">
            {_render_stat_cards(view.stats)}
        </div>

        <div id="charts-panel"
             hx-get="/partials/charts?{_query(period=period, theme=theme)}"
             hx-trigger="every {interval}s"
             hx-swap="innerHTML">
            {_render_chart_grid(period, dark)}
        </div>

        {_render_download_panel()}
    </div>
</body>
</html>"""


def _render_stat_cards(stats: Stats) -> str:
    """
    Render the four stat cards.

    Args:
        stats: Stats of the filtered set.

    Returns:
        HTML string with one card per statistic.
    """
    cards = ""
    for title, attr in _STAT_CARDS:
        value = getattr(stats, attr)
        display = f"{value:.1f}" if isinstance(value, float) else str(value)
        cards += f"""<div class="card">
            <p class="card-title">{title}</p>
            <p class="card-value">{display}</p>
        </div>"""
    return cards


def _render_chart_grid(period: str, dark: bool, cache_bust: int | None = None) -> str:
    """
    Render the chart panels as img tags pointing at the PNG routes.

    Args:
        period: Selected period, forwarded to every chart URL.
        dark: Dark palette flag, forwarded as theme.
        cache_bust: Optional timestamp appended as 't'.

    Returns:
        HTML string with the grid of chart panels.
    """
    query = _query(period=period, theme="dark" if dark else "light", t=cache_bust)
    panels = ""
    for name, title, css_class in _CHART_PANELS:
        panels += f"""<div class="panel {css_class}">
            <h2>{title}</h2>
            <div class="chart-container">
                <img src="/charts/{name}.png?{query}" alt="{title}">
            </div>
        </div>"""
    return f'<div class="grid">{panels}</div>'


def _render_download_panel() -> str:
    """Render the companion mobile application download panel."""
    return f"""<div class="panel download">
            <div>
                <h2>Application Mobile</h2>
                <p class="subtitle">Accédez à vos statistiques de présence en temps réel,
                où que vous soyez.</p>
            </div>
            <a class="button" href="{Config.APP_DOWNLOAD_PATH}"
               download="{Config.APP_DOWNLOAD_NAME}">Télécharger</a>
        </div>"""
