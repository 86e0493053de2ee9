"""
Web dashboard module for Presence Dashboard.

PURPOSE: FastAPI-based web UI with htmx for dynamic updates.
AI CONTEXT: Hosts the upstream proxy (/api/get) and the dashboard pages.

FEATURES:
- Period selector (Aujourd'hui, Cette semaine, Ce mois, Cette année)
- Server-side chart rendering (matplotlib)
- htmx polling every Config.REFRESH_INTERVAL_SECONDS
- Light and dark palettes

USAGE:
    # Via CLI
    presence-dashboard dashboard

    # Programmatically
    from presence_dashboard.web import create_app
    app = create_app()
"""

from .app import create_app, run_dashboard

__all__ = ["create_app", "run_dashboard"]
