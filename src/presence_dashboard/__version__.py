"""Version information for presence-dashboard."""

__version__ = "1.0.0"
__version_date__ = "2026-10-16"

__title__ = "presence_dashboard"
__description__ = "Web dashboard for a remote CSV feed of presence counts"
__url__ = "https://github.com/presence-dashboard/presence-dashboard"

__author__ = "Presence Dashboard contributors"

__license__ = "MIT"
__copyright__ = "Copyright 2026 Presence Dashboard contributors"

__all__ = [
    "__version__",
    "__version_date__",
    "__title__",
    "__description__",
    "__url__",
    "__author__",
    "__license__",
    "__copyright__",
]
