"""
Presenters for Presence Dashboard.

PURPOSE: Reshape aggregates into chart-ready series and render them.
AI CONTEXT: Adapter functions are pure; ChartPresenter does the drawing.

DESIGN PRINCIPLES:
1. Adapter functions only rename and reorder - numeric values pass through
2. Inputs are never mutated; the same input always gives the same output
3. No dependency on matplotlib outside ChartPresenter
4. ChartPresenter renders one PNG per dashboard panel

USAGE:
    histogram = to_hourly_histogram(buckets)
    png = ChartPresenter(view).render_hourly_chart(dark=True)
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .config import Config
from .models import ChartPoint, DaySegments, HourlyBuckets, SampleSet

if TYPE_CHECKING:
    from .pipeline import DerivedView

__all__ = [
    "to_time_series",
    "to_hourly_histogram",
    "to_pie_slices",
    "ChartTheme",
    "LIGHT_THEME",
    "DARK_THEME",
    "ChartPresenter",
]


# ============================================================================
# Adapter functions
# ============================================================================


def to_time_series(samples: SampleSet, window_size: int | None = None) -> list[ChartPoint]:
    """
    Reshape samples into a (time label, count) series.

    Business context: Feeds the "Évolution en Temps Réel" area chart
    (last RECENT_WINDOW samples) and the "Historique Complet" line chart
    (all samples).

    Args:
        samples: Filtered SampleSet in feed order.
        window_size: Keep only the last N samples. None keeps all.

    Returns:
        List of ChartPoint(label=time_label, value=count) in feed order.

    Raises:
        ValueError: If window_size is negative.

    Example:
        >>> [p.value for p in to_time_series(samples, window_size=2)]
        [20, 5]
    """
    if window_size is not None:
        if window_size < 0:
            raise ValueError(f"window_size must be >= 0, got {window_size}")
        samples = samples[-window_size:] if window_size else ()
    return [ChartPoint(label=s.time_label, value=s.count) for s in samples]


def to_hourly_histogram(buckets: HourlyBuckets) -> list[ChartPoint]:
    """
    Label the 24 hourly totals for the bar charts.

    Args:
        buckets: 24 hourly totals.

    Returns:
        24 ChartPoints labelled "0h" .. "23h" in hour order.

    Example:
        >>> to_hourly_histogram(buckets)[8]
        ChartPoint(label='8h', value=30)
    """
    return [ChartPoint(label=f"{hour}h", value=value) for hour, value in enumerate(buckets)]


def to_pie_slices(segments: DaySegments) -> list[ChartPoint]:
    """
    Label the day segments for the pie chart.

    Order is fixed by Config.DAY_SEGMENTS (Matin, Après-midi, Soir, Nuit)
    regardless of the mapping's own order. Missing segments count as 0.

    Args:
        segments: Segment name -> total.

    Returns:
        Four ChartPoints with labels such as "Matin (6h-12h)".
    """
    return [
        ChartPoint(label=label, value=segments.get(name, 0))
        for name, label, _start, _end in Config.DAY_SEGMENTS
    ]


# ============================================================================
# Rendering
# ============================================================================


@dataclass(frozen=True)
class ChartTheme:
    """Colors for one dashboard theme."""

    background: str
    text: str
    grid: str


LIGHT_THEME = ChartTheme(background="#ffffff", text="#6b7280", grid="#e5e7eb")
DARK_THEME = ChartTheme(background="#1f2937", text="#9ca3af", grid="#4b5563")


class ChartPresenter:
    """
    Presenter for generating chart images.

    Uses matplotlib for server-side chart rendering.
    Returns PNG images as bytes for htmx refresh.
    """

    def __init__(self, view: DerivedView) -> None:
        """
        Initialize chart presenter with a derived view.

        Args:
            view: Output of pipeline.recompute() for the requested period.

        Example:
            >>> presenter = ChartPresenter(recompute(state))
            >>> png_bytes = presenter.render_segments_chart()
        """
        self.view = view

    # ------------------------------------------------------------------
    # Figure plumbing
    # ------------------------------------------------------------------

    def _new_figure(self, theme: ChartTheme, figsize: tuple[float, float]) -> tuple[Any, Any]:
        """
        Create a themed figure and axes on the Agg backend.

        Returns:
            Matplotlib figure and axes.
        """
        import matplotlib

        matplotlib.use("Agg")  # Non-interactive backend
        import matplotlib.pyplot as plt

        fig, ax = plt.subplots(figsize=figsize)
        fig.patch.set_facecolor(theme.background)
        ax.set_facecolor(theme.background)
        ax.tick_params(colors=theme.text)
        for side in ("bottom", "left"):
            ax.spines[side].set_color(theme.text)
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        return fig, ax

    def _to_png(self, fig: Any) -> bytes:
        """Serialize a figure to PNG bytes and release it."""
        import matplotlib.pyplot as plt

        buf = io.BytesIO()
        fig.tight_layout()
        fig.savefig(buf, format="png", dpi=100, bbox_inches="tight", facecolor=fig.get_facecolor())
        plt.close(fig)
        buf.seek(0)
        return buf.read()

    def _empty(self, theme: ChartTheme, title: str, figsize: tuple[float, float]) -> bytes:
        """Render a placeholder when the filtered set is empty."""
        fig, ax = self._new_figure(theme, figsize)
        ax.text(0.5, 0.5, "Aucune donnée", ha="center", va="center", fontsize=14, color=theme.text)
        ax.set_xlim(0, 1)
        ax.set_ylim(0, 1)
        ax.axis("off")
        ax.set_title(title, color=theme.text)
        return self._to_png(fig)

    @staticmethod
    def _theme(dark: bool) -> ChartTheme:
        return DARK_THEME if dark else LIGHT_THEME

    @staticmethod
    def _tick_step(count: int) -> int:
        """Label every n-th point so that at most ~20 labels are drawn."""
        return max(1, count // 20 + 1) if count > 20 else 1

    # ------------------------------------------------------------------
    # Charts
    # ------------------------------------------------------------------

    def render_recent_chart(self, dark: bool = False) -> bytes:
        """
        Render the recent activity series as a filled area chart PNG.

        Business context: "Évolution en Temps Réel" shows the last
        RECENT_WINDOW samples so the current trend is visible at a glance.

        Args:
            dark: Use the dark theme palette.

        Returns:
            PNG image as bytes (600x300 at 100 DPI).
        """
        theme = self._theme(dark)
        title = "Évolution en Temps Réel"
        points = self.view.recent_series
        if not points:
            return self._empty(theme, title, (6, 3))

        color = Config.CHART_COLORS[0]
        fig, ax = self._new_figure(theme, (6, 3))
        xs = list(range(len(points)))
        values = [p.value for p in points]
        ax.fill_between(xs, values, color=color, alpha=0.3)
        ax.plot(xs, values, color=color, linewidth=2)
        ax.grid(True, linestyle="--", color=theme.grid)
        ax.set_xticks(xs)
        ax.set_xticklabels([p.label for p in points], rotation=45, ha="right")
        ax.set_title(title, color=theme.text)
        return self._to_png(fig)

    def render_hourly_chart(self, dark: bool = False) -> bytes:
        """
        Render hourly totals as a vertical bar chart PNG.

        Args:
            dark: Use the dark theme palette.

        Returns:
            PNG image as bytes, 24 bars labelled 0h..23h.
        """
        theme = self._theme(dark)
        points = self.view.histogram

        fig, ax = self._new_figure(theme, (6, 3))
        ax.bar([p.label for p in points], [p.value for p in points], color=Config.CHART_COLORS[1])
        ax.grid(True, axis="y", linestyle="--", color=theme.grid)
        ax.tick_params(axis="x", labelrotation=90)
        ax.set_title("Moyenne par Heure", color=theme.text)
        return self._to_png(fig)

    def render_popular_hours_chart(self, dark: bool = False) -> bytes:
        """
        Render hourly totals as a horizontal bar chart PNG.

        Business context: "Heures les Plus Populaires" is the heatmap-as-bar
        view of the same 24 buckets, hours stacked top to bottom.

        Args:
            dark: Use the dark theme palette.

        Returns:
            PNG image as bytes.
        """
        theme = self._theme(dark)
        points = self.view.histogram

        fig, ax = self._new_figure(theme, (6, 5))
        ax.barh([p.label for p in points], [p.value for p in points], color=Config.CHART_COLORS[2])
        ax.invert_yaxis()
        ax.grid(True, axis="x", linestyle="--", color=theme.grid)
        ax.set_title("Heures les Plus Populaires", color=theme.text)
        return self._to_png(fig)

    def render_segments_chart(self, dark: bool = False) -> bytes:
        """
        Render the day segments as a pie chart PNG with percentage labels.

        Args:
            dark: Use the dark theme palette.

        Returns:
            PNG image as bytes. Placeholder when every segment is zero,
            since a pie of zeros cannot be drawn.
        """
        theme = self._theme(dark)
        title = "Répartition par Période"
        slices = self.view.pie
        if not any(p.value for p in slices):
            return self._empty(theme, title, (6, 4))

        fig, ax = self._new_figure(theme, (6, 4))
        total = sum(p.value for p in slices)
        labels = [f"{p.label}: {p.value / total * 100:.0f}%" for p in slices]
        colors = [Config.CHART_COLORS[i % len(Config.CHART_COLORS)] for i in range(len(slices))]
        ax.pie(
            [p.value for p in slices],
            labels=labels,
            colors=colors,
            textprops={"color": theme.text},
        )
        ax.axis("equal")
        ax.set_title(title, color=theme.text)
        return self._to_png(fig)

    def render_history_chart(
        self,
        dark: bool = False,
        start: int | None = None,
        end: int | None = None,
    ) -> bytes:
        """
        Render the full filtered history as a line chart PNG.

        Business context: "Historique Complet" replaces the interactive
        brush of a client-side chart with a server-side index range, so
        users can zoom into part of the period.

        Args:
            dark: Use the dark theme palette.
            start: First point index to draw (inclusive). None = 0.
            end: Point index to stop at (exclusive). None = all.

        Returns:
            PNG image as bytes (800x350 at 100 DPI).
        """
        theme = self._theme(dark)
        title = "Historique Complet"
        points = self.view.full_series[start:end]
        if not points:
            return self._empty(theme, title, (8, 3.5))

        fig, ax = self._new_figure(theme, (8, 3.5))
        xs = list(range(len(points)))
        ax.plot(xs, [p.value for p in points], color=Config.CHART_COLORS[3], linewidth=2)
        ax.grid(True, linestyle="--", color=theme.grid)

        step = self._tick_step(len(points))
        ticks = xs[::step]
        ax.set_xticks(ticks)
        ax.set_xticklabels([points[i].label for i in ticks], rotation=45, ha="right")
        ax.set_title(title, color=theme.text)
        return self._to_png(fig)
