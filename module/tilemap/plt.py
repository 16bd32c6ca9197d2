"""Public API: figure factory and conveniences."""

from __future__ import annotations

from typing import Optional

from tilemap.core.axes import Axes
from tilemap.core.config import Settings
from tilemap.core.figure import Figure
from tilemap.plots.tilemap import ChartParams, TileMapArtist


def figure(page_title: str = "tilemap") -> Figure:
    """Return a new, empty Figure."""
    return Figure(page_title=page_title)


def tilemap(params: ChartParams, fig: Optional[Figure] = None, settings: Optional[Settings] = None) -> Axes:
    """Render *params* straight into a new box, without visibility gating.

    Returns the Axes; its figure is *fig*, or a new one titled after the
    chart.
    """
    fig = fig or figure(page_title=params.title)
    ax = fig.add_subplot()
    html, css = TileMapArtist(params.build_spec(settings)).render_html()
    ax.set_html(html)
    ax.set_extra_css(css)
    ax.reveal()
    return ax


# Expose so callers can do: from tilemap.plt import plt; plt.figure()
plt = type("plt", (), {"figure": staticmethod(figure), "tilemap": staticmethod(tilemap)})()
