"""Axes: the mount point a chart is rendered into.

An Axes box stays empty and transparent until a widget sets its HTML and
reveals it; revealing fades the box in.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .utils import esc


@dataclass
class Axes:
    """One chart box on the figure."""

    figure: "Figure"  # string annotation; Figure lives in figure.py
    index: int
    _inner_html: str = field(default="", repr=False)
    _extra_css: str = field(default="", repr=False)
    revealed: bool = False

    @property
    def box_id(self) -> str:
        return f"chart-box-{self.index}"

    @property
    def is_empty(self) -> bool:
        return not self._inner_html

    def set_html(self, html: str) -> None:
        """Set raw HTML content to be rendered inside this axes box."""
        self._inner_html = html

    def set_extra_css(self, css: str) -> None:
        """Set CSS to be merged into the figure's main <style>."""
        self._extra_css = css

    def reveal(self) -> None:
        """Fade the box to full opacity."""
        self.revealed = True

    def _render_box(self) -> str:
        """Return a single box for this axes, including inner HTML if any."""
        inner = self._inner_html or ""
        css_class = "tilemap-axes-box tilemap-axes-box--revealed" if self.revealed else "tilemap-axes-box"
        return (
            f'<div class="{css_class}" id="{esc(self.box_id)}" data-axes-index="{self.index}">{inner}</div>'
        )
