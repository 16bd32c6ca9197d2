"""Figure: top-level container; writes self-contained HTML.

The Figure owns a list of Axes (chart boxes). ``write_html()`` emits one
HTML document with the shared tile map stylesheet, each box's chart-scoped
CSS, and the boxes themselves. No JavaScript.
"""

from __future__ import annotations

from pathlib import Path
from typing import List

from loguru import logger

from .axes import Axes
from .theme import THEME
from .utils import esc


class Figure:
    """Page holding one or more chart boxes."""

    def __init__(self, page_title: str = "tilemap") -> None:
        self.page_title = page_title
        self._axes: List[Axes] = []

    # Public API -----------------------------------------------------
    def add_subplot(self) -> Axes:
        """Create a new Axes and attach it to this figure."""
        index = len(self._axes) + 1
        ax = Axes(figure=self, index=index)
        self._axes.append(ax)
        return ax

    @property
    def axes(self) -> List[Axes]:
        """Return a shallow copy of the axes list."""
        return list(self._axes)

    def write_html(self, path: str | Path) -> Path:
        """Write one self-contained HTML file and return its path."""
        out = Path(path)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(self.to_html(), encoding="utf-8")
        logger.info("Wrote figure with {} chart box(es) to {}", len(self._axes), out)
        return out

    def to_html(self) -> str:
        axes_boxes = [ax._render_box() for ax in self._axes]  # type: ignore[attr-defined]
        if axes_boxes:
            axes_block = "\n".join("  " + box for box in axes_boxes)
        else:
            axes_block = "  <!-- no axes -->"

        extra_css_parts = [getattr(ax, "_extra_css", "") for ax in self._axes]
        extra_css_block = "\n".join(p for p in extra_css_parts if p).strip()
        if extra_css_block:
            extra_css_block = "\n\n" + extra_css_block

        bg = THEME["background"]
        surface = THEME["surface"]
        fg = THEME["foreground"]
        heading = THEME["heading"]
        border = THEME["border"]
        muted = THEME["muted"]
        accent = THEME["accent"]
        font = THEME["font_family"]

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{esc(self.page_title)}</title>
<style>
*, *::before, *::after {{
  box-sizing: border-box;
}}

body {{
  margin: 0;
  padding: clamp(0.5rem, 2vw, 1.5rem);
  font-family: {font};
  font-weight: 400;
  background: {bg};
  color: {fg};
  line-height: 1.4;
  -webkit-font-smoothing: antialiased;
}}

.tilemap-app {{
  max-width: min(1000px, 100%);
  margin: 0 auto;
}}

/* Boxes render lazily and fade in once a chart is constructed. */
.tilemap-axes-box {{
  width: 100%;
  min-height: 20vh;
  opacity: 0;
  content-visibility: auto;
  contain-intrinsic-size: auto 800px;
}}

.tilemap-axes-box--revealed {{
  animation: tilemap-fade-in 500ms ease-out both;
}}

@keyframes tilemap-fade-in {{
  from {{ opacity: 0; }}
  to {{ opacity: 1; }}
}}

@keyframes tilemap-tile-in {{
  from {{ opacity: 0; transform: scale(0.6); }}
  to {{ opacity: 1; transform: scale(1); }}
}}

.tilemap-chart {{
  position: relative;
  background: {surface};
}}

.tilemap-input {{
  position: absolute;
  opacity: 0;
  pointer-events: none;
}}

.tilemap-header {{
  display: flex;
  align-items: flex-start;
  gap: 1rem;
}}

.tilemap-logo {{
  flex-shrink: 0;
  height: auto;
}}

.tilemap-headings {{
  flex: 1 1 auto;
  min-width: 0;
}}

.tilemap-title {{
  margin: 0;
  color: {heading};
  font-weight: 700;
}}

.tilemap-subtitle {{
  margin: 0.25rem 0 0 0;
  font-size: 16px;
  line-height: 18px;
}}

.tilemap-export {{
  position: relative;
  flex-shrink: 0;
}}

.tilemap-export-button {{
  list-style: none;
  cursor: pointer;
  font-size: 20px;
  padding: 0 0.4rem;
  color: #000;
}}

.tilemap-export-button::-webkit-details-marker {{
  display: none;
}}

.tilemap-export-menu {{
  position: absolute;
  right: 0;
  z-index: 10;
  min-width: 12rem;
  margin: 0;
  padding: 0.25rem 0;
  list-style: none;
  background: {surface};
  border: 1px solid {border};
}}

.tilemap-export-item {{
  display: block;
  padding: 0.3rem 0.8rem;
  color: {fg};
  font-size: 13px;
  text-decoration: none;
  cursor: pointer;
}}

.tilemap-export-item:hover {{
  background: {accent};
  color: #fff;
}}

.tilemap-export-separator {{
  margin: 0.25rem 0;
  border-top: 1px solid {muted};
  opacity: 0.3;
}}

.tilemap-plot {{
  position: relative;
  width: 100%;
}}

.tilemap-grid {{
  display: grid;
  width: 100%;
  height: 100%;
  gap: 2px;
}}

.tilemap-tile {{
  position: relative;
  display: flex;
  align-items: center;
  justify-content: center;
  align-self: center;
  justify-self: center;
  width: 100%;
  max-height: 100%;
  aspect-ratio: 1;
  border: 1px solid {border};
  color: {fg};
  cursor: pointer;
}}

.tilemap-tile--circle {{
  border-radius: 50%;
}}

.tilemap-tile--diamond {{
  transform: rotate(45deg) scale(0.7);
}}

.tilemap-tile-label {{
  pointer-events: none;
}}

.tilemap-tooltip {{
  position: absolute;
  bottom: 100%;
  left: 50%;
  transform: translateX(-50%);
  z-index: 20;
  width: max-content;
  max-width: 240px;
  padding: 0.4rem 0.6rem;
  background: #fff;
  border: 1px solid {border};
  border-radius: 0;
  color: {fg};
  opacity: 0;
  pointer-events: none;
  transition: opacity 80ms ease-out;
}}

.tilemap-tile:hover .tilemap-tooltip,
.tilemap-tile:focus .tilemap-tooltip {{
  opacity: 1;
}}

.tooltip_header {{
  margin: 0 0 0.2rem 0;
  font-size: 15px;
}}

.tooltip_value {{
  font-weight: 700;
}}

.tilemap-legend {{
  position: absolute;
  left: 0;
  bottom: 90px;
  z-index: 5;
  color: {heading};
  font-size: 14px;
  cursor: default;
}}

.tilemap-legend-title {{
  font-weight: 600;
  margin-bottom: 0.3rem;
}}

.tilemap-legend-items {{
  display: flex;
  gap: 0.25rem 0.75rem;
  margin: 0;
  padding: 0;
  list-style: none;
}}

.tilemap-legend-item {{
  display: flex;
  align-items: center;
  gap: 0.4rem;
}}

.tilemap-legend-swatch {{
  display: inline-block;
  width: 12px;
  height: 12px;
  border-radius: 50%;
  border: 1px solid {border};
}}

.tilemap-data-table {{
  display: none;
  margin-top: 1rem;
  overflow-x: auto;
}}

.tilemap-data-table table {{
  border-collapse: collapse;
  font-size: 14px;
}}

.tilemap-data-table th,
.tilemap-data-table td {{
  padding: 0.2rem 0.6rem;
  border-bottom: 1px solid {border};
  text-align: left;
}}

.tilemap-caption {{
  margin: 15px 0 0 0;
  font-size: 14px;
}}

.tilemap-empty {{
  grid-column: 1 / -1;
  align-self: center;
  justify-self: center;
  color: {muted};
}}{extra_css_block}
</style>
</head>
<body>
<div class="tilemap-app">
{axes_block}
</div>
</body>
</html>
"""
