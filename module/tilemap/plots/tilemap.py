"""Tile map: declarative chart spec plus an HTML/CSS artist.

``build_chart_spec()`` turns a DataSet and the presentation parameters into
a ChartSpec: every tile with its colour class and tooltip text, the legend,
the caption, the export menu and the responsive rules. ``ChartSpec`` can
also be dumped as Highcharts-style options with ``to_options()``.

``TileMapArtist`` renders a ChartSpec as a CSS grid of tiles with CSS hover
tooltips, a discrete legend and a ``<details>`` export menu. No JavaScript:
downloads are ``data:`` links and the data table is a checkbox toggle.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple
from urllib.parse import quote

import pandas as pd

from tilemap.core.config import Settings
from tilemap.core.utils import esc
from tilemap.data.normalize import DataPoint
from tilemap.plots.classes import COLOR_CLASSES, ColorClass, classify, format_tooltip_value, is_unknown
from tilemap.security.sanitize import sanitize

CONTAINER_PREFIX = "chartIdx"
TILE_SVG_SIZE = 48

# Export menu entries, in menu order. "separator" draws a rule.
EXPORT_MENU_ITEMS: Tuple[str, ...] = ("downloadSVG", "separator", "viewData", "separator", "downloadCSV")
EXPORT_MENU_TEXT = {
    "downloadSVG": "Download SVG image",
    "viewData": "View data table",
    "downloadCSV": "Download CSV data",
}


# -----------------------------
# Parameters
# -----------------------------
@dataclass(frozen=True)
class Presentation:
    """Static texts of one chart. ``idx`` names its container."""

    idx: str
    source: str
    title: str
    note: str = ""
    subtitle: Optional[str] = None

    def __post_init__(self) -> None:
        for name in ("idx", "source", "title"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValueError(f"'{name}' is required and must be a non-empty string")

    @property
    def container_id(self) -> str:
        return f"{CONTAINER_PREFIX}{self.idx}"


@dataclass(frozen=True)
class ChartParams:
    """Everything the hosting page supplies to instantiate one chart."""

    idx: str
    data: Sequence[DataPoint]
    source: str
    title: str
    note: str = ""
    subtitle: Optional[str] = None

    def __post_init__(self) -> None:
        self.presentation()

    def presentation(self) -> Presentation:
        return Presentation(
            idx=self.idx, source=self.source, title=self.title, note=self.note, subtitle=self.subtitle
        )

    def build_spec(self, settings: Optional[Settings] = None) -> "ChartSpec":
        return build_chart_spec(self.data, self.presentation(), settings)


# -----------------------------
# Spec
# -----------------------------
@dataclass(frozen=True)
class TilePoint:
    x: Optional[int]
    y: Optional[int]
    value: float  # chart boundary: number or the -999 sentinel
    name: str
    label: str
    color: str
    class_label: str
    tooltip: str
    fields: Mapping[str, str] = field(default_factory=dict)

    @property
    def placed(self) -> bool:
        return self.x is not None and self.y is not None

    def to_option(self) -> Dict[str, object]:
        option: Dict[str, object] = dict(self.fields)
        option.update({"x": self.x, "y": self.y, "value": self.value})
        return option


@dataclass(frozen=True)
class ResponsiveRule:
    """Presentation overrides below ``max_width`` (None = default rule)."""

    max_width: Optional[int]
    height: str
    label_font_size: str
    legend_layout: Optional[str] = None
    title_font_size: Optional[str] = None
    title_line_height: Optional[str] = None

    def to_option(self) -> Dict[str, object]:
        height: object = self.height
        if self.height.endswith("px"):
            height = int(self.height[:-2])
        options: Dict[str, object] = {
            "chart": {"height": height},
            "plotOptions": {"series": {"dataLabels": {"style": {"fontSize": self.label_font_size}}}},
        }
        if self.legend_layout:
            options["legend"] = {"layout": self.legend_layout}
        if self.title_font_size:
            options["title"] = {
                "margin": 0,
                "style": {"fontSize": self.title_font_size, "lineHeight": self.title_line_height},
            }
        return {"condition": {"maxWidth": self.max_width}, "chartOptions": options}


DEFAULT_RULE = ResponsiveRule(
    max_width=None, height="125%", label_font_size="16px", legend_layout="vertical", title_font_size="30px",
    title_line_height="34px",
)
RESPONSIVE_RULES: Tuple[ResponsiveRule, ...] = (
    ResponsiveRule(max_width=600, height="150%", label_font_size="14px"),
    ResponsiveRule(
        max_width=500, height="175%", label_font_size="12px", legend_layout="horizontal",
        title_font_size="26px", title_line_height="30px",
    ),
    ResponsiveRule(max_width=400, height="700px", label_font_size="10px"),
)


@dataclass(frozen=True)
class ChartSpec:
    container_id: str
    title: str
    subtitle: Optional[str]
    caption_html: str
    legend_title_html: str
    color_classes: Tuple[ColorClass, ...]
    points: Tuple[TilePoint, ...]
    tile_shape: str
    export_items: Tuple[str, ...]
    default_rule: ResponsiveRule
    responsive_rules: Tuple[ResponsiveRule, ...]
    settle_delay: float
    animation_ms: int
    logo_url: Optional[str] = None
    unit_suffix: str = "billion USD"
    data_label_field: str = "iso-a3"

    @property
    def placed_points(self) -> List[TilePoint]:
        return [p for p in self.points if p.placed]

    def to_options(self) -> Dict[str, object]:
        """Highcharts-style options, JSON serializable."""
        return {
            "chart": {"type": "tilemap", "height": self.default_rule.height, "renderTo": self.container_id},
            "title": {"text": self.title, "align": "left"},
            "subtitle": {"text": self.subtitle, "align": "left", "enabled": self.subtitle is not None},
            "caption": {"text": self.caption_html, "useHTML": True, "align": "left"},
            "credits": {"enabled": False},
            "colorAxis": {"dataClasses": [c.to_option() for c in self.color_classes]},
            "legend": {
                "enabled": True,
                "layout": self.default_rule.legend_layout,
                "reversed": True,
                "title": {"text": self.legend_title_html},
            },
            "exporting": {
                "enabled": True,
                "buttons": {"contextButton": {"menuItems": list(self.export_items), "symbol": "download"}},
            },
            "plotOptions": {
                "series": {
                    "animation": {"duration": self.animation_ms},
                    "tileShape": self.tile_shape,
                    "dataLabels": {"enabled": True, "format": f"{{point.{self.data_label_field}}}"},
                }
            },
            "responsive": {"rules": [r.to_option() for r in self.responsive_rules]},
            "series": [{"data": [p.to_option() for p in self.points]}],
            "xAxis": {"visible": False},
            "yAxis": {"visible": False},
        }


def build_caption(source: str, note: str = "") -> str:
    parts = [f"<em>Source:</em> {sanitize(source)}"]
    if note and note.strip():
        parts.append(f"<em>Note:</em> <span>{sanitize(note)}</span>")
    return " <br>".join(parts)


def build_chart_spec(
    dataset: Sequence[DataPoint],
    params: Presentation,
    settings: Optional[Settings] = None,
) -> ChartSpec:
    """Build the declarative configuration of one tile map chart."""
    settings = settings or Settings()
    points: List[TilePoint] = []
    for point in dataset:
        color_class = classify(point.value)
        points.append(
            TilePoint(
                x=point.x,
                y=point.y,
                value=point.chart_value,
                name=point.fields.get(settings.name_field) or point.name,
                label=point.fields.get(settings.data_label_field, ""),
                color=color_class.color,
                class_label=color_class.label,
                tooltip=format_tooltip_value(point.chart_value, settings.unit_suffix, settings.decimals),
                fields=dict(point.fields),
            )
        )

    return ChartSpec(
        container_id=params.container_id,
        title=params.title,
        subtitle=params.subtitle,
        caption_html=build_caption(params.source, params.note),
        legend_title_html=sanitize(settings.legend_title),
        color_classes=COLOR_CLASSES,
        points=tuple(points),
        tile_shape=settings.tile_shape,
        export_items=EXPORT_MENU_ITEMS,
        default_rule=ResponsiveRule(
            max_width=None,
            height=settings.height,
            label_font_size=DEFAULT_RULE.label_font_size,
            legend_layout=DEFAULT_RULE.legend_layout,
            title_font_size=DEFAULT_RULE.title_font_size,
            title_line_height=DEFAULT_RULE.title_line_height,
        ),
        responsive_rules=RESPONSIVE_RULES,
        settle_delay=settings.settle_delay,
        animation_ms=settings.animation_ms,
        logo_url=settings.logo_url,
        unit_suffix=settings.unit_suffix,
        data_label_field=settings.data_label_field,
    )


# -----------------------------
# Helpers
# -----------------------------
def _is_dark_bg(hex_color: str) -> bool:
    """Return True if background is dark enough to need white text."""
    hex_color = hex_color.lstrip("#")
    if len(hex_color) == 3:
        hex_color = "".join(ch * 2 for ch in hex_color)
    if len(hex_color) != 6:
        return False
    r = int(hex_color[0:2], 16) / 255
    g = int(hex_color[2:4], 16) / 255
    b = int(hex_color[4:6], 16) / 255
    lum = 0.2126 * r + 0.7152 * g + 0.0722 * b
    return lum < 0.45


def _height_css(height: str) -> str:
    """'125%' -> aspect ratio relative to width; '700px' -> fixed height."""
    if height.endswith("%"):
        return f"aspect-ratio: 100 / {float(height[:-1]):g}; height: auto;"
    return f"aspect-ratio: auto; height: {height};"


def data_frame(spec: ChartSpec) -> pd.DataFrame:
    """Tabular export of the chart data. Unknown values are left empty."""
    rows = []
    for p in spec.points:
        row: Dict[str, object] = {"x": p.x, "y": p.y, "value": None if is_unknown(p.value) else p.value}
        row.update(p.fields)
        rows.append(row)
    # object dtype keeps ints as ints next to missing coordinates
    return pd.DataFrame(rows, columns=None if rows else ["x", "y", "value"], dtype=object)


def csv_data_uri(spec: ChartSpec) -> str:
    csv_text = data_frame(spec).to_csv(index=False)
    return "data:text/csv;charset=utf-8," + quote(csv_text)


def render_svg(spec: ChartSpec, size: int = TILE_SVG_SIZE) -> str:
    """Standalone SVG rendition of the grid (used for the image download)."""
    placed = spec.placed_points
    if not placed:
        return f'<svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}"></svg>'
    min_x = min(p.x for p in placed)
    min_y = min(p.y for p in placed)
    cols = max(p.x for p in placed) - min_x + 1
    rows = max(p.y for p in placed) - min_y + 1
    width, height = cols * size, rows * size
    r = size / 2 - 2
    parts = [
        f'<svg xmlns="http://www.w3.org/2000/svg" width="{width}" height="{height}" '
        f'viewBox="0 0 {width} {height}" font-family="Roboto, sans-serif">',
        f"<title>{esc(spec.title)}</title>",
    ]
    for p in placed:
        cx = (p.x - min_x) * size + size / 2
        cy = (p.y - min_y) * size + size / 2
        text_fill = "#ffffff" if _is_dark_bg(p.color) else "rgba(0, 0, 0, 0.8)"
        parts.append(
            f'<g><title>{esc(p.name)}: {esc(p.tooltip)}</title>'
            f'<circle cx="{cx:g}" cy="{cy:g}" r="{r:g}" fill="{esc(p.color)}" stroke="#cccccc"/>'
            f'<text x="{cx:g}" y="{cy:g}" text-anchor="middle" dominant-baseline="central" '
            f'font-size="{size // 4}" fill="{text_fill}">{esc(p.label)}</text></g>'
        )
    parts.append("</svg>")
    return "".join(parts)


def svg_data_uri(spec: ChartSpec) -> str:
    return "data:image/svg+xml;charset=utf-8," + quote(render_svg(spec))


# -----------------------------
# Artist
# -----------------------------
@dataclass
class TileMapArtist:
    """Render a ChartSpec as HTML plus chart-scoped CSS."""

    spec: ChartSpec

    def render_html(self) -> Tuple[str, str]:
        """Return ``(html_fragment, css_fragment)``."""
        spec = self.spec
        cid = esc(spec.container_id)
        placed = spec.placed_points
        if placed:
            min_x = min(p.x for p in placed)
            min_y = min(p.y for p in placed)
            n_cols = max(p.x for p in placed) - min_x + 1
            n_rows = max(p.y for p in placed) - min_y + 1
        else:
            min_x = min_y = 0
            n_cols = n_rows = 1

        lines: List[str] = []
        lines.append(f'<div class="tilemap-chart" id="{cid}">')
        lines.append(
            f'  <input type="checkbox" class="tilemap-input tilemap-data-toggle" id="{cid}-data-toggle">'
        )
        lines.extend(self._header_lines(cid))
        lines.append('  <div class="tilemap-plot">')
        lines.extend(self._legend_lines())
        lines.append(
            f'    <div class="tilemap-grid" role="img" aria-label="{esc(spec.title)}" '
            f'style="grid-template-columns: repeat({n_cols}, minmax(0, 1fr)); '
            f'grid-template-rows: repeat({n_rows}, minmax(0, 1fr));">'
        )
        for p in placed:
            lines.append(self._tile_html(p, p.x - min_x + 1, p.y - min_y + 1))
        if not placed:
            lines.append('      <div class="tilemap-empty">No data</div>')
        lines.append("    </div>")
        lines.append("  </div>")
        lines.extend(self._table_lines())
        lines.append(f'  <p class="tilemap-caption">{spec.caption_html}</p>')
        lines.append("</div>")
        return "\n".join(lines), self._css(cid)

    # Internal helpers -----------------------------------------------
    def _header_lines(self, cid: str) -> List[str]:
        spec = self.spec
        out = ['  <header class="tilemap-header">']
        if spec.logo_url:
            out.append(f'    <img class="tilemap-logo" src="{esc(spec.logo_url)}" alt="" width="80">')
        out.append('    <div class="tilemap-headings">')
        out.append(f'      <h2 class="tilemap-title">{esc(spec.title)}</h2>')
        if spec.subtitle:
            out.append(f'      <p class="tilemap-subtitle">{esc(spec.subtitle)}</p>')
        out.append("    </div>")
        out.append('    <details class="tilemap-export">')
        out.append('      <summary class="tilemap-export-button" aria-label="Chart menu">&#x2913;</summary>')
        out.append('      <ul class="tilemap-export-menu">')
        for item in spec.export_items:
            out.append("        " + self._menu_item_html(item, cid))
        out.append("      </ul>")
        out.append("    </details>")
        out.append("  </header>")
        return out

    def _menu_item_html(self, item: str, cid: str) -> str:
        text = esc(EXPORT_MENU_TEXT.get(item, item))
        if item == "separator":
            return '<li class="tilemap-export-separator" role="separator"></li>'
        if item == "downloadCSV":
            href = csv_data_uri(self.spec)
            return (
                f'<li data-menu-item="{item}"><a class="tilemap-export-item" href="{esc(href)}" '
                f'download="chart.csv">{text}</a></li>'
            )
        if item == "downloadSVG":
            href = svg_data_uri(self.spec)
            return (
                f'<li data-menu-item="{item}"><a class="tilemap-export-item" href="{esc(href)}" '
                f'download="chart.svg">{text}</a></li>'
            )
        if item == "viewData":
            return (
                f'<li data-menu-item="{item}"><label class="tilemap-export-item" '
                f'for="{cid}-data-toggle">{text}</label></li>'
            )
        raise ValueError(f"Unsupported export menu item: {item!r}")

    def _legend_lines(self) -> List[str]:
        spec = self.spec
        out = ['    <div class="tilemap-legend">']
        out.append(f'      <div class="tilemap-legend-title">{spec.legend_title_html}</div>')
        out.append('      <ul class="tilemap-legend-items">')
        # Highest class first.
        for color_class in reversed(spec.color_classes):
            out.append(
                '        <li class="tilemap-legend-item">'
                f'<span class="tilemap-legend-swatch" style="background-color: {esc(color_class.color)}"></span>'
                f'<span class="tilemap-legend-label">{esc(color_class.label)}</span></li>'
            )
        out.append("      </ul>")
        out.append("    </div>")
        return out

    def _tile_html(self, p: TilePoint, col: int, row: int) -> str:
        style_parts = [f"grid-column: {col}", f"grid-row: {row}", f"background-color: {p.color}"]
        if _is_dark_bg(p.color):
            style_parts.append("color: #ffffff")
        style_str = "; ".join(style_parts)
        tooltip = (
            '<div class="tilemap-tooltip tooltip_container">'
            f'<h3 class="tooltip_header">{esc(p.name)}</h3>'
            '<div><span class="tooltip_label"></span>'
            f'<span class="tooltip_value">{esc(p.tooltip)}</span></div></div>'
        )
        return (
            f'      <div class="tilemap-tile tilemap-tile--{esc(self.spec.tile_shape)}" tabindex="0"'
            f' data-label="{esc(p.label)}"'
            f' data-value="{p.value:g}"'
            f' data-class="{esc(p.class_label)}"'
            f' style="{esc(style_str)}">'
            f'<span class="tilemap-tile-label">{esc(p.label)}</span>{tooltip}</div>'
        )

    def _table_lines(self) -> List[str]:
        out = ['  <div class="tilemap-data-table">', "    <table>"]
        out.append(
            f'      <thead><tr><th scope="col">Country</th><th scope="col">{esc(self.spec.unit_suffix)}</th>'
            '<th scope="col">Class</th></tr></thead>'
        )
        out.append("      <tbody>")
        for p in self.spec.points:
            out.append(
                f"        <tr><th scope=\"row\">{esc(p.name)}</th><td>{esc(p.tooltip)}</td>"
                f"<td>{esc(p.class_label)}</td></tr>"
            )
        out.append("      </tbody>")
        out.append("    </table>")
        out.append("  </div>")
        return out

    def _rule_css(self, cid: str, rule: ResponsiveRule) -> List[str]:
        css = [
            f"#{cid} .tilemap-plot {{ {_height_css(rule.height)} }}",
            f"#{cid} .tilemap-tile-label {{ font-size: {rule.label_font_size}; }}",
        ]
        if rule.legend_layout == "horizontal":
            css.append(
                f"#{cid} .tilemap-legend {{ position: static; }}\n"
                f"#{cid} .tilemap-legend-items {{ flex-direction: row; flex-wrap: wrap; }}"
            )
        elif rule.legend_layout == "vertical":
            css.append(f"#{cid} .tilemap-legend-items {{ flex-direction: column; }}")
        if rule.title_font_size:
            css.append(
                f"#{cid} .tilemap-title {{ font-size: {rule.title_font_size}; "
                f"line-height: {rule.title_line_height or 'normal'}; }}"
            )
        return css

    def _css(self, cid: str) -> str:
        spec = self.spec
        css: List[str] = self._rule_css(cid, spec.default_rule)
        css.append(
            f"#{cid} .tilemap-tile {{ animation: tilemap-tile-in {spec.animation_ms}ms ease-out both; }}"
        )
        css.append(f"#{cid}:has(.tilemap-data-toggle:checked) .tilemap-data-table {{ display: block; }}")
        for rule in spec.responsive_rules:
            inner = "\n".join("  " + line for line in self._rule_css(cid, rule))
            css.append(f"@media (max-width: {rule.max_width}px) {{\n{inner}\n}}")
        return "\n".join(css)
