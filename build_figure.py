from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from loguru import logger

from tilemap.core.config import (
    DEFAULT_IDX,
    DEFAULT_NOTE,
    DEFAULT_SOURCE,
    DEFAULT_SUBTITLE,
    DEFAULT_TITLE,
    Settings,
    resolve_data_url,
)
from tilemap.core.logger import configure_logging
from tilemap.core.visibility import Rect, ViewportObserver, VisibilityGate
from tilemap.data.fetch import CsvFetcher, requests_transport
from tilemap.plots.tilemap import Presentation
from tilemap.plt import figure
from tilemap.widget import TileMapWidget

# Height assumed for the chart box when checking the first viewport (px).
NOMINAL_CHART_HEIGHT = 800.0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description="Fetch the FDI CSV and write the tile map as a static HTML page.")
    ap.add_argument("--data", default=None, help="CSV URL or local path (default: resolved from --page-url)")
    ap.add_argument("--page-url", default=None, help="URL the page will be served from")
    ap.add_argument("--out", dest="out_path", default="out/tilemap.html", help="Output HTML")
    ap.add_argument("--idx", default=DEFAULT_IDX, help="Container suffix (chartIdx<idx>)")
    ap.add_argument("--title", default=DEFAULT_TITLE)
    ap.add_argument("--subtitle", default=DEFAULT_SUBTITLE)
    ap.add_argument("--source", default=DEFAULT_SOURCE)
    ap.add_argument("--note", default=DEFAULT_NOTE)
    ap.add_argument("--viewport-height", type=float, default=900.0, help="Viewport height in px")
    ap.add_argument("--offset", type=float, default=0.0, help="Distance of the chart from the page top in px")
    ap.add_argument("--strict", action="store_true", help="Fail when the CSV lacks x, y or value columns")
    ap.add_argument("--no-delay", action="store_true", help="Skip the settle delay before construction")
    ap.add_argument("--log-level", default="INFO")
    ap.add_argument("--log-file", default=None)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    settings = Settings()
    location = args.data or resolve_data_url(args.page_url)
    presentation = Presentation(
        idx=args.idx,
        source=args.source,
        title=args.title,
        note=args.note,
        subtitle=args.subtitle or None,
    )

    fig = figure(page_title=args.title)
    ax = fig.add_subplot()
    observer = ViewportObserver(Rect(top=args.offset, height=NOMINAL_CHART_HEIGHT))
    fetcher = CsvFetcher(
        transport=lambda method, url, headers: requests_transport(method, url, headers, settings.request_timeout)
    )
    widget = TileMapWidget(
        mount_point=ax,
        presentation=presentation,
        gate=VisibilityGate(observer),
        fetcher=fetcher,
        settings=replace(settings, settle_delay=0.0) if args.no_delay else settings,
    )
    widget.mount()
    if not widget.load(location, strict=args.strict):
        widget.unmount()
        return 1

    # A static page is laid out once: the first viewport is all we see.
    observer.update(scroll_top=0.0, viewport_height=args.viewport_height)
    if not widget.constructed:
        logger.error("Chart {} is below the first viewport; nothing was rendered", presentation.container_id)
        widget.unmount()
        return 1

    out = fig.write_html(Path(args.out_path))
    print(f"Wrote figure: {out.resolve()}")
    widget.unmount()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
