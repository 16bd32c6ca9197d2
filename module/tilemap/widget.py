"""TileMapWidget: wires fetching, visibility and rendering for one chart.

Two one-shot signals arrive independently and in no fixed order: the
dataset (``receive_data``) and visibility (from the VisibilityGate). The
chart is constructed once, after the settle delay, as soon as both have
arrived. After ``unmount()`` every pending callback is a no-op.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from loguru import logger

from tilemap.core.axes import Axes
from tilemap.core.config import Settings
from tilemap.core.visibility import VisibilityGate
from tilemap.data.csv_parser import CsvFormatError
from tilemap.data.fetch import CsvFetcher, FetchError
from tilemap.data.normalize import DataSet
from tilemap.plots.tilemap import ChartSpec, Presentation, TileMapArtist, build_chart_spec


class TileMapWidget:
    def __init__(
        self,
        mount_point: Axes,
        presentation: Presentation,
        gate: VisibilityGate,
        fetcher: Optional[CsvFetcher] = None,
        settings: Optional[Settings] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._mount_point = mount_point
        self._presentation = presentation
        self._gate = gate
        self._fetcher = fetcher or CsvFetcher()
        self._settings = settings or Settings()
        self._sleep = sleep

        self._mounted = False
        self._data: Optional[DataSet] = None
        self.spec: Optional[ChartSpec] = None
        self.build_count = 0

    # Public API -----------------------------------------------------
    @property
    def is_mounted(self) -> bool:
        return self._mounted

    @property
    def data_ready(self) -> bool:
        return self._data is not None

    @property
    def is_visible(self) -> bool:
        return self._gate.is_visible

    @property
    def constructed(self) -> bool:
        return self.spec is not None

    def mount(self) -> None:
        if self._mounted:
            return
        self._mounted = True
        self._gate.mount()
        self._gate.subscribe(self._on_visible)

    def unmount(self) -> None:
        self._mounted = False
        self._gate.unmount()

    def load(self, location: str, strict: bool = False) -> bool:
        """Fetch and normalize the dataset; False (and an error log) on failure."""
        try:
            dataset = self._fetcher.fetch_dataset(location, strict=strict)
        except (FetchError, CsvFormatError) as exc:
            logger.error("Could not load chart data for {}: {}", self._presentation.container_id, exc)
            return False
        self.receive_data(dataset)
        return True

    def receive_data(self, dataset: DataSet) -> None:
        if not self._mounted:
            logger.debug("Ignoring data for unmounted {}", self._presentation.container_id)
            return
        if self._data is not None:
            logger.warning("Data for {} already received; ignoring update", self._presentation.container_id)
            return
        self._data = list(dataset)
        self._maybe_construct()

    # Internal helpers -----------------------------------------------
    def _on_visible(self) -> None:
        if self._mounted:
            self._maybe_construct()

    def _maybe_construct(self) -> None:
        if not (self._mounted and self.data_ready and self.is_visible) or self.constructed:
            return
        self._sleep(self._settings.settle_delay)
        # Unmounted, or constructed re-entrantly, while settling.
        if not self._mounted or self.constructed:
            return
        self._construct()

    def _construct(self) -> None:
        spec = build_chart_spec(self._data, self._presentation, self._settings)
        html, css = TileMapArtist(spec).render_html()
        self._mount_point.set_html(html)
        self._mount_point.set_extra_css(css)
        self._mount_point.reveal()
        self.spec = spec
        self.build_count += 1
        logger.info(
            "Constructed {} with {} tiles ({} placed)",
            spec.container_id,
            len(spec.points),
            len(spec.placed_points),
        )
