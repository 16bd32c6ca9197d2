"""Chart configuration: constants, data locations and presentation settings.

Everything here is static. The colour classes live next to the classifier
in ``tilemap.plots.classes``; fonts and colours of the page shell live in
``tilemap.core.theme``.
"""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import urljoin, urlparse

# Missing values travel as ``None`` inside the pipeline. The sentinel only
# appears at the chart boundary (series values, CSV export).
UNKNOWN_SENTINEL = -999
# Anything at or below this is drawn as "Unknown".
UNKNOWN_CEILING = -900

# Delay between "data + visible" and chart construction, in seconds.
SETTLE_DELAY_SECONDS = 0.3

# =============================================================================
# DATA LOCATIONS
# =============================================================================

PRODUCTION_HOST = "unctad.org"
DATA_FILE = "assets/data/2023-fdi_flows_africa_data.csv"
PRODUCTION_DATA_BASE = "https://storage.unctad.org/2023-fdi_flows_africa/"
LOCAL_DATA_BASE = "./"

# =============================================================================
# DEFAULT FIGURE TEXTS
# =============================================================================

DEFAULT_IDX = "1"
DEFAULT_TITLE = "Investments in Africa remain low in most countries"
DEFAULT_SUBTITLE = "Foreign direct investments in Africa, billion USD, 2021"
DEFAULT_SOURCE = "UNCTAD"
DEFAULT_NOTE = "Data for Libya and Ivory Coast is missing"


@dataclass(frozen=True)
class Settings:
    """Presentation settings shared by the chart builder and the widget."""

    unit_suffix: str = "billion USD"
    decimals: int = 1
    legend_title: str = "Foreign direct investment<br>in Africa, billion USD"
    logo_url: str | None = "https://unctad.org/sites/default/files/2022-11/unctad_logo.svg"
    tile_shape: str = "circle"
    data_label_field: str = "iso-a3"
    name_field: str = "name"
    height: str = "125%"
    animation_ms: int = 3000
    settle_delay: float = SETTLE_DELAY_SECONDS
    request_timeout: float = 30.0


def resolve_data_url(page_url: str | None = None) -> str:
    """Return the CSV location for a page served from *page_url*.

    Pages on the production host read from the storage bucket; everywhere
    else the file is expected next to the page.
    """
    if page_url:
        host = urlparse(page_url).netloc
        if PRODUCTION_HOST in host:
            return PRODUCTION_DATA_BASE + DATA_FILE
        return urljoin(page_url, LOCAL_DATA_BASE + DATA_FILE)
    return LOCAL_DATA_BASE + DATA_FILE
