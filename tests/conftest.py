import pytest
from loguru import logger

from tilemap.core.axes import Axes
from tilemap.core.figure import Figure
from tilemap.core.visibility import ManualVisibilityObserver, VisibilityGate
from tilemap.data.fetch import HttpResponse
from tilemap.plots.tilemap import Presentation
from tilemap.widget import TileMapWidget

SAMPLE_CSV = "x,y,value,name\n0,0,null,Libya\n1,0,2.3,Egypt\n"


class SequenceTransport:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, method, url, headers):
        self.calls.append((method, url, headers))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def csv_response(text, status_code=200, reason="OK"):
    return HttpResponse(status_code=status_code, body=text.encode("utf-8"), reason=reason)


@pytest.fixture
def log_records():
    """(level, message) tuples emitted through loguru during the test."""
    records = []
    handler_id = logger.add(
        lambda message: records.append((message.record["level"].name, message.record["message"])),
        level="DEBUG",
    )
    yield records
    logger.remove(handler_id)


@pytest.fixture
def presentation():
    return Presentation(
        idx="1",
        source="UNCTAD",
        title="Investments in Africa remain low in most countries",
        note="Data for Libya and Ivory Coast is missing",
        subtitle="Foreign direct investments in Africa, billion USD, 2021",
    )


@pytest.fixture
def make_widget(presentation):
    """Build (widget, axes, observer, sleeps) with a manual observer."""

    def _make(fetcher=None, sleep=None):
        fig = Figure()
        ax: Axes = fig.add_subplot()
        observer = ManualVisibilityObserver()
        sleeps = []
        widget = TileMapWidget(
            mount_point=ax,
            presentation=presentation,
            gate=VisibilityGate(observer),
            fetcher=fetcher,
            sleep=sleep or sleeps.append,
        )
        return widget, ax, observer, sleeps

    return _make
