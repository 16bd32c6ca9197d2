from tilemap.core.figure import Figure
from tilemap.data.csv_parser import parse_csv
from tilemap.data.normalize import normalize_records
from tilemap.plots.tilemap import ChartParams
from tilemap.plt import figure, plt, tilemap

from conftest import SAMPLE_CSV


def make_params(**overrides):
    values = dict(
        idx="7",
        data=normalize_records(parse_csv(SAMPLE_CSV)),
        source="UNCTAD",
        title="FDI <in> Africa",
        note="Data for Libya is missing",
    )
    values.update(overrides)
    return ChartParams(**values)


def test_add_subplot_numbers_boxes():
    fig = Figure()
    first = fig.add_subplot()
    second = fig.add_subplot()

    assert (first.index, second.index) == (1, 2)
    assert first.box_id == "chart-box-1"
    assert fig.axes == [first, second]
    assert first.figure is fig


def test_empty_box_stays_hidden():
    fig = Figure(page_title="Empty")
    ax = fig.add_subplot()

    html = fig.to_html()

    assert ax.is_empty
    assert '<div class="tilemap-axes-box" id="chart-box-1" data-axes-index="1"></div>' in html
    assert "content-visibility: auto" in html
    assert "<script" not in html


def test_empty_figure_renders_placeholder():
    assert "<!-- no axes -->" in Figure().to_html()


def test_plt_tilemap_renders_and_reveals():
    ax = tilemap(make_params())
    html = ax.figure.to_html()

    assert ax.revealed
    assert 'class="tilemap-axes-box tilemap-axes-box--revealed"' in html
    assert 'id="chartIdx7"' in html
    assert "<title>FDI &lt;in&gt; Africa</title>" in html
    assert "@media (max-width: 600px)" in html


def test_plt_object_reuses_figure():
    fig = plt.figure(page_title="Two charts")
    plt.tilemap(make_params(idx="1"), fig=fig)
    plt.tilemap(make_params(idx="2"), fig=fig)

    html = fig.to_html()

    assert len(fig.axes) == 2
    assert 'id="chartIdx1"' in html
    assert 'id="chartIdx2"' in html


def test_write_html_creates_parent_dirs(tmp_path):
    fig = figure()
    tilemap(make_params(), fig=fig)

    out = fig.write_html(tmp_path / "nested" / "page.html")

    assert out.exists()
    text = out.read_text(encoding="utf-8")
    assert text.startswith("<!DOCTYPE html>")
    assert "Egypt" in text
