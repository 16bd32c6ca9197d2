import pytest

from tilemap.data.csv_parser import parse_csv
from tilemap.data.fetch import CsvFetcher, HttpResponse
from tilemap.data.normalize import normalize_records

from conftest import SAMPLE_CSV, SequenceTransport, csv_response


@pytest.fixture
def dataset():
    return normalize_records(parse_csv(SAMPLE_CSV))


def test_data_then_visible_constructs_once(make_widget, dataset):
    widget, ax, observer, sleeps = make_widget()
    widget.mount()

    widget.receive_data(dataset)
    assert not widget.constructed
    assert ax.is_empty

    observer.trigger()
    assert widget.constructed
    assert widget.build_count == 1
    assert sleeps == [0.3]
    assert ax.revealed
    assert 'id="chartIdx1"' in ax._inner_html


def test_visible_then_data_constructs_once(make_widget, dataset):
    widget, ax, observer, sleeps = make_widget()
    widget.mount()

    observer.trigger()
    assert widget.is_visible
    assert not widget.constructed

    widget.receive_data(dataset)
    assert widget.constructed
    assert widget.build_count == 1
    assert sleeps == [0.3]


def test_both_orders_render_the_same_chart(make_widget, dataset):
    first, ax_first, observer_first, _ = make_widget()
    first.mount()
    first.receive_data(dataset)
    observer_first.trigger()

    second, ax_second, observer_second, _ = make_widget()
    second.mount()
    observer_second.trigger()
    second.receive_data(dataset)

    assert ax_first._inner_html == ax_second._inner_html
    assert ax_first._extra_css == ax_second._extra_css
    assert first.spec == second.spec


@pytest.mark.parametrize("signal", ["data", "visible"])
def test_single_signal_never_constructs(make_widget, dataset, signal):
    widget, ax, observer, sleeps = make_widget()
    widget.mount()

    if signal == "data":
        widget.receive_data(dataset)
    else:
        observer.trigger()

    assert not widget.constructed
    assert sleeps == []
    assert not ax.revealed


def test_visibility_latches_and_disconnects(make_widget, dataset):
    widget, _, observer, _ = make_widget()
    widget.mount()

    observer.trigger()
    assert not observer.connected
    observer.trigger()
    widget.receive_data(dataset)

    assert widget.build_count == 1


def test_duplicate_data_is_ignored(make_widget, dataset, log_records):
    widget, _, observer, _ = make_widget()
    widget.mount()
    observer.trigger()
    widget.receive_data(dataset)

    widget.receive_data(dataset[:1])

    assert widget.build_count == 1
    assert len(widget.spec.points) == 2
    assert any(level == "WARNING" and "already received" in msg for level, msg in log_records)


def test_unmount_before_signals_never_constructs(make_widget, dataset):
    widget, ax, observer, sleeps = make_widget()
    widget.mount()
    widget.unmount()

    observer.trigger()
    widget.receive_data(dataset)

    assert not widget.is_mounted
    assert not widget.constructed
    assert sleeps == []
    assert ax.is_empty


def test_unmount_during_settle_delay_cancels_construction(make_widget, dataset):
    holder = []

    def unmount_while_sleeping(seconds):
        holder[0].unmount()

    widget, ax, observer, _ = make_widget(sleep=unmount_while_sleeping)
    holder.append(widget)
    widget.mount()
    widget.receive_data(dataset)

    observer.trigger()

    assert not widget.constructed
    assert ax.is_empty
    assert not ax.revealed


def test_empty_dataset_still_constructs(make_widget):
    widget, ax, observer, _ = make_widget()
    widget.mount()
    widget.receive_data([])
    observer.trigger()

    assert widget.constructed
    assert "No data" in ax._inner_html


def test_failed_load_logs_error_and_never_renders(make_widget, log_records):
    transport = SequenceTransport([csv_response("", status_code=404, reason="Not Found")])
    widget, ax, observer, sleeps = make_widget(fetcher=CsvFetcher(transport=transport))
    widget.mount()

    assert widget.load("https://example.org/assets/data/missing.csv") is False
    observer.trigger()

    assert not widget.data_ready
    assert not widget.constructed
    assert ax.is_empty
    assert sleeps == []
    errors = [msg for level, msg in log_records if level == "ERROR"]
    assert len(errors) == 1
    assert "404" in errors[0]
    assert "chartIdx1" in errors[0]


def test_load_remote_csv(make_widget):
    transport = SequenceTransport([csv_response(SAMPLE_CSV)])
    widget, ax, observer, _ = make_widget(fetcher=CsvFetcher(transport=transport))
    widget.mount()
    observer.trigger()

    assert widget.load("https://example.org/data.csv") is True

    assert widget.constructed
    assert transport.calls[0][:2] == ("GET", "https://example.org/data.csv")
    assert "Egypt" in ax._inner_html


def test_load_local_file(make_widget, tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    widget, ax, observer, _ = make_widget()
    widget.mount()

    assert widget.load(str(path)) is True
    observer.trigger()

    assert widget.constructed
    assert [p.name for p in widget.spec.points] == ["Libya", "Egypt"]


def test_malformed_csv_logs_error_and_never_renders(make_widget, log_records):
    ragged = "x,y,value,name\n0,0,null,Libya\n1,0,2.3,Egypt,extra\n"
    transport = SequenceTransport([csv_response(ragged)])
    widget, ax, observer, sleeps = make_widget(fetcher=CsvFetcher(transport=transport))
    widget.mount()
    observer.trigger()

    assert widget.load("https://example.org/data.csv") is False

    assert not widget.constructed
    assert ax.is_empty
    assert sleeps == []
    errors = [msg for level, msg in log_records if level == "ERROR"]
    assert len(errors) == 1
    assert "malformed CSV" in errors[0]


def test_undecodable_payload_logs_error_and_never_renders(make_widget, log_records):
    transport = SequenceTransport([HttpResponse(status_code=200, body=b"x,y,value,name\n0,0,1,\xff\n")])
    widget, ax, observer, _ = make_widget(fetcher=CsvFetcher(transport=transport))
    widget.mount()
    observer.trigger()

    assert widget.load("https://example.org/data.csv") is False

    assert not widget.constructed
    assert ax.is_empty
    assert any(level == "ERROR" and "not UTF-8" in msg for level, msg in log_records)


def test_trailing_commas_still_place_every_tile(make_widget):
    transport = SequenceTransport([csv_response("x,y,value,name\n0,0,null,Libya,\n1,0,2.3,Egypt,\n")])
    widget, ax, observer, _ = make_widget(fetcher=CsvFetcher(transport=transport))
    widget.mount()
    observer.trigger()

    assert widget.load("https://example.org/data.csv") is True

    assert [p.name for p in widget.spec.placed_points] == ["Libya", "Egypt"]
