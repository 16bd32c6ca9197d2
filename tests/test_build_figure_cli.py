import pytest

import build_figure

from conftest import SAMPLE_CSV


@pytest.fixture(autouse=True)
def keep_test_sinks(monkeypatch):
    # configure_logging() replaces every loguru sink; the tests install their own.
    monkeypatch.setattr(build_figure, "configure_logging", lambda level, log_file=None: None)


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(SAMPLE_CSV, encoding="utf-8")
    return path


def test_writes_page_for_local_csv(csv_path, tmp_path, capsys):
    out = tmp_path / "out" / "tilemap.html"

    code = build_figure.main(["--data", str(csv_path), "--out", str(out), "--no-delay", "--idx", "3"])

    assert code == 0
    html = out.read_text(encoding="utf-8")
    assert 'id="chartIdx3"' in html
    assert "tilemap-axes-box--revealed" in html
    assert "Libya" in html and "Egypt" in html
    assert "Wrote figure:" in capsys.readouterr().out


def test_missing_csv_fails(tmp_path, log_records):
    out = tmp_path / "tilemap.html"

    code = build_figure.main(["--data", str(tmp_path / "missing.csv"), "--out", str(out), "--no-delay"])

    assert code == 1
    assert not out.exists()
    assert any(level == "ERROR" and "Could not load chart data" in msg for level, msg in log_records)


def test_chart_below_first_viewport_is_not_rendered(csv_path, tmp_path, log_records):
    out = tmp_path / "tilemap.html"

    code = build_figure.main(
        ["--data", str(csv_path), "--out", str(out), "--no-delay", "--offset", "5000", "--viewport-height", "900"]
    )

    assert code == 1
    assert not out.exists()
    assert any(level == "ERROR" and "below the first viewport" in msg for level, msg in log_records)


def test_parser_defaults():
    args = build_figure.build_parser().parse_args([])

    assert args.data is None
    assert args.out_path == "out/tilemap.html"
    assert args.idx == "1"
    assert args.viewport_height == 900.0
    assert args.no_delay is False


def test_strict_mode_rejects_csv_without_value_column(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("x,y,name\n0,0,Libya\n", encoding="utf-8")

    with pytest.raises(ValueError, match="value"):
        build_figure.main(["--data", str(path), "--out", str(tmp_path / "t.html"), "--no-delay", "--strict"])
