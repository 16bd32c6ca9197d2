from tilemap.core.utils import esc, format_number, round_half_up


def test_esc_escapes_markup_and_quotes():
    assert esc('<b>"A" & \'B\'</b>') == "&lt;b&gt;&quot;A&quot; &amp; &#x27;B&#x27;&lt;/b&gt;"
    assert esc(None) == ""
    assert esc(3) == "3"


def test_round_half_up_rounds_halves_away_from_zero():
    assert round_half_up(2.25, 1) == 2.3
    assert round_half_up(2.5) == 3.0
    assert round_half_up(-2.5) == -3.0
    assert round_half_up(2.34, 1) == 2.3


def test_format_number_groups_thousands():
    assert format_number(1234567.891, 1) == "1,234,567.9"
    assert format_number(0.04, 1) == "0.0"
