from tilemap.data.csv_parser import CsvFormatError, parse_csv, require_columns

import pytest

from conftest import SAMPLE_CSV


def test_parse_csv_returns_one_record_per_row_in_order():
    records = parse_csv(SAMPLE_CSV)

    assert records == [
        {"x": "0", "y": "0", "value": "null", "name": "Libya"},
        {"x": "1", "y": "0", "value": "2.3", "name": "Egypt"},
    ]
    assert list(records[0]) == ["x", "y", "value", "name"]


def test_parse_csv_header_only_gives_no_records():
    assert parse_csv("x,y,value,name\n") == []
    assert parse_csv("x,y,value,name") == []


def test_parse_csv_empty_input_gives_no_records():
    assert parse_csv("") == []
    assert parse_csv("\n\n") == []


def test_parse_csv_skips_blank_lines():
    text = "x,y,value,name\n0,0,1.5,Chad\n\n1,0,0.2,Niger\n\n\n"

    records = parse_csv(text)

    assert [r["name"] for r in records] == ["Chad", "Niger"]


def test_parse_csv_keeps_tokens_as_text():
    text = "x,y,value,name,iso-a3\n07,1,null,Namibia,NAM\n2,3,NA,,NA\n"

    records = parse_csv(text)

    assert records[0]["x"] == "07"
    assert records[0]["value"] == "null"
    assert records[1]["value"] == "NA"
    assert records[1]["name"] == ""
    assert records[1]["iso-a3"] == "NA"


def test_parse_csv_pads_short_rows_with_empty_text():
    records = parse_csv("a,b,c\n1,2\n")

    assert records == [{"a": "1", "b": "2", "c": ""}]


def test_parse_csv_strips_cell_whitespace():
    records = parse_csv("x, y, value\n 1, 2, 3.5\n")

    assert records == [{"x": "1", "y": "2", "value": "3.5"}]


def test_require_columns_reports_missing_columns():
    records = parse_csv("x,value\n1,2\n")

    with pytest.raises(ValueError, match="'y'"):
        require_columns(records, ["x", "y", "value"])

    require_columns([], ["x"])


def test_parse_csv_ignores_trailing_delimiters_on_every_row():
    records = parse_csv("x,y,value,name\n0,0,null,Libya,\n1,0,2.3,Egypt,\n")

    assert records == [
        {"x": "0", "y": "0", "value": "null", "name": "Libya"},
        {"x": "1", "y": "0", "value": "2.3", "name": "Egypt"},
    ]


def test_parse_csv_rejects_a_row_wider_than_the_table():
    with pytest.raises(CsvFormatError, match="malformed CSV"):
        parse_csv("x,y,value,name\n0,0,null,Libya\n1,0,2.3,Egypt,extra\n")
