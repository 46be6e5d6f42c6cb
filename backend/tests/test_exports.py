"""Tests for CSV/JSON rendering of mapped rows."""

import json

from integration_service.mapping.exports import export_csv, export_json


def test_csv_header_from_first_row_and_quoted_cells():
    rows = [
        {"product_id": "p-1", "unit_price": 349.99, "available_stock": 12},
        {"product_id": "p-2", "unit_price": 89.5, "available_stock": 0},
    ]
    assert export_csv(rows) == (
        "product_id,unit_price,available_stock\n"
        '"p-1","349.99","12"\n'
        '"p-2","89.5","0"\n'
    )


def test_csv_missing_fields_and_nulls_are_empty_cells():
    rows = [{"a": 1, "b": 2}, {"a": None}, {"b": 3, "c": "ignored"}]
    assert export_csv(rows) == 'a,b\n"1","2"\n"",""\n"","3"\n'


def test_csv_escapes_quotes_and_keeps_commas_and_newlines():
    rows = [{"name": 'Desk "Oak", large', "note": "line1\nline2"}]
    assert export_csv(rows) == 'name,note\n"Desk ""Oak"", large","line1\nline2"\n'


def test_csv_nested_values_and_booleans():
    rows = [{"tags": ["a", "b"], "dims": {"l": 30}, "active": True, "archived": False}]
    assert export_csv(rows) == (
        "tags,dims,active,archived\n"
        '"[""a"", ""b""]","{""l"": 30}","true","false"\n'
    )


def test_csv_empty_input():
    assert export_csv([]) == ""


def test_json_export_is_pretty_printed_array():
    rows = [{"product_id": "p-1", "name": "Schreibtisch – groß"}]
    text = export_json(rows)

    assert json.loads(text) == rows
    assert text.startswith("[\n  {")
    assert "Schreibtisch – groß" in text


def test_json_export_empty_input():
    assert export_json([]) == "[]"
