"""Tests for utils/output.py — JSON/CSV/table output routing."""
import csv
import io
import json

from catalog_proxy.utils.output import (
    PRODUCT_COLUMNS,
    OutputFormat,
    print_csv,
    print_json,
    print_output,
    print_table,
)


PRODUCT = {
    "id": "p1",
    "name": "Cake",
    "price": 10.0,
    "stockQuantity": 5,
    "isActive": True,
    "images": ["a.png", "b.png"],
}


# ── print_json ───────────────────────────────────────────────────────

def test_print_json_list(capsys):
    print_json([{"id": "1"}, {"id": "2"}])
    assert len(json.loads(capsys.readouterr().out)) == 2


def test_print_json_envelope(capsys):
    print_json({"data": [PRODUCT], "pagination": {"page": 1}})
    data = json.loads(capsys.readouterr().out)
    assert data["data"][0]["images"] == ["a.png", "b.png"]


# ── print_csv ────────────────────────────────────────────────────────

def _rows(text):
    return list(csv.reader(io.StringIO(text)))


def test_print_csv_basic(capsys):
    print_csv([{"name": "a", "val": "1"}, {"name": "b", "val": "2"}])
    assert _rows(capsys.readouterr().out) == [["name", "val"], ["a", "1"], ["b", "2"]]


def test_print_csv_joins_lists(capsys):
    print_csv([PRODUCT], columns=["id", "images"])
    assert _rows(capsys.readouterr().out)[1] == ["p1", "a.png|b.png"]


def test_print_csv_missing_column_blank(capsys):
    print_csv([PRODUCT], columns=["id", "promotionalPrice"])
    assert _rows(capsys.readouterr().out)[1] == ["p1", ""]


def test_print_csv_empty(capsys):
    print_csv([])
    assert capsys.readouterr().out == ""


# ── print_table ──────────────────────────────────────────────────────

def test_print_table_goes_to_stderr(capsys):
    print_table([PRODUCT], columns=["id", "name"], title="Products")
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Cake" in captured.err


def test_print_table_empty(capsys):
    print_table([])
    assert "No results" in capsys.readouterr().err


# ── print_output routing ─────────────────────────────────────────────

def test_output_routes_json(capsys):
    print_output(PRODUCT, OutputFormat.JSON)
    assert json.loads(capsys.readouterr().out)["id"] == "p1"


def test_output_routes_csv_with_product_columns(capsys):
    print_output([PRODUCT], OutputFormat.CSV, columns=PRODUCT_COLUMNS)
    rows = _rows(capsys.readouterr().out)
    assert rows[0] == PRODUCT_COLUMNS
    assert rows[1][PRODUCT_COLUMNS.index("images")] == "a.png|b.png"


def test_output_routes_single_record_to_field_table(capsys):
    print_output(PRODUCT, OutputFormat.TABLE, title="Product p1")
    err = capsys.readouterr().err
    assert "stockQuantity" in err
    assert "a.png" in err
    assert "b.png" in err
