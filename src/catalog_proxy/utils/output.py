"""Terminal output for product data: Rich tables on stderr, JSON or CSV on stdout."""

from __future__ import annotations

import csv
import json
import sys
from enum import Enum
from typing import Any

from rich.console import Console
from rich.table import Table

console = Console(stderr=True)

PRODUCT_COLUMNS = ["id", "name", "price", "promotionalPrice", "stockQuantity", "isActive", "images"]


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    CSV = "csv"


def print_output(
    data: list[dict[str, Any]] | dict[str, Any],
    fmt: OutputFormat = OutputFormat.TABLE,
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print a product page (list) or a single record (dict) in the requested format.

    Args:
        data: Rows to display, or one record.
        fmt: Output format (table, json, csv).
        columns: Columns for list tables and csv. None = keys of the first row.
        title: Optional title for table output.
    """
    if fmt == OutputFormat.JSON:
        print_json(data)
    elif fmt == OutputFormat.CSV:
        print_csv(data, columns)
    elif isinstance(data, dict):
        print_record(data, title)
    else:
        print_table(data, columns, title)


def print_json(data: Any) -> None:
    """Print data as formatted JSON to stdout."""
    json.dump(data, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")


def _cell(value: Any, sep: str = ", ") -> str:
    if value is None:
        return ""
    if isinstance(value, list):
        return sep.join(str(v) for v in value)
    return str(value)


def print_record(record: dict[str, Any], title: str | None = None) -> None:
    """Print one record as a two-column field/value table."""
    table = Table("field", "value", title=title, show_header=False)
    for key, value in record.items():
        table.add_row(key, _cell(value, sep="\n"))
    console.print(table)


def print_table(
    rows: list[dict[str, Any]],
    columns: list[str] | None = None,
    title: str | None = None,
) -> None:
    """Print rows as a Rich table, one product per line."""
    if not rows:
        console.print("[dim]No results.[/dim]")
        return

    columns = columns or list(rows[0].keys())
    table = Table(title=title)
    for col in columns:
        table.add_column(col, overflow="fold")
    for row in rows:
        table.add_row(*[_cell(row.get(col)) for col in columns])
    console.print(table)


def print_csv(
    data: list[dict[str, Any]] | dict[str, Any],
    columns: list[str] | None = None,
) -> None:
    """Print data as CSV to stdout. List cells are joined with '|'."""
    rows = [data] if isinstance(data, dict) else data
    if not rows:
        return

    columns = columns or list(rows[0].keys())
    writer = csv.writer(sys.stdout)
    writer.writerow(columns)
    for row in rows:
        writer.writerow([_cell(row.get(col), sep="|") for col in columns])
