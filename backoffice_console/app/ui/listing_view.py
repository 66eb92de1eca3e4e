from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any, Literal

from backoffice_console.app.formatting import NumberLocale, format_count, format_currency, format_date, format_percent

EMPTY_VALUE = "—"
SKELETON_ROWS = 5

ColumnKind = Literal["text", "currency", "date", "count", "percent", "status"]
SortDirection = Literal["asc", "desc"]


@dataclass(frozen=True)
class ColumnDef:
    key: str
    label: str
    kind: ColumnKind = "text"
    sortable: bool = True


def toggle_sort(
    current_column: str,
    current_direction: SortDirection,
    column: str,
) -> tuple[str, SortDirection]:
    if column == current_column:
        return column, "desc" if current_direction == "asc" else "asc"
    return column, "asc"


def sort_indicator(column: str, sort_column: str, sort_direction: SortDirection) -> str:
    if column != sort_column:
        return "none"
    return "ascending" if sort_direction == "asc" else "descending"


def format_cell(column: ColumnDef, value: Any, locale: str | NumberLocale | None = None) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        return EMPTY_VALUE
    if column.kind == "currency":
        return format_currency(value, locale)
    if column.kind == "date":
        try:
            return format_date(value, locale)
        except ValueError:
            return str(value).strip()
    if column.kind == "count":
        return format_count(value, locale)
    if column.kind == "percent":
        return format_percent(value, decimals=0, signed=False, locale=locale)
    return str(value).strip()


def render_rows(
    rows: Iterable[Any],
    columns: Iterable[ColumnDef],
    locale: str | NumberLocale | None = None,
) -> list[dict[str, str]]:
    columns = list(columns)
    rendered: list[dict[str, str]] = []
    for row in rows:
        values = row.model_dump() if hasattr(row, "model_dump") else dict(row)
        cells = {"id": str(values.get("id"))}
        for column in columns:
            cells[column.key] = format_cell(column, values.get(column.key), locale)
        rendered.append(cells)
    return rendered
