from __future__ import annotations

import copy
from collections.abc import Iterable, Mapping
from typing import Any

from backoffice_console.clients.postgrest_sdk.errors import ApiError
from backoffice_console.clients.postgrest_sdk.query import Filter, OrderClause, QueryResult, TableQuery


class InMemoryTableSource:
    """Evaluates ``TableQuery`` objects against seeded rows held in memory.

    Mirrors the remote semantics the console relies on: case-insensitive
    substring search OR-combined across columns, SQL-style NULL handling in
    comparisons, NULLS LAST for ascending and NULLS FIRST for descending
    order, offset/limit paging and an exact count of the filtered set.
    """

    def __init__(self, tables: Mapping[str, Iterable[Mapping[str, Any]]] | None = None) -> None:
        self._tables: dict[str, list[dict[str, Any]]] = {}
        self.executed: list[TableQuery] = []
        for name, rows in (tables or {}).items():
            self.seed(name, rows)

    def seed(self, table: str, rows: Iterable[Mapping[str, Any]]) -> None:
        self._tables[table] = [dict(row) for row in rows]

    def rows(self, table: str) -> list[dict[str, Any]]:
        return copy.deepcopy(self._tables.get(table, []))

    async def execute(self, query: TableQuery) -> QueryResult:
        self.executed.append(query)
        if query.table not in self._tables:
            raise ApiError(
                code="42P01",
                message=f'relation "public.{query.table}" does not exist',
                status_code=404,
            )

        matched = [row for row in self._tables[query.table] if _matches(row, query)]
        total_count = len(matched) if query.count else None
        if query.head:
            return QueryResult(rows=[], total_count=total_count)

        ordered = _sort_rows(matched, query.orders)
        start = query.offset or 0
        end = start + query.limit_to if query.limit_to is not None else None
        page = ordered[start:end]
        return QueryResult(rows=[_project(row, query.columns) for row in page], total_count=total_count)


def _matches(row: Mapping[str, Any], query: TableQuery) -> bool:
    if not all(_matches_filter(row, item) for item in query.filters):
        return False
    if query.search is None:
        return True
    probe = query.search.term.lower()
    return any(
        row.get(column) is not None and probe in str(row.get(column)).lower()
        for column in query.search.columns
    )


def _matches_filter(row: Mapping[str, Any], item: Filter) -> bool:
    value = row.get(item.column)
    if item.op == "in":
        return value is not None and value in item.value
    if item.value is None:
        return (value is None) if item.op == "eq" else (value is not None)
    if value is None:
        return False
    if item.op == "eq":
        return value == item.value
    if item.op == "neq":
        return value != item.value
    if item.op == "lt":
        return value < item.value
    if item.op == "lte":
        return value <= item.value
    if item.op == "gt":
        return value > item.value
    if item.op == "gte":
        return value >= item.value
    raise ValueError(f"Unsupported filter operator: {item.op}")


def _sort_rows(rows: list[dict[str, Any]], orders: tuple[OrderClause, ...]) -> list[dict[str, Any]]:
    ordered = list(rows)
    for clause in reversed(orders):
        present = [row for row in ordered if row.get(clause.column) is not None]
        missing = [row for row in ordered if row.get(clause.column) is None]
        present.sort(key=lambda row: row[clause.column], reverse=not clause.ascending)
        ordered = present + missing if clause.ascending else missing + present
    return ordered


def _project(row: Mapping[str, Any], columns: tuple[str, ...]) -> dict[str, Any]:
    if "*" in columns:
        return dict(row)
    return {column: row.get(column) for column in columns}
