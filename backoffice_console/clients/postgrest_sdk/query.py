"""Immutable table query description shared by every table source.

A ``TableQuery`` is built fluently (each call returns a new query) and can be
rendered to PostgREST request parts with :meth:`TableQuery.to_request`, or
evaluated locally by :class:`InMemoryTableSource`.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

FilterOp = Literal["eq", "neq", "lt", "lte", "gt", "gte", "in"]
CountMode = Literal["exact"]

_RESERVED_CHARS = set(',()."\\: ')


@dataclass(frozen=True)
class Filter:
    column: str
    op: FilterOp
    value: Any


@dataclass(frozen=True)
class SearchClause:
    columns: tuple[str, ...]
    term: str


@dataclass(frozen=True)
class OrderClause:
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class RequestParts:
    method: str
    path: str
    params: list[tuple[str, str]]
    headers: dict[str, str]


@dataclass(frozen=True)
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    total_count: int | None = None


@dataclass(frozen=True)
class TableQuery:
    table: str
    columns: tuple[str, ...] = ("*",)
    filters: tuple[Filter, ...] = ()
    search: SearchClause | None = None
    orders: tuple[OrderClause, ...] = ()
    offset: int | None = None
    limit_to: int | None = None
    count: CountMode | None = None
    head: bool = False

    def select(self, *columns: str, count: CountMode | None = None, head: bool = False) -> "TableQuery":
        return replace(self, columns=tuple(columns) or ("*",), count=count, head=head)

    def eq(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "neq", value)

    def lt(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "lte", value)

    def gt(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> "TableQuery":
        return self._filter(column, "gte", value)

    def in_(self, column: str, values: list[Any] | tuple[Any, ...]) -> "TableQuery":
        return self._filter(column, "in", tuple(values))

    def ilike_any(self, columns: list[str] | tuple[str, ...], term: str) -> "TableQuery":
        if not term or not columns:
            return self
        return replace(self, search=SearchClause(columns=tuple(columns), term=term))

    def order(self, column: str, ascending: bool = True) -> "TableQuery":
        return replace(self, orders=self.orders + (OrderClause(column=column, ascending=ascending),))

    def range(self, start: int, end: int) -> "TableQuery":
        if start < 0 or end < start:
            raise ValueError(f"Invalid range {start}-{end}")
        return replace(self, offset=start, limit_to=end - start + 1)

    def limit(self, count: int) -> "TableQuery":
        if count < 1:
            raise ValueError(f"Invalid limit {count}")
        return replace(self, limit_to=count)

    def _filter(self, column: str, op: FilterOp, value: Any) -> "TableQuery":
        return replace(self, filters=self.filters + (Filter(column=column, op=op, value=value),))

    def to_request(self) -> RequestParts:
        params: list[tuple[str, str]] = [("select", ",".join(self.columns))]
        for item in self.filters:
            params.append((item.column, _render_filter(item)))
        if self.search is not None:
            pattern = _quote(f"*{escape_like(self.search.term)}*")
            clauses = ",".join(f"{column}.ilike.{pattern}" for column in self.search.columns)
            params.append(("or", f"({clauses})"))
        if self.orders:
            params.append(
                ("order", ",".join(f"{o.column}.{'asc' if o.ascending else 'desc'}" for o in self.orders))
            )
        if self.offset is not None:
            params.append(("offset", str(self.offset)))
        if self.limit_to is not None:
            params.append(("limit", str(self.limit_to)))

        headers: dict[str, str] = {}
        if self.count:
            headers["Prefer"] = f"count={self.count}"
        return RequestParts(
            method="HEAD" if self.head else "GET",
            path=f"/{self.table}",
            params=params,
            headers=headers,
        )


def escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _render_filter(item: Filter) -> str:
    if item.op == "in":
        return f"in.({','.join(_quote(_to_text(value)) for value in item.value)})"
    if item.value is None and item.op in {"eq", "neq"}:
        return "is.null" if item.op == "eq" else "not.is.null"
    return f"{item.op}.{_to_text(item.value)}"


def _quote(value: str) -> str:
    if not any(char in _RESERVED_CHARS for char in value):
        return value
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _to_text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)
