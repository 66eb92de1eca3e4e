"""Resource-wide summary counters.

Each summary is a mapping of metric name to a declarative metric. Metrics are
independent sub-queries, possibly against other tables, and run concurrently.
They never look at the table view's search, filters or paging.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from backoffice_console.app.domain.models import LOW_STOCK_THRESHOLD
from backoffice_console.app.infrastructure.logging.logger import get_logger, log_action
from backoffice_console.clients.postgrest_sdk.normalizers import to_number
from backoffice_console.clients.postgrest_sdk.query import Filter, QueryResult, TableQuery
from backoffice_console.clients.postgrest_sdk.table_client import TableSource

Number = int | float


async def gather_all(*awaitables: Any) -> list[Any]:
    """Run ``awaitables`` concurrently, let every one finish, then re-raise the first failure."""
    results = await asyncio.gather(*awaitables, return_exceptions=True)
    for item in results:
        if isinstance(item, BaseException):
            raise item
    return list(results)


@dataclass(frozen=True)
class CountMetric:
    table: str
    filters: tuple[Filter, ...] = ()

    def query(self) -> TableQuery:
        return TableQuery(table=self.table, filters=self.filters).select("*", count="exact", head=True)

    def reduce(self, result: QueryResult) -> Number:
        return result.total_count or 0


@dataclass(frozen=True)
class SumMetric:
    table: str
    column: str
    filters: tuple[Filter, ...] = ()

    def query(self) -> TableQuery:
        return TableQuery(table=self.table, filters=self.filters).select(self.column)

    def reduce(self, result: QueryResult) -> Number:
        return sum(to_number(row.get(self.column)) for row in result.rows)


@dataclass(frozen=True)
class AverageMetric:
    table: str
    column: str
    filters: tuple[Filter, ...] = ()

    def query(self) -> TableQuery:
        return TableQuery(table=self.table, filters=self.filters).select(self.column)

    def reduce(self, result: QueryResult) -> Number:
        return safe_average([to_number(row.get(self.column)) for row in result.rows])


Metric = CountMetric | SumMetric | AverageMetric


def safe_average(values: list[float]) -> float:
    if not values:
        return 0
    return sum(values) / len(values)


class SummaryAggregator:
    def __init__(
        self,
        source: TableSource,
        metrics: Mapping[str, Metric],
        *,
        module: str = "summary",
        logger: logging.Logger | None = None,
    ) -> None:
        self.source = source
        self.metrics = dict(metrics)
        self.module = module
        self.logger = logger or get_logger(__name__)

    def empty(self) -> dict[str, Number]:
        return {name: 0 for name in self.metrics}

    async def load(self) -> dict[str, Number]:
        names = list(self.metrics)
        try:
            values = await gather_all(*(self._run(self.metrics[name]) for name in names))
        except Exception as exc:
            log_action(
                self.logger,
                self.module,
                "summary.load",
                "error",
                trace_id=getattr(exc, "trace_id", None),
                level=logging.WARNING,
                error_code=getattr(exc, "code", type(exc).__name__),
            )
            raise
        summary = dict(zip(names, values))
        log_action(self.logger, self.module, "summary.load", "success", metrics=len(names))
        return summary

    async def _run(self, metric: Metric) -> Number:
        result = await self.source.execute(metric.query())
        return metric.reduce(result)


def _eq(column: str, value: Any) -> Filter:
    return Filter(column=column, op="eq", value=value)


CUSTOMER_SUMMARY: dict[str, Metric] = {
    "total": CountMetric("customers"),
    "active": CountMetric("customers", (_eq("status", "Active"),)),
    "avg_spent": AverageMetric("orders", "order_total"),
}

ORDER_SUMMARY: dict[str, Metric] = {
    "all": CountMetric("orders"),
    "pending": CountMetric("orders", (_eq("status", "Pending"),)),
    "completed": CountMetric("orders", (_eq("status", "Completed"),)),
    "cancelled": CountMetric("orders", (_eq("status", "Cancelled"),)),
}

PRODUCT_SUMMARY: dict[str, Metric] = {
    "all": CountMetric("products"),
    "published": CountMetric("products", (_eq("status", "Published"),)),
    "low_stock": CountMetric("products", (Filter(column="in_stock", op="lt", value=LOW_STOCK_THRESHOLD),)),
    "total_value": SumMetric("products", "total_value"),
}

SUMMARIES: dict[str, dict[str, Metric]] = {
    "customers": CUSTOMER_SUMMARY,
    "orders": ORDER_SUMMARY,
    "products": PRODUCT_SUMMARY,
}
