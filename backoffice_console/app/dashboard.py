from __future__ import annotations

import datetime as dt
import logging
from collections.abc import Callable
from typing import Any, Literal

from backoffice_console.app.domain.models import ACTIVE_ORDER_STATUSES, AnalyticsDaily, Order
from backoffice_console.app.error_presenter import build_error_payload
from backoffice_console.app.formatting import DEFAULT_LOCALE, format_count, format_currency, parse_date
from backoffice_console.app.infrastructure.logging.logger import get_logger, log_action
from backoffice_console.app.summary import CountMetric, Metric, Number, SumMetric, SummaryAggregator, gather_all
from backoffice_console.clients.postgrest_sdk.query import Filter, TableQuery
from backoffice_console.clients.postgrest_sdk.table_client import TableSource

ChartMode = Literal["sales", "orders", "customers"]

CHART_WINDOW_DAYS = 30
RECENT_ORDERS_LIMIT = 5
ANALYTICS_COLUMNS = ("id", "date", "total_sales", "orders_count", "new_customers", "page_views", "created_at")
RECENT_ORDER_COLUMNS = ("id", "order_number", "customer_name", "order_total", "status", "order_date")

# mode -> (analytics column, caption, legend)
CHART_MODES: dict[str, tuple[str, str, str]] = {
    "sales": ("total_sales", "Daily revenue · last 30 days", "Daily Revenue"),
    "orders": ("orders_count", "Order volume · last 30 days", "Order Count"),
    "customers": ("new_customers", "New customers · last 30 days", "New Customers"),
}


def _status(value: str) -> tuple[Filter, ...]:
    return (Filter(column="status", op="eq", value=value),)


DASHBOARD_METRICS: dict[str, Metric] = {
    "total_sales": SumMetric("orders", "order_total", _status("Completed")),
    "total_orders": CountMetric("orders"),
    "total_customers": CountMetric("customers"),
    "active_orders": CountMetric("orders", (Filter(column="status", op="in", value=ACTIVE_ORDER_STATUSES),)),
    "products_all": CountMetric("products"),
    "products_published": CountMetric("products", _status("Published")),
    "orders_all": CountMetric("orders"),
    "orders_pending": CountMetric("orders", _status("Pending")),
    "orders_completed": CountMetric("orders", _status("Completed")),
}


class DashboardOverview:
    """Read-only landing page figures: KPIs, stat cards, daily series and recent orders."""

    error_message = "Failed to load dashboard. Please try again."

    def __init__(
        self,
        source: TableSource,
        *,
        locale: str = DEFAULT_LOCALE,
        today: Callable[[], dt.date] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.source = source
        self.locale = locale
        self.logger = logger or get_logger(__name__)
        self._today = today or (lambda: dt.datetime.now(dt.timezone.utc).date())
        self._figures = SummaryAggregator(source, DASHBOARD_METRICS, module="dashboard", logger=self.logger)

        self.figures: dict[str, Number] = self._figures.empty()
        self.chart: list[AnalyticsDaily] = []
        self.recent_orders: list[Order] = []
        self.chart_mode: ChartMode = "sales"
        self.loading = False
        self.error: str | None = None
        self.error_detail: dict[str, Any] | None = None

    def chart_query(self) -> TableQuery:
        since = self._today() - dt.timedelta(days=CHART_WINDOW_DAYS)
        return (
            TableQuery(table="analytics_daily")
            .select(*ANALYTICS_COLUMNS)
            .gte("date", since.isoformat())
            .order("date", ascending=True)
        )

    def recent_orders_query(self) -> TableQuery:
        return (
            TableQuery(table="orders")
            .select(*RECENT_ORDER_COLUMNS)
            .order("created_at", ascending=False)
            .limit(RECENT_ORDERS_LIMIT)
        )

    async def load(self) -> bool:
        self.loading = True
        try:
            figures, chart_result, recent_result = await gather_all(
                self._figures.load(),
                self.source.execute(self.chart_query()),
                self.source.execute(self.recent_orders_query()),
            )
            chart = [AnalyticsDaily.model_validate(item) for item in chart_result.rows]
            recent = [Order.model_validate(item) for item in recent_result.rows]
        except Exception as exc:
            self.error = self.error_message
            self.error_detail = build_error_payload(exc)
            log_action(
                self.logger,
                "dashboard",
                "dashboard.load",
                "error",
                trace_id=self.error_detail["trace_id"],
                level=logging.WARNING,
                error_code=self.error_detail["code"],
            )
            return False
        finally:
            self.loading = False

        self.figures = figures
        self.chart = chart
        self.recent_orders = recent
        self.error = None
        self.error_detail = None
        log_action(
            self.logger,
            "dashboard",
            "dashboard.load",
            "success",
            chart_points=len(chart),
            recent_orders=len(recent),
        )
        return True

    def set_chart_mode(self, mode: str) -> None:
        if mode not in CHART_MODES:
            raise ValueError(f"Unknown chart mode {mode!r}; expected one of {sorted(CHART_MODES)}")
        self.chart_mode = mode  # type: ignore[assignment]

    def chart_series(self, mode: str | None = None) -> list[tuple[dt.date, Number]]:
        mode = mode or self.chart_mode
        if mode not in CHART_MODES:
            raise ValueError(f"Unknown chart mode {mode!r}; expected one of {sorted(CHART_MODES)}")
        column = CHART_MODES[mode][0]
        return [(parse_date(point.date), getattr(point, column)) for point in self.chart]

    def chart_total(self, mode: str | None = None) -> Number:
        return sum(value for _, value in self.chart_series(mode))

    def chart_total_label(self, mode: str | None = None) -> str:
        mode = mode or self.chart_mode
        if not self.chart:
            return ""
        total = self.chart_total(mode)
        if mode == "sales":
            return f"Total: {format_currency(total, self.locale)}"
        if mode == "orders":
            return f"Total: {format_count(total, self.locale)} orders"
        return f"Total: {format_count(total, self.locale)} new customers"

    def snapshot(self) -> dict[str, Any]:
        column, caption, legend = CHART_MODES[self.chart_mode]
        return {
            "kpis": {
                "total_sales": self.figures["total_sales"],
                "total_orders": self.figures["total_orders"],
                "total_customers": self.figures["total_customers"],
                "active_orders": self.figures["active_orders"],
            },
            "product_stats": {
                "all": self.figures["products_all"],
                "published": self.figures["products_published"],
            },
            "order_stats": {
                "all": self.figures["orders_all"],
                "pending": self.figures["orders_pending"],
                "completed": self.figures["orders_completed"],
            },
            "chart": {
                "mode": self.chart_mode,
                "column": column,
                "caption": caption,
                "legend": legend,
                "points": self.chart_series(),
                "total_label": self.chart_total_label(),
            },
            "recent_orders": list(self.recent_orders),
            "loading": self.loading,
            "error": self.error,
            "error_detail": self.error_detail,
        }
