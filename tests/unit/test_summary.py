import asyncio

import pytest

from backoffice_console.app.summary import (
    CUSTOMER_SUMMARY,
    ORDER_SUMMARY,
    PRODUCT_SUMMARY,
    AverageMetric,
    CountMetric,
    SummaryAggregator,
    safe_average,
)
from backoffice_console.clients.postgrest_sdk.errors import ApiError
from backoffice_console.clients.postgrest_sdk.memory_source import InMemoryTableSource


def test_average_of_empty_collection_is_zero() -> None:
    assert safe_average([]) == 0
    assert safe_average([10, 20]) == 15


@pytest.mark.asyncio
async def test_customer_summary_averages_order_totals(memory_source) -> None:
    summary = await SummaryAggregator(memory_source, CUSTOMER_SUMMARY, module="customers").load()

    assert summary["total"] == 25
    assert summary["active"] == 25
    assert summary["avg_spent"] == pytest.approx(104.5)


@pytest.mark.asyncio
async def test_customer_summary_with_no_orders_reports_zero_average() -> None:
    source = InMemoryTableSource({"customers": [], "orders": []})

    summary = await SummaryAggregator(source, CUSTOMER_SUMMARY).load()

    assert summary == {"total": 0, "active": 0, "avg_spent": 0}


@pytest.mark.asyncio
async def test_order_summary_counts_by_status(memory_source) -> None:
    summary = await SummaryAggregator(memory_source, ORDER_SUMMARY).load()

    assert summary == {"all": 10, "pending": 2, "completed": 4, "cancelled": 2}


@pytest.mark.asyncio
async def test_product_summary_counts_low_stock_and_sums_value(memory_source) -> None:
    summary = await SummaryAggregator(memory_source, PRODUCT_SUMMARY).load()

    assert summary == {"all": 4, "published": 2, "low_stock": 2, "total_value": 3320}


@pytest.mark.asyncio
async def test_summary_ignores_listing_state(memory_source) -> None:
    await SummaryAggregator(memory_source, ORDER_SUMMARY).load()

    assert all(query.search is None and query.offset is None for query in memory_source.executed)
    assert all(query.head for query in memory_source.executed)


@pytest.mark.asyncio
async def test_failing_metric_fails_the_whole_load() -> None:
    source = InMemoryTableSource({"customers": []})
    aggregator = SummaryAggregator(source, {"avg": AverageMetric("orders", "order_total")})

    with pytest.raises(ApiError):
        await aggregator.load()

    assert aggregator.empty() == {"avg": 0}


class _SlowFailingSource:
    """Every query fails; the ``orders`` ones only after a short delay."""

    def __init__(self) -> None:
        self.finished: list[str] = []

    async def execute(self, query):
        if query.table == "orders":
            await asyncio.sleep(0.01)
        self.finished.append(query.table)
        raise ApiError(code="PGRST000", message=f"{query.table} down", status_code=503)


@pytest.mark.asyncio
async def test_failed_load_waits_for_every_sub_query() -> None:
    source = _SlowFailingSource()
    aggregator = SummaryAggregator(source, {"customers": CountMetric("customers"), "orders": CountMetric("orders")})

    with pytest.raises(ApiError) as exc_info:
        await aggregator.load()

    assert exc_info.value.message == "customers down"
    assert sorted(source.finished) == ["customers", "orders"]
