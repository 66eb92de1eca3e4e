from __future__ import annotations

import asyncio
from typing import Any

from backoffice_console.clients.postgrest_sdk.errors import ApiError
from backoffice_console.clients.postgrest_sdk.memory_source import InMemoryTableSource
from backoffice_console.clients.postgrest_sdk.query import QueryResult, TableQuery


def make_customers(count: int, *, name: str = "Customer", status: str = "Active", start: int = 0) -> list[dict[str, Any]]:
    return [
        {
            "id": f"cus-{start + index:03d}",
            "name": f"{name} {start + index:03d}",
            "email": f"{name.lower()}{start + index}@example.com",
            "phone": None,
            "orders_count": index % 7,
            "total_spent": 1000 - index * 10,
            "customer_since": f"2024-01-{(index % 28) + 1:02d}",
            "status": status,
            "created_at": "2024-01-01T00:00:00Z",
        }
        for index in range(count)
    ]


def make_orders() -> list[dict[str, Any]]:
    statuses = ["Completed", "Completed", "Pending", "In-Progress", "Cancelled"]
    return [
        {
            "id": f"ord-{index:03d}",
            "order_number": f"#{1000 + index}",
            "customer_id": f"cus-{index:03d}",
            "customer_name": f"Buyer {index}",
            "order_date": f"2024-02-{index + 1:02d}",
            "order_type": "Home Delivery",
            "tracking_id": f"TRK{index}",
            "order_total": 100.0 + index,
            "status": statuses[index % len(statuses)],
            "items_count": 1,
            "created_at": f"2024-02-{index + 1:02d}T08:00:00Z",
        }
        for index in range(10)
    ]


def make_products() -> list[dict[str, Any]]:
    return [
        {"id": 1, "name": "Desk", "category": "Furniture", "unit_price": 200, "in_stock": 4, "discount_percent": 0, "total_value": 800, "status": "Published"},
        {"id": 2, "name": "Chair", "category": "Furniture", "unit_price": 80, "in_stock": 25, "discount_percent": 10, "total_value": 2000, "status": "Published"},
        {"id": 3, "name": "Lamp", "category": "Lighting", "unit_price": 30, "in_stock": 9, "discount_percent": 5, "total_value": 270, "status": "Draft"},
        {"id": 4, "name": "Bulb", "category": "Lighting", "unit_price": 2.5, "in_stock": 100, "discount_percent": 0, "total_value": 250, "status": "Unpublished"},
    ]


class GatedSource:
    """Holds every query until the test releases it, so completion order can be chosen.

    Queries whose index is in ``failing`` raise once released.
    """

    def __init__(self, inner: InMemoryTableSource) -> None:
        self.inner = inner
        self.queries: list[TableQuery] = []
        self.gates: list[asyncio.Event] = []
        self.failing: set[int] = set()

    async def execute(self, query: TableQuery) -> QueryResult:
        index = len(self.gates)
        gate = asyncio.Event()
        self.queries.append(query)
        self.gates.append(gate)
        await gate.wait()
        if index in self.failing:
            raise ApiError(code="PGRST000", message="upstream down", status_code=503)
        return await self.inner.execute(query)


class FlakySource:
    """Delegates to ``inner`` until ``fail`` is switched on."""

    def __init__(self, inner: InMemoryTableSource) -> None:
        self.inner = inner
        self.fail = False
        self.calls = 0

    async def execute(self, query: TableQuery) -> QueryResult:
        self.calls += 1
        if self.fail:
            raise ApiError(code="PGRST000", message="upstream down", trace_id="trace-500", status_code=503)
        return await self.inner.execute(query)
