import pytest

from backoffice_console.clients.postgrest_sdk.memory_source import InMemoryTableSource
from tests.helpers import make_customers, make_orders, make_products


@pytest.fixture
def memory_source() -> InMemoryTableSource:
    return InMemoryTableSource(
        {
            "customers": make_customers(25),
            "orders": make_orders(),
            "products": make_products(),
            "analytics_daily": [],
        }
    )
