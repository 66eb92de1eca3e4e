import pytest

from backoffice_console.clients.postgrest_sdk.errors import ApiError
from backoffice_console.clients.postgrest_sdk.memory_source import InMemoryTableSource
from backoffice_console.clients.postgrest_sdk.query import TableQuery


def _source() -> InMemoryTableSource:
    return InMemoryTableSource(
        {
            "customers": [
                {"id": "a", "name": "Jane Doe", "email": "jane@example.com", "total_spent": 50, "status": "Active"},
                {"id": "b", "name": "John Roe", "email": "JANE.R@example.com", "total_spent": None, "status": "Active"},
                {"id": "c", "name": "Ann Lee", "email": "ann@example.com", "total_spent": 50, "status": "Inactive"},
                {"id": "d", "name": "Bo Kim", "email": "bo@example.com", "total_spent": 10, "status": "Active"},
            ]
        }
    )


@pytest.mark.asyncio
async def test_search_is_case_insensitive_and_or_combined() -> None:
    source = _source()

    result = await source.execute(TableQuery(table="customers").ilike_any(("name", "email"), "JANE"))

    assert [row["id"] for row in result.rows] == ["a", "b"]


@pytest.mark.asyncio
async def test_count_reflects_filter_not_page() -> None:
    source = _source()
    query = TableQuery(table="customers").select("*", count="exact").eq("status", "Active").range(0, 0)

    result = await source.execute(query)

    assert len(result.rows) == 1
    assert result.total_count == 3


@pytest.mark.asyncio
async def test_head_query_returns_only_count() -> None:
    source = _source()

    result = await source.execute(TableQuery(table="customers").select("*", count="exact", head=True))

    assert result.rows == []
    assert result.total_count == 4


@pytest.mark.asyncio
async def test_order_puts_nulls_first_when_descending_and_breaks_ties() -> None:
    source = _source()
    query = TableQuery(table="customers").order("total_spent", ascending=False).order("id")

    result = await source.execute(query)

    assert [row["id"] for row in result.rows] == ["b", "a", "c", "d"]


@pytest.mark.asyncio
async def test_comparison_filters_skip_nulls() -> None:
    source = _source()

    result = await source.execute(TableQuery(table="customers").lt("total_spent", 20))

    assert [row["id"] for row in result.rows] == ["d"]


@pytest.mark.asyncio
async def test_projection_limits_columns() -> None:
    source = _source()

    result = await source.execute(TableQuery(table="customers").select("id", "status").limit(1))

    assert result.rows == [{"id": "a", "status": "Active"}]


@pytest.mark.asyncio
async def test_unknown_table_raises_api_error() -> None:
    source = _source()

    with pytest.raises(ApiError) as exc_info:
        await source.execute(TableQuery(table="refunds"))

    assert exc_info.value.code == "42P01"
    assert source.executed[-1].table == "refunds"
