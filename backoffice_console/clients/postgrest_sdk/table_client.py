from __future__ import annotations

from typing import Protocol

from backoffice_console.clients.postgrest_sdk.errors import ApiError, ResponseFormatError
from backoffice_console.clients.postgrest_sdk.http_client import PostgrestHttpClient
from backoffice_console.clients.postgrest_sdk.normalizers import normalize_rows, parse_content_range
from backoffice_console.clients.postgrest_sdk.query import QueryResult, TableQuery

RANGE_NOT_SATISFIABLE = 416


class TableSource(Protocol):
    async def execute(self, query: TableQuery) -> QueryResult:
        ...


class PostgrestTableSource:
    def __init__(self, http_client: PostgrestHttpClient) -> None:
        self.http_client = http_client

    async def execute(self, query: TableQuery) -> QueryResult:
        parts = query.to_request()
        response = await self.http_client.request(
            parts.method,
            parts.path,
            params=parts.params,
            headers=parts.headers,
            allow_statuses=(RANGE_NOT_SATISFIABLE,),
        )

        total_count = parse_content_range(response.headers.get("Content-Range")) if query.count else None
        if response.status_code == RANGE_NOT_SATISFIABLE:
            # offset past the end: PostgREST still reports the total as "*/N"
            if total_count is None:
                raise ApiError.from_http_response(response)
            return QueryResult(rows=[], total_count=total_count)
        if query.head:
            return QueryResult(rows=[], total_count=total_count)
        if not response.content:
            return QueryResult(rows=[], total_count=total_count)
        try:
            payload = response.json()
        except ValueError as exc:
            raise ResponseFormatError(
                code="BAD_PAYLOAD",
                message="The data service returned a non-JSON body",
                status_code=response.status_code,
            ) from exc
        return QueryResult(rows=normalize_rows(payload), total_count=total_count)
