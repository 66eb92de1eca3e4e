from backoffice_console.clients.postgrest_sdk.config import ClientConfig, ConfigError
from backoffice_console.clients.postgrest_sdk.errors import ApiError, ResponseFormatError, TransportError
from backoffice_console.clients.postgrest_sdk.http_client import PostgrestHttpClient
from backoffice_console.clients.postgrest_sdk.memory_source import InMemoryTableSource
from backoffice_console.clients.postgrest_sdk.query import QueryResult, TableQuery
from backoffice_console.clients.postgrest_sdk.table_client import PostgrestTableSource, TableSource

__all__ = [
    "ClientConfig",
    "ConfigError",
    "ApiError",
    "TransportError",
    "ResponseFormatError",
    "PostgrestHttpClient",
    "PostgrestTableSource",
    "InMemoryTableSource",
    "TableSource",
    "TableQuery",
    "QueryResult",
]
