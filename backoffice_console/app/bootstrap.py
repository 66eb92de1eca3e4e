from __future__ import annotations

import asyncio
import logging
from types import TracebackType

from backoffice_console.app.config import AppConfig
from backoffice_console.app.dashboard import DashboardOverview
from backoffice_console.app.domain.resources import RESOURCES, ResourceDescriptor
from backoffice_console.app.infrastructure.logging.logger import get_logger, log_action
from backoffice_console.app.remote_table import RemoteTableViewModel
from backoffice_console.clients.postgrest_sdk.http_client import PostgrestHttpClient
from backoffice_console.clients.postgrest_sdk.table_client import PostgrestTableSource, TableSource


class ConsoleWorkspace:
    """Owns the data source and one view model per listing page plus the dashboard.

    Without an explicit ``source`` the workspace opens a PostgREST client from
    ``config`` and closes it again on exit.
    """

    def __init__(
        self,
        config: AppConfig,
        *,
        source: TableSource | None = None,
        resources: dict[str, ResourceDescriptor] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config
        self.logger = logger or get_logger("backoffice_console", config.log_level)
        self._http_client: PostgrestHttpClient | None = None
        if source is None:
            self._http_client = PostgrestHttpClient(config.client_config())
            source = PostgrestTableSource(self._http_client)
        self.source = source
        self.tables: dict[str, RemoteTableViewModel] = {
            name: RemoteTableViewModel(
                descriptor,
                source,
                page_size=config.default_page_size,
                debounce_ms=config.debounce_ms,
                locale=config.locale,
                logger=self.logger,
            )
            for name, descriptor in (resources or RESOURCES).items()
        }
        self.dashboard = DashboardOverview(source, locale=config.locale, logger=self.logger)

    def table(self, name: str) -> RemoteTableViewModel:
        try:
            return self.tables[name]
        except KeyError:
            raise ValueError(f"Unknown resource {name!r}; expected one of {sorted(self.tables)}") from None

    async def mount(self) -> None:
        await asyncio.gather(self.dashboard.load(), *(table.mount() for table in self.tables.values()))
        log_action(self.logger, "workspace", "workspace.mount", "success", tables=len(self.tables))

    async def close(self) -> None:
        for table in self.tables.values():
            await table.close()
        if self._http_client is not None:
            await self._http_client.aclose()

    async def __aenter__(self) -> "ConsoleWorkspace":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()
