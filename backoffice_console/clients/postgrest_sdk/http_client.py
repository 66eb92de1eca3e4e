from __future__ import annotations

from typing import Any

import httpx

from backoffice_console.clients.postgrest_sdk.config import ClientConfig
from backoffice_console.clients.postgrest_sdk.errors import ApiError, TransportError


class PostgrestHttpClient:
    """Explicitly owned async HTTP handle for the hosted REST endpoint.

    The underlying ``httpx.AsyncClient`` is created lazily unless one is
    injected; an injected client is never closed by this handle.
    """

    def __init__(self, config: ClientConfig, client: httpx.AsyncClient | None = None) -> None:
        self.config = config
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "PostgrestHttpClient":
        self._ensure_client()
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    @property
    def is_closed(self) -> bool:
        return self._client is None or self._client.is_closed

    def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None or (self._owns_client and self._client.is_closed):
            self._client = httpx.AsyncClient(
                base_url=self.config.rest_url,
                timeout=self.config.timeout_seconds,
                verify=self.config.verify_ssl,
            )
            self._owns_client = True
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    def _default_headers(self) -> dict[str, str]:
        return {
            "apikey": self.config.api_key,
            "Authorization": f"Bearer {self.config.bearer_token}",
            "Accept": "application/json",
        }

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: list[tuple[str, str]] | None = None,
        headers: dict[str, str] | None = None,
        allow_statuses: tuple[int, ...] = (),
    ) -> httpx.Response:
        client = self._ensure_client()
        request_headers = self._default_headers()
        request_headers.update(headers or {})
        normalized_path = path if path.startswith("/") else f"/{path}"

        try:
            response = await client.request(
                method.upper(),
                normalized_path,
                params=params,
                headers=request_headers,
            )
        except httpx.TimeoutException as exc:
            raise TransportError(
                code="TIMEOUT_ERROR",
                message="The data service took too long to respond",
                details=str(exc),
                status_code=0,
            ) from exc
        except httpx.TransportError as exc:
            raise TransportError(
                code="NETWORK_ERROR",
                message="Could not reach the data service",
                details=str(exc),
                status_code=0,
            ) from exc

        if response.status_code >= 400 and response.status_code not in allow_statuses:
            raise ApiError.from_http_response(response)
        return response
