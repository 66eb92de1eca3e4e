from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: Any | None = None
    hint: str | None = None
    trace_id: str | None = None
    status_code: int | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"

    @classmethod
    def from_http_response(cls, response: httpx.Response) -> "ApiError":
        trace_id = _extract_trace_id(response)
        try:
            payload = response.json()
        except ValueError:
            return cls(
                code="HTTP_ERROR",
                message=response.text or "HTTP request failed",
                trace_id=trace_id,
                status_code=response.status_code,
            )

        if isinstance(payload, dict):
            return cls(
                code=str(payload.get("code") or "HTTP_ERROR"),
                message=str(payload.get("message") or response.text or "HTTP request failed"),
                details=payload.get("details"),
                hint=payload.get("hint"),
                trace_id=trace_id,
                status_code=response.status_code,
            )

        return cls(
            code="HTTP_ERROR",
            message=response.text or "HTTP request failed",
            details=payload,
            trace_id=trace_id,
            status_code=response.status_code,
        )


class TransportError(ApiError):
    """Network/timeout failure before an HTTP response was returned."""


class ResponseFormatError(ApiError):
    """The service answered, but the body or Content-Range could not be read."""


def _extract_trace_id(response: httpx.Response) -> str | None:
    return (
        response.headers.get("X-Trace-ID")
        or response.headers.get("X-Request-ID")
        or response.headers.get("sb-request-id")
    )
