from __future__ import annotations

from typing import Any

from backoffice_console.clients.postgrest_sdk.errors import ResponseFormatError


def parse_content_range(value: str | None) -> int | None:
    """Return the total from a ``Content-Range`` header such as ``0-9/25`` or ``*/0``."""
    if not value:
        return None
    _, _, total = value.strip().rpartition("/")
    if total in {"", "*"}:
        return None
    try:
        parsed = int(total)
    except ValueError as exc:
        raise ResponseFormatError(
            code="BAD_CONTENT_RANGE",
            message="Could not read total count from the response",
            details=value,
        ) from exc
    if parsed < 0:
        raise ResponseFormatError(code="BAD_CONTENT_RANGE", message="Negative total count", details=value)
    return parsed


def normalize_rows(payload: Any) -> list[dict[str, Any]]:
    if payload is None:
        return []
    if isinstance(payload, dict):
        return [payload]
    if isinstance(payload, list):
        return [row for row in payload if isinstance(row, dict)]
    raise ResponseFormatError(
        code="BAD_PAYLOAD",
        message="Expected a JSON array of rows",
        details=type(payload).__name__,
    )


def to_number(value: Any) -> float:
    try:
        if value is None or value == "":
            return 0.0
        return float(value)
    except (TypeError, ValueError):
        return 0.0
