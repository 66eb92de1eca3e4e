from __future__ import annotations

from typing import Any

from backoffice_console.clients.postgrest_sdk.errors import ApiError, ResponseFormatError, TransportError


def build_error_payload(error: Exception) -> dict[str, Any]:
    if isinstance(error, ApiError):
        category = _classify_api_error(error)
        return {
            "category": category,
            "code": error.code,
            "message": error.message,
            "trace_id": error.trace_id,
            "status_code": error.status_code,
            "action": _suggest_action(category),
        }
    return {
        "category": "internal",
        "code": "INTERNAL_ERROR",
        "message": str(error),
        "trace_id": None,
        "status_code": None,
        "action": _suggest_action("internal"),
    }


def _classify_api_error(error: ApiError) -> str:
    if isinstance(error, TransportError):
        return "network"
    if isinstance(error, ResponseFormatError):
        return "server"
    if error.status_code == 401:
        return "auth"
    if error.status_code == 403:
        return "permission"
    if error.status_code in {400, 404, 406, 416, 422}:
        return "validation"
    if error.status_code and error.status_code >= 500:
        return "server"
    return "internal"


def _suggest_action(category: str) -> str:
    if category in {"network", "server"}:
        return "Retry"
    if category == "auth":
        return "Sign in again"
    if category == "permission":
        return "Ask an administrator for access"
    return "Contact support"
