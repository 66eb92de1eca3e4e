from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ViewStateStatus(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    FILTERED_EMPTY = "filtered_empty"
    SUCCESS = "success"
    PARTIAL_ERROR = "partial_error"
    FATAL_ERROR = "fatal_error"


@dataclass(frozen=True)
class ViewState:
    status: ViewStateStatus
    message: str | None = None
    trace_id: str | None = None
    data_available: bool = False

    def render(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "message": self.message,
            "trace_id": self.trace_id,
            "data_available": self.data_available,
        }


def resolve_state(
    *,
    is_loading: bool,
    error: str | None,
    has_data: bool,
    filters_active: bool = False,
    trace_id: str | None = None,
) -> ViewState:
    if is_loading:
        return ViewState(ViewStateStatus.LOADING, "Loading data...", trace_id=trace_id, data_available=has_data)
    if error and has_data:
        return ViewState(ViewStateStatus.PARTIAL_ERROR, error, trace_id=trace_id, data_available=True)
    if error:
        return ViewState(ViewStateStatus.FATAL_ERROR, error, trace_id=trace_id)
    if not has_data and filters_active:
        return ViewState(ViewStateStatus.FILTERED_EMPTY, "No results match the current filters", trace_id=trace_id)
    if not has_data:
        return ViewState(ViewStateStatus.EMPTY, "No data found", trace_id=trace_id)
    return ViewState(ViewStateStatus.SUCCESS, "Ready", trace_id=trace_id, data_available=True)


@dataclass(frozen=True)
class RetryPanel:
    operation: str
    has_error: bool

    def render(self) -> dict[str, object]:
        return {
            "operation": self.operation,
            "enabled": self.has_error,
            "label": "Try again" if self.has_error else None,
        }
