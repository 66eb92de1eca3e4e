from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Generic, TypeVar

ALL = "all"

T = TypeVar("T")


def clean_filters(filters: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in filters.items() if value not in (None, "", ALL)}


def is_active(value: Any) -> bool:
    return value not in (None, "", ALL)


class Debouncer(Generic[T]):
    """Delays ``callback`` until ``wait_ms`` pass with no further ``push``.

    Every push cancels the pending timer and starts a new one, so at most one
    callback fires per quiet interval and it always receives the last value.
    Must be used from inside a running event loop.
    """

    def __init__(self, wait_ms: int, callback: Callable[[T], None]) -> None:
        self.wait_ms = max(0, wait_ms)
        self._callback = callback
        self._handle: asyncio.TimerHandle | None = None
        self._pending_value: T | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def push(self, value: T) -> None:
        self.cancel()
        if self.wait_ms == 0:
            self._callback(value)
            return
        loop = asyncio.get_running_loop()
        self._pending_value = value
        self._handle = loop.call_later(self.wait_ms / 1000, self._fire)

    def flush(self) -> None:
        if self._handle is None:
            return
        self._fire()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending_value = None

    def _fire(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        value = self._pending_value
        self._handle = None
        self._pending_value = None
        self._callback(value)  # type: ignore[arg-type]
