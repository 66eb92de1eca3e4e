"""Generic paginated, sortable, filterable view model over a remote table.

One ``RemoteTableViewModel`` drives one listing page. Setters are synchronous:
they mutate the query state and schedule a fetch on the running event loop.
Every fetch takes a sequence number when it is issued and only the most
recently issued fetch may commit rows, counts, errors or the loading flag.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Hashable, Mapping
from datetime import datetime, timezone
from typing import Any

from backoffice_console.app.config import DEFAULT_DEBOUNCE_MS
from backoffice_console.app.domain.models import Row
from backoffice_console.app.domain.resources import ResourceDescriptor
from backoffice_console.app.error_presenter import build_error_payload
from backoffice_console.app.formatting import DEFAULT_LOCALE
from backoffice_console.app.infrastructure.logging.logger import get_logger, log_action
from backoffice_console.app.state import QueryState, SelectionState
from backoffice_console.app.summary import SUMMARIES, Metric, Number, SummaryAggregator
from backoffice_console.app.ui.filters import ALL, Debouncer, is_active
from backoffice_console.app.ui.listing_view import SKELETON_ROWS, render_rows, sort_indicator, toggle_sort
from backoffice_console.app.ui.pagination import clamp_page, page_count, range_label, row_range, validate_page_size
from backoffice_console.app.ui.view_state import RetryPanel, resolve_state
from backoffice_console.clients.postgrest_sdk.query import TableQuery
from backoffice_console.clients.postgrest_sdk.table_client import TableSource


def build_table_query(descriptor: ResourceDescriptor, state: QueryState) -> TableQuery:
    query = TableQuery(table=descriptor.name).select(*descriptor.select_columns, count="exact")
    if state.effective_search:
        query = query.ilike_any(descriptor.searchable_fields, state.effective_search)
    if descriptor.status_field and is_active(state.status_filter):
        query = query.eq(descriptor.status_field, state.status_filter)
    for name in descriptor.extra_filter_fields:
        value = state.extra_filters.get(name, ALL)
        if is_active(value):
            query = query.eq(name, value)
    query = query.order(state.sort_column, ascending=state.sort_direction == "asc")
    if state.sort_column != descriptor.id_field:
        query = query.order(descriptor.id_field, ascending=True)
    start, end = row_range(state.page, state.page_size)
    return query.range(start, end)


class RemoteTableViewModel:
    def __init__(
        self,
        descriptor: ResourceDescriptor,
        source: TableSource,
        *,
        summary_metrics: Mapping[str, Metric] | None = None,
        page_size: int = 10,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
        locale: str = DEFAULT_LOCALE,
        auto_fetch: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.source = source
        self.locale = locale
        self.auto_fetch = auto_fetch
        self.logger = logger or get_logger(__name__)
        self.query = QueryState.defaults(descriptor, page_size)
        self.selection = SelectionState()

        self.rows: list[Row] = []
        self.total_count = 0
        self.loading = False
        self.error: str | None = None
        self.error_detail: dict[str, Any] | None = None
        self.last_loaded_at: datetime | None = None

        metrics = SUMMARIES.get(descriptor.name, {}) if summary_metrics is None else summary_metrics
        self._summary = SummaryAggregator(source, metrics, module=descriptor.name, logger=self.logger)
        self.summary: dict[str, Number] = self._summary.empty()
        self.summary_error: str | None = None
        self.summary_error_detail: dict[str, Any] | None = None

        self._sequence = 0
        self._background_fetch = False
        self._tasks: set[asyncio.Task[Any]] = set()
        self._debouncer: Debouncer[str] = Debouncer(debounce_ms, self._commit_search)

    # -- derived values -------------------------------------------------

    @property
    def page_count(self) -> int:
        return page_count(self.total_count, self.query.page_size)

    def compute_page_count(self) -> int:
        return self.page_count

    @property
    def visible_ids(self) -> list[Hashable]:
        id_field = self.descriptor.id_field
        return [getattr(row, id_field) for row in self.rows]

    @property
    def all_selected(self) -> bool:
        return self.selection.is_all_selected(self.visible_ids)

    @property
    def partially_selected(self) -> bool:
        return self.selection.is_partial(self.visible_ids)

    @property
    def has_active_filters(self) -> bool:
        return self.query.has_active_filters()

    @property
    def search_pending(self) -> bool:
        return self._debouncer.pending

    # -- query setters --------------------------------------------------

    def set_search_text(self, text: str) -> None:
        self.query.search_text = text
        self._debouncer.push(text)

    def flush_search(self) -> None:
        self._debouncer.flush()

    def set_status_filter(self, value: str) -> None:
        if not self.descriptor.status_field:
            raise ValueError(f"{self.descriptor.name} has no status filter")
        self._check_option(value, self.descriptor.status_options, self.descriptor.status_field)

        def apply(state: QueryState) -> None:
            state.status_filter = value or ALL
            state.page = 1

        self._mutate(apply)

    def set_filter(self, name: str, value: str) -> None:
        if name == self.descriptor.status_field:
            self.set_status_filter(value)
            return
        if name not in self.descriptor.extra_filter_fields:
            raise ValueError(f"{self.descriptor.name} cannot be filtered by {name!r}")

        def apply(state: QueryState) -> None:
            state.extra_filters[name] = value or ALL
            state.page = 1

        self._mutate(apply)

    def set_category_filter(self, value: str) -> None:
        self.set_filter("category", value)

    def clear_filters(self) -> None:
        self._debouncer.cancel()

        def apply(state: QueryState) -> None:
            state.search_text = ""
            state.effective_search = ""
            state.status_filter = ALL
            state.extra_filters = {name: ALL for name in self.descriptor.extra_filter_fields}
            state.page = 1

        self._mutate(apply)

    def set_sort(self, column: str) -> None:
        if column not in self.descriptor.sortable_columns:
            raise ValueError(f"{self.descriptor.name} cannot be sorted by {column!r}")

        def apply(state: QueryState) -> None:
            state.sort_column, state.sort_direction = toggle_sort(state.sort_column, state.sort_direction, column)

        self._mutate(apply, background=True)

    def set_page(self, page: int) -> None:
        target = clamp_page(page, self.page_count)

        def apply(state: QueryState) -> None:
            state.page = target

        self._mutate(apply)

    def next_page(self) -> None:
        self.set_page(self.query.page + 1)

    def prev_page(self) -> None:
        self.set_page(self.query.page - 1)

    def set_page_size(self, size: int) -> None:
        validate_page_size(size)

        def apply(state: QueryState) -> None:
            state.page_size = size
            state.page = 1

        self._mutate(apply)

    # -- selection ------------------------------------------------------

    def toggle_select_all(self, checked: bool) -> None:
        if checked:
            self.selection.select_all(self.visible_ids)
        else:
            self.selection.clear()

    def toggle_row(self, row_id: Hashable, checked: bool) -> bool:
        return self.selection.toggle(row_id, checked, self.visible_ids)

    def selected_rows(self) -> list[Row]:
        id_field = self.descriptor.id_field
        return [row for row in self.rows if getattr(row, id_field) in self.selection.ids]

    # -- fetching -------------------------------------------------------

    async def mount(self) -> None:
        await asyncio.gather(self.fetch(), self.refresh_summary())

    async def fetch(self, *, background: bool = False) -> bool:
        """Fetch the current page. Returns ``True`` when the result was committed."""
        sequence, query = self._begin_fetch(background)
        return await self._run_fetch(sequence, query)

    async def retry(self) -> bool:
        return await self.fetch()

    async def refresh_summary(self) -> dict[str, Number]:
        try:
            summary = await self._summary.load()
        except Exception as exc:
            self.summary_error = f"Failed to load {self.descriptor.label} summary."
            self.summary_error_detail = build_error_payload(exc)
            return self.summary
        self.summary = summary
        self.summary_error = None
        self.summary_error_detail = None
        return summary

    async def wait_idle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        self._debouncer.cancel()
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self.loading = False

    def _commit_search(self, text: str) -> None:
        term = text.strip()
        if term == self.query.effective_search:
            return

        def apply(state: QueryState) -> None:
            state.effective_search = term
            state.page = 1

        log_action(self.logger, self.descriptor.name, "listing.search", "committed", search_length=len(term))
        self._mutate(apply)

    def _mutate(self, apply: Callable[[QueryState], None], *, background: bool = False) -> None:
        before = self.query.fetch_key()
        apply(self.query)
        if self.query.fetch_key() == before:
            return
        self._schedule_fetch(background)

    def _schedule_fetch(self, background: bool) -> asyncio.Task[bool] | None:
        if not self.auto_fetch:
            return None
        sequence, query = self._begin_fetch(background)
        task = asyncio.get_running_loop().create_task(self._run_fetch(sequence, query))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def _begin_fetch(self, background: bool) -> tuple[int, TableQuery]:
        self._sequence += 1
        self.loading = True
        self._background_fetch = background
        query = build_table_query(self.descriptor, self.query)
        log_action(
            self.logger,
            self.descriptor.name,
            "listing.fetch",
            "started",
            sequence=self._sequence,
            page=self.query.page,
            page_size=self.query.page_size,
            sort=f"{self.query.sort_column}.{self.query.sort_direction}",
            search_length=len(self.query.effective_search),
            filters=self.query.active_filters(),
        )
        return self._sequence, query

    async def _run_fetch(self, sequence: int, query: TableQuery) -> bool:
        try:
            result = await self.source.execute(query)
            rows = [self.descriptor.row_model.model_validate(item) for item in result.rows]
        except Exception as exc:
            if sequence != self._sequence:
                self._log_stale(sequence)
                return False
            self.loading = False
            self.error = self.descriptor.load_error_message
            self.error_detail = build_error_payload(exc)
            log_action(
                self.logger,
                self.descriptor.name,
                "listing.fetch",
                "error",
                trace_id=self.error_detail["trace_id"],
                level=logging.WARNING,
                sequence=sequence,
                error_code=self.error_detail["code"],
                category=self.error_detail["category"],
            )
            return False

        if sequence != self._sequence:
            self._log_stale(sequence)
            return False

        offset = query.offset or 0
        self.rows = rows
        self.total_count = result.total_count if result.total_count is not None else offset + len(rows)
        self.selection.clear()
        self.loading = False
        self.error = None
        self.error_detail = None
        self.last_loaded_at = datetime.now(timezone.utc)
        log_action(
            self.logger,
            self.descriptor.name,
            "listing.fetch",
            "success",
            sequence=sequence,
            rows=len(rows),
            total_count=self.total_count,
        )

        clamped = clamp_page(self.query.page, self.page_count)
        if clamped != self.query.page:
            self.query.page = clamped
            self._schedule_fetch(background=False)
        return True

    def _log_stale(self, sequence: int) -> None:
        log_action(
            self.logger,
            self.descriptor.name,
            "listing.fetch",
            "discarded",
            level=logging.DEBUG,
            sequence=sequence,
            latest=self._sequence,
        )

    def _check_option(self, value: str, options: tuple[str, ...], name: str) -> None:
        if not is_active(value) or not options:
            return
        if value not in options:
            raise ValueError(f"{value!r} is not a valid {name} for {self.descriptor.name}")

    # -- presentation ---------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        visible_ids = self.visible_ids
        view_state = resolve_state(
            is_loading=self.loading,
            error=self.error,
            has_data=bool(self.rows),
            filters_active=self.has_active_filters,
            trace_id=(self.error_detail or {}).get("trace_id"),
        )
        return {
            "resource": self.descriptor.name,
            "rows": list(self.rows),
            "display_rows": render_rows(self.rows, self.descriptor.columns, self.locale),
            "loading": self.loading,
            "placeholder_rows": SKELETON_ROWS if self.loading and not self._background_fetch else 0,
            "error": self.error,
            "error_detail": self.error_detail,
            "total_count": self.total_count,
            "page": self.query.page,
            "page_size": self.query.page_size,
            "page_count": self.page_count,
            "range_label": range_label(self.query.page, self.query.page_size, self.total_count),
            "sort_column": self.query.sort_column,
            "sort_direction": self.query.sort_direction,
            "sort_indicators": {
                column.key: sort_indicator(column.key, self.query.sort_column, self.query.sort_direction)
                for column in self.descriptor.columns
                if column.sortable
            },
            "search_text": self.query.search_text,
            "effective_search": self.query.effective_search,
            "status_filter": self.query.status_filter,
            "extra_filters": dict(self.query.extra_filters),
            "has_active_filters": self.has_active_filters,
            "selection": self.selection.ordered(visible_ids),
            "all_selected": self.selection.is_all_selected(visible_ids),
            "partially_selected": self.selection.is_partial(visible_ids),
            "summary": dict(self.summary),
            "summary_error": self.summary_error,
            "view_state": view_state.render(),
            "retry": RetryPanel(operation=f"{self.descriptor.name}.fetch", has_error=bool(self.error)).render(),
        }
