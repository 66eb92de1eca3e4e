from __future__ import annotations

from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field
from typing import Any

from backoffice_console.app.domain.resources import ResourceDescriptor
from backoffice_console.app.ui.filters import ALL, clean_filters
from backoffice_console.app.ui.listing_view import SortDirection
from backoffice_console.app.ui.pagination import validate_page_size


@dataclass
class QueryState:
    page: int = 1
    page_size: int = 10
    sort_column: str = "id"
    sort_direction: SortDirection = "asc"
    search_text: str = ""
    effective_search: str = ""
    status_filter: str = ALL
    extra_filters: dict[str, str] = field(default_factory=dict)

    @classmethod
    def defaults(cls, descriptor: ResourceDescriptor, page_size: int = 10) -> "QueryState":
        sort_column, sort_direction = descriptor.default_sort
        return cls(
            page=1,
            page_size=validate_page_size(page_size),
            sort_column=sort_column,
            sort_direction=sort_direction,
            extra_filters={name: ALL for name in descriptor.extra_filter_fields},
        )

    def fetch_key(self) -> tuple[Any, ...]:
        """Parts of the state that change the fetched result (raw search text excluded)."""
        return (
            self.page,
            self.page_size,
            self.sort_column,
            self.sort_direction,
            self.effective_search,
            self.status_filter,
            tuple(sorted(self.extra_filters.items())),
        )

    def active_filters(self) -> dict[str, Any]:
        return clean_filters({"status": self.status_filter, **self.extra_filters})

    def has_active_filters(self) -> bool:
        return bool(self.effective_search or self.active_filters())


@dataclass
class SelectionState:
    ids: set[Hashable] = field(default_factory=set)

    def clear(self) -> None:
        self.ids.clear()

    def select_all(self, visible_ids: Iterable[Hashable]) -> None:
        self.ids = set(visible_ids)

    def toggle(self, row_id: Hashable, checked: bool, visible_ids: Iterable[Hashable]) -> bool:
        if row_id not in set(visible_ids):
            return False
        if checked:
            self.ids.add(row_id)
        else:
            self.ids.discard(row_id)
        return True

    def is_all_selected(self, visible_ids: Iterable[Hashable]) -> bool:
        visible = set(visible_ids)
        return bool(visible) and self.ids == visible

    def is_partial(self, visible_ids: Iterable[Hashable]) -> bool:
        return bool(self.ids) and not self.is_all_selected(visible_ids)

    def ordered(self, visible_ids: Iterable[Hashable]) -> list[Hashable]:
        return [row_id for row_id in visible_ids if row_id in self.ids]

    def __len__(self) -> int:
        return len(self.ids)
