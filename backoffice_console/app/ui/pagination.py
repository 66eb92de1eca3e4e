from __future__ import annotations

import math

from backoffice_console.app.config import PAGE_SIZE_OPTIONS


def page_count(total_count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be positive, got {page_size}")
    return max(1, math.ceil(max(0, total_count) / page_size))


def clamp_page(page: int, total_pages: int) -> int:
    return min(max(1, page), max(1, total_pages))


def validate_page_size(page_size: int) -> int:
    if page_size not in PAGE_SIZE_OPTIONS:
        raise ValueError(f"page_size must be one of {PAGE_SIZE_OPTIONS}, got {page_size}")
    return page_size


def row_range(page: int, page_size: int) -> tuple[int, int]:
    start = (max(1, page) - 1) * page_size
    return start, start + page_size - 1


def range_label(page: int, page_size: int, total_count: int) -> str:
    if total_count <= 0:
        return "0-0 of 0"
    first = (page - 1) * page_size + 1
    last = min(page * page_size, total_count)
    return f"{first}-{last} of {total_count}"
