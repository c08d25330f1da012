from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

ELLIPSIS = "..."
MAX_FULL_WINDOW = 7
PAGE_SIZE_OPTIONS = (10, 25, 50, 100)


def page_window(current: int, total_pages: int) -> list[int | str]:
    total_pages = max(1, total_pages)
    if total_pages <= MAX_FULL_WINDOW:
        return list(range(1, total_pages + 1))

    current = min(max(1, current), total_pages)
    start = max(1, min(current - 1, total_pages - 2))
    shown = sorted({1, total_pages, start, start + 1, start + 2})

    window: list[int | str] = []
    previous = 0
    for page in shown:
        if previous and page - previous > 1:
            window.append(ELLIPSIS)
        window.append(page)
        previous = page
    return window


def range_label(page: int, limit: int, total: int) -> str:
    if total <= 0:
        return "No results"
    first = (page - 1) * limit + 1
    last = min(total, page * limit)
    return f"Showing {first}-{last} of {total}"


@dataclass(frozen=True)
class PaginationView:
    page: int
    total_pages: int
    total: int
    limit: int
    pages: tuple[int | str, ...]
    has_prev: bool
    has_next: bool
    label: str
    page_size_options: tuple[int, ...] = PAGE_SIZE_OPTIONS


def render_pagination(page: int, total_pages: int, total: int, limit: int) -> PaginationView:
    return PaginationView(
        page=page,
        total_pages=total_pages,
        total=total,
        limit=limit,
        pages=tuple(page_window(page, total_pages)),
        has_prev=page > 1,
        has_next=page < total_pages,
        label=range_label(page, limit, total),
    )


@dataclass
class PaginationControl:
    on_page_change: Callable[[int], None]
    on_page_size_change: Callable[[int], None]
    page_size_options: tuple[int, ...] = PAGE_SIZE_OPTIONS

    def go_to(self, current: int, total_pages: int, page: int) -> bool:
        if page == current or page < 1 or page > total_pages:
            return False
        self.on_page_change(page)
        return True

    def next(self, current: int, total_pages: int) -> bool:
        return self.go_to(current, total_pages, current + 1)

    def prev(self, current: int, total_pages: int) -> bool:
        return self.go_to(current, total_pages, current - 1)

    def change_page_size(self, size: int) -> None:
        if size <= 0:
            raise ValueError("page size must be > 0")
        self.on_page_size_change(size)
