from __future__ import annotations

import pytest

from saas_admin_console.ui.pagination import ELLIPSIS, PaginationControl, page_window, range_label, render_pagination


@pytest.mark.parametrize("total_pages", range(1, 30))
def test_window_never_leaves_valid_range(total_pages: int) -> None:
    for current in range(1, total_pages + 1):
        pages = [item for item in page_window(current, total_pages) if item != ELLIPSIS]
        assert all(1 <= page <= total_pages for page in pages)
        assert current in pages
        assert pages == sorted(set(pages))
        assert pages[0] == 1
        assert pages[-1] == total_pages


def test_small_page_counts_show_every_page() -> None:
    assert page_window(3, 7) == [1, 2, 3, 4, 5, 6, 7]
    assert page_window(1, 1) == [1]


def test_large_page_counts_collapse_with_ellipsis() -> None:
    assert page_window(1, 20) == [1, 2, 3, ELLIPSIS, 20]
    assert page_window(10, 20) == [1, ELLIPSIS, 9, 10, 11, ELLIPSIS, 20]
    assert page_window(20, 20) == [1, ELLIPSIS, 18, 19, 20]
    assert page_window(3, 20) == [1, 2, 3, 4, ELLIPSIS, 20]


def test_control_ignores_current_and_out_of_range_pages() -> None:
    seen: list[int] = []
    control = PaginationControl(on_page_change=seen.append, on_page_size_change=lambda size: None)

    assert control.go_to(2, 5, 2) is False
    assert control.go_to(2, 5, 0) is False
    assert control.go_to(2, 5, 6) is False
    assert control.prev(1, 5) is False
    assert control.next(5, 5) is False
    assert control.next(2, 5) is True
    assert control.go_to(2, 5, 5) is True

    assert seen == [3, 5]


def test_page_size_change_rejects_non_positive_sizes() -> None:
    sizes: list[int] = []
    control = PaginationControl(on_page_change=lambda page: None, on_page_size_change=sizes.append)

    control.change_page_size(25)
    with pytest.raises(ValueError):
        control.change_page_size(0)

    assert sizes == [25]


def test_render_pagination_bounds_and_label() -> None:
    view = render_pagination(page=1, total_pages=3, total=25, limit=10)
    assert view.has_prev is False
    assert view.has_next is True
    assert view.label == "Showing 1-10 of 25"
    assert range_label(3, 10, 25) == "Showing 21-25 of 25"
    assert range_label(1, 10, 0) == "No results"
