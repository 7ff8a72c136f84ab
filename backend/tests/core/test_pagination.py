"""Pagination — verifies page windows and the list response shape."""

import pytest

from iperformance.core.pagination import (
    DEFAULT_PAGE_SIZE, MAX_ROW_OFFSET, PageResult, page_window,
)


def test_first_page():
    window = page_window(0)
    assert (window.offset, window.limit) == (0, DEFAULT_PAGE_SIZE)


def test_offset_is_index_times_size():
    assert page_window(3, 20).offset == 60


def test_negative_index_clamps():
    assert page_window(-1, 20).offset == 0


def test_zero_page_size_rejected():
    with pytest.raises(ValueError):
        page_window(0, 0)


def test_response_shape():
    page = PageResult(items=[{"id": "a"}], total_row_count=41)
    assert page.to_response("goals") == {
        "goals": [{"id": "a"}], "meta": {"totalRowCount": 41},
    }


def test_huge_index_stays_within_storage_range():
    window = page_window(999_999_999_999_999_999, 20)
    assert window.offset + window.limit == MAX_ROW_OFFSET
