"""Pagination — zero-based page index → bounded offset window, plus the page result shape.

Invariants:
    - offset = page_index × page_size; page_size is fixed per listing
    - offset + limit never exceeds the signed 64-bit range storage engines accept
    - Ordering is created_at DESC with id DESC as tie-break (stable across calls)
    - total_row_count is computed without offset/limit; it may exceed len(items)

Design Decisions:
    - Ordering declared here as logical field names; the compiler maps them to columns
"""

from dataclasses import dataclass, field

DEFAULT_PAGE_SIZE: int = 20
MAX_ROW_OFFSET: int = 2 ** 63 - 1
ORDERING: tuple[tuple[str, str], ...] = (("created_at", "desc"), ("id", "desc"))


@dataclass(frozen=True)
class PageWindow:
    """Offset/limit pair for one page."""
    offset: int
    limit: int


@dataclass
class PageResult:
    """One page of serialized records plus the unpaginated match count."""
    items: list[dict] = field(default_factory=list)
    total_row_count: int = 0

    def to_response(self, kind: str) -> dict:
        return {kind: self.items, "meta": {"totalRowCount": self.total_row_count}}


def page_window(page_index: int, page_size: int = DEFAULT_PAGE_SIZE) -> PageWindow:
    """Window for a zero-based page index; negative indexes clamp to the first page."""
    if page_size < 1:
        raise ValueError("page_size must be positive")
    offset = min(max(page_index, 0) * page_size, MAX_ROW_OFFSET - page_size)
    return PageWindow(offset=offset, limit=page_size)
