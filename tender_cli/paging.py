"""Fixed-size windows over long lists (dashboard slots, paged option menus)."""

from __future__ import annotations

from typing import Sequence, TypeVar

T = TypeVar("T")


def clamp_offset(offset: int, total: int, page_size: int) -> int:
    """Snap an offset into ``[0, start of last page]``."""
    if offset < 0 or total <= 0:
        return 0
    last = ((total - 1) // page_size) * page_size
    return min(offset, last)


def page_window(items: Sequence[T], offset: int, page_size: int) -> list[T | None]:
    """Exactly ``page_size`` slots starting at ``offset``; empty slots are None."""
    return [
        items[offset + slot] if 0 <= offset + slot < len(items) else None
        for slot in range(page_size)
    ]


def page_footer(offset: int, total: int, page_size: int) -> str:
    """``Showing a-b of n (page p/P)``."""
    if total <= 0:
        return "Showing 0 items"
    start = offset + 1
    end = min(offset + page_size, total)
    page = offset // page_size + 1
    pages = (total + page_size - 1) // page_size
    return f"Showing {start}-{end} of {total} (page {page}/{pages})"


def scroll_up(offset: int, page_size: int) -> int | None:
    """Previous page offset, or None when already on the first page."""
    if offset <= 0:
        return None
    return max(offset - page_size, 0)


def scroll_down(offset: int, total: int, page_size: int) -> int | None:
    """Next page offset, or None when already on the last page."""
    nxt = offset + page_size
    if nxt >= total:
        return None
    return clamp_offset(nxt, total, page_size)
