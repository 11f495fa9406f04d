from __future__ import annotations

import math
from typing import List, Sequence, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 20


def total_pages(n: int, page_size: int = DEFAULT_PAGE_SIZE) -> int:
    """Number of pages for n rows; an empty table still has one page."""
    if page_size <= 0:
        return 1
    return max(1, math.ceil(n / page_size))


def clamp_page(page_number: int, n_pages: int) -> int:
    """Keep a page number inside [1, n_pages]."""
    return max(1, min(int(page_number), max(1, int(n_pages))))


def page(records: Sequence[T], page_number: int, page_size: int = DEFAULT_PAGE_SIZE) -> List[T]:
    """
    Rows shown on a 1-based page. Out-of-range pages come back empty;
    callers clamp first when they want the nearest valid page instead.
    """
    if page_size <= 0 or page_number < 1:
        return []
    start = (page_number - 1) * page_size
    return list(records[start:start + page_size])


def page_bounds(page_number: int, page_size: int, n: int) -> tuple[int, int]:
    """(first, last) 1-based row numbers shown on a page, (0, 0) when empty."""
    start = (page_number - 1) * page_size
    if n == 0 or start >= n:
        return 0, 0
    return start + 1, min(n, start + page_size)
