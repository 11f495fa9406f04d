from __future__ import annotations

from dataclasses import asdict, dataclass, replace
from typing import Any, Dict, Optional

from lotus_browser.core.pagination import DEFAULT_PAGE_SIZE, clamp_page, total_pages
from lotus_browser.core.sorting import ASC, DESC, toggle_sort


@dataclass(frozen=True)
class TableState:
    """
    View state of one sortable, paginated table.

    Fields:

    - source_key: identity of the rows being shown (the query string for
      search results, a fixed name for the saved list). Changing it sends the
      table back to page 1; refreshing the same source does not.
    - sort_key / direction: current column and "asc" | "desc"
    - page: 1-based page number, kept inside [1, total_pages]
    - page_size: rows per page
    """

    source_key: Optional[str] = None
    sort_key: str = "year"
    direction: str = DESC
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def n_pages(self, n_records: int) -> int:
        return total_pages(n_records, self.page_size)

    def sync(self, source_key: Optional[str], n_records: int) -> TableState:
        """
        Re-apply paging rules after the underlying rows changed: reset on a
        new source, then clamp to the current row count.
        """
        page_number = 1 if source_key != self.source_key else self.page
        return replace(
            self,
            source_key=source_key,
            page=clamp_page(page_number, self.n_pages(n_records)),
        )

    def with_sort(self, clicked_key: str) -> TableState:
        key, direction = toggle_sort(self.sort_key, self.direction, clicked_key)
        return replace(self, sort_key=key, direction=direction)

    def go_to(self, page_number: int, n_records: int) -> TableState:
        return replace(self, page=clamp_page(page_number, self.n_pages(n_records)))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], **defaults: Any) -> TableState:
        """
        Rebuild from a browser store. Missing or garbled fields fall back to
        `defaults`, then to the dataclass defaults.
        """
        base = cls(**defaults)
        if not isinstance(data, dict):
            return base

        direction = data.get("direction", base.direction)
        if direction not in (ASC, DESC):
            direction = base.direction

        try:
            page_number = max(1, int(data.get("page", base.page)))
        except (TypeError, ValueError):
            page_number = base.page

        try:
            page_size = int(data.get("page_size", base.page_size))
        except (TypeError, ValueError):
            page_size = base.page_size

        return cls(
            source_key=data.get("source_key", base.source_key),
            sort_key=str(data.get("sort_key") or base.sort_key),
            direction=direction,
            page=page_number,
            page_size=page_size if page_size > 0 else base.page_size,
        )
