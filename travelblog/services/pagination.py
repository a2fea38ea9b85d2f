import math
from dataclasses import dataclass
from typing import List, Optional


@dataclass
class Page:
    page: int
    limit: int
    total: int = 0

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def pages(self) -> int:
        if self.limit <= 0:
            return 0
        return math.ceil(self.total / self.limit)

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "page": self.page,
            "limit": self.limit,
            "pages": self.pages,
        }


def page_window(current: int, total_pages: int, max_pages: int = 5) -> List[Optional[int]]:
    """Page numbers for a pagination bar; None marks an ellipsis.

    The first and last page are always shown, with a window of neighbours
    around the current page in between.
    """
    if total_pages <= 0:
        return []
    if total_pages <= max_pages:
        return list(range(1, total_pages + 1))

    current = min(max(current, 1), total_pages)
    pages: List[Optional[int]] = [1]

    start = max(2, current - 1)
    end = min(total_pages - 1, current + 1)

    # Near the edges, keep the window the same width
    if current <= 3:
        end = max_pages - 1
    if current >= total_pages - 2:
        start = total_pages - (max_pages - 2)

    if start > 2:
        pages.append(None)
    pages.extend(range(start, end + 1))
    if end < total_pages - 1:
        pages.append(None)

    pages.append(total_pages)
    return pages
