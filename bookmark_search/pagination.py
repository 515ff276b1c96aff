"""Page chunking for result lists."""
from dataclasses import dataclass, field
from typing import Generic, List, Sequence, TypeVar

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """One page of a result list.

    ``start_index`` and ``end_index`` are 1-based and inclusive, for
    "showing 21-40 of 95" style display; both are 0 for an empty list.
    """
    items: List[T] = field(default_factory=list)
    page: int = 1
    total_pages: int = 1
    total_items: int = 0
    start_index: int = 0
    end_index: int = 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1


def paginate(items: Sequence[T], page: int, per_page: int) -> Page[T]:
    """Slice ``items`` into the requested page.

    Args:
        items: Full result list
        page: Requested 1-based page number; clamped into range
        per_page: Page size, must be positive

    Returns:
        The clamped Page

    Raises:
        ValueError: If per_page is not positive
    """
    if per_page < 1:
        raise ValueError(f"per_page must be positive, got {per_page}")

    total_items = len(items)
    total_pages = max(1, -(-total_items // per_page))
    current = go_to_page(page, total_pages)

    offset = (current - 1) * per_page
    page_items = list(items[offset:offset + per_page])

    return Page(
        items=page_items,
        page=current,
        total_pages=total_pages,
        total_items=total_items,
        start_index=0 if total_items == 0 else offset + 1,
        end_index=min(total_items, current * per_page),
    )


def go_to_page(page: int, total_pages: int) -> int:
    """Clamp a page number into ``1..total_pages``."""
    if page < 1:
        return 1
    if page > total_pages:
        return total_pages
    return page
