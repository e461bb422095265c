import math
from dataclasses import dataclass
from typing import Generic, List, Optional, TypeVar

from sqlalchemy.orm import Query

T = TypeVar("T")


@dataclass
class Page(Generic[T]):
    """
    One page of results plus the numbers needed to navigate the rest.

    Attributes:
        items: Records on this page
        total: Number of records across all pages
        current_page: 1-indexed page number
        per_page: Page size
    """
    items: List[T]
    total: int
    current_page: int
    per_page: int

    @property
    def last_page(self) -> int:
        """Index of the last page. An empty result still has one page."""
        return max(math.ceil(self.total / self.per_page), 1)

    @property
    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page

    def url(self, path: str, page: int) -> str:
        """Link to ``page`` of the listing served at ``path``."""
        return f"{path}?page={page}"

    def next_page_url(self, path: str) -> Optional[str]:
        if not self.has_more_pages:
            return None
        return self.url(path, self.current_page + 1)

    def previous_page_url(self, path: str) -> Optional[str]:
        if self.current_page <= 1:
            return None
        return self.url(path, self.current_page - 1)


def paginate(query: Query, page: int, per_page: int) -> Page:
    """
    Run ``query`` for a single page.

    Args:
        query: Ordered SQLAlchemy query
        page: Page number (1-indexed)
        per_page: Number of items per page

    Returns:
        Page with the items and the unpaginated total
    """
    total = query.order_by(None).count()
    offset = (page - 1) * per_page
    items = query.offset(offset).limit(per_page).all()
    return Page(items=items, total=total, current_page=page, per_page=per_page)
