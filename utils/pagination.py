from __future__ import annotations

from dataclasses import dataclass
from math import ceil
from typing import Any, Callable, Optional, Sequence, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from models.pagination import PaginatedResponse
from utils.filters import FilterEncoder
from utils.hateoas import build_page_links

T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MIN_PAGE_SIZE = 1
MAX_PAGE_SIZE = 100


# -----------------------------------------------------------------------------
# Page request / metadata
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class PageRequest:
    page: int
    page_size: int

    @classmethod
    def normalize(cls, page: Optional[int] = None, page_size: Optional[int] = None) -> "PageRequest":
        """Clamp raw query values; out-of-range input is never an error."""
        raw_page = DEFAULT_PAGE if page is None else page
        raw_size = DEFAULT_PAGE_SIZE if page_size is None else page_size
        return cls(
            page=max(1, raw_page),
            page_size=min(max(raw_size, MIN_PAGE_SIZE), MAX_PAGE_SIZE),
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


def compute_total_pages(total_count: int, page_size: int) -> int:
    if total_count <= 0:
        return 0
    return ceil(total_count / page_size)


@dataclass(frozen=True)
class PageMeta:
    page: int
    page_size: int
    total_count: int
    total_pages: int

    @classmethod
    def for_count(cls, request: PageRequest, total_count: int) -> "PageMeta":
        return cls(
            page=request.page,
            page_size=request.page_size,
            total_count=total_count,
            total_pages=compute_total_pages(total_count, request.page_size),
        )

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_previous_page(self) -> bool:
        return self.page > 1

    @property
    def item_count(self) -> int:
        """How many items this page holds."""
        remaining = self.total_count - (self.page - 1) * self.page_size
        return min(self.page_size, max(0, remaining))


# -----------------------------------------------------------------------------
# Envelope
# -----------------------------------------------------------------------------
def build_envelope(
    data: Sequence[T],
    meta: PageMeta,
    base_path: str,
    filters: FilterEncoder,
) -> PaginatedResponse[T]:
    return PaginatedResponse(
        data=list(data),
        page=meta.page,
        page_size=meta.page_size,
        total_count=meta.total_count,
        total_pages=meta.total_pages,
        has_next_page=meta.has_next_page,
        has_previous_page=meta.has_previous_page,
        links=build_page_links(
            base_path,
            page=meta.page,
            page_size=meta.page_size,
            total_pages=meta.total_pages,
            filters=filters,
        ),
    )


async def paginate(
    db: AsyncSession,
    query: Select,
    *,
    page_request: PageRequest,
    filters: FilterEncoder,
    base_path: str,
    to_dto: Callable[[Any], T],
) -> PaginatedResponse[T]:
    """
    Count the (already filtered and ordered) query, fetch one slice of it and
    wrap the mapped rows in a paginated envelope.
    """
    # ---- total count (before pagination) ----
    count_stmt = select(func.count()).select_from(query.order_by(None).subquery())
    total_result = await db.execute(count_stmt)
    total_count = total_result.scalar_one() or 0

    meta = PageMeta.for_count(page_request, total_count)

    # Pages past the end never reach the store; their offset may not fit in a SQL integer
    if meta.item_count == 0:
        return build_envelope([], meta, base_path, filters)

    # ---- apply pagination ----
    data_query = query.offset(page_request.offset).limit(page_request.page_size)
    result = await db.execute(data_query)
    rows = result.scalars().all()

    return build_envelope([to_dto(row) for row in rows], meta, base_path, filters)
