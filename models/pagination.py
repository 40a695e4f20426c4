from __future__ import annotations

from typing import Generic, List, TypeVar

from pydantic import Field

from models.hateoas import APIModel, HATEOASLink

T = TypeVar("T")


class PaginatedResponse(APIModel, Generic[T]):
    """Envelope returned by every list endpoint."""
    data: List[T] = Field(
        default_factory=list,
        description="Items on the current page"
    )
    page: int = Field(
        ...,
        description="Current page number (1-based, after clamping)"
    )
    page_size: int = Field(
        ...,
        description="Items per page (after clamping to 1..100)"
    )
    total_count: int = Field(
        ...,
        description="Number of items matching the active filters"
    )
    total_pages: int = Field(
        ...,
        description="ceil(totalCount / pageSize); 0 when nothing matches"
    )
    has_next_page: bool = Field(
        ...,
        description="True when page < totalPages"
    )
    has_previous_page: bool = Field(
        ...,
        description="True when page > 1"
    )
    links: List[HATEOASLink] = Field(
        default_factory=list,
        description="Navigation links: self, first, previous, next, last"
    )
