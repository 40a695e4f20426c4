from typing import Any, List, TypeVar

from fastapi import Request
from pydantic import BaseModel

from models.hateoas import HATEOASLink
from utils.filters import FilterEncoder

ReadModel = TypeVar("ReadModel", bound=BaseModel)


# -----------------------------------------------------------------------------
# Item links
# -----------------------------------------------------------------------------
def build_item_links(item_path: str, collection_path: str, *, include_all: bool = True) -> List[HATEOASLink]:
    links = [
        HATEOASLink(rel="self", href=item_path, method="GET"),
        HATEOASLink(rel="update", href=item_path, method="PUT"),
        HATEOASLink(rel="delete", href=item_path, method="DELETE"),
    ]
    # Inside a listing the page's own "self" link already points at the collection
    if include_all:
        links.append(HATEOASLink(rel="all", href=collection_path, method="GET"))
    return links


def hateoas_item(
    request: Request,
    read_model: type[ReadModel],
    obj: Any,
    *,
    get_route: str,
    list_route: str,
    path_params: dict[str, Any],
    in_listing: bool = False,
) -> ReadModel:
    """Map an ORM row to its read schema and attach its item links."""
    item_path = str(request.app.url_path_for(get_route, **path_params))
    collection_path = str(request.app.url_path_for(list_route))
    links = build_item_links(item_path, collection_path, include_all=not in_listing)

    dto = read_model.model_validate(obj)
    return dto.model_copy(update={"links": links})


# -----------------------------------------------------------------------------
# Page links
# -----------------------------------------------------------------------------
def page_href(base_path: str, page: int, page_size: int, filters: FilterEncoder) -> str:
    return f"{base_path}?page={page}&pageSize={page_size}{filters.encode()}"


def build_page_links(
    base_path: str,
    *,
    page: int,
    page_size: int,
    total_pages: int,
    filters: FilterEncoder,
) -> List[HATEOASLink]:
    """
    Navigation links for one page of a collection. Always "self"; "first"
    and "previous" past page 1; "next" and "last" before the final page.
    Output depends only on the arguments.
    """
    links = [
        HATEOASLink(rel="self", href=page_href(base_path, page, page_size, filters), method="GET"),
    ]

    if page > 1:
        links.append(HATEOASLink(rel="first", href=page_href(base_path, 1, page_size, filters), method="GET"))
        links.append(HATEOASLink(rel="previous", href=page_href(base_path, page - 1, page_size, filters), method="GET"))

    if page < total_pages:
        links.append(HATEOASLink(rel="next", href=page_href(base_path, page + 1, page_size, filters), method="GET"))
        links.append(HATEOASLink(rel="last", href=page_href(base_path, total_pages, page_size, filters), method="GET"))

    return links
