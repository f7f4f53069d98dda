"""Re-pagination of an aggregated result set into the caller's page."""

from __future__ import annotations

from collections.abc import Sequence

from swapi_gateway.application.exceptions import InvalidRequestError
from swapi_gateway.domain.models import CatalogItem, PageView


def _validate(page: int, limit: int) -> None:
    if page < 1:
        raise InvalidRequestError("page must be at least 1")
    if limit < 1:
        raise InvalidRequestError("limit must be at least 1")


def target_count(page: int, limit: int) -> int:
    """Number of filtered records needed to cover every page up to *page*."""
    _validate(page, limit)
    return page * limit


def paginate(results: Sequence[CatalogItem], page: int, limit: int) -> PageView:
    """Cut page *page* of size *limit* out of *results*.

    ``total`` is the size of the filtered buffer, never the upstream count.
    A page past the end yields empty ``data`` rather than an error.

    Example:
        25 results, page=3, limit=10 → items 20..24, total_pages=3
    """
    _validate(page, limit)
    start = (page - 1) * limit
    return PageView(
        data=list(results[start : start + limit]),
        total=len(results),
        current_page=page,
        limit=limit,
    )
