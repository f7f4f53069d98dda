"""Aggregation-filter engine.

SWAPI only knows fixed-size pages and has no notion of our field filters,
so a caller-sized page of *filtered* results has to be assembled by walking
upstream pages in order, filtering each one client-side and stopping as
soon as enough matches exist (or the upstream runs dry).

Pages are fetched strictly one after another: the page count is only known
after the first response, and later pages are skipped once the target is
met.
"""

from __future__ import annotations

import math
from collections.abc import Awaitable, Callable, Iterable, Mapping

from loguru import logger

from swapi_gateway.application.exceptions import InvalidRequestError
from swapi_gateway.domain.models import CatalogItem, FilterSet, MatchMode, UpstreamPage

DEFAULT_UPSTREAM_PAGE_SIZE = 10

FetchPage = Callable[[int], Awaitable[UpstreamPage]]


# ---------------------------------------------------------------------------
# Filtering
# ---------------------------------------------------------------------------


def _field_matches(value: object, wanted: str, mode: MatchMode) -> bool:
    actual = str(value).lower()
    wanted = wanted.lower()
    if mode is MatchMode.CONTAINS:
        return wanted in actual
    return actual == wanted


def matches(
    item: CatalogItem,
    filters: FilterSet,
    filter_fields: Mapping[str, MatchMode] | None = None,
    default_mode: MatchMode = MatchMode.EXACT,
) -> bool:
    """Return True when *item* satisfies every non-empty entry in *filters*.

    Fields listed in *filter_fields* use their own match mode; any other
    field falls back to *default_mode*. A record without the field (or with
    a null value) never matches a non-empty filter.
    """
    modes = filter_fields or {}
    for name, wanted in filters.items():
        if not wanted:
            continue
        value = item.get(name)
        if value is None:
            return False
        if not _field_matches(value, str(wanted), modes.get(name, default_mode)):
            return False
    return True


def filter_items(
    items: Iterable[CatalogItem],
    filters: FilterSet,
    filter_fields: Mapping[str, MatchMode] | None = None,
    default_mode: MatchMode = MatchMode.EXACT,
) -> list[CatalogItem]:
    """Keep the items that match *filters*, preserving their order."""
    return [item for item in items if matches(item, filters, filter_fields, default_mode)]


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


async def aggregate(
    fetch_page: FetchPage,
    filters: FilterSet,
    target_count: int,
    *,
    filter_fields: Mapping[str, MatchMode] | None = None,
    default_mode: MatchMode = MatchMode.EXACT,
    upstream_page_size: int = DEFAULT_UPSTREAM_PAGE_SIZE,
) -> list[CatalogItem]:
    """Collect at least *target_count* filtered records from the upstream.

    Args:
        fetch_page: Coroutine function returning the upstream page for a
            1-based page number. Whether it searches or lists is decided by
            the caller, once for the whole run.
        filters: Field filters applied client-side (logical AND).
        target_count: Number of matches to aim for, usually ``page * limit``.
        filter_fields: Per-field match mode for this entity type.
        default_mode: Match mode for fields absent from *filter_fields*.
        upstream_page_size: Fixed number of records per upstream page.

    Returns:
        The matches in upstream order. May hold fewer than *target_count*
        records when the upstream is exhausted, and may hold more because
        whole pages are filtered at a time.

    An upstream failure ends the run early: it is logged and whatever was
    collected so far is returned. Cancellation is never swallowed.
    """
    if upstream_page_size <= 0:
        raise InvalidRequestError("upstream_page_size must be a positive integer")

    accumulated: list[CatalogItem] = []
    if target_count <= 0:
        return accumulated

    page = 1
    total_pages: int | None = None
    stop_reason = "target reached"

    while len(accumulated) < target_count:
        if total_pages is not None and page > total_pages:
            stop_reason = "last page passed"
            break

        try:
            upstream = await fetch_page(page)
        except Exception as exc:
            logger.opt(exception=exc).warning(
                "Upstream fetch failed on page {} | returning {} partial results",
                page,
                len(accumulated),
            )
            stop_reason = "upstream error"
            break

        if total_pages is None:
            total_pages = math.ceil(upstream.total_count / upstream_page_size)

        if not upstream.items:
            stop_reason = "empty page"
            break

        accumulated.extend(filter_items(upstream.items, filters, filter_fields, default_mode))

        if len(accumulated) >= target_count:
            break
        if page >= total_pages or not upstream.has_next:
            stop_reason = "upstream exhausted"
            break

        page += 1

    logger.debug(
        "Aggregation finished | last_page={} matches={} target={} reason={}",
        page,
        len(accumulated),
        target_count,
        stop_reason,
    )
    return accumulated
