"""Catalog use case — filtered, re-paginated listing and id lookup.

One generic flow serves every entity type; the per-entity differences
(upstream resource name, filterable fields and their match mode) come from
the static ``ENTITY_SPECS`` table.
"""

from __future__ import annotations

from collections.abc import Mapping

from loguru import logger

from swapi_gateway.application.aggregation import DEFAULT_UPSTREAM_PAGE_SIZE, aggregate
from swapi_gateway.application.pagination import paginate, target_count
from swapi_gateway.domain.models import (
    ENTITY_SPECS,
    CatalogItem,
    EntityKind,
    PageView,
    UpstreamPage,
)
from swapi_gateway.domain.protocols import ICatalogClient


class CatalogUseCase:
    """Lists and looks up catalog entities through the upstream client.

    Parameters
    ----------
    catalog:
        Upstream catalog client (``SwapiClient`` in production).
    upstream_page_size:
        Fixed page size of the upstream list endpoints.
    """

    def __init__(
        self,
        catalog: ICatalogClient,
        upstream_page_size: int = DEFAULT_UPSTREAM_PAGE_SIZE,
    ) -> None:
        self.catalog = catalog
        self.upstream_page_size = upstream_page_size

    async def list_entities(
        self,
        kind: EntityKind,
        page: int = 1,
        limit: int = 10,
        search: str | None = None,
        filters: Mapping[str, str | None] | None = None,
    ) -> PageView:
        """Return page *page* of *limit* records matching *filters*.

        Only fields declared for *kind* are used as filters; anything else in
        *filters* is ignored. *search* is forwarded upstream unchanged.
        """
        spec = ENTITY_SPECS[kind]
        active_filters = {
            name: value
            for name, value in (filters or {}).items()
            if name in spec.filter_fields and value
        }
        wanted = target_count(page, limit)

        # Search vs plain listing is fixed for the whole run
        async def fetch_page(upstream_page: int) -> UpstreamPage:
            return await self.catalog.list_page(spec.resource, upstream_page, search=search or None)

        with logger.contextualize(entity=kind.value):
            results = await aggregate(
                fetch_page,
                active_filters,
                wanted,
                filter_fields=spec.filter_fields,
                upstream_page_size=self.upstream_page_size,
            )

        view = paginate(results, page, limit)
        logger.info(
            "Listed {} | page={} limit={} search={} filters={} total={}",
            kind.value,
            page,
            limit,
            search,
            active_filters,
            view.total,
        )
        return view

    async def get_entity(self, kind: EntityKind, entity_id: str) -> CatalogItem:
        """Fetch one record by upstream id. Errors propagate to the caller."""
        spec = ENTITY_SPECS[kind]
        return await self.catalog.get_by_id(spec.resource, entity_id)
