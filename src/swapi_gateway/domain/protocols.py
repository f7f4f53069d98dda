"""Domain service interfaces (ports).

The application layer depends on these abstractions, not on concrete
classes.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from swapi_gateway.domain.models import CatalogItem, UpstreamPage


@runtime_checkable
class ICatalogClient(Protocol):
    """Interface for the upstream paginated catalog.

    Implementations: SwapiClient (httpx-backed).
    """

    async def list_page(
        self, resource: str, page: int, search: str | None = None
    ) -> UpstreamPage: ...

    async def get_by_id(self, resource: str, entity_id: str) -> CatalogItem: ...

    async def close(self) -> None: ...


class TokenEstimator(Protocol):
    """Callable returning an approximate token count for a piece of text."""

    def __call__(self, text: str) -> int: ...
