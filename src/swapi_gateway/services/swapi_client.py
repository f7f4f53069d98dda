"""Async HTTP client for the Star Wars API (SWAPI).

One method call is one upstream request. List calls return an
``UpstreamPage``; id lookups return the record with its ``id`` attached.
Transport failures, timeouts and non-2xx responses are logged and raised as
application errors so callers never see raw ``httpx`` exceptions.
"""

from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from swapi_gateway.application.exceptions import NotFoundError, UpstreamUnavailableError
from swapi_gateway.domain.models import CatalogItem, UpstreamPage


class SwapiClient:
    """Thin async wrapper around the SWAPI REST endpoints.

    Parameters
    ----------
    base_url:
        API root, e.g. ``https://swapi.dev/api``.
    timeout:
        Per-request timeout in seconds.
    http_client:
        Optional pre-built ``httpx.AsyncClient`` (tests inject one with a
        ``MockTransport``). When given, the caller owns its lifetime.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            follow_redirects=True,
        )

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def list_page(
        self, resource: str, page: int, search: str | None = None
    ) -> UpstreamPage:
        """Fetch one list page, optionally narrowed by a free-text search."""
        params: dict[str, Any] = {"page": page}
        if search:
            params["search"] = search

        payload = await self._get_json(f"/{resource}/", params=params)
        try:
            return UpstreamPage(
                items=list(payload.get("results") or []),
                total_count=int(payload.get("count") or 0),
                has_next=bool(payload.get("next")),
            )
        except (AttributeError, TypeError, ValueError) as exc:
            logger.error("Malformed list payload from {}: {}", resource, exc)
            raise UpstreamUnavailableError(f"Malformed response from {resource}") from exc

    async def get_by_id(self, resource: str, entity_id: str) -> CatalogItem:
        """Fetch a single record and attach the requested id to it."""
        payload = await self._get_json(f"/{resource}/{entity_id}/")
        if not isinstance(payload, dict):
            raise UpstreamUnavailableError(f"Malformed response from {resource}/{entity_id}")
        return {**payload, "id": entity_id}

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        logger.debug("Fetching: {}{} params={}", self.base_url, path, params or {})
        try:
            response = await self._client.get(path, params=params)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error("Error fetching {}: HTTP {}", path, status)
            if status == 404:
                raise NotFoundError(f"No record at {path}") from exc
            raise UpstreamUnavailableError(f"Upstream returned HTTP {status} for {path}") from exc
        except httpx.HTTPError as exc:
            logger.error("Error fetching {}: {}", path, exc)
            raise UpstreamUnavailableError(f"Upstream request failed for {path}") from exc
        except ValueError as exc:
            logger.error("Invalid JSON from {}: {}", path, exc)
            raise UpstreamUnavailableError(f"Invalid JSON from {path}") from exc
