"""Catalog routes — filtered listing and id lookup for every entity type."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Query, Request
from loguru import logger

from swapi_gateway.application.exceptions import (
    InvalidRequestError,
    NotFoundError,
    UpstreamUnavailableError,
)
from swapi_gateway.application.use_cases.catalog import CatalogUseCase
from swapi_gateway.domain.models import EntityKind
from swapi_gateway.presentation.schemas import (
    CharacterQuery,
    FilmQuery,
    ListQuery,
    PaginatedResponse,
    PlanetQuery,
    StarshipQuery,
)

router = APIRouter(tags=["catalog"])


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


async def _list(raw_request: Request, kind: EntityKind, query: ListQuery) -> PaginatedResponse:
    uc: CatalogUseCase = raw_request.app.state.catalog_uc
    max_limit: int = raw_request.app.state.settings.max_page_limit

    logger.info(
        "GET /{} | page={} limit={} search={}", kind.value, query.page, query.limit, query.search
    )

    if query.limit > max_limit:
        raise HTTPException(status_code=422, detail=f"limit must not exceed {max_limit}")

    try:
        view = await uc.list_entities(
            kind,
            page=query.page,
            limit=query.limit,
            search=query.search,
            filters=query.filters(),
        )
    except InvalidRequestError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    return PaginatedResponse.from_view(view)


async def _get(raw_request: Request, kind: EntityKind, entity_id: str) -> dict[str, Any]:
    uc: CatalogUseCase = raw_request.app.state.catalog_uc

    logger.info("GET /{}/{}", kind.value, entity_id)

    try:
        return await uc.get_entity(kind, entity_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except UpstreamUnavailableError as exc:
        raise HTTPException(status_code=502, detail=str(exc))


# ---------------------------------------------------------------------------
# Characters
# ---------------------------------------------------------------------------


@router.get("/characters", response_model=PaginatedResponse)
async def list_characters(query: Annotated[CharacterQuery, Query()], raw_request: Request):
    """List characters, filtered by exact name / gender / birth_year."""
    return await _list(raw_request, EntityKind.CHARACTERS, query)


@router.get("/characters/{character_id}")
async def get_character(character_id: str, raw_request: Request):
    """Get a single character by SWAPI id."""
    return await _get(raw_request, EntityKind.CHARACTERS, character_id)


# ---------------------------------------------------------------------------
# Films
# ---------------------------------------------------------------------------


@router.get("/films", response_model=PaginatedResponse)
async def list_films(query: Annotated[FilmQuery, Query()], raw_request: Request):
    """List films, filtered by exact title / director / producer / release_date."""
    return await _list(raw_request, EntityKind.FILMS, query)


@router.get("/films/{film_id}")
async def get_film(film_id: str, raw_request: Request):
    return await _get(raw_request, EntityKind.FILMS, film_id)


# ---------------------------------------------------------------------------
# Starships
# ---------------------------------------------------------------------------


@router.get("/starships", response_model=PaginatedResponse)
async def list_starships(query: Annotated[StarshipQuery, Query()], raw_request: Request):
    """List starships, filtered by substring on any of the starship fields."""
    return await _list(raw_request, EntityKind.STARSHIPS, query)


@router.get("/starships/{starship_id}")
async def get_starship(starship_id: str, raw_request: Request):
    return await _get(raw_request, EntityKind.STARSHIPS, starship_id)


# ---------------------------------------------------------------------------
# Planets
# ---------------------------------------------------------------------------


@router.get("/planets", response_model=PaginatedResponse)
async def list_planets(query: Annotated[PlanetQuery, Query()], raw_request: Request):
    """List planets, filtered by substring on any of the planet fields."""
    return await _list(raw_request, EntityKind.PLANETS, query)


@router.get("/planets/{planet_id}")
async def get_planet(planet_id: str, raw_request: Request):
    return await _get(raw_request, EntityKind.PLANETS, planet_id)
