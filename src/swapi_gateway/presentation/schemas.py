"""HTTP request/response schemas (Pydantic models) for the REST API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from swapi_gateway.domain.models import ChatMessage, PageView

# ---------------------------------------------------------------------------
# List query parameters
# ---------------------------------------------------------------------------


class ListQuery(BaseModel):
    """Query parameters shared by every list endpoint."""

    page: int = Field(default=1, ge=1, description="1-based page number")
    limit: int = Field(default=10, ge=1, description="Records per page")
    search: str | None = Field(default=None, description="Free-text search sent upstream")

    def filters(self) -> dict[str, str | None]:
        """Entity-specific filter fields (everything except paging and search)."""
        return self.model_dump(exclude={"page", "limit", "search"})


class CharacterQuery(ListQuery):
    name: str | None = None
    gender: str | None = None
    birth_year: str | None = None


class FilmQuery(ListQuery):
    title: str | None = None
    director: str | None = None
    producer: str | None = None
    release_date: str | None = None


class StarshipQuery(ListQuery):
    name: str | None = None
    model: str | None = None
    manufacturer: str | None = None
    starship_class: str | None = None
    hyperdrive_rating: str | None = None
    crew: str | None = None


class PlanetQuery(ListQuery):
    name: str | None = None
    climate: str | None = None
    terrain: str | None = None
    population: str | None = None
    diameter: str | None = None


# ---------------------------------------------------------------------------
# List response
# ---------------------------------------------------------------------------


class PageMeta(BaseModel):
    """Pagination metadata, computed from the filtered result set."""

    total: int
    current_page: int = Field(serialization_alias="currentPage")
    total_pages: int = Field(serialization_alias="totalPages")
    limit: int


class PaginatedResponse(BaseModel):
    """Response body of every list endpoint."""

    data: list[dict[str, Any]]
    meta: PageMeta

    @classmethod
    def from_view(cls, view: PageView) -> PaginatedResponse:
        return cls(
            data=view.data,
            meta=PageMeta(
                total=view.total,
                current_page=view.current_page,
                total_pages=view.total_pages,
                limit=view.limit,
            ),
        )


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatRequest(BaseModel):
    """Request body for POST /characters/{id}/chat.

    History is owned by the client and sent in full with every turn.
    """

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(description="The new user message")
    previous_messages: list[ChatMessage] = Field(
        default_factory=list,
        alias="previousMessages",
        description="Earlier turns, oldest first",
    )


class ChatResponse(BaseModel):
    """Response body from POST /characters/{id}/chat."""

    response: str = Field(description="The character's reply")
