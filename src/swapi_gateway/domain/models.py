"""Domain entities and value objects.

These are the core data structures of the gateway domain, independent of
any infrastructure or framework concerns.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, Field

# A single upstream record, exactly as SWAPI returned it.
CatalogItem = dict[str, Any]

# Field name -> requested value. Empty or ``None`` values are skipped.
FilterSet = Mapping[str, str | None]


# ---------------------------------------------------------------------------
# Upstream page
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class UpstreamPage:
    """One page returned by an upstream list call."""

    items: list[CatalogItem] = field(default_factory=list)
    total_count: int = 0
    has_next: bool = False


# ---------------------------------------------------------------------------
# Entity table
# ---------------------------------------------------------------------------


class MatchMode(str, Enum):
    """How a filter value is compared against a record field."""

    EXACT = "exact"
    CONTAINS = "contains"


class EntityKind(str, Enum):
    CHARACTERS = "characters"
    FILMS = "films"
    STARSHIPS = "starships"
    PLANETS = "planets"


@dataclass(frozen=True)
class EntitySpec:
    """Static description of one catalog entity exposed by the gateway."""

    kind: EntityKind
    resource: str
    filter_fields: Mapping[str, MatchMode]


def _fields(mode: MatchMode, *names: str) -> dict[str, MatchMode]:
    return {name: mode for name in names}


ENTITY_SPECS: dict[EntityKind, EntitySpec] = {
    EntityKind.CHARACTERS: EntitySpec(
        kind=EntityKind.CHARACTERS,
        resource="people",
        filter_fields=_fields(MatchMode.EXACT, "name", "gender", "birth_year"),
    ),
    EntityKind.FILMS: EntitySpec(
        kind=EntityKind.FILMS,
        resource="films",
        filter_fields=_fields(MatchMode.EXACT, "title", "director", "producer", "release_date"),
    ),
    EntityKind.STARSHIPS: EntitySpec(
        kind=EntityKind.STARSHIPS,
        resource="starships",
        filter_fields=_fields(
            MatchMode.CONTAINS,
            "name",
            "model",
            "manufacturer",
            "starship_class",
            "hyperdrive_rating",
            "crew",
        ),
    ),
    EntityKind.PLANETS: EntitySpec(
        kind=EntityKind.PLANETS,
        resource="planets",
        filter_fields=_fields(
            MatchMode.CONTAINS, "name", "climate", "terrain", "population", "diameter"
        ),
    ),
}


# ---------------------------------------------------------------------------
# Re-paginated view
# ---------------------------------------------------------------------------


@dataclass
class PageView:
    """One caller-sized page cut from the filtered, accumulated results."""

    data: list[CatalogItem]
    total: int
    current_page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit)


# ---------------------------------------------------------------------------
# Chat
# ---------------------------------------------------------------------------


class ChatMessage(BaseModel):
    """A single chat turn."""

    role: Literal["system", "user", "assistant"] = Field(
        description="Message role: 'system', 'user' or 'assistant'"
    )
    content: str = Field(description="Message content")
