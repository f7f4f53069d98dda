"""Shared fixtures for gateway tests."""

from __future__ import annotations

from collections.abc import Sequence

import pytest
from loguru import logger

from swapi_gateway.application.exceptions import NotFoundError, UpstreamUnavailableError
from swapi_gateway.domain.models import CatalogItem, UpstreamPage


def pytest_configure(config):
    """Set pytest-asyncio mode to auto so async test functions work without markers."""
    config.option.asyncio_mode = "auto"


# ---------------------------------------------------------------------------
# Stubs
# ---------------------------------------------------------------------------


class PageStub:
    """``fetch_page`` stand-in serving a fixed list of upstream pages.

    Pages listed in *fail_on* raise ``UpstreamUnavailableError`` instead.
    """

    def __init__(
        self,
        pages: Sequence[Sequence[CatalogItem]],
        total_count: int | None = None,
        fail_on: Sequence[int] = (),
    ) -> None:
        self.pages = [list(p) for p in pages]
        self.total_count = (
            total_count if total_count is not None else sum(len(p) for p in self.pages)
        )
        self.fail_on = set(fail_on)
        self.calls: list[int] = []

    async def __call__(self, page: int) -> UpstreamPage:
        self.calls.append(page)
        if page in self.fail_on:
            raise UpstreamUnavailableError(f"page {page} unavailable")
        if page > len(self.pages):
            return UpstreamPage(items=[], total_count=self.total_count, has_next=False)
        return UpstreamPage(
            items=self.pages[page - 1],
            total_count=self.total_count,
            has_next=page < len(self.pages),
        )


class FakeCatalogClient:
    """In-memory ``ICatalogClient`` paging through canned records like SWAPI."""

    def __init__(
        self,
        records: dict[str, list[CatalogItem]],
        page_size: int = 10,
        fail_on_page: int | None = None,
    ) -> None:
        self.records = records
        self.page_size = page_size
        self.fail_on_page = fail_on_page
        self.list_calls: list[tuple[str, int, str | None]] = []
        self.closed = False

    async def list_page(self, resource: str, page: int, search: str | None = None) -> UpstreamPage:
        self.list_calls.append((resource, page, search))
        if page == self.fail_on_page:
            raise UpstreamUnavailableError("SWAPI is down")
        rows = self.records.get(resource, [])
        if search:
            needle = search.lower()
            rows = [r for r in rows if needle in str(r.get("name", r.get("title", ""))).lower()]
        start = (page - 1) * self.page_size
        return UpstreamPage(
            items=rows[start : start + self.page_size],
            total_count=len(rows),
            has_next=start + self.page_size < len(rows),
        )

    async def get_by_id(self, resource: str, entity_id: str) -> CatalogItem:
        rows = self.records.get(resource, [])
        index = int(entity_id) - 1 if entity_id.isdigit() else -1
        if not 0 <= index < len(rows):
            raise NotFoundError(f"No record at /{resource}/{entity_id}/")
        return {**rows[index], "id": entity_id}

    async def close(self) -> None:
        self.closed = True


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


def make_people(count: int) -> list[CatalogItem]:
    """SWAPI-like ``people`` records alternating gender male/female."""
    return [
        {
            "name": f"Person {i}",
            "gender": "male" if i % 2 else "female",
            "birth_year": f"{i}BBY",
            "height": str(150 + i),
            "mass": str(50 + i),
            "hair_color": "brown",
            "eye_color": "blue",
            "skin_color": "fair",
        }
        for i in range(1, count + 1)
    ]


@pytest.fixture()
def luke() -> CatalogItem:
    return {
        "name": "Luke Skywalker",
        "height": "172",
        "mass": "77",
        "hair_color": "blond",
        "skin_color": "fair",
        "eye_color": "blue",
        "birth_year": "19BBY",
        "gender": "male",
    }


@pytest.fixture()
def catalog(luke: CatalogItem) -> FakeCatalogClient:
    """Fake upstream: 25 people (Luke first), 3 starships, 2 planets."""
    people = [luke, *make_people(24)]
    return FakeCatalogClient(
        {
            "people": people,
            "films": [
                {"title": "A New Hope", "director": "George Lucas", "release_date": "1977-05-25"},
                {
                    "title": "The Empire Strikes Back",
                    "director": "Irvin Kershner",
                    "release_date": "1980-05-17",
                },
            ],
            "starships": [
                {"name": "X-wing", "model": "T-65 X-wing", "manufacturer": "Incom Corporation"},
                {"name": "Death Star", "model": "DS-1 Orbital Battle Station", "crew": "342,953"},
                {"name": "Millennium Falcon", "model": "YT-1300 light freighter", "crew": "4"},
            ],
            "planets": [
                {"name": "Tatooine", "climate": "arid", "terrain": "desert"},
                {"name": "Hoth", "climate": "frozen", "terrain": "tundra, ice caves"},
            ],
        }
    )


@pytest.fixture()
def log_records():
    """Loguru records emitted during the test, captured by a temporary sink."""
    records: list[dict] = []
    sink_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(sink_id)
