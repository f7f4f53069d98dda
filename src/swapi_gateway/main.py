"""FastAPI application for the SWAPI gateway.

This module is a thin **presentation layer**. All business logic lives in
the ``application`` package so it can be tested and reused independently
of any HTTP framework.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from swapi_gateway import __version__
from swapi_gateway.application.agent import create_agent
from swapi_gateway.application.context_window import ContextWindowBuilder
from swapi_gateway.application.use_cases.catalog import CatalogUseCase
from swapi_gateway.application.use_cases.chat import CharacterChatUseCase
from swapi_gateway.config import get_settings
from swapi_gateway.logging_config import setup_logging
from swapi_gateway.presentation.routes import catalog, chat, health
from swapi_gateway.services.swapi_client import SwapiClient
from swapi_gateway.telemetry import setup_telemetry

# Configure loguru before anything else
setup_logging(level=get_settings().log_level, json=get_settings().log_json)


# ---------------------------------------------------------------------------
# Lifespan: initialise shared resources once at startup
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Set up and tear down services around the application lifetime."""
    settings = get_settings()
    settings.validate_runtime()

    swapi = SwapiClient(
        base_url=settings.swapi_base_url,
        timeout=settings.upstream_timeout_seconds,
    )
    context_builder = ContextWindowBuilder()

    app.state.settings = settings
    app.state.catalog_uc = CatalogUseCase(
        catalog=swapi,
        upstream_page_size=settings.upstream_page_size,
    )
    app.state.chat_uc = CharacterChatUseCase(
        agent=create_agent(settings),
        catalog=swapi,
        context_builder=context_builder,
        budget=settings.context_budget,
    )

    logger.info("Application startup complete | upstream={}", settings.swapi_base_url)
    yield

    await swapi.close()
    logger.info("Application shutdown complete")


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------

app = FastAPI(
    title="SWAPI Gateway",
    description="Filtered, re-paginated Star Wars catalog with in-character chat.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_allowed_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
    allow_credentials=True,
)

# Instrument FastAPI with observability (no-op when OBSERVABILITY=off)
setup_telemetry(app, get_settings())

app.include_router(health.router)
app.include_router(catalog.router)
app.include_router(chat.router)


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def run() -> None:
    """Start the API server with uvicorn (``swapi-gateway`` console script)."""
    import uvicorn

    settings = get_settings()
    uvicorn.run("swapi_gateway.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
