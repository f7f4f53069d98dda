"""Configuration for the gateway using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_PACKAGE_DIR = Path(__file__).resolve().parent
_PROJECT_ROOT = _PACKAGE_DIR.parent.parent  # src/swapi_gateway/ → project root


class Settings(BaseSettings):
    """All gateway settings, loaded from environment variables and .env file."""

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Upstream catalog (SWAPI)
    # ------------------------------------------------------------------
    swapi_base_url: str = "https://swapi.dev/api"
    upstream_page_size: int = 10
    upstream_timeout_seconds: float = 10.0
    max_page_limit: int = 100

    # ------------------------------------------------------------------
    # OpenAI chat model
    # ------------------------------------------------------------------
    openai_api_key: str = ""
    openai_base_url: str | None = None
    openai_chat_model: str = "gpt-4-turbo-preview"
    chat_temperature: float = 0.7
    chat_timeout_seconds: float = 30.0

    # ------------------------------------------------------------------
    # Context window (token estimates)
    # ------------------------------------------------------------------
    max_context_tokens: int = 4096
    response_tokens: int = 150
    buffer_tokens: int = 100

    # ------------------------------------------------------------------
    # HTTP server
    # ------------------------------------------------------------------
    host: str = "0.0.0.0"
    port: int = 8000
    cors_allowed_origins: list[str] = [
        "http://localhost:3001",
        "https://star-wars-front-eta.vercel.app",
    ]

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------
    log_level: str = "INFO"
    log_json: bool = False

    # ------------------------------------------------------------------
    # Observability: OBSERVABILITY=logfire|otel|off
    # ------------------------------------------------------------------
    observability: str = "off"
    otel_service_name: str = "swapi-gateway"
    otel_exporter_otlp_endpoint: str = "http://localhost:4318"
    otel_console_exporter: bool = False

    @property
    def context_budget(self) -> int:
        """Tokens available for persona + history once the reply is reserved."""
        return self.max_context_tokens - self.response_tokens - self.buffer_tokens

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------
    def validate_runtime(self) -> None:
        """Check that all required values are present.

        Call this at application startup (not at import time) so that
        tests can override settings before validation runs.
        """
        if not self.openai_api_key:
            raise ValueError("OPENAI_API_KEY environment variable is not set")
        if self.upstream_page_size <= 0:
            raise ValueError("UPSTREAM_PAGE_SIZE must be a positive integer.")
        if self.context_budget <= 0:
            raise ValueError(
                "MAX_CONTEXT_TOKENS must exceed RESPONSE_TOKENS + BUFFER_TOKENS."
            )


@lru_cache
def get_settings() -> Settings:
    """Return the cached Settings singleton."""
    return Settings()
