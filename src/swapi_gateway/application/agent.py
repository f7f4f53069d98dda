"""PydanticAI agent used for in-character chat completions.

The agent has no static system prompt: the persona is built per request
from a catalog record and travels as the first turn of the message history.
"""

from __future__ import annotations

from openai import AsyncOpenAI
from pydantic_ai import Agent
from pydantic_ai.models.openai import OpenAIChatModel
from pydantic_ai.providers.openai import OpenAIProvider
from pydantic_ai.settings import ModelSettings

from swapi_gateway.config import Settings, get_settings


def chat_model_settings(settings: Settings) -> ModelSettings:
    """Response-length cap and sampling temperature for every completion."""
    return ModelSettings(
        max_tokens=settings.response_tokens,
        temperature=settings.chat_temperature,
    )


def create_agent(settings: Settings | None = None) -> Agent[None, str]:
    """Create and return the configured PydanticAI chat agent.

    Args:
        settings: Optional Settings override (defaults to get_settings()).
    """
    s = settings or get_settings()

    client = AsyncOpenAI(
        api_key=s.openai_api_key,
        base_url=s.openai_base_url,
        timeout=s.chat_timeout_seconds,
    )
    model = OpenAIChatModel(
        s.openai_chat_model,
        provider=OpenAIProvider(openai_client=client),
    )

    return Agent(
        model=model,
        output_type=str,
        model_settings=chat_model_settings(s),
    )
