"""Chat use case — in-character conversation with a catalog character.

This module contains all business logic for one chat turn: persona
construction, context-window trimming, history conversion and agent
execution. It has **no dependency on FastAPI**.
"""

from __future__ import annotations

import time
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger
from openai import APIError
from pydantic_ai import Agent
from pydantic_ai.exceptions import AgentRunError
from pydantic_ai.messages import (
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    UserPromptPart,
)

from swapi_gateway.application.context_window import ContextWindowBuilder
from swapi_gateway.application.exceptions import (
    ContextBudgetExceededError,
    EmptyMessageError,
    UpstreamUnavailableError,
)
from swapi_gateway.application.persona import build_persona
from swapi_gateway.domain.models import ENTITY_SPECS, ChatMessage, EntityKind
from swapi_gateway.domain.protocols import ICatalogClient

NO_RESPONSE = "No response generated"


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass
class ChatResult:
    """Result of a single chat turn."""

    answer: str
    latency_ms: int = 0
    window_size: int = 0


# ---------------------------------------------------------------------------
# Use case
# ---------------------------------------------------------------------------


class CharacterChatUseCase:
    """Orchestrates a single chat turn with a SWAPI character.

    Parameters
    ----------
    agent:
        A configured PydanticAI ``Agent`` (no static system prompt).
    catalog:
        Upstream catalog client used to load the character record.
    context_builder:
        Selects the turns that fit the token budget.
    budget:
        Token budget for persona + history + new message.
    """

    def __init__(
        self,
        agent: Agent[None, str],
        catalog: ICatalogClient,
        context_builder: ContextWindowBuilder,
        budget: int,
    ) -> None:
        self.agent = agent
        self.catalog = catalog
        self.context_builder = context_builder
        self.budget = budget

    async def execute(
        self,
        character_id: str,
        message: str,
        previous_messages: Sequence[ChatMessage] = (),
    ) -> ChatResult:
        """Answer *message* in the voice of character *character_id*.

        Raises:
            EmptyMessageError: If *message* is blank.
            NotFoundError: If the character does not exist upstream.
            ContextBudgetExceededError: If *message* alone exceeds the budget.
            UpstreamUnavailableError: If the catalog or the LLM call fails.
        """
        if not message or not message.strip():
            raise EmptyMessageError("message must not be empty")

        resource = ENTITY_SPECS[EntityKind.CHARACTERS].resource
        with logger.contextualize(entity=f"{EntityKind.CHARACTERS.value}/{character_id}"):
            return await self._answer(resource, character_id, message, previous_messages)

    async def _answer(
        self,
        resource: str,
        character_id: str,
        message: str,
        previous_messages: Sequence[ChatMessage],
    ) -> ChatResult:
        character = await self.catalog.get_by_id(resource, character_id)
        persona = build_persona(character)

        window = self.context_builder.build_window(
            history=previous_messages,
            new_user_message=ChatMessage(role="user", content=message),
            persona=persona,
            budget=self.budget,
        )
        if len(window) < 2:
            raise ContextBudgetExceededError("message is too long for the context window")

        message_history = self._build_history(window[:-1])
        user_prompt = window[-1].content

        t0 = time.perf_counter()
        try:
            result = await self.agent.run(user_prompt, message_history=message_history)
        except (AgentRunError, APIError) as exc:
            logger.error("Error in chat completion: {}", exc)
            raise UpstreamUnavailableError("Chat completion failed") from exc

        latency = int((time.perf_counter() - t0) * 1000)
        answer = result.output or NO_RESPONSE

        logger.info(
            "Chat completed | character={} latency={}ms | window={}/{} turns",
            character_id,
            latency,
            len(window),
            len(previous_messages) + 2,
        )

        return ChatResult(answer=answer, latency_ms=latency, window_size=len(window))

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _build_history(
        prior_messages: Sequence[ChatMessage],
    ) -> list[ModelRequest | ModelResponse]:
        """Convert window turns into PydanticAI message-history objects."""
        history: list[ModelRequest | ModelResponse] = []
        for msg in prior_messages:
            if msg.role == "system":
                history.append(ModelRequest(parts=[SystemPromptPart(content=msg.content)]))
            elif msg.role == "user":
                history.append(ModelRequest(parts=[UserPromptPart(content=msg.content)]))
            else:
                history.append(ModelResponse(parts=[TextPart(content=msg.content)]))
        return history
