"""Chat routes — talk to a character in their own voice."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request
from loguru import logger

from swapi_gateway.application.exceptions import (
    InvalidRequestError,
    NotFoundError,
    UpstreamUnavailableError,
)
from swapi_gateway.application.use_cases.chat import CharacterChatUseCase, ChatResult
from swapi_gateway.presentation.schemas import ChatRequest, ChatResponse

router = APIRouter(tags=["chat"])


@router.post("/characters/{character_id}/chat", response_model=ChatResponse)
async def chat_with_character(character_id: str, request: ChatRequest, raw_request: Request):
    """Send a message to a character and receive an in-character reply.

    The client owns the conversation: send all earlier turns in
    ``previousMessages``. Only the newest turns that fit the model's
    context budget are forwarded.
    """
    uc: CharacterChatUseCase = raw_request.app.state.chat_uc

    logger.info(
        "POST /characters/{}/chat | history={} msg={}",
        character_id,
        len(request.previous_messages),
        request.message[:60],
    )

    try:
        result: ChatResult = await uc.execute(
            character_id, request.message, request.previous_messages
        )
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except InvalidRequestError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    except UpstreamUnavailableError as exc:
        raise HTTPException(status_code=502, detail=str(exc))

    return ChatResponse(response=result.answer)
