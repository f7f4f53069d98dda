"""Token-budgeted context window for chat completions.

Chat history is unbounded and owned by the caller, so before every
completion the newest turns that fit the model's budget are selected. The
persona (system turn) is always kept and paid for first.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

from swapi_gateway.application.exceptions import InvalidRequestError
from swapi_gateway.domain.models import ChatMessage
from swapi_gateway.domain.protocols import TokenEstimator


def estimate_tokens(text: str) -> int:
    """Rough token estimate: one token per four characters, rounded up."""
    return math.ceil(len(text) / 4)


class ContextWindowBuilder:
    """Select the newest contiguous run of turns that fits a token budget.

    Parameters
    ----------
    estimator:
        Callable mapping text to a token count. Defaults to
        :func:`estimate_tokens`; a real tokenizer can be plugged in instead.
    """

    def __init__(self, estimator: TokenEstimator = estimate_tokens) -> None:
        self.estimator = estimator

    def cost(self, message: ChatMessage) -> int:
        return self.estimator(message.content)

    def build_window(
        self,
        history: Sequence[ChatMessage],
        new_user_message: ChatMessage,
        persona: ChatMessage,
        budget: int,
    ) -> list[ChatMessage]:
        """Return ``[persona] + newest turns that fit``, oldest first.

        The persona's cost is charged against *budget* before any history.
        Turns are taken newest-first and selection stops at the first turn
        that would overflow, so the result never has gaps. If the new user
        message alone does not fit, only the persona is returned.

        Raises:
            InvalidRequestError: If *budget* is not positive.
        """
        if budget <= 0:
            raise InvalidRequestError("context budget must be a positive integer")

        used = self.cost(persona)
        selected: list[ChatMessage] = []

        for message in reversed([*history, new_user_message]):
            message_cost = self.cost(message)
            if used + message_cost > budget:
                break
            selected.append(message)
            used += message_cost

        selected.reverse()
        return [persona, *selected]
