"""Tests for the token-budgeted context window builder."""

from __future__ import annotations

import pytest

from swapi_gateway.application.context_window import ContextWindowBuilder, estimate_tokens
from swapi_gateway.application.exceptions import InvalidRequestError
from swapi_gateway.domain.models import ChatMessage


def _turn(content: str, role: str = "user") -> ChatMessage:
    return ChatMessage(role=role, content=content)


@pytest.fixture()
def builder() -> ContextWindowBuilder:
    return ContextWindowBuilder()


@pytest.fixture()
def persona() -> ChatMessage:
    # 8 chars → 2 tokens
    return _turn("persona!", role="system")


@pytest.fixture()
def history() -> list[ChatMessage]:
    # m1 (oldest) .. m10 (newest), 4 chars each → 1 token each
    return [
        _turn(f"m{i:<3}"[:4], role="user" if i % 2 else "assistant") for i in range(1, 11)
    ]


class TestEstimateTokens:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [("", 0), ("a", 1), ("abcd", 1), ("abcde", 2), ("x" * 400, 100)],
    )
    def test_rounds_up_quarter_length(self, text: str, expected: int):
        assert estimate_tokens(text) == expected


class TestBuildWindow:
    def test_budget_equal_to_persona_cost_returns_persona_only(
        self, builder, persona, history
    ):
        window = builder.build_window(history, _turn("new!"), persona, budget=2)
        assert window == [persona]

    def test_persona_is_always_kept(self, builder, history):
        huge_persona = _turn("p" * 400, role="system")
        window = builder.build_window(history, _turn("new!"), huge_persona, budget=10)
        assert window == [huge_persona]

    def test_selects_newest_contiguous_suffix(self, builder, persona, history):
        new = _turn("new!")
        # 2 (persona) + 1 (new) + 4 history turns = 7
        window = builder.build_window(history, new, persona, budget=7)

        assert window[0] is persona
        assert [m.content for m in window[1:]] == ["m7  ", "m8  ", "m9  ", "m10 ", "new!"]

    def test_new_message_included_when_it_fits(self, builder, persona):
        window = builder.build_window([], _turn("hello"), persona, budget=4)
        assert [m.content for m in window] == ["persona!", "hello"]

    def test_oversized_new_message_leaves_persona_only(self, builder, persona, history):
        window = builder.build_window(history, _turn("x" * 100), persona, budget=20)
        assert window == [persona]

    def test_no_gaps_when_older_turn_would_fit(self, builder, persona):
        history = [_turn("tiny"), _turn("x" * 40), _turn("abcd")]
        # persona 2 + new 1 + "abcd" 1 = 4; the 10-token turn overflows, so
        # "tiny" must not be picked even though it would fit on its own.
        window = builder.build_window(history, _turn("new!"), persona, budget=6)
        assert [m.content for m in window] == ["persona!", "abcd", "new!"]

    def test_everything_fits(self, builder, persona, history):
        window = builder.build_window(history, _turn("new!"), persona, budget=1000)
        assert window == [persona, *history, _turn("new!")]

    def test_preserves_roles_and_order(self, builder, persona, history):
        window = builder.build_window(history, _turn("new!"), persona, budget=1000)
        assert [m.role for m in window[1:-1]] == [m.role for m in history]
        assert window[-1].role == "user"

    @pytest.mark.parametrize("budget", [0, -1])
    def test_non_positive_budget_rejected(self, builder, persona, budget: int):
        with pytest.raises(InvalidRequestError):
            builder.build_window([], _turn("hi"), persona, budget=budget)

    def test_custom_estimator(self, persona, history):
        builder = ContextWindowBuilder(estimator=lambda text: 1)
        # persona 1 + new 1 + 3 history
        window = builder.build_window(history, _turn("new!"), persona, budget=5)
        assert [m.content for m in window[1:]] == ["m8  ", "m9  ", "m10 ", "new!"]

