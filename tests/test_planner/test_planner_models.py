"""Tests for planner data models."""

from __future__ import annotations

import pydantic
import pytest

from canvas.planner.models import (
    Choice,
    ConversationTranscript,
    OutlineItem,
    PlanningPhase,
    Turn,
)


class TestTurn:
    def test_defaults(self) -> None:
        turn = Turn(role="user", content="hello")
        assert turn.id
        assert turn.is_animating is False
        assert turn.choices is None
        assert turn.thinking_steps is None
        assert turn.created_at.tzinfo is not None

    def test_is_frozen(self) -> None:
        turn = Turn(role="user", content="hello")
        with pytest.raises(pydantic.ValidationError):
            turn.content = "changed"  # type: ignore[misc]

    def test_rejects_unknown_role(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            Turn(role="system", content="x")  # type: ignore[arg-type]

    def test_ids_are_unique(self) -> None:
        assert Turn(role="user", content="a").id != Turn(role="user", content="a").id

    def test_round_trips_choices(self) -> None:
        turn = Turn(
            role="assistant",
            content="pick",
            choices=[Choice(id="choice-0", label="A", value="I want to explore: A. ")],
        )
        restored = Turn.model_validate_json(turn.model_dump_json())
        assert restored == turn


class TestConversationTranscript:
    def test_append_returns_turn_and_preserves_order(self) -> None:
        transcript = ConversationTranscript()
        first = transcript.append(Turn(role="user", content="1"))
        transcript.append(Turn(role="assistant", content="2"))
        assert transcript.turns[0] is first
        assert [t.content for t in transcript] == ["1", "2"]
        assert len(transcript) == 2

    def test_turns_is_a_snapshot(self) -> None:
        transcript = ConversationTranscript()
        snapshot = transcript.turns
        transcript.append(Turn(role="user", content="x"))
        assert snapshot == ()

    def test_assistant_turn_count(self) -> None:
        transcript = ConversationTranscript(
            [
                Turn(role="user", content="a"),
                Turn(role="assistant", content="b"),
                Turn(role="assistant", content="c"),
            ]
        )
        assert transcript.assistant_turn_count() == 2

    def test_clear(self) -> None:
        transcript = ConversationTranscript([Turn(role="user", content="a")])
        transcript.clear()
        assert len(transcript) == 0


class TestOutlineItem:
    def test_defaults(self) -> None:
        item = OutlineItem(title="Intro")
        assert len(item.id) == 13
        assert item.completed is False
        assert item.sub_items is None


def test_phase_values() -> None:
    assert [p.value for p in PlanningPhase] == ["angle", "thesis", "outline", "writing"]
    assert PlanningPhase("outline") is PlanningPhase.outline
