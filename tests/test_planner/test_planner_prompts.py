"""Tests for planning prompt construction."""

from __future__ import annotations

from canvas.planner.models import PlanningPhase
from canvas.planner.prompts import (
    WRITING_FRAMEWORK,
    build_chat_user_prompt,
    build_planning_instructions,
)


class TestBuildPlanningInstructions:
    def test_angle_round_for_new_article(self) -> None:
        text = build_planning_instructions(PlanningPhase.angle, 3, is_new_article=True)
        assert text.startswith(WRITING_FRAMEWORK)
        assert "PHASE: ANGLE (3 rounds left)" in text
        assert "[TITLE]" in text
        assert "[CHOICES]" in text
        assert "[OUTLINE]" not in text
        assert "Keep momentum, guide toward thesis" in text

    def test_existing_article_skips_title(self) -> None:
        text = build_planning_instructions(PlanningPhase.thesis, 2, is_new_article=False)
        assert "PHASE: THESIS (2 rounds left)" in text
        assert "[TITLE]" not in text

    def test_outline_round_requires_outline(self) -> None:
        text = build_planning_instructions(PlanningPhase.outline, 1, is_new_article=False)
        assert "PHASE: OUTLINE (1 rounds left)" in text
        assert "[OUTLINE]" in text
        assert "**Thesis:**" in text
        assert "MUST include [OUTLINE] now" in text
        assert "Keep momentum" not in text

    def test_thinking_block_always_requested(self) -> None:
        for phase in (PlanningPhase.angle, PlanningPhase.thesis, PlanningPhase.outline):
            assert "[THINKING]" in build_planning_instructions(phase, 0, False)


def test_chat_user_prompt() -> None:
    assert build_chat_user_prompt("DO THIS", "my topic") == "DO THIS\n\nUser request: my topic"
