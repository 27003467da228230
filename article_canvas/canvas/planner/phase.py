"""Planning round tracking for the angle -> thesis -> outline dialogue."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from canvas.planner.models import PlanningPhase, Turn

if TYPE_CHECKING:
    from canvas.articles.models import Article

PLANNING_ROUNDS = 3


def _assistant_turns(transcript: Iterable[Turn]) -> int:
    return sum(1 for t in transcript if t.role == "assistant")


def current_phase(transcript: Iterable[Turn]) -> PlanningPhase:
    """Return the planning round implied by the number of assistant turns.

    Never returns ``writing``; that promotion depends on article content and
    is decided by :func:`resolve_phase`.
    """
    count = _assistant_turns(transcript)
    if count == 0:
        return PlanningPhase.angle
    if count == 1:
        return PlanningPhase.thesis
    return PlanningPhase.outline


def rounds_remaining(transcript: Iterable[Turn]) -> int:
    return max(0, PLANNING_ROUNDS - _assistant_turns(transcript))


def resolve_phase(transcript: Iterable[Turn], article: Article | None) -> PlanningPhase:
    """Phase as seen by the caller: ``writing`` once the article has content."""
    if article is not None and not article.is_in_planning():
        return PlanningPhase.writing
    return current_phase(transcript)
