"""Data models for the planning conversation."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Iterator, Literal

from pydantic import BaseModel, ConfigDict, Field


def _new_id() -> str:
    return uuid.uuid4().hex[:13]


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PlanningPhase(str, Enum):
    angle = "angle"
    thesis = "thesis"
    outline = "outline"
    writing = "writing"


class Choice(BaseModel):
    """A selectable follow-up suggestion attached to one assistant turn."""

    id: str
    label: str
    value: str
    description: str | None = None


class OutlineSubItem(BaseModel):
    id: str = Field(default_factory=_new_id)
    title: str
    completed: bool = False


class OutlineItem(BaseModel):
    """A section heading of an article outline."""

    id: str = Field(default_factory=_new_id)
    title: str
    description: str | None = None
    completed: bool = False
    sub_items: list[OutlineSubItem] | None = None


class Turn(BaseModel):
    """One message in the planning conversation. Immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    role: Literal["user", "assistant"]
    content: str
    created_at: datetime = Field(default_factory=_now)
    is_animating: bool = False
    choices: list[Choice] | None = None
    thinking_steps: list[str] | None = None


class ConversationTranscript:
    """Append-only sequence of turns; ``clear`` is the only way to shrink it."""

    def __init__(self, turns: list[Turn] | None = None) -> None:
        self._turns: list[Turn] = list(turns or [])

    def append(self, turn: Turn) -> Turn:
        self._turns.append(turn)
        return turn

    def clear(self) -> None:
        self._turns = []

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def assistant_turn_count(self) -> int:
        return sum(1 for t in self._turns if t.role == "assistant")

    def __iter__(self) -> Iterator[Turn]:
        return iter(self._turns)

    def __len__(self) -> int:
        return len(self._turns)


class ParsedResponse(BaseModel):
    """One model reply decomposed into its tagged fields."""

    body: str = ""
    reasoning_steps: list[str] = Field(default_factory=list)
    suggested_title: str | None = None
    choices: list[Choice] | None = None
    outline_items: list[OutlineItem] | None = None
