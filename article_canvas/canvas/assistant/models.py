"""Data models for the writing assistant."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class TopicSuggestion(BaseModel):
    """An article topic with a one-line angle."""

    model_config = ConfigDict(extra="ignore")

    title: str
    summary: str = ""


class BrainstormIdea(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    content: str
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    article_id: str | None = None
