"""Article, annotation and outline records."""

from __future__ import annotations

import re
import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from canvas.planner.models import OutlineItem

DEFAULT_TITLE = "New Topic Idea"
HELP_TITLE_PREFIX = "Help me write an article about:"
EXCERPT_LENGTH = 150

_TAG_RE = re.compile(r"<[^>]*>")


def html_to_text(html: str) -> str:
    """Crude tag strip, enough for excerpts and length checks."""
    return _TAG_RE.sub("", html or "").strip()


def make_excerpt(html: str) -> str:
    text = html_to_text(html)
    if len(text) > EXCERPT_LENGTH:
        return text[:EXCERPT_LENGTH] + "..."
    return text


class Annotation(BaseModel):
    """A highlighted span of article text with review feedback."""

    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    type: Literal["good", "needs-work", "needs-replanning", "summary"]
    text: str
    summary: str | None = None
    start: int = Field(0, alias="from")
    end: int = Field(0, alias="to")

    model_config = ConfigDict(populate_by_name=True)


class Article(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str = DEFAULT_TITLE
    content: str = ""
    excerpt: str = ""
    status: Literal["draft", "published"] = "draft"
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    tags: list[str] = Field(default_factory=list)
    published_url: str | None = None
    outline: list[OutlineItem] = Field(default_factory=list)
    annotations: list[Annotation] = Field(default_factory=list)

    def is_in_planning(self) -> bool:
        """Planning lasts until the article has content and a real title."""
        return not self.content.strip() or self.title == DEFAULT_TITLE

    def is_new(self) -> bool:
        return self.title == DEFAULT_TITLE or not self.content

    def outline_progress(self) -> tuple[int, int]:
        done = sum(1 for item in self.outline if item.completed)
        return done, len(self.outline)


class ArticleUpdate(BaseModel):
    """Partial update; omitted fields keep their current value."""

    title: str | None = None
    content: str | None = None
    status: Literal["draft", "published"] | None = None
    tags: list[str] | None = None
    published_url: str | None = None
    outline: list[OutlineItem] | None = None
    annotations: list[Annotation] | None = None
