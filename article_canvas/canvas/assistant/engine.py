"""Writing assistant for brainstorming, editing, outlines and topic ideas."""

from __future__ import annotations

import json
import logging
import re
from html import escape
from typing import Any

from canvas.articles.models import Article, html_to_text
from canvas.assistant.models import TopicSuggestion
from canvas.assistant.prompts import (
    BRAINSTORM_SYSTEM_PROMPT,
    IMPROVE_SYSTEM_PROMPT,
    OUTLINE_SYSTEM_PROMPT,
    REFINE_TITLES_SYSTEM_PROMPT,
    TOPIC_IDEAS_SYSTEM_PROMPT,
    build_brainstorm_user_prompt,
    build_outline_user_prompt,
    build_refine_titles_user_prompt,
    build_topic_ideas_user_prompt,
)
from canvas.llm.base import LLMBackend, LLMNotConfiguredError
from canvas.planner.models import OutlineItem
from canvas.planner.prompts import ASSISTANT_SYSTEM_PROMPT

logger = logging.getLogger(__name__)

MAX_OUTLINE_ITEMS = 10
# Articles with less text than this get placeholder sections seeded.
PLACEHOLDER_TEXT_THRESHOLD = 50
PASSTHROUGH_SUMMARY = "Explore this topic in depth"

_OUTLINE_LINE_RE = re.compile(r"^[\d\-*•]|^[A-Z]")
_OUTLINE_MARKER_RE = re.compile(r"^[\d.\-*•\s]+")
_JSON_ARRAY_RE = re.compile(r"\[[\s\S]*\]")


def outline_items_from_text(text: str) -> list[OutlineItem]:
    """Turn a free-form outline into at most ten outline items.

    Only lines that start with a number, a bullet or an uppercase letter are
    kept; leading markers are stripped from the titles.
    """
    items: list[OutlineItem] = []
    for line in text.split("\n"):
        stripped = line.strip()
        if not stripped or not _OUTLINE_LINE_RE.match(stripped):
            continue
        title = _OUTLINE_MARKER_RE.sub("", line).strip()
        if title:
            items.append(OutlineItem(title=title))
        if len(items) >= MAX_OUTLINE_ITEMS:
            break
    return items


def outline_placeholder_content(title: str, items: list[OutlineItem]) -> str:
    """Editor HTML with one heading and placeholder paragraph per section."""
    sections = "\n".join(
        f"<h2>{i + 1}. {escape(item.title)}</h2>\n"
        '<p class="text-slate-400 italic">// TODO: Write content for this section</p>\n'
        "<p><br></p>"
        for i, item in enumerate(items)
    )
    return f"<h1>{escape(title)}</h1>\n<p><br></p>\n{sections}"


def parse_topic_suggestions(content: str) -> list[TopicSuggestion]:
    """Extract ``[{"title", "summary"}]`` from a model reply.

    Accepts a bare JSON array anywhere in the text, or an object wrapping the
    list under ``topics``/``results``/its first key.
    """
    data: Any = None
    try:
        data = json.loads(content)
    except json.JSONDecodeError:
        match = _JSON_ARRAY_RE.search(content)
        if match:
            try:
                data = json.loads(match.group(0))
            except json.JSONDecodeError:
                data = None

    if isinstance(data, dict):
        data = data.get("topics") or data.get("results") or next(iter(data.values()), None)

    if not isinstance(data, list):
        raise ValueError("Could not parse topic list from model response")

    topics: list[TopicSuggestion] = []
    for item in data:
        if isinstance(item, dict) and item.get("title"):
            topics.append(TopicSuggestion.model_validate(item))
    return topics


class WritingAssistant:
    """One-shot assistant calls; the local backend is tried first for topics."""

    def __init__(
        self,
        llm_backend: LLMBackend | None,
        local_backend: LLMBackend | None = None,
    ) -> None:
        self._llm = llm_backend
        self._local = local_backend

    def _require_llm(self) -> LLMBackend:
        if self._llm is None or not self._llm.is_configured:
            raise LLMNotConfiguredError("LLM backend not configured")
        return self._llm

    @property
    def available(self) -> bool:
        return self._llm is not None and self._llm.is_configured

    async def brainstorm_ideas(self, topic: str) -> str:
        resp = await self._require_llm().generate(
            BRAINSTORM_SYSTEM_PROMPT,
            build_brainstorm_user_prompt(topic),
            max_tokens=1000,
        )
        return resp.content or "No ideas generated"

    async def ask(self, question: str, context: str | None = None) -> str:
        resp = await self._require_llm().generate(
            ASSISTANT_SYSTEM_PROMPT, question, context=context, max_tokens=2000,
        )
        return resp.content or "No response generated"

    async def improve_writing(self, text: str) -> str:
        resp = await self._require_llm().generate(
            IMPROVE_SYSTEM_PROMPT, text, max_tokens=2000,
        )
        return resp.content or text

    async def generate_outline(self, topic: str) -> str:
        resp = await self._require_llm().generate(
            OUTLINE_SYSTEM_PROMPT,
            build_outline_user_prompt(topic),
            max_tokens=1500,
        )
        return resp.content or "No outline generated"

    async def generate_outline_items(
        self, article: Article,
    ) -> tuple[list[OutlineItem], str | None]:
        """Generate an outline for the article title.

        Returns the items and, when the article is still nearly empty, seeded
        placeholder content (otherwise None).
        """
        text = await self.generate_outline(article.title)
        items = outline_items_from_text(text)
        if not items:
            logger.warning("Outline reply for %r produced no usable lines", article.title)
            return [], None

        content = None
        if len(html_to_text(article.content)) < PLACEHOLDER_TEXT_THRESHOLD:
            content = outline_placeholder_content(article.title, items)
        return items, content

    async def _topics_from(
        self, backend: LLMBackend, system_prompt: str, user_prompt: str,
    ) -> list[TopicSuggestion]:
        resp = await backend.generate(
            system_prompt, user_prompt, max_tokens=1000, json_mode=True,
        )
        return parse_topic_suggestions(resp.content)

    async def _with_fallback(
        self, system_prompt: str, user_prompt: str,
    ) -> list[TopicSuggestion] | None:
        """Try the local model, then the main backend. None when neither works."""
        if self._local is not None:
            try:
                return await self._topics_from(self._local, system_prompt, user_prompt)
            except Exception as e:
                logger.info("Local model unavailable for topics: %s", e)

        if self.available:
            try:
                return await self._topics_from(self._llm, system_prompt, user_prompt)  # type: ignore[arg-type]
            except Exception:
                logger.exception("Topic generation via main backend failed")
        return None

    async def refine_topic_titles(self, titles: list[str]) -> list[TopicSuggestion]:
        """Rewrite raw headlines into broader article topics."""
        if not titles:
            return []
        refined = await self._with_fallback(
            REFINE_TITLES_SYSTEM_PROMPT, build_refine_titles_user_prompt(titles),
        )
        if refined:
            return refined
        return [TopicSuggestion(title=t, summary=PASSTHROUGH_SUMMARY) for t in titles]

    async def generate_topic_ideas(self, count: int = 6) -> list[TopicSuggestion]:
        ideas = await self._with_fallback(
            TOPIC_IDEAS_SYSTEM_PROMPT, build_topic_ideas_user_prompt(count),
        )
        return ideas or []
