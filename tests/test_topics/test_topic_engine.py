"""Tests for TopicEngine mixing."""

from __future__ import annotations

import json
import random

import pytest

from canvas.assistant.engine import WritingAssistant
from canvas.topics.engine import BROAD_TOPICS, MAX_TOPICS, TopicEngine, broad_topics
from canvas.topics.feeds import FeedSource, NewsTopic


def _fetcher(batches: list[list[NewsTopic]]):
    async def fetch(feeds: list[FeedSource]) -> list[list[NewsTopic]]:
        return batches

    return fetch


def _headlines(n: int, source: str = "Wire") -> list[NewsTopic]:
    return [
        NewsTopic(title=f"Headline {i} about the economy", link=f"https://x/{i}", source=source)
        for i in range(n)
    ]


def test_broad_topics() -> None:
    topics = broad_topics()
    assert len(topics) == len(BROAD_TOPICS)
    assert all(t.source == "Brainstorm" and t.link == "#" for t in topics)


class TestFetchMixedTopics:
    @pytest.mark.asyncio
    async def test_no_llm_no_news_gives_broad_topics(self, mock_llm_cls) -> None:
        assistant = WritingAssistant(mock_llm_cls(configured=False))
        engine = TopicEngine(assistant, feeds=[], fetcher=_fetcher([]), rng=random.Random(1))
        topics = await engine.fetch_mixed_topics()
        assert len(topics) == 4
        assert all(t.source == "Brainstorm" for t in topics)

    @pytest.mark.asyncio
    async def test_news_passthrough_without_llm(self, mock_llm_cls) -> None:
        assistant = WritingAssistant(mock_llm_cls(configured=False))
        engine = TopicEngine(
            assistant, feeds=[], fetcher=_fetcher([_headlines(12)]), rng=random.Random(2),
        )
        topics = await engine.fetch_mixed_topics()
        news = [t for t in topics if t.source == "Wire"]
        assert len(news) == 6
        assert len(topics) == MAX_TOPICS
        assert all(t.summary == "Explore this topic in depth" for t in news)

    @pytest.mark.asyncio
    async def test_refined_titles_keep_links(self, mock_llm_cls) -> None:
        refined = {"topics": [{"title": f"Refined {i}", "summary": "s"} for i in range(2)]}
        llm = mock_llm_cls(content=json.dumps(refined))
        engine = TopicEngine(
            WritingAssistant(llm),
            feeds=[],
            fetcher=_fetcher([_headlines(2)]),
            rng=random.Random(3),
        )
        topics = await engine.fetch_mixed_topics()
        news = [t for t in topics if t.source == "Wire"]
        assert {t.title for t in news} == {"Refined 0", "Refined 1"}
        assert all(t.link.startswith("https://x/") for t in news)

    @pytest.mark.asyncio
    async def test_duplicates_across_feeds_removed(self, mock_llm_cls) -> None:
        assistant = WritingAssistant(mock_llm_cls(configured=False))
        batches = [_headlines(1, "A"), _headlines(1, "B")]
        engine = TopicEngine(assistant, feeds=[], fetcher=_fetcher(batches), rng=random.Random(4))
        topics = await engine.fetch_mixed_topics()
        assert len([t for t in topics if t.source in ("A", "B")]) == 1


def test_default_topics_are_broad() -> None:
    engine = TopicEngine(WritingAssistant(None), rng=random.Random(5))
    topics = engine.default_topics()
    assert len(topics) == 8
    titles = {t for t, _ in BROAD_TOPICS}
    assert all(t.title in titles for t in topics)
