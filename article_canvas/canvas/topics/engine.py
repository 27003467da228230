"""Topic engine: mixes refined news headlines with generated topic ideas."""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Awaitable, Callable

import aiohttp

from canvas.assistant.engine import WritingAssistant
from canvas.topics.feeds import (
    RSS_FEEDS,
    FeedSource,
    NewsTopic,
    deduplicate_topics,
    fetch_feed,
)

logger = logging.getLogger(__name__)

NEWS_SAMPLE = 8
NEWS_IN_MIX = 6
IDEAS_IN_MIX = 4
MAX_TOPICS = 10

BROAD_TOPICS: list[tuple[str, str]] = [
    ("The Future of Remote Work and Its Economic Impact",
     "How flexible work arrangements are reshaping real estate, cities, and productivity"),
    ("Generational Wealth Transfer and Investment Patterns",
     "How millennials and Gen Z are approaching money differently"),
    ("The Rise of the Creator Economy",
     "How individual creators are building businesses and challenging traditional media"),
    ("Climate Change and Business Adaptation Strategies",
     "How companies are preparing for and profiting from climate shifts"),
    ("The Changing Nature of Consumer Loyalty",
     "Why brand switching is accelerating and what it means for businesses"),
    ("Healthcare Innovation and Accessibility",
     "The tension between cutting-edge medicine and equitable access"),
    ("The Reshoring Movement in Manufacturing",
     "Why companies are bringing production back and what it means for jobs"),
    ("Privacy vs Personalization in the Digital Age",
     "The tradeoffs consumers make between convenience and data protection"),
    ("The Evolution of Higher Education's Value Proposition",
     "Is college still worth it? Alternative paths to career success"),
    ("Small Business Resilience in Uncertain Times",
     "Strategies that help local businesses thrive amid economic volatility"),
    ("The Psychology of Financial Decision-Making",
     "How emotions and biases shape our money choices"),
    ("Automation's Impact on Middle-Skill Jobs",
     "Which careers are at risk and how workers can adapt"),
]

FeedFetcher = Callable[[list[FeedSource]], Awaitable[list[list[NewsTopic]]]]


def broad_topics() -> list[NewsTopic]:
    return [
        NewsTopic(title=title, link="#", summary=summary, source="Brainstorm")
        for title, summary in BROAD_TOPICS
    ]


async def fetch_all_feeds(feeds: list[FeedSource]) -> list[list[NewsTopic]]:
    """Fetch every feed concurrently; a failed feed contributes nothing."""
    timeout = aiohttp.ClientTimeout(total=15)
    async with aiohttp.ClientSession(timeout=timeout) as session:
        results = await asyncio.gather(
            *(fetch_feed(session, feed) for feed in feeds),
            return_exceptions=True,
        )
    batches: list[list[NewsTopic]] = []
    for feed, result in zip(feeds, results):
        if isinstance(result, BaseException):
            logger.warning("Feed %s failed: %s", feed.name, result)
            continue
        batches.append(result)
    return batches


class TopicEngine:
    """Builds the trending-topic list shown on the start page."""

    def __init__(
        self,
        assistant: WritingAssistant,
        feeds: list[FeedSource] | None = None,
        fetcher: FeedFetcher = fetch_all_feeds,
        rng: random.Random | None = None,
    ) -> None:
        self._assistant = assistant
        self._feeds = feeds if feeds is not None else RSS_FEEDS
        self._fetcher = fetcher
        self._rng = rng or random.Random()

    def _shuffled(self, items: list[NewsTopic]) -> list[NewsTopic]:
        copy = list(items)
        self._rng.shuffle(copy)
        return copy

    def default_topics(self) -> list[NewsTopic]:
        return self._shuffled(broad_topics())[:NEWS_SAMPLE]

    async def fetch_mixed_topics(self) -> list[NewsTopic]:
        batches = await self._fetcher(self._feeds)
        news = deduplicate_topics([t for batch in batches for t in batch])
        selection = self._shuffled(news)[:NEWS_SAMPLE]
        logger.info("Fetched %d unique headlines, using %d", len(news), len(selection))

        refined_news = selection
        if selection:
            refined = await self._assistant.refine_topic_titles([n.title for n in selection])
            refined_news = [
                NewsTopic(
                    title=r.title,
                    link=selection[i].link if i < len(selection) else "#",
                    summary=r.summary,
                    source=selection[i].source if i < len(selection) else "News",
                )
                for i, r in enumerate(refined)
            ]

        ideas = await self._assistant.generate_topic_ideas()
        if ideas:
            brainstorm = [
                NewsTopic(title=t.title, link="#", summary=t.summary, source="Brainstorm")
                for t in ideas
            ]
        else:
            brainstorm = self._shuffled(broad_topics())[:IDEAS_IN_MIX]

        mixed = self._shuffled(refined_news[:NEWS_IN_MIX] + brainstorm[:IDEAS_IN_MIX])
        return mixed[:MAX_TOPICS] if mixed else self.default_topics()
