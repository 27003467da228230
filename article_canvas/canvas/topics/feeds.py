"""RSS news feeds used to seed trending article topics."""

from __future__ import annotations

import logging
import re

import aiohttp
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class NewsTopic(BaseModel):
    title: str
    link: str = "#"
    summary: str = ""
    source: str = ""


class FeedSource(BaseModel):
    url: str
    name: str


RSS_FEEDS: list[FeedSource] = [
    FeedSource(
        url="https://feeds.finance.yahoo.com/rss/2.0/headline?s=^GSPC&region=US&lang=en-US",
        name="Yahoo Finance",
    ),
    FeedSource(url="https://rss.nytimes.com/services/xml/rss/nyt/Business.xml", name="NY Times Business"),
    FeedSource(url="https://feeds.bbci.co.uk/news/business/rss.xml", name="BBC Business"),
    FeedSource(url="https://www.cnbc.com/id/100003114/device/rss/rss.html", name="CNBC"),
    FeedSource(url="https://feeds.marketwatch.com/marketwatch/topstories/", name="MarketWatch"),
]

MAX_ITEMS_PER_FEED = 5
MIN_TITLE_LENGTH = 15

_ITEM_RE = re.compile(r"<item>([\s\S]*?)</item>", re.IGNORECASE)
_HTML_ENTITIES = {
    "&amp;": "&",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&apos;": "'",
    "&nbsp;": " ",
}
_ENTITY_RE = re.compile(r"&[^;\s]+;")


def _field_re(tag: str) -> re.Pattern[str]:
    return re.compile(
        rf"<{tag}>(?:<!\[CDATA\[)?(.*?)(?:\]\]>)?</{tag}>",
        re.IGNORECASE | re.DOTALL,
    )


_TITLE_RE = _field_re("title")
_LINK_RE = _field_re("link")
_DESC_RE = _field_re("description")


def decode_html_entities(text: str) -> str:
    """Decode the handful of entities feeds commonly use; others stay as-is."""
    return _ENTITY_RE.sub(lambda m: _HTML_ENTITIES.get(m.group(0), m.group(0)), text)


def parse_rss_feed(xml: str, source_name: str) -> list[NewsTopic]:
    """Pull up to five usable items out of an RSS document."""
    topics: list[NewsTopic] = []
    for item in _ITEM_RE.finditer(xml):
        if len(topics) >= MAX_ITEMS_PER_FEED:
            break
        content = item.group(1)
        title_match = _TITLE_RE.search(content)
        if not title_match or not title_match.group(1):
            continue

        title = decode_html_entities(title_match.group(1).strip())
        if len(title) < MIN_TITLE_LENGTH or "sponsored" in title.lower():
            continue

        link_match = _LINK_RE.search(content)
        desc_match = _DESC_RE.search(content)
        summary = ""
        if desc_match:
            summary = re.sub(r"<[^>]+>", "", decode_html_entities(desc_match.group(1))).strip()[:150]

        topics.append(
            NewsTopic(
                title=title,
                link=link_match.group(1).strip() if link_match else "#",
                summary=summary,
                source=source_name,
            )
        )
    return topics


def deduplicate_topics(topics: list[NewsTopic]) -> list[NewsTopic]:
    """Drop topics whose normalized title prefix was already seen."""
    seen: set[str] = set()
    unique: list[NewsTopic] = []
    for topic in topics:
        key = re.sub(r"[^a-z0-9]", "", topic.title.lower())[:30]
        if key in seen:
            continue
        seen.add(key)
        unique.append(topic)
    return unique


async def fetch_feed(session: aiohttp.ClientSession, feed: FeedSource) -> list[NewsTopic]:
    """Fetch and parse one feed. Network or HTTP errors yield an empty list."""
    try:
        async with session.get(feed.url) as resp:
            if resp.status != 200:
                logger.warning("Feed %s returned HTTP %d", feed.name, resp.status)
                return []
            xml = await resp.text()
    except (aiohttp.ClientError, TimeoutError) as e:
        logger.warning("Error fetching %s: %s", feed.name, e)
        return []
    return parse_rss_feed(xml, feed.name)
