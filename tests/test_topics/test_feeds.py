"""Tests for RSS feed parsing."""

from __future__ import annotations

from canvas.topics.feeds import (
    NewsTopic,
    decode_html_entities,
    deduplicate_topics,
    parse_rss_feed,
)

RSS = """<?xml version="1.0"?>
<rss><channel>
<title>Feed title is not an item</title>
<item>
  <title><![CDATA[Fed Holds Rates Steady Amid Inflation Worries]]></title>
  <link>https://example.com/fed</link>
  <description><![CDATA[<p>The central bank &amp; markets <b>react</b>.</p>]]></description>
</item>
<item>
  <title>Short one</title>
  <link>https://example.com/short</link>
</item>
<item>
  <title>Sponsored: Best Credit Cards of the Year</title>
</item>
<item>
  <title>Oil Prices Climb on Supply Concerns &amp; Demand</title>
</item>
</channel></rss>"""


class TestParseRssFeed:
    def test_filters_and_extracts(self) -> None:
        topics = parse_rss_feed(RSS, "Test Feed")
        assert [t.title for t in topics] == [
            "Fed Holds Rates Steady Amid Inflation Worries",
            "Oil Prices Climb on Supply Concerns & Demand",
        ]
        first = topics[0]
        assert first.link == "https://example.com/fed"
        assert first.summary == "The central bank & markets react."
        assert first.source == "Test Feed"
        assert topics[1].link == "#"
        assert topics[1].summary == ""

    def test_at_most_five_items(self) -> None:
        items = "".join(
            f"<item><title>Headline number {i} about markets</title></item>" for i in range(9)
        )
        assert len(parse_rss_feed(f"<rss>{items}</rss>", "F")) == 5

    def test_summary_is_truncated(self) -> None:
        xml = (
            "<item><title>A long enough headline here</title>"
            f"<description>{'x' * 400}</description></item>"
        )
        assert len(parse_rss_feed(xml, "F")[0].summary) == 150

    def test_not_xml(self) -> None:
        assert parse_rss_feed("<html>nope</html>", "F") == []


def test_decode_html_entities() -> None:
    assert decode_html_entities("a &amp; b &lt;c&gt; &#39;d&#39; &unknown;") == "a & b <c> 'd' &unknown;"


def test_deduplicate_by_title_prefix() -> None:
    topics = [
        NewsTopic(title="Fed Holds Rates Steady Amid Inflation Worries", source="A"),
        NewsTopic(title="FED holds rates steady amid inflation worries!", source="B"),
        NewsTopic(title="Oil Prices Climb", source="C"),
    ]
    unique = deduplicate_topics(topics)
    assert [t.source for t in unique] == ["A", "C"]
