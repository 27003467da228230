"""Tests for markdown export."""

from __future__ import annotations

from datetime import date
from io import StringIO

from ruamel.yaml import YAML

from canvas.publish.markdown import post_filename, to_markdown

DAY = date(2024, 3, 9)


def _front_matter(markdown: str) -> dict:
    _, front, _ = markdown.split("---\n", 2)
    return YAML(typ="safe").load(StringIO(front))


def test_front_matter_fields() -> None:
    md = to_markdown('Rates: "Cut" or Hold?', "Body text", ["economy", "fed"], today=DAY)
    assert md.startswith("---\n")
    front = _front_matter(md)
    assert front == {
        "title": 'Rates: "Cut" or Hold?',
        "date": "2024-03-09",
        "tags": ["economy", "fed"],
    }
    assert md.endswith("---\n\nBody text")


def test_title_is_double_quoted() -> None:
    md = to_markdown("Plain", "", [], today=DAY)
    assert 'title: "Plain"' in md
    assert _front_matter(md)["tags"] == []


def test_post_filename() -> None:
    assert post_filename("Rate Cuts Won't Save Housing!", DAY) == (
        "_posts/2024-03-09-rate-cuts-won-t-save-housing-.md"
    )
