"""Tests for article records."""

from __future__ import annotations

from canvas.articles.models import (
    DEFAULT_TITLE,
    Annotation,
    Article,
    html_to_text,
    make_excerpt,
)
from canvas.planner.models import OutlineItem


def test_html_to_text() -> None:
    assert html_to_text("<h1>Title</h1><p>Body <em>text</em></p>") == "TitleBody text"
    assert html_to_text("") == ""


class TestMakeExcerpt:
    def test_short_text_unchanged(self) -> None:
        assert make_excerpt("<p>Short</p>") == "Short"

    def test_long_text_truncated(self) -> None:
        excerpt = make_excerpt("<p>" + "a" * 200 + "</p>")
        assert excerpt == "a" * 150 + "..."


class TestArticle:
    def test_new_article_is_planning(self) -> None:
        article = Article()
        assert article.title == DEFAULT_TITLE
        assert article.is_in_planning()
        assert article.is_new()
        assert article.status == "draft"

    def test_titled_article_with_content(self) -> None:
        article = Article(title="Housing", content="<p>Text</p>")
        assert not article.is_in_planning()
        assert not article.is_new()

    def test_outline_progress(self) -> None:
        article = Article(
            outline=[
                OutlineItem(title="A", completed=True),
                OutlineItem(title="B"),
                OutlineItem(title="C"),
            ]
        )
        assert article.outline_progress() == (1, 3)


class TestAnnotation:
    def test_from_and_to_aliases(self) -> None:
        annotation = Annotation.model_validate(
            {"type": "needs-replanning", "text": "x", "from": 3, "to": 9}
        )
        assert (annotation.start, annotation.end) == (3, 9)
        dumped = annotation.model_dump(by_alias=True)
        assert dumped["from"] == 3
        assert dumped["to"] == 9

    def test_populate_by_field_name(self) -> None:
        assert Annotation(type="good", text="x", start=1, end=2).end == 2
