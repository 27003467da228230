"""Publish and export API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from canvas.articles.models import Article, ArticleUpdate, html_to_text
from canvas.articles.store import ArticleStore
from canvas.deps import get_article_store, get_github_config
from canvas.publish.github import GitHubConfig, GitHubPublisher
from canvas.publish.markdown import post_filename, to_markdown

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["publish"])


class PublishResponse(BaseModel):
    success: bool
    url: str | None = None
    filename: str
    article: Article


async def _require(store: ArticleStore, article_id: str) -> Article:
    article = await store.get_article(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


def _render(article: Article) -> str:
    return to_markdown(article.title, html_to_text(article.content), article.tags)


@router.get("/articles/{article_id}/markdown", response_class=PlainTextResponse)
async def export_markdown(
    article_id: str,
    store: ArticleStore = Depends(get_article_store),
) -> str:
    """Article as markdown with front matter, without publishing it."""
    return _render(await _require(store, article_id))


@router.post("/articles/{article_id}/publish", response_model=PublishResponse)
async def publish_article(
    article_id: str,
    store: ArticleStore = Depends(get_article_store),
    config: GitHubConfig = Depends(get_github_config),
) -> PublishResponse:
    """Commit the article to the configured repo and mark it published."""
    article = await _require(store, article_id)
    publisher = GitHubPublisher.from_config(config)
    if not publisher.is_configured:
        raise HTTPException(status_code=400, detail="GitHub token and repo are required")

    filename = post_filename(article.title)
    result = await publisher.publish(
        filename, _render(article), f"Add article: {article.title}",
    )
    if not result.success:
        raise HTTPException(status_code=502, detail=result.error or "Failed to publish")

    article = await store.update_article(
        article_id, ArticleUpdate(status="published", published_url=result.url),
    )
    return PublishResponse(success=True, url=result.url, filename=filename, article=article)
