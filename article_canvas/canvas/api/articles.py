"""Article and outline API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from canvas.articles.models import DEFAULT_TITLE, Annotation, Article, ArticleUpdate
from canvas.articles.store import ArticleNotFoundError, ArticleStore
from canvas.assistant.engine import WritingAssistant
from canvas.deps import get_article_store, get_conversation_engine, get_writing_assistant
from canvas.llm.base import LLMNotConfiguredError
from canvas.planner.engine import ConversationEngine
from canvas.planner.models import OutlineItem

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["articles"])


class ArticleCreateRequest(BaseModel):
    title: str = Field(DEFAULT_TITLE, min_length=1, max_length=300)
    content: str = ""
    tags: list[str] = Field(default_factory=list)


class ArticleListItem(BaseModel):
    id: str
    title: str
    excerpt: str = ""
    status: str = "draft"
    updated_at: str = ""


class ArticleListResponse(BaseModel):
    drafts: list[ArticleListItem]
    published: list[ArticleListItem]
    total: int


class OutlineItemRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=300)


class OutlineResponse(BaseModel):
    outline: list[OutlineItem]
    completed: int
    total: int


class GenerateOutlineResponse(OutlineResponse):
    content_seeded: bool = False


def _outline_response(article: Article) -> OutlineResponse:
    done, total = article.outline_progress()
    return OutlineResponse(outline=article.outline, completed=done, total=total)


async def _require(store: ArticleStore, article_id: str) -> Article:
    article = await store.get_article(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


@router.get("/articles", response_model=ArticleListResponse)
async def list_articles(
    store: ArticleStore = Depends(get_article_store),
) -> ArticleListResponse:
    """List articles grouped into drafts and published, newest first."""
    articles = await store.list_articles()
    items = [
        ArticleListItem(
            id=a.id,
            title=a.title,
            excerpt=a.excerpt,
            status=a.status,
            updated_at=a.updated_at.isoformat(),
        )
        for a in articles
    ]
    return ArticleListResponse(
        drafts=[i for i in items if i.status == "draft"],
        published=[i for i in items if i.status == "published"],
        total=len(items),
    )


@router.post("/articles", response_model=Article)
async def create_article(
    body: ArticleCreateRequest,
    store: ArticleStore = Depends(get_article_store),
) -> Article:
    article = Article(title=body.title.strip(), content=body.content, tags=body.tags)
    created = await store.create_article(article)
    logger.info("Created article %s (%r)", created.id, created.title)
    return created


@router.get("/articles/{article_id}", response_model=Article)
async def get_article(
    article_id: str,
    store: ArticleStore = Depends(get_article_store),
) -> Article:
    return await _require(store, article_id)


@router.put("/articles/{article_id}", response_model=Article)
async def update_article(
    article_id: str,
    body: ArticleUpdate,
    store: ArticleStore = Depends(get_article_store),
) -> Article:
    """Partial update; only provided fields change."""
    try:
        return await store.update_article(article_id, body)
    except ArticleNotFoundError:
        raise HTTPException(status_code=404, detail="Article not found")


@router.put("/articles/{article_id}/annotations", response_model=Article)
async def replace_annotations(
    article_id: str,
    body: list[Annotation],
    store: ArticleStore = Depends(get_article_store),
) -> Article:
    try:
        return await store.update_article(article_id, ArticleUpdate(annotations=body))
    except ArticleNotFoundError:
        raise HTTPException(status_code=404, detail="Article not found")


@router.delete("/articles/{article_id}")
async def delete_article(
    article_id: str,
    store: ArticleStore = Depends(get_article_store),
    engine: ConversationEngine = Depends(get_conversation_engine),
) -> dict[str, str]:
    """Delete an article, its outline and its conversation."""
    async with engine.lock_for(article_id):
        deleted = await store.delete_article(article_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Article not found")
    return {"status": "deleted"}


# -- outline --


@router.get("/articles/{article_id}/outline", response_model=OutlineResponse)
async def get_outline(
    article_id: str,
    store: ArticleStore = Depends(get_article_store),
) -> OutlineResponse:
    return _outline_response(await _require(store, article_id))


@router.post("/articles/{article_id}/outline", response_model=OutlineResponse)
async def add_outline_item(
    article_id: str,
    body: OutlineItemRequest,
    store: ArticleStore = Depends(get_article_store),
) -> OutlineResponse:
    try:
        article = await store.add_outline_item(article_id, body.title)
    except ArticleNotFoundError:
        raise HTTPException(status_code=404, detail="Article not found")
    return _outline_response(article)


@router.post("/articles/{article_id}/outline/{item_id}/toggle", response_model=OutlineResponse)
async def toggle_outline_item(
    article_id: str,
    item_id: str,
    store: ArticleStore = Depends(get_article_store),
) -> OutlineResponse:
    try:
        article = await store.toggle_outline_item(article_id, item_id)
    except ArticleNotFoundError:
        raise HTTPException(status_code=404, detail="Article not found")
    return _outline_response(article)


@router.put("/articles/{article_id}/outline/{item_id}", response_model=OutlineResponse)
async def rename_outline_item(
    article_id: str,
    item_id: str,
    body: OutlineItemRequest,
    store: ArticleStore = Depends(get_article_store),
) -> OutlineResponse:
    try:
        article = await store.rename_outline_item(article_id, item_id, body.title)
    except ArticleNotFoundError:
        raise HTTPException(status_code=404, detail="Article not found")
    return _outline_response(article)


@router.delete("/articles/{article_id}/outline/{item_id}", response_model=OutlineResponse)
async def delete_outline_item(
    article_id: str,
    item_id: str,
    store: ArticleStore = Depends(get_article_store),
) -> OutlineResponse:
    try:
        article = await store.delete_outline_item(article_id, item_id)
    except ArticleNotFoundError:
        raise HTTPException(status_code=404, detail="Article not found")
    return _outline_response(article)


@router.post("/articles/{article_id}/outline/generate", response_model=GenerateOutlineResponse)
async def generate_outline(
    article_id: str,
    store: ArticleStore = Depends(get_article_store),
    assistant: WritingAssistant = Depends(get_writing_assistant),
) -> GenerateOutlineResponse:
    """Replace the outline with an AI-generated one for the article title."""
    article = await _require(store, article_id)
    try:
        items, content = await assistant.generate_outline_items(article)
    except LLMNotConfiguredError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Outline generation failed: %s", e, exc_info=True)
        raise HTTPException(status_code=502, detail=str(e))

    if not items:
        return GenerateOutlineResponse(**_outline_response(article).model_dump())

    fields: dict = {"outline": items}
    if content is not None:
        fields["content"] = content
    article = await store.update_article(article_id, ArticleUpdate(**fields))
    return GenerateOutlineResponse(
        **_outline_response(article).model_dump(),
        content_seeded=content is not None,
    )
