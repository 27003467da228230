"""Planning chat API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from canvas.articles.models import Article
from canvas.articles.store import ArticleNotFoundError, ArticleStore
from canvas.deps import get_article_store, get_conversation_engine, get_transcript_store
from canvas.planner.engine import ChatResult, ConversationEngine
from canvas.planner.models import Choice, PlanningPhase, Turn
from canvas.planner.phase import resolve_phase, rounds_remaining
from canvas.planner.store import TranscriptStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])


class ChatMessageRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=10000)


class ChoiceRequest(BaseModel):
    choice_id: str = Field(..., min_length=1)


class TranscriptResponse(BaseModel):
    article_id: str
    turns: list[Turn]
    phase: PlanningPhase
    rounds_remaining: int
    outline_completed: int = 0
    outline_total: int = 0


class ChatResponse(BaseModel):
    user_turn: Turn
    assistant_turn: Turn
    phase: PlanningPhase
    rounds_remaining: int
    article: Article
    error: str | None = None
    model: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0


async def _require_article(store: ArticleStore, article_id: str) -> Article:
    article = await store.get_article(article_id)
    if article is None:
        raise HTTPException(status_code=404, detail="Article not found")
    return article


async def _persist(
    article_id: str,
    result: ChatResult,
    article: Article,
    transcripts: TranscriptStore,
    articles: ArticleStore,
) -> ChatResponse:
    await transcripts.append(article_id, [result.user_turn, result.assistant_turn])
    if result.article_update is not None:
        try:
            article = await articles.update_article(article_id, result.article_update)
        except ArticleNotFoundError:
            # Deleted while the model was answering.
            raise HTTPException(status_code=404, detail="Article not found")
    return ChatResponse(
        user_turn=result.user_turn,
        assistant_turn=result.assistant_turn,
        phase=result.phase,
        rounds_remaining=result.rounds_remaining,
        article=article,
        error=result.error,
        model=result.model,
        prompt_tokens=result.prompt_tokens,
        completion_tokens=result.completion_tokens,
    )


@router.get("/articles/{article_id}/chat", response_model=TranscriptResponse)
async def get_transcript(
    article_id: str,
    articles: ArticleStore = Depends(get_article_store),
    transcripts: TranscriptStore = Depends(get_transcript_store),
) -> TranscriptResponse:
    """Return the conversation with the current planning phase."""
    article = await _require_article(articles, article_id)
    transcript = await transcripts.load(article_id)
    done, total = article.outline_progress()
    return TranscriptResponse(
        article_id=article_id,
        turns=list(transcript.turns),
        phase=resolve_phase(transcript, article),
        rounds_remaining=rounds_remaining(transcript),
        outline_completed=done,
        outline_total=total,
    )


@router.post("/articles/{article_id}/chat", response_model=ChatResponse)
async def send_message(
    article_id: str,
    body: ChatMessageRequest,
    engine: ConversationEngine = Depends(get_conversation_engine),
    articles: ArticleStore = Depends(get_article_store),
    transcripts: TranscriptStore = Depends(get_transcript_store),
) -> ChatResponse:
    """Send one user message; the reply and any title/outline changes are saved."""
    async with engine.lock_for(article_id):
        article = await _require_article(articles, article_id)
        transcript = await transcripts.load(article_id)
        try:
            result = await engine.respond(article, transcript, body.message)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return await _persist(article_id, result, article, transcripts, articles)


@router.post("/articles/{article_id}/chat/choose", response_model=ChatResponse)
async def choose(
    article_id: str,
    body: ChoiceRequest,
    engine: ConversationEngine = Depends(get_conversation_engine),
    articles: ArticleStore = Depends(get_article_store),
    transcripts: TranscriptStore = Depends(get_transcript_store),
) -> ChatResponse:
    """Pick one of the choices offered by the latest assistant turn."""
    async with engine.lock_for(article_id):
        article = await _require_article(articles, article_id)
        transcript = await transcripts.load(article_id)

        last_assistant = next(
            (t for t in reversed(transcript.turns) if t.role == "assistant"), None
        )
        choice: Choice | None = None
        if last_assistant is not None and last_assistant.choices:
            choice = next((c for c in last_assistant.choices if c.id == body.choice_id), None)
        if choice is None:
            raise HTTPException(status_code=404, detail="Choice not found")

        result = await engine.select_choice(article, transcript, choice)
        return await _persist(article_id, result, article, transcripts, articles)


@router.delete("/articles/{article_id}/chat")
async def clear_transcript(
    article_id: str,
    engine: ConversationEngine = Depends(get_conversation_engine),
    transcripts: TranscriptStore = Depends(get_transcript_store),
) -> dict:
    """Reset the conversation; the planning phase starts again at angle."""
    async with engine.lock_for(article_id):
        removed = await transcripts.clear(article_id)
    logger.info("Cleared %d chat turns for article %s", removed, article_id)
    return {"status": "cleared", "removed": removed}
