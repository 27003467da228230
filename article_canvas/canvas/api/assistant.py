"""Writing assistant API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from canvas.assistant.engine import WritingAssistant
from canvas.assistant.models import BrainstormIdea
from canvas.assistant.store import IdeaStore
from canvas.deps import get_idea_store, get_writing_assistant
from canvas.llm.base import LLMNotConfiguredError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/assistant", tags=["assistant"])


class BrainstormRequest(BaseModel):
    topic: str = Field(..., min_length=1, max_length=500)
    article_id: str | None = None


class AskRequest(BaseModel):
    question: str = Field(..., min_length=1, max_length=5000)
    context: str | None = None


class ImproveRequest(BaseModel):
    text: str = Field(..., min_length=1)


class TextResponse(BaseModel):
    content: str


@router.post("/brainstorm", response_model=BrainstormIdea)
async def brainstorm(
    body: BrainstormRequest,
    assistant: WritingAssistant = Depends(get_writing_assistant),
    store: IdeaStore = Depends(get_idea_store),
) -> BrainstormIdea:
    """Brainstorm angles for a topic and keep the result as a saved idea."""
    try:
        content = await assistant.brainstorm_ideas(body.topic)
    except LLMNotConfiguredError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Brainstorm failed: %s", e, exc_info=True)
        raise HTTPException(status_code=502, detail=f"LLM request failed: {e}")
    return await store.add_idea(BrainstormIdea(content=content, article_id=body.article_id))


@router.post("/ask", response_model=TextResponse)
async def ask(
    body: AskRequest,
    assistant: WritingAssistant = Depends(get_writing_assistant),
) -> TextResponse:
    try:
        content = await assistant.ask(body.question, body.context)
    except LLMNotConfiguredError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Ask failed: %s", e, exc_info=True)
        raise HTTPException(status_code=502, detail=f"LLM request failed: {e}")
    return TextResponse(content=content)


@router.post("/improve", response_model=TextResponse)
async def improve(
    body: ImproveRequest,
    assistant: WritingAssistant = Depends(get_writing_assistant),
) -> TextResponse:
    """Return an edited version of the given text."""
    try:
        content = await assistant.improve_writing(body.text)
    except LLMNotConfiguredError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error("Improve failed: %s", e, exc_info=True)
        raise HTTPException(status_code=502, detail=f"LLM request failed: {e}")
    return TextResponse(content=content)


@router.get("/ideas", response_model=list[BrainstormIdea])
async def list_ideas(
    article_id: str | None = None,
    store: IdeaStore = Depends(get_idea_store),
) -> list[BrainstormIdea]:
    return await store.list_ideas(article_id)


@router.delete("/ideas/{idea_id}")
async def delete_idea(
    idea_id: str,
    store: IdeaStore = Depends(get_idea_store),
) -> dict[str, str]:
    deleted = await store.delete_idea(idea_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Idea not found")
    return {"status": "deleted"}
