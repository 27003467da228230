"""Trending topics API endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from canvas.deps import get_topic_engine
from canvas.topics.engine import TopicEngine
from canvas.topics.feeds import NewsTopic

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["topics"])


@router.get("/topics", response_model=list[NewsTopic])
async def get_topics(
    engine: TopicEngine = Depends(get_topic_engine),
) -> list[NewsTopic]:
    """Mix of refined news headlines and AI topic ideas; never empty."""
    try:
        return await engine.fetch_mixed_topics()
    except Exception as e:
        logger.error("Topic fetch failed, serving defaults: %s", e, exc_info=True)
        return engine.default_topics()
