"""Shared FastAPI dependencies."""

from __future__ import annotations

import asyncio
import weakref
from typing import TYPE_CHECKING

from canvas.llm.base import LLMBackend
from canvas.publish.github import GitHubConfig

if TYPE_CHECKING:
    from canvas.articles.store import ArticleStore
    from canvas.assistant.engine import WritingAssistant
    from canvas.assistant.store import IdeaStore
    from canvas.charts.store import ChartStore
    from canvas.db.database import Database
    from canvas.planner.engine import ConversationEngine
    from canvas.planner.store import TranscriptStore
    from canvas.topics.engine import TopicEngine

_database: Database | None = None
_llm_backend: LLMBackend | None = None
_local_backend: LLMBackend | None = None
_conversation_engine: ConversationEngine | None = None
_writing_assistant: WritingAssistant | None = None
_topic_engine: TopicEngine | None = None
_article_store: ArticleStore | None = None
_transcript_store: TranscriptStore | None = None
_idea_store: IdeaStore | None = None
_chart_store: ChartStore | None = None
_github_config: GitHubConfig = GitHubConfig()

# Per-article chat locks, shared by every ConversationEngine built here.
_chat_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()


def install_engines(llm: LLMBackend, local: LLMBackend | None) -> None:
    """(Re)build every engine that holds a backend reference."""
    from canvas.assistant.engine import WritingAssistant
    from canvas.planner.engine import ConversationEngine
    from canvas.topics.engine import TopicEngine

    global _llm_backend, _local_backend
    global _conversation_engine, _writing_assistant, _topic_engine

    _llm_backend = llm
    _local_backend = local
    _conversation_engine = ConversationEngine(llm, locks=_chat_locks)
    _writing_assistant = WritingAssistant(llm, local)
    _topic_engine = TopicEngine(_writing_assistant)


def get_database() -> Database:
    """FastAPI dependency: return the shared Database."""
    assert _database is not None, "Database not initialised"
    return _database


def get_llm_backend() -> LLMBackend:
    """FastAPI dependency: return the shared LLMBackend."""
    assert _llm_backend is not None, "LLMBackend not initialised"
    return _llm_backend


def get_conversation_engine() -> ConversationEngine:
    assert _conversation_engine is not None, "ConversationEngine not initialised"
    return _conversation_engine


def get_writing_assistant() -> WritingAssistant:
    assert _writing_assistant is not None, "WritingAssistant not initialised"
    return _writing_assistant


def get_topic_engine() -> TopicEngine:
    assert _topic_engine is not None, "TopicEngine not initialised"
    return _topic_engine


def get_article_store() -> ArticleStore:
    assert _article_store is not None, "ArticleStore not initialised"
    return _article_store


def get_transcript_store() -> TranscriptStore:
    assert _transcript_store is not None, "TranscriptStore not initialised"
    return _transcript_store


def get_idea_store() -> IdeaStore:
    assert _idea_store is not None, "IdeaStore not initialised"
    return _idea_store


def get_chart_store() -> ChartStore:
    assert _chart_store is not None, "ChartStore not initialised"
    return _chart_store


def get_github_config() -> GitHubConfig:
    return _github_config


async def wait_for_chats() -> None:
    """Block until every chat request in flight has released its lock."""
    for lock in list(_chat_locks.values()):
        async with lock:
            pass
