"""FastAPI application -- Article Canvas entrypoint."""

from __future__ import annotations

import json
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from fastapi import FastAPI

import canvas.deps as deps
from canvas.api.articles import router as articles_router
from canvas.api.assistant import router as assistant_router
from canvas.api.charts import router as charts_router
from canvas.api.chat import router as chat_router
from canvas.api.publish import router as publish_router
from canvas.api.settings import router as settings_router
from canvas.api.topics import router as topics_router
from canvas.articles.store import ArticleStore
from canvas.assistant.store import IdeaStore
from canvas.charts.store import ChartStore
from canvas.db.database import Database
from canvas.llm.factory import create_backend, create_local_backend
from canvas.planner.store import TranscriptStore
from canvas.publish.github import GitHubConfig

logger = logging.getLogger(__name__)

# Persisted settings keys that override options on startup.
SETTINGS_KEYS = (
    "llm_backend",
    "llm_api_url",
    "llm_api_key",
    "llm_model",
    "ollama_url",
    "ollama_model",
    "github_token",
    "github_repo",
    "github_branch",
)


def _load_options() -> dict[str, Any]:
    """Load options from the options file or environment fallback."""
    opts_path = os.environ.get("CANVAS_OPTIONS_PATH", "/data/options.json")
    if Path(opts_path).exists():
        return json.loads(Path(opts_path).read_text())
    return {
        "llm_backend": os.environ.get("LLM_BACKEND", "openai_compat"),
        "llm_api_url": os.environ.get("LLM_API_URL", "https://api.openai.com"),
        "llm_api_key": os.environ.get("LLM_API_KEY", os.environ.get("OPENAI_API_KEY", "")),
        "llm_model": os.environ.get("LLM_MODEL", "gpt-4o"),
        "ollama_url": os.environ.get("OLLAMA_URL", "http://localhost:11434"),
        "ollama_model": os.environ.get("OLLAMA_MODEL", "deepseek-r1:1.5b"),
        "github_token": os.environ.get("GITHUB_TOKEN", ""),
        "github_repo": os.environ.get("GITHUB_REPO", ""),
        "github_branch": os.environ.get("GITHUB_BRANCH", "main"),
    }


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: init resources on startup, clean up on shutdown."""
    log_level = logging.DEBUG if os.environ.get("CANVAS_DEV_MODE") else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    options = _load_options()

    deps._database = Database()
    await deps._database.connect()
    logger.info("Database connected")

    persisted = await deps._database.get_all_settings()
    options.update({k: v for k, v in persisted.items() if k in SETTINGS_KEYS})
    logger.info(
        "Article Canvas starting with options: %s",
        {k: v for k, v in options.items() if "key" not in k and "token" not in k},
    )

    conn = deps._database.conn
    deps._article_store = ArticleStore(conn)
    deps._transcript_store = TranscriptStore(conn)
    deps._idea_store = IdeaStore(conn)
    deps._chart_store = ChartStore(conn)

    llm = create_backend(options)
    deps.install_engines(llm, create_local_backend(options))
    logger.info(
        "LLM backend: %s (model: %s, configured: %s)",
        options.get("llm_backend"), llm.model_name, llm.is_configured,
    )

    deps._github_config = GitHubConfig(
        token=options.get("github_token") or "",
        repo=options.get("github_repo") or "",
        branch=options.get("github_branch") or "main",
    )

    yield

    for backend in (deps._llm_backend, deps._local_backend):
        if backend is not None and hasattr(backend, "close"):
            await backend.close()
    if deps._database:
        await deps._database.close()
    deps._database = None
    deps._llm_backend = None
    deps._local_backend = None
    deps._conversation_engine = None
    deps._writing_assistant = None
    deps._topic_engine = None
    deps._article_store = None
    deps._transcript_store = None
    deps._idea_store = None
    deps._chart_store = None


app = FastAPI(
    title="Article Canvas",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(articles_router)
app.include_router(chat_router)
app.include_router(assistant_router)
app.include_router(topics_router)
app.include_router(charts_router)
app.include_router(publish_router)
app.include_router(settings_router)
