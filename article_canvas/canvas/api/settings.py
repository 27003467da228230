"""Settings API — LLM backend and GitHub publishing configuration."""

from __future__ import annotations

import logging
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

import canvas.deps as deps
from canvas.db.database import Database
from canvas.deps import get_database, get_github_config, get_llm_backend
from canvas.llm.base import LLMBackend
from canvas.llm.factory import backend_type_of, create_backend, create_local_backend
from canvas.llm.ollama import OllamaBackend
from canvas.publish.github import GitHubConfig

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["settings"])


# -- LLM settings --


class LLMSettingsResponse(BaseModel):
    llm_backend: str = ""
    llm_api_url: str = ""
    llm_model: str = ""
    has_api_key: bool = False
    configured: bool = False
    ollama_url: str = ""
    ollama_model: str = ""


class LLMSettingsUpdateRequest(BaseModel):
    llm_backend: Literal["ollama", "openai_compat"] | None = None
    llm_api_url: str | None = None
    llm_api_key: str | None = None
    llm_model: str | None = None
    ollama_url: str | None = None
    ollama_model: str | None = None


def _llm_settings(llm: LLMBackend, local: LLMBackend | None) -> LLMSettingsResponse:
    return LLMSettingsResponse(
        llm_backend=backend_type_of(llm),
        llm_api_url=getattr(llm, "_base_url", ""),
        llm_model=llm.model_name,
        has_api_key=bool(getattr(llm, "_api_key", "")),
        configured=llm.is_configured,
        ollama_url=getattr(local, "_base_url", "") if local else "",
        ollama_model=local.model_name if local else "",
    )


@router.get("/settings/llm", response_model=LLMSettingsResponse)
async def get_llm_settings(
    llm: LLMBackend = Depends(get_llm_backend),
) -> LLMSettingsResponse:
    """Return current LLM backend configuration (key is redacted)."""
    return _llm_settings(llm, deps._local_backend)


@router.put("/settings/llm", response_model=LLMSettingsResponse)
async def update_llm_settings(
    body: LLMSettingsUpdateRequest,
    db: Database = Depends(get_database),
) -> LLMSettingsResponse:
    """Update LLM settings at runtime and persist them.

    Only provided fields are updated; omitted fields keep their current value.
    """
    current = deps._llm_backend
    if current is None:
        raise HTTPException(status_code=500, detail="LLM backend not initialised")
    local = deps._local_backend

    options = {
        "llm_backend": body.llm_backend or backend_type_of(current),
        "llm_api_url": (
            body.llm_api_url.strip()
            if body.llm_api_url is not None
            else getattr(current, "_base_url", "")
        ),
        "llm_model": (
            body.llm_model.strip() if body.llm_model is not None else current.model_name
        ),
        "llm_api_key": (
            body.llm_api_key
            if body.llm_api_key is not None
            else getattr(current, "_api_key", "")
        ),
        "ollama_url": (
            body.ollama_url.strip()
            if body.ollama_url is not None
            else getattr(local, "_base_url", "") if local else ""
        ),
        "ollama_model": (
            body.ollama_model.strip()
            if body.ollama_model is not None
            else local.model_name if local else ""
        ),
    }

    # Switching backend type without a URL falls back to that backend's default.
    if body.llm_backend and body.llm_backend != backend_type_of(current) and body.llm_api_url is None:
        options["llm_api_url"] = ""
        if body.llm_model is None:
            options["llm_model"] = ""

    for key, value in options.items():
        await db.set_setting(key, value)

    new_llm = create_backend(options)
    new_local = create_local_backend(options)
    deps.install_engines(new_llm, new_local)

    # Chats already in flight still use the old clients.
    await deps.wait_for_chats()
    for backend in (current, local):
        if backend is not None and hasattr(backend, "close"):
            await backend.close()

    logger.info(
        "LLM settings updated: backend=%s, model=%s, url=%s, local=%s",
        options["llm_backend"], new_llm.model_name,
        getattr(new_llm, "_base_url", ""), isinstance(new_local, OllamaBackend),
    )
    return _llm_settings(new_llm, new_local)


@router.get("/health/llm")
async def health_check_llm(
    llm: LLMBackend = Depends(get_llm_backend),
) -> dict:
    """Check if the LLM backend is reachable."""
    model = llm.model_name
    if not llm.is_configured:
        return {"healthy": False, "model": model, "error": "not configured"}
    try:
        healthy = await llm.health_check()
    except Exception as e:
        return {"healthy": False, "model": model, "error": str(e)}
    return {"healthy": healthy, "model": model, "error": "" if healthy else "unreachable"}


# -- GitHub settings --


class GitHubSettingsResponse(BaseModel):
    repo: str = ""
    branch: str = "main"
    has_token: bool = False


class GitHubSettingsUpdateRequest(BaseModel):
    token: str | None = None
    repo: str | None = None
    branch: str | None = None


@router.get("/settings/github", response_model=GitHubSettingsResponse)
async def get_github_settings(
    config: GitHubConfig = Depends(get_github_config),
) -> GitHubSettingsResponse:
    return GitHubSettingsResponse(
        repo=config.repo, branch=config.branch, has_token=bool(config.token),
    )


@router.put("/settings/github", response_model=GitHubSettingsResponse)
async def update_github_settings(
    body: GitHubSettingsUpdateRequest,
    db: Database = Depends(get_database),
    config: GitHubConfig = Depends(get_github_config),
) -> GitHubSettingsResponse:
    new_config = GitHubConfig(
        token=body.token if body.token is not None else config.token,
        repo=body.repo.strip() if body.repo is not None else config.repo,
        branch=(body.branch.strip() if body.branch is not None else config.branch) or "main",
    )
    if new_config.repo and "/" not in new_config.repo:
        raise HTTPException(status_code=400, detail="Invalid repo format. Use: owner/repo-name")

    await db.set_setting("github_token", new_config.token)
    await db.set_setting("github_repo", new_config.repo)
    await db.set_setting("github_branch", new_config.branch)
    deps._github_config = new_config

    logger.info("GitHub settings updated: repo=%s, branch=%s", new_config.repo, new_config.branch)
    return GitHubSettingsResponse(
        repo=new_config.repo, branch=new_config.branch, has_token=bool(new_config.token),
    )
