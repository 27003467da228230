"""Build LLM backends from options/settings dictionaries."""

from __future__ import annotations

import logging
from typing import Any

from canvas.llm.base import LLMBackend
from canvas.llm.ollama import DEFAULT_OLLAMA_MODEL, DEFAULT_OLLAMA_URL, OllamaBackend
from canvas.llm.openai_compat import DEFAULT_BASE_URL, DEFAULT_MODEL, OpenAICompatBackend

logger = logging.getLogger(__name__)


def create_backend(options: dict[str, Any]) -> LLMBackend:
    """Main chat backend (``llm_backend`` is ``openai_compat`` or ``ollama``)."""
    backend_type = options.get("llm_backend") or "openai_compat"
    api_url = options.get("llm_api_url") or ""
    model = options.get("llm_model") or ""

    if backend_type == "ollama":
        return OllamaBackend(
            base_url=api_url or DEFAULT_OLLAMA_URL,
            model=model or DEFAULT_OLLAMA_MODEL,
        )
    return OpenAICompatBackend(
        base_url=api_url or DEFAULT_BASE_URL,
        model=model or DEFAULT_MODEL,
        api_key=options.get("llm_api_key") or "",
    )


def create_local_backend(options: dict[str, Any]) -> LLMBackend | None:
    """Optional local model tried first for topic work; disabled by empty URL."""
    url = options.get("ollama_url", DEFAULT_OLLAMA_URL)
    if not url:
        return None
    return OllamaBackend(
        base_url=url,
        model=options.get("ollama_model") or DEFAULT_OLLAMA_MODEL,
    )


def backend_type_of(llm: LLMBackend) -> str:
    return "ollama" if isinstance(llm, OllamaBackend) else "openai_compat"
