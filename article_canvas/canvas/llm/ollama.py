"""Ollama backend, used as the local model for topic work or as the main model."""

from __future__ import annotations

import logging
import re
from typing import Any

import httpx

from canvas.llm.base import LLMBackend, LLMResponse

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "deepseek-r1:1.5b"

# Reasoning models such as deepseek-r1 prefix their answer with a think block.
_THINK_RE = re.compile(r"<think>(.*?)</think>", re.DOTALL)


def split_thinking(text: str) -> tuple[str, str | None]:
    """Separate a ``<think>`` block from the answer text."""
    match = _THINK_RE.search(text)
    if match is None:
        return text, None
    return _THINK_RE.sub("", text).strip(), match.group(1).strip() or None


class OllamaBackend(LLMBackend):
    """Single-prompt ``/api/generate`` calls, non-streaming."""

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        model: str = DEFAULT_OLLAMA_MODEL,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None and not self._client.is_closed:
            return self._client
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=httpx.Timeout(120.0, connect=10.0),
        )
        return self._client

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        context: str | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        # /api/generate has one prompt slot, so article context is prefixed.
        prompt = f"Current article context:\n{context}\n\n{user_prompt}" if context else user_prompt
        payload: dict[str, Any] = {
            "model": self._model,
            "system": system_prompt,
            "prompt": prompt,
            "stream": False,
        }
        if max_tokens:
            payload["options"] = {"num_predict": max_tokens}
        if json_mode:
            payload["format"] = "json"

        logger.debug("Ollama generate: model=%s, prompt_len=%d", self._model, len(prompt))
        client = await self._get_client()
        resp = await client.post("/api/generate", json=payload)
        resp.raise_for_status()

        try:
            data = resp.json()
        except ValueError:
            raise RuntimeError(
                f"Ollama at {self._base_url} sent a non-JSON reply: {resp.text[:200]!r}"
            )
        if not isinstance(data, dict) or "response" not in data:
            keys = list(data.keys()) if isinstance(data, dict) else type(data).__name__
            raise RuntimeError(f"Ollama reply is missing 'response' key (got {keys}).")

        content, thinking = split_thinking(data["response"] or "")
        return LLMResponse(
            content=content,
            model=data.get("model") or self._model,
            prompt_tokens=data.get("prompt_eval_count", 0),
            completion_tokens=data.get("eval_count", 0),
            thinking=thinking,
            raw=data,
        )

    async def health_check(self) -> bool:
        """Ollama answers ``GET /`` with 200 when it is running."""
        try:
            client = await self._get_client()
            return (await client.get("/")).status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
