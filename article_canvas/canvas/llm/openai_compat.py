"""Chat-completions backend for OpenAI and compatible providers.

Anything serving ``/v1/chat/completions`` works: OpenAI itself, OpenRouter,
Groq or a self-hosted vLLM. Only the public OpenAI endpoint requires a key.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from canvas.llm.base import LLMBackend, LLMResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com"
DEFAULT_MODEL = "gpt-4o"

COMPLETIONS_PATH = "/v1/chat/completions"


def _error_message(resp: httpx.Response) -> str:
    try:
        return resp.json().get("error", {}).get("message") or resp.text
    except ValueError:
        return resp.text


class OpenAICompatBackend(LLMBackend):
    """Article assistant calls over ``/v1/chat/completions``."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        api_key: str = "",
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._api_key = api_key
        self._client: httpx.AsyncClient | None = None

    @property
    def has_api_key(self) -> bool:
        return bool(self._api_key)

    @property
    def is_configured(self) -> bool:
        # The public endpoint needs a key; self-hosted ones may not.
        return bool(self._api_key) or self._base_url != DEFAULT_BASE_URL

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is not None and not self._client.is_closed:
            return self._client
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else {}
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=headers,
            timeout=httpx.Timeout(120.0, connect=10.0),
        )
        return self._client

    @staticmethod
    def _messages(
        system_prompt: str, user_prompt: str, context: str | None,
    ) -> list[dict[str, str]]:
        messages = [{"role": "system", "content": system_prompt}]
        if context:
            messages.append(
                {"role": "system", "content": f"Current article context:\n{context}"}
            )
        messages.append({"role": "user", "content": user_prompt})
        return messages

    def _decode(self, resp: httpx.Response) -> dict[str, Any]:
        """Return the completion JSON or raise RuntimeError describing the failure."""
        if resp.status_code != 200:
            raise RuntimeError(f"API error ({resp.status_code}): {_error_message(resp)}")

        hint = f"Is llm_api_url ({self._base_url}) an OpenAI-compatible endpoint?"
        if not resp.content.strip():
            raise RuntimeError(f"Empty reply from chat completions. {hint}")
        try:
            data = resp.json()
        except ValueError:
            raise RuntimeError(f"Non-JSON reply: {resp.text[:200]}... {hint}")

        if not isinstance(data, dict) or not data.get("choices"):
            keys = list(data.keys()) if isinstance(data, dict) else type(data).__name__
            raise RuntimeError(f"Reply is missing 'choices' (got {keys}).")
        return data

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        context: str | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Send system (+ article context) and user messages; one completion back."""
        payload: dict[str, Any] = {
            "model": self._model,
            "messages": self._messages(system_prompt, user_prompt, context),
            "stream": False,
        }
        if max_tokens:
            payload["max_tokens"] = max_tokens
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        logger.debug(
            "Chat completion: model=%s, prompt_len=%d, context=%s, json=%s",
            self._model, len(user_prompt), bool(context), json_mode,
        )
        client = await self._get_client()
        data = self._decode(await client.post(COMPLETIONS_PATH, json=payload))

        message = data["choices"][0].get("message") or {}
        usage = data.get("usage") or {}
        return LLMResponse(
            content=message.get("content") or "",
            model=data.get("model") or self._model,
            prompt_tokens=usage.get("prompt_tokens", 0),
            completion_tokens=usage.get("completion_tokens", 0),
            thinking=message.get("reasoning") or None,
            raw=data,
        )

    async def health_check(self) -> bool:
        """True when the model listing endpoint answers 200."""
        try:
            client = await self._get_client()
            return (await client.get("/v1/models")).status_code == 200
        except httpx.HTTPError:
            return False

    async def close(self) -> None:
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
