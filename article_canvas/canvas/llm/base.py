"""Abstract LLM backend interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field


class LLMNotConfiguredError(RuntimeError):
    """Raised when a call needs a backend that has no usable credentials."""


class LLMResponse(BaseModel):
    """Structured response from any LLM backend."""

    content: str
    model: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0
    thinking: str | None = None
    raw: dict[str, Any] = Field(default_factory=dict)


class LLMBackend(ABC):
    """Abstract interface for chat-completion backends."""

    @property
    def model_name(self) -> str:
        return getattr(self, "_model", "")

    @property
    def is_configured(self) -> bool:
        """False when the backend cannot be called (e.g. missing API key)."""
        return True

    @abstractmethod
    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        context: str | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        """Generate a completion.

        ``context`` is sent as a second system message (article state), and
        ``json_mode`` asks providers that support it for a JSON object reply.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the backend is reachable and ready."""
        ...
