"""Shared test fixtures and configuration."""

import os
import sys
from pathlib import Path

# Add article_canvas/ to Python path so `from canvas.xxx` imports work
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "article_canvas"))

import pytest
import pytest_asyncio

os.environ["CANVAS_DEV_MODE"] = "true"

from canvas.db.database import Database  # noqa: E402
from canvas.llm.base import LLMBackend, LLMResponse  # noqa: E402


class MockLLM(LLMBackend):
    """Controllable mock LLM backend that records every call."""

    def __init__(
        self,
        content: str = "",
        fail: bool = False,
        configured: bool = True,
        model: str = "mock-model",
    ) -> None:
        self._content = content
        self._fail = fail
        self._configured = configured
        self._model = model
        self.calls: list[dict] = []

    @property
    def is_configured(self) -> bool:
        return self._configured

    async def generate(
        self,
        system_prompt: str,
        user_prompt: str,
        context: str | None = None,
        max_tokens: int | None = None,
        json_mode: bool = False,
    ) -> LLMResponse:
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "context": context,
                "max_tokens": max_tokens,
                "json_mode": json_mode,
            }
        )
        if self._fail:
            raise RuntimeError("LLM failure")
        return LLMResponse(
            content=self._content,
            model=self._model,
            prompt_tokens=100,
            completion_tokens=50,
        )

    async def health_check(self) -> bool:
        return not self._fail


@pytest.fixture
def mock_llm_cls() -> type[MockLLM]:
    return MockLLM


@pytest_asyncio.fixture
async def db(tmp_path: Path):
    """Create a temporary database for testing."""
    database = Database(db_path=str(tmp_path / "test.db"))
    await database.connect()
    yield database
    await database.close()
