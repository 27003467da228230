"""Conversation engine — drives the angle -> thesis -> outline dialogue."""

from __future__ import annotations

import asyncio
import logging
import weakref

from pydantic import BaseModel

from canvas.articles.models import (
    DEFAULT_TITLE,
    HELP_TITLE_PREFIX,
    Article,
    ArticleUpdate,
    html_to_text,
)
from canvas.llm.base import LLMBackend
from canvas.planner.models import (
    Choice,
    ConversationTranscript,
    ParsedResponse,
    PlanningPhase,
    Turn,
)
from canvas.planner.phase import current_phase, resolve_phase, rounds_remaining
from canvas.planner.prompts import (
    ASSISTANT_SYSTEM_PROMPT,
    PLANNING_KEYWORDS,
    WRITING_INSTRUCTIONS,
    build_chat_user_prompt,
    build_planning_instructions,
)
from canvas.planner.protocol import parse_response

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "⚠️ Please add your OpenAI API key in settings to use AI assistance."
CHAT_MAX_TOKENS = 2000


class ChatResult(BaseModel):
    """Outcome of one user turn."""

    user_turn: Turn
    assistant_turn: Turn
    phase: PlanningPhase
    rounds_remaining: int
    parsed: ParsedResponse | None = None
    article_update: ArticleUpdate | None = None
    error: str | None = None
    model: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0


def is_planning_request(user_input: str, phase: PlanningPhase, is_new_article: bool) -> bool:
    if phase == PlanningPhase.writing:
        return False
    lowered = user_input.lower()
    return is_new_article or any(k in lowered for k in PLANNING_KEYWORDS)


def build_context(article: Article | None) -> str:
    """Render the article state sent alongside every chat request."""
    if article is None:
        return "No article selected yet."

    text = html_to_text(article.content) or "(empty)"
    context = f"Article Title: {article.title}\n\nCurrent Content:\n{text}"
    if article.annotations:
        lines = []
        for a in article.annotations:
            summary = f" (Summary: {a.summary})" if a.summary else ""
            lines.append(f'- [{a.type.upper()}] "{a.text}"{summary}')
        context += "\n\nAnnotations:\n" + "\n".join(lines)
    return context


def apply_to_article(
    article: Article,
    parsed: ParsedResponse,
    was_first_response: bool,
) -> ArticleUpdate | None:
    """Work out which article fields a parsed reply should change.

    The suggested title only replaces a placeholder title (or lands on the
    first assistant reply); outline items are appended to the existing
    outline.
    """
    update = ArticleUpdate()
    changed = False

    if parsed.suggested_title and (
        article.title == DEFAULT_TITLE
        or was_first_response
        or article.title.startswith(HELP_TITLE_PREFIX)
    ):
        update.title = parsed.suggested_title
        changed = True

    if parsed.outline_items:
        update.outline = [*article.outline, *parsed.outline_items]
        changed = True

    return update if changed else None


class ConversationEngine:
    """Runs one model call per user turn and folds the reply into state."""

    def __init__(
        self,
        llm_backend: LLMBackend | None,
        locks: weakref.WeakValueDictionary[str, asyncio.Lock] | None = None,
    ) -> None:
        self._llm = llm_backend
        # Entries vanish once no request holds or waits on the lock. Pass a
        # shared map so locks outlive engine rebuilds.
        self._locks = locks if locks is not None else weakref.WeakValueDictionary()

    def lock_for(self, key: str) -> asyncio.Lock:
        """Per-article lock; hold it across load -> respond -> persist."""
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    def select_instructions(
        self,
        user_input: str,
        transcript: ConversationTranscript,
        article: Article | None,
    ) -> str:
        # Article state only matters for the displayed phase; instructions
        # follow the turn count.
        phase = current_phase(transcript)
        is_new = article is None or article.is_new()
        if is_planning_request(user_input, phase, is_new):
            return build_planning_instructions(phase, rounds_remaining(transcript), is_new)
        return WRITING_INSTRUCTIONS

    async def respond(
        self,
        article: Article | None,
        transcript: ConversationTranscript,
        user_input: str,
    ) -> ChatResult:
        """Append a user turn, ask the model and append its parsed reply.

        Callers sharing a transcript must hold :meth:`lock_for` so turns land
        in the order they were issued.
        """
        if not user_input.strip():
            raise ValueError("Message cannot be empty")

        phase = resolve_phase(transcript, article)
        remaining = rounds_remaining(transcript)
        was_first_response = transcript.assistant_turn_count() == 0

        user_turn = transcript.append(Turn(role="user", content=user_input))

        if self._llm is None or not self._llm.is_configured:
            assistant_turn = transcript.append(
                Turn(role="assistant", content=MISSING_KEY_MESSAGE, is_animating=True)
            )
            return ChatResult(
                user_turn=user_turn,
                assistant_turn=assistant_turn,
                phase=phase,
                rounds_remaining=remaining,
                error="LLM backend not configured",
            )

        instructions = self.select_instructions(user_input, transcript, article)
        try:
            llm_response = await self._llm.generate(
                ASSISTANT_SYSTEM_PROMPT,
                build_chat_user_prompt(instructions, user_input),
                context=build_context(article),
                max_tokens=CHAT_MAX_TOKENS,
            )
        except Exception as e:
            logger.error("Chat request failed: %s", e, exc_info=True)
            message = str(e) or "Failed to get response"
            assistant_turn = transcript.append(
                Turn(role="assistant", content=f"❌ Error: {message}", is_animating=True)
            )
            return ChatResult(
                user_turn=user_turn,
                assistant_turn=assistant_turn,
                phase=phase,
                rounds_remaining=remaining,
                error=message,
            )

        parsed = parse_response(llm_response.content)
        assistant_turn = transcript.append(
            Turn(
                role="assistant",
                content=parsed.body,
                is_animating=True,
                choices=parsed.choices,
                thinking_steps=parsed.reasoning_steps,
            )
        )
        logger.info(
            "Chat reply in phase %s: %d choices, %d outline items, title=%s",
            phase.value,
            len(parsed.choices or []),
            len(parsed.outline_items or []),
            bool(parsed.suggested_title),
        )

        article_update = (
            apply_to_article(article, parsed, was_first_response) if article else None
        )

        return ChatResult(
            user_turn=user_turn,
            assistant_turn=assistant_turn,
            phase=phase,
            rounds_remaining=remaining,
            parsed=parsed,
            article_update=article_update,
            model=llm_response.model,
            prompt_tokens=llm_response.prompt_tokens,
            completion_tokens=llm_response.completion_tokens,
        )

    async def select_choice(
        self,
        article: Article | None,
        transcript: ConversationTranscript,
        choice: Choice,
    ) -> ChatResult:
        """Replay a choice's value as the next user turn."""
        return await self.respond(article, transcript, choice.value)
