"""Tagged-block reply protocol.

The planning prompts ask the model to wrap structured content in bracket
tags::

    [THINKING] ... [/THINKING]
    [TITLE] ... [/TITLE]
    [CHOICES] ... [/CHOICES]
    [OUTLINE] ... [/OUTLINE]

Tags are optional, may come in any order and are often malformed. A block is
an opener followed by the nearest matching closer after it. Resolution rules:

- interpretation uses the first block of each kind;
- the visible body has every block of every kind removed.

Nothing in here raises on bad input: a missing or broken block simply means
the corresponding field is absent.
"""

from __future__ import annotations

import logging
import re
import time
from typing import Iterator, NamedTuple

from canvas.planner.models import Choice, OutlineItem, ParsedResponse

logger = logging.getLogger(__name__)

THINKING = "THINKING"
TITLE = "TITLE"
CHOICES = "CHOICES"
OUTLINE = "OUTLINE"

# Body scrubbing runs kind by kind in this order.
BLOCK_KINDS = (THINKING, TITLE, CHOICES, OUTLINE)

FALLBACK_REASONING_STEPS = ("Analyzing your request...", "Formulating response...")

CHOICE_VALUE_PREFIX = "I want to explore: "

_BULLET_RE = re.compile(r"^[-•]\s*")
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_OUTLINE_MARKER_RE = re.compile(r"^[\d.\-*•\s]+")


class Block(NamedTuple):
    """Location of one tagged block inside a reply."""

    kind: str
    start: int
    end: int
    inner: str


def iter_blocks(text: str, kind: str) -> Iterator[Block]:
    """Yield non-overlapping ``[kind]...[/kind]`` blocks, left to right."""
    opener = f"[{kind}]"
    closer = f"[/{kind}]"
    pos = 0
    while True:
        start = text.find(opener, pos)
        if start == -1:
            return
        inner_start = start + len(opener)
        close = text.find(closer, inner_start)
        if close == -1:
            # No closer after this opener means none after any later opener.
            return
        end = close + len(closer)
        yield Block(kind, start, end, text[inner_start:close])
        pos = end


def first_block(text: str, kind: str) -> Block | None:
    return next(iter_blocks(text, kind), None)


def strip_blocks(text: str, kind: str) -> str:
    """Remove every ``kind`` block from ``text``."""
    parts: list[str] = []
    pos = 0
    for block in iter_blocks(text, kind):
        parts.append(text[pos:block.start])
        pos = block.end
    parts.append(text[pos:])
    return "".join(parts)


def extract_body(raw: str) -> str:
    body = raw
    for kind in BLOCK_KINDS:
        body = strip_blocks(body, kind)
    return body.strip()


def parse_reasoning(inner: str) -> list[str]:
    steps: list[str] = []
    for line in inner.strip().split("\n"):
        step = _BULLET_RE.sub("", line.strip(), count=1).strip()
        if step:
            steps.append(step)
    return steps


def _split_choice_chunks(text: str) -> list[str]:
    """Split before every line that starts with ``**``."""
    chunks: list[list[str]] = []
    for line in text.split("\n"):
        if not chunks or line.startswith("**"):
            chunks.append([line])
        else:
            chunks[-1].append(line)
    return ["\n".join(c) for c in chunks if any(c)]


def parse_choices(inner: str) -> list[Choice]:
    choices: list[Choice] = []
    for index, chunk in enumerate(_split_choice_chunks(inner.strip())):
        lines = chunk.strip().split("\n")
        bold = _BOLD_RE.search(lines[0])
        label = bold.group(1).strip() if bold else lines[0].strip()
        description = " ".join(lines[1:]).strip()
        if not label:
            continue
        choices.append(
            Choice(
                id=f"choice-{index}",
                label=label,
                value=f"{CHOICE_VALUE_PREFIX}{label}. {description}",
                description=description or None,
            )
        )
    return choices


def parse_outline(inner: str, timestamp_ms: int | None = None) -> list[OutlineItem]:
    stamp = timestamp_ms if timestamp_ms is not None else int(time.time() * 1000)
    # One item per non-empty line, even when only markers were on it.
    lines = [line for line in inner.strip().split("\n") if line.strip()]
    return [
        OutlineItem(
            id=f"outline-{stamp}-{i}",
            title=_OUTLINE_MARKER_RE.sub("", line).strip(),
            completed=False,
        )
        for i, line in enumerate(lines)
    ]


def parse_response(raw: str, timestamp_ms: int | None = None) -> ParsedResponse:
    """Decompose one raw model reply into body and tagged fields."""
    raw = raw or ""

    thinking = first_block(raw, THINKING)
    title = first_block(raw, TITLE)
    choices = first_block(raw, CHOICES)
    outline = first_block(raw, OUTLINE)

    if thinking is not None:
        reasoning_steps = parse_reasoning(thinking.inner)
    else:
        logger.debug("No [THINKING] block in reply, using fallback steps")
        reasoning_steps = list(FALLBACK_REASONING_STEPS)

    return ParsedResponse(
        body=extract_body(raw),
        reasoning_steps=reasoning_steps,
        suggested_title=title.inner.strip() if title is not None else None,
        choices=parse_choices(choices.inner) if choices is not None else None,
        outline_items=(
            parse_outline(outline.inner, timestamp_ms) if outline is not None else None
        ),
    )
