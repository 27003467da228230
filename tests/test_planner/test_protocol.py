"""Tests for the tagged-block reply protocol."""

from __future__ import annotations

from canvas.planner.protocol import (
    CHOICE_VALUE_PREFIX,
    FALLBACK_REASONING_STEPS,
    extract_body,
    first_block,
    iter_blocks,
    parse_choices,
    parse_outline,
    parse_reasoning,
    parse_response,
    strip_blocks,
)

FULL_REPLY = """[THINKING]
- Reader is a retail investor
- Angle should be contrarian
[/THINKING]
[TITLE]Rate Cuts Won't Save Housing[/TITLE]
Here are three directions you could take.
[CHOICES]
**Supply Shortage**
Inventory is the real constraint, not rates.
**Lock-in Effect**
Owners with 3% mortgages won't sell.
[/CHOICES]
Pick one and we'll sharpen it."""


class TestBlockScanner:
    def test_iter_blocks_finds_all_in_order(self) -> None:
        text = "a[TITLE]one[/TITLE]b[TITLE]two[/TITLE]c"
        blocks = list(iter_blocks(text, "TITLE"))
        assert [b.inner for b in blocks] == ["one", "two"]
        assert text[blocks[0].start:blocks[0].end] == "[TITLE]one[/TITLE]"

    def test_opener_without_closer_is_ignored(self) -> None:
        assert first_block("[TITLE]never closed", "TITLE") is None
        assert strip_blocks("[TITLE]never closed", "TITLE") == "[TITLE]never closed"

    def test_closer_before_opener_is_ignored(self) -> None:
        assert first_block("[/TITLE] stray [TITLE]", "TITLE") is None

    def test_nearest_closer_wins(self) -> None:
        block = first_block("[TITLE]a[/TITLE] b [/TITLE]", "TITLE")
        assert block is not None
        assert block.inner == "a"

    def test_strip_removes_every_block(self) -> None:
        text = "x [TITLE]a[/TITLE] y [TITLE]b[/TITLE] z"
        assert strip_blocks(text, "TITLE") == "x  y  z"

    def test_extract_body_trims(self) -> None:
        assert extract_body("  [TITLE]t[/TITLE]\n hello \n") == "hello"


class TestParseResponse:
    def test_empty_reply(self) -> None:
        parsed = parse_response("")
        assert parsed.body == ""
        assert parsed.reasoning_steps == list(FALLBACK_REASONING_STEPS)
        assert parsed.suggested_title is None
        assert parsed.choices is None
        assert parsed.outline_items is None

    def test_none_reply_is_treated_as_empty(self) -> None:
        parsed = parse_response(None)  # type: ignore[arg-type]
        assert parsed.body == ""

    def test_plain_prose(self) -> None:
        parsed = parse_response("Just some advice.")
        assert parsed.body == "Just some advice."
        assert parsed.reasoning_steps == list(FALLBACK_REASONING_STEPS)

    def test_title_and_body(self) -> None:
        parsed = parse_response("[TITLE]Rate Cuts Won't Save Housing[/TITLE]\nSome prose.")
        assert parsed.suggested_title == "Rate Cuts Won't Save Housing"
        assert parsed.body == "Some prose."

    def test_title_is_trimmed(self) -> None:
        assert parse_response("[TITLE]  Spaced  [/TITLE]").suggested_title == "Spaced"

    def test_full_reply(self) -> None:
        parsed = parse_response(FULL_REPLY)
        assert parsed.reasoning_steps == [
            "Reader is a retail investor",
            "Angle should be contrarian",
        ]
        assert parsed.suggested_title == "Rate Cuts Won't Save Housing"
        assert parsed.choices is not None
        assert [c.label for c in parsed.choices] == ["Supply Shortage", "Lock-in Effect"]
        assert "[" not in parsed.body
        assert parsed.body.startswith("Here are three directions")
        assert parsed.body.endswith("Pick one and we'll sharpen it.")

    def test_body_reparse_is_stable(self) -> None:
        body = parse_response(FULL_REPLY).body
        assert parse_response(body).body == body

    def test_only_first_thinking_block_is_used(self) -> None:
        raw = "[THINKING]first step[/THINKING]middle[THINKING]second step[/THINKING]"
        parsed = parse_response(raw)
        assert parsed.reasoning_steps == ["first step"]
        assert "first step" not in parsed.body
        assert "second step" not in parsed.body
        assert parsed.body == "middle"

    def test_empty_thinking_block_gives_no_steps(self) -> None:
        parsed = parse_response("[THINKING]\n\n[/THINKING]body")
        assert parsed.reasoning_steps == []

    def test_malformed_title_stays_in_body(self) -> None:
        parsed = parse_response("[TITLE]unterminated\nBody")
        assert parsed.suggested_title is None
        assert parsed.body == "[TITLE]unterminated\nBody"

    def test_outline_block(self) -> None:
        parsed = parse_response(
            "[OUTLINE]1. Intro\n2. Body\n3. Conclusion[/OUTLINE]", timestamp_ms=42,
        )
        assert parsed.outline_items is not None
        assert [i.title for i in parsed.outline_items] == ["Intro", "Body", "Conclusion"]
        assert all(not i.completed for i in parsed.outline_items)
        assert [i.id for i in parsed.outline_items] == [
            "outline-42-0",
            "outline-42-1",
            "outline-42-2",
        ]
        assert parsed.body == ""

    def test_blocks_in_any_order(self) -> None:
        raw = "[OUTLINE]- A[/OUTLINE][TITLE]T[/TITLE]text[THINKING]x[/THINKING]"
        parsed = parse_response(raw)
        assert parsed.suggested_title == "T"
        assert parsed.reasoning_steps == ["x"]
        assert parsed.outline_items is not None
        assert parsed.body == "text"


class TestParseReasoning:
    def test_strips_bullets_and_blank_lines(self) -> None:
        inner = "\n- one\n• two\n\nthree\n"
        assert parse_reasoning(inner) == ["one", "two", "three"]

    def test_only_first_bullet_removed(self) -> None:
        assert parse_reasoning("- a - b") == ["a - b"]


class TestParseChoices:
    def test_two_bold_chunks(self) -> None:
        inner = "**Angle A**\nFirst description\n**Angle B**\nSecond description"
        choices = parse_choices(inner)
        assert len(choices) == 2
        assert all(c.id for c in choices)
        assert len({c.id for c in choices}) == 2
        assert choices[0].value.startswith(CHOICE_VALUE_PREFIX + "Angle A")
        assert choices[0].value == "I want to explore: Angle A. First description"
        assert choices[1].description == "Second description"

    def test_multiline_description_is_joined(self) -> None:
        choices = parse_choices("**Label**\nline one\nline two")
        assert choices[0].description == "line one line two"

    def test_label_without_bold(self) -> None:
        choices = parse_choices("Plain label\nsome text")
        assert choices[0].label == "Plain label"

    def test_missing_description(self) -> None:
        choices = parse_choices("**Only label**")
        assert choices[0].description is None
        assert choices[0].value == "I want to explore: Only label. "

    def test_preamble_before_first_bold(self) -> None:
        choices = parse_choices("Options:\n**A**\ndesc")
        assert [c.label for c in choices] == ["Options:", "A"]

    def test_empty_block(self) -> None:
        assert parse_choices("   \n  ") == []


class TestParseOutline:
    def test_markers_are_stripped(self) -> None:
        items = parse_outline("1. Intro\n- Body\n* Point\n• Bullet\n2.3 Nested", timestamp_ms=1)
        assert [i.title for i in items] == ["Intro", "Body", "Point", "Bullet", "Nested"]

    def test_blank_lines_skipped(self) -> None:
        items = parse_outline("1. One\n\n   \n3. Three", timestamp_ms=7)
        assert [i.title for i in items] == ["One", "Three"]
        assert [i.id for i in items] == ["outline-7-0", "outline-7-1"]

    def test_marker_only_line_keeps_its_slot(self) -> None:
        parsed = parse_response("[OUTLINE]1. A\n---\n2. B[/OUTLINE]", timestamp_ms=7)
        assert parsed.outline_items is not None
        assert [i.title for i in parsed.outline_items] == ["A", "", "B"]
        assert [i.id for i in parsed.outline_items] == [
            "outline-7-0",
            "outline-7-1",
            "outline-7-2",
        ]

    def test_uses_clock_when_no_timestamp(self) -> None:
        items = parse_outline("A")
        assert items[0].id.startswith("outline-")
