"""Prompt templates for the planning conversation."""

from __future__ import annotations

from canvas.planner.models import PlanningPhase

ASSISTANT_SYSTEM_PROMPT = """\
You are a helpful research and writing assistant.
Help the user with their questions about articles, research, and writing.
Be concise but thorough. If you're helping with writing, suggest improvements \
and alternatives.
When providing data or statistics, cite sources when possible."""


WRITING_FRAMEWORK = """\
=== INTERNAL WRITING FRAMEWORK ===
Structure: Point → Evidence → Explain → Link (PEEL)
- Thesis must be arguable, specific, and provable
- Each section needs: claim + evidence + analysis
- Max 3 planning rounds, then produce outline
==="""


_TITLE_SECTION = """\
[TITLE]
Short punchy title (3-6 words)
[/TITLE]

"""

_CHOICES_SECTION = """\
[CHOICES]
For each option use this EXACT format (topic on first line, description on second):
**Topic or Direction Title**
One sentence explaining what this explores and why it's worth pursuing.

Example format:
**The Fed's Credibility Problem**
Argues that recent policy reversals have eroded market trust, using bond yield \
data as evidence.

**Rate Cuts Won't Save Housing**
Makes the case that structural supply issues matter more than mortgage rates \
for affordability.

Provide 3-4 options like this, each with a bold title and one-line description.
[/CHOICES]"""

_OUTLINE_SECTION = """\
[OUTLINE]
**Thesis:** [One arguable sentence]

1. **[Argument 1 title]** - [What you'll prove and key evidence]
2. **[Argument 2 title]** - [What you'll prove and key evidence]
3. **[Argument 3 title]** - [What you'll prove and key evidence]
4. **Conclusion** - [The "so what" takeaway for readers]
[/OUTLINE]"""


WRITING_INSTRUCTIONS = """\
You are a focused writing assistant helping execute an article plan.

[THINKING]
- What the user needs
- Best way to help
[/THINKING]

Your helpful, direct response.

[CHOICES] (if there are clear next actions)
**Next logical step**
Action prompt
**Alternative approach**
Action prompt
[/CHOICES]"""


PLANNING_KEYWORDS = ("plan", "outline", "structure", "write about", "article about")


def build_planning_instructions(
    phase: PlanningPhase,
    rounds_left: int,
    is_new_article: bool,
) -> str:
    """Build the planning-round instructions.

    The OUTLINE section is only requested in the ``outline`` round and the
    TITLE section only while the article is new.
    """
    wants_outline = phase == PlanningPhase.outline
    lines = [
        WRITING_FRAMEWORK,
        "",
        "You recommend article directions like a thoughtful editor. "
        "Be concise and specific.",
        "",
        f"PHASE: {phase.value.upper()} ({rounds_left} rounds left)",
        "",
        "[THINKING]",
        "- Brief analysis of the topic",
        "- What angles are most compelling",
        "[/THINKING]",
        "",
    ]
    head = "\n".join(lines)
    if is_new_article:
        head += _TITLE_SECTION
    head += "One sentence of context, then present your recommendations.\n\n"
    head += _CHOICES_SECTION + "\n\n"
    if wants_outline:
        head += _OUTLINE_SECTION + "\n\n"

    rules = [
        "RULES:",
        "- Options must be SPECIFIC angles, not generic categories",
        "- Each option = bold title + one descriptive sentence",
        "- Be opinionated about which direction is strongest",
        "- MUST include [OUTLINE] now"
        if wants_outline
        else "- Keep momentum, guide toward thesis",
    ]
    return head + "\n".join(rules)


def build_chat_user_prompt(instructions: str, user_input: str) -> str:
    return f"{instructions}\n\nUser request: {user_input}"
