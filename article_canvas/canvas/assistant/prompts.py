"""Prompt templates for the writing assistant."""

from __future__ import annotations

BRAINSTORM_SYSTEM_PROMPT = """\
You are a creative writing assistant helping brainstorm article ideas.
Generate 5 unique angles or perspectives for the given topic.
Format each idea with a brief title and 1-2 sentence description.
Be creative and suggest diverse approaches."""

IMPROVE_SYSTEM_PROMPT = """\
You are an expert editor. Improve the given text for clarity, flow, and engagement.
Maintain the author's voice while enhancing readability.
Return only the improved text without explanations."""

OUTLINE_SYSTEM_PROMPT = """\
You are a content strategist. Create a detailed article outline for the given topic.
Include: introduction hook, main sections with key points, and conclusion.
Format with clear headings and bullet points."""

REFINE_TITLES_SYSTEM_PROMPT = """\
You refine news headlines into compelling article topics. For each headline, \
create a broader, more engaging article topic title and a brief 1-sentence \
summary describing the angle. Respond in JSON format only."""

TOPIC_IDEAS_SYSTEM_PROMPT = """\
Generate diverse, thought-provoking article topic ideas. Mix business, \
technology, society, economics, and culture themes. Topics should be broad \
enough to explore from multiple angles, relevant to current trends but not \
tied to specific daily news. Respond in JSON format only."""


def build_brainstorm_user_prompt(topic: str) -> str:
    return f"Help me brainstorm article ideas about: {topic}"


def build_outline_user_prompt(topic: str) -> str:
    return f"Create an article outline for: {topic}"


def build_refine_titles_user_prompt(titles: list[str]) -> str:
    numbered = "\n".join(f"{i + 1}. {t}" for i, t in enumerate(titles))
    return (
        f"Refine these headlines into article topics:\n{numbered}\n\n"
        'Respond as JSON: {"topics": [{"title": "...", "summary": "..."}, ...]}'
    )


def build_topic_ideas_user_prompt(count: int = 6) -> str:
    return (
        f"Generate {count} unique article topic ideas with brief summaries. "
        'Respond as JSON: {"topics": [{"title": "...", "summary": "..."}, ...]}'
    )
