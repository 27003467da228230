"""Markdown export with YAML front matter."""

from __future__ import annotations

import re
from datetime import date
from io import StringIO

from ruamel.yaml import YAML
from ruamel.yaml.scalarstring import DoubleQuotedScalarString

_SLUG_RE = re.compile(r"[^a-z0-9]+")


def _yaml() -> YAML:
    yaml = YAML()
    yaml.default_flow_style = None
    yaml.width = 4096
    return yaml


def to_markdown(
    title: str,
    content: str,
    tags: list[str],
    today: date | None = None,
) -> str:
    """Prefix the article text with a Jekyll-style front matter block."""
    today = today or date.today()
    front = {
        "title": DoubleQuotedScalarString(title),
        "date": today.isoformat(),
        "tags": [DoubleQuotedScalarString(t) for t in tags],
    }
    buf = StringIO()
    _yaml().dump(front, buf)
    return f"---\n{buf.getvalue()}---\n\n{content}"


def post_filename(title: str, today: date | None = None) -> str:
    """``_posts/YYYY-MM-DD-slug.md`` path for a title."""
    today = today or date.today()
    slug = _SLUG_RE.sub("-", title.lower())
    return f"_posts/{today.isoformat()}-{slug}.md"
