"""Per-article transcript persistence."""

from __future__ import annotations

import json
from datetime import datetime

import aiosqlite

from canvas.planner.models import Choice, ConversationTranscript, Turn


class TranscriptStore:
    """Loads and appends chat turns; articles own their transcripts."""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def load(self, article_id: str) -> ConversationTranscript:
        async with self._conn.execute(
            "SELECT * FROM chat_messages WHERE article_id = ? ORDER BY seq",
            (article_id,),
        ) as cursor:
            rows = await cursor.fetchall()
        return ConversationTranscript([self._row_to_turn(r) for r in rows])

    async def append(self, article_id: str, turns: list[Turn]) -> None:
        async with self._conn.execute(
            "SELECT COALESCE(MAX(seq), -1) AS last FROM chat_messages WHERE article_id = ?",
            (article_id,),
        ) as cursor:
            row = await cursor.fetchone()
        seq = row["last"] + 1

        for offset, turn in enumerate(turns):
            await self._conn.execute(
                """INSERT INTO chat_messages
                   (id, article_id, seq, role, content, is_animating,
                    choices_json, thinking_json, created_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
                (
                    turn.id,
                    article_id,
                    seq + offset,
                    turn.role,
                    turn.content,
                    1 if turn.is_animating else 0,
                    json.dumps([c.model_dump() for c in turn.choices])
                    if turn.choices is not None
                    else None,
                    json.dumps(turn.thinking_steps)
                    if turn.thinking_steps is not None
                    else None,
                    turn.created_at.isoformat(),
                ),
            )
        await self._conn.commit()

    async def clear(self, article_id: str) -> int:
        cursor = await self._conn.execute(
            "DELETE FROM chat_messages WHERE article_id = ?", (article_id,)
        )
        await self._conn.commit()
        return cursor.rowcount

    @staticmethod
    def _row_to_turn(row: aiosqlite.Row) -> Turn:
        choices = json.loads(row["choices_json"]) if row["choices_json"] else None
        thinking = json.loads(row["thinking_json"]) if row["thinking_json"] else None
        return Turn(
            id=row["id"],
            role=row["role"],
            content=row["content"],
            created_at=datetime.fromisoformat(row["created_at"]),
            is_animating=bool(row["is_animating"]),
            choices=[Choice.model_validate(c) for c in choices] if choices is not None else None,
            thinking_steps=thinking,
        )
