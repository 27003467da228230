"""DB-backed store for saved brainstorm ideas."""

from __future__ import annotations

from datetime import datetime

import aiosqlite

from canvas.assistant.models import BrainstormIdea


class IdeaStore:
    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def list_ideas(self, article_id: str | None = None) -> list[BrainstormIdea]:
        if article_id is None:
            sql, params = "SELECT * FROM ideas ORDER BY created_at DESC", ()
        else:
            sql = "SELECT * FROM ideas WHERE article_id = ? ORDER BY created_at DESC"
            params = (article_id,)
        async with self._conn.execute(sql, params) as cursor:
            rows = await cursor.fetchall()
        return [
            BrainstormIdea(
                id=r["id"],
                content=r["content"],
                article_id=r["article_id"],
                created_at=datetime.fromisoformat(r["created_at"]),
            )
            for r in rows
        ]

    async def add_idea(self, idea: BrainstormIdea) -> BrainstormIdea:
        await self._conn.execute(
            "INSERT INTO ideas (id, content, article_id, created_at) VALUES (?, ?, ?, ?)",
            (idea.id, idea.content, idea.article_id, idea.created_at.isoformat()),
        )
        await self._conn.commit()
        return idea

    async def delete_idea(self, idea_id: str) -> bool:
        cursor = await self._conn.execute("DELETE FROM ideas WHERE id = ?", (idea_id,))
        await self._conn.commit()
        return cursor.rowcount > 0
