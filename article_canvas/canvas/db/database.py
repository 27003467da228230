"""SQLite database setup and migrations via aiosqlite."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import aiosqlite

logger = logging.getLogger(__name__)


def _get_db_path() -> str:
    """Return the database file path (production vs dev mode)."""
    if os.environ.get("CANVAS_DEV_MODE", "").lower() == "true":
        db_dir = Path(__file__).resolve().parent.parent.parent.parent / "data"
    else:
        db_dir = Path(os.environ.get("CANVAS_DATA_DIR", "/data"))
    db_dir.mkdir(parents=True, exist_ok=True)
    return str(db_dir / "article_canvas.db")


SCHEMA_VERSION = 3

MIGRATIONS: dict[int, list[str]] = {
    1: [
        """
        CREATE TABLE IF NOT EXISTS articles (
            id              TEXT PRIMARY KEY,
            title           TEXT NOT NULL,
            content         TEXT NOT NULL DEFAULT '',
            excerpt         TEXT NOT NULL DEFAULT '',
            status          TEXT NOT NULL DEFAULT 'draft',
            tags_json       TEXT NOT NULL DEFAULT '[]',
            published_url   TEXT,
            outline_json    TEXT NOT NULL DEFAULT '[]',
            annotations_json TEXT NOT NULL DEFAULT '[]',
            created_at      TEXT NOT NULL,
            updated_at      TEXT NOT NULL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS chat_messages (
            id              TEXT PRIMARY KEY,
            article_id      TEXT NOT NULL DEFAULT '',
            seq             INTEGER NOT NULL,
            role            TEXT NOT NULL,
            content         TEXT NOT NULL,
            is_animating    INTEGER NOT NULL DEFAULT 0,
            choices_json    TEXT,
            thinking_json   TEXT,
            created_at      TEXT NOT NULL
        )
        """,
        "CREATE INDEX IF NOT EXISTS idx_chat_article ON chat_messages (article_id, seq)",
        """
        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER NOT NULL
        )
        """,
        "INSERT INTO schema_version (version) VALUES (1)",
    ],
    2: [
        """
        CREATE TABLE IF NOT EXISTS ideas (
            id          TEXT PRIMARY KEY,
            content     TEXT NOT NULL,
            article_id  TEXT,
            created_at  TEXT NOT NULL
        )
        """,
        """
        CREATE TABLE IF NOT EXISTS charts (
            id          TEXT PRIMARY KEY,
            title       TEXT NOT NULL,
            type        TEXT NOT NULL DEFAULT 'bar',
            data_json   TEXT NOT NULL,
            article_id  TEXT,
            created_at  TEXT NOT NULL DEFAULT (datetime('now'))
        )
        """,
        "UPDATE schema_version SET version = 2",
    ],
    3: [
        """
        CREATE TABLE IF NOT EXISTS settings (
            key         TEXT PRIMARY KEY,
            value       TEXT NOT NULL,
            updated_at  TEXT NOT NULL DEFAULT (datetime('now'))
        )
        """,
        "UPDATE schema_version SET version = 3",
    ],
}


class Database:
    """Async SQLite wrapper with migration support."""

    def __init__(self, db_path: str | None = None) -> None:
        self._db_path = db_path or _get_db_path()
        self._conn: aiosqlite.Connection | None = None

    async def connect(self) -> None:
        """Open the database connection and run pending migrations."""
        self._conn = await aiosqlite.connect(self._db_path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA journal_mode=WAL")
        await self._conn.execute("PRAGMA foreign_keys=ON")
        await self._run_migrations()

    async def close(self) -> None:
        """Close the database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        """Return the active connection (asserts it exists)."""
        assert self._conn is not None, "Database not connected"
        return self._conn

    async def _run_migrations(self) -> None:
        """Apply any pending schema migrations."""
        try:
            async with self.conn.execute(
                "SELECT version FROM schema_version LIMIT 1"
            ) as cursor:
                row = await cursor.fetchone()
                current = row["version"] if row else 0
        except aiosqlite.OperationalError:
            current = 0

        for version in sorted(MIGRATIONS.keys()):
            if version > current:
                for sql in MIGRATIONS[version]:
                    await self.conn.execute(sql)
                await self.conn.commit()
                logger.info("Applied database migration v%d", version)

    # -- settings --

    async def get_setting(self, key: str) -> str | None:
        async with self.conn.execute(
            "SELECT value FROM settings WHERE key = ?", (key,)
        ) as cursor:
            row = await cursor.fetchone()
        return row["value"] if row else None

    async def set_setting(self, key: str, value: str) -> None:
        await self.conn.execute(
            """INSERT INTO settings (key, value, updated_at)
               VALUES (?, ?, datetime('now'))
               ON CONFLICT(key) DO UPDATE SET
                 value = excluded.value, updated_at = excluded.updated_at""",
            (key, value),
        )
        await self.conn.commit()

    async def get_all_settings(self) -> dict[str, str]:
        async with self.conn.execute("SELECT key, value FROM settings") as cursor:
            rows = await cursor.fetchall()
        return {r["key"]: r["value"] for r in rows}
