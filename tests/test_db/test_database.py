"""Tests for the database layer."""

from __future__ import annotations

from pathlib import Path

import pytest

from canvas.db.database import SCHEMA_VERSION, Database


@pytest.mark.asyncio
async def test_connect_creates_tables(db: Database) -> None:
    async with db.conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    ) as cursor:
        tables = {row["name"] for row in await cursor.fetchall()}
    assert {"articles", "chat_messages", "ideas", "charts", "settings", "schema_version"} <= tables


@pytest.mark.asyncio
async def test_schema_version_is_set(db: Database) -> None:
    async with db.conn.execute("SELECT version FROM schema_version") as cursor:
        rows = await cursor.fetchall()
    assert len(rows) == 1
    assert rows[0]["version"] == SCHEMA_VERSION


@pytest.mark.asyncio
async def test_reconnect_does_not_reapply_migrations(tmp_path: Path) -> None:
    path = str(tmp_path / "again.db")
    first = Database(db_path=path)
    await first.connect()
    await first.set_setting("llm_model", "gpt-4o")
    await first.close()

    second = Database(db_path=path)
    await second.connect()
    assert await second.get_setting("llm_model") == "gpt-4o"
    async with second.conn.execute("SELECT COUNT(*) AS n FROM schema_version") as cursor:
        row = await cursor.fetchone()
    assert row["n"] == 1
    await second.close()


@pytest.mark.asyncio
async def test_settings_upsert(db: Database) -> None:
    assert await db.get_setting("github_repo") is None
    await db.set_setting("github_repo", "octo/blog")
    await db.set_setting("github_repo", "octo/site")
    await db.set_setting("github_branch", "main")
    assert await db.get_setting("github_repo") == "octo/site"
    assert await db.get_all_settings() == {"github_repo": "octo/site", "github_branch": "main"}


def test_conn_requires_connect() -> None:
    with pytest.raises(AssertionError):
        Database(db_path=":memory:").conn
