"""DB-backed article store, including outline operations."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import aiosqlite

from canvas.articles.models import Annotation, Article, ArticleUpdate, make_excerpt
from canvas.planner.models import OutlineItem


def _now() -> datetime:
    return datetime.now(timezone.utc)


class ArticleNotFoundError(LookupError):
    pass


class ArticleStore:
    """CRUD for articles; outline and annotations are stored as JSON columns."""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def list_articles(self) -> list[Article]:
        """Return all articles, most recently updated first."""
        async with self._conn.execute(
            "SELECT * FROM articles ORDER BY updated_at DESC"
        ) as cursor:
            rows = await cursor.fetchall()
        return [self._row_to_article(r) for r in rows]

    async def get_article(self, article_id: str) -> Article | None:
        async with self._conn.execute(
            "SELECT * FROM articles WHERE id = ?", (article_id,)
        ) as cursor:
            row = await cursor.fetchone()
        return self._row_to_article(row) if row else None

    async def require_article(self, article_id: str) -> Article:
        article = await self.get_article(article_id)
        if article is None:
            raise ArticleNotFoundError(article_id)
        return article

    async def create_article(self, article: Article) -> Article:
        article.excerpt = make_excerpt(article.content)
        await self._conn.execute(
            """INSERT INTO articles
               (id, title, content, excerpt, status, tags_json, published_url,
                outline_json, annotations_json, created_at, updated_at)
               VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)""",
            (
                article.id,
                article.title,
                article.content,
                article.excerpt,
                article.status,
                json.dumps(article.tags),
                article.published_url,
                self._dump_outline(article.outline),
                self._dump_annotations(article.annotations),
                article.created_at.isoformat(),
                article.updated_at.isoformat(),
            ),
        )
        await self._conn.commit()
        return article

    async def update_article(self, article_id: str, update: ArticleUpdate) -> Article:
        """Apply a partial update and bump ``updated_at``."""
        article = await self.require_article(article_id)
        changes = update.model_dump(exclude_unset=True)
        if not changes:
            return article

        merged = article.model_copy(update={
            k: getattr(update, k) for k in changes
        })
        if "content" in changes:
            merged.excerpt = make_excerpt(merged.content)
        merged.updated_at = _now()

        await self._conn.execute(
            """UPDATE articles SET title = ?, content = ?, excerpt = ?, status = ?,
               tags_json = ?, published_url = ?, outline_json = ?,
               annotations_json = ?, updated_at = ?
               WHERE id = ?""",
            (
                merged.title,
                merged.content,
                merged.excerpt,
                merged.status,
                json.dumps(merged.tags),
                merged.published_url,
                self._dump_outline(merged.outline),
                self._dump_annotations(merged.annotations),
                merged.updated_at.isoformat(),
                article_id,
            ),
        )
        await self._conn.commit()
        return merged

    async def delete_article(self, article_id: str) -> bool:
        """Delete an article together with its transcript. True if it existed."""
        cursor = await self._conn.execute(
            "DELETE FROM articles WHERE id = ?", (article_id,)
        )
        await self._conn.execute(
            "DELETE FROM chat_messages WHERE article_id = ?", (article_id,)
        )
        await self._conn.commit()
        return cursor.rowcount > 0

    # -- outline --

    async def add_outline_item(self, article_id: str, title: str) -> Article:
        article = await self.require_article(article_id)
        outline = [*article.outline, OutlineItem(title=title.strip())]
        return await self.update_article(article_id, ArticleUpdate(outline=outline))

    async def toggle_outline_item(self, article_id: str, item_id: str) -> Article:
        article = await self.require_article(article_id)
        outline = [
            item.model_copy(update={"completed": not item.completed})
            if item.id == item_id
            else item
            for item in article.outline
        ]
        return await self.update_article(article_id, ArticleUpdate(outline=outline))

    async def rename_outline_item(self, article_id: str, item_id: str, title: str) -> Article:
        article = await self.require_article(article_id)
        outline = [
            item.model_copy(update={"title": title.strip()}) if item.id == item_id else item
            for item in article.outline
        ]
        return await self.update_article(article_id, ArticleUpdate(outline=outline))

    async def delete_outline_item(self, article_id: str, item_id: str) -> Article:
        article = await self.require_article(article_id)
        outline = [item for item in article.outline if item.id != item_id]
        return await self.update_article(article_id, ArticleUpdate(outline=outline))

    @staticmethod
    def _dump_outline(outline: list[OutlineItem]) -> str:
        return json.dumps([item.model_dump(mode="json") for item in outline])

    @staticmethod
    def _dump_annotations(annotations: list[Annotation]) -> str:
        return json.dumps([a.model_dump(mode="json", by_alias=True) for a in annotations])

    @staticmethod
    def _row_to_article(row: aiosqlite.Row) -> Article:
        return Article(
            id=row["id"],
            title=row["title"],
            content=row["content"],
            excerpt=row["excerpt"],
            status=row["status"],
            tags=json.loads(row["tags_json"] or "[]"),
            published_url=row["published_url"],
            outline=[OutlineItem.model_validate(o) for o in json.loads(row["outline_json"] or "[]")],
            annotations=[
                Annotation.model_validate(a) for a in json.loads(row["annotations_json"] or "[]")
            ],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )
