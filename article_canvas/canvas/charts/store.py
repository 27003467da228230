"""DB-backed chart store."""

from __future__ import annotations

import aiosqlite

from canvas.charts.models import ChartData, ChartSeries


class ChartStore:
    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def list_charts(self, article_id: str | None = None) -> list[ChartData]:
        if article_id is None:
            sql, params = "SELECT * FROM charts ORDER BY created_at", ()
        else:
            sql = "SELECT * FROM charts WHERE article_id = ? ORDER BY created_at"
            params = (article_id,)
        async with self._conn.execute(sql, params) as cursor:
            rows = await cursor.fetchall()
        return [self._row_to_chart(r) for r in rows]

    async def get_chart(self, chart_id: str) -> ChartData | None:
        async with self._conn.execute(
            "SELECT * FROM charts WHERE id = ?", (chart_id,)
        ) as cursor:
            row = await cursor.fetchone()
        return self._row_to_chart(row) if row else None

    async def save_chart(self, chart: ChartData) -> ChartData:
        """Insert or replace a chart."""
        await self._conn.execute(
            """INSERT INTO charts (id, title, type, data_json, article_id)
               VALUES (?, ?, ?, ?, ?)
               ON CONFLICT(id) DO UPDATE SET
                 title = excluded.title, type = excluded.type,
                 data_json = excluded.data_json, article_id = excluded.article_id""",
            (
                chart.id,
                chart.title,
                chart.type,
                chart.data.model_dump_json(),
                chart.article_id,
            ),
        )
        await self._conn.commit()
        return chart

    async def delete_chart(self, chart_id: str) -> bool:
        cursor = await self._conn.execute("DELETE FROM charts WHERE id = ?", (chart_id,))
        await self._conn.commit()
        return cursor.rowcount > 0

    @staticmethod
    def _row_to_chart(row: aiosqlite.Row) -> ChartData:
        return ChartData(
            id=row["id"],
            title=row["title"],
            type=row["type"],
            data=ChartSeries.model_validate_json(row["data_json"]),
            article_id=row["article_id"],
        )
