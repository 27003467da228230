"""Chart API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from canvas.charts.models import ChartData, ChartType, build_chart, chart_placeholder_html
from canvas.charts.store import ChartStore
from canvas.deps import get_chart_store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["charts"])


class ChartCreateRequest(BaseModel):
    """Form-style input: labels and values as comma-separated strings."""

    title: str = ""
    type: ChartType = "bar"
    labels: str = Field(..., description="Comma-separated labels, e.g. 'Q1, Q2, Q3'")
    data: str = Field(..., description="Comma-separated numbers, e.g. '10, 20, 30'")
    dataset_label: str = ""
    article_id: str | None = None


class ChartEmbedResponse(BaseModel):
    chart_id: str
    html: str


@router.get("/charts", response_model=list[ChartData])
async def list_charts(
    article_id: str | None = None,
    store: ChartStore = Depends(get_chart_store),
) -> list[ChartData]:
    return await store.list_charts(article_id)


@router.post("/charts", response_model=ChartData)
async def create_chart(
    body: ChartCreateRequest,
    store: ChartStore = Depends(get_chart_store),
) -> ChartData:
    try:
        chart = build_chart(
            body.title,
            body.type,
            body.labels,
            body.data,
            dataset_label=body.dataset_label,
            article_id=body.article_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return await store.save_chart(chart)


@router.get("/charts/{chart_id}", response_model=ChartData)
async def get_chart(
    chart_id: str,
    store: ChartStore = Depends(get_chart_store),
) -> ChartData:
    chart = await store.get_chart(chart_id)
    if chart is None:
        raise HTTPException(status_code=404, detail="Chart not found")
    return chart


@router.get("/charts/{chart_id}/embed", response_model=ChartEmbedResponse)
async def embed_chart(
    chart_id: str,
    store: ChartStore = Depends(get_chart_store),
) -> ChartEmbedResponse:
    """HTML block to insert into the article editor."""
    chart = await store.get_chart(chart_id)
    if chart is None:
        raise HTTPException(status_code=404, detail="Chart not found")
    return ChartEmbedResponse(chart_id=chart.id, html=chart_placeholder_html(chart))


@router.delete("/charts/{chart_id}")
async def delete_chart(
    chart_id: str,
    store: ChartStore = Depends(get_chart_store),
) -> dict[str, str]:
    deleted = await store.delete_chart(chart_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Chart not found")
    return {"status": "deleted"}
