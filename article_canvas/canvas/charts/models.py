"""Chart records and the comma-separated chart form."""

from __future__ import annotations

import uuid
from html import escape
from typing import Literal

from pydantic import BaseModel, Field

ChartType = Literal["line", "bar", "pie", "doughnut"]

DEFAULT_COLORS = [
    "#0ea5e9",
    "#8b5cf6",
    "#10b981",
    "#f59e0b",
    "#ef4444",
    "#6366f1",
]


class Dataset(BaseModel):
    label: str
    data: list[float]
    background_color: str | list[str] | None = None
    border_color: str | None = None


class ChartSeries(BaseModel):
    labels: list[str]
    datasets: list[Dataset]


class ChartData(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    title: str
    type: ChartType = "bar"
    data: ChartSeries
    article_id: str | None = None


def build_chart(
    title: str,
    chart_type: ChartType,
    labels_csv: str,
    data_csv: str,
    dataset_label: str = "",
    article_id: str | None = None,
) -> ChartData:
    """Build a single-dataset chart from comma-separated form input.

    Raises ValueError when labels or values are missing, non-numeric, or of
    different lengths.
    """
    labels = [label.strip() for label in labels_csv.split(",") if label.strip()]
    raw_values = [v.strip() for v in data_csv.split(",") if v.strip()]
    if not labels or not raw_values:
        raise ValueError("Labels and data are both required")

    try:
        values = [float(v) for v in raw_values]
    except ValueError:
        raise ValueError(f"Chart data must be numeric, got: {data_csv!r}")

    if len(values) != len(labels):
        raise ValueError(
            f"Got {len(labels)} labels but {len(values)} data points"
        )

    # Pie-like charts colour each slice, axis charts use one colour.
    if chart_type in ("pie", "doughnut"):
        background: str | list[str] = [
            DEFAULT_COLORS[i % len(DEFAULT_COLORS)] for i in range(len(values))
        ]
    else:
        background = DEFAULT_COLORS[0]

    return ChartData(
        title=title.strip() or "Untitled chart",
        type=chart_type,
        data=ChartSeries(
            labels=labels,
            datasets=[
                Dataset(
                    label=dataset_label.strip() or "Data",
                    data=values,
                    background_color=background,
                    border_color=DEFAULT_COLORS[0],
                )
            ],
        ),
        article_id=article_id,
    )


def chart_placeholder_html(chart: ChartData) -> str:
    """Editor placeholder block plus a data table for the chart."""
    header = "".join(
        f'<th style="padding: 8px; border: 1px solid #e2e8f0;">{escape(d.label)}</th>'
        for d in chart.data.datasets
    )
    rows = []
    for i, label in enumerate(chart.data.labels):
        cells = "".join(
            f'<td style="padding: 8px; border: 1px solid #e2e8f0;">{d.data[i]:g}</td>'
            for d in chart.data.datasets
            if i < len(d.data)
        )
        rows.append(
            f'<tr><td style="padding: 8px; border: 1px solid #e2e8f0;">{escape(label)}</td>{cells}</tr>'
        )
    return (
        '<div class="chart-placeholder" data-chart-id="' + escape(chart.id) + '" '
        'style="background: linear-gradient(135deg, #f0f9ff 0%, #e0f2fe 100%); '
        "border: 2px dashed #0ea5e9; border-radius: 8px; padding: 32px; "
        'text-align: center; margin: 16px 0;">'
        f"<p><strong>📊 {escape(chart.title)}</strong> ({chart.type} chart)</p>"
        "</div>\n"
        '<table style="width: 100%; border-collapse: collapse; margin: 16px 0;">'
        '<tr style="background: #f1f5f9;">'
        '<th style="padding: 8px; border: 1px solid #e2e8f0;">Label</th>'
        f"{header}</tr>{''.join(rows)}</table>"
    )
