"""Tests for chart construction from form input."""

from __future__ import annotations

import pytest

from canvas.charts.models import DEFAULT_COLORS, build_chart, chart_placeholder_html


class TestBuildChart:
    def test_bar_chart(self) -> None:
        chart = build_chart("Revenue", "bar", "Q1, Q2, Q3", "10, 20.5, 30")
        assert chart.title == "Revenue"
        assert chart.data.labels == ["Q1", "Q2", "Q3"]
        dataset = chart.data.datasets[0]
        assert dataset.label == "Data"
        assert dataset.data == [10.0, 20.5, 30.0]
        assert dataset.background_color == DEFAULT_COLORS[0]

    def test_pie_gets_one_colour_per_slice(self) -> None:
        labels = ",".join(f"L{i}" for i in range(8))
        values = ",".join(str(i) for i in range(8))
        chart = build_chart("Share", "pie", labels, values, dataset_label="Share %")
        colours = chart.data.datasets[0].background_color
        assert isinstance(colours, list)
        assert len(colours) == 8
        assert colours[6] == DEFAULT_COLORS[0]
        assert chart.data.datasets[0].label == "Share %"

    def test_blank_title(self) -> None:
        assert build_chart("  ", "line", "a", "1").title == "Untitled chart"

    def test_empty_entries_are_ignored(self) -> None:
        chart = build_chart("T", "line", "a,,b,", "1, ,2")
        assert chart.data.labels == ["a", "b"]

    @pytest.mark.parametrize(
        ("labels", "data", "message"),
        [
            ("", "1,2", "required"),
            ("a,b", "", "required"),
            ("a,b", "1,x", "numeric"),
            ("a,b,c", "1,2", "3 labels but 2"),
        ],
    )
    def test_invalid_input(self, labels: str, data: str, message: str) -> None:
        with pytest.raises(ValueError, match=message):
            build_chart("T", "bar", labels, data)


def test_placeholder_html() -> None:
    chart = build_chart("Sales <2024>", "bar", "Jan,Feb", "1,2.5")
    html = chart_placeholder_html(chart)
    assert f'data-chart-id="{chart.id}"' in html
    assert "Sales &lt;2024&gt;" in html
    assert "(bar chart)" in html
    assert ">Jan</td>" in html
    assert ">2.5</td>" in html
    assert ">1</td>" in html
