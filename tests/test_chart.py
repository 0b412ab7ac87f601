"""차트 생성 도구 테스트"""

import json

import pytest
from pydantic import ValidationError

from qase_analytics.tools.chart import (
    DEFAULT_COLORS,
    DataPoint,
    GenerateChartInput,
    create_generate_chart_tool,
    generate_chart,
    semantic_colors,
)


def chart_block(markdown: str) -> dict:
    body = markdown.strip()
    assert body.startswith(":::chart\n") and body.endswith("\n:::")
    return json.loads(body[len(":::chart\n"):-len("\n:::")])


class TestGenerateChart:
    """generate_chart 테스트"""

    def test_markdown_block(self):
        """:::chart 마크다운 블록 생성"""
        params = GenerateChartInput(
            type="pie",
            title="Status",
            data=[DataPoint(name="Passed", value=8), DataPoint(name="Failed", value=2)],
        )
        result = generate_chart(params)

        assert result["success"] is True
        assert result["markdown"].startswith("\n\n:::chart\n")
        chart = chart_block(result["markdown"])
        assert chart["type"] == "pie"
        assert chart["data"] == [{"name": "Passed", "value": 8.0}, {"name": "Failed", "value": 2.0}]
        assert chart["id"].startswith("chart-")

    def test_camel_case_keys_and_none_removed(self):
        """camelCase 키 사용, None 항목 제거"""
        params = GenerateChartInput(
            type="line",
            title="Pass rate",
            data=[DataPoint(name="2024-01", value=90, value2=5)],
            series=[{"data_key": "value", "name": "Pass"}, {"data_key": "value2", "name": "Fail"}],
            x_axis_label="Month",
        )
        chart = generate_chart(params)["chart"]

        assert chart["xAxisLabel"] == "Month"
        assert "yAxisLabel" not in chart
        assert "description" not in chart
        assert chart["series"][1]["dataKey"] == "value2"
        assert chart["showLegend"] is True

    def test_empty_data_rejected(self):
        """빈 데이터는 거부"""
        with pytest.raises(ValidationError):
            GenerateChartInput(type="bar", title="x", data=[])


class TestSemanticColors:
    """상태 색상 매핑 테스트"""

    def test_status_names(self):
        """상태 이름 목록"""
        data = [DataPoint(name="Passed", value=1), DataPoint(name="In Progress", value=1), DataPoint(name="Q1", value=1)]
        assert semantic_colors(data) == ["#10b981", "#3b82f6", DEFAULT_COLORS[2]]

    def test_custom_palette_wins(self):
        """사용자 지정 색상이 우선"""
        data = [DataPoint(name="Passed", value=1)]
        assert semantic_colors(data, ["#000000"]) == ["#000000"]


async def test_chart_tool_returns_markdown():
    """차트 도구는 마크다운 문자열 반환"""
    tool = create_generate_chart_tool()
    output = await tool.ainvoke({"type": "bar", "title": "Runs", "data": [{"name": "A", "value": 1}]})
    assert chart_block(output)["title"] == "Runs"
