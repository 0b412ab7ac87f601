"""도구: 차트 생성

채팅 화면이 `:::chart ... :::` 블록을 감지해 렌더링합니다.
블록 안 JSON은 프론트엔드 규약에 맞춰 camelCase 키를 사용합니다.
"""

import json
import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional

from langchain_core.tools import StructuredTool
from pydantic import BaseModel, Field

from .common import to_json

ChartType = Literal["line", "bar", "pie", "donut", "area"]

DEFAULT_COLORS = [
    "#10b981",  # passed
    "#ef4444",  # failed
    "#f59e0b",  # blocked
    "#6366f1",
    "#8b5cf6",
    "#ec4899",
    "#06b6d4",
    "#84cc16",
]

STATUS_COLORS = {
    "passed": "#10b981",
    "failed": "#ef4444",
    "blocked": "#f59e0b",
    "skipped": "#6b7280",
    "untested": "#9ca3af",
    "in_progress": "#3b82f6",
    "active": "#3b82f6",
    "complete": "#10b981",
    "abort": "#ef4444",
}


class DataPoint(BaseModel):
    name: str = Field(description="Label for this data point (e.g. date, status name)")
    value: float = Field(description="Primary numeric value")
    value2: Optional[float] = Field(default=None, description="Secondary numeric value (multi-series)")
    value3: Optional[float] = Field(default=None, description="Tertiary numeric value (multi-series)")


class SeriesConfig(BaseModel):
    data_key: str = Field(description="Key in data point for this series ('value', 'value2', 'value3')")
    name: str = Field(description="Display name for this series in the legend")
    color: Optional[str] = Field(default=None, description="Hex color for this series")


class GenerateChartInput(BaseModel):
    type: ChartType = Field(description="Type of chart to generate")
    title: str = Field(description="Title of the chart")
    description: Optional[str] = Field(default=None, description="Optional subtitle")
    data: List[DataPoint] = Field(min_length=1, description="Data points for the chart")
    series: Optional[List[SeriesConfig]] = Field(default=None, description="Series for multi-series charts")
    x_axis_label: Optional[str] = Field(default=None, description="Label for X axis")
    y_axis_label: Optional[str] = Field(default=None, description="Label for Y axis")
    show_legend: bool = Field(default=True, description="Whether to show legend")
    show_tooltip: bool = Field(default=True, description="Whether to show tooltip on hover")
    colors: Optional[List[str]] = Field(default=None, description="Custom color palette (hex codes)")


def _chart_id() -> str:
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=7))
    return f"chart-{int(time.time() * 1000)}-{suffix}"


def semantic_colors(data: List[DataPoint], custom: Optional[List[str]] = None) -> List[str]:
    """데이터 이름이 상태명이면 고정 색상, 아니면 기본 팔레트 순환"""
    if custom:
        return list(custom)
    colors = []
    for i, point in enumerate(data):
        name = "_".join(point.name.lower().split())
        colors.append(STATUS_COLORS.get(name, DEFAULT_COLORS[i % len(DEFAULT_COLORS)]))
    return colors


def generate_chart(params: GenerateChartInput) -> Dict[str, Any]:
    chart: Dict[str, Any] = {
        "id": _chart_id(),
        "type": params.type,
        "title": params.title,
        "description": params.description,
        "data": [p.model_dump(exclude_none=True) for p in params.data],
        "series": [
            {"dataKey": s.data_key, "name": s.name, "color": s.color} for s in params.series
        ] if params.series else None,
        "xAxisLabel": params.x_axis_label,
        "yAxisLabel": params.y_axis_label,
        "showLegend": params.show_legend,
        "showTooltip": params.show_tooltip,
        "colors": semantic_colors(params.data, params.colors),
        "createdAt": datetime.now(timezone.utc).isoformat(),
    }
    chart = {k: v for k, v in chart.items() if v is not None}
    markdown = f"\n\n:::chart\n{json.dumps(chart, ensure_ascii=False)}\n:::\n\n"
    return {"success": True, "chart": chart, "markdown": markdown}


def create_generate_chart_tool() -> StructuredTool:
    async def _run(**kwargs: Any) -> str:
        result = generate_chart(GenerateChartInput(**kwargs))
        return result["markdown"] if result["success"] else to_json(result)

    return StructuredTool.from_function(
        coroutine=_run,
        name="generate_chart",
        description=(
            "Generates a chart for visual display in the chat. Use it when the user asks for "
            "visualizations, graphs or charts.\n"
            "- pie/donut: distribution (e.g. test status distribution)\n"
            "- bar: comparing categories\n"
            "- line/area: trends over time (e.g. pass rate evolution)\n"
            "Status names get semantic colors automatically (passed green, failed red, blocked amber, "
            "skipped gray).\n"
            "IMPORTANT: always include the returned :::chart block verbatim in your answer."
        ),
        args_schema=GenerateChartInput,
        handle_validation_error=True,
    )
