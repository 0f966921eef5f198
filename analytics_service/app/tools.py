"""
Tool registry for the chat agent runtime.

Every tool has a stable id, a description the agent reads when choosing
tools, a pydantic input model (published as JSON schema) and a handler
onto ``AnalyticsService``.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable

from pydantic import BaseModel

from app.models.analytics import (
    AnalyticsRequest,
    AssetsRequest,
    BreakdownRequest,
    VideoViewsRequest,
)
from app.service import AnalyticsService

logger = logging.getLogger("tools")

# Wired by app.telemetry.init()
tool_invocations_counter = None

Handler = Callable[[AnalyticsService, BaseModel], Awaitable[dict]]


@dataclass(frozen=True)
class Tool:
    id: str
    description: str
    input_model: type[BaseModel]
    handler: Handler

    def describe(self) -> dict:
        return {
            "id": self.id,
            "description": self.description,
            "inputSchema": self.input_model.model_json_schema(),
        }


TOOLS: dict[str, Tool] = {
    tool.id: tool
    for tool in (
        Tool(
            id="mux-analytics",
            description=(
                "Fetch Mux video streaming analytics for a time range. Returns overall "
                "performance data (views, errors, rebuffering, startup time) and a "
                "health assessment."
            ),
            input_model=AnalyticsRequest,
            handler=lambda svc, a: svc.overall(a.timeframe, a.filters),
        ),
        Tool(
            id="mux-errors",
            description=(
                "Fetch playback errors with a breakdown by operating system. Returns "
                "error counts, percentages and details."
            ),
            input_model=AnalyticsRequest,
            handler=lambda svc, a: svc.errors(a.timeframe, a.filters),
        ),
        Tool(
            id="mux-video-views",
            description="Fetch individual viewing sessions with metadata.",
            input_model=VideoViewsRequest,
            handler=lambda svc, a: svc.video_views(a.timeframe, a.filters, a.limit),
        ),
        Tool(
            id="mux-breakdown",
            description=(
                "Break a metric down by a dimension such as operating system, browser "
                "or country, worst performers first."
            ),
            input_model=BreakdownRequest,
            handler=lambda svc, a: svc.breakdown(
                a.metric_id, a.group_by, a.timeframe, a.filters, a.limit
            ),
        ),
        Tool(
            id="mux-assets-list",
            description="List video assets in the account, for an overview of the content library.",
            input_model=AssetsRequest,
            handler=lambda svc, a: svc.assets(a.limit, a.page),
        ),
        Tool(
            id="mux-analytics-summary",
            description=(
                "Produce a concise text report (under 1000 words) of streaming "
                "health, issues and recommendations for a time range."
            ),
            input_model=AnalyticsRequest,
            handler=lambda svc, a: svc.summary(a.timeframe, a.filters),
        ),
    )
}


def get_tool(tool_id: str) -> Tool:
    try:
        return TOOLS[tool_id]
    except KeyError:
        raise KeyError(f"Unknown tool {tool_id!r}") from None


def list_tools() -> list[dict]:
    return [tool.describe() for tool in TOOLS.values()]


async def invoke_tool(service: AnalyticsService, tool_id: str, arguments: dict | None = None) -> dict:
    """Validate *arguments* and run the tool.

    Raises:
        KeyError: *tool_id* is not registered.
        pydantic.ValidationError: *arguments* don't fit the tool's input model.
    """
    tool = get_tool(tool_id)
    args = tool.input_model.model_validate(arguments or {})
    logger.info("Invoking tool %s", tool_id)
    result = await tool.handler(service, args)
    if tool_invocations_counter is not None:
        tool_invocations_counter.labels(
            tool=tool_id, success=str(bool(result.get("success"))).lower()
        ).inc()
    return result
