"""Tests for the agent tool registry."""

import asyncio
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from app.tools import TOOLS, get_tool, invoke_tool, list_tools

EXPECTED_IDS = {
    "mux-analytics",
    "mux-errors",
    "mux-video-views",
    "mux-breakdown",
    "mux-assets-list",
    "mux-analytics-summary",
}


@pytest.fixture
def service():
    svc = AsyncMock()
    for name in ("overall", "errors", "video_views", "breakdown", "assets", "summary"):
        getattr(svc, name).return_value = {"success": True, "op": name}
    return svc


class TestRegistry:
    def test_all_tools_registered(self):
        assert set(TOOLS) == EXPECTED_IDS

    def test_list_has_schemas(self):
        listed = {tool["id"]: tool for tool in list_tools()}
        assert set(listed) == EXPECTED_IDS
        schema = listed["mux-analytics"]["inputSchema"]
        assert "timeframe" in schema["properties"]
        assert "filters" in schema["properties"]

    def test_unknown_tool(self):
        with pytest.raises(KeyError):
            get_tool("mux-delete-all")


class TestInvoke:
    @pytest.mark.parametrize("tool_id, operation", [
        ("mux-analytics", "overall"),
        ("mux-errors", "errors"),
        ("mux-video-views", "video_views"),
        ("mux-breakdown", "breakdown"),
        ("mux-assets-list", "assets"),
        ("mux-analytics-summary", "summary"),
    ])
    def test_dispatch(self, service, tool_id, operation):
        result = asyncio.run(invoke_tool(service, tool_id, {}))
        assert result == {"success": True, "op": operation}

    def test_arguments_forwarded(self, service):
        asyncio.run(invoke_tool(service, "mux-analytics", {
            "timeframe": "last 7 days",
            "filters": ["operating_system:iOS"],
        }))
        service.overall.assert_awaited_once_with("last 7 days", ["operating_system:iOS"])

    def test_numeric_timeframe_pair(self, service):
        asyncio.run(invoke_tool(service, "mux-video-views", {
            "timeframe": [1700000000, "1700086400"],
            "limit": 10,
        }))
        service.video_views.assert_awaited_once_with([1700000000, "1700086400"], None, 10)

    def test_breakdown_defaults(self, service):
        asyncio.run(invoke_tool(service, "mux-breakdown", None))
        service.breakdown.assert_awaited_once_with(
            "video_startup_failure_percentage", "operating_system", None, None, None
        )

    def test_invalid_arguments(self, service):
        with pytest.raises(ValidationError):
            asyncio.run(invoke_tool(service, "mux-assets-list", {"limit": 0}))
        service.assets.assert_not_awaited()

    def test_unknown_tool(self, service):
        with pytest.raises(KeyError):
            asyncio.run(invoke_tool(service, "nope", {}))
