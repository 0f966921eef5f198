"""
Agent tool endpoints.

Lists the registered tools with their input schemas and invokes one by id.
Unknown ids are a 404; arguments that don't fit the tool's input model
are a 422 carrying pydantic's error list.
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError

from app.dependencies import get_service
from app.models.health import ToolListResponse
from app.service import AnalyticsService
from app.tools import invoke_tool, list_tools

router = APIRouter(prefix="/tools", tags=["Tools"])


@router.get("", response_model=ToolListResponse)
def tools():
    available = list_tools()
    return {"tools": available, "count": len(available)}


@router.post("/{tool_id}")
async def run_tool(
    tool_id: str,
    arguments: Optional[dict] = Body(default=None),
    service: AnalyticsService = Depends(get_service),
):
    try:
        return await invoke_tool(service, tool_id, arguments)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown tool '{tool_id}'")
    except ValidationError as exc:
        raise HTTPException(
            status_code=422,
            detail=exc.errors(include_url=False, include_context=False, include_input=False),
        )
