from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.dependencies import get_service
from app.models.analytics import (
    AnalyticsRequest,
    AssetsResponse,
    BreakdownRequest,
    BreakdownResponse,
    ErrorsResponse,
    OverallResponse,
    SummaryResponse,
    VideoViewsRequest,
    VideoViewsResponse,
)
from app.service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.post("/overall", response_model=OverallResponse, response_model_exclude_none=True)
async def overall(body: AnalyticsRequest, service: AnalyticsService = Depends(get_service)):
    return await service.overall(body.timeframe, body.filters)


@router.post("/errors", response_model=ErrorsResponse, response_model_exclude_none=True)
async def errors(body: AnalyticsRequest, service: AnalyticsService = Depends(get_service)):
    return await service.errors(body.timeframe, body.filters)


@router.post("/views", response_model=VideoViewsResponse, response_model_exclude_none=True)
async def video_views(body: VideoViewsRequest, service: AnalyticsService = Depends(get_service)):
    return await service.video_views(body.timeframe, body.filters, body.limit)


@router.post("/breakdown", response_model=BreakdownResponse, response_model_exclude_none=True)
async def breakdown(body: BreakdownRequest, service: AnalyticsService = Depends(get_service)):
    return await service.breakdown(
        body.metric_id, body.group_by, body.timeframe, body.filters, body.limit
    )


@router.post("/summary", response_model=SummaryResponse, response_model_exclude_none=True)
async def summary(body: AnalyticsRequest, service: AnalyticsService = Depends(get_service)):
    """
    Text report of streaming health for the window, capped at 1000 words.
    Suitable for reading aloud or pasting into chat.
    """
    return await service.summary(body.timeframe, body.filters)


@router.get("/assets", response_model=AssetsResponse, response_model_exclude_none=True)
async def assets(
    limit: Optional[int] = Query(default=None, ge=1, le=100),
    page: Optional[int] = Query(default=None, ge=1),
    service: AnalyticsService = Depends(get_service),
):
    return await service.assets(limit, page)
