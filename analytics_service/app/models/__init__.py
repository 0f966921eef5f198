from .analytics import (
    AnalyticsRequest,
    AssetsRequest,
    AssetsResponse,
    BreakdownRequest,
    BreakdownResponse,
    ErrorsResponse,
    OverallResponse,
    SummaryResponse,
    VideoViewsRequest,
    VideoViewsResponse,
)
from .health import HealthResponse, ToolListResponse
from .speech import TranscriptResponse

__all__ = [
    "AnalyticsRequest",
    "AssetsRequest",
    "AssetsResponse",
    "BreakdownRequest",
    "BreakdownResponse",
    "ErrorsResponse",
    "OverallResponse",
    "SummaryResponse",
    "VideoViewsRequest",
    "VideoViewsResponse",
    "HealthResponse",
    "ToolListResponse",
    "TranscriptResponse",
]
