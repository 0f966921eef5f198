from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

Timeframe = Optional[Union[str, list[Union[int, float, str]]]]

TIMEFRAME_HELP = (
    "Unix timestamp array [start, end] or a phrase such as 'last 7 days'. "
    "Defaults to the last 24 hours."
)


# ── Requests (also the tool input models) ────────────────────────


class AnalyticsRequest(BaseModel):
    timeframe: Timeframe = Field(default=None, description=TIMEFRAME_HELP)
    filters: Optional[list[str]] = Field(
        default=None, description="Optional filters like 'operating_system:iOS' or 'country:US'"
    )


class VideoViewsRequest(AnalyticsRequest):
    limit: Optional[int] = Field(
        default=None, ge=1, le=1000, description="Max number of views to return (default 25)"
    )


class BreakdownRequest(AnalyticsRequest):
    metric_id: str = Field(
        default="video_startup_failure_percentage", description="Mux Data metric id"
    )
    group_by: str = Field(
        default="operating_system", description="Dimension to group by, e.g. 'browser'"
    )
    limit: Optional[int] = Field(default=None, ge=1, le=1000)


class AssetsRequest(BaseModel):
    limit: Optional[int] = Field(
        default=None, ge=1, le=100, description="Maximum number of assets to return"
    )
    page: Optional[int] = Field(default=None, ge=1, description="Page number for pagination")


# ── Responses ────────────────────────────────────────────────────


class _Response(BaseModel):
    """Success or failure; unused fields are left out of the JSON."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    error: Optional[str] = None
    message: Optional[str] = None


class TimeRangeOut(BaseModel):
    start: str
    end: str


class HealthAnalysis(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    health_score: int = Field(alias="healthScore", ge=0, le=100)
    summary: str
    issues: list[str]
    recommendations: list[str]


class OverallResponse(_Response):
    time_range: Optional[TimeRangeOut] = Field(default=None, alias="timeRange")
    metrics: Optional[dict[str, Any]] = None
    analysis: Optional[HealthAnalysis] = None


class ErrorsResponse(_Response):
    time_range: Optional[TimeRangeOut] = Field(default=None, alias="timeRange")
    errors: Optional[list[Any]] = None
    total_errors: Optional[int] = Field(default=None, alias="totalErrors")
    platform_breakdown: Optional[list[Any]] = Field(default=None, alias="platformBreakdown")


class VideoViewsResponse(_Response):
    time_range: Optional[TimeRangeOut] = Field(default=None, alias="timeRange")
    views: Optional[list[Any]] = None
    total_views: Optional[int] = Field(default=None, alias="totalViews")


class BreakdownResponse(_Response):
    time_range: Optional[TimeRangeOut] = Field(default=None, alias="timeRange")
    metric_id: Optional[str] = Field(default=None, alias="metricId")
    group_by: Optional[str] = Field(default=None, alias="groupBy")
    breakdown: Optional[list[Any]] = None


class AssetSummary(BaseModel):
    id: Optional[str] = None
    status: Optional[str] = None
    duration: Optional[float] = None
    max_stored_resolution: Optional[str] = None
    created_at: Optional[str] = None
    playback_ids: list[str] = []


class AssetsResponse(_Response):
    count: Optional[int] = None
    assets: Optional[list[AssetSummary]] = None


class SummaryResponse(_Response):
    time_range: Optional[TimeRangeOut] = Field(default=None, alias="timeRange")
    summary: Optional[str] = None
    analysis: Optional[HealthAnalysis] = None
