"""
Analytics operations exposed to the agent and the HTTP API.

Each operation resolves the requested timeframe, calls the backend through
the transport chain, post-processes the payload and returns a plain dict:
either the success shape for that operation or
``{"success": False, "error": <redacted>, "message": <context>}``.
Nothing here raises to the caller.
"""

import logging
import time
from typing import Callable, Optional

from app.analyzer import HealthAssessment, analyze_metrics, metric_value
from app.backends.chain import TransportChain
from app.config import Settings
from app.errors import redact
from app.models.endpoints import (
    LIST_ASSETS,
    LIST_BREAKDOWN_VALUES,
    LIST_ERRORS,
    LIST_VIDEO_VIEWS,
    OVERALL_VALUES,
)
from app.summary import format_analytics_summary
from app.timeframe import TimeRange, resolve_timeframe

logger = logging.getLogger("analytics-service")

DEFAULT_METRIC_ID = "video_startup_failure_percentage"
DEFAULT_VIEWS_LIMIT = 25
PLATFORM_BREAKDOWN_LIMIT = 20


def _data(payload):
    """Unwrap the ``data`` envelope the Mux API puts around results."""
    if isinstance(payload, dict) and "data" in payload:
        return payload["data"]
    return payload


def _as_list(value) -> list:
    return value if isinstance(value, list) else []


def _failure(operation: str, message: str, exc: Exception) -> dict:
    error = redact(exc)
    logger.error("[%s] %s", operation, error)
    return {"success": False, "error": error, "message": message}


def _record_health_score(analysis: HealthAssessment) -> None:
    """Push the latest health score to Prometheus."""
    try:
        from app.telemetry import HEALTH_SCORE

        HEALTH_SCORE.set(analysis.health_score)
    except Exception as exc:
        logger.warning("Failed to update health score metric: %s", exc)


def _text(value) -> Optional[str]:
    return None if value is None else str(value)


def _asset_summary(asset: dict) -> dict:
    playback_ids = asset.get("playback_ids")
    if not isinstance(playback_ids, list):
        playback_ids = []
    return {
        "id": _text(asset.get("id")),
        "status": _text(asset.get("status")),
        "duration": metric_value(asset, "duration"),
        "max_stored_resolution": _text(asset.get("max_stored_resolution")),
        "created_at": _text(asset.get("created_at")),
        # Playback ids without an id carry nothing the agent can use.
        "playback_ids": [
            str(p["id"]) for p in playback_ids if isinstance(p, dict) and p.get("id")
        ],
    }


class AnalyticsService:
    """
    Streaming analytics on top of a ``TransportChain``.

    Args:
        chain: Ordered transports used for every backend call.
        settings: Service settings; credentials are checked before each call.
        clock: Returns the current epoch time; ``time.time`` by default.
    """

    def __init__(
        self,
        chain: TransportChain,
        settings: Settings,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.chain = chain
        self.settings = settings
        self.clock = clock or time.time

    def _range(self, timeframe) -> TimeRange:
        return resolve_timeframe(timeframe, now=int(self.clock()))

    @staticmethod
    def _timeframed(time_range: TimeRange, filters: Optional[list[str]]) -> dict:
        args = {"timeframe": time_range.as_query()}
        if filters:
            args["filters"] = list(filters)
        return args

    async def _fetch_metrics(self, time_range: TimeRange, filters) -> dict:
        args = self._timeframed(time_range, filters)
        args["METRIC_ID"] = DEFAULT_METRIC_ID
        payload = await self.chain.invoke(OVERALL_VALUES, args)
        metrics = _data(payload)
        return metrics if isinstance(metrics, dict) else {}

    async def overall(self, timeframe=None, filters: Optional[list[str]] = None) -> dict:
        """Overall metrics for the window plus their health assessment."""
        try:
            self.settings.require_credentials()
            time_range = self._range(timeframe)
            metrics = await self._fetch_metrics(time_range, filters)
            analysis = analyze_metrics(metrics)
            _record_health_score(analysis)
            return {
                "success": True,
                "timeRange": time_range.to_iso(),
                "metrics": metrics,
                "analysis": analysis.to_dict(),
            }
        except Exception as exc:
            return _failure("mux-analytics", "Failed to fetch Mux analytics data", exc)

    async def _platform_breakdown(self, time_range: TimeRange) -> list:
        try:
            payload = await self.chain.invoke(
                LIST_BREAKDOWN_VALUES,
                {
                    "METRIC_ID": DEFAULT_METRIC_ID,
                    "timeframe": time_range.as_query(),
                    "group_by": "operating_system",
                    "order_by": "negative_impact",
                    "order_direction": "desc",
                    "limit": PLATFORM_BREAKDOWN_LIMIT,
                },
            )
        except Exception as exc:
            logger.warning("Could not fetch platform breakdown: %s", redact(exc))
            return []
        return _as_list(_data(payload))

    async def errors(self, timeframe=None, filters: Optional[list[str]] = None) -> dict:
        """Playback errors, with a best-effort breakdown by operating system."""
        try:
            self.settings.require_credentials()
            time_range = self._range(timeframe)
            payload = await self.chain.invoke(
                LIST_ERRORS, self._timeframed(time_range, filters)
            )
            breakdown = await self._platform_breakdown(time_range)
            total = payload.get("total_row_count") if isinstance(payload, dict) else None
            return {
                "success": True,
                "timeRange": time_range.to_iso(),
                "errors": _as_list(_data(payload)),
                "totalErrors": total or 0,
                "platformBreakdown": breakdown,
            }
        except Exception as exc:
            return _failure("mux-errors", "Failed to fetch error data", exc)

    async def video_views(
        self,
        timeframe=None,
        filters: Optional[list[str]] = None,
        limit: Optional[int] = None,
    ) -> dict:
        try:
            self.settings.require_credentials()
            time_range = self._range(timeframe)
            args = self._timeframed(time_range, filters)
            args["limit"] = limit or DEFAULT_VIEWS_LIMIT
            views = _as_list(_data(await self.chain.invoke(LIST_VIDEO_VIEWS, args)))
            return {
                "success": True,
                "timeRange": time_range.to_iso(),
                "views": views,
                "totalViews": len(views),
            }
        except Exception as exc:
            return _failure("mux-video-views", "Failed to fetch video views data", exc)

    async def breakdown(
        self,
        metric_id: str = DEFAULT_METRIC_ID,
        group_by: str = "operating_system",
        timeframe=None,
        filters: Optional[list[str]] = None,
        limit: Optional[int] = None,
    ) -> dict:
        """Metric values grouped by a dimension, worst first."""
        try:
            self.settings.require_credentials()
            time_range = self._range(timeframe)
            args = self._timeframed(time_range, filters)
            args.update(
                METRIC_ID=metric_id,
                group_by=group_by,
                order_by="negative_impact",
                order_direction="desc",
                limit=limit or PLATFORM_BREAKDOWN_LIMIT,
            )
            rows = _as_list(_data(await self.chain.invoke(LIST_BREAKDOWN_VALUES, args)))
            return {
                "success": True,
                "timeRange": time_range.to_iso(),
                "metricId": metric_id,
                "groupBy": group_by,
                "breakdown": rows,
            }
        except Exception as exc:
            return _failure("mux-breakdown", "Failed to fetch breakdown data", exc)

    async def assets(self, limit: Optional[int] = None, page: Optional[int] = None) -> dict:
        try:
            self.settings.require_credentials()
            args = {}
            if limit:
                args["limit"] = limit
            if page:
                args["page"] = page
            assets = _as_list(_data(await self.chain.invoke(LIST_ASSETS, args)))
            summaries = [_asset_summary(a) for a in assets if isinstance(a, dict)]
            return {"success": True, "count": len(summaries), "assets": summaries}
        except Exception as exc:
            return _failure("mux-assets-list", "Failed to fetch Mux assets", exc)

    async def summary(self, timeframe=None, filters: Optional[list[str]] = None) -> dict:
        """Word-bounded text report of the window's metrics and health."""
        try:
            self.settings.require_credentials()
            time_range = self._range(timeframe)
            metrics = await self._fetch_metrics(time_range, filters)
            analysis = analyze_metrics(metrics)
            _record_health_score(analysis)
            return {
                "success": True,
                "timeRange": time_range.to_iso(),
                "summary": format_analytics_summary(metrics, analysis, time_range),
                "analysis": analysis.to_dict(),
            }
        except Exception as exc:
            return _failure(
                "mux-analytics-summary", "Failed to generate analytics summary", exc
            )
