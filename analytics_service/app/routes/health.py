from fastapi import APIRouter, Depends, Response

from mux_common.observability import metrics_response

from app.config import Settings
from app.dependencies import get_service, get_settings
from app.models.health import HealthResponse
from app.service import AnalyticsService

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
def health(
    settings: Settings = Depends(get_settings),
    service: AnalyticsService = Depends(get_service),
):
    configured = settings.credentials_configured
    return HealthResponse(
        status="healthy" if configured else "degraded",
        environment=settings.environment,
        credentials_configured=configured,
        transports=service.chain.names,
    )


@router.get("/metrics")
def metrics():
    body, content_type = metrics_response()
    return Response(content=body, media_type=content_type)
