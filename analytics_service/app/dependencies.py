"""FastAPI dependencies; override these in tests via ``app.dependency_overrides``."""

from fastapi import Request

from app.config import Settings
from app.service import AnalyticsService


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_service(request: Request) -> AnalyticsService:
    return request.app.state.service
