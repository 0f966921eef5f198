from .analytics import router as analytics_router
from .health import router as health_router
from .speech import router as speech_router
from .tools import router as tools_router

__all__ = ["analytics_router", "health_router", "speech_router", "tools_router"]
