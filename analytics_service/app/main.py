from contextlib import asynccontextmanager

from fastapi import FastAPI

from mux_common.observability import init_observability, get_logger, shutdown_tracing

from app.backends import build_chain
from app.config import Settings
from app.routes import analytics_router, health_router, speech_router, tools_router
from app.service import AnalyticsService

# Bootstrap logging + tracing + service-info in one call
init_observability("mux-analytics-agent", "0.1.0")

logger = get_logger("mux-analytics-agent")


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = Settings.from_env()
    for problem in settings.credential_problems():
        logger.warning("[security] %s; analytics calls will fail until fixed", problem)

    chain = build_chain(settings)
    app.state.settings = settings
    app.state.service = AnalyticsService(chain, settings)
    logger.info("Analytics service ready (transports=%s)", chain.names)

    yield

    # Shutdown: stop the MCP server subprocess, close HTTP sessions
    await chain.close()

    # Flush remaining traces before shutdown
    shutdown_tracing()


app = FastAPI(
    title="Mux Analytics Agent",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(analytics_router)
app.include_router(tools_router)
app.include_router(speech_router)
app.include_router(health_router)

# Initialize telemetry at module level (before requests start)
try:
    from app import telemetry
    telemetry.init(app)
except Exception as e:
    logger.warning("Telemetry init skipped: %s", e)
