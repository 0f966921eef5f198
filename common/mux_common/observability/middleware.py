"""
Starlette middleware counting HTTP requests into a labelled Counter.

Requests are labelled with the matched route template (``/tools/{tool_id}``)
rather than the raw URL, so path parameters don't explode label cardinality.

Usage::

    HTTP_REQUESTS = create_counter(
        "http_requests_total", "Total HTTP requests", ["method", "path", "status"]
    )
    app.add_middleware(MetricsMiddleware, counter=HTTP_REQUESTS, ignored_paths={"/metrics"})
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from prometheus_client import Counter


def route_template(request: Request) -> str:
    """The matched route's path template, or the raw path if unrouted."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class MetricsMiddleware(BaseHTTPMiddleware):
    """Increment *counter* once per request.

    Args:
        app: The ASGI application.
        counter: Counter with labels ``["method", "path", "status"]``.
        ignored_paths: Paths that are never counted (e.g. ``{"/metrics"}``).
    """

    def __init__(self, app, counter: Counter, ignored_paths: set[str] | None = None):
        super().__init__(app)
        self.counter = counter
        self.ignored_paths = ignored_paths or set()

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        if request.url.path not in self.ignored_paths:
            self.counter.labels(
                method=request.method,
                path=route_template(request),
                status=response.status_code,
            ).inc()

        return response
