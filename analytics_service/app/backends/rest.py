"""
Direct REST access to the Mux Data and Video APIs.

Uses HTTP basic auth with the Mux access token pair. List-valued
arguments (``timeframe``, ``filters``) are sent as repeated ``key[]``
query parameters, which is how the Mux API expects arrays.
"""

import logging

import requests
from opentelemetry import trace
from opentelemetry.trace import SpanKind

from mux_common.observability import inject_trace_context

from app.config import Settings
from app.errors import BackendError
from app.models.endpoints import Endpoint, EndpointArgs

logger = logging.getLogger("mux-rest")

# Arguments consumed by the URL path rather than the query string
PATH_ARGS = {"METRIC_ID"}


def build_query_params(args: EndpointArgs) -> list[tuple[str, str]]:
    """Flatten endpoint arguments into ``requests`` query parameter tuples."""
    params: list[tuple[str, str]] = []
    for key, value in args.to_params().items():
        if key in PATH_ARGS:
            continue
        if isinstance(value, (list, tuple)):
            params.extend((f"{key}[]", str(item)) for item in value)
        elif isinstance(value, bool):
            params.append((key, "true" if value else "false"))
        else:
            params.append((key, str(value)))
    return params


class MuxDataRestClient:
    """Synchronous Mux API client.

    Args:
        settings: Service settings carrying credentials, base URL and timeout.
        session: Optional ``requests.Session`` (a fresh one by default).
    """

    def __init__(self, settings: Settings, session: requests.Session | None = None):
        self.settings = settings
        self.base_url = settings.mux_base_url
        self.timeout = settings.request_timeout_seconds
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def request(self, path: str, params: list[tuple[str, str]] | None = None) -> dict:
        """GET *path* and return the decoded JSON body.

        Raises:
            ConfigurationError: credentials are missing or look invalid.
            BackendError: network failure, non-2xx status or non-JSON body.
        """
        self.settings.require_credentials()
        url = f"{self.base_url}{path}"
        tracer = trace.get_tracer(__name__)

        with tracer.start_as_current_span(
            f"mux GET {path}",
            kind=SpanKind.CLIENT,
            attributes={"http.method": "GET", "http.url": url},
        ) as span:
            headers = inject_trace_context({"Content-Type": "application/json"})
            try:
                response = self.session.get(
                    url,
                    params=params or [],
                    headers=headers,
                    auth=(self.settings.mux_token_id, self.settings.mux_token_secret),
                    timeout=self.timeout,
                )
            except requests.RequestException as exc:
                logger.warning("Mux API request to %s failed: %s", path, exc)
                raise BackendError(f"Mux API request failed: {exc}") from exc

            span.set_attribute("http.status_code", response.status_code)
            if not response.ok:
                raise BackendError(
                    f"Mux API error {response.status_code}: {response.text}",
                    status_code=response.status_code,
                )
            try:
                return response.json()
            except ValueError as exc:
                raise BackendError(
                    f"Mux API returned a non-JSON body for {path}",
                    status_code=response.status_code,
                ) from exc

    def invoke(self, endpoint: Endpoint, args: dict | EndpointArgs | None = None) -> dict:
        """Call *endpoint* with validated *args*."""
        validated = endpoint.validate(args)
        return self.request(endpoint.rest_path(validated), build_query_params(validated))
