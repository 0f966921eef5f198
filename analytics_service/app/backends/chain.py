"""
Ordered transport fallback for backend calls.

A ``TransportChain`` holds the configured transports in priority order
(by default the MCP mirror first, then direct REST). Each call tries them
once, in order, and returns the first success. When every transport
fails, the raised ``BackendUnavailableError`` carries every attempt's
error, not just the last one. There are no retries.
"""

import asyncio
import logging
from typing import Protocol

from opentelemetry import trace

from mux_common.observability import observe_duration

from app.backends.mcp_client import MuxDataMcpClient
from app.backends.rest import MuxDataRestClient
from app.config import Settings
from app.errors import BackendUnavailableError, ConfigurationError, redact
from app.models.endpoints import Endpoint, EndpointArgs

logger = logging.getLogger("transport-chain")

# Wired by app.telemetry.init(); None until then
backend_requests_counter = None
backend_duration_histogram = None
transport_fallbacks_counter = None


class Transport(Protocol):
    name: str

    async def invoke(self, endpoint: Endpoint, args: EndpointArgs) -> dict: ...

    async def close(self) -> None: ...


class RestTransport:
    """Runs the blocking REST client in a worker thread."""

    name = "rest"

    def __init__(self, client: MuxDataRestClient):
        self.client = client

    async def invoke(self, endpoint: Endpoint, args: EndpointArgs) -> dict:
        return await asyncio.to_thread(self.client.invoke, endpoint, args)

    async def close(self) -> None:
        self.client.close()


class McpTransport:
    """Routes calls through the MCP mirror's ``invoke_api_endpoint`` tool."""

    name = "mcp"

    def __init__(self, client: MuxDataMcpClient):
        self.client = client

    async def invoke(self, endpoint: Endpoint, args: EndpointArgs) -> dict:
        return await self.client.invoke_endpoint(endpoint.name, args.to_params())

    async def close(self) -> None:
        await self.client.close()


def _count(counter, **labels) -> None:
    if counter is not None:
        counter.labels(**labels).inc()


class TransportChain:
    """Try each transport in order until one succeeds."""

    def __init__(self, transports: list[Transport]):
        self.transports = list(transports)

    @property
    def names(self) -> list[str]:
        return [t.name for t in self.transports]

    async def invoke(self, endpoint: Endpoint, args: dict | EndpointArgs | None = None) -> dict:
        """Call *endpoint*, falling back through the transports.

        Raises:
            pydantic.ValidationError: *args* don't match the endpoint contract.
            ConfigurationError: credentials are invalid (not retried elsewhere).
            BackendUnavailableError: every transport failed.
        """
        validated = endpoint.validate(args)
        tracer = trace.get_tracer(__name__)
        attempts: list[tuple[str, Exception]] = []

        for position, transport in enumerate(self.transports):
            with tracer.start_as_current_span(
                f"backend {endpoint.name}",
                attributes={"backend.transport": transport.name, "backend.endpoint": endpoint.name},
            ) as span:
                try:
                    with observe_duration(backend_duration_histogram, transport=transport.name):
                        result = await transport.invoke(endpoint, validated)
                except ConfigurationError:
                    raise
                except Exception as exc:
                    span.record_exception(exc)
                    attempts.append((transport.name, exc))
                    _count(
                        backend_requests_counter,
                        transport=transport.name, endpoint=endpoint.name, outcome="error",
                    )
                    if position + 1 < len(self.transports):
                        logger.warning(
                            "%s transport failed for %s, falling back: %s",
                            transport.name, endpoint.name, redact(exc),
                        )
                        _count(transport_fallbacks_counter, transport=transport.name)
                    continue

            _count(
                backend_requests_counter,
                transport=transport.name, endpoint=endpoint.name, outcome="success",
            )
            return result

        error = BackendUnavailableError(attempts)
        logger.error("%s", error)
        raise error

    async def close(self) -> None:
        for transport in self.transports:
            try:
                await transport.close()
            except Exception as exc:
                logger.warning("Error closing %s transport: %s", transport.name, exc)


def build_chain(settings: Settings) -> TransportChain:
    """Create transports in the order given by ``settings.transports``."""
    transports: list[Transport] = []
    for name in settings.transports:
        if name == "mcp":
            transports.append(McpTransport(MuxDataMcpClient(settings)))
        elif name == "rest":
            transports.append(RestTransport(MuxDataRestClient(settings)))
    logger.info("Analytics transports: %s", [t.name for t in transports])
    return TransportChain(transports)
