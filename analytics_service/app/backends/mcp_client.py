"""
Client for the Mux MCP server (``@mux/mcp``) over stdio.

The server is launched as a subprocess and exposes Mux API endpoints as
MCP tools. With ``--tools=dynamic`` it publishes a generic
``invoke_api_endpoint`` tool that takes an endpoint name plus arguments,
which is what ``invoke_endpoint`` uses.

The stdio transport and session are opened inside a dedicated background
task that owns them for their whole life, so a session opened while
serving one request can be closed from the application shutdown hook.
"""

import asyncio
import json
import logging

from mcp import ClientSession, StdioServerParameters
from mcp.client.stdio import stdio_client

from app.config import Settings
from app.errors import BackendError

logger = logging.getLogger("mux-mcp")

INVOKE_ENDPOINT_TOOL = "invoke_api_endpoint"


def parse_tool_result(tool_name: str, result) -> dict:
    """Decode a ``CallToolResult`` into a dict.

    Text content is parsed as JSON when possible, otherwise wrapped as
    ``{"result": text}``. Error results raise ``BackendError``.
    """
    content = list(getattr(result, "content", None) or [])
    first = content[0] if content else None
    text = getattr(first, "text", None) if getattr(first, "type", None) == "text" else None

    if getattr(result, "isError", False):
        raise BackendError(text or f"Unknown MCP error from {tool_name}")

    if text is None:
        return {}
    try:
        decoded = json.loads(text)
    except ValueError:
        return {"result": text}
    return decoded if isinstance(decoded, dict) else {"result": decoded}


class MuxDataMcpClient:
    """Owned connection to a Mux MCP server.

    Args:
        settings: Service settings (credentials, command, args, timeout).
        session: An already-initialised ``ClientSession``. When given, the
            client uses it as-is and never spawns a subprocess.
    """

    def __init__(self, settings: Settings, session: ClientSession | None = None):
        self.settings = settings
        self._session = session
        self._owns_session = session is None
        self._runner: asyncio.Task | None = None
        self._stop: asyncio.Event | None = None
        self._lock = asyncio.Lock()
        self._tool_names: list[str] | None = None

    @property
    def is_connected(self) -> bool:
        return self._session is not None

    def server_parameters(self) -> StdioServerParameters:
        env = dict(self.settings.extra_env)
        env["MUX_TOKEN_ID"] = self.settings.mux_token_id or ""
        env["MUX_TOKEN_SECRET"] = self.settings.mux_token_secret or ""
        return StdioServerParameters(
            command=self.settings.mcp_command,
            args=list(self.settings.mcp_args),
            env=env,
        )

    async def _run_session(self, ready: asyncio.Future, stop: asyncio.Event) -> None:
        try:
            async with stdio_client(self.server_parameters()) as (read, write):
                async with ClientSession(read, write) as session:
                    await session.initialize()
                    self._session = session
                    ready.set_result(None)
                    await stop.wait()
        except Exception as exc:
            if not ready.done():
                ready.set_exception(exc)
            else:
                logger.warning("MCP session ended with error: %s", exc)
        finally:
            self._session = None
            self._tool_names = None

    async def connect(self) -> None:
        """Start the MCP server and initialise a session (no-op if connected)."""
        async with self._lock:
            if self._session is not None:
                return

            self.settings.require_credentials()
            timeout_ms = self.settings.connection_timeout_ms
            logger.info("Connecting to Mux Data MCP server (timeout=%dms)", timeout_ms)

            ready = asyncio.get_running_loop().create_future()
            self._stop = asyncio.Event()
            self._runner = asyncio.create_task(self._run_session(ready, self._stop))
            try:
                async with asyncio.timeout(timeout_ms / 1000):
                    await ready
            except TimeoutError:
                await self._shutdown_runner()
                raise BackendError(f"MCP connection timeout after {timeout_ms}ms") from None
            except Exception:
                await self._shutdown_runner()
                raise

            logger.info("Connected to Mux Data MCP server")

    async def _shutdown_runner(self) -> None:
        runner, self._runner = self._runner, None
        if self._stop is not None:
            self._stop.set()
            self._stop = None
        if runner is None:
            return
        if self._session is None:
            # Still starting up, so it is not waiting on the stop event
            runner.cancel()
        try:
            await runner
        except asyncio.CancelledError:
            pass

    async def close(self) -> None:
        """Close the session and stop the server subprocess."""
        if not self._owns_session:
            return
        if self._runner is not None:
            logger.info("Disconnecting from Mux Data MCP server")
        await self._shutdown_runner()

    async def list_tools(self) -> list[str]:
        """Names of the tools the server exposes (cached per session)."""
        await self.connect()
        if self._tool_names is None:
            result = await self._session.list_tools()
            self._tool_names = [tool.name for tool in result.tools]
            logger.debug("Available MCP tools: %s", self._tool_names)
        return self._tool_names

    async def call_tool(self, name: str, arguments: dict | None = None) -> dict:
        await self.connect()
        result = await self._session.call_tool(name, arguments=arguments or {})
        return parse_tool_result(name, result)

    async def invoke_endpoint(self, endpoint_name: str, args: dict) -> dict:
        """Call a Mux API endpoint through the generic invoke tool."""
        if INVOKE_ENDPOINT_TOOL not in await self.list_tools():
            raise BackendError(f"{INVOKE_ENDPOINT_TOOL} tool not available in MCP")
        return await self.call_tool(
            INVOKE_ENDPOINT_TOOL,
            {"endpoint_name": endpoint_name, "args": args},
        )
