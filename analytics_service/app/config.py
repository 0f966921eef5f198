"""
Environment-driven settings for the analytics service.

Every knob is read from the process environment once, at startup, into an
immutable ``Settings`` object that is then passed to whatever needs it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from app.errors import ConfigurationError, credential_problem

logger = logging.getLogger("config")

DEFAULT_MUX_BASE_URL = "https://api.mux.com"
DEFAULT_DEEPGRAM_BASE_URL = "https://api.deepgram.com"
DEFAULT_TRANSPORTS = ("mcp", "rest")
DEFAULT_MCP_COMMAND = "npx"
DEFAULT_MCP_ARGS = (
    "@mux/mcp",
    "client=cursor",
    "--tools=dynamic",
    "--resource=data.errors",
    "--resource=data.metrics",
    "--resource=data.video_views",
)
DEFAULT_CONNECTION_TIMEOUT_MS = 45000
DEFAULT_REQUEST_TIMEOUT_SECONDS = 15.0

KNOWN_TRANSPORTS = {"mcp", "rest"}


def parse_csv(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
    """Split a comma-separated env value; blank or empty input gives *default*."""
    if not value:
        return default
    items = tuple(item.strip() for item in value.split(",") if item.strip())
    if not items:
        logger.warning("Empty comma-separated setting, using defaults")
        return default
    return items


def _int_env(env: dict, name: str, default: int) -> int:
    raw = env.get(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning("Invalid integer for %s=%r, using default %d", name, raw, default)
        return default


def _float_env(env: dict, name: str, default: float) -> float:
    raw = env.get(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid number for %s=%r, using default %s", name, raw, default)
        return default


@dataclass(frozen=True)
class Settings:
    mux_token_id: str | None = None
    mux_token_secret: str | None = None
    mux_base_url: str = DEFAULT_MUX_BASE_URL
    transports: tuple[str, ...] = DEFAULT_TRANSPORTS
    mcp_command: str = DEFAULT_MCP_COMMAND
    mcp_args: tuple[str, ...] = DEFAULT_MCP_ARGS
    connection_timeout_ms: int = DEFAULT_CONNECTION_TIMEOUT_MS
    request_timeout_seconds: float = DEFAULT_REQUEST_TIMEOUT_SECONDS
    deepgram_api_key: str | None = None
    deepgram_base_url: str = DEFAULT_DEEPGRAM_BASE_URL
    environment: str = "development"
    extra_env: dict[str, str] = field(default_factory=dict, repr=False)

    @classmethod
    def from_env(cls, env: dict | None = None) -> "Settings":
        """Build settings from *env* (defaults to ``os.environ``)."""
        env = dict(os.environ if env is None else env)

        transports = tuple(
            t.lower() for t in parse_csv(env.get("MUX_TRANSPORTS"), DEFAULT_TRANSPORTS)
        )
        unknown = [t for t in transports if t not in KNOWN_TRANSPORTS]
        if unknown:
            logger.warning("Ignoring unknown transports %s", unknown)
            transports = tuple(t for t in transports if t in KNOWN_TRANSPORTS) or DEFAULT_TRANSPORTS

        return cls(
            mux_token_id=env.get("MUX_TOKEN_ID"),
            mux_token_secret=env.get("MUX_TOKEN_SECRET"),
            mux_base_url=env.get("MUX_BASE_URL", DEFAULT_MUX_BASE_URL).rstrip("/"),
            transports=transports,
            mcp_command=env.get("MUX_MCP_COMMAND", DEFAULT_MCP_COMMAND),
            mcp_args=parse_csv(env.get("MUX_MCP_DATA_ARGS"), DEFAULT_MCP_ARGS),
            connection_timeout_ms=_int_env(
                env, "MUX_CONNECTION_TIMEOUT", DEFAULT_CONNECTION_TIMEOUT_MS
            ),
            request_timeout_seconds=_float_env(
                env, "MUX_REQUEST_TIMEOUT", DEFAULT_REQUEST_TIMEOUT_SECONDS
            ),
            deepgram_api_key=env.get("DEEPGRAM_API_KEY"),
            deepgram_base_url=env.get("DEEPGRAM_BASE_URL", DEFAULT_DEEPGRAM_BASE_URL).rstrip("/"),
            environment=env.get("ENVIRONMENT", "development"),
            extra_env=env,
        )

    def credential_problems(self) -> list[str]:
        """List human-readable problems with the Mux credentials (no values)."""
        problems = []
        for name, value in (
            ("MUX_TOKEN_ID", self.mux_token_id),
            ("MUX_TOKEN_SECRET", self.mux_token_secret),
        ):
            problem = credential_problem(value)
            if problem:
                problems.append(f"{name} {problem}")
        return problems

    @property
    def credentials_configured(self) -> bool:
        return not self.credential_problems()

    def require_credentials(self) -> None:
        """Fail fast, before any network call, when credentials look invalid."""
        problems = self.credential_problems()
        if problems:
            for problem in problems:
                logger.error("[security] %s", problem)
            raise ConfigurationError(
                "MUX_TOKEN_ID and MUX_TOKEN_SECRET are required and must be valid"
            )
