"""Tests for environment-driven settings."""

import pytest

from app.config import DEFAULT_MCP_ARGS, Settings, parse_csv
from app.errors import ConfigurationError

TOKEN_ID = "a1b2c3d4e5f6g7h8i9j0k1"
TOKEN_SECRET = "s1e2c3r4e5t6s7e8c9r0e1t2"


class TestFromEnv:
    def test_defaults(self):
        settings = Settings.from_env({})
        assert settings.mux_base_url == "https://api.mux.com"
        assert settings.transports == ("mcp", "rest")
        assert settings.mcp_command == "npx"
        assert settings.mcp_args == DEFAULT_MCP_ARGS
        assert settings.connection_timeout_ms == 45000
        assert settings.request_timeout_seconds == 15.0
        assert settings.environment == "development"

    def test_transport_order_from_env(self):
        settings = Settings.from_env({"MUX_TRANSPORTS": "REST, mcp"})
        assert settings.transports == ("rest", "mcp")

    def test_unknown_transports_dropped(self):
        assert Settings.from_env({"MUX_TRANSPORTS": "rest,grpc"}).transports == ("rest",)

    def test_only_unknown_transports_use_default(self):
        assert Settings.from_env({"MUX_TRANSPORTS": "grpc"}).transports == ("mcp", "rest")

    def test_mcp_args_csv(self):
        settings = Settings.from_env({"MUX_MCP_DATA_ARGS": "@mux/mcp, --tools=dynamic"})
        assert settings.mcp_args == ("@mux/mcp", "--tools=dynamic")

    def test_invalid_timeout_uses_default(self):
        settings = Settings.from_env({"MUX_CONNECTION_TIMEOUT": "soon"})
        assert settings.connection_timeout_ms == 45000

    def test_base_url_trailing_slash_stripped(self):
        assert Settings.from_env({"MUX_BASE_URL": "http://mock:8080/"}).mux_base_url == "http://mock:8080"

    def test_reads_os_environ_by_default(self, monkeypatch):
        monkeypatch.setenv("MUX_TOKEN_ID", TOKEN_ID)
        assert Settings.from_env().mux_token_id == TOKEN_ID


class TestParseCsv:
    def test_blank_gives_default(self):
        assert parse_csv("", ("x",)) == ("x",)
        assert parse_csv(" , ", ("x",)) == ("x",)

    def test_strips_items(self):
        assert parse_csv(" a ,b,, c", ()) == ("a", "b", "c")


class TestCredentials:
    def test_valid(self):
        settings = Settings(mux_token_id=TOKEN_ID, mux_token_secret=TOKEN_SECRET)
        assert settings.credentials_configured
        settings.require_credentials()

    def test_missing_secret(self):
        settings = Settings(mux_token_id=TOKEN_ID)
        assert settings.credential_problems() == ["MUX_TOKEN_SECRET is not set"]
        with pytest.raises(ConfigurationError):
            settings.require_credentials()

    def test_problem_never_includes_value(self):
        settings = Settings(mux_token_id="short", mux_token_secret="your_secret_here_please")
        problems = settings.credential_problems()
        assert problems == [
            "MUX_TOKEN_ID appears to be too short",
            "MUX_TOKEN_SECRET appears to be a placeholder value",
        ]
        assert not any("your_secret_here_please" in p for p in problems)

    def test_error_message_names_variables(self):
        with pytest.raises(ConfigurationError, match="MUX_TOKEN_ID and MUX_TOKEN_SECRET"):
            Settings().require_credentials()
