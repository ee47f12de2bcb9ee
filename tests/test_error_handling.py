"""Tests for MCP error handling decorator."""

import httpx

from src.core.coach_client import CoachError
from src.core.plaid_client import PlaidError
from src.core.planner import InvalidInputError
from src.core.resolvers import ResolverError
from src.mcp.error_handling import handle_tool_errors


class TestHandleToolErrors:
    async def test_returns_result_on_success(self):
        @handle_tool_errors
        async def tool():
            return "ok"

        assert await tool() == "ok"

    async def test_catches_plaid_error(self):
        @handle_tool_errors
        async def tool():
            raise PlaidError(400, "ITEM_ERROR", "ITEM_LOGIN_REQUIRED", "Login required")

        result = await tool()
        assert "ITEM_LOGIN_REQUIRED" in result
        assert "Login required" in result

    async def test_catches_coach_error(self):
        @handle_tool_errors
        async def tool():
            raise CoachError(429, "Rate limit reached")

        assert "Rate limit reached" in await tool()

    async def test_catches_invalid_input(self):
        @handle_tool_errors
        async def tool():
            raise InvalidInputError("Budget state must be an object.")

        result = await tool()
        assert result.startswith("Invalid input")

    async def test_catches_resolver_error(self):
        @handle_tool_errors
        async def tool():
            raise ResolverError("start_date", "tomorrow", "Expected YYYY-MM-DD.")

        result = await tool()
        assert "tomorrow" in result

    async def test_catches_connect_error(self):
        @handle_tool_errors
        async def tool():
            raise httpx.ConnectError("Connection refused")

        result = await tool()
        assert "Cannot connect" in result

    async def test_catches_timeout(self):
        @handle_tool_errors
        async def tool():
            raise httpx.ReadTimeout("timed out")

        result = await tool()
        assert "timed out" in result.lower()

    async def test_catches_validation_error(self):
        @handle_tool_errors
        async def tool():
            from src.models.schemas import SnapshotInput
            SnapshotInput()  # type: ignore[call-arg]

        result = await tool()
        assert "Invalid data" in result
        assert "validation error" in result

    async def test_catches_unexpected_exception(self):
        @handle_tool_errors
        async def tool():
            raise RuntimeError("boom")

        result = await tool()
        assert "Unexpected error" in result
        assert "RuntimeError" in result
        assert "boom" in result
