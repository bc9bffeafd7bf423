"""Tests for the MCP gateways around the keyword search tool."""

import json
from pathlib import Path

import mcp.types as types
import pytest
from fastmcp import Client

from keyword_search import TOOL_NAME
from keyword_search_config import KeywordSearchConfig
from keyword_search_http import app as http_app
from keyword_search_server import SEARCH_KEYWORD_TOOL, KeywordSearchServer


@pytest.fixture
def config(monkeypatch: pytest.MonkeyPatch) -> KeywordSearchConfig:
    for key in (
        "KEYWORD_SEARCH_SERVER_NAME",
        "KEYWORD_SEARCH_SERVER_VERSION",
        "KEYWORD_SEARCH_TRANSPORT",
        "KEYWORD_SEARCH_PORT",
        "KEYWORD_SEARCH_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    return KeywordSearchConfig()


@pytest.fixture
def server(config: KeywordSearchConfig) -> KeywordSearchServer:
    return KeywordSearchServer(config)


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    path = tmp_path / "app.log"
    path.write_text("INFO start\nERROR disk full\ninfo retry\nerror again\n", encoding="utf-8")
    return path


def _payload(contents) -> dict:
    assert len(contents) == 1
    assert contents[0].type == "text"
    return json.loads(contents[0].text)


class TestListTools:
    @pytest.mark.asyncio
    async def test_single_tool(self, server: KeywordSearchServer) -> None:
        tools = await server.list_tools()

        assert [tool.name for tool in tools] == [TOOL_NAME]

    def test_input_schema(self) -> None:
        schema = SEARCH_KEYWORD_TOOL.inputSchema

        assert schema["required"] == ["file_path", "keyword"]
        assert schema["properties"]["case_sensitive"]["type"] == "boolean"
        assert schema["properties"]["case_sensitive"]["default"] is False


class TestCallTool:
    @pytest.mark.asyncio
    async def test_search(self, server: KeywordSearchServer, log_file: Path) -> None:
        contents = await server.call_tool(TOOL_NAME, {"file_path": str(log_file), "keyword": "error"})

        payload = _payload(contents)
        assert payload["total_matches"] == 2
        assert payload["matches"] == [
            {"line_number": 2, "line_content": "ERROR disk full"},
            {"line_number": 4, "line_content": "error again"},
        ]

    @pytest.mark.asyncio
    async def test_missing_arguments(self, server: KeywordSearchServer) -> None:
        contents = await server.call_tool(TOOL_NAME, {"keyword": "error"})

        assert _payload(contents) == {"error": "file_path and keyword are required"}

    @pytest.mark.asyncio
    async def test_none_arguments(self, server: KeywordSearchServer) -> None:
        contents = await server.call_tool(TOOL_NAME, None)

        assert _payload(contents) == {"error": "file_path and keyword are required"}

    @pytest.mark.parametrize("name", ["search_file", "", "SEARCH_KEYWORD"])
    @pytest.mark.asyncio
    async def test_unknown_tool(self, server: KeywordSearchServer, name: str) -> None:
        contents = await server.call_tool(name, {"file_path": "x", "keyword": "y"})

        assert _payload(contents) == {"error": f"Unknown tool: {name}"}

    @pytest.mark.asyncio
    async def test_registered_handler(self, server: KeywordSearchServer, log_file: Path) -> None:
        handler = server.server.request_handlers[types.CallToolRequest]
        request = types.CallToolRequest(
            method="tools/call",
            params=types.CallToolRequestParams(
                name=TOOL_NAME,
                arguments={"file_path": str(log_file), "keyword": "ERROR", "case_sensitive": True},
            ),
        )

        result = await handler(request)

        assert result.root.isError is False
        payload = json.loads(result.root.content[0].text)
        assert payload["case_sensitive"] is True
        assert payload["total_matches"] == 1

    def test_initialization_options(self, server: KeywordSearchServer) -> None:
        options = server.initialization_options()

        assert options.server_name == "keyword-search-server"
        assert options.server_version == "1.0.0"
        assert options.capabilities.tools is not None


class TestHttpTool:
    """The FastMCP app answers with the same payloads as the stdio server."""

    @pytest.mark.asyncio
    async def test_search(self, log_file: Path) -> None:
        async with Client(http_app) as client:
            result = await client.call_tool_mcp(TOOL_NAME, {"file_path": str(log_file), "keyword": "info"})

        assert result.isError is False
        assert json.loads(result.content[0].text)["total_matches"] == 2

    @pytest.mark.parametrize(
        "arguments",
        [
            {"keyword": "info"},
            {"file_path": None, "keyword": "info"},
            {"file_path": "", "keyword": "info"},
        ],
    )
    @pytest.mark.asyncio
    async def test_missing_arguments(self, arguments: dict) -> None:
        async with Client(http_app) as client:
            result = await client.call_tool_mcp(TOOL_NAME, arguments)

        assert result.isError is False
        assert json.loads(result.content[0].text) == {"error": "file_path and keyword are required"}

    @pytest.mark.asyncio
    async def test_null_case_sensitive_defaults_to_false(self, log_file: Path) -> None:
        async with Client(http_app) as client:
            result = await client.call_tool_mcp(
                TOOL_NAME, {"file_path": str(log_file), "keyword": "info", "case_sensitive": None}
            )

        payload = json.loads(result.content[0].text)
        assert payload["case_sensitive"] is False
        assert payload["total_matches"] == 2

    @pytest.mark.parametrize("name", ["nope", "search_file"])
    @pytest.mark.asyncio
    async def test_unknown_tool(self, name: str) -> None:
        async with Client(http_app) as client:
            result = await client.call_tool_mcp(name, {})

        assert result.isError is False
        assert json.loads(result.content[0].text) == {"error": f"Unknown tool: {name}"}
