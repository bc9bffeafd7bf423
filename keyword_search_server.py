#!/usr/bin/env python3
"""
Keyword Search MCP Server
Exposes the search_keyword tool over stdio.
"""

import asyncio
import logging
import sys
from typing import Any, Dict, List, Optional

import mcp.server.stdio
import mcp.types as types
from mcp.server import NotificationOptions, Server
from mcp.server.models import InitializationOptions

from keyword_search import TOOL_NAME, render_outcome, run_search, unknown_tool
from keyword_search_config import KeywordSearchConfig, configure_logging

logger = logging.getLogger(__name__)

SEARCH_KEYWORD_TOOL = types.Tool(
    name=TOOL_NAME,
    description="Searches for a specified keyword within a file",
    inputSchema={
        "type": "object",
        "properties": {
            "file_path": {"type": "string", "description": "Path to the file to search in"},
            "keyword": {"type": "string", "description": "Keyword to search for"},
            "case_sensitive": {
                "type": "boolean",
                "description": "Whether the search should be case-sensitive",
                "default": False,
            },
        },
        "required": ["file_path", "keyword"],
    },
)


class KeywordSearchServer:
    """MCP server exposing a single keyword search tool."""

    def __init__(self, config: KeywordSearchConfig):
        self.config = config
        self.server = Server(config.server_name, version=config.server_version)
        self._setup_handlers()

    def _setup_handlers(self):
        """Setup all MCP tool handlers."""

        @self.server.list_tools()
        async def handle_list_tools():
            return await self.list_tools()

        # Missing arguments are reported by the tool itself, not by schema validation
        @self.server.call_tool(validate_input=False)
        async def handle_call_tool(name: str, arguments: dict):
            return await self.call_tool(name, arguments)

    async def list_tools(self) -> List[types.Tool]:
        return [SEARCH_KEYWORD_TOOL]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
        """Dispatch a tool call and wrap the outcome in a text content block."""
        if name == TOOL_NAME:
            outcome = await run_search(arguments)
        else:
            logger.warning("Unknown tool requested: %s", name)
            outcome = unknown_tool(name)

        return [types.TextContent(type="text", text=render_outcome(outcome))]

    def initialization_options(self) -> InitializationOptions:
        return InitializationOptions(
            server_name=self.config.server_name,
            server_version=self.config.server_version,
            capabilities=self.server.get_capabilities(
                notification_options=NotificationOptions(),
                experimental_capabilities={},
            ),
        )

    async def run_stdio(self):
        async with mcp.server.stdio.stdio_server() as (read_stream, write_stream):
            logger.info("Keyword Search MCP Server running on stdio")
            await self.server.run(read_stream, write_stream, self.initialization_options())


async def main(config: Optional[KeywordSearchConfig] = None):
    """Main entry point for the MCP server."""
    config = config or KeywordSearchConfig()
    server = KeywordSearchServer(config)
    await server.run_stdio()


def cli():
    try:
        config = KeywordSearchConfig()
        configure_logging(config)
        if config.transport == "http":
            from keyword_search_http import serve_http

            serve_http(config)
        else:
            asyncio.run(main(config))
    except Exception:
        logger.exception("Fatal error in main()")
        sys.exit(1)


if __name__ == "__main__":
    cli()
