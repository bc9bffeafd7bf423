from typing import Optional

import mcp.types as types
from fastmcp import FastMCP
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools.tool import ToolResult

from keyword_search import TOOL_NAME, render_outcome, run_search, unknown_tool
from keyword_search_config import KeywordSearchConfig, configure_logging


class UnknownToolMiddleware(Middleware):
    """Answer calls to unregistered tools with an error payload instead of a protocol error."""

    async def on_call_tool(self, context: MiddlewareContext, call_next):
        name = context.message.name
        if name != TOOL_NAME:
            text = render_outcome(unknown_tool(name))
            return ToolResult(content=[types.TextContent(type="text", text=text)])
        return await call_next(context)


app = FastMCP("Keyword Search MCP Server")
app.add_middleware(UnknownToolMiddleware())


# Parameters accept null so missing fields reach the required-field check
async def search_keyword(
    file_path: Optional[str] = None,
    keyword: Optional[str] = None,
    case_sensitive: Optional[bool] = None,
) -> str:
    """Searches for a specified keyword within a file"""
    outcome = await run_search(
        {"file_path": file_path, "keyword": keyword, "case_sensitive": case_sensitive}
    )
    return render_outcome(outcome)


app.tool(name=TOOL_NAME)(search_keyword)


def serve_http(config: KeywordSearchConfig):
    app.run(transport="http", host=config.host, port=config.port)


if __name__ == "__main__":
    config = KeywordSearchConfig()
    configure_logging(config)
    serve_http(config)
