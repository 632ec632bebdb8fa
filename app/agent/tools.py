"""
Agent tools: declarations handed to the LLM in tool-driven mode.

The model does not call our code directly. It is given a remote MCP server plus an
mcp_toolset entry; the provider runs the server's search tool and injects
mcp_tool_result blocks into the response.
"""

from typing import Any

from app.core.config import MCP_SERVER_NAME, MCP_SERVER_URL

# Tool schema published by the search tool endpoint (app/mcp/server.py)
SEARCH_TOOL: dict[str, Any] = {
    "name": "search",
    "title": "Search Documents",
    "description": "Full-text keyword search in the documentation index",
    "input_schema": {
        "type": "object",
        "properties": {
            "query": {"type": "string", "description": "The search query string"},
            "limit": {
                "type": "integer",
                "description": "Maximum number of results to return (default: 20)",
            },
            "offset": {
                "type": "integer",
                "description": "Number of results to skip (default: 0)",
            },
        },
        "required": ["query"],
    },
}


def mcp_servers(url: str = MCP_SERVER_URL, name: str = MCP_SERVER_NAME) -> list[dict[str, Any]]:
    return [{"type": "url", "url": url, "name": name}]


def mcp_toolset(name: str = MCP_SERVER_NAME) -> list[dict[str, Any]]:
    return [{"type": "mcp_toolset", "mcp_server_name": name}]
