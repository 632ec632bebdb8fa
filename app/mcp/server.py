"""
Minimal MCP-style tool server: exposes documentation search as a standardized
tool interface, so agents (including this app's own model in tool mode) can
query the docs index. Results are passed through as the search backend returns
them; each hit carries title, path and content.
"""

import logging
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from app.agent.tools import SEARCH_TOOL
from app.core.config import SEARCH_DEFAULT_LIMIT
from app.services.retrieval_service import get_search_backend

logger = logging.getLogger(__name__)

mcp_router = APIRouter(tags=["mcp"])


class SearchRequest(BaseModel):
    """Request body for MCP tool search."""

    query: str = ""
    limit: int | None = Field(None, ge=1, description="Maximum number of results (default: 20)")
    offset: int | None = Field(None, ge=0, description="Number of results to skip (default: 0)")


@mcp_router.get("/tools", summary="List MCP tools")
def mcp_list_tools() -> dict[str, list[dict[str, Any]]]:
    return {"tools": [SEARCH_TOOL]}


@mcp_router.post(
    "/tools/search",
    summary="MCP tool: search",
    description="Full-text keyword search in the documentation index. Returns the raw search response ({hits: [...]}).",
)
async def mcp_search(body: SearchRequest) -> dict[str, Any]:
    query = (body.query or "").strip()
    logger.info("MCP tool called: search query=%r", query)
    if not query:
        return {"hits": []}
    backend = get_search_backend()
    return await backend.search(
        query,
        limit=body.limit or SEARCH_DEFAULT_LIMIT,
        offset=body.offset or 0,
    )
