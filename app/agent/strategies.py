"""
Retrieval strategies: how a chat exchange gets its documentation.

- ToolSearchStrategy: the model searches by itself through the remote MCP server;
  the agent loop may run several rounds.
- ContextInjectionStrategy: search once up front, put the hits into the system
  prompt, single model call with no tools.

Both produce an ExchangePlan that the agent loop (app/agent/graph.py) runs unchanged.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

from app.agent.prompts import TOOL_SYSTEM_PROMPT, retrieval_system_prompt
from app.agent.sources import SourceRecord, sources_from_hits
from app.agent.tools import mcp_servers, mcp_toolset
from app.core.config import (
    CONTEXT_CHAR_LIMIT,
    CONTEXT_TOP_K,
    HYBRID_SEMANTIC_RATIO,
    MAX_ITERATIONS,
    MCP_SERVER_NAME,
    MCP_SERVER_URL,
    RETRIEVAL_MODE,
    SOURCES_PER_RESULT,
)
from app.core.errors import ServiceUnavailableError
from app.services.context_builder import build_context
from app.services.retrieval_service import SearchBackend, get_search_backend, search_hits

logger = logging.getLogger(__name__)

TOOL_MODE = "tool"
RETRIEVAL_FIRST_MODE = "retrieval_first"


@dataclass
class ExchangePlan:
    """Everything the agent loop needs besides the conversation itself."""

    system: str
    max_calls: int
    mcp_servers: list[dict[str, Any]] | None = None
    tools: list[dict[str, Any]] | None = None
    # Sources known before the model runs (retrieval-first hits)
    sources: list[SourceRecord] = field(default_factory=list)


class RetrievalStrategy(Protocol):
    name: str

    async def prepare(self, question: str) -> ExchangePlan:
        ...


class ToolSearchStrategy:
    name = TOOL_MODE

    def __init__(
        self,
        server_url: str = MCP_SERVER_URL,
        server_name: str = MCP_SERVER_NAME,
        max_iterations: int = MAX_ITERATIONS,
    ) -> None:
        self.server_url = server_url
        self.server_name = server_name
        self.max_iterations = max_iterations

    async def prepare(self, question: str) -> ExchangePlan:
        return ExchangePlan(
            system=TOOL_SYSTEM_PROMPT,
            max_calls=self.max_iterations,
            mcp_servers=mcp_servers(self.server_url, self.server_name),
            tools=mcp_toolset(self.server_name),
        )


class ContextInjectionStrategy:
    name = RETRIEVAL_FIRST_MODE

    def __init__(
        self,
        backend: SearchBackend,
        top_k: int = CONTEXT_TOP_K,
        semantic_ratio: float = HYBRID_SEMANTIC_RATIO,
        char_limit: int = CONTEXT_CHAR_LIMIT,
        sources_limit: int = SOURCES_PER_RESULT,
    ) -> None:
        self.backend = backend
        self.top_k = top_k
        self.semantic_ratio = semantic_ratio
        self.char_limit = char_limit
        self.sources_limit = sources_limit

    async def prepare(self, question: str) -> ExchangePlan:
        hits = await search_hits(
            self.backend, question, limit=self.top_k, semantic_ratio=self.semantic_ratio
        )
        context = build_context(hits, char_limit=self.char_limit)
        logger.info("[strategy:retrieval_first] hits=%d context_len=%d", len(hits), len(context))
        return ExchangePlan(
            system=retrieval_system_prompt(context),
            max_calls=1,
            sources=sources_from_hits(hits, limit=self.sources_limit),
        )


def get_strategy(mode: str | None = None) -> RetrievalStrategy:
    """Strategy for `mode` (default: RETRIEVAL_MODE). Tool mode needs MCP_SERVER_URL."""
    mode = mode or RETRIEVAL_MODE
    if mode == RETRIEVAL_FIRST_MODE:
        return ContextInjectionStrategy(get_search_backend())
    if mode != TOOL_MODE:
        raise ServiceUnavailableError(f"Unknown RETRIEVAL_MODE: {mode!r}")
    if not MCP_SERVER_URL:
        raise ServiceUnavailableError("MCP server URL is not configured")
    return ToolSearchStrategy(server_url=MCP_SERVER_URL)
