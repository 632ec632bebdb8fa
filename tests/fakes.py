"""
Test doubles for the LLM provider and the search backend.

FakeProvider replays scripted responses (the last one repeats) and records a
deep copy of every request, so tests can check exactly what went upstream.
"""

import copy
import json
from typing import Any

from app.agent.content import ProviderResponse, Usage, parse_blocks


def text_block(text: str) -> dict[str, Any]:
    return {"type": "text", "text": text}


def tool_result_block(payload: Any, is_error: bool = False, block_type: str = "mcp_tool_result") -> dict[str, Any]:
    """Tool result block; dict payloads are JSON-encoded into a string."""
    content = json.dumps(payload) if isinstance(payload, dict) else payload
    return {"type": block_type, "tool_use_id": "tu_1", "is_error": is_error, "content": content}


def hit(title: str | None, path: str | None, content: str = "") -> dict[str, Any]:
    return {"title": title, "path": path, "content": content}


def make_response(stop_reason: str, *blocks: dict[str, Any], usage: dict[str, int] | None = None) -> ProviderResponse:
    return ProviderResponse(
        stop_reason=stop_reason,
        content=parse_blocks(list(blocks)),
        usage=Usage.from_api(usage or {"input_tokens": 10, "output_tokens": 5}),
    )


class FakeProvider:
    def __init__(self, *responses: ProviderResponse, error: Exception | None = None) -> None:
        self.responses = list(responses) or [make_response("end_turn", text_block("Hello from the docs."))]
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def create(
        self,
        *,
        messages: list[dict[str, Any]],
        system: str,
        mcp_servers: list[dict[str, Any]] | None = None,
        tools: list[dict[str, Any]] | None = None,
    ) -> ProviderResponse:
        self.calls.append(
            {
                "messages": copy.deepcopy(messages),
                "system": system,
                "mcp_servers": mcp_servers,
                "tools": tools,
            }
        )
        if self.error is not None:
            raise self.error
        if len(self.responses) > 1:
            return self.responses.pop(0)
        return self.responses[0]


class FakeSearchBackend:
    def __init__(self, hits: list[dict[str, Any]] | None = None, error: Exception | None = None) -> None:
        self.hits = hits or []
        self.error = error
        self.queries: list[dict[str, Any]] = []

    async def search(
        self,
        query: str,
        *,
        limit: int,
        offset: int = 0,
        semantic_ratio: float | None = None,
    ) -> dict[str, Any]:
        self.queries.append({"query": query, "limit": limit, "offset": offset, "semantic_ratio": semantic_ratio})
        if self.error is not None:
            raise self.error
        return {"hits": self.hits[offset : offset + limit], "query": query}
