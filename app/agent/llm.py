"""
Agent LLM: Anthropic Messages API.

Plain completions go through client.messages; when MCP servers are declared the
call goes through the beta endpoint with the MCP client beta enabled.
"""

import logging
from typing import Any, Protocol

from anthropic import AsyncAnthropic

from app.agent.content import ProviderResponse, Usage, parse_blocks
from app.core.config import (
    ANTHROPIC_API_KEY,
    ANTHROPIC_MODEL,
    LLM_API_TIMEOUT,
    LLM_MAX_TOKENS,
    LLM_TEMPERATURE,
    MCP_BETA,
)
from app.core.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


class LLMProvider(Protocol):
    async def create(
        self,
        *,
        messages: list[dict[str, Any]],
        system: str,
        mcp_servers: list[dict[str, Any]] | None = None,
        tools: list[dict[str, Any]] | None = None,
    ) -> ProviderResponse:
        ...


def _dump_block(block: Any) -> dict[str, Any]:
    if isinstance(block, dict):
        return block
    return block.model_dump(mode="json", exclude_none=True)


class AnthropicProvider:
    def __init__(
        self,
        api_key: str,
        model: str = ANTHROPIC_MODEL,
        temperature: float = LLM_TEMPERATURE,
        max_tokens: int = LLM_MAX_TOKENS,
        timeout: float = LLM_API_TIMEOUT,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self._client = AsyncAnthropic(api_key=api_key, timeout=timeout)

    async def create(
        self,
        *,
        messages: list[dict[str, Any]],
        system: str,
        mcp_servers: list[dict[str, Any]] | None = None,
        tools: list[dict[str, Any]] | None = None,
    ) -> ProviderResponse:
        logger.info(
            "[llm:anthropic] IN  messages=%d system_len=%d mcp_servers=%d",
            len(messages), len(system), len(mcp_servers or []),
        )
        kwargs: dict[str, Any] = {
            "model": self.model,
            "system": system,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        if tools:
            kwargs["tools"] = tools
        if mcp_servers:
            response = await self._client.beta.messages.create(
                **kwargs, mcp_servers=mcp_servers, betas=[MCP_BETA]
            )
        else:
            response = await self._client.messages.create(**kwargs)

        out = ProviderResponse(
            stop_reason=response.stop_reason,
            content=parse_blocks([_dump_block(b) for b in response.content]),
            usage=Usage.from_api(response.usage),
        )
        logger.info(
            "[llm:anthropic] OUT stop_reason=%s blocks=%s",
            out.stop_reason, [b.type for b in out.content],
        )
        return out


_provider: AnthropicProvider | None = None


def get_provider() -> AnthropicProvider:
    """Process-wide Anthropic provider. Raises ServiceUnavailableError when no API key is set."""
    global _provider
    if not ANTHROPIC_API_KEY:
        raise ServiceUnavailableError("Anthropic API key is not configured")
    if _provider is None:
        _provider = AnthropicProvider(api_key=ANTHROPIC_API_KEY)
    return _provider
