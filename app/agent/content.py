"""
Conversation content model: turns, provider content blocks, usage counters.

Provider responses arrive as loosely-shaped dicts. parse_block() turns each one
into a closed set of variants (text, tool result, other) while keeping the raw
dict so the block can be sent back upstream exactly as received.
"""

from dataclasses import dataclass, field
from typing import Any, Literal, Union

Role = Literal["user", "assistant"]

# Block types carrying tool output back from a (server-side or client-side) tool call
TOOL_RESULT_TYPES: frozenset[str] = frozenset({"mcp_tool_result", "tool_result"})


@dataclass(frozen=True)
class TextBlock:
    text: str
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    type = "text"


@dataclass(frozen=True)
class ToolResultBlock:
    """Tool output. payload is either a raw string or the text fragments of a block list."""

    is_error: bool
    payload: Union[str, list[str], None]
    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def type(self) -> str:
        return self.raw.get("type", "tool_result")

    def payload_text(self) -> str | None:
        """Payload as one string (fragments concatenated), or None when there is none."""
        if isinstance(self.payload, str):
            return self.payload
        if isinstance(self.payload, list):
            return "".join(self.payload)
        return None


@dataclass(frozen=True)
class OtherBlock:
    """Any block the agent does not inspect (tool_use, mcp_tool_use, thinking, ...)."""

    raw: dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def type(self) -> str:
        return self.raw.get("type", "")


ContentBlock = Union[TextBlock, ToolResultBlock, OtherBlock]


def _tool_payload(content: Any) -> Union[str, list[str], None]:
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return [
            b.get("text") or ""
            for b in content
            if isinstance(b, dict) and b.get("type") == "text"
        ]
    return None


def parse_block(raw: dict[str, Any]) -> ContentBlock:
    """Map one provider content block dict onto its variant."""
    block_type = raw.get("type")
    if block_type == "text":
        return TextBlock(text=raw.get("text") or "", raw=raw)
    if block_type in TOOL_RESULT_TYPES:
        return ToolResultBlock(
            is_error=bool(raw.get("is_error")),
            payload=_tool_payload(raw.get("content")),
            raw=raw,
        )
    return OtherBlock(raw=raw)


def parse_blocks(raw_blocks: list[dict[str, Any]]) -> list[ContentBlock]:
    return [parse_block(b) for b in raw_blocks if isinstance(b, dict)]


def first_text(blocks: list[ContentBlock]) -> str | None:
    """Text of the first text block, or None if the response has none."""
    for block in blocks:
        if isinstance(block, TextBlock):
            return block.text
    return None


@dataclass
class Turn:
    """One persisted message. content is plain text or the raw block list of an assistant round."""

    role: Role
    content: Union[str, list[dict[str, Any]]]

    def to_message(self) -> dict[str, Any]:
        return {"role": self.role, "content": self.content}


@dataclass(frozen=True)
class Usage:
    input_tokens: int = 0
    output_tokens: int = 0
    cache_read_tokens: int = 0
    cache_creation_tokens: int = 0

    @classmethod
    def from_api(cls, usage: Any) -> "Usage":
        """Read usage counters off a provider object or dict; missing fields count as 0."""
        if usage is None:
            return cls()

        def read(name: str) -> int:
            value = usage.get(name) if isinstance(usage, dict) else getattr(usage, name, None)
            return int(value or 0)

        return cls(
            input_tokens=read("input_tokens"),
            output_tokens=read("output_tokens"),
            cache_read_tokens=read("cache_read_input_tokens"),
            cache_creation_tokens=read("cache_creation_input_tokens"),
        )


@dataclass
class ProviderResponse:
    """One LLM round: stop reason, parsed content blocks, token usage."""

    stop_reason: str | None
    content: list[ContentBlock]
    usage: Usage = field(default_factory=Usage)

    def raw_content(self) -> list[dict[str, Any]]:
        return [b.raw for b in self.content]
