"""
Citation harvesting: turn tool results and search hits into {title, path} sources.

Best effort only. A payload that is not JSON, or JSON without a hits list,
contributes nothing; it never fails the exchange.
"""

import json
import logging
from dataclasses import asdict, dataclass
from typing import Any, Iterable

from app.agent.content import ContentBlock, ToolResultBlock
from app.core.config import SOURCES_PER_RESULT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceRecord:
    title: str
    path: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def parse_payload(text: str | None) -> Any | None:
    """JSON-decode a tool payload. None when there is nothing to decode or it is not JSON."""
    if not text:
        return None
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return None


def _hit_field(hit: Any, name: str) -> str:
    if isinstance(hit, dict):
        value = hit.get(name)
    else:
        value = getattr(hit, name, None)
    return value if isinstance(value, str) else ""


def sources_from_hits(hits: Iterable[Any], limit: int = SOURCES_PER_RESULT) -> list[SourceRecord]:
    """First `limit` hits that carry a title or path, as source records."""
    out: list[SourceRecord] = []
    for hit in list(hits)[:limit]:
        title = _hit_field(hit, "title")
        path = _hit_field(hit, "path")
        if title or path:
            out.append(SourceRecord(title=title or "Untitled", path=path))
    return out


def collect_sources(
    blocks: list[ContentBlock],
    sources: list[SourceRecord],
    per_result: int = SOURCES_PER_RESULT,
) -> list[SourceRecord]:
    """Append sources found in successful tool results to `sources` (in place) and return it."""
    for block in blocks:
        if not isinstance(block, ToolResultBlock) or block.is_error:
            continue
        parsed = parse_payload(block.payload_text())
        if not isinstance(parsed, dict):
            continue
        hits = parsed.get("hits")
        if not isinstance(hits, list):
            continue
        found = sources_from_hits(hits, limit=per_result)
        logger.info("[sources:collect] block=%s hits=%d sources=%d", block.type, len(hits), len(found))
        sources.extend(found)
    return sources


def dedupe_sources(sources: Iterable[SourceRecord]) -> list[SourceRecord]:
    """Keep the first source per path, in order of first appearance."""
    seen: set[str] = set()
    out: list[SourceRecord] = []
    for source in sources:
        if source.path in seen:
            continue
        seen.add(source.path)
        out.append(source)
    return out
