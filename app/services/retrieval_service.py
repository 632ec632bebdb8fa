"""
Retrieval: documentation search against the Meilisearch index.

Responsibility: Query Meilisearch through its Python SDK (keyword search for the tool
endpoint, hybrid search for retrieval-first chat) and return ranked hits.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Protocol

import meilisearch
from meilisearch.errors import MeilisearchApiError, MeilisearchError

from app.core.config import (
    MEILI_API_KEY,
    MEILI_EMBEDDER,
    MEILI_HOST,
    MEILI_INDEX_NAME,
    SEARCH_API_TIMEOUT,
)
from app.core.errors import SearchBackendError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SearchHit:
    title: str | None = None
    path: str | None = None
    content: str | None = None
    score: Any = None

    @classmethod
    def from_api(cls, hit: dict[str, Any]) -> "SearchHit":
        def text(name: str) -> str | None:
            value = hit.get(name)
            return value if isinstance(value, str) else None

        return cls(
            title=text("title"),
            path=text("path"),
            content=text("content"),
            score=hit.get("_rankingScore", hit.get("score")),
        )


class SearchBackend(Protocol):
    async def search(
        self,
        query: str,
        *,
        limit: int,
        offset: int = 0,
        semantic_ratio: float | None = None,
    ) -> dict[str, Any]:
        """Raw search response; the ranked hits live under "hits"."""
        ...


class MeiliSearchBackend:
    """Meilisearch index search through the official SDK (blocking calls run in a worker thread)."""

    def __init__(
        self,
        host: str = MEILI_HOST,
        api_key: str = MEILI_API_KEY,
        index_name: str = MEILI_INDEX_NAME,
        embedder: str = MEILI_EMBEDDER,
        timeout: float = SEARCH_API_TIMEOUT,
        client: meilisearch.Client | None = None,
    ) -> None:
        self.client = client or meilisearch.Client(host, api_key or None, timeout=timeout)
        self.index_name = index_name
        self.embedder = embedder

    async def search(
        self,
        query: str,
        *,
        limit: int,
        offset: int = 0,
        semantic_ratio: float | None = None,
    ) -> dict[str, Any]:
        logger.info(
            "[retrieval:search] IN  query=%r limit=%d offset=%d semantic_ratio=%s",
            query, limit, offset, semantic_ratio,
        )
        params: dict[str, Any] = {"limit": limit, "offset": offset}
        if semantic_ratio is not None:
            params["hybrid"] = {"semanticRatio": semantic_ratio, "embedder": self.embedder}

        index = self.client.index(self.index_name)
        try:
            data = await asyncio.to_thread(index.search, query, params)
        except MeilisearchApiError as e:
            logger.warning("[retrieval:search] Meilisearch error %s: %s", e.status_code, e)
            raise SearchBackendError(e.status_code, str(e)) from e
        except (MeilisearchError, ValueError) as e:
            # Connection refused, timeout, or a body that is not JSON
            logger.warning("[retrieval:search] Meilisearch unreachable: %s", e)
            raise SearchBackendError(None, str(e)) from e
        hits = data.get("hits") if isinstance(data, dict) else None
        logger.info(
            "[retrieval:search] OUT hits=%d first_paths=%s",
            len(hits or []), [h.get("path") for h in (hits or [])[:5] if isinstance(h, dict)],
        )
        return data


async def search_hits(
    backend: SearchBackend,
    query: str,
    *,
    limit: int,
    semantic_ratio: float | None = None,
) -> list[SearchHit]:
    """Run a search and return at most `limit` parsed hits."""
    data = await backend.search(query, limit=limit, semantic_ratio=semantic_ratio)
    raw_hits = data.get("hits") if isinstance(data, dict) else None
    if not isinstance(raw_hits, list):
        return []
    return [SearchHit.from_api(h) for h in raw_hits[:limit] if isinstance(h, dict)]


_backend: SearchBackend | None = None


def get_search_backend() -> SearchBackend:
    """Process-wide search backend (created on first use)."""
    global _backend
    if _backend is None:
        _backend = MeiliSearchBackend()
    return _backend
