"""
Context assembly for retrieval-first chat: ranked hits -> one prompt fragment.

Each hit's content is cut at a fixed character count so the prompt size does not
depend on document length.
"""

from app.core.config import CONTEXT_CHAR_LIMIT
from app.services.retrieval_service import SearchHit

NO_CONTEXT_MARKER = "No relevant documentation found."
CONTEXT_SEPARATOR = "\n\n---\n\n"


def format_hit(hit: SearchHit, char_limit: int = CONTEXT_CHAR_LIMIT) -> str:
    title = hit.title or "Untitled"
    content = (hit.content or "")[:char_limit]
    return f"## {title}\nPath: {hit.path or ''}\n\n{content}"


def build_context(hits: list[SearchHit], char_limit: int = CONTEXT_CHAR_LIMIT) -> str:
    """Render hits as markdown sections separated by rules; NO_CONTEXT_MARKER when empty."""
    if not hits:
        return NO_CONTEXT_MARKER
    return CONTEXT_SEPARATOR.join(format_hit(h, char_limit) for h in hits)
