"""
Agent: run one chat exchange end to end.

Responsibility: Validate the message, load thread history, let the retrieval
strategy prepare the exchange, run the agent loop, and commit the new turns.
Called by the API; no HTTP here. History is only written after the loop
succeeds, so a failed exchange leaves the thread as it was.
"""

import logging
from dataclasses import dataclass

from app.agent.content import Turn
from app.agent.graph import run_agent_loop
from app.agent.llm import LLMProvider, get_provider
from app.agent.sources import SourceRecord
from app.agent.strategies import RetrievalStrategy, get_strategy
from app.core.errors import InvalidRequestError
from app.core.session_store import SessionStore, new_session_id, session_store

logger = logging.getLogger(__name__)


@dataclass
class ChatResult:
    message: str
    thread_id: str
    sources: list[SourceRecord]


async def run_chat(
    message: str | None,
    thread_id: str | None = None,
    *,
    store: SessionStore | None = None,
    provider: LLMProvider | None = None,
    strategy: RetrievalStrategy | None = None,
) -> ChatResult:
    if not message or not message.strip():
        raise InvalidRequestError("Message is required")
    store = store if store is not None else session_store
    provider = provider if provider is not None else get_provider()
    strategy = strategy if strategy is not None else get_strategy()

    prior = store.get(thread_id) or []
    logger.info(
        "[agent_service:run_chat] IN  thread_id=%s prior_turns=%d mode=%s",
        thread_id, len(prior), strategy.name,
    )

    plan = await strategy.prepare(message)
    outcome = await run_agent_loop(provider, plan, prior, message)

    resolved_id = thread_id or new_session_id()
    store.put(
        resolved_id,
        [*prior, Turn(role="user", content=message), Turn(role="assistant", content=outcome.answer)],
    )
    logger.info(
        "[agent_service:run_chat] OUT thread_id=%s calls=%d sources=%d",
        resolved_id, outcome.calls, len(outcome.sources),
    )
    return ChatResult(message=outcome.answer, thread_id=resolved_id, sources=outcome.sources)
