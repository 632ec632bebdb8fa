"""
LangGraph agent: call model → (tool round → call model)* → finalize.

Orchestration only; tool execution happens provider-side. The graph keeps calling
the model while it reports a non-terminal stop reason, up to plan.max_calls model
calls per exchange. Running out of calls is not an error: the last response is
used as the answer.
"""

import logging
from dataclasses import dataclass
from typing import Any, Literal, TypedDict

from langgraph.graph import END, StateGraph

from app.agent.content import ProviderResponse, Turn, Usage, first_text
from app.agent.llm import LLMProvider
from app.agent.sources import SourceRecord, collect_sources, dedupe_sources
from app.agent.strategies import ExchangePlan
from app.core.config import HISTORY_WINDOW

logger = logging.getLogger(__name__)

END_TURN = "end_turn"
NO_RESPONSE = "No response generated."


class AgentState(TypedDict):
    messages: list  # wire-format {"role", "content"} dicts sent to the model
    response: ProviderResponse | None
    calls: int
    sources: list  # SourceRecord, in order of discovery (may contain duplicates until finalize)
    usage: list  # Usage per model call
    answer: str


@dataclass
class LoopOutcome:
    answer: str
    sources: list[SourceRecord]
    calls: int
    usage: list[Usage]


def build_messages(history: list[Turn], question: str, window: int = HISTORY_WINDOW) -> list[dict[str, Any]]:
    """Last `window` prior turns plus the new user turn."""
    recent = history[-window:] if window > 0 else []
    return [t.to_message() for t in recent] + [Turn(role="user", content=question).to_message()]


def build_graph(provider: LLMProvider, plan: ExchangePlan):
    """
    Build and compile the agent graph for one exchange.
    call_model → (tool_round → call_model while the model wants more) → finalize → END.
    """
    max_calls = max(plan.max_calls, 1)

    async def _call_model(state: AgentState) -> dict:
        calls = state["calls"] + 1
        logger.info("[graph:call_model] IN  call=%d/%d messages=%d", calls, max_calls, len(state["messages"]))
        response = await provider.create(
            messages=state["messages"],
            system=plan.system,
            mcp_servers=plan.mcp_servers,
            tools=plan.tools,
        )
        u = response.usage
        logger.info(
            "[graph:call_model] OUT stop_reason=%s input_tokens=%d output_tokens=%d cache_read_tokens=%d cache_creation_tokens=%d",
            response.stop_reason, u.input_tokens, u.output_tokens, u.cache_read_tokens, u.cache_creation_tokens,
        )
        return {"response": response, "calls": calls, "usage": [*state["usage"], u]}

    def _route_after_model(state: AgentState) -> Literal["tool_round", "finalize"]:
        """Finish on end_turn or when the call budget is spent; otherwise run another round."""
        response = state["response"]
        if response is None or response.stop_reason == END_TURN:
            return "finalize"
        if state["calls"] >= max_calls:
            logger.warning(
                "[graph:route_after_model] call cap reached (%d), stop_reason=%s; using last response",
                max_calls, response.stop_reason,
            )
            return "finalize"
        logger.info("[graph:route_after_model] stop_reason=%s -> tool_round", response.stop_reason)
        return "tool_round"

    def _tool_round(state: AgentState) -> dict:
        response = state["response"]
        sources = collect_sources(response.content, list(state["sources"]))
        assistant = Turn(role="assistant", content=response.raw_content()).to_message()
        return {"messages": [*state["messages"], assistant], "sources": sources}

    def _finalize(state: AgentState) -> dict:
        response = state["response"]
        sources = list(state["sources"])
        answer = None
        if response is not None:
            collect_sources(response.content, sources)
            answer = first_text(response.content)
        if answer is None:
            answer = NO_RESPONSE
        unique = dedupe_sources(sources)
        logger.info("[graph:finalize] answer_len=%d sources=%d unique=%d", len(answer), len(sources), len(unique))
        return {"answer": answer, "sources": unique}

    graph = StateGraph(AgentState)

    graph.add_node("call_model", _call_model)
    graph.add_node("tool_round", _tool_round)
    graph.add_node("finalize", _finalize)

    graph.set_entry_point("call_model")
    graph.add_conditional_edges("call_model", _route_after_model)
    graph.add_edge("tool_round", "call_model")
    graph.add_edge("finalize", END)

    return graph.compile()


async def run_agent_loop(
    provider: LLMProvider,
    plan: ExchangePlan,
    history: list[Turn],
    question: str,
) -> LoopOutcome:
    """
    Run one exchange through the graph. Provider errors propagate to the caller.
    history: prior turns of the thread, oldest first.
    """
    logger.info("[run_agent_loop] START question=%r history_len=%d max_calls=%d", question, len(history), plan.max_calls)
    initial: AgentState = {
        "messages": build_messages(history, question),
        "response": None,
        "calls": 0,
        "sources": list(plan.sources),
        "usage": [],
        "answer": "",
    }
    graph = build_graph(provider, plan)
    # Two steps per round plus finalize; keep LangGraph's recursion guard above that.
    final = await graph.ainvoke(initial, config={"recursion_limit": 2 * max(plan.max_calls, 1) + 5})
    outcome = LoopOutcome(
        answer=final["answer"],
        sources=final["sources"],
        calls=final["calls"],
        usage=final["usage"],
    )
    logger.info("[run_agent_loop] END calls=%d sources=%d answer_len=%d", outcome.calls, len(outcome.sources), len(outcome.answer))
    return outcome
