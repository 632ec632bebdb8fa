"""
Tests for the agent loop graph: termination, call cap, history window, source harvesting.

The provider is a scripted fake; asyncio.run drives the async graph.
"""

import asyncio

import pytest
from fakes import FakeProvider, hit, make_response, text_block, tool_result_block

from app.agent.content import Turn
from app.agent.graph import NO_RESPONSE, build_messages, run_agent_loop
from app.agent.sources import SourceRecord
from app.agent.strategies import ExchangePlan

TOOL_PLAN = ExchangePlan(
    system="system prompt",
    max_calls=5,
    mcp_servers=[{"type": "url", "url": "http://mcp.test/", "name": "near-docs"}],
    tools=[{"type": "mcp_toolset", "mcp_server_name": "near-docs"}],
)


def _run(provider: FakeProvider, plan: ExchangePlan = TOOL_PLAN, history: list[Turn] | None = None, question: str = "What is NEAR?"):
    return asyncio.run(run_agent_loop(provider, plan, history or [], question))


def test_end_turn_on_first_call_is_single_round() -> None:
    provider = FakeProvider(make_response("end_turn", text_block("NEAR is a layer-1 blockchain.")))
    outcome = _run(provider)
    assert outcome.answer == "NEAR is a layer-1 blockchain."
    assert outcome.calls == 1
    assert len(provider.calls) == 1
    call = provider.calls[0]
    assert call["system"] == "system prompt"
    assert call["mcp_servers"] == TOOL_PLAN.mcp_servers
    assert call["tools"] == TOOL_PLAN.tools
    assert call["messages"] == [{"role": "user", "content": "What is NEAR?"}]


def test_provider_that_never_finishes_gets_exactly_five_calls() -> None:
    looping = make_response(
        "pause_turn",
        {"type": "mcp_tool_use", "id": "tu_1", "name": "search", "server_name": "near-docs", "input": {"query": "near"}},
        text_block("Still searching..."),
    )
    provider = FakeProvider(looping)
    outcome = _run(provider)
    assert len(provider.calls) == 5
    assert outcome.calls == 5
    assert outcome.answer == "Still searching..."


def test_call_cap_without_text_uses_fallback() -> None:
    provider = FakeProvider(make_response("pause_turn", {"type": "mcp_tool_use", "id": "tu_1", "name": "search", "input": {}}))
    outcome = _run(provider)
    assert outcome.answer == NO_RESPONSE


def test_tool_round_feeds_previous_content_back_unmodified() -> None:
    first = make_response(
        "pause_turn",
        {"type": "mcp_tool_use", "id": "tu_1", "name": "search", "server_name": "near-docs", "input": {"query": "deploy"}},
        tool_result_block({"hits": [hit("Deploy", "/build/deploy")]}),
    )
    second = make_response("end_turn", text_block("Use near deploy."))
    provider = FakeProvider(first, second)

    outcome = _run(provider)

    assert outcome.answer == "Use near deploy."
    assert len(provider.calls) == 2
    followup = provider.calls[1]["messages"]
    assert followup[0] == {"role": "user", "content": "What is NEAR?"}
    assert followup[1] == {"role": "assistant", "content": first.raw_content()}


def test_sources_collected_across_rounds_and_deduplicated() -> None:
    first = make_response(
        "pause_turn",
        tool_result_block({"hits": [hit("A", "/a"), hit("B", "/b"), hit("C", "/c"), hit("D", "/d")]}),
    )
    final = make_response(
        "end_turn",
        tool_result_block({"hits": [hit("A again", "/a"), hit("E", "/e")]}),
        text_block("Answer."),
    )
    outcome = _run(FakeProvider(first, final))
    assert outcome.sources == [
        SourceRecord("A", "/a"),
        SourceRecord("B", "/b"),
        SourceRecord("C", "/c"),
        SourceRecord("E", "/e"),
    ]


def test_first_text_block_is_the_answer() -> None:
    response = make_response("end_turn", {"type": "thinking", "thinking": "..."}, text_block("first"), text_block("second"))
    assert _run(FakeProvider(response)).answer == "first"


def test_single_call_plan_does_not_loop() -> None:
    plan = ExchangePlan(system="ctx", max_calls=1, sources=[SourceRecord("Pre", "/pre"), SourceRecord("Dup", "/pre")])
    provider = FakeProvider(make_response("max_tokens", text_block("Truncated answer")))
    outcome = _run(provider, plan=plan)
    assert len(provider.calls) == 1
    assert outcome.answer == "Truncated answer"
    assert outcome.sources == [SourceRecord("Pre", "/pre")]
    assert provider.calls[0]["mcp_servers"] is None
    assert provider.calls[0]["tools"] is None


def test_usage_recorded_per_call_with_zero_defaults() -> None:
    first = make_response("pause_turn", text_block("..."), usage={"input_tokens": 100, "output_tokens": 7, "cache_read_input_tokens": 3})
    second = make_response("end_turn", text_block("done"), usage={"output_tokens": 2})
    outcome = _run(FakeProvider(first, second))
    assert [(u.input_tokens, u.output_tokens, u.cache_read_tokens, u.cache_creation_tokens) for u in outcome.usage] == [
        (100, 7, 3, 0),
        (0, 2, 0, 0),
    ]


def test_provider_error_propagates() -> None:
    provider = FakeProvider(error=RuntimeError("upstream down"))
    with pytest.raises(RuntimeError, match="upstream down"):
        _run(provider)


def test_build_messages_keeps_last_four_turns() -> None:
    history = [Turn(role="user" if i % 2 == 0 else "assistant", content=f"m{i}") for i in range(6)]
    messages = build_messages(history, "next")
    assert [m["content"] for m in messages] == ["m2", "m3", "m4", "m5", "next"]
    assert messages[-1]["role"] == "user"
