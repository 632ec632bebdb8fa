"""
API route aggregator: register endpoints; no logic, only delegate to handlers.
"""

import logging

from fastapi import APIRouter, Body
from fastapi.responses import PlainTextResponse

from app.api.handlers import handle_chat
from app.schemas.chat import ChatRequest, ChatResponse, ErrorResponse

logger = logging.getLogger(__name__)
router = APIRouter()


# --- System ---

@router.get("/", tags=["system"], response_class=PlainTextResponse)
def root() -> str:
    return "Add this MCP server to your agent so they can search in our docs!"


@router.get("/health", tags=["system"])
def health():
    return {"ok": True}


# --- Chat ---

@router.post(
    "/api/chat",
    response_model=ChatResponse,
    tags=["chat"],
    summary="Ask the documentation agent",
    description="Send one message, optionally continuing a thread; receive the answer, the thread id, and its sources. 400 on empty message, 503 when the LLM is not configured, 500 on agent failure.",
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def post_chat(body: ChatRequest | None = Body(None)) -> ChatResponse:
    logger.info(
        "[api:post_chat] IN  message_len=%d thread_id=%s",
        len((body.messages if body else None) or ""), body.thread_id if body else None,
    )
    return await handle_chat(body)
