"""
API handlers: call services, map results/errors to HTTP.

Responsibility: Bridge HTTP types and services. Marshalling and exception-to-HTTP mapping.
Lives in the API layer so services stay free of FastAPI/HTTP types.
"""

import logging

from fastapi import HTTPException

from app.core.errors import InvalidRequestError, ServiceUnavailableError
from app.schemas.chat import ChatRequest, ChatResponse, Source
from app.services.agent_service import run_chat

logger = logging.getLogger(__name__)

CHAT_FAILED = "Failed to process chat request"


async def handle_chat(body: ChatRequest | None) -> ChatResponse:
    """
    Run one chat exchange; map service errors to HTTP 400/503/500.
    Upstream failure details are logged, never returned to the client.
    """
    message = body.messages if body else None
    thread_id = body.thread_id if body else None
    try:
        result = await run_chat(message, thread_id)
    except InvalidRequestError as e:
        raise HTTPException(status_code=400, detail=e.message) from e
    except ServiceUnavailableError as e:
        logger.warning("Chat unavailable: %s", e.message)
        raise HTTPException(status_code=503, detail=e.message) from e
    except Exception as e:
        logger.exception("Chat error")
        raise HTTPException(status_code=500, detail=CHAT_FAILED) from e

    return ChatResponse(
        message=result.message,
        thread_id=result.thread_id,
        sources=[Source(title=s.title, path=s.path) for s in result.sources],
    )
