"""Schemas for the chat endpoint."""

from pydantic import BaseModel, ConfigDict, Field


class ChatRequest(BaseModel):
    """Request body for POST /api/chat. History is stored server-side by threadId."""

    model_config = ConfigDict(populate_by_name=True)

    messages: str | None = Field(None, description="The user's message (a single message, despite the name).")
    thread_id: str | None = Field(
        None,
        alias="threadId",
        description="Thread to continue. Omit to start a new one; the response carries the id to reuse.",
    )


class Source(BaseModel):
    title: str
    path: str


class ChatResponse(BaseModel):
    """Response for POST /api/chat."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., description="Final answer from the agent.")
    thread_id: str = Field(..., alias="threadId", description="Thread id (new or echoed).")
    sources: list[Source] = Field(default_factory=list, description="Documentation pages the answer drew on.")


class ErrorResponse(BaseModel):
    error: str
