"""Pydantic schemas for the chat relay."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Inbound chat message from the website widget."""

    message: str | None = Field(
        default=None,
        description="Free-text message for the assistant. Required and non-blank.",
        examples=["What can ARKY automate for a sales team?"],
    )


class ChatResponse(BaseModel):
    """Assistant reply relayed from the generative-AI service."""

    reply: str = Field(..., description="Text produced by the model (or a fallback).")
