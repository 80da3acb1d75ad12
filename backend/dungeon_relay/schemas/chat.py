"""Chat-related Pydantic schemas."""

from typing import Any, Literal

from pydantic import BaseModel


class ChatTurn(BaseModel):
    """One turn of conversation history."""
    role: Literal["user", "model"]
    text: str

    model_config = {"frozen": True}


class ChatRequest(BaseModel):
    """Incoming chat request from the browser client.

    ``history`` is kept raw: entries may use the Gemini wire shape
    ``{"role", "parts": [{"text"}]}`` or the flat ``{"role", "text"}``
    shape, and malformed entries are dropped later rather than rejected.
    """
    message: str
    history: list[Any] | None = None


class ChatReply(BaseModel):
    reply: str


class ChatError(BaseModel):
    error: str
