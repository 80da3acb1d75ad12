"""Chat service - normalizes client history and asks the LLM for a reply."""

import logging
from typing import Any

from dungeon_relay.schemas.chat import ChatRequest, ChatTurn
from dungeon_relay.services.llm_service import LLMService, llm_service

logger = logging.getLogger(__name__)


def _turn_text(entry: dict) -> Any:
    """Return the text of a history entry in either wire shape, or None."""
    if "text" in entry:
        return entry["text"]
    parts = entry.get("parts")
    if isinstance(parts, list) and parts and isinstance(parts[0], dict):
        return parts[0].get("text")
    return None


def parse_history(raw: list[Any] | None) -> list[ChatTurn]:
    """Convert raw client history into turns, dropping empty or malformed entries."""
    turns = []
    for entry in raw or []:
        if not isinstance(entry, dict):
            continue
        text = _turn_text(entry)
        if not isinstance(text, str) or not text.strip():
            continue
        role = "model" if entry.get("role") == "model" else "user"
        turns.append(ChatTurn(role=role, text=text))

    dropped = len(raw or []) - len(turns)
    if dropped:
        logger.debug("Dropped %d empty or malformed history entries", dropped)
    return turns


class ChatService:
    def __init__(self, llm: LLMService | None = None):
        self.llm = llm or llm_service

    async def reply(self, request: ChatRequest) -> str:
        """Forward one chat request upstream and return the reply text."""
        history = parse_history(request.history)
        reply = await self.llm.generate_reply(request.message, history)
        logger.info("AI reply: %s", reply)
        return reply


chat_service = ChatService()
