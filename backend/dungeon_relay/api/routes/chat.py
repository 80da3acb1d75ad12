"""Chat REST endpoint - proxies a prompt plus history to the configured LLM."""

from fastapi import APIRouter, Depends

from dungeon_relay.schemas.chat import ChatError, ChatReply, ChatRequest
from dungeon_relay.services.chat_service import ChatService, chat_service

router = APIRouter()


def get_chat_service() -> ChatService:
    """FastAPI dependency that returns the chat service."""
    return chat_service


@router.post("", response_model=ChatReply, responses={500: {"model": ChatError}})
async def chat(data: ChatRequest, service: ChatService = Depends(get_chat_service)):
    """Get the dungeon master's reply to a message.

    Configuration and upstream failures are turned into
    ``500 {"error": ...}`` by the handler registered in ``main``.
    """
    reply = await service.reply(data)
    return ChatReply(reply=reply)
