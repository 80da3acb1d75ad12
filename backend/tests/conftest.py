"""Shared test fixtures - upstream AI calls are stubbed with httpx.MockTransport."""

import json

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

from dungeon_relay.config import settings
from dungeon_relay.services.chat_service import ChatService
from dungeon_relay.services.llm_service import LLMService
from dungeon_relay.services.room_service import room_manager

GEMINI_OK = {"candidates": [{"content": {"parts": [{"text": "The door creaks open."}]}}]}
OPENAI_OK = {"choices": [{"message": {"role": "assistant", "content": "A goblin appears."}}]}


class UpstreamStub:
    """Records every upstream request and answers with a canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body = GEMINI_OK
        self.raw: bytes | None = None
        self.exc: Exception | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        if self.raw is not None:
            return httpx.Response(self.status_code, content=self.raw)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """Gemini selected with both credentials present; tests unset as needed."""
    monkeypatch.setattr(settings, "LLM_PROVIDER", "gemini")
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "test-gemini-key")
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "test-openai-key")
    monkeypatch.setattr(settings, "GEMINI_MODEL", "gemma-3-4b-it")
    monkeypatch.setattr(settings, "OPENAI_MODEL", "gpt-4o-mini")
    monkeypatch.setattr(settings, "GAME_ROOM", "game")
    return settings


@pytest.fixture(autouse=True)
def reset_rooms():
    room_manager.clear()
    yield
    room_manager.clear()


@pytest.fixture
def upstream():
    return UpstreamStub()


@pytest.fixture
async def llm(upstream):
    """LLM service whose HTTP client talks to the stub instead of the network."""
    service = LLMService(http_client=httpx.AsyncClient(transport=httpx.MockTransport(upstream)))
    yield service
    await service.aclose()


@pytest.fixture
async def client(llm):
    """Async HTTP test client with the chat service wired to the stub."""
    from dungeon_relay.api.routes.chat import get_chat_service
    from dungeon_relay.main import app

    app.dependency_overrides[get_chat_service] = lambda: ChatService(llm)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
