"""LLM service - proxies a chat turn to Gemini or OpenAI over plain HTTP.

Exactly two provider shapes are supported and the active one is picked by
``settings.LLM_PROVIDER``:

- Gemini ``generateContent``: history and the new message as ``contents``.
- OpenAI ``chat/completions``: system instruction, history and the new
  message as ``messages``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx
import yaml

from dungeon_relay.config import settings
from dungeon_relay.core.errors import ConfigurationError, UpstreamError
from dungeon_relay.schemas.chat import ChatTurn

logger = logging.getLogger(__name__)

CHARACTER_DIR = Path(__file__).parent.parent / "data" / "characters"

DEFAULT_SYSTEM_PROMPT = "あなたはダンジョンマスターです。"
EMPTY_REPLY_MESSAGE = "AI returned an empty response"


def load_character(character: str = "dungeon_master") -> dict:
    """Load character YAML and return the full config dict."""
    path = CHARACTER_DIR / f"{character}.yaml"
    if not path.exists():
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_character_prompt(character: str = "dungeon_master") -> str:
    """Load only the system_prompt string from the character YAML."""
    data = load_character(character)
    return data.get("system_prompt") or DEFAULT_SYSTEM_PROMPT


def _error_message(data: Any, default: str) -> str:
    """Pull ``error.message`` out of a provider error body."""
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return default


@dataclass
class UpstreamRequest:
    url: str
    json: dict
    headers: dict = field(default_factory=dict)
    params: dict = field(default_factory=dict)


class GeminiProvider:
    name = "gemini"
    label = "Gemini"
    key_env = "GEMINI_API_KEY"
    default_error = "Gemini Error"

    def api_key(self) -> str:
        return settings.GEMINI_API_KEY

    def build_request(
        self, api_key: str, message: str, history: list[ChatTurn]
    ) -> UpstreamRequest:
        contents = [
            {"role": turn.role, "parts": [{"text": turn.text}]} for turn in history
        ]
        contents.append({"role": "user", "parts": [{"text": message}]})

        return UpstreamRequest(
            url=f"{settings.GEMINI_BASE_URL}/models/{settings.GEMINI_MODEL}:generateContent",
            params={"key": api_key},
            json={
                "contents": contents,
                "generationConfig": {"maxOutputTokens": settings.GEMINI_MAX_OUTPUT_TOKENS},
            },
        )

    def parse_reply(self, data: Any) -> str:
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError):
            raise UpstreamError(EMPTY_REPLY_MESSAGE)
        if not isinstance(text, str):
            raise UpstreamError(EMPTY_REPLY_MESSAGE)
        return text


class OpenAIProvider:
    name = "openai"
    label = "OpenAI"
    key_env = "OPENAI_API_KEY"
    default_error = "OpenAI Error"

    def __init__(self, system_prompt: str = DEFAULT_SYSTEM_PROMPT):
        self.system_prompt = system_prompt

    def api_key(self) -> str:
        return settings.OPENAI_API_KEY

    def build_request(
        self, api_key: str, message: str, history: list[ChatTurn]
    ) -> UpstreamRequest:
        messages = [{"role": "system", "content": self.system_prompt}]
        messages += [
            {
                "role": "assistant" if turn.role == "model" else "user",
                "content": turn.text,
            }
            for turn in history
        ]
        messages.append({"role": "user", "content": message})

        return UpstreamRequest(
            url=f"{settings.OPENAI_BASE_URL}/chat/completions",
            headers={"Authorization": f"Bearer {api_key}"},
            json={
                "model": settings.OPENAI_MODEL,
                "messages": messages,
                "max_completion_tokens": settings.OPENAI_MAX_COMPLETION_TOKENS,
            },
        )

    def parse_reply(self, data: Any) -> str:
        try:
            text = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise UpstreamError(EMPTY_REPLY_MESSAGE)
        if not isinstance(text, str):
            raise UpstreamError(EMPTY_REPLY_MESSAGE)
        return text


class LLMService:
    def __init__(self, http_client: httpx.AsyncClient | None = None):
        self._client = http_client
        self.providers = {
            "gemini": GeminiProvider(),
            "openai": OpenAIProvider(load_character_prompt()),
        }

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the shared HTTP client (lazy init)."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=settings.UPSTREAM_TIMEOUT)
        return self._client

    async def aclose(self) -> None:
        """Close the HTTP client if open."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    @property
    def provider(self) -> GeminiProvider | OpenAIProvider:
        return self.providers[settings.LLM_PROVIDER]

    async def generate_reply(self, message: str, history: list[ChatTurn]) -> str:
        """Send one chat turn upstream and return the reply text.

        Raises ConfigurationError before any network traffic when the
        selected provider has no API key, and UpstreamError for every
        upstream failure.
        """
        provider = self.provider
        api_key = provider.api_key()
        if not api_key:
            raise ConfigurationError(
                f"{provider.label} API key missing ({provider.key_env} is not set)"
            )

        request = provider.build_request(api_key, message, history)
        try:
            response = await self._get_client().post(
                request.url, params=request.params, headers=request.headers, json=request.json
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise UpstreamError(f"{provider.label} request failed: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = None

        if not response.is_success:
            logger.error(
                "%s error details (HTTP %s): %s",
                provider.label,
                response.status_code,
                data if data is not None else response.text,
            )
            raise UpstreamError(
                _error_message(data, provider.default_error),
                status_code=response.status_code,
            )

        return provider.parse_reply(data)


llm_service = LLMService()
