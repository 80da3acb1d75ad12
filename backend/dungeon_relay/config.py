"""Application configuration loaded from environment variables."""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # LLM provider (fixed per deployment, no per-request override)
    LLM_PROVIDER: Literal["gemini", "openai"] = "gemini"

    # Gemini
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemma-3-4b-it"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MAX_OUTPUT_TOKENS: int = 1000

    # OpenAI
    OPENAI_API_KEY: str = ""
    OPENAI_MODEL: str = "gpt-4o-mini"
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MAX_COMPLETION_TOKENS: int = 300

    UPSTREAM_TIMEOUT: float = 60.0  # seconds, per upstream call

    # Relay
    GAME_ROOM: str = "game"

    # App
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    STATIC_DIR: str = "public"
    LOG_LEVEL: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
