"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from dungeon_relay.config import settings
from dungeon_relay.core.errors import ChatProxyError
from dungeon_relay.services.llm_service import llm_service

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    # request lines carry the Gemini key in the query string
    logging.getLogger("httpx").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    logger.info("Chat provider: %s", settings.LLM_PROVIDER)
    yield
    # Shutdown: close the upstream HTTP client
    await llm_service.aclose()


app = FastAPI(
    title="Dungeon Relay API",
    description="Chat proxy to an LLM dungeon master plus a sensor relay for game rooms",
    version="0.1.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ChatProxyError)
async def chat_proxy_error_handler(request: Request, exc: ChatProxyError):
    logger.error("AI Error: %s", exc.message)
    return JSONResponse(status_code=500, content={"error": exc.message})


# --- Routes ---
from dungeon_relay.api.routes import chat  # noqa: E402
from dungeon_relay.api.websocket import relay_ws  # noqa: E402

app.include_router(chat.router, prefix="/api/chat", tags=["chat"])
app.include_router(relay_ws.router, tags=["websocket"])


@app.get("/health")
async def health_check():
    return {"status": "ok"}


# Static client last so it never shadows the API routes
if Path(settings.STATIC_DIR).is_dir():
    app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    configure_logging()
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
