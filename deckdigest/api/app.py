"""FastAPI application factory.

Lifespan
--------
On startup the app configures logging from ``settings.log_level``.

Routers
-------
    /summaries : slide summary stream (SSE) and server-side extraction
    /health    : liveness probe

Errors raised before a stream opens are mapped to ``{"error": "..."}``
bodies: input and archive problems are 400, configuration problems 500.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deckdigest.config import settings
from deckdigest.errors import ArchiveFormatError, ConfigurationError, InputValidationError
from deckdigest.logging_setup import configure_logging

from deckdigest.api.routers import summaries as summaries_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Configure logging on startup."""
    configure_logging(settings.log_level)
    logger.info("Deck Digest API ready (provider=%s)", settings.llm_provider)
    yield


async def _client_error(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse({"error": str(exc)}, status_code=400)


async def _server_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Configuration error: %s", exc)
    return JSONResponse({"error": str(exc)}, status_code=500)


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Deck Digest API",
        description=(
            "Extracts the text of each slide in a .pptx deck and streams one "
            "short summary per slide as Server-Sent Events."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InputValidationError, _client_error)
    app.add_exception_handler(ArchiveFormatError, _client_error)
    app.add_exception_handler(ConfigurationError, _server_error)

    app.include_router(summaries_router.router, prefix="/summaries", tags=["summaries"])

    @app.get("/health", tags=["health"])
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn deckdigest.api.app:app --reload
app = create_app()
