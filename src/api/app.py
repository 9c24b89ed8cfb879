"""FastAPI application exposing batch record translation."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from src.api import routes
from src.features.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
)
from src.features.translation.engine import BatchTranslationEngine
from src.features.translation.factory import create_engine
from src.settings import AppSettings, get_settings


def create_app(
    settings: AppSettings | None = None,
    engine: BatchTranslationEngine | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Environment configuration (loaded when omitted).
        engine: Pre-built engine, e.g. one backed by a test translator.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(level=settings.log_level, json_format=settings.log_json)
        yield

    app = FastAPI(
        title="Record Translator",
        description="Translate selected fields of JSON records",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.engine = engine or create_engine(settings.translator_config())

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        bind_request_context(uuid.uuid4().hex[:12])
        try:
            return await call_next(request)
        finally:
            clear_request_context()

    @app.get("/")
    async def root() -> dict[str, object]:
        return {
            "message": "Record Translator API",
            "version": "0.1.0",
            "docs": "/docs",
            "endpoints": {"translate": "/api/translate"},
        }

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "Record Translator"}

    app.include_router(routes.router, prefix="/api", tags=["translate"])

    return app
