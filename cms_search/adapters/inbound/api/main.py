"""FastAPI application for CMS semantic search."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .... import __version__
from ....common.exception_handler import (
    format_exception_json,
    get_http_status_code,
    log_exception,
)
from ....composition.container import Container, build_container
from ....config import Settings, settings
from ....config.logging import setup_logging
from ....core.domain.exceptions import CMSSearchError
from .routers import debug, health, images, reindex, search, webhook

logger = logging.getLogger(__name__)


def create_app(container: Container | None = None, config: Settings | None = None) -> FastAPI:
    """Build the API application.

    Args:
        container: Pre-built container (tests pass one made of fakes). When
            omitted, providers are built from settings at startup.
        config: Settings used for CORS and debug output; defaults to the
            container's settings, then the global settings.
    """
    config = config or (container.settings if container else settings)
    debug_mode = config.debug

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        owns_container = app.state.container is None
        if owns_container:
            setup_logging(level=config.log_level, json_format=config.log_json)
            app.state.container = build_container(config)
        logger.info("CMS search API starting up...")
        logger.info("API docs available at /docs")
        logger.info("Debug mode: %s", "ENABLED" if debug_mode else "DISABLED")
        try:
            yield
        finally:
            logger.info("CMS search API shutting down...")
            if owns_container:
                await app.state.container.aclose()
                app.state.container = None

    app = FastAPI(
        title="CMS Semantic Search API",
        description=(
            "Natural-language and visual-style search over headless CMS content, "
            "kept in sync with the CMS through webhooks."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.container = container

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(search.router)
    app.include_router(images.router)
    app.include_router(webhook.router)
    app.include_router(reindex.router)
    app.include_router(debug.router)

    # =========================================================================
    # Global Exception Handlers
    # =========================================================================

    @app.exception_handler(CMSSearchError)
    async def cms_search_error_handler(request: Request, exc: CMSSearchError) -> JSONResponse:
        """Render domain errors with their mapped HTTP status."""
        status_code = get_http_status_code(exc)
        log_exception(
            exc,
            log=logger,
            level=logging.WARNING if status_code < 500 else logging.ERROR,
            extra_context={"path": str(request.url.path), "method": request.method},
        )
        headers = {"WWW-Authenticate": "Basic"} if status_code == 401 else None
        return JSONResponse(
            status_code=status_code,
            content=exc.to_dict(include_trace=debug_mode),
            headers=headers,
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Render malformed request bodies with the common error envelope."""
        errors = exc.errors()
        details = "; ".join(
            f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
            for error in errors
        )
        return JSONResponse(
            status_code=400,
            content={
                "error": "Invalid request",
                "details": details or "Request body could not be parsed",
                "code": "CMS_VAL_001",
                "type": "RequestValidationError",
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Render unexpected exceptions as a 500 with the common envelope."""
        log_exception(exc, log=logger, extra_context={"path": str(request.url.path), "method": request.method})
        return JSONResponse(
            status_code=get_http_status_code(exc),
            content=format_exception_json(exc, include_trace=debug_mode),
        )

    return app


# Export for uvicorn
app = create_app()

__all__ = ["app", "create_app"]
