"""FastAPI application factory.

Usage:
    from mediaproxy import Settings, create_app

    app = create_app(Settings())

Or run directly with ``mediaproxy serve``.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from rich.console import Console
from rich.logging import RichHandler
from starlette.exceptions import HTTPException as StarletteHTTPException

from mediaproxy.api.routes import create_router
from mediaproxy.config import Settings
from mediaproxy.errors import InternalError, ProxyError, ValidationError
from mediaproxy.providers.routes import create_provider_router
from mediaproxy.services import MediaProxyServer
from mediaproxy.youtube import TranscriptFetcher

logger = logging.getLogger(__name__)

API_PREFIX = "/api"


def configure_logging(level: str, console: Console | None = None) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


async def handle_proxy_error(request: Request, exc: ProxyError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part not in ("query", "body"))
        problems.append(f"{location}: {err.get('msg')}" if location else str(err.get("msg")))
    error = ValidationError("Invalid request parameters", "; ".join(problems))
    return await handle_proxy_error(request, error)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    error = ProxyError(str(exc.detail), str(exc.detail), status_code=exc.status_code)
    return JSONResponse(status_code=exc.status_code, content=error.to_dict(), headers=exc.headers)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalError("Internal server error", str(exc) or type(exc).__name__)
    return await handle_proxy_error(request, error)


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
    transcript_fetcher: TranscriptFetcher | None = None,
) -> FastAPI:
    """Build the FastAPI app.

    Args:
        settings: Configuration (read from the environment when omitted)
        transport: httpx transport for every upstream client, for tests
        transcript_fetcher: Replacement for the YouTube transcript fetch

    Returns:
        FastAPI application whose lifespan owns a ``MediaProxyServer``
    """
    settings = settings or Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        server = MediaProxyServer(
            settings,
            transport=transport,
            transcript_fetcher=transcript_fetcher,
        )
        app.state.server = server
        logger.info(f"Media proxy ready, allowed origins: {', '.join(settings.origins)}")
        try:
            yield
        finally:
            await server.close()

    app = FastAPI(title="Media Proxy", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(ProxyError, handle_proxy_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(create_router(prefix=API_PREFIX))
    app.include_router(create_provider_router(prefix=API_PREFIX))

    return app


def reload_app() -> FastAPI:
    """App factory for reload workers, which start from a fresh process."""
    settings = Settings()
    configure_logging(settings.log_level)
    return create_app(settings)


def run(settings: Settings | None = None, *, reload: bool = False) -> None:
    """Serve the app with uvicorn until interrupted.

    Reload workers rebuild ``Settings`` from the environment, so command-line
    overrides are exported there first.
    """
    import uvicorn

    settings = settings or Settings()
    if reload:
        os.environ["LOG_LEVEL"] = settings.log_level
        uvicorn.run(
            "mediaproxy.server:reload_app",
            factory=True,
            host=settings.host,
            port=settings.port,
            log_level=settings.log_level.lower(),
            reload=True,
        )
        return
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
