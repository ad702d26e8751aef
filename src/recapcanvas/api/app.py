"""
FastAPI application factory & configuration.

This module builds the ASGI application. It is responsible for:
1.  **Middleware Setup**: CORS so a browser canvas can call the API.
2.  **Exception Handling**: global handlers so every error returns JSON.
3.  **Routing**: rule-based summaries/answers, the hosted variant, health.
4.  **State**: one :class:`RateLimiter` per app instance for the hosted routes.

Design Pattern
--------------
An **Application Factory** (`create_app`) keeps tests isolated: every test
gets a fresh app, and with it a fresh rate-limit window.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from recapcanvas import __version__
from recapcanvas.agents.remote_agent import RateLimiter
from recapcanvas.api.routers import remote, summaries
from recapcanvas.core.settings import get_logger, load_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """ASGI lifespan: log startup and shutdown."""
    cfg = load_settings()
    logger.info("Recap Canvas API starting (env=%s, version=%s)", cfg.environment, __version__)
    yield
    logger.info("Recap Canvas API shutting down")


def create_app() -> FastAPI:
    """
    Construct and configure the Recap Canvas FastAPI application.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    app = FastAPI(
        title="Recap Canvas API",
        description="Cited summaries and follow-up answers over canvas blocks",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.rate_limiter = RateLimiter.from_settings()

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Global Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler so unhandled exceptions still return structured JSON."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={
                "error": "Bad Request",
                "detail": str(exc),
            },
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(summaries.router)
    app.include_router(remote.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {
            "status": "ok",
            "environment": load_settings().environment,
            "version": __version__,
        }

    return app


__all__ = ["create_app"]
