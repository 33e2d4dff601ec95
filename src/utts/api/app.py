"""
FastAPI Application Factory for the notification dashboard.

This module builds the HTTP surface a dashboard front-end talks to. It is
responsible for:
1.  **Wiring**: Attaching a :class:`Notifications` façade to ``app.state``.
2.  **Exception Handling**: Global handlers so all errors return structured JSON.
3.  **Routing**: Mounting the notifications router and the health probe.

Design Pattern
--------------
We use an **Application Factory** pattern (`create_app`). Tests pass their own
façade (pointing at a temp directory, with fake launchers); production builds
one from settings.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from utts import __version__
from utts.api.routers import notifications
from utts.notifications import Notifications

logger = logging.getLogger(__name__)


def create_app(service: Notifications | None = None) -> FastAPI:
    """
    Construct and configure the dashboard FastAPI application.

    Parameters
    ----------
    service:
        Façade to serve. Defaults to one built from the current settings.
    """
    app = FastAPI(
        title="utts notifications",
        description="Replay, activate and dismiss spoken notifications.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.notifications = service if service is not None else Notifications.from_settings()

    # The dashboard page is served from another local port.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(OSError)
    async def storage_error_handler(request: Request, exc: OSError) -> JSONResponse:
        """An unwritable config directory is the one hard failure of the store."""
        logger.error("Notification store unavailable: %s", exc)
        return JSONResponse(
            status_code=503,
            content={
                "error": "Storage Unavailable",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all handler so unhandled exceptions return structured JSON."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    app.include_router(notifications.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {"status": "ok", "version": __version__}

    return app


__all__ = ["create_app"]
