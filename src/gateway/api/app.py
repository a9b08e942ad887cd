"""FastAPI application factory for the Synthos gateway."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gateway.api.errors import register_exception_handlers
from gateway.api.middleware import request_context_middleware
from gateway.api.routes import accounts, actions, history, protocols, records, rpc
from gateway.config import AppSettings


def create_app(settings: AppSettings, lifespan: Any = None) -> FastAPI:
    """Create and configure the gateway application.

    Args:
        settings: Application settings, stored on app.state for route access.
        lifespan: Optional async context manager for startup/shutdown.
                  Used by main.py to open the record store and upstream client.

    Returns:
        Configured FastAPI application with middleware, exception handlers
        and all /api routes.
    """
    app = FastAPI(
        title="Synthos Gateway",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )
    app.middleware("http")(request_context_middleware)

    register_exception_handlers(app)

    app.include_router(accounts.router, prefix="/api")
    app.include_router(actions.router, prefix="/api")
    app.include_router(protocols.router, prefix="/api")
    app.include_router(rpc.router, prefix="/api")
    app.include_router(history.router, prefix="/api")
    app.include_router(records.router, prefix="/api")

    return app
