"""Entry point for the Synthos gateway.

Wires components together and serves the FastAPI app with uvicorn's
programmatic API. Long-lived resources are owned by the lifespan: they are
acquired once at startup, stored on app.state for route handlers, and
released on shutdown.

Component wiring order (in build_components):
1. RecordsDatabase (SQLite connection handle)
2. RecordStore (typed record access)
3. UpstreamClient (shared httpx client)
4. BackendEndpoints (backend URL builders)
5. EtherscanClient (transaction history source)
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any

import httpx
import uvicorn
from fastapi import FastAPI

from gateway.api.app import create_app
from gateway.config import AppSettings
from gateway.data.database import RecordsDatabase
from gateway.data.store import RecordStore
from gateway.logging import get_logger, setup_logging
from gateway.upstream.client import UpstreamClient
from gateway.upstream.endpoints import BackendEndpoints
from gateway.upstream.etherscan import EtherscanClient


def build_components(
    settings: AppSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    """Build all gateway components from settings.

    Does NOT open the database or the HTTP client -- that happens in the
    lifespan.

    Args:
        settings: Application-wide settings.
        transport: Optional httpx transport for the upstream client.

    Returns:
        Dict mapping component names to instances.
    """
    database = RecordsDatabase(settings.database.path)
    upstream = UpstreamClient(settings.upstream, transport=transport)

    return {
        "database": database,
        "store": RecordStore(database),
        "upstream": upstream,
        "endpoints": BackendEndpoints(settings.upstream),
        "etherscan": EtherscanClient(upstream, settings.etherscan),
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open shared resources on startup and release them on shutdown."""
    logger = get_logger("gateway.main")
    components = app.state.components

    try:
        await components["database"].connect()
        await components["upstream"].connect()

        for name, component in components.items():
            setattr(app.state, name, component)

        logger.info("lifespan_started")
        yield
    finally:
        await components["upstream"].close()
        await components["database"].close()
        logger.info("gateway_stopped")


def build_app(
    settings: AppSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create the application with its components attached."""
    app = create_app(settings, lifespan=lifespan)
    app.state.components = build_components(settings, transport=transport)
    return app


async def run() -> None:
    """Run the gateway HTTP server."""
    settings = AppSettings()

    setup_logging(settings.log_level)
    logger = get_logger("gateway.main")

    app = build_app(settings)

    logger.info(
        "starting_gateway",
        host=settings.server.host,
        port=settings.server.port,
        backend_url=settings.upstream.backend_url,
        db_path=settings.database.path,
    )

    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level="warning",  # request logging is done by the gateway middleware
    )
    server = uvicorn.Server(config)
    await server.serve()


def main() -> None:
    """Synchronous entry point."""
    asyncio.run(run())


if __name__ == "__main__":
    main()
