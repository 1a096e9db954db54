from __future__ import annotations

import asyncio
import logging
import signal
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import sessionmaker

from .config import AppConfig, parse_args
from .api import routes_endpoints
from .api.routes_endpoints import TOTAL_COUNT_HEADER
from .api.security import security_resolver
from .listing.service import EndpointListingService
from .storage.db import init_engine_and_sessionmaker
from .storage.endpoint_store import SqlEndpointStore
from .storage import models

logger = logging.getLogger("fleet")


def create_app(config: AppConfig) -> FastAPI:
    app = FastAPI(title="Fleet Endpoint Listing")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
        expose_headers=[TOTAL_COUNT_HEADER],
    )

    app.include_router(routes_endpoints.router, prefix="/api")
    app.state.app_config = config
    return app


def attach_store(app: FastAPI, session_factory: sessionmaker) -> None:
    """Wire the listing service for *app* onto the given sessionmaker."""
    config: AppConfig = app.state.app_config
    app.state.db_sessionmaker = session_factory
    app.state.endpoint_listing = EndpointListingService(
        store=SqlEndpointStore(session_factory),
        resolve_security=security_resolver(config.security_mode),
    )


async def _run_uvicorn(app: FastAPI, config: AppConfig, shutdown_event: asyncio.Event) -> None:
    """Run Uvicorn server until shutdown_event is set."""
    server = uvicorn.Server(
        uvicorn.Config(
            app,
            host=config.web_host,
            port=config.web_port,
            log_level=config.log_level,
            loop="asyncio",
        )
    )

    async def serve() -> None:
        logger.info("Starting HTTP server on %s:%s", config.web_host, config.web_port)
        await server.serve()

    server_task = asyncio.create_task(serve(), name="uvicorn-server")

    await shutdown_event.wait()
    logger.info("Shutdown event received, stopping HTTP server...")
    server.should_exit = True
    await server_task


async def main_async(config: AppConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    engine, SessionLocal = init_engine_and_sessionmaker(config.database_url)
    if config.create_tables:
        models.Base.metadata.create_all(bind=engine)
        logger.info("Ensured endpoint tables exist")

    app = create_app(config)
    app.state.db_engine = engine
    attach_store(app, SessionLocal)
    logger.info("Security context mode: %s", config.security_mode.value)

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown_event.set)

    try:
        await _run_uvicorn(app, config, shutdown_event)
    finally:
        engine.dispose()


def cli(argv: Optional[list[str]] = None) -> None:
    """Console entrypoint defined in pyproject."""
    config = parse_args(argv)
    asyncio.run(main_async(config))


def main() -> None:
    """Entrypoint for `python -m fleet.main`."""
    cli()


if __name__ == "__main__":
    main()
