"""FastAPI application for the earthquake relay."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .quakes import (
    QuakeService,
    create_passthrough_router,
    create_quake_service,
    create_query_router,
    create_stream_router,
)


def configure_logging() -> None:
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(service: QuakeService | None = None) -> FastAPI:
    """Build the app. The poller starts with the lifespan and stops on shutdown.

    Serve with ``uvicorn app.main:create_app --factory``. Without an injected
    service, logging is configured and the service is built from the
    environment; importing this module has no side effects.
    """
    if service is None:
        configure_logging()
        service = create_quake_service()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await service.start()
        try:
            yield
        finally:
            await service.stop()

    app = FastAPI(title="Quakes Relay", version="1.0.0", lifespan=lifespan)
    app.state.quakes = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(service.settings.cors_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.include_router(create_query_router(service.query))
    app.include_router(create_stream_router(service.registry, service.settings.keepalive_interval))
    app.include_router(create_passthrough_router())

    @app.get("/health")
    def health():
        return {"status": "ok", "cached": len(service.cache), "subscribers": len(service.registry)}

    return app
