"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from orderindex import __version__
from orderindex.api.deps import set_plugin
from orderindex.api.v1.router import router as v1_router
from orderindex.config.settings import Settings
from orderindex.core.plugin import OrdersSearchPlugin
from orderindex.observability.logging import setup_logging

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, plugin: OrdersSearchPlugin | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        plugin: Pre-built plugin (tests, embedding hosts). If None, one is
            built from ``settings`` at startup.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        # Auto-detect orderindex-config.yaml if present
        yaml_path = Path("orderindex-config.yaml")
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        setup_logging(settings.observability)
        logger.info("Starting orderindex v%s", __version__)

        active = plugin or OrdersSearchPlugin(settings)
        active.load()
        set_plugin(active)

        app.state.settings = settings
        app.state.plugin = active

        logger.info("orderindex is ready to serve requests on port %d", settings.server.port)
        yield

        logger.info("Shutting down orderindex...")
        active.shutdown()
        set_plugin(None)
        logger.info("orderindex shutdown complete")

    app = FastAPI(
        title="orderindex",
        description="Incremental order indexing and admin search for a hosted search index.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router, prefix="/v1")

    return app
