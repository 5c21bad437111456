"""Application entry point for Shortbox."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from shortbox.core.config import get_settings, reload_settings
from shortbox.core.knowledge import KnowledgeBaseStore
from shortbox.core.logging import setup_logging
from shortbox.core.matching import reload_matching_config
from shortbox.core.metrics import setup_metrics
from shortbox.core.middleware import TracingMiddleware
from shortbox.core.routes import create_app_router

logger = structlog.get_logger("shortbox.app")

APP_VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    settings = get_settings()
    logger.info(
        "Starting Shortbox application",
        version=APP_VERSION,
        env=settings.env,
        host=settings.host_bind_address,
        port=settings.host_port,
        knowledge_series=len(app.state.knowledge_store.entries),
    )

    yield

    logger.info("Shutting down Shortbox application")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    settings = get_settings()

    setup_logging(debug=settings.is_debug, logs_dir=settings.logs_dir)
    reload_matching_config()

    app = FastAPI(
        title="Shortbox",
        description="Comic file metadata inference and matching",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    # One store per app; processing runs work on snapshots of it
    store = KnowledgeBaseStore(settings.knowledge_base_file)
    store.load()
    app.state.knowledge_store = store

    app.add_middleware(TracingMiddleware)

    # Before routes so every route is instrumented
    setup_metrics(app, APP_VERSION)

    app.include_router(create_app_router())

    return app


def main() -> None:
    """Main entry point."""
    current_settings = reload_settings()
    app = create_app()

    import uvicorn

    logger.info(
        "Starting uvicorn server",
        host=current_settings.host_bind_address,
        port=current_settings.host_port,
    )

    uvicorn.run(
        app,
        host=current_settings.host_bind_address,
        port=current_settings.host_port,
        log_config=None,  # We use structlog
        reload=False,
    )


if __name__ == "__main__":
    main()
