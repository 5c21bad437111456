"""Application routes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter

from shortbox.routes import general, knowledge, processing, scraper, settings

logger = structlog.get_logger("shortbox.routes")


def create_app_router() -> APIRouter:
    """Create and configure main application router.

    Returns:
        Configured APIRouter instance
    """
    router = APIRouter()

    router.include_router(general.router, tags=["general"])
    router.include_router(processing.router, tags=["processing"])
    router.include_router(knowledge.router, tags=["knowledge"])
    router.include_router(scraper.router, tags=["scraper"])
    router.include_router(settings.router, tags=["settings"])

    logger.debug("Application routes registered")
    return router
