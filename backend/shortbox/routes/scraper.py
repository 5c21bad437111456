"""Scraper fallback API routes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from shortbox.core.config import get_settings
from shortbox.core.dependencies import build_metadata_source, build_scraper, get_knowledge_store
from shortbox.core.knowledge import KnowledgeBaseStore
from shortbox.core.models import ScraperResult
from shortbox.core.parsing import parse_filename
from shortbox.core.scraper import service as scraper_service

router = APIRouter(prefix="/api/scraper")
logger = structlog.get_logger("shortbox.routes.scraper")


class FetchRequest(BaseModel):
    """Scraper lookup request."""

    path: str = Field(..., min_length=1, description="Full path of the comic file")
    api_key: str | None = Field(
        default=None, description="API key (defaults to the configured key)"
    )


class ConnectionTestRequest(BaseModel):
    """API key check request."""

    api_key: str | None = None


class ConnectionTestResponse(BaseModel):
    success: bool
    message: str


@router.post("/fetch", response_model=ScraperResult)
async def fetch_metadata(
    request: FetchRequest,
    store: KnowledgeBaseStore = Depends(get_knowledge_store),
) -> ScraperResult:
    """Look up metadata for a file via the knowledge base or remote source."""
    settings = get_settings()
    scraper = build_scraper(store.snapshot(), settings)
    api_key = request.api_key if request.api_key is not None else settings.comicvine_api_key
    result = await scraper.fetch_metadata(parse_filename(request.path), api_key)
    logger.info("Scraper lookup", path=request.path, success=result.success)
    return result


@router.post("/test", response_model=ConnectionTestResponse)
async def check_connection(request: ConnectionTestRequest) -> ConnectionTestResponse:
    """Check an API key against the configured source."""
    settings = get_settings()
    source = build_metadata_source(settings)
    success, message = await scraper_service.test_api_connection(request.api_key, source)
    return ConnectionTestResponse(success=success, message=message)
