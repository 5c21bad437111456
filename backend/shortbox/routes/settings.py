"""Settings API routes."""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Literal

import structlog
from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from shortbox.core.config import get_settings
from shortbox.core.matching import (
    MatchingSettingsUpdate,
    build_matching_config,
    get_matching_config,
    reload_matching_config,
)
from shortbox.core.settings_persistence import load_settings_file, save_settings_to_file
from shortbox.core.tracing import get_trace_id

router = APIRouter(prefix="/api/settings")
logger = structlog.get_logger("shortbox.routes.settings")


class ProcessingSettingsUpdate(BaseModel):
    """Processing settings update model."""

    batch_item_delay_seconds: float | None = Field(default=None, ge=0.0)
    detect_publishers: bool | None = None
    scraper_source: Literal["mock", "comicvine"] | None = None
    scraper_delay_seconds: float | None = Field(default=None, ge=0.0)
    comicvine_api_key: str | None = None
    marvel_public_key: str | None = None
    marvel_private_key: str | None = None


def _processing_settings() -> dict[str, Any]:
    settings = get_settings()
    return {
        "batch_item_delay_seconds": settings.batch_item_delay_seconds,
        "detect_publishers": settings.detect_publishers,
        "scraper_source": settings.scraper_source,
        "scraper_delay_seconds": settings.scraper_delay_seconds,
        "comicvine_api_key_set": bool(settings.comicvine_api_key),
        "marvel_keys_set": bool(settings.marvel_public_key) and bool(settings.marvel_private_key),
    }


@router.get("/processing")
async def get_processing_settings() -> dict[str, Any]:
    """Get processing and scraper settings (API keys themselves are never returned)."""
    return {**_processing_settings(), "trace_id": get_trace_id()}


@router.put("/processing")
async def update_processing_settings(update: ProcessingSettingsUpdate) -> dict[str, Any]:
    """Update processing settings in settings.json."""
    update_dict = update.model_dump(exclude_none=True)
    if not update_dict:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No settings provided to update",
        )

    save_settings_to_file(update_dict)
    logger.info("Processing settings updated", updated_fields=sorted(update_dict))
    return {**_processing_settings(), "trace_id": get_trace_id()}


@router.get("/matching")
async def get_matching_settings() -> dict[str, Any]:
    """Get the effective matching configuration."""
    return asdict(get_matching_config())


@router.put("/matching")
async def update_matching_settings(update: MatchingSettingsUpdate) -> dict[str, Any]:
    """Update matching weights and thresholds.

    Values are merged into the "matching" section of settings.json and take
    effect immediately.
    """
    update_dict = update.model_dump(exclude_none=True)
    if not update_dict:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No settings provided to update",
        )

    stored = load_settings_file().get("matching") or {}
    try:
        build_matching_config(stored)
    except ValueError as e:
        logger.warning("Discarding invalid stored matching settings", error=str(e))
        stored = {}
    matching = {**stored, **update_dict}

    try:
        build_matching_config(matching)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    save_settings_to_file({"matching": matching})
    config = reload_matching_config()
    logger.info("Matching settings updated", updated_fields=sorted(update_dict))
    return asdict(config)
