"""FastAPI dependencies and builders wiring settings into processing objects."""

from __future__ import annotations

from collections.abc import Sequence

from fastapi import Request

from shortbox.core.config import Settings, get_settings
from shortbox.core.knowledge import KnowledgeBaseStore
from shortbox.core.matching import get_matching_config
from shortbox.core.models import ComicKnowledge
from shortbox.core.processing import ProcessingContext
from shortbox.core.scraper import (
    ComicVineMetadataSource,
    MarvelMetadataSource,
    MetadataScraper,
    MetadataSource,
    MockMetadataSource,
)


def get_knowledge_store(request: Request) -> KnowledgeBaseStore:
    """FastAPI dependency returning the app's knowledge store."""
    return request.app.state.knowledge_store


def build_metadata_source(settings: Settings | None = None) -> MetadataSource:
    settings = settings or get_settings()
    if settings.scraper_source == "comicvine":
        return ComicVineMetadataSource()
    return MockMetadataSource()


def _has_marvel_keys(settings: Settings) -> bool:
    return bool(settings.marvel_public_key) and bool(settings.marvel_private_key)


def build_scraper(
    knowledge: Sequence[ComicKnowledge],
    settings: Settings | None = None,
) -> MetadataScraper:
    settings = settings or get_settings()
    marvel_source = None
    if _has_marvel_keys(settings):
        marvel_source = MarvelMetadataSource(settings.marvel_public_key, settings.marvel_private_key)
    return MetadataScraper(
        knowledge,
        source=build_metadata_source(settings),
        config=get_matching_config(),
        delay=settings.scraper_delay_seconds,
        marvel_source=marvel_source,
    )


def build_processing_context(
    store: KnowledgeBaseStore,
    settings: Settings | None = None,
    *,
    with_scraper: bool = False,
) -> ProcessingContext:
    """Snapshot the knowledge base and collect options for one run.

    The scraper fallback is attached only when requested and an API key (or
    the Marvel key pair) is configured.
    """
    settings = settings or get_settings()
    knowledge = store.snapshot()
    scraper = None
    if with_scraper and (settings.comicvine_api_key or _has_marvel_keys(settings)):
        scraper = build_scraper(knowledge, settings)

    return ProcessingContext(
        knowledge=knowledge,
        config=get_matching_config(),
        detect_publishers=settings.detect_publishers,
        batch_delay=settings.batch_item_delay_seconds,
        scraper=scraper,
        api_key=settings.comicvine_api_key,
    )
