"""Knowledge base API routes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query

from shortbox.core.dependencies import get_knowledge_store
from shortbox.core.knowledge import KnowledgeBaseStore, KnowledgeEntryInput
from shortbox.core.matching import (
    get_knowledge_suggestions,
    get_publisher_suggestions,
    get_series_suggestions,
)
from shortbox.core.models import ComicKnowledge, FieldSuggestion
from shortbox.core.parsing import parse_filename

router = APIRouter(prefix="/api/knowledge")
logger = structlog.get_logger("shortbox.routes.knowledge")


@router.get("", response_model=list[ComicKnowledge])
async def list_knowledge(
    store: KnowledgeBaseStore = Depends(get_knowledge_store),
) -> list[ComicKnowledge]:
    """Return every known series."""
    return store.entries


@router.post("", response_model=list[ComicKnowledge])
async def add_knowledge(
    entry: KnowledgeEntryInput,
    store: KnowledgeBaseStore = Depends(get_knowledge_store),
) -> list[ComicKnowledge]:
    """Add or merge a single series entry."""
    entries = store.add(entry)
    logger.info("Knowledge entry added", series=entry.series, total=len(entries))
    return entries


@router.put("", response_model=list[ComicKnowledge])
async def replace_knowledge(
    entries: list[KnowledgeEntryInput],
    store: KnowledgeBaseStore = Depends(get_knowledge_store),
) -> list[ComicKnowledge]:
    """Replace the whole knowledge base (entries are merged and deduped)."""
    merged = store.replace(entries)
    logger.info("Knowledge base replaced", received=len(entries), total=len(merged))
    return merged


@router.get("/suggestions", response_model=list[FieldSuggestion])
async def knowledge_suggestions(
    path: str = Query(..., min_length=1),
    store: KnowledgeBaseStore = Depends(get_knowledge_store),
) -> list[FieldSuggestion]:
    """Suggest form field values for a file path."""
    return get_knowledge_suggestions(parse_filename(path), store.entries)


@router.get("/publishers")
async def publisher_suggestions(
    q: str = Query(default=""),
    store: KnowledgeBaseStore = Depends(get_knowledge_store),
) -> list[str]:
    """Autocomplete publisher names."""
    return get_publisher_suggestions(q, store.entries)


@router.get("/series")
async def series_suggestions(
    q: str = Query(default=""),
    publisher: str | None = Query(default=None),
    store: KnowledgeBaseStore = Depends(get_knowledge_store),
) -> list[str]:
    """Autocomplete series names, optionally within one publisher."""
    return get_series_suggestions(q, store.entries, publisher)
