"""File processing API routes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from shortbox.core.dependencies import build_processing_context, get_knowledge_store
from shortbox.core.knowledge import KnowledgeBaseStore
from shortbox.core.matching import has_knowledge_about
from shortbox.core.models import (
    FileId,
    ParsedComicInfo,
    ProcessingResult,
    ProcessingStats,
    QueuedFile,
)
from shortbox.core.parsing import generate_suggested_filename, parse_filename
from shortbox.core.processing import (
    DEFAULT_TEMPLATE,
    format_path,
    get_processing_stats,
    process_comic_file,
    run_batch,
)

router = APIRouter(prefix="/api/process")
logger = structlog.get_logger("shortbox.routes.processing")


class ProcessRequest(BaseModel):
    """Single-file processing request."""

    path: str = Field(..., min_length=1, description="Full path of the comic file")
    name: str | None = Field(default=None, description="Display name")
    id: FileId | None = Field(default=None, description="Queue id (defaults to the path)")
    publisher: str | None = Field(default=None, description="Publisher hint")


class BatchRequest(BaseModel):
    """Batch processing request."""

    files: list[QueuedFile] = Field(default_factory=list)


class BatchResponse(BaseModel):
    """Batch results keyed by file id, plus summary statistics."""

    results: dict[str, ProcessingResult]
    stats: ProcessingStats


class FormatRequest(BaseModel):
    """Path template rendering request."""

    template: str = Field(default=DEFAULT_TEMPLATE)
    data: dict[str, str | int | None]


class ParsePreview(BaseModel):
    """What the parser makes of a path, before any matching."""

    parsed: ParsedComicInfo
    suggested_filename: str = Field(..., description='"Series #Issue (Year)", empty when incomplete')
    known_series: bool = Field(..., description="A close knowledge base match exists")


@router.post("", response_model=ProcessingResult)
async def process_file(
    request: ProcessRequest,
    store: KnowledgeBaseStore = Depends(get_knowledge_store),
) -> ProcessingResult:
    """Infer metadata for one file from its path."""
    file = QueuedFile(
        id=request.id if request.id is not None else request.path,
        name=request.name or "",
        path=request.path,
        publisher=request.publisher,
    )
    context = build_processing_context(store)
    return process_comic_file(file, context)


@router.post("/batch", response_model=BatchResponse)
async def process_batch(
    request: BatchRequest,
    store: KnowledgeBaseStore = Depends(get_knowledge_store),
) -> BatchResponse:
    """Process files sequentially and return per-file results with stats."""
    context = build_processing_context(store, with_scraper=True)

    def log_progress(processed: int, total: int, label: str) -> None:
        logger.debug("Batch progress", processed=processed, total=total, label=label)

    results = await run_batch(request.files, context, log_progress)
    return BatchResponse(results=results, stats=get_processing_stats(results))


@router.post("/format")
async def format_file_path(request: FormatRequest) -> dict[str, str]:
    """Render a path template with metadata values."""
    return {"path": format_path(request.template, request.data)}


@router.get("/parse", response_model=ParsePreview)
async def preview_parse(
    path: str = Query(..., min_length=1),
    store: KnowledgeBaseStore = Depends(get_knowledge_store),
) -> ParsePreview:
    """Show the parsed fields and a suggested filename for a path."""
    parsed = parse_filename(path)
    return ParsePreview(
        parsed=parsed,
        suggested_filename=generate_suggested_filename(parsed),
        known_series=bool(parsed.series) and has_knowledge_about(parsed.series, store.entries),
    )
