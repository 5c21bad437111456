"""Batch coordinator - sequential processing with progress and cancellation."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Iterable, Mapping
from datetime import datetime

import structlog

from shortbox.core.metrics import (
    batch_duration_seconds,
    batch_runs_total,
    comics_processed_total,
)
from shortbox.core.models import (
    CONFIDENCE_RANK,
    ProcessingData,
    ProcessingResult,
    ProcessingStats,
    QueuedFile,
)
from shortbox.core.parsing import parse_filename
from shortbox.core.tracing import generate_trace_id, get_trace_id, trace_context

from .smart import ProcessingContext, process_comic_file

logger = structlog.get_logger("shortbox.processing.batch")

ProgressCallback = Callable[[int, int, str], None]

COMPLETE_LABEL = "Complete"
CANCELLED_LABEL = "Cancelled"


def _rank(result: ProcessingResult) -> int:
    """Rank a result for comparison; failures always rank lowest."""
    if not result.success:
        return -1
    return CONFIDENCE_RANK[result.confidence]


async def _try_scraper(
    file: QueuedFile,
    result: ProcessingResult,
    context: ProcessingContext,
) -> ProcessingResult:
    """Offer a result below High confidence to the scraper fallback.

    The scraper's answer replaces the original only when it ranks higher.
    Scraper errors are logged and the original result is kept.
    """
    parsed = parse_filename(file.path)
    if not parsed.series or not parsed.issue:
        return result

    try:
        scraped = await context.scraper.fetch_metadata(parsed, context.api_key)
    except Exception as e:
        logger.warning("Scraper fallback failed", file_id=file.id, error=str(e), exc_info=True)
        return result

    if not scraped.success or scraped.data is None:
        logger.debug("Scraper fallback found nothing", file_id=file.id, error=scraped.error)
        return result

    data = scraped.data
    if CONFIDENCE_RANK[data.confidence] <= _rank(result):
        return result

    logger.info(
        "Scraper fallback improved result",
        file_id=file.id,
        series=data.series,
        source=data.source,
        confidence=data.confidence,
    )
    return ProcessingResult(
        success=True,
        confidence=data.confidence,
        data=ProcessingData(
            series=data.series,
            issue=parsed.issue,
            year=parsed.year or datetime.now().year,
            publisher=data.publisher,
            volume=data.volume,
            summary=data.summary,
            source=data.source,
        ),
        suggestions=result.suggestions,
    )


async def run_batch(
    files: Iterable[QueuedFile],
    context: ProcessingContext,
    on_progress: ProgressCallback | None = None,
    *,
    cancel_event: asyncio.Event | None = None,
) -> dict[str, ProcessingResult]:
    """Process files one after another, in order.

    Args:
        files: Files to process
        context: Knowledge base snapshot and processing options
        on_progress: Called as ``(processed, total, file_name)`` after each
            file and once more with ``"Complete"`` (or ``"Cancelled"``)
        cancel_event: When set, the run stops before the next file

    Returns:
        Results keyed by file id (as a string)
    """
    files = list(files)
    total = len(files)
    results: dict[str, ProcessingResult] = {}
    started = time.perf_counter()
    cancelled = False
    processed = 0

    with trace_context(get_trace_id(), batch_id=generate_trace_id()):
        logger.info("Batch started", total=total)

        for index, file in enumerate(files):
            if cancel_event is not None and cancel_event.is_set():
                cancelled = True
                break

            result = process_comic_file(file, context)
            if context.scraper is not None and result.confidence != "High":
                result = await _try_scraper(file, result, context)

            results[str(file.id)] = result
            processed = index + 1
            comics_processed_total.labels(
                outcome="success" if result.success else "failure",
                confidence=result.confidence,
            ).inc()

            if on_progress is not None:
                on_progress(processed, total, file.name)

            if index + 1 < total:
                # Always yield so cancellation and other tasks can run
                await asyncio.sleep(context.batch_delay)

        status = "cancelled" if cancelled else "complete"
        duration = time.perf_counter() - started
        batch_runs_total.labels(status=status).inc()
        batch_duration_seconds.observe(duration)

        if on_progress is not None:
            if cancelled:
                on_progress(processed, total, CANCELLED_LABEL)
            else:
                on_progress(total, total, COMPLETE_LABEL)

        logger.info(
            "Batch finished",
            status=status,
            processed=processed,
            total=total,
            duration_seconds=round(duration, 3),
        )

    return results


def get_processing_stats(results: Mapping[str, ProcessingResult]) -> ProcessingStats:
    """Summarise a batch: totals plus per-confidence counts of successes."""
    stats = ProcessingStats(total=len(results))
    for result in results.values():
        if not result.success:
            stats.failed += 1
            continue
        stats.successful += 1
        if result.confidence == "High":
            stats.high_confidence += 1
        elif result.confidence == "Medium":
            stats.medium_confidence += 1
        else:
            stats.low_confidence += 1
    return stats
