"""Smart processor - turns one queued file into accepted metadata.

The processor parses the file path, reconciles it against the knowledge base
snapshot carried by the context and, when nothing matches, falls back to the
parsed fields plus a publisher hint.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from shortbox.core.knowledge import UNKNOWN_PUBLISHER
from shortbox.core.matching import MatchingConfig, get_matching_config, search_knowledge_base
from shortbox.core.models import (
    ComicKnowledge,
    KnowledgeMatch,
    ParsedComicInfo,
    ProcessingData,
    ProcessingResult,
    QueuedFile,
)
from shortbox.core.parsing import detect_publisher_from_characters, parse_filename

if TYPE_CHECKING:
    from shortbox.core.scraper import MetadataScraper

logger = structlog.get_logger("shortbox.processing.smart")

PARSE_FAILURE_ERROR = "Could not extract series name or issue number from filename"
INSUFFICIENT_INFO_ERROR = "Insufficient information to process file"


@dataclass
class ProcessingContext:
    """Everything a processing run needs, passed explicitly.

    Attributes:
        knowledge: Knowledge base snapshot taken before the run
        config: Matching configuration (None loads it from the settings file)
        detect_publishers: Guess a publisher from well-known character names
        batch_delay: Seconds to pause between batch items
        scraper: Optional fallback for results below High confidence
        api_key: Credential handed to the scraper
    """

    knowledge: Sequence[ComicKnowledge] = ()
    config: MatchingConfig | None = None
    detect_publishers: bool = True
    batch_delay: float = 0.0
    scraper: MetadataScraper | None = None
    api_key: str | None = None

    def matching_config(self) -> MatchingConfig:
        return self.config if self.config is not None else get_matching_config()


def _knowledge_result(
    parsed: ParsedComicInfo,
    matches: list[KnowledgeMatch],
    config: MatchingConfig,
) -> ProcessingResult:
    best = matches[0]
    return ProcessingResult(
        success=True,
        confidence=best.confidence,
        data=ProcessingData(
            series=best.series,
            issue=parsed.issue,
            year=parsed.year or best.start_year,
            publisher=best.publisher,
            volume=best.volume,
            summary=(
                f"Matched with {best.confidence.lower()} confidence to {best.series} "
                f"({best.publisher}, vol. {best.volume}) from the local knowledge base."
            ),
            source="knowledge",
        ),
        suggestions=matches[1 : 1 + config.max_suggestions],
    )


def _resolve_publisher_hint(
    parsed: ParsedComicInfo,
    file: QueuedFile,
    context: ProcessingContext,
    publisher_hint: str | None,
) -> str | None:
    """Pick the publisher hint: explicit argument, queued file, then detection."""
    if publisher_hint and publisher_hint.strip():
        return publisher_hint.strip()
    if file.publisher and file.publisher.strip():
        return file.publisher.strip()
    if context.detect_publishers:
        return detect_publisher_from_characters(parsed.series)
    return None


def _filename_result(
    parsed: ParsedComicInfo,
    publisher: str | None,
    matches: list[KnowledgeMatch],
) -> ProcessingResult:
    if parsed.year is None:
        return ProcessingResult(
            success=False,
            confidence="Low",
            error=INSUFFICIENT_INFO_ERROR,
            suggestions=matches,
        )

    if publisher:
        summary = f"Parsed from filename; publisher {publisher} inferred without a knowledge base match."
    else:
        summary = "Parsed from filename only; no knowledge base match or publisher hint."

    return ProcessingResult(
        success=True,
        confidence="Medium" if publisher else "Low",
        data=ProcessingData(
            series=parsed.series,
            issue=parsed.issue,
            year=parsed.year,
            publisher=publisher or UNKNOWN_PUBLISHER,
            volume=parsed.volume or str(parsed.year),
            summary=summary,
            source="filename",
        ),
        suggestions=matches,
    )


def process_comic_file(
    file: QueuedFile,
    context: ProcessingContext,
    publisher_hint: str | None = None,
) -> ProcessingResult:
    """Process one queued file into metadata with a confidence band.

    Args:
        file: Queued file (only the path is parsed)
        context: Knowledge base snapshot and processing options
        publisher_hint: Publisher supplied by the caller, wins over other hints

    Returns:
        ProcessingResult; failures are reported, never raised
    """
    log = logger.bind(file_id=file.id, file_name=file.name)
    try:
        parsed = parse_filename(file.path)
        if not parsed.series or not parsed.issue:
            log.info("Could not parse series or issue", path=file.path)
            return ProcessingResult(success=False, confidence="Low", error=PARSE_FAILURE_ERROR)

        config = context.matching_config()
        matches = search_knowledge_base(parsed, context.knowledge, config)
        if matches:
            result = _knowledge_result(parsed, matches, config)
            log.info(
                "Matched file to knowledge base",
                series=result.data.series,
                volume=result.data.volume,
                confidence=result.confidence,
                alternates=len(result.suggestions),
            )
            return result

        publisher = _resolve_publisher_hint(parsed, file, context, publisher_hint)
        result = _filename_result(parsed, publisher, matches)
        log.info(
            "No knowledge base match, using parsed data",
            series=parsed.series,
            year=parsed.year,
            publisher=publisher,
            success=result.success,
            confidence=result.confidence,
        )
        return result

    except Exception as e:
        log.error("Processing failed", path=file.path, error=str(e), exc_info=True)
        return ProcessingResult(success=False, confidence="Low", error=f"Processing error: {e}")
