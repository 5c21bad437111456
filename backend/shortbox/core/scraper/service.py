"""Scraper fallback - knowledge base first, then a remote metadata source."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

import structlog

from shortbox.core.matching import MatchingConfig, search_knowledge_base
from shortbox.core.metrics import scraper_lookups_total
from shortbox.core.models import ComicKnowledge, ParsedComicInfo, ScrapedMetadata, ScraperResult
from shortbox.core.parsing import MARVEL_COMICS, detect_publisher_from_characters

from .sources import MetadataSource, MockMetadataSource, SourceRecord

logger = structlog.get_logger("shortbox.scraper")

NO_SERIES_ERROR = "Could not identify a series name from the filename."
INVALID_KEY_ERROR = "API Key is missing or invalid"
MIN_API_KEY_LENGTH = 10


def is_valid_api_key(api_key: str | None) -> bool:
    return bool(api_key) and len(api_key) >= MIN_API_KEY_LENGTH


class MetadataScraper:
    """Look up metadata for parsed filename info.

    The local knowledge base is consulted first; a match below Medium
    confidence is not trusted. Series naming a Marvel character are then
    tried against the Marvel source, when one is configured, before the
    general remote source.
    """

    def __init__(
        self,
        knowledge: Sequence[ComicKnowledge],
        source: MetadataSource | None = None,
        config: MatchingConfig | None = None,
        delay: float = 0.0,
        marvel_source: MetadataSource | None = None,
    ):
        """Initialize the scraper.

        Args:
            knowledge: Knowledge base snapshot
            source: Remote source (defaults to the in-memory mock source)
            config: Matching configuration (None loads it from the settings file)
            delay: Seconds to wait before each remote lookup
            marvel_source: Optional source tried first for Marvel series
        """
        self.knowledge = tuple(knowledge)
        self.source = source if source is not None else MockMetadataSource()
        self.config = config
        self.delay = delay
        self.marvel_source = marvel_source

    async def _lookup(
        self, source: MetadataSource, series: str, api_key: str
    ) -> SourceRecord | None:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return await source.lookup(series, api_key)

    @staticmethod
    def _remote_result(
        record: SourceRecord, parsed: ParsedComicInfo, source: MetadataSource
    ) -> ScraperResult:
        issue = f" #{parsed.issue}" if parsed.issue else ""
        logger.info("Remote match", series=record.series, source=source.name)
        return ScraperResult(
            success=True,
            data=ScrapedMetadata(
                series=record.series,
                publisher=record.publisher,
                volume=parsed.volume or record.volume,
                summary=record.summary
                or f"Scraped metadata for {record.series}{issue} from {source.name}.",
                creators=record.creators,
                confidence="High",
                source="api",
            ),
        )

    async def fetch_metadata(self, parsed: ParsedComicInfo, api_key: str | None) -> ScraperResult:
        """Fetch metadata for a parsed file.

        Args:
            parsed: Parsed filename info
            api_key: Credential for the general remote source

        Returns:
            ScraperResult; failures carry a human-readable error
        """
        if not parsed.series:
            scraper_lookups_total.labels(result="no_series").inc()
            return ScraperResult(success=False, error=NO_SERIES_ERROR)

        matches = search_knowledge_base(parsed, self.knowledge, self.config)
        if matches and matches[0].confidence != "Low":
            best = matches[0]
            scraper_lookups_total.labels(result="knowledge").inc()
            logger.debug("Scraper answered from knowledge base", series=best.series)
            return ScraperResult(
                success=True,
                data=ScrapedMetadata(
                    series=best.series,
                    publisher=best.publisher,
                    volume=best.volume,
                    summary=f"Found {best.series} ({best.publisher}) in the local knowledge base.",
                    confidence=best.confidence,
                    source="knowledge",
                ),
            )

        if (
            self.marvel_source is not None
            and parsed.issue
            and detect_publisher_from_characters(parsed.series) == MARVEL_COMICS
        ):
            record = await self._lookup(self.marvel_source, parsed.series, api_key or "")
            if record is not None:
                scraper_lookups_total.labels(result="api").inc()
                return self._remote_result(record, parsed, self.marvel_source)
            logger.debug("No Marvel match, trying general source", series=parsed.series)

        if not is_valid_api_key(api_key):
            scraper_lookups_total.labels(result="invalid_key").inc()
            return ScraperResult(success=False, error=INVALID_KEY_ERROR)

        record = await self._lookup(self.source, parsed.series, api_key)
        if record is None:
            scraper_lookups_total.labels(result="no_match").inc()
            logger.info("No remote match", series=parsed.series, source=self.source.name)
            return ScraperResult(
                success=False,
                error=f'No match found for "{parsed.series}" in remote database.',
            )

        scraper_lookups_total.labels(result="api").inc()
        return self._remote_result(record, parsed, self.source)


async def test_api_connection(
    api_key: str | None,
    source: MetadataSource | None = None,
) -> tuple[bool, str]:
    """Check an API key, asking the source when one is given.

    Returns:
        (success, message)
    """
    if not api_key:
        return False, "API Key is missing."
    if not is_valid_api_key(api_key):
        return False, "Invalid API Key provided."
    if source is None:
        return True, "Connection successful!"

    success, message = await source.check_connection(api_key)
    logger.info("API connection tested", source=source.name, success=success)
    return success, message
