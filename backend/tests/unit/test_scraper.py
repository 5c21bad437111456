"""Tests for the scraper fallback service."""

from __future__ import annotations

import pytest

from shortbox.core.matching import DEFAULT_CONFIG
from shortbox.core.models import ParsedComicInfo
from shortbox.core.scraper import (
    INVALID_KEY_ERROR,
    MarvelMetadataSource,
    NO_SERIES_ERROR,
    MetadataScraper,
    MetadataSource,
    MockMetadataSource,
    SourceRecord,
    is_valid_api_key,
)
from shortbox.core.scraper import service as scraper_service

VALID_KEY = "0123456789abcdef"


class RecordingSource(MetadataSource):
    """Source that records lookups and answers from a dict."""

    name = "recording"

    def __init__(self, records: dict[str, SourceRecord] | None = None, connection=(True, "ok")):
        self.records = records or {}
        self.connection = connection
        self.lookups: list[str] = []

    async def lookup(self, series: str, api_key: str) -> SourceRecord | None:
        self.lookups.append(series)
        return self.records.get(series)

    async def check_connection(self, api_key: str) -> tuple[bool, str]:
        return self.connection


@pytest.fixture
def scraper(knowledge) -> MetadataScraper:
    return MetadataScraper(knowledge, config=DEFAULT_CONFIG)


class TestFetchMetadata:
    """Tests for MetadataScraper.fetch_metadata()."""

    async def test_no_series(self, scraper):
        result = await scraper.fetch_metadata(ParsedComicInfo(issue="1"), VALID_KEY)

        assert result.success is False
        assert result.error == NO_SERIES_ERROR

    async def test_knowledge_base_answers_without_key(self, scraper):
        result = await scraper.fetch_metadata(ParsedComicInfo(series="Saga", issue="1", year=2023), None)

        assert result.success is True
        assert result.data.source == "knowledge"
        assert result.data.confidence == "Medium"
        assert result.data.publisher == "Image Comics"
        assert result.data.volume == "2012"

    async def test_low_knowledge_match_is_not_trusted(self, knowledge):
        source = RecordingSource()
        scraper = MetadataScraper(knowledge, source=source, config=DEFAULT_CONFIG)

        result = await scraper.fetch_metadata(
            ParsedComicInfo(series="Invincible Annual", issue="1", year=2023), VALID_KEY
        )

        assert source.lookups == ["Invincible Annual"]
        assert result.success is False

    @pytest.mark.parametrize("api_key", [None, "", "short"])
    async def test_invalid_key(self, scraper, api_key):
        result = await scraper.fetch_metadata(ParsedComicInfo(series="Monstress", issue="1"), api_key)

        assert result.success is False
        assert result.error == INVALID_KEY_ERROR

    async def test_remote_match(self, scraper):
        result = await scraper.fetch_metadata(
            ParsedComicInfo(series="Monstress", issue="1", year=2015), VALID_KEY
        )

        assert result.success is True
        assert result.data.source == "api"
        assert result.data.confidence == "High"
        assert result.data.publisher == "Image Comics"
        assert result.data.volume == "2015"
        assert [c.name for c in result.data.creators] == ["Marjorie Liu", "Sana Takeda"]

    async def test_parsed_volume_wins(self, scraper):
        result = await scraper.fetch_metadata(
            ParsedComicInfo(series="Monstress", issue="1", volume="2"), VALID_KEY
        )

        assert result.data.volume == "2"

    async def test_remote_miss(self, scraper):
        result = await scraper.fetch_metadata(ParsedComicInfo(series="Unknown Book", issue="1"), VALID_KEY)

        assert result.success is False
        assert result.error == 'No match found for "Unknown Book" in remote database.'

    async def test_summary_generated_when_source_has_none(self, knowledge):
        source = RecordingSource(
            {"Monstress": SourceRecord(series="Monstress", publisher="Image Comics", volume="2015")}
        )
        scraper = MetadataScraper(knowledge, source=source, config=DEFAULT_CONFIG)

        result = await scraper.fetch_metadata(ParsedComicInfo(series="Monstress", issue="3"), VALID_KEY)

        assert result.data.summary == "Scraped metadata for Monstress #3 from recording."

    async def test_delay_before_remote_lookup(self, knowledge, monkeypatch):
        sleeps: list[float] = []

        async def fake_sleep(delay: float) -> None:
            sleeps.append(delay)

        monkeypatch.setattr("shortbox.core.scraper.service.asyncio.sleep", fake_sleep)
        scraper = MetadataScraper(knowledge, config=DEFAULT_CONFIG, delay=1.5)

        await scraper.fetch_metadata(ParsedComicInfo(series="Saga", year=2012), VALID_KEY)
        await scraper.fetch_metadata(ParsedComicInfo(series="Monstress"), VALID_KEY)

        assert sleeps == [1.5]


class TestMarvelSource:
    """Series naming a Marvel character are tried against the Marvel source first."""

    async def test_answers_without_general_key(self):
        scraper = MetadataScraper(
            [], config=DEFAULT_CONFIG, marvel_source=MarvelMetadataSource("public", "private")
        )

        result = await scraper.fetch_metadata(
            ParsedComicInfo(series="Invincible Iron Man", issue="1"), None
        )

        assert result.success is True
        assert result.data.source == "api"
        assert result.data.publisher == "Marvel Comics"
        assert result.data.volume == "2008"
        assert result.data.summary.startswith("Tony Stark is Iron Man.")
        assert [c.name for c in result.data.creators] == ["Matt Fraction", "Salvador Larroca"]

    async def test_miss_falls_through_to_general_source(self):
        marvel = RecordingSource()
        general = RecordingSource(
            {"Venom": SourceRecord(series="Venom", publisher="Marvel Comics", volume="2018")}
        )
        scraper = MetadataScraper([], source=general, config=DEFAULT_CONFIG, marvel_source=marvel)

        result = await scraper.fetch_metadata(ParsedComicInfo(series="Venom", issue="1"), VALID_KEY)

        assert marvel.lookups == ["Venom"]
        assert general.lookups == ["Venom"]
        assert result.data.volume == "2018"

    async def test_miss_without_general_key(self):
        scraper = MetadataScraper([], config=DEFAULT_CONFIG, marvel_source=RecordingSource())

        result = await scraper.fetch_metadata(ParsedComicInfo(series="Venom", issue="1"), None)

        assert result.error == INVALID_KEY_ERROR

    @pytest.mark.parametrize(
        "parsed",
        [ParsedComicInfo(series="Monstress", issue="1"), ParsedComicInfo(series="Venom")],
    )
    async def test_not_asked(self, parsed):
        """Non-Marvel series and files without an issue skip the Marvel source."""
        marvel = RecordingSource()
        scraper = MetadataScraper([], config=DEFAULT_CONFIG, marvel_source=marvel)

        await scraper.fetch_metadata(parsed, VALID_KEY)

        assert marvel.lookups == []

    async def test_source_needs_both_keys(self):
        source = MarvelMetadataSource("public", None)

        assert await source.lookup("Invincible Iron Man", VALID_KEY) is None
        assert await source.check_connection(VALID_KEY) == (False, "Marvel API keys are missing.")
        assert await MarvelMetadataSource("public", "private").check_connection("") == (
            True,
            "Connection successful!",
        )


def test_default_source_is_mock(knowledge) -> None:
    """Test the scraper falls back to the in-memory source."""
    assert isinstance(MetadataScraper(knowledge).source, MockMetadataSource)


def test_is_valid_api_key() -> None:
    """Test the minimum key length."""
    assert is_valid_api_key("a" * 10) is True
    assert is_valid_api_key("a" * 9) is False
    assert is_valid_api_key(None) is False


class TestApiConnection:
    """Tests for the API key connection check."""

    async def test_missing_key(self):
        assert await scraper_service.test_api_connection(None) == (False, "API Key is missing.")

    async def test_short_key(self):
        assert await scraper_service.test_api_connection("abc") == (False, "Invalid API Key provided.")

    async def test_valid_key_without_source(self):
        assert await scraper_service.test_api_connection(VALID_KEY) == (True, "Connection successful!")

    async def test_source_is_asked(self):
        source = RecordingSource(connection=(False, "Invalid API Key provided."))

        assert await scraper_service.test_api_connection(VALID_KEY, source) == (
            False,
            "Invalid API Key provided.",
        )
