"""Tests for single-file processing."""

from __future__ import annotations

import pytest

from shortbox.core.knowledge import UNKNOWN_PUBLISHER
from shortbox.core.matching import DEFAULT_CONFIG
from shortbox.core.models import QueuedFile
from shortbox.core.processing import (
    INSUFFICIENT_INFO_ERROR,
    PARSE_FAILURE_ERROR,
    ProcessingContext,
    process_comic_file,
)


@pytest.fixture
def context(knowledge) -> ProcessingContext:
    return ProcessingContext(knowledge=knowledge, config=DEFAULT_CONFIG)


def _file(path: str, **kwargs) -> QueuedFile:
    return QueuedFile(id=1, path=path, **kwargs)


class TestKnowledgeMatches:
    """Files whose series is in the knowledge base."""

    def test_exact_match_is_high(self, context):
        result = process_comic_file(_file("/incoming/Batman #45 (2016).cbz"), context)

        assert result.success is True
        assert result.confidence == "High"
        assert result.data.series == "Batman"
        assert result.data.publisher == "DC Comics"
        assert result.data.volume == "2016"
        assert result.data.issue == "45"
        assert result.data.year == 2016
        assert result.data.source == "knowledge"
        assert result.data.summary
        assert result.error is None

    def test_later_year_is_medium(self, context):
        """Saga 2023 against the 2012 volume scores 0.79."""
        result = process_comic_file(_file("Saga 061 (2023).cbz"), context)

        assert result.success is True
        assert result.confidence == "Medium"
        assert result.data.volume == "2012"
        assert result.data.year == 2023

    def test_missing_year_uses_start_year(self, context):
        result = process_comic_file(_file("Saga #1.cbz"), context)

        assert result.success is True
        assert result.data.year == 2012

    def test_canonical_series_name(self, context):
        result = process_comic_file(_file("X_Men 001 (1991).cbz"), context)

        assert result.data.series == "X-Men"
        assert result.data.volume == "1991"

    def test_suggestions_are_next_three_matches(self, make_entry):
        knowledge = [make_entry("Saga", "Image Comics", 2012, 2012)] + [
            make_entry(f"Saga Book {n}", "Image Comics", 2012, 2012) for n in range(1, 6)
        ]
        context = ProcessingContext(knowledge=knowledge, config=DEFAULT_CONFIG)

        result = process_comic_file(_file("Saga #1 (2012).cbz"), context)

        assert result.data.series == "Saga"
        assert [s.series for s in result.suggestions] == ["Saga Book 1", "Saga Book 2", "Saga Book 3"]


class TestFilenameFallback:
    """Files with no knowledge base match."""

    def test_explicit_publisher_hint_is_medium(self, context):
        result = process_comic_file(
            _file("Monstress #1 (2015).cbz"), context, publisher_hint="Image Comics"
        )

        assert result.success is True
        assert result.confidence == "Medium"
        assert result.data.series == "Monstress"
        assert result.data.publisher == "Image Comics"
        assert result.data.volume == "2015"
        assert result.data.source == "filename"
        assert result.suggestions == []

    def test_queued_file_publisher(self, context):
        result = process_comic_file(
            _file("Monstress #1 (2015).cbz", publisher="Image Comics"), context
        )

        assert result.data.publisher == "Image Comics"
        assert result.confidence == "Medium"

    def test_argument_wins_over_queued_file_publisher(self, context):
        result = process_comic_file(
            _file("Monstress #1 (2015).cbz", publisher="Marvel Comics"),
            context,
            publisher_hint="Image Comics",
        )

        assert result.data.publisher == "Image Comics"

    def test_no_hint_is_low(self, context):
        result = process_comic_file(_file("Monstress #1 (2015).cbz"), context)

        assert result.success is True
        assert result.confidence == "Low"
        assert result.data.publisher == UNKNOWN_PUBLISHER

    def test_parsed_volume_kept(self, context):
        result = process_comic_file(_file("Monstress Vol 2 #1 (2019).cbz"), context)

        assert result.data.volume == "2"

    def test_character_detection(self, context):
        result = process_comic_file(_file("The Flash #1 (2016).cbz"), context)

        assert result.confidence == "Medium"
        assert result.data.publisher == "DC Comics"

    def test_character_detection_disabled(self, knowledge):
        context = ProcessingContext(knowledge=knowledge, config=DEFAULT_CONFIG, detect_publishers=False)

        result = process_comic_file(_file("The Flash #1 (2016).cbz"), context)

        assert result.confidence == "Low"
        assert result.data.publisher == UNKNOWN_PUBLISHER

    def test_missing_year_fails(self, context):
        result = process_comic_file(
            _file("Monstress #1.cbz"), context, publisher_hint="Image Comics"
        )

        assert result.success is False
        assert result.confidence == "Low"
        assert result.error == INSUFFICIENT_INFO_ERROR
        assert result.data is None

    def test_empty_knowledge_base(self):
        result = process_comic_file(
            _file("Saga 061 (2023).cbz"), ProcessingContext(config=DEFAULT_CONFIG)
        )

        assert result.success is True
        assert result.confidence == "Low"
        assert result.data.source == "filename"


class TestFailures:
    """Files that cannot be processed."""

    @pytest.mark.parametrize("path", ["001.cbz", "cover.jpg", ""])
    def test_parse_failure(self, context, path):
        result = process_comic_file(_file(path), context)

        assert result.success is False
        assert result.confidence == "Low"
        assert result.error == PARSE_FAILURE_ERROR

    def test_unexpected_error_is_reported(self, context, monkeypatch):
        def boom(*args, **kwargs):
            raise RuntimeError("boom")

        monkeypatch.setattr("shortbox.core.processing.smart.search_knowledge_base", boom)

        result = process_comic_file(_file("Saga 061 (2023).cbz"), context)

        assert result.success is False
        assert result.confidence == "Low"
        assert result.error == "Processing error: boom"
