"""Tests for matching configuration loading."""

from __future__ import annotations

import json

import pytest
from pydantic import ValidationError

from shortbox.core.matching import (
    DEFAULT_CONFIG,
    MatchingConfig,
    build_matching_config,
    get_matching_config,
    reload_matching_config,
    search_knowledge_base,
)
from shortbox.core.models import ParsedComicInfo, QueuedFile
from shortbox.core.processing import ProcessingContext, process_comic_file
from shortbox.core.settings_persistence import get_settings_file_path, save_settings_to_file


def test_defaults_without_settings_file() -> None:
    """Test defaults are used when settings.json is missing."""
    assert get_matching_config() is DEFAULT_CONFIG


def test_overrides_from_settings_file() -> None:
    """Test the "matching" section overrides individual values."""
    save_settings_to_file(
        {"matching": {"high_confidence_threshold": 0.9, "max_results": 3, "unknown_key": 1}}
    )

    config = reload_matching_config()

    assert config.high_confidence_threshold == 0.9
    assert config.max_results == 3
    assert config.medium_confidence_threshold == DEFAULT_CONFIG.medium_confidence_threshold


def test_config_is_cached_until_reload() -> None:
    """Test get_matching_config() keeps returning the cached instance."""
    first = get_matching_config()
    save_settings_to_file({"matching": {"max_results": 2}})

    assert get_matching_config() is first
    assert reload_matching_config().max_results == 2


def test_malformed_settings_file_uses_defaults() -> None:
    """Test an unreadable settings file does not break matching."""
    settings_file = get_settings_file_path()
    settings_file.parent.mkdir(parents=True, exist_ok=True)
    settings_file.write_text("{not json")

    assert reload_matching_config() == DEFAULT_CONFIG


def test_config_is_immutable() -> None:
    """Test MatchingConfig cannot be changed in place."""
    with pytest.raises(AttributeError):
        MatchingConfig().max_results = 1  # type: ignore[misc]


@pytest.mark.parametrize(
    "document",
    [
        [1, 2],
        "matching",
        {"matching": [1, 2]},
        {"matching": {"series_weight": "heavy"}},
        {"matching": {"max_results": 0}},
        {"matching": {"series_weight": 0, "volume_weight": 0}},
    ],
)
def test_invalid_settings_use_defaults(document) -> None:
    """Test a settings file of the wrong shape or with bad values falls back to defaults."""
    settings_file = get_settings_file_path()
    settings_file.parent.mkdir(parents=True, exist_ok=True)
    settings_file.write_text(json.dumps(document))

    assert reload_matching_config() == DEFAULT_CONFIG


def test_numeric_strings_are_coerced() -> None:
    """Test a weight stored as a numeric string is read as a float."""
    save_settings_to_file({"matching": {"series_weight": "0.7"}})

    config = reload_matching_config()

    assert config.series_weight == 0.7
    assert isinstance(config.series_weight, float)


def test_matching_never_fails_with_invalid_settings(knowledge) -> None:
    """Test matching and processing still work when settings.json is not an object."""
    settings_file = get_settings_file_path()
    settings_file.parent.mkdir(parents=True, exist_ok=True)
    settings_file.write_text("[1, 2]")
    reload_matching_config()

    matches = search_knowledge_base(ParsedComicInfo(series="Saga", year=2012), knowledge)
    result = process_comic_file(
        QueuedFile(id=1, path="Saga #1 (2012).cbz"), ProcessingContext(knowledge=knowledge)
    )

    assert matches[0].series == "Saga"
    assert result.success is True
    assert result.confidence == "High"


class TestBuildMatchingConfig:
    """Tests for build_matching_config()."""

    def test_empty_section_is_default(self):
        assert build_matching_config({}) == DEFAULT_CONFIG

    def test_unknown_keys_ignored(self):
        assert build_matching_config({"max_results": 2, "colour": "red"}).max_results == 2

    def test_rejects_non_object(self):
        with pytest.raises(ValueError, match="must be an object"):
            build_matching_config([1, 2])

    def test_rejects_out_of_range(self):
        with pytest.raises(ValidationError):
            build_matching_config({"high_confidence_threshold": 1.5})
