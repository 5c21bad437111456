"""Matching configuration - scoring weights and thresholds."""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field

logger = structlog.get_logger("shortbox.matching.config")


@dataclass(frozen=True)
class MatchingConfig:
    """Configuration for knowledge base matching.

    These values decide whether a file is auto-accepted or routed to manual
    review, so the defaults are pinned by tests.
    """

    # Series similarity
    series_exact_score: float = 1.0
    series_substring_score: float = 0.8
    series_min_similarity: float = 0.6  # Candidates at or below this are dropped

    # Volume / year proximity
    default_volume_score: float = 0.5  # Used when the filename has no year
    year_exact_score: float = 1.0
    year_decay_span: float = 10.0  # Score loses 1/span per year of difference
    year_score_floor: float = 0.3

    # Overall score weights
    series_weight: float = 0.7
    volume_weight: float = 0.3

    # Confidence bands (exclusive lower bounds)
    high_confidence_threshold: float = 0.85
    medium_confidence_threshold: float = 0.7

    # Result limits
    max_results: int = 5
    max_suggestions: int = 3  # Alternates kept beyond the chosen best match


# Default config instance
DEFAULT_CONFIG = MatchingConfig()

# Cached config instance (loaded from settings file)
_cached_config: MatchingConfig | None = None


class MatchingSettingsUpdate(BaseModel):
    """Matching weights and thresholds; omitted fields keep their value.

    Validates both API updates and the "matching" section of settings.json.
    Unknown keys are ignored.
    """

    model_config = ConfigDict(extra="ignore")

    series_exact_score: float | None = Field(default=None, ge=0.0, le=1.0)
    series_substring_score: float | None = Field(default=None, ge=0.0, le=1.0)
    series_min_similarity: float | None = Field(default=None, ge=0.0, le=1.0)
    default_volume_score: float | None = Field(default=None, ge=0.0, le=1.0)
    year_exact_score: float | None = Field(default=None, ge=0.0, le=1.0)
    year_decay_span: float | None = Field(default=None, gt=0.0)
    year_score_floor: float | None = Field(default=None, ge=0.0, le=1.0)
    series_weight: float | None = Field(default=None, ge=0.0, le=1.0)
    volume_weight: float | None = Field(default=None, ge=0.0, le=1.0)
    high_confidence_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    medium_confidence_threshold: float | None = Field(default=None, ge=0.0, le=1.0)
    max_results: int | None = Field(default=None, ge=1)
    max_suggestions: int | None = Field(default=None, ge=0)


def build_matching_config(section: Any) -> MatchingConfig:
    """Build a config from a "matching" settings section.

    Raises:
        ValueError: If the section is not an object, a value has the wrong
            type or range, or both weights are zero
    """
    if not isinstance(section, dict):
        raise ValueError(f"matching settings must be an object, got {type(section).__name__}")

    overrides = MatchingSettingsUpdate.model_validate(section).model_dump(exclude_none=True)
    config = replace(DEFAULT_CONFIG, **overrides)
    if config.series_weight + config.volume_weight <= 0:
        raise ValueError("series_weight and volume_weight cannot both be zero")
    return config


def get_matching_config() -> MatchingConfig:
    """Get the current matching configuration.

    Loads the "matching" section of settings.json if available, otherwise
    returns defaults. Any problem with the file or the section is logged and
    the defaults are used.

    Returns:
        MatchingConfig instance with current settings
    """
    global _cached_config

    if _cached_config is not None:
        return _cached_config

    from shortbox.core.settings_persistence import get_settings_file_path

    settings_file = get_settings_file_path()
    _cached_config = DEFAULT_CONFIG
    if not settings_file.exists():
        return _cached_config

    try:
        with settings_file.open("r") as f:
            document = json.load(f)
        if not isinstance(document, dict):
            raise ValueError(f"settings file must hold an object, got {type(document).__name__}")

        section = document.get("matching")
        if section is not None:
            _cached_config = build_matching_config(section)
            logger.info("Loaded matching config from settings", overrides=sorted(section))
    except (OSError, ValueError) as e:
        # pydantic's ValidationError is a ValueError
        logger.warning(
            "Invalid matching settings, using defaults",
            path=str(settings_file),
            error=str(e),
        )
        _cached_config = DEFAULT_CONFIG

    return _cached_config


def reload_matching_config() -> MatchingConfig:
    """Reload matching configuration from settings file.

    Call this after updating settings to ensure new values are used.
    """
    global _cached_config
    _cached_config = None
    return get_matching_config()
