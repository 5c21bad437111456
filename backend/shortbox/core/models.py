"""Pydantic models for metadata inference and matching."""

from __future__ import annotations

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

Confidence = Literal["High", "Medium", "Low"]

# Ordering used when comparing two results' confidence
CONFIDENCE_RANK: dict[str, int] = {"Low": 0, "Medium": 1, "High": 2}

FileId = str | int


class ParsedComicInfo(BaseModel):
    """Structured guess extracted from a file path."""

    model_config = ConfigDict(frozen=True)

    series: str | None = Field(default=None, description="Best-guess series name")
    issue: str | None = Field(default=None, description="Issue number, leading zeros dropped")
    year: int | None = Field(default=None, description="Four-digit year from (19xx)/(20xx)")
    volume: str | None = Field(default=None, description="Volume number after v/vol/volume")


class VolumeInfo(BaseModel):
    """A known volume (run) of a series."""

    volume: str = Field(..., description="Volume label, usually the start year or run number")
    year: int = Field(..., description="Year the volume started")


class ComicKnowledge(BaseModel):
    """Knowledge base entry for one series."""

    model_config = ConfigDict(populate_by_name=True)

    series: str = Field(..., description="Canonical series name")
    publisher: str = Field(..., description="Publisher name")
    start_year: int = Field(..., alias="startYear", description="Year the series began")
    volumes: list[VolumeInfo] = Field(default_factory=list, description="Known volumes")


class KnowledgeMatch(BaseModel):
    """A knowledge base entry judged a reasonable match for parsed info."""

    model_config = ConfigDict(populate_by_name=True)

    series: str
    publisher: str
    volume: str
    start_year: int = Field(..., alias="startYear")
    confidence: Confidence


class ProcessingData(BaseModel):
    """Metadata accepted for a processed file."""

    series: str
    issue: str
    year: int
    publisher: str
    volume: str
    summary: str = Field(..., min_length=1, description="Provenance note for auditing")
    source: Literal["knowledge", "filename", "api"] = Field(
        default="knowledge", description="Where the canonical fields came from"
    )


class ProcessingResult(BaseModel):
    """Outcome of processing one file."""

    success: bool
    confidence: Confidence
    data: ProcessingData | None = None
    error: str | None = None
    suggestions: list[KnowledgeMatch] = Field(default_factory=list)


class QueuedFile(BaseModel):
    """A file waiting to be processed."""

    id: FileId = Field(..., description="Queue identifier, used as the batch result key")
    name: str = Field(default="", description="Display name (defaults to the path's last segment)")
    path: str = Field(..., description="Full path, POSIX or Windows separators")
    publisher: str | None = Field(default=None, description="Externally supplied publisher hint")

    @model_validator(mode="before")
    @classmethod
    def _default_name(cls, values: Any) -> Any:
        if isinstance(values, dict) and not values.get("name") and values.get("path"):
            values = dict(values)
            values["name"] = re.split(r"[\\/]", str(values["path"]))[-1]
        return values


class ProcessingStats(BaseModel):
    """Summary statistics for a batch run."""

    model_config = ConfigDict(populate_by_name=True)

    total: int = 0
    successful: int = 0
    failed: int = 0
    high_confidence: int = Field(default=0, alias="highConfidence")
    medium_confidence: int = Field(default=0, alias="mediumConfidence")
    low_confidence: int = Field(default=0, alias="lowConfidence")


class Creator(BaseModel):
    """A creator credit from a metadata source."""

    name: str
    role: str


class ScrapedMetadata(BaseModel):
    """Metadata returned by the scraper fallback."""

    series: str
    publisher: str
    volume: str
    summary: str
    creators: list[Creator] = Field(default_factory=list)
    confidence: Confidence
    source: Literal["knowledge", "api"]


class ScraperResult(BaseModel):
    """Outcome of a scraper lookup."""

    success: bool
    data: ScrapedMetadata | None = None
    error: str | None = None


class FieldSuggestion(BaseModel):
    """A suggested value for a metadata form field."""

    label: str
    value: str
    field: Literal["series", "publisher", "volume"]
