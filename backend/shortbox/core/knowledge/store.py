"""Knowledge base persistence to a JSON file."""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shortbox.core.models import ComicKnowledge, VolumeInfo
from shortbox.core.utils import normalize_key

from .defaults import DEFAULT_SERIES

logger = structlog.get_logger("shortbox.knowledge")

UNKNOWN_PUBLISHER = "Unknown Publisher"


class VolumeInput(BaseModel):
    """Loosely typed volume as it arrives from users or older files."""

    volume: str | int | None = None
    year: int | None = None


class KnowledgeEntryInput(BaseModel):
    """Loosely typed knowledge entry, normalised before it is stored."""

    model_config = ConfigDict(populate_by_name=True)

    series: str = ""
    publisher: str | None = None
    start_year: int | None = Field(default=None, alias="startYear")
    volumes: list[VolumeInput] = Field(default_factory=list)


EntryLike = ComicKnowledge | KnowledgeEntryInput | Mapping[str, Any]


def normalize_entry(raw: EntryLike) -> ComicKnowledge:
    """Trim names and fill in missing publisher and years.

    Missing publisher becomes "Unknown Publisher", a missing start year
    becomes the current year and a volume without a year inherits the start
    year. Volumes with an empty label are dropped and duplicates (trimmed,
    case-insensitive) keep the first occurrence.
    """
    if isinstance(raw, ComicKnowledge):
        raw = raw.model_dump(by_alias=True)
    if not isinstance(raw, KnowledgeEntryInput):
        raw = KnowledgeEntryInput.model_validate(raw)

    start_year = raw.start_year or datetime.now().year
    volumes: list[VolumeInfo] = []
    seen: set[str] = set()
    for vol in raw.volumes:
        label = str(vol.volume if vol.volume is not None else "").strip()
        key = normalize_key(label)
        if not key or key in seen:
            continue
        seen.add(key)
        volumes.append(VolumeInfo(volume=label, year=vol.year or start_year))

    return ComicKnowledge(
        series=raw.series.strip(),
        publisher=(raw.publisher or "").strip() or UNKNOWN_PUBLISHER,
        start_year=start_year,
        volumes=volumes,
    )


def merge_entries(existing: ComicKnowledge, incoming: ComicKnowledge) -> ComicKnowledge:
    """Merge two entries for the same series.

    Keeps the earliest start year, takes the incoming publisher unless it is
    unknown, and unions volumes by trimmed, case-insensitive label.
    """
    publisher = existing.publisher
    if incoming.publisher and incoming.publisher != UNKNOWN_PUBLISHER:
        publisher = incoming.publisher

    volumes = list(existing.volumes)
    seen = {normalize_key(v.volume) for v in volumes}
    for vol in incoming.volumes:
        key = normalize_key(vol.volume)
        if key not in seen:
            volumes.append(vol)
            seen.add(key)

    return ComicKnowledge(
        series=existing.series,
        publisher=publisher,
        start_year=min(existing.start_year, incoming.start_year),
        volumes=volumes,
    )


def merge_knowledge(entries: Iterable[EntryLike]) -> list[ComicKnowledge]:
    """Normalise and dedupe entries by trimmed, lowercased series name.

    The first occurrence of a series fixes its position and display name.
    """
    merged: dict[str, ComicKnowledge] = {}
    for raw in entries:
        entry = normalize_entry(raw)
        key = normalize_key(entry.series)
        if not key:
            logger.warning("Skipping knowledge entry without a series name")
            continue
        if key in merged:
            merged[key] = merge_entries(merged[key], entry)
        else:
            merged[key] = entry
    return list(merged.values())


class KnowledgeBaseStore:
    """Knowledge base backed by a JSON document.

    The document is ``{"series": [...], "creators": [...]}``; a bare list of
    series is also accepted. Creator records are carried through unchanged.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        self._series: list[ComicKnowledge] = []
        self._creators: list[Any] = []
        self._loaded = False

    @property
    def entries(self) -> list[ComicKnowledge]:
        """Current series entries, loading the file on first access."""
        if not self._loaded:
            self.load()
        return list(self._series)

    @property
    def creators(self) -> list[Any]:
        if not self._loaded:
            self.load()
        return list(self._creators)

    def load(self) -> list[ComicKnowledge]:
        """Read the knowledge file, falling back to the bundled defaults."""
        self._loaded = True
        self._creators = []

        if not self.path.exists():
            logger.info("Knowledge base file not found, using defaults", path=str(self.path))
            self._series = merge_knowledge(DEFAULT_SERIES)
            return list(self._series)

        try:
            with self.path.open("r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(
                "Failed to read knowledge base, using defaults",
                path=str(self.path),
                error=str(e),
            )
            self._series = merge_knowledge(DEFAULT_SERIES)
            return list(self._series)

        if isinstance(data, dict):
            raw_series = data.get("series") or []
            self._creators = list(data.get("creators") or [])
        elif isinstance(data, list):
            raw_series = data
        else:
            logger.error("Unexpected knowledge base document", path=str(self.path))
            raw_series = DEFAULT_SERIES

        valid: list[KnowledgeEntryInput] = []
        for index, raw in enumerate(raw_series):
            try:
                valid.append(KnowledgeEntryInput.model_validate(raw))
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid knowledge entry",
                    path=str(self.path),
                    index=index,
                    error=str(e),
                )

        self._series = merge_knowledge(valid)
        logger.info(
            "Knowledge base loaded",
            path=str(self.path),
            series=len(self._series),
            creators=len(self._creators),
        )
        return list(self._series)

    def replace(self, entries: Iterable[EntryLike]) -> list[ComicKnowledge]:
        """Replace every series entry, deduping before saving."""
        if not self._loaded:
            self.load()
        self._series = merge_knowledge(entries)
        self.save()
        return list(self._series)

    def add(self, entry: EntryLike) -> list[ComicKnowledge]:
        """Add or update a single series entry and save."""
        self._series = merge_knowledge([*self.entries, entry])
        self.save()
        return list(self._series)

    def snapshot(self) -> tuple[ComicKnowledge, ...]:
        """Independent copy of the current entries for one processing run."""
        return tuple(entry.model_copy(deep=True) for entry in self.entries)

    def save(self) -> None:
        """Write the knowledge base to disk as indented JSON."""
        document = {
            "series": [entry.model_dump(by_alias=True) for entry in self._series],
            "creators": self._creators,
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("w") as f:
                json.dump(document, f, indent=2)
            logger.info("Knowledge base saved", path=str(self.path), series=len(self._series))
        except Exception as e:
            logger.error(
                "Failed to save knowledge base",
                path=str(self.path),
                error=str(e),
                exc_info=True,
            )
            raise
