"""Local knowledge base of known series."""

from .defaults import DEFAULT_SERIES
from .store import (
    UNKNOWN_PUBLISHER,
    KnowledgeBaseStore,
    KnowledgeEntryInput,
    VolumeInput,
    merge_entries,
    merge_knowledge,
    normalize_entry,
)

__all__ = [
    "DEFAULT_SERIES",
    "UNKNOWN_PUBLISHER",
    "KnowledgeBaseStore",
    "KnowledgeEntryInput",
    "VolumeInput",
    "merge_entries",
    "merge_knowledge",
    "normalize_entry",
]
