"""Knowledge base matching system.

This module scores parsed filename info against the local knowledge base of
known series, with configurable weights and thresholds, and grades every
candidate with a confidence band.
"""

from .config import (
    DEFAULT_CONFIG,
    MatchingConfig,
    MatchingSettingsUpdate,
    build_matching_config,
    get_matching_config,
    reload_matching_config,
)
from .criteria import select_best_volume, series_similarity, volume_score
from .evaluator import (
    ScoredMatch,
    rank_knowledge_entries,
    score_knowledge_entry,
    search_knowledge_base,
)
from .results import confidence_band, overall_score
from .suggestions import (
    get_knowledge_suggestions,
    get_publisher_suggestions,
    get_series_suggestions,
    has_knowledge_about,
)

__all__ = [
    "MatchingConfig",
    "DEFAULT_CONFIG",
    "MatchingSettingsUpdate",
    "build_matching_config",
    "get_matching_config",
    "reload_matching_config",
    "series_similarity",
    "select_best_volume",
    "volume_score",
    "overall_score",
    "confidence_band",
    "ScoredMatch",
    "score_knowledge_entry",
    "rank_knowledge_entries",
    "search_knowledge_base",
    "get_knowledge_suggestions",
    "has_knowledge_about",
    "get_publisher_suggestions",
    "get_series_suggestions",
]
