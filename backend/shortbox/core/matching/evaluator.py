"""Match evaluator - combines all criteria against the knowledge base.

This module provides the high-level search that scores every knowledge base
entry for a parsed filename and returns the ranked, confidence-graded matches.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog

from shortbox.core.models import ComicKnowledge, Confidence, KnowledgeMatch, ParsedComicInfo

from .config import MatchingConfig, get_matching_config
from .criteria import select_best_volume, series_similarity, volume_score
from .results import confidence_band, overall_score

logger = structlog.get_logger("shortbox.matching")


class ScoredMatch:
    """A knowledge base candidate with its scores.

    Attributes:
        entry: Knowledge base entry that was scored
        volume: Selected volume label
        similarity: Series similarity
        volume_score: Volume/year proximity score
        score: Weighted overall score
        confidence: Confidence band for the overall score
    """

    def __init__(
        self,
        entry: ComicKnowledge,
        volume: str,
        similarity: float,
        volume_score: float,
        score: float,
        confidence: Confidence,
    ):
        self.entry = entry
        self.volume = volume
        self.similarity = similarity
        self.volume_score = volume_score
        self.score = score
        self.confidence = confidence

    def to_match(self) -> KnowledgeMatch:
        """Drop the scores and return the public match shape."""
        return KnowledgeMatch(
            series=self.entry.series,
            publisher=self.entry.publisher,
            volume=self.volume,
            start_year=self.entry.start_year,
            confidence=self.confidence,
        )

    def __repr__(self) -> str:
        return (
            f"ScoredMatch(series={self.entry.series!r}, volume={self.volume!r}, "
            f"score={self.score:.3f}, confidence={self.confidence})"
        )


def score_knowledge_entry(
    parsed: ParsedComicInfo,
    entry: ComicKnowledge,
    config: MatchingConfig | None = None,
) -> ScoredMatch | None:
    """Score one knowledge base entry against parsed filename info.

    Args:
        parsed: Parsed filename info (series required)
        entry: Knowledge base entry
        config: Matching configuration (if None, loads from settings file)

    Returns:
        ScoredMatch, or None when the series is not a reasonable match
    """
    if config is None:
        config = get_matching_config()

    if not parsed.series:
        return None

    similarity = series_similarity(parsed.series, entry.series, config)
    if similarity <= config.series_min_similarity:
        return None

    best_volume = select_best_volume(entry, parsed.year)
    vol_score = volume_score(best_volume.year, parsed.year, config)
    score = overall_score(similarity, vol_score, config)

    return ScoredMatch(
        entry=entry,
        volume=best_volume.volume,
        similarity=similarity,
        volume_score=vol_score,
        score=score,
        confidence=confidence_band(score, config),
    )


def rank_knowledge_entries(
    parsed: ParsedComicInfo,
    knowledge: Iterable[ComicKnowledge],
    config: MatchingConfig | None = None,
) -> list[ScoredMatch]:
    """Score every entry and return the survivors, best first (scores kept).

    Equal scores keep knowledge base order.
    """
    if config is None:
        config = get_matching_config()

    scored = []
    for entry in knowledge:
        candidate = score_knowledge_entry(parsed, entry, config)
        if candidate is not None:
            scored.append(candidate)

    scored.sort(key=lambda candidate: candidate.score, reverse=True)
    return scored[: config.max_results]


def search_knowledge_base(
    parsed: ParsedComicInfo,
    knowledge: Iterable[ComicKnowledge],
    config: MatchingConfig | None = None,
) -> list[KnowledgeMatch]:
    """Find the best knowledge base matches for parsed filename info.

    Args:
        parsed: Parsed filename info
        knowledge: Knowledge base snapshot (read-only)
        config: Matching configuration (if None, loads from settings file)

    Returns:
        Up to five matches ordered by score descending; empty when the
        series is missing or the knowledge base is empty
    """
    if not parsed.series:
        return []

    ranked = rank_knowledge_entries(parsed, knowledge, config)
    if ranked:
        logger.debug(
            "Knowledge base candidates",
            series=parsed.series,
            year=parsed.year,
            candidates=[repr(candidate) for candidate in ranked],
        )
    else:
        logger.debug("No knowledge base match", series=parsed.series, year=parsed.year)

    return [candidate.to_match() for candidate in ranked]
