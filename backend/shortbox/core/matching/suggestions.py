"""Form-field suggestions drawn from the knowledge base."""

from __future__ import annotations

from collections.abc import Sequence

from shortbox.core.models import ComicKnowledge, FieldSuggestion, ParsedComicInfo
from shortbox.core.utils import simplify_series_name

from .config import MatchingConfig, get_matching_config
from .criteria import series_similarity
from .evaluator import search_knowledge_base

MIN_QUERY_LENGTH = 2
MAX_AUTOCOMPLETE_RESULTS = 10


def get_knowledge_suggestions(
    parsed: ParsedComicInfo,
    knowledge: Sequence[ComicKnowledge],
    config: MatchingConfig | None = None,
) -> list[FieldSuggestion]:
    """Suggest field values from the best knowledge base match.

    Publisher is always suggested; volume only when the match is Medium or
    better; the canonical series only on a High match whose name differs.
    """
    matches = search_knowledge_base(parsed, knowledge, config)
    if not matches:
        return []

    best = matches[0]
    suggestions = [FieldSuggestion(label="Publisher", value=best.publisher, field="publisher")]

    if best.confidence != "Low" and best.volume:
        suggestions.append(FieldSuggestion(label="Volume", value=best.volume, field="volume"))

    if best.confidence == "High" and best.series != parsed.series:
        suggestions.append(FieldSuggestion(label="Series", value=best.series, field="series"))

    return suggestions


def has_knowledge_about(
    series: str,
    knowledge: Sequence[ComicKnowledge],
    config: MatchingConfig | None = None,
) -> bool:
    """Check whether any entry is a close match (similarity above 0.7)."""
    if config is None:
        config = get_matching_config()
    return any(
        series_similarity(series, entry.series, config) > config.medium_confidence_threshold
        for entry in knowledge
    )


def get_publisher_suggestions(text: str, knowledge: Sequence[ComicKnowledge]) -> list[str]:
    """Autocomplete publisher names containing the typed text."""
    if not text or len(text) < MIN_QUERY_LENGTH:
        return []

    query = simplify_series_name(text)
    publishers = {entry.publisher for entry in knowledge}
    return sorted(p for p in publishers if query in simplify_series_name(p))[
        :MAX_AUTOCOMPLETE_RESULTS
    ]


def get_series_suggestions(
    text: str,
    knowledge: Sequence[ComicKnowledge],
    publisher: str | None = None,
) -> list[str]:
    """Autocomplete series names, optionally restricted to one publisher."""
    if not text or len(text) < MIN_QUERY_LENGTH:
        return []

    entries = knowledge
    if publisher:
        publisher_key = simplify_series_name(publisher)
        entries = [e for e in knowledge if simplify_series_name(e.publisher) == publisher_key]

    query = simplify_series_name(text)
    return sorted(e.series for e in entries if query in simplify_series_name(e.series))[
        :MAX_AUTOCOMPLETE_RESULTS
    ]
