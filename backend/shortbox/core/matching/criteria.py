"""Individual match criteria evaluators.

Each function scores a single aspect of a match (series name, volume year)
so it can be tested and tuned independently of the others.
"""

from __future__ import annotations

from shortbox.core.models import ComicKnowledge, VolumeInfo
from shortbox.core.utils import simplify_series_name

from .config import DEFAULT_CONFIG, MatchingConfig


def series_similarity(
    search_series: str,
    candidate_series: str,
    config: MatchingConfig = DEFAULT_CONFIG,
) -> float:
    """Score how similar two series names are.

    Both names are simplified (trimmed, lowercased, separators as spaces).
    Exact match scores 1.0, containment either way 0.8, otherwise the Dice
    coefficient over unique words.

    Args:
        search_series: Series name parsed from a filename
        candidate_series: Series name from the knowledge base
        config: Matching configuration

    Returns:
        Similarity between 0.0 and 1.0
    """
    s1 = simplify_series_name(search_series)
    s2 = simplify_series_name(candidate_series)

    if s1 == s2:
        return config.series_exact_score

    if not (s1 and s2):
        return 0.0

    if s1 in s2 or s2 in s1:
        return config.series_substring_score

    words1 = set(s1.split())
    words2 = set(s2.split())
    common = words1 & words2
    if not common:
        return 0.0

    return 2 * len(common) / (len(words1) + len(words2))


def select_best_volume(entry: ComicKnowledge, year: int | None) -> VolumeInfo:
    """Pick the entry volume closest to the parsed year.

    Ties keep the first volume encountered. Without a year the first listed
    volume is used. An entry with no volumes yields its start year as volume.

    Args:
        entry: Knowledge base entry
        year: Year parsed from the filename, if any

    Returns:
        The selected volume
    """
    if not entry.volumes:
        return VolumeInfo(volume=str(entry.start_year), year=entry.start_year)

    if year is None:
        return entry.volumes[0]

    best = entry.volumes[0]
    for volume in entry.volumes[1:]:
        if abs(volume.year - year) < abs(best.year - year):
            best = volume
    return best


def volume_score(
    volume_year: int,
    search_year: int | None,
    config: MatchingConfig = DEFAULT_CONFIG,
) -> float:
    """Score how well a volume's year fits the parsed year.

    Exact year scores 1.0; otherwise the score drops by 1/10 per year and is
    floored at 0.3 however large the gap. Without a parsed year the fixed
    default of 0.5 applies.

    Args:
        volume_year: Start year of the selected volume
        search_year: Year parsed from the filename, if any
        config: Matching configuration

    Returns:
        Volume score between the floor and 1.0
    """
    if search_year is None:
        return config.default_volume_score

    year_diff = abs(volume_year - search_year)
    if year_diff == 0:
        return config.year_exact_score

    return max(config.year_score_floor, 1.0 - year_diff / config.year_decay_span)
