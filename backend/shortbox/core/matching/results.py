"""Score combination and confidence banding."""

from __future__ import annotations

from shortbox.core.models import Confidence

from .config import DEFAULT_CONFIG, MatchingConfig


def overall_score(
    similarity: float,
    volume: float,
    config: MatchingConfig = DEFAULT_CONFIG,
) -> float:
    """Combine series similarity and volume score into one score."""
    return config.series_weight * similarity + config.volume_weight * volume


def confidence_band(score: float, config: MatchingConfig = DEFAULT_CONFIG) -> Confidence:
    """Map an overall score to a confidence band.

    Args:
        score: Overall match score
        config: Matching configuration

    Returns:
        "High" above 0.85, "Medium" above 0.7, otherwise "Low"
    """
    if score > config.high_confidence_threshold:
        return "High"
    if score > config.medium_confidence_threshold:
        return "Medium"
    return "Low"
