"""Recommendation policy: tally ratios to a single label."""

from sentiment_api.core.sentiment.models import Recommendation, SentimentTally

RECOMMENDATION_THRESHOLD = 0.6


def decide(tally: SentimentTally, threshold: float = RECOMMENDATION_THRESHOLD) -> Recommendation:
    """Map a sentiment tally to a recommendation.

    Positive if at least ``threshold`` of counted articles are positive,
    Negative if at least ``threshold`` are negative, else Neutral. An empty
    tally is Neutral. Positive is checked first, which only matters for
    malformed tallies (e.g. negative counts).

    Args:
        tally: Per-bucket counts
        threshold: Inclusive ratio boundary

    Returns:
        Recommendation
    """
    total = tally.total
    if total == 0:
        return Recommendation.NEUTRAL

    positive_ratio = tally.positive / total
    negative_ratio = tally.negative / total

    if positive_ratio >= threshold:
        return Recommendation.POSITIVE
    if negative_ratio >= threshold:
        return Recommendation.NEGATIVE
    return Recommendation.NEUTRAL
