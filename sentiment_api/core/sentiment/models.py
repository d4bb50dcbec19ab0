"""Data models for sentiment aggregation."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from sentiment_api.core.news_search.models import Article


class SentimentLabel(str, Enum):
    """Canonical sentiment buckets."""

    POSITIVE = "Positive"
    NEUTRAL = "Neutral"
    NEGATIVE = "Negative"


class Recommendation(str, Enum):
    """Policy label summarizing a country's tally."""

    POSITIVE = "POSITIVE"
    NEGATIVE = "NEGATIVE"
    NEUTRAL = "NEUTRAL"


@dataclass(frozen=True)
class ClassifiedArticle:
    """An article with its classifier output.

    ``sentiment`` is a SentimentLabel when the raw label mapped, the raw
    string itself when it did not, and None when classification was skipped
    after a failure (``error`` then holds the reason).
    """

    article: Article
    sentiment: SentimentLabel | str | None
    confidence: float | None
    raw_label: str | None
    error: str | None = None

    @property
    def is_counted(self) -> bool:
        return isinstance(self.sentiment, SentimentLabel)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        sentiment = self.sentiment.value if isinstance(self.sentiment, SentimentLabel) else self.sentiment
        return {
            **self.article.to_dict(),
            "sentiment": sentiment,
            "confidence": self.confidence,
            "raw_label": self.raw_label,
            "error": self.error,
        }


@dataclass
class SentimentTally:
    """Per-bucket counts for one country's articles.

    Owned by a single aggregation run; never shared.
    """

    positive: int = 0
    neutral: int = 0
    negative: int = 0

    @property
    def total(self) -> int:
        return self.positive + self.neutral + self.negative

    def record(self, label: SentimentLabel | str | None) -> bool:
        """Increment the bucket for a canonical label.

        Passthrough strings and None count nowhere.

        Returns:
            True if a bucket was incremented
        """
        if label is SentimentLabel.POSITIVE:
            self.positive += 1
        elif label is SentimentLabel.NEUTRAL:
            self.neutral += 1
        elif label is SentimentLabel.NEGATIVE:
            self.negative += 1
        else:
            return False
        return True

    def to_dict(self) -> dict[str, int]:
        return {
            "positive": self.positive,
            "neutral": self.neutral,
            "negative": self.negative,
        }


@dataclass(frozen=True)
class CountryResult:
    """Completed analysis for one country."""

    country_code: str
    country_name: str
    articles: list[ClassifiedArticle]
    tally: SentimentTally
    recommendation: Recommendation
    strategy: str | None = None
    analyzed_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def total_articles(self) -> int:
        return len(self.articles)

    @property
    def unclassified_count(self) -> int:
        """Articles kept but not counted (passthrough label or skipped)."""
        return self.total_articles - self.tally.total

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for API response."""
        return {
            "country_code": self.country_code,
            "country_name": self.country_name,
            "articles": [a.to_dict() for a in self.articles],
            "tally": self.tally.to_dict(),
            "recommendation": self.recommendation.value,
            "total_articles": self.total_articles,
            "unclassified_count": self.unclassified_count,
            "strategy": self.strategy,
            "analyzed_at": self.analyzed_at.isoformat(),
        }
