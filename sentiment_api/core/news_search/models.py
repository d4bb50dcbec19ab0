"""Data models for news search."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from typing import Any

from sentiment_api.domain.exceptions import StrategyFailure


@dataclass(frozen=True)
class Article:
    """A single news article returned by a search strategy.

    Identity is structural; duplicates across strategies are not merged.
    """

    title: str
    url: str
    publisher_name: str
    published_at: datetime | None  # Upstream may omit or garble it

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "title": self.title,
            "url": self.url,
            "publisher_name": self.publisher_name,
            "published_at": self.published_at.isoformat() if self.published_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Article:
        """Create from dictionary."""
        published_at = None
        if data.get("published_at"):
            published_at = datetime.fromisoformat(data["published_at"])
        return cls(
            title=data["title"],
            url=data["url"],
            publisher_name=data["publisher_name"],
            published_at=published_at,
        )


@dataclass(frozen=True)
class SearchQuery:
    """The logical search every strategy issues.

    Attributes:
        terms: Topic terms, quoted and OR-joined into ``q``
        lang: Article language
        country: Optional upstream country filter
        max_results: Result cap
        lookback: Recency window; None omits from/to
        alternatives: Fallback term sets for the alternative-queries strategy
    """

    terms: tuple[str, ...]
    lang: str = "en"
    country: str | None = None
    max_results: int = 8
    lookback: timedelta | None = None
    alternatives: tuple[tuple[str, ...], ...] = field(default_factory=tuple)

    @property
    def text(self) -> str:
        """Query text: quoted terms joined with OR."""
        return " OR ".join(f'"{term}"' for term in self.terms)

    def with_terms(self, terms: tuple[str, ...]) -> SearchQuery:
        return replace(self, terms=terms, alternatives=())

    def to_params(self, api_key: str, now: datetime | None = None) -> dict[str, str]:
        """Build the upstream query-string parameters."""
        params = {
            "q": self.text,
            "lang": self.lang,
            "max": str(self.max_results),
        }
        if self.country:
            params["country"] = self.country
        if self.lookback is not None:
            end = now or datetime.now(UTC)
            params["from"] = (end - self.lookback).strftime("%Y-%m-%dT%H:%M:%SZ")
            params["to"] = end.strftime("%Y-%m-%dT%H:%M:%SZ")
        params["apikey"] = api_key
        return params


@dataclass(frozen=True)
class FetchOutcome:
    """Result of an orchestrated fetch, with the failures that preceded success."""

    articles: list[Article]
    strategy_name: str
    failures: list[StrategyFailure] = field(default_factory=list)
