"""Protocol definitions for dependency injection."""

from collections.abc import Sequence
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from sentiment_api.core.classifier import Classification
    from sentiment_api.core.news_search.models import FetchOutcome, SearchQuery
    from sentiment_api.core.news_search.strategies import RetrievalStrategy


class NewsFetcher(Protocol):
    """Protocol for fetching articles (FetchOrchestrator satisfies it)."""

    def fetch_with_report(
        self, query: "SearchQuery", strategies: Sequence["RetrievalStrategy"]
    ) -> "FetchOutcome":
        """Fetch articles for a query, reporting the winning strategy."""
        ...


class TextClassifier(Protocol):
    """Protocol for classifying one text (ClassifierClient satisfies it)."""

    def classify(self, text: str, timeout: float | None = None) -> "Classification":
        """Return the best label and its score."""
        ...
