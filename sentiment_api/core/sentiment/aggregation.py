"""Sequential classification and tallying of one topic's articles."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from sentiment_api.core.events import (
    CLASSIFICATION_COMPLETED,
    CLASSIFICATION_FAILED,
    EventSink,
    LoggingEventSink,
    PipelineEvent,
)
from sentiment_api.core.sentiment.mapper import SentimentMapper
from sentiment_api.core.sentiment.models import ClassifiedArticle, SentimentTally
from sentiment_api.domain.exceptions import ClassificationError, NoArticlesFound

if TYPE_CHECKING:
    from sentiment_api.core.news_search.models import SearchQuery
    from sentiment_api.core.news_search.strategies import RetrievalStrategy
    from sentiment_api.core.sentiment.cancellation import CancellationToken
    from sentiment_api.core.sentiment.protocols import NewsFetcher, TextClassifier

logger = logging.getLogger(__name__)


class FailurePolicy(str, Enum):
    """What to do when one article's classification fails."""

    ABORT = "abort"  # propagate, discarding partial results
    SKIP = "skip"  # keep the article unclassified and continue


@dataclass(frozen=True)
class AggregationOutcome:
    """Classified articles and their tally for one topic."""

    articles: list[ClassifiedArticle]
    tally: SentimentTally
    strategy: str | None = None


class AggregationEngine:
    """Fetch a topic's articles and classify their titles one at a time.

    Articles are never classified concurrently: the classifier rate-limits
    per caller. ``pace_delay`` is slept between consecutive classifications.
    """

    def __init__(
        self,
        fetcher: NewsFetcher,
        classifier: TextClassifier,
        mapper: SentimentMapper | None = None,
        failure_policy: FailurePolicy = FailurePolicy.ABORT,
        event_sink: EventSink | None = None,
        classifier_timeout: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.fetcher = fetcher
        self.classifier = classifier
        self.mapper = mapper or SentimentMapper()
        self.failure_policy = FailurePolicy(failure_policy)
        self.events = event_sink or LoggingEventSink()
        self.classifier_timeout = classifier_timeout
        self._sleep = sleep

    def run(
        self,
        query: SearchQuery,
        strategies: Sequence[RetrievalStrategy],
        pace_delay: float = 0.0,
        cancel_token: CancellationToken | None = None,
    ) -> AggregationOutcome:
        """Fetch, classify and tally.

        Args:
            query: Search to run
            strategies: Ranked retrieval strategies
            pace_delay: Seconds between classifications
            cancel_token: Checked before each article

        Returns:
            AggregationOutcome; every fetched article is kept, in fetch order

        Raises:
            AllStrategiesExhausted: From the fetcher
            NoArticlesFound: Fetch succeeded with zero articles
            ClassificationError: Under FailurePolicy.ABORT
            CampaignCancelled: If cancel_token fires mid-run
        """
        outcome = self.fetcher.fetch_with_report(query, strategies)
        if not outcome.articles:
            raise NoArticlesFound(query.text, strategy=outcome.strategy_name)

        tally = SentimentTally()
        classified: list[ClassifiedArticle] = []

        for index, article in enumerate(outcome.articles):
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            if index > 0 and pace_delay > 0:
                if cancel_token is not None:
                    cancel_token.wait(pace_delay)
                    cancel_token.raise_if_cancelled()
                else:
                    self._sleep(pace_delay)

            item = self._classify_article(article, index, len(outcome.articles))
            tally.record(item.sentiment)
            classified.append(item)

        logger.info(
            f"Tally for {query.text}: positive={tally.positive} "
            f"neutral={tally.neutral} negative={tally.negative} "
            f"uncounted={len(classified) - tally.total}"
        )
        return AggregationOutcome(
            articles=classified, tally=tally, strategy=outcome.strategy_name
        )

    def _classify_article(self, article, index: int, count: int) -> ClassifiedArticle:
        fields = {"index": index, "count": count, "title": article.title}
        started = time.monotonic()
        try:
            result = self.classifier.classify(article.title, timeout=self.classifier_timeout)
        except ClassificationError as e:
            elapsed_ms = round((time.monotonic() - started) * 1000, 1)
            self.events.emit(
                PipelineEvent(
                    CLASSIFICATION_FAILED,
                    f"Classification {index + 1}/{count} failed: {e}",
                    level=logging.WARNING,
                    fields={
                        **fields,
                        "error_kind": type(e).__name__,
                        "policy": self.failure_policy.value,
                        "elapsed_ms": elapsed_ms,
                    },
                )
            )
            if self.failure_policy is FailurePolicy.ABORT:
                raise
            return ClassifiedArticle(
                article=article,
                sentiment=None,
                confidence=None,
                raw_label=None,
                error=f"{type(e).__name__}: {e}",
            )

        sentiment = self.mapper.map(result.label)
        self.events.emit(
            PipelineEvent(
                CLASSIFICATION_COMPLETED,
                f"Classified {index + 1}/{count} as {result.label} ({result.score:.2f})",
                level=logging.DEBUG,
                fields={
                    **fields,
                    "raw_label": result.label,
                    "score": result.score,
                    "mapped": self.mapper.is_canonical(sentiment),
                    "elapsed_ms": round((time.monotonic() - started) * 1000, 1),
                },
            )
        )
        return ClassifiedArticle(
            article=article,
            sentiment=sentiment,
            confidence=result.score,
            raw_label=result.label,
        )
