"""First-success orchestration over ranked retrieval strategies."""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence

from sentiment_api.core.events import (
    STRATEGY_ATTEMPTED,
    STRATEGY_FAILED,
    STRATEGY_SUCCEEDED,
    EventSink,
    LoggingEventSink,
    PipelineEvent,
)
from sentiment_api.core.news_search.models import Article, FetchOutcome, SearchQuery
from sentiment_api.core.news_search.strategies import RetrievalStrategy
from sentiment_api.domain.exceptions import (
    AllStrategiesExhausted,
    StrategyError,
    StrategyFailure,
)

logger = logging.getLogger(__name__)


class FetchOrchestrator:
    """Try strategies strictly in order and return the first success.

    A strategy succeeds when its call completes, the body has no embedded
    error list, and it yields at least one article (strategies flagged
    ``accept_empty`` may succeed with none). Any StrategyError is recorded and
    the next strategy is tried. Other exceptions are bugs and propagate.
    """

    def __init__(self, event_sink: EventSink | None = None):
        self.events = event_sink or LoggingEventSink()

    def fetch(self, query: SearchQuery, strategies: Sequence[RetrievalStrategy]) -> list[Article]:
        """Return the first successful strategy's articles."""
        return self.fetch_with_report(query, strategies).articles

    def fetch_with_report(
        self,
        query: SearchQuery,
        strategies: Sequence[RetrievalStrategy],
    ) -> FetchOutcome:
        """Like fetch(), but also report which strategy won and what failed first.

        Raises:
            AllStrategiesExhausted: Every strategy failed (carries every cause)
        """
        topic = query.text
        failures: list[StrategyFailure] = []

        for position, strategy in enumerate(strategies, start=1):
            fields = {
                "topic": topic,
                "strategy": strategy.name,
                "position": position,
                "timeout": strategy.timeout,
            }
            self.events.emit(
                PipelineEvent(
                    STRATEGY_ATTEMPTED,
                    f"Trying strategy {position}/{len(strategies)} '{strategy.name}'",
                    level=logging.DEBUG,
                    fields=fields,
                )
            )

            started = time.monotonic()
            try:
                articles = strategy.attempt(query)
            except StrategyError as e:
                failures.append(StrategyFailure(strategy=strategy.name, error=e))
                self.events.emit(
                    PipelineEvent(
                        STRATEGY_FAILED,
                        f"Strategy '{strategy.name}' failed: {e}",
                        level=logging.WARNING,
                        fields={
                            **fields,
                            "error_kind": type(e).__name__,
                            "error": str(e),
                            "elapsed_ms": round((time.monotonic() - started) * 1000, 1),
                        },
                    )
                )
                continue

            self.events.emit(
                PipelineEvent(
                    STRATEGY_SUCCEEDED,
                    f"Strategy '{strategy.name}' returned {len(articles)} articles",
                    fields={
                        **fields,
                        "article_count": len(articles),
                        "prior_failures": len(failures),
                        "elapsed_ms": round((time.monotonic() - started) * 1000, 1),
                    },
                )
            )
            return FetchOutcome(
                articles=list(articles),
                strategy_name=strategy.name,
                failures=failures,
            )

        raise AllStrategiesExhausted(topic, failures)
