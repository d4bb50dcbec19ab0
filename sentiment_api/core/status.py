"""Connectivity checks for the two upstreams (news search and classifier)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from sentiment_api.core.classifier import ClassifierClient
from sentiment_api.core.config import Settings
from sentiment_api.core.news_search.models import SearchQuery
from sentiment_api.core.news_search.orchestrator import FetchOrchestrator
from sentiment_api.core.news_search.strategies import RetrievalStrategy, default_strategies
from sentiment_api.domain.exceptions import (
    AllStrategiesExhausted,
    ClassificationError,
    ModelWarmingUp,
)

logger = logging.getLogger(__name__)

STATUS_CONNECTED = "connected"
STATUS_ERROR = "error"
STATUS_NO_KEY = "no-key"
STATUS_LOADING = "loading"

PROBE_SENTENCE = "This is a test sentence for sentiment analysis."
PROBE_STRATEGIES = ("browser-style", "curl-style")


@dataclass(frozen=True)
class UpstreamStatus:
    """Reachability of one upstream."""

    connected: bool
    status: str
    message: str

    def to_dict(self) -> dict:
        return {"connected": self.connected, "status": self.status, "message": self.message}


def check_news_search(
    settings: Settings,
    strategy_factory: Callable[[], list[RetrievalStrategy]] | None = None,
) -> UpstreamStatus:
    """Probe the news search API with a one-article query.

    Only the browser-style and curl-style strategies are tried.
    """
    if not settings.gnews_api_key:
        return UpstreamStatus(False, STATUS_NO_KEY, "News API key not configured")

    if strategy_factory is None:
        strategies = default_strategies(settings.gnews_api_key, settings.gnews_base_url)
    else:
        strategies = strategy_factory()
    probes = [s for s in strategies if s.name in PROBE_STRATEGIES] or strategies[:1]

    query = SearchQuery(terms=("test",), lang=settings.news_lang, max_results=1)
    try:
        outcome = FetchOrchestrator().fetch_with_report(query, probes)
    except AllStrategiesExhausted as e:
        logger.warning(f"News search status check failed: {e}")
        first = e.failures[0].error if e.failures else e
        return UpstreamStatus(False, STATUS_ERROR, f"Connection error: {first}")

    return UpstreamStatus(
        True,
        STATUS_CONNECTED,
        f"Connected via {outcome.strategy_name} - {len(outcome.articles)} articles ({settings.news_lang})",
    )


def check_classifier(
    settings: Settings,
    client_factory: Callable[[Settings], ClassifierClient] | None = None,
) -> UpstreamStatus:
    """Probe the classifier with a fixed sentence.

    A loading model counts as connected with status "loading".
    """
    if not settings.huggingface_api_key:
        return UpstreamStatus(False, STATUS_NO_KEY, "Classifier API key not configured")

    if client_factory is None:
        client = ClassifierClient(
            api_token=settings.huggingface_api_key,
            model_id=settings.sentiment_model_id,
            base_url=settings.hf_inference_base_url,
            timeout=settings.classifier_timeout,
        )
    else:
        client = client_factory(settings)

    try:
        client.classify(PROBE_SENTENCE)
    except ModelWarmingUp as e:
        wait = f" (~{e.estimated_time:.0f}s)" if e.estimated_time else ""
        return UpstreamStatus(
            True, STATUS_LOADING, f"Model is loading, try again in a few minutes{wait}"
        )
    except ClassificationError as e:
        logger.warning(f"Classifier status check failed: {e}")
        return UpstreamStatus(False, STATUS_ERROR, f"Connection error: {e}")

    return UpstreamStatus(True, STATUS_CONNECTED, f"Connected to model {settings.sentiment_model_id}")
