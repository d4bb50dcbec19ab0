"""Dependency injection for analysis endpoints."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends

from sentiment_api.core.classifier import ClassifierClient
from sentiment_api.core.config import Settings
from sentiment_api.core.events import EventSink, LoggingEventSink
from sentiment_api.core.news_search import RetrievalStrategy, default_strategies
from sentiment_api.core.sentiment import (
    CountryCampaignRunner,
    TextClassifier,
    build_campaign_runner,
)
from sentiment_api.domain.exceptions import ConfigurationError
from sentiment_api.routes.analysis.helpers import error_to_http


def get_settings() -> Settings:
    """Get settings from the environment."""
    try:
        return Settings.from_env()
    except ConfigurationError as e:
        raise error_to_http(e) from e


def get_event_sink() -> EventSink:
    """Get the event sink (logging by default)."""
    return LoggingEventSink()


def get_strategy_factory(
    settings: Annotated[Settings, Depends(get_settings)],
) -> Callable[[], list[RetrievalStrategy]]:
    """Get a factory that builds a fresh ranked strategy list per country."""
    try:
        api_key = settings.require_gnews_key()
    except ConfigurationError as e:
        raise error_to_http(e) from e
    return lambda: default_strategies(api_key, settings.gnews_base_url)


def get_classifier(
    settings: Annotated[Settings, Depends(get_settings)],
) -> TextClassifier:
    """Get the hosted classifier client."""
    try:
        return ClassifierClient(
            api_token=settings.require_huggingface_key(),
            model_id=settings.sentiment_model_id,
            base_url=settings.hf_inference_base_url,
            timeout=settings.classifier_timeout,
        )
    except ConfigurationError as e:
        raise error_to_http(e) from e


def get_campaign_runner(
    settings: Annotated[Settings, Depends(get_settings)],
    strategy_factory: Annotated[
        Callable[[], list[RetrievalStrategy]], Depends(get_strategy_factory)
    ],
    classifier: Annotated[TextClassifier, Depends(get_classifier)],
    event_sink: Annotated[EventSink, Depends(get_event_sink)],
) -> CountryCampaignRunner:
    """Get a campaign runner wired with the injected collaborators."""
    return build_campaign_runner(
        settings,
        strategy_factory=strategy_factory,
        classifier=classifier,
        event_sink=event_sink,
    )
