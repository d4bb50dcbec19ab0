"""Service configuration read from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta

from sentiment_api.domain.exceptions import ConfigurationError

# Environment variable names
ENV_GNEWS_API_KEY = "GNEWS_API_KEY"
ENV_GNEWS_BASE_URL = "GNEWS_BASE_URL"
ENV_HUGGINGFACE_API_KEY = "HUGGINGFACE_API_KEY"
ENV_HF_INFERENCE_BASE_URL = "HF_INFERENCE_BASE_URL"
ENV_SENTIMENT_MODEL_ID = "SENTIMENT_MODEL_ID"
ENV_CLASSIFIER_TIMEOUT = "CLASSIFIER_TIMEOUT_SECONDS"
ENV_NEWS_LANG = "NEWS_LANG"
ENV_NEWS_MAX_ARTICLES = "NEWS_MAX_ARTICLES"
ENV_NEWS_LOOKBACK_HOURS = "NEWS_LOOKBACK_HOURS"
ENV_ARTICLE_PACE = "ARTICLE_PACE_SECONDS"
ENV_COUNTRY_PACE = "COUNTRY_PACE_SECONDS"
ENV_FAILURE_POLICY = "CLASSIFICATION_FAILURE_POLICY"

# Defaults
DEFAULT_GNEWS_BASE_URL = "https://gnews.io/api/v4"
DEFAULT_HF_INFERENCE_BASE_URL = "https://api-inference.huggingface.co/models"
DEFAULT_SENTIMENT_MODEL_ID = "siebert/sentiment-roberta-large-english"
DEFAULT_CLASSIFIER_TIMEOUT = 15.0
DEFAULT_NEWS_LANG = "en"
DEFAULT_NEWS_MAX_ARTICLES = 8
DEFAULT_ARTICLE_PACE = 0.5
DEFAULT_COUNTRY_PACE = 0.5
DEFAULT_FAILURE_POLICY = "abort"


def get_gnews_api_key() -> str:
    """Get GNews API key from environment."""
    return os.environ.get(ENV_GNEWS_API_KEY, "")


def get_huggingface_api_key() -> str:
    """Get Hugging Face inference token from environment."""
    return os.environ.get(ENV_HUGGINGFACE_API_KEY, "")


def _get_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}", setting=name) from e


def _get_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}", setting=name) from e


@dataclass
class Settings:
    """Runtime settings for the pipeline.

    Attributes:
        gnews_api_key: GNews API key (required for news search)
        gnews_base_url: GNews API root
        huggingface_api_key: Hugging Face inference token (required for scoring)
        hf_inference_base_url: Inference API root; model id is appended
        sentiment_model_id: Hosted text-classification model
        classifier_timeout: Seconds allowed per classification call
        news_lang: Search language
        news_max_articles: Result cap per search
        news_lookback_hours: Recency window; None omits from/to
        article_pace: Seconds slept between article classifications
        country_pace: Seconds slept between countries in a campaign
        failure_policy: "abort" or "skip" on a classification failure
    """

    gnews_api_key: str = ""
    gnews_base_url: str = DEFAULT_GNEWS_BASE_URL
    huggingface_api_key: str = ""
    hf_inference_base_url: str = DEFAULT_HF_INFERENCE_BASE_URL
    sentiment_model_id: str = DEFAULT_SENTIMENT_MODEL_ID
    classifier_timeout: float = DEFAULT_CLASSIFIER_TIMEOUT
    news_lang: str = DEFAULT_NEWS_LANG
    news_max_articles: int = DEFAULT_NEWS_MAX_ARTICLES
    news_lookback_hours: float | None = None
    article_pace: float = DEFAULT_ARTICLE_PACE
    country_pace: float = DEFAULT_COUNTRY_PACE
    failure_policy: str = DEFAULT_FAILURE_POLICY

    def __post_init__(self) -> None:
        if self.failure_policy not in ("abort", "skip"):
            raise ConfigurationError(
                f"failure_policy must be 'abort' or 'skip', got {self.failure_policy!r}",
                setting=ENV_FAILURE_POLICY,
            )
        if self.news_max_articles < 1:
            raise ConfigurationError(
                "news_max_articles must be at least 1", setting=ENV_NEWS_MAX_ARTICLES
            )

    @property
    def news_lookback(self) -> timedelta | None:
        if self.news_lookback_hours is None:
            return None
        return timedelta(hours=self.news_lookback_hours)

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables, falling back to defaults."""
        lookback_raw = os.environ.get(ENV_NEWS_LOOKBACK_HOURS, "")
        return cls(
            gnews_api_key=get_gnews_api_key(),
            gnews_base_url=os.environ.get(ENV_GNEWS_BASE_URL, DEFAULT_GNEWS_BASE_URL),
            huggingface_api_key=get_huggingface_api_key(),
            hf_inference_base_url=os.environ.get(
                ENV_HF_INFERENCE_BASE_URL, DEFAULT_HF_INFERENCE_BASE_URL
            ),
            sentiment_model_id=os.environ.get(
                ENV_SENTIMENT_MODEL_ID, DEFAULT_SENTIMENT_MODEL_ID
            ),
            classifier_timeout=_get_float(ENV_CLASSIFIER_TIMEOUT, DEFAULT_CLASSIFIER_TIMEOUT),
            news_lang=os.environ.get(ENV_NEWS_LANG, DEFAULT_NEWS_LANG),
            news_max_articles=_get_int(ENV_NEWS_MAX_ARTICLES, DEFAULT_NEWS_MAX_ARTICLES),
            news_lookback_hours=(
                _get_float(ENV_NEWS_LOOKBACK_HOURS, 0.0) if lookback_raw else None
            ),
            article_pace=_get_float(ENV_ARTICLE_PACE, DEFAULT_ARTICLE_PACE),
            country_pace=_get_float(ENV_COUNTRY_PACE, DEFAULT_COUNTRY_PACE),
            failure_policy=os.environ.get(ENV_FAILURE_POLICY, DEFAULT_FAILURE_POLICY).lower(),
        )

    def require_gnews_key(self) -> str:
        if not self.gnews_api_key:
            raise ConfigurationError(
                f"{ENV_GNEWS_API_KEY} is not set", setting=ENV_GNEWS_API_KEY
            )
        return self.gnews_api_key

    def require_huggingface_key(self) -> str:
        if not self.huggingface_api_key:
            raise ConfigurationError(
                f"{ENV_HUGGINGFACE_API_KEY} is not set", setting=ENV_HUGGINGFACE_API_KEY
            )
        return self.huggingface_api_key
