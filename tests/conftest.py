"""Pytest configuration and fixtures for all tests.

This module ensures tests run in isolation from production environment variables.
"""

import os

import pytest

from sentiment_api.core.config import (
    ENV_ARTICLE_PACE,
    ENV_CLASSIFIER_TIMEOUT,
    ENV_COUNTRY_PACE,
    ENV_FAILURE_POLICY,
    ENV_GNEWS_API_KEY,
    ENV_GNEWS_BASE_URL,
    ENV_HF_INFERENCE_BASE_URL,
    ENV_HUGGINGFACE_API_KEY,
    ENV_NEWS_LANG,
    ENV_NEWS_LOOKBACK_HOURS,
    ENV_NEWS_MAX_ARTICLES,
    ENV_SENTIMENT_MODEL_ID,
)

# Environment variables that should not leak into tests
SERVICE_ENV_VARS = [
    ENV_GNEWS_API_KEY,
    ENV_GNEWS_BASE_URL,
    ENV_HUGGINGFACE_API_KEY,
    ENV_HF_INFERENCE_BASE_URL,
    ENV_SENTIMENT_MODEL_ID,
    ENV_CLASSIFIER_TIMEOUT,
    ENV_NEWS_LANG,
    ENV_NEWS_MAX_ARTICLES,
    ENV_NEWS_LOOKBACK_HOURS,
    ENV_ARTICLE_PACE,
    ENV_COUNTRY_PACE,
    ENV_FAILURE_POLICY,
]


@pytest.fixture(autouse=True)
def isolate_from_env():
    """Clear service env vars before each test to prevent external API calls.

    Saves original values, clears them for the test, then restores after.
    """
    original_values = {}
    for var in SERVICE_ENV_VARS:
        if var in os.environ:
            original_values[var] = os.environ.pop(var)

    yield

    for var in SERVICE_ENV_VARS:
        os.environ.pop(var, None)
    for var, value in original_values.items():
        os.environ[var] = value


class RecordingEventSink:
    """Event sink that keeps every event for assertions."""

    def __init__(self):
        self.events = []

    def emit(self, event) -> None:
        self.events.append(event)

    def kinds(self) -> list[str]:
        return [e.kind for e in self.events]

    def of_kind(self, kind: str) -> list:
        return [e for e in self.events if e.kind == kind]


@pytest.fixture
def event_sink():
    return RecordingEventSink()
