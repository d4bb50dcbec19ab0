"""Tests for upstream connectivity checks and the /status endpoint."""

import pytest
from fastapi.testclient import TestClient

from sentiment_api.core.config import Settings
from sentiment_api.core.news_search import Article, RetrievalStrategy
from sentiment_api.core.status import (
    STATUS_CONNECTED,
    STATUS_ERROR,
    STATUS_LOADING,
    STATUS_NO_KEY,
    UpstreamStatus,
    check_classifier,
    check_news_search,
)
from sentiment_api.domain.exceptions import (
    EmptyResult,
    ModelWarmingUp,
    TransportError,
    UpstreamUnavailable,
)
from sentiment_api.main import app
from sentiment_api.routes.status import (
    get_classifier_checker,
    get_news_checker,
    get_status_settings,
)

SETTINGS = Settings(gnews_api_key="g", huggingface_api_key="hf")

# ============================================================================
# Mock collaborators
# ============================================================================


class ProbeStrategy(RetrievalStrategy):
    def __init__(self, name, articles=None, error=None):
        super().__init__(name, timeout=1.0)
        self.articles = articles or []
        self.error = error
        self.queries = []

    def attempt(self, query):
        self.queries.append(query)
        if self.error:
            raise self.error
        return self.articles


class ProbeClassifier:
    def __init__(self, error=None):
        self.error = error
        self.texts = []

    def classify(self, text, timeout=None):
        self.texts.append(text)
        if self.error:
            raise self.error


# ============================================================================
# News search check
# ============================================================================


def test_news_check_without_key():
    status = check_news_search(Settings())

    assert status == UpstreamStatus(False, STATUS_NO_KEY, "News API key not configured")


def test_news_check_uses_probe_strategies_only():
    article = Article("t", "u", "p", None)
    strategies = [
        ProbeStrategy("browser-style", error=TransportError("HTTP 403")),
        ProbeStrategy("simple", articles=[article]),
        ProbeStrategy("curl-style", articles=[article]),
    ]

    status = check_news_search(SETTINGS, strategy_factory=lambda: strategies)

    assert status.connected
    assert status.status == STATUS_CONNECTED
    assert "curl-style" in status.message
    assert strategies[1].queries == []
    probe_query = strategies[0].queries[0]
    assert probe_query.max_results == 1
    assert probe_query.terms == ("test",)


def test_news_check_reports_error():
    strategies = [
        ProbeStrategy("browser-style", error=TransportError("HTTP 401")),
        ProbeStrategy("curl-style", error=EmptyResult("none")),
    ]

    status = check_news_search(SETTINGS, strategy_factory=lambda: strategies)

    assert not status.connected
    assert status.status == STATUS_ERROR
    assert "HTTP 401" in status.message


# ============================================================================
# Classifier check
# ============================================================================


def test_classifier_check_without_key():
    assert check_classifier(Settings()).status == STATUS_NO_KEY


def test_classifier_check_connected():
    classifier = ProbeClassifier()

    status = check_classifier(SETTINGS, client_factory=lambda s: classifier)

    assert status.connected
    assert status.status == STATUS_CONNECTED
    assert len(classifier.texts) == 1


def test_classifier_check_loading_counts_as_connected():
    classifier = ProbeClassifier(error=ModelWarmingUp("loading", estimated_time=20.0))

    status = check_classifier(SETTINGS, client_factory=lambda s: classifier)

    assert status.connected
    assert status.status == STATUS_LOADING
    assert "~20s" in status.message


def test_classifier_check_error():
    classifier = ProbeClassifier(error=UpstreamUnavailable("HTTP 500", status_code=500))

    status = check_classifier(SETTINGS, client_factory=lambda s: classifier)

    assert not status.connected
    assert status.status == STATUS_ERROR


# ============================================================================
# Endpoint
# ============================================================================


@pytest.fixture
def status_client():
    app.dependency_overrides[get_status_settings] = lambda: SETTINGS
    app.dependency_overrides[get_news_checker] = lambda: (
        lambda settings: UpstreamStatus(True, STATUS_CONNECTED, "Connected via browser-style")
    )
    app.dependency_overrides[get_classifier_checker] = lambda: (
        lambda settings: UpstreamStatus(True, STATUS_LOADING, "Model is loading")
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_status_endpoint_reports_both_upstreams(status_client):
    response = status_client.get("/status")

    assert response.status_code == 200
    assert response.json() == {
        "gnews": {"connected": True, "status": "connected", "message": "Connected via browser-style"},
        "huggingface": {"connected": True, "status": "loading", "message": "Model is loading"},
    }


def test_status_endpoint_without_keys():
    client = TestClient(app)

    response = client.get("/status")

    assert response.status_code == 200
    data = response.json()
    assert data["gnews"]["status"] == "no-key"
    assert data["huggingface"]["status"] == "no-key"
