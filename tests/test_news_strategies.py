"""Tests for news search retrieval strategies."""

from unittest.mock import MagicMock

import httpx
import pytest
import requests

from sentiment_api.core.news_search import (
    AlternativeQueryStrategy,
    HttpxSearchStrategy,
    RequestsSearchStrategy,
    RetrievalStrategy,
    SearchQuery,
    default_strategies,
)
from sentiment_api.core.news_search.strategies import BROWSER_HEADERS, CURL_HEADERS
from sentiment_api.domain.exceptions import (
    EmptyResult,
    TransportError,
    UpstreamApplicationError,
)

BASE_URL = "https://gnews.example.com/api/v4"
QUERY = SearchQuery(terms=("malaysia government",))

ARTICLES_BODY = {
    "articles": [
        {"title": "Budget tabled", "url": "https://x/1", "source": {"name": "Star"}},
        {"title": "Minister visits", "url": "https://x/2", "source": {"name": "Star"}},
    ]
}


def make_httpx_strategy(handler, headers=None) -> HttpxSearchStrategy:
    return HttpxSearchStrategy(
        "browser-style",
        "key-123",
        BASE_URL,
        headers or BROWSER_HEADERS,
        8.0,
        transport=httpx.MockTransport(handler),
    )


def make_session_factory(response=None, error=None):
    """Session factory returning a MagicMock usable as a context manager."""
    session = MagicMock()
    session.__enter__.return_value = session
    if error is not None:
        session.get.side_effect = error
    else:
        session.get.return_value = response
    return MagicMock(return_value=session), session


def make_requests_response(status_code=200, body=None, invalid_json=False):
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    if invalid_json:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = body
    return response


# ============================================================================
# httpx strategy
# ============================================================================


def test_httpx_strategy_returns_articles():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["headers"] = request.headers
        return httpx.Response(200, json=ARTICLES_BODY)

    articles = make_httpx_strategy(handler).attempt(QUERY)

    assert [a.title for a in articles] == ["Budget tabled", "Minister visits"]
    assert seen["url"].path == "/api/v4/search"
    assert seen["url"].params["q"] == '"malaysia government"'
    assert seen["url"].params["apikey"] == "key-123"
    assert seen["url"].params["max"] == "8"
    assert seen["headers"]["user-agent"] == BROWSER_HEADERS["User-Agent"]


def test_httpx_strategy_http_error_is_transport_error():
    strategy = make_httpx_strategy(lambda request: httpx.Response(403, text="Forbidden"))

    with pytest.raises(TransportError) as exc_info:
        strategy.attempt(QUERY)

    assert exc_info.value.status_code == 403
    assert exc_info.value.strategy == "browser-style"


def test_httpx_strategy_timeout_is_transport_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(TransportError, match="Timed out after 8.0s"):
        make_httpx_strategy(handler).attempt(QUERY)


def test_httpx_strategy_connect_error_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError, match="Request failed"):
        make_httpx_strategy(handler).attempt(QUERY)


def test_httpx_strategy_embedded_errors():
    strategy = make_httpx_strategy(
        lambda request: httpx.Response(200, json={"errors": ["You have reached your daily quota"]})
    )

    with pytest.raises(UpstreamApplicationError, match="daily quota"):
        strategy.attempt(QUERY)


def test_httpx_strategy_invalid_json():
    strategy = make_httpx_strategy(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(UpstreamApplicationError, match="not valid JSON"):
        strategy.attempt(QUERY)


def test_httpx_strategy_empty_result():
    strategy = make_httpx_strategy(lambda request: httpx.Response(200, json={"articles": []}))

    with pytest.raises(EmptyResult):
        strategy.attempt(QUERY)


# ============================================================================
# requests strategy
# ============================================================================


def test_requests_strategy_returns_articles():
    factory, session = make_session_factory(make_requests_response(body=ARTICLES_BODY))
    strategy = RequestsSearchStrategy(
        "curl-style", "key-123", BASE_URL, CURL_HEADERS, 10.0, session_factory=factory
    )

    articles = strategy.attempt(QUERY)

    assert len(articles) == 2
    args, kwargs = session.get.call_args
    assert args[0] == f"{BASE_URL}/search"
    assert kwargs["timeout"] == 10.0
    assert kwargs["headers"]["User-Agent"] == "curl/7.68.0"
    assert kwargs["params"]["q"] == '"malaysia government"'


def test_requests_strategy_timeout():
    factory, _ = make_session_factory(error=requests.Timeout("slow"))
    strategy = RequestsSearchStrategy(
        "curl-style", "k", BASE_URL, CURL_HEADERS, 10.0, session_factory=factory
    )

    with pytest.raises(TransportError, match="Timed out after 10.0s"):
        strategy.attempt(QUERY)


def test_requests_strategy_connection_error():
    factory, _ = make_session_factory(error=requests.ConnectionError("refused"))
    strategy = RequestsSearchStrategy(
        "session", "k", BASE_URL, {}, 10.0, session_factory=factory
    )

    with pytest.raises(TransportError, match="Request failed"):
        strategy.attempt(QUERY)


def test_requests_strategy_http_error():
    factory, _ = make_session_factory(make_requests_response(status_code=429))
    strategy = RequestsSearchStrategy(
        "session", "k", BASE_URL, {}, 10.0, session_factory=factory
    )

    with pytest.raises(TransportError) as exc_info:
        strategy.attempt(QUERY)

    assert exc_info.value.status_code == 429


def test_requests_strategy_invalid_json():
    factory, _ = make_session_factory(make_requests_response(invalid_json=True))
    strategy = RequestsSearchStrategy(
        "session", "k", BASE_URL, {}, 10.0, session_factory=factory
    )

    with pytest.raises(UpstreamApplicationError):
        strategy.attempt(QUERY)


# ============================================================================
# Alternative queries
# ============================================================================


class ScriptedStrategy(RetrievalStrategy):
    """Returns or raises per query text, recording every query it sees."""

    def __init__(self, outcomes: dict):
        super().__init__("scripted", timeout=6.0)
        self.outcomes = outcomes
        self.seen = []

    def attempt(self, query):
        self.seen.append(query.terms)
        outcome = self.outcomes[query.terms]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_alternative_strategy_returns_first_success():
    inner = ScriptedStrategy(
        {
            ("a",): EmptyResult("none"),
            ("b",): TransportError("HTTP 500"),
            ("c",): ["article"],
            ("d",): ["never"],
        }
    )
    query = SearchQuery(terms=("a",), alternatives=(("a",), ("b",), ("c",), ("d",)))

    result = AlternativeQueryStrategy(inner).attempt(query)

    assert result == ["article"]
    assert inner.seen == [("a",), ("b",), ("c",)]


def test_alternative_strategy_without_alternatives_uses_terms():
    inner = ScriptedStrategy({("a",): ["article"]})

    assert AlternativeQueryStrategy(inner).attempt(SearchQuery(terms=("a",))) == ["article"]


def test_alternative_strategy_failure_mirrors_last_error():
    inner = ScriptedStrategy({("a",): TransportError("HTTP 500"), ("b",): EmptyResult("none")})
    query = SearchQuery(terms=("a",), alternatives=(("a",), ("b",)))

    with pytest.raises(EmptyResult, match="All 2 alternative queries failed") as exc_info:
        AlternativeQueryStrategy(inner).attempt(query)

    assert exc_info.value.strategy == "alternative-queries"


def test_alternative_strategy_inherits_inner_timeout():
    assert AlternativeQueryStrategy(ScriptedStrategy({})).timeout == 6.0


# ============================================================================
# Default ranking
# ============================================================================


def test_default_strategies_order_and_timeouts():
    strategies = default_strategies("k", BASE_URL)

    assert [s.name for s in strategies] == [
        "browser-style",
        "simple",
        "curl-style",
        "session",
        "alternative-queries",
    ]
    assert [s.timeout for s in strategies] == [8.0, 8.0, 10.0, 10.0, 6.0]
    assert isinstance(strategies[2], RequestsSearchStrategy)
    assert isinstance(strategies[4], AlternativeQueryStrategy)


def test_default_strategies_are_fresh_each_call():
    first = default_strategies("k", BASE_URL)
    second = default_strategies("k", BASE_URL)

    assert all(a is not b for a, b in zip(first, second, strict=True))
