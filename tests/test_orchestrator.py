"""Tests for first-success strategy orchestration."""

import pytest

from sentiment_api.core.events import STRATEGY_ATTEMPTED, STRATEGY_FAILED, STRATEGY_SUCCEEDED
from sentiment_api.core.news_search import (
    Article,
    FetchOrchestrator,
    RetrievalStrategy,
    SearchQuery,
    parse_search_response,
)
from sentiment_api.domain.exceptions import (
    AllStrategiesExhausted,
    EmptyResult,
    TransportError,
    UpstreamApplicationError,
)

QUERY = SearchQuery(terms=("philippines government",))


def make_articles(count: int) -> list[Article]:
    return [
        Article(title=f"Headline {i}", url=f"https://x/{i}", publisher_name="Inquirer", published_at=None)
        for i in range(count)
    ]


class FakeStrategy(RetrievalStrategy):
    """Strategy returning a fixed article list or raising a fixed error."""

    def __init__(self, name: str, articles=None, error=None, timeout: float = 1.0):
        super().__init__(name, timeout)
        self.articles = articles or []
        self.error = error
        self.calls = 0

    def attempt(self, query):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.articles


class PayloadStrategy(RetrievalStrategy):
    """Strategy that parses a canned response body."""

    def __init__(self, name: str, payload):
        super().__init__(name, 1.0)
        self.payload = payload

    def attempt(self, query):
        return parse_search_response(self.payload, strategy=self.name)


class BrokenStrategy(RetrievalStrategy):
    def attempt(self, query):
        raise RuntimeError("programming error")


def test_first_successful_strategy_wins(event_sink):
    strategies = [
        FakeStrategy("one", error=TransportError("HTTP 503", status_code=503)),
        FakeStrategy("two", error=EmptyResult("Search returned no articles")),
        FakeStrategy("three", articles=make_articles(3)),
        FakeStrategy("four", articles=make_articles(5)),
    ]

    outcome = FetchOrchestrator(event_sink).fetch_with_report(QUERY, strategies)

    assert len(outcome.articles) == 3
    assert outcome.strategy_name == "three"
    assert [f.strategy for f in outcome.failures] == ["one", "two"]
    assert [f.kind for f in outcome.failures] == ["TransportError", "EmptyResult"]
    assert strategies[3].calls == 0


def test_fetch_returns_articles_only():
    strategies = [FakeStrategy("only", articles=make_articles(2))]

    articles = FetchOrchestrator().fetch(QUERY, strategies)

    assert [a.title for a in articles] == ["Headline 0", "Headline 1"]


def test_all_strategies_failing_raises_with_every_cause(event_sink):
    strategies = [
        FakeStrategy("one", error=TransportError("Timed out after 8.0s")),
        FakeStrategy("two", error=UpstreamApplicationError("API error: quota")),
        FakeStrategy("three", error=EmptyResult("Search returned no articles")),
    ]

    with pytest.raises(AllStrategiesExhausted) as exc_info:
        FetchOrchestrator(event_sink).fetch(QUERY, strategies)

    error = exc_info.value
    assert error.topic == '"philippines government"'
    assert [f.to_dict() for f in error.failures] == [
        {"strategy": "one", "kind": "TransportError", "message": "Timed out after 8.0s"},
        {"strategy": "two", "kind": "UpstreamApplicationError", "message": "API error: quota"},
        {"strategy": "three", "kind": "EmptyResult", "message": "Search returned no articles"},
    ]
    assert len(event_sink.of_kind(STRATEGY_FAILED)) == 3
    assert event_sink.of_kind(STRATEGY_SUCCEEDED) == []


def test_no_strategies_raises_exhausted():
    with pytest.raises(AllStrategiesExhausted, match="none configured"):
        FetchOrchestrator().fetch(QUERY, [])


def test_events_trace_each_attempt(event_sink):
    strategies = [
        FakeStrategy("one", error=TransportError("HTTP 500", status_code=500)),
        FakeStrategy("two", articles=make_articles(1)),
    ]

    FetchOrchestrator(event_sink).fetch(QUERY, strategies)

    assert event_sink.kinds() == [
        STRATEGY_ATTEMPTED,
        STRATEGY_FAILED,
        STRATEGY_ATTEMPTED,
        STRATEGY_SUCCEEDED,
    ]
    failed = event_sink.of_kind(STRATEGY_FAILED)[0]
    assert failed.fields["strategy"] == "one"
    assert failed.fields["error_kind"] == "TransportError"
    assert "elapsed_ms" in failed.fields
    succeeded = event_sink.of_kind(STRATEGY_SUCCEEDED)[0]
    assert succeeded.fields["article_count"] == 1
    assert succeeded.fields["prior_failures"] == 1


def test_unexpected_exceptions_propagate():
    strategies = [BrokenStrategy("broken", 1.0), FakeStrategy("never", articles=make_articles(1))]

    with pytest.raises(RuntimeError):
        FetchOrchestrator().fetch(QUERY, strategies)


def test_body_with_only_non_string_titles_falls_through_to_next_strategy():
    strategies = [
        PayloadStrategy("bad", {"articles": [{"title": 12345, "url": "https://x/1"}]}),
        PayloadStrategy("good", {"articles": [{"title": "Senate approves budget"}]}),
    ]

    outcome = FetchOrchestrator().fetch_with_report(QUERY, strategies)

    assert outcome.strategy_name == "good"
    assert [a.title for a in outcome.articles] == ["Senate approves budget"]
    assert [f.kind for f in outcome.failures] == ["EmptyResult"]


def test_accept_empty_strategy_can_succeed_with_no_articles():
    strategy = FakeStrategy("lenient", articles=[])
    strategy.accept_empty = True

    outcome = FetchOrchestrator().fetch_with_report(QUERY, [strategy])

    assert outcome.articles == []
    assert outcome.strategy_name == "lenient"
