"""Retrieval strategies for the news search endpoint.

A strategy is one concrete way of issuing the same logical search: its own
HTTP library, header set, and timeout. The upstream has been observed to
answer some request shapes and not others, so the orchestrator tries a ranked
list of strategies and keeps the first that works.

Strategies are cheap and stateless; build a fresh list per call with
default_strategies().
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable

import httpx
import requests

from sentiment_api.core.news_search.models import Article, SearchQuery
from sentiment_api.core.news_search.parsing import parse_search_response
from sentiment_api.domain.exceptions import (
    EmptyResult,
    StrategyError,
    TransportError,
    UpstreamApplicationError,
)

logger = logging.getLogger(__name__)

SEARCH_PATH = "/search"

BROWSER_HEADERS = {
    "Accept": "application/json, text/plain, */*",
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "DNT": "1",
    "Origin": "https://gnews.io",
    "Referer": "https://gnews.io/docs/v4",
    "Sec-Fetch-Dest": "empty",
    "Sec-Fetch-Mode": "cors",
    "Sec-Fetch-Site": "same-origin",
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    ),
}

SIMPLE_HEADERS = {
    "User-Agent": "Mozilla/5.0 (compatible; NewsBot/1.0)",
    "Accept": "application/json",
}

CURL_HEADERS = {
    "User-Agent": "curl/7.68.0",
    "Accept": "*/*",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
}

SESSION_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
    "Accept": "application/json",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}

POSTMAN_HEADERS = {
    "User-Agent": "PostmanRuntime/7.32.3",
    "Accept": "*/*",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}


class RetrievalStrategy(ABC):
    """One way of asking the news search endpoint for articles."""

    def __init__(
        self,
        name: str,
        timeout: float,
        headers: dict[str, str] | None = None,
        accept_empty: bool = False,
    ):
        self.name = name
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.accept_empty = accept_empty

    @abstractmethod
    def attempt(self, query: SearchQuery) -> list[Article]:
        """Run the search once.

        Raises:
            StrategyError: TransportError, UpstreamApplicationError or EmptyResult
        """
        ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, timeout={self.timeout})"


class HttpxSearchStrategy(RetrievalStrategy):
    """Search via httpx with a fixed header set."""

    def __init__(
        self,
        name: str,
        api_key: str,
        base_url: str,
        headers: dict[str, str],
        timeout: float,
        accept_empty: bool = False,
        transport: httpx.BaseTransport | None = None,
    ):
        super().__init__(name, timeout, headers, accept_empty)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._transport = transport

    def attempt(self, query: SearchQuery) -> list[Article]:
        try:
            with httpx.Client(
                base_url=self.base_url,
                headers=self.headers,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = client.get(SEARCH_PATH, params=query.to_params(self.api_key))
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Timed out after {self.timeout}s", strategy=self.name
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Request failed: {e}", strategy=self.name) from e

        if response.is_error:
            raise TransportError(
                f"HTTP {response.status_code}",
                strategy=self.name,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamApplicationError(
                "Response body is not valid JSON", strategy=self.name
            ) from e

        return parse_search_response(payload, strategy=self.name, accept_empty=self.accept_empty)


class RequestsSearchStrategy(RetrievalStrategy):
    """Search via a requests Session with a fixed header set."""

    def __init__(
        self,
        name: str,
        api_key: str,
        base_url: str,
        headers: dict[str, str],
        timeout: float,
        accept_empty: bool = False,
        session_factory: Callable[[], requests.Session] = requests.Session,
    ):
        super().__init__(name, timeout, headers, accept_empty)
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._session_factory = session_factory

    def attempt(self, query: SearchQuery) -> list[Article]:
        url = f"{self.base_url}{SEARCH_PATH}"
        try:
            with self._session_factory() as session:
                response = session.get(
                    url,
                    params=query.to_params(self.api_key),
                    headers=self.headers,
                    timeout=self.timeout,
                )
        except requests.Timeout as e:
            raise TransportError(
                f"Timed out after {self.timeout}s", strategy=self.name
            ) from e
        except requests.RequestException as e:
            raise TransportError(f"Request failed: {e}", strategy=self.name) from e

        if not response.ok:
            raise TransportError(
                f"HTTP {response.status_code}",
                strategy=self.name,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamApplicationError(
                "Response body is not valid JSON", strategy=self.name
            ) from e

        return parse_search_response(payload, strategy=self.name, accept_empty=self.accept_empty)


class AlternativeQueryStrategy(RetrievalStrategy):
    """Retry an inner strategy with each of the query's alternative term sets.

    Returns the first alternative that yields articles. The inner strategy's
    timeout bounds every individual call.
    """

    def __init__(self, inner: RetrievalStrategy, name: str = "alternative-queries"):
        super().__init__(name, inner.timeout, inner.headers, inner.accept_empty)
        self.inner = inner

    def attempt(self, query: SearchQuery) -> list[Article]:
        candidates = query.alternatives or (query.terms,)
        last_error: StrategyError | None = None

        for terms in candidates:
            try:
                articles = self.inner.attempt(query.with_terms(terms))
            except StrategyError as e:
                logger.info(f"Alternative query {terms!r} failed: {e}")
                last_error = e
                continue
            logger.info(f"Alternative query {terms!r} returned {len(articles)} articles")
            return articles

        message = f"All {len(candidates)} alternative queries failed (last: {last_error})"
        if isinstance(last_error, EmptyResult):
            raise EmptyResult(message, strategy=self.name) from last_error
        if isinstance(last_error, UpstreamApplicationError):
            raise UpstreamApplicationError(
                message, strategy=self.name, errors=last_error.errors
            ) from last_error
        raise TransportError(message, strategy=self.name) from last_error


def default_strategies(
    api_key: str,
    base_url: str,
    httpx_transport: httpx.BaseTransport | None = None,
    session_factory: Callable[[], requests.Session] = requests.Session,
) -> list[RetrievalStrategy]:
    """Build the ranked strategy list, cheapest and most reliable first.

    Args:
        api_key: News search API key
        base_url: News search API root
        httpx_transport: Optional transport for the httpx-based strategies
        session_factory: Session factory for the requests-based strategies

    Returns:
        Fresh list of strategies in the order they should be tried
    """
    return [
        HttpxSearchStrategy(
            "browser-style", api_key, base_url, BROWSER_HEADERS, 8.0,
            transport=httpx_transport,
        ),
        HttpxSearchStrategy(
            "simple", api_key, base_url, SIMPLE_HEADERS, 8.0,
            transport=httpx_transport,
        ),
        RequestsSearchStrategy(
            "curl-style", api_key, base_url, CURL_HEADERS, 10.0,
            session_factory=session_factory,
        ),
        RequestsSearchStrategy(
            "session", api_key, base_url, SESSION_HEADERS, 10.0,
            session_factory=session_factory,
        ),
        AlternativeQueryStrategy(
            HttpxSearchStrategy(
                "postman-style", api_key, base_url, POSTMAN_HEADERS, 6.0,
                transport=httpx_transport,
            ),
        ),
    ]
