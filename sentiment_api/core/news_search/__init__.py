"""News search module.

Fetches articles for a topic from the news search API:
- Several retrieval strategies issue the same logical search differently
- The orchestrator tries them in order and keeps the first success
"""

from sentiment_api.core.news_search.models import Article, FetchOutcome, SearchQuery
from sentiment_api.core.news_search.orchestrator import FetchOrchestrator
from sentiment_api.core.news_search.parsing import parse_search_response
from sentiment_api.core.news_search.strategies import (
    AlternativeQueryStrategy,
    HttpxSearchStrategy,
    RequestsSearchStrategy,
    RetrievalStrategy,
    default_strategies,
)

__all__ = [
    "AlternativeQueryStrategy",
    "Article",
    "FetchOrchestrator",
    "FetchOutcome",
    "HttpxSearchStrategy",
    "RequestsSearchStrategy",
    "RetrievalStrategy",
    "SearchQuery",
    "default_strategies",
    "parse_search_response",
]
