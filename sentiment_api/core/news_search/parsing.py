"""Parse news search response bodies into Article lists."""

from __future__ import annotations

import logging
from contextlib import suppress
from datetime import datetime
from typing import Any

from sentiment_api.core.news_search.models import Article
from sentiment_api.domain.exceptions import EmptyResult, UpstreamApplicationError

logger = logging.getLogger(__name__)


def parse_published_at(raw: Any) -> datetime | None:
    """Parse an ISO-8601 timestamp such as "2025-12-29T21:55:58Z"."""
    if not isinstance(raw, str) or not raw:
        return None
    with suppress(ValueError):
        return datetime.fromisoformat(raw.replace("Z", "+00:00"))
    return None


def _text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def parse_article(item: dict[str, Any]) -> Article | None:
    """Normalize one upstream article item.

    Returns None if it has no usable title. Non-string url and publisher
    fields become empty strings.
    """
    title = _text(item.get("title"))
    if not title:
        return None

    source = item.get("source")
    publisher = _text(source.get("name")) if isinstance(source, dict) else ""

    return Article(
        title=title,
        url=_text(item.get("url")),
        publisher_name=publisher,
        published_at=parse_published_at(item.get("publishedAt")),
    )


def parse_search_response(
    payload: Any,
    strategy: str | None = None,
    accept_empty: bool = False,
) -> list[Article]:
    """Turn a search response body into articles.

    Args:
        payload: Decoded JSON body
        strategy: Strategy name, attached to raised errors
        accept_empty: Return [] instead of raising EmptyResult

    Returns:
        List of Article objects, in upstream order

    Raises:
        UpstreamApplicationError: Body carries an ``errors`` list or has no
            ``articles`` list
        EmptyResult: No usable articles and accept_empty is False
    """
    if not isinstance(payload, dict):
        raise UpstreamApplicationError(
            f"Expected a JSON object, got {type(payload).__name__}", strategy=strategy
        )

    errors = payload.get("errors")
    if errors:
        if isinstance(errors, dict):
            errors = [str(v) for v in errors.values()]
        elif not isinstance(errors, list):
            errors = [str(errors)]
        raise UpstreamApplicationError(
            f"API error: {errors[0]}", strategy=strategy, errors=[str(e) for e in errors]
        )

    items = payload.get("articles")
    if not isinstance(items, list):
        raise UpstreamApplicationError("Response has no articles list", strategy=strategy)

    articles = []
    for item in items:
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object article item: {item!r}")
            continue
        article = parse_article(item)
        if article is None:
            logger.warning(f"Skipping article without a text title: {item.get('url')!r}")
            continue
        articles.append(article)

    if not articles and not accept_empty:
        raise EmptyResult("Search returned no articles", strategy=strategy)

    return articles
