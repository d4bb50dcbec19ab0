"""Country table: display names and government news search terms.

Covers the ten ASEAN member states. Each country gets a primary search term
plus fallback variations used by the alternative-queries strategy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from sentiment_api.core.news_search.models import SearchQuery


@dataclass(frozen=True)
class Country:
    """A country the campaign can analyze."""

    code: str
    name: str
    search_name: str  # lowercase English name used in queries

    @property
    def terms(self) -> tuple[str, ...]:
        return (f"{self.search_name} government",)

    @property
    def alternatives(self) -> tuple[tuple[str, ...], ...]:
        return (
            self.terms,
            (f"{self.search_name} politics",),
            (f"{self.search_name} news",),
            (self.search_name,),
        )

    def to_dict(self) -> dict:
        return {"code": self.code, "name": self.name, "query": " OR ".join(self.terms)}


COUNTRIES: dict[str, Country] = {
    c.code: c
    for c in (
        Country("BN", "Brunei Darussalam", "brunei"),
        Country("KH", "Cambodia", "cambodia"),
        Country("ID", "Indonesia", "indonesia"),
        Country("LA", "Laos", "laos"),
        Country("MY", "Malaysia", "malaysia"),
        Country("MM", "Myanmar", "myanmar"),
        Country("PH", "Philippines", "philippines"),
        Country("SG", "Singapore", "singapore"),
        Country("TH", "Thailand", "thailand"),
        Country("VN", "Vietnam", "vietnam"),
    )
}

DEFAULT_CAMPAIGN: tuple[str, ...] = tuple(COUNTRIES)


def get_country(code: str) -> Country:
    """Look up a country, falling back to the code itself for unknown ones."""
    normalized = code.strip().upper()
    if normalized in COUNTRIES:
        return COUNTRIES[normalized]
    return Country(normalized, normalized, normalized.lower())


def build_country_query(
    code: str,
    lang: str = "en",
    max_results: int = 8,
    lookback: timedelta | None = None,
) -> SearchQuery:
    """Build the government-news SearchQuery for a country code."""
    country = get_country(code)
    return SearchQuery(
        terms=country.terms,
        lang=lang,
        max_results=max_results,
        lookback=lookback,
        alternatives=country.alternatives,
    )
