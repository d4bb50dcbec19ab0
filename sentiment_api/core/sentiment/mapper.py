"""Map upstream classifier labels onto SentimentLabel."""

from __future__ import annotations

from sentiment_api.core.sentiment.models import SentimentLabel

# English and Indonesian spellings seen from the hosted models
DEFAULT_SYNONYMS: dict[str, SentimentLabel] = {
    "positive": SentimentLabel.POSITIVE,
    "positif": SentimentLabel.POSITIVE,
    "neutral": SentimentLabel.NEUTRAL,
    "netral": SentimentLabel.NEUTRAL,
    "negative": SentimentLabel.NEGATIVE,
    "negatif": SentimentLabel.NEGATIVE,
}


class SentimentMapper:
    """Case-insensitive synonym lookup.

    Unknown labels are returned unchanged rather than rejected, so the caller
    gets "maybe canonical, maybe passthrough".
    """

    def __init__(self, synonyms: dict[str, SentimentLabel] | None = None):
        table = DEFAULT_SYNONYMS if synonyms is None else synonyms
        self.synonyms = {key.strip().lower(): value for key, value in table.items()}

    def map(self, raw_label: str) -> SentimentLabel | str:
        return self.synonyms.get(raw_label.strip().lower(), raw_label)

    @staticmethod
    def is_canonical(value: SentimentLabel | str | None) -> bool:
        return isinstance(value, SentimentLabel)
