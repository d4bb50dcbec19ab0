"""Sentiment aggregation module.

- Maps classifier labels onto Positive/Neutral/Negative
- Classifies a topic's headlines sequentially and tallies them
- Turns a tally into a recommendation
- Runs the analysis across countries with pacing
"""

from sentiment_api.core.sentiment.aggregation import (
    AggregationEngine,
    AggregationOutcome,
    FailurePolicy,
)
from sentiment_api.core.sentiment.campaign import (
    CampaignReport,
    CountryCampaignRunner,
    build_campaign_runner,
)
from sentiment_api.core.sentiment.cancellation import CancellationToken
from sentiment_api.core.sentiment.mapper import SentimentMapper
from sentiment_api.core.sentiment.models import (
    ClassifiedArticle,
    CountryResult,
    Recommendation,
    SentimentLabel,
    SentimentTally,
)
from sentiment_api.core.sentiment.protocols import NewsFetcher, TextClassifier
from sentiment_api.core.sentiment.recommendation import decide

__all__ = [
    "AggregationEngine",
    "AggregationOutcome",
    "CampaignReport",
    "CancellationToken",
    "ClassifiedArticle",
    "CountryCampaignRunner",
    "CountryResult",
    "FailurePolicy",
    "NewsFetcher",
    "Recommendation",
    "SentimentLabel",
    "SentimentMapper",
    "SentimentTally",
    "TextClassifier",
    "build_campaign_runner",
    "decide",
]
