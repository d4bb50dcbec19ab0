"""Analysis endpoints: per-country sentiment and multi-country campaigns."""

from sentiment_api.routes.analysis.dependencies import (
    get_campaign_runner,
    get_classifier,
    get_event_sink,
    get_settings,
    get_strategy_factory,
)
from sentiment_api.routes.analysis.endpoints import router
from sentiment_api.routes.analysis.models import (
    ArticleResponse,
    CampaignRequest,
    CampaignResponse,
    CountryAnalysisRequest,
    CountryAnalysisResponse,
    CountryFailureResponse,
    CountryInfoResponse,
    TallyResponse,
)

__all__ = [
    "router",
    # Models
    "ArticleResponse",
    "CampaignRequest",
    "CampaignResponse",
    "CountryAnalysisRequest",
    "CountryAnalysisResponse",
    "CountryFailureResponse",
    "CountryInfoResponse",
    "TallyResponse",
    # Dependencies
    "get_campaign_runner",
    "get_classifier",
    "get_event_sink",
    "get_settings",
    "get_strategy_factory",
]
