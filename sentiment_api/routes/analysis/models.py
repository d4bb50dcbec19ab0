"""Request and response models for analysis endpoints."""

from pydantic import BaseModel, Field

# ============================================================================
# Configuration constants
# ============================================================================

MAX_CAMPAIGN_COUNTRIES = 20
MAX_PACE_DELAY_SECONDS = 10.0


# ============================================================================
# Requests
# ============================================================================


class CountryAnalysisRequest(BaseModel):
    """Request model for single-country analysis."""

    country: str = Field(
        ...,
        min_length=2,
        max_length=8,
        description="Country code, e.g. ID, MY, SG",
    )


class CampaignRequest(BaseModel):
    """Request model for a multi-country campaign."""

    countries: list[str] | None = Field(
        None,
        min_length=1,
        max_length=MAX_CAMPAIGN_COUNTRIES,
        description="Country codes in processing order. Defaults to all supported countries.",
    )
    pace_delay_seconds: float | None = Field(
        None,
        ge=0,
        le=MAX_PACE_DELAY_SECONDS,
        description="Pause between countries. Defaults to COUNTRY_PACE_SECONDS.",
    )


# ============================================================================
# Responses
# ============================================================================


class ArticleResponse(BaseModel):
    """One classified article."""

    title: str
    url: str
    publisher_name: str
    published_at: str | None
    sentiment: str | None = Field(
        None, description="Positive/Neutral/Negative, the raw label if unmapped, or null if skipped"
    )
    confidence: float | None
    raw_label: str | None
    error: str | None = None


class TallyResponse(BaseModel):
    """Sentiment bucket counts."""

    positive: int
    neutral: int
    negative: int


class CountryAnalysisResponse(BaseModel):
    """Completed analysis for one country."""

    country_code: str
    country_name: str
    articles: list[ArticleResponse]
    tally: TallyResponse
    recommendation: str
    total_articles: int
    unclassified_count: int
    strategy: str | None
    analyzed_at: str


class StrategyCauseResponse(BaseModel):
    """Why one retrieval strategy failed."""

    strategy: str
    kind: str
    message: str


class CountryFailureResponse(BaseModel):
    """A country excluded from campaign results."""

    country_code: str
    step: str
    error: str
    message: str
    causes: list[StrategyCauseResponse] = Field(default_factory=list)


class CampaignResponse(BaseModel):
    """Campaign results in request order, plus failures."""

    results: list[CountryAnalysisResponse]
    failures: list[CountryFailureResponse]
    cancelled: bool = False


class CountryInfoResponse(BaseModel):
    """A supported country."""

    code: str
    name: str
    query: str
