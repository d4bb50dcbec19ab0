"""Analysis route handlers."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends

from sentiment_api.core.config import Settings
from sentiment_api.core.countries import COUNTRIES, DEFAULT_CAMPAIGN
from sentiment_api.core.sentiment import CountryCampaignRunner
from sentiment_api.domain.exceptions import SentimentAPIError
from sentiment_api.routes.analysis.dependencies import get_campaign_runner, get_settings
from sentiment_api.routes.analysis.helpers import (
    error_to_http,
    report_to_response,
    result_to_response,
)
from sentiment_api.routes.analysis.models import (
    CampaignRequest,
    CampaignResponse,
    CountryAnalysisRequest,
    CountryAnalysisResponse,
    CountryInfoResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/countries", response_model=list[CountryInfoResponse])
def list_countries() -> list[CountryInfoResponse]:
    """List the countries a default campaign covers."""
    return [CountryInfoResponse(**c.to_dict()) for c in COUNTRIES.values()]


@router.post("/country", response_model=CountryAnalysisResponse)
def analyze_country(
    request: CountryAnalysisRequest,
    runner: Annotated[CountryCampaignRunner, Depends(get_campaign_runner)],
) -> CountryAnalysisResponse:
    """Analyze government news sentiment for one country.

    This endpoint:
    1. Searches recent government news, trying retrieval strategies in order
    2. Classifies each headline with the hosted sentiment model, one at a time
    3. Tallies Positive/Neutral/Negative and derives a recommendation

    Failures return a structured detail naming the failed step; exhausted
    searches include every strategy's cause.
    """
    try:
        result = runner.analyze_country(request.country)
    except SentimentAPIError as e:
        logger.error(f"Analysis failed for {request.country}: {e}")
        raise error_to_http(e) from e

    return result_to_response(result)


@router.post("/campaign", response_model=CampaignResponse)
def run_campaign(
    request: CampaignRequest,
    runner: Annotated[CountryCampaignRunner, Depends(get_campaign_runner)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> CampaignResponse:
    """Analyze several countries sequentially.

    Countries that fail are reported under ``failures`` and excluded from
    ``results``; the campaign itself never fails because of one country.
    """
    countries = request.countries or list(DEFAULT_CAMPAIGN)
    pace = (
        request.pace_delay_seconds
        if request.pace_delay_seconds is not None
        else settings.country_pace
    )

    report = runner.run_campaign(countries, pace_delay=pace)
    return report_to_response(report)
