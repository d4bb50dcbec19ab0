"""Helpers for analysis endpoints: response building and error mapping."""

from fastapi import HTTPException

from sentiment_api.core.sentiment import CampaignReport, CountryResult
from sentiment_api.domain.exceptions import (
    AllStrategiesExhausted,
    ClassificationError,
    ModelWarmingUp,
    NoArticlesFound,
    SentimentAPIError,
)
from sentiment_api.routes.analysis.models import (
    CampaignResponse,
    CountryAnalysisResponse,
    CountryFailureResponse,
    StrategyCauseResponse,
)


def result_to_response(result: CountryResult) -> CountryAnalysisResponse:
    """Convert a CountryResult to its API model."""
    return CountryAnalysisResponse(**result.to_dict())


def error_detail(error: SentimentAPIError) -> dict:
    """Structured error body: which step failed, and why."""
    detail = {
        "step": error.step,
        "error": type(error).__name__,
        "message": str(error),
    }
    if isinstance(error, AllStrategiesExhausted):
        detail["causes"] = [f.to_dict() for f in error.failures]
    if isinstance(error, ModelWarmingUp):
        detail["estimated_time"] = error.estimated_time
    return detail


def error_status_code(error: SentimentAPIError) -> int:
    if isinstance(error, NoArticlesFound):
        return 404
    if isinstance(error, ModelWarmingUp):
        return 503
    if isinstance(error, AllStrategiesExhausted | ClassificationError):
        return 502
    return 500


def error_to_http(error: SentimentAPIError) -> HTTPException:
    """Map a domain error to an HTTPException with a structured detail."""
    headers = None
    if isinstance(error, ModelWarmingUp) and error.estimated_time:
        headers = {"Retry-After": str(int(error.estimated_time))}
    return HTTPException(
        status_code=error_status_code(error),
        detail=error_detail(error),
        headers=headers,
    )


def report_to_response(report: CampaignReport) -> CampaignResponse:
    """Convert a CampaignReport to its API model."""
    failures = []
    for code, error in report.failures.items():
        detail = error_detail(error)
        failures.append(
            CountryFailureResponse(
                country_code=code,
                step=detail["step"],
                error=detail["error"],
                message=detail["message"],
                causes=[StrategyCauseResponse(**c) for c in detail.get("causes", [])],
            )
        )

    return CampaignResponse(
        results=[result_to_response(r) for r in report.results],
        failures=failures,
        cancelled=report.cancelled,
    )
