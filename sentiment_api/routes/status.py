"""Upstream connectivity status endpoint."""

from collections.abc import Callable
from typing import Annotated

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from sentiment_api.core.config import Settings
from sentiment_api.core.status import UpstreamStatus, check_classifier, check_news_search

router = APIRouter()


class UpstreamStatusResponse(BaseModel):
    """Reachability of one upstream."""

    connected: bool
    status: str
    message: str


class StatusResponse(BaseModel):
    """Reachability of both upstreams."""

    gnews: UpstreamStatusResponse
    huggingface: UpstreamStatusResponse


def get_status_settings() -> Settings:
    """Settings for the status probes."""
    return Settings.from_env()


def get_news_checker() -> Callable[[Settings], UpstreamStatus]:
    return check_news_search


def get_classifier_checker() -> Callable[[Settings], UpstreamStatus]:
    return check_classifier


@router.get("", response_model=StatusResponse)
def upstream_status(
    settings: Annotated[Settings, Depends(get_status_settings)],
    news_checker: Annotated[Callable[[Settings], UpstreamStatus], Depends(get_news_checker)],
    classifier_checker: Annotated[
        Callable[[Settings], UpstreamStatus], Depends(get_classifier_checker)
    ],
) -> StatusResponse:
    """Probe the news search API and the hosted classifier.

    Always returns 200; each upstream reports connected, error, no-key or
    loading (classifier model still warming up).
    """
    news = news_checker(settings)
    classifier = classifier_checker(settings)
    return StatusResponse(
        gnews=UpstreamStatusResponse(**news.to_dict()),
        huggingface=UpstreamStatusResponse(**classifier.to_dict()),
    )
