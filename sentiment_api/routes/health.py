"""Health check endpoints."""

from fastapi import APIRouter, Response

from sentiment_api.core.config import (
    ENV_GNEWS_API_KEY,
    ENV_HUGGINGFACE_API_KEY,
    get_gnews_api_key,
    get_huggingface_api_key,
)

router = APIRouter()


@router.get("")
def health_check() -> dict:
    return {"status": "healthy"}


@router.get("/live")
def liveness() -> dict:
    """Liveness probe: the process is serving requests."""
    return {"status": "alive"}


@router.get("/ready")
def readiness(response: Response) -> dict:
    """Readiness probe: both upstream API keys are configured.

    Answers 503 listing the missing settings otherwise. Does not call the
    upstreams; use /status for reachability.
    """
    missing = [
        name
        for name, value in (
            (ENV_GNEWS_API_KEY, get_gnews_api_key()),
            (ENV_HUGGINGFACE_API_KEY, get_huggingface_api_key()),
        )
        if not value
    ]
    if missing:
        response.status_code = 503
        return {"status": "not-ready", "missing": missing}
    return {"status": "ready"}
