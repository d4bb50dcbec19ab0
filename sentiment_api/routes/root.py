"""Root endpoint."""

from fastapi import APIRouter

from sentiment_api import __version__

router = APIRouter(tags=["root"])


@router.get("/")
def read_root() -> dict:
    """Service banner."""
    return {
        "message": "Country news sentiment API",
        "service": "sentiment-api",
        "version": __version__,
    }
