"""FastAPI application entrypoint."""

from fastapi import FastAPI

from sentiment_api import __version__
from sentiment_api.routes import analysis, health, root, status

app = FastAPI(
    title="Sentiment API",
    description="Government news sentiment per country, scored by a hosted classifier",
    version=__version__,
)

app.include_router(root.router)
app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(status.router, prefix="/status", tags=["status"])
app.include_router(analysis.router, prefix="/analysis", tags=["analysis"])
