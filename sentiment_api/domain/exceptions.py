"""Custom exceptions for sentiment_api.

Every failure the pipeline can surface is a subclass of SentimentAPIError so
callers (route handlers, the CLI, the campaign runner) can report which step
failed instead of a bare message.
"""

from __future__ import annotations

from dataclasses import dataclass


class SentimentAPIError(Exception):
    """Base exception for all sentiment_api errors."""

    step: str = "pipeline"


class ConfigurationError(SentimentAPIError):
    """Raised when a required setting (API key, URL) is missing or invalid."""

    step = "configuration"

    def __init__(self, message: str, setting: str | None = None):
        super().__init__(message)
        self.setting = setting


# ============================================================================
# News search strategy errors
# ============================================================================


class StrategyError(SentimentAPIError):
    """Base class for a single retrieval strategy failing.

    These are recovered by the orchestrator, which moves on to the next
    strategy. They only reach callers wrapped in AllStrategiesExhausted.
    """

    step = "news_search"

    def __init__(self, message: str, strategy: str | None = None):
        super().__init__(message)
        self.strategy = strategy


class TransportError(StrategyError):
    """Network failure, timeout, or non-2xx HTTP status."""

    def __init__(
        self,
        message: str,
        strategy: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message, strategy)
        self.status_code = status_code


class UpstreamApplicationError(StrategyError):
    """Upstream answered (often HTTP 200) with an embedded error payload."""

    def __init__(
        self,
        message: str,
        strategy: str | None = None,
        errors: list[str] | None = None,
    ):
        super().__init__(message, strategy)
        self.errors = errors or []


class EmptyResult(StrategyError):
    """Structurally valid response with zero usable articles."""


@dataclass(frozen=True)
class StrategyFailure:
    """One strategy's recorded failure."""

    strategy: str
    error: StrategyError

    @property
    def kind(self) -> str:
        return type(self.error).__name__

    def to_dict(self) -> dict:
        return {
            "strategy": self.strategy,
            "kind": self.kind,
            "message": str(self.error),
        }


class AllStrategiesExhausted(SentimentAPIError):
    """Every configured retrieval strategy failed for a topic."""

    step = "news_search"

    def __init__(self, topic: str, failures: list[StrategyFailure]):
        names = ", ".join(f"{f.strategy}: {f.error}" for f in failures) or "none configured"
        super().__init__(f"All {len(failures)} strategies failed for {topic!r} ({names})")
        self.topic = topic
        self.failures = list(failures)


class NoArticlesFound(SentimentAPIError):
    """A strategy succeeded structurally but produced no articles."""

    step = "news_search"

    def __init__(self, topic: str, strategy: str | None = None):
        super().__init__(f"No articles found for {topic!r}")
        self.topic = topic
        self.strategy = strategy


# ============================================================================
# Classifier errors
# ============================================================================


class ClassificationError(SentimentAPIError):
    """Base class for classifier failures."""

    step = "classification"


class UpstreamUnavailable(ClassificationError):
    """Classifier could not be reached, timed out, or returned an HTTP error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ModelWarmingUp(ClassificationError):
    """Classifier model is still loading. Retriable later."""

    def __init__(self, message: str, estimated_time: float | None = None):
        super().__init__(message)
        self.estimated_time = estimated_time


class MalformedResponse(ClassificationError):
    """Classifier body matched none of the accepted shapes."""

    def __init__(self, message: str, body: object = None):
        super().__init__(message)
        self.body = body


# ============================================================================
# Campaign errors
# ============================================================================


class CampaignPartialFailure(SentimentAPIError):
    """One or more countries failed while others succeeded."""

    step = "campaign"

    def __init__(self, failed: dict[str, SentimentAPIError], succeeded: list[str]):
        codes = ", ".join(sorted(failed))
        super().__init__(f"{len(failed)} country analyses failed: {codes}")
        self.failed = failed
        self.succeeded = succeeded


class CampaignCancelled(SentimentAPIError):
    """Raised at a cancellation checkpoint."""

    step = "campaign"
