"""Hosted text-classification client (Hugging Face Inference API).

One POST per text, no batching. The hosted model may be cold: while it loads
the API answers with ``{"error": "... is currently loading", "estimated_time": 20.0}``.
That case is raised as ModelWarmingUp so callers can tell the user to retry
later instead of treating it as a hard failure.

Usage:
    client = ClassifierClient(api_token="hf_...")
    result = client.classify("Government announces new infrastructure plan")
    result.label, result.score
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any

import httpx

from sentiment_api.core.config import (
    DEFAULT_CLASSIFIER_TIMEOUT,
    DEFAULT_HF_INFERENCE_BASE_URL,
    DEFAULT_SENTIMENT_MODEL_ID,
    ENV_HUGGINGFACE_API_KEY,
)
from sentiment_api.domain.exceptions import (
    ConfigurationError,
    MalformedResponse,
    ModelWarmingUp,
    UpstreamUnavailable,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Classification:
    """Best label for one text and its confidence, as reported upstream."""

    label: str
    score: float

    def to_dict(self) -> dict:
        return {"label": self.label, "score": self.score}


def _is_score(value: Any) -> bool:
    """A confidence must be a real number in [0, 1]."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value) and 0 <= value <= 1


def _is_candidate(item: Any) -> bool:
    return (
        isinstance(item, dict)
        and isinstance(item.get("label"), str)
        and _is_score(item.get("score"))
    )


def _best_candidate(candidates: list[Any], body: Any) -> Classification:
    if not candidates or not all(_is_candidate(c) for c in candidates):
        raise MalformedResponse("Candidate list is empty or has invalid entries", body=body)
    best = max(candidates, key=lambda c: c["score"])
    return Classification(label=best["label"], score=float(best["score"]))


def parse_classifier_body(body: Any) -> Classification:
    """Select the best label from a classifier response body.

    Accepted shapes:
        [[{label, score}, ...]]  ranked candidates, max score wins
        [{label, score}, ...]    same, without the outer batch list
        {label, score}           single prediction

    Raises:
        ModelWarmingUp: Body is an error object mentioning "loading"
        UpstreamUnavailable: Body is any other error object
        MalformedResponse: Anything else
    """
    if isinstance(body, dict):
        error = body.get("error")
        if error is not None:
            message = str(error)
            if "loading" in message.lower():
                estimated = body.get("estimated_time")
                raise ModelWarmingUp(
                    f"Model is loading, try again later: {message}",
                    estimated_time=float(estimated) if isinstance(estimated, int | float) else None,
                )
            raise UpstreamUnavailable(f"Classifier error: {message}")
        if _is_candidate(body):
            return Classification(label=body["label"], score=float(body["score"]))
        raise MalformedResponse("Object has no valid label/score pair", body=body)

    if isinstance(body, list) and body:
        first = body[0]
        if isinstance(first, list):
            return _best_candidate(first, body)
        return _best_candidate(body, body)

    raise MalformedResponse(f"Unexpected response format: {type(body).__name__}", body=body)


class ClassifierClient:
    """Client for one hosted text-classification model."""

    def __init__(
        self,
        api_token: str,
        model_id: str = DEFAULT_SENTIMENT_MODEL_ID,
        base_url: str = DEFAULT_HF_INFERENCE_BASE_URL,
        timeout: float = DEFAULT_CLASSIFIER_TIMEOUT,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            api_token: Inference API token
            model_id: Model identifier, appended to base_url
            base_url: Inference API root
            timeout: Default seconds allowed per call
            transport: Optional httpx transport (tests use httpx.MockTransport)

        Raises:
            ConfigurationError: If api_token is empty
        """
        if not api_token:
            raise ConfigurationError(
                f"{ENV_HUGGINGFACE_API_KEY} is not set", setting=ENV_HUGGINGFACE_API_KEY
            )
        self.api_token = api_token
        self.model_id = model_id
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @property
    def url(self) -> str:
        return f"{self.base_url}/{self.model_id}"

    def _get_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_token}",
            "Content-Type": "application/json",
        }

    def classify(self, text: str, timeout: float | None = None) -> Classification:
        """Classify one text.

        Args:
            text: Input text (an article headline)
            timeout: Per-call override of the default timeout

        Returns:
            Classification with the single best label and its score

        Raises:
            UpstreamUnavailable: Transport error, timeout, or HTTP error status
            ModelWarmingUp: Model still loading
            MalformedResponse: Unrecognized body shape
        """
        call_timeout = timeout if timeout is not None else self.timeout

        try:
            with httpx.Client(timeout=call_timeout, transport=self._transport) as client:
                response = client.post(
                    self.url, headers=self._get_headers(), json={"inputs": text}
                )
        except httpx.TimeoutException as e:
            raise UpstreamUnavailable(
                f"Classifier timed out after {call_timeout}s"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamUnavailable(f"Classifier request failed: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        # The loading signal usually arrives with a 503, so inspect the body first
        if isinstance(body, dict) and "loading" in str(body.get("error", "")).lower():
            return parse_classifier_body(body)

        if response.is_error:
            logger.error(f"Classifier HTTP {response.status_code} for model {self.model_id}")
            raise UpstreamUnavailable(
                f"Classifier API error: HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if body is None:
            raise MalformedResponse("Response body is not valid JSON", body=response.text)

        return parse_classifier_body(body)
