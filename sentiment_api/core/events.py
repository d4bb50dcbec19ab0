"""Structured pipeline events.

Core components never print. They emit PipelineEvent objects to an injected
EventSink; the default sink forwards them to the standard logging module.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

logger = logging.getLogger(__name__)

# Event kinds
STRATEGY_ATTEMPTED = "strategy.attempted"
STRATEGY_FAILED = "strategy.failed"
STRATEGY_SUCCEEDED = "strategy.succeeded"
CLASSIFICATION_COMPLETED = "classification.completed"
CLASSIFICATION_FAILED = "classification.failed"
COUNTRY_COMPLETED = "country.completed"
COUNTRY_FAILED = "country.failed"
CAMPAIGN_CANCELLED = "campaign.cancelled"


@dataclass(frozen=True)
class PipelineEvent:
    """A single leveled event with structured fields."""

    kind: str
    message: str
    level: int = logging.INFO
    fields: dict[str, Any] = field(default_factory=dict)


class EventSink(Protocol):
    """Protocol for event consumers (log, metrics, tests)."""

    def emit(self, event: PipelineEvent) -> None:
        """Consume one event."""
        ...


class LoggingEventSink:
    """Forward events to a logger, fields attached via ``extra``."""

    def __init__(self, target: logging.Logger | None = None):
        self._logger = target or logger

    def emit(self, event: PipelineEvent) -> None:
        self._logger.log(
            event.level,
            f"[{event.kind}] {event.message}",
            extra={"event_kind": event.kind, "event_fields": event.fields},
        )
