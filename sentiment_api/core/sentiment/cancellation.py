"""Cooperative cancellation for long-running campaigns."""

import threading

from sentiment_api.domain.exceptions import CampaignCancelled


class CancellationToken:
    """Thread-safe cancel flag checked at country and article boundaries.

    ``wait`` doubles as an interruptible sleep for pacing delays.
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self.reason: str | None = None

    def cancel(self, reason: str = "cancelled") -> None:
        self.reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Sleep up to ``seconds``; return True early if cancelled."""
        if seconds <= 0:
            return self.cancelled
        return self._event.wait(seconds)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise CampaignCancelled(f"Campaign cancelled: {self.reason}")
