"""Rate limiter interfaces.

The HTTP layer depends on this abstraction, not on the concrete in-memory
implementation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single admission decision.

    Attributes:
        allowed: Whether the request may proceed.
        limit: Max requests per window.
        remaining: Requests left in the current window (0 when blocked).
        reset_at: UNIX epoch seconds when the identity's window expires.
        reset_after_seconds: Whole seconds until that expiry.
        retry_after_seconds: Suggested wait in seconds when blocked, else None.
    """

    allowed: bool
    limit: int
    remaining: int
    reset_at: int
    reset_after_seconds: int
    retry_after_seconds: int | None


class AbstractRateLimiter(ABC):
    """Interface for per-identity admission control."""

    @abstractmethod
    def consume(self, key: str | None) -> RateLimitResult:
        """Record one request for ``key`` and decide whether it is admitted.

        Args:
            key: Client identity (e.g., IP address). Empty or missing keys are
                counted against a shared fallback bucket.

        Returns:
            RateLimitResult describing the decision. Never raises.
        """
        raise NotImplementedError
