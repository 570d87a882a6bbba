"""Rate limiting adapters.

A small abstraction layer so the in-memory limiter can later be replaced by
a shared store without changing the HTTP layer.
"""

from arky_backend.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult
from arky_backend.adapters.rate_limit.in_memory import (
    FALLBACK_KEY,
    InMemoryFixedWindowRateLimiter,
)

__all__ = [
    "AbstractRateLimiter",
    "FALLBACK_KEY",
    "InMemoryFixedWindowRateLimiter",
    "RateLimitResult",
]
