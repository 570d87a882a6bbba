"""In-memory fixed-window rate limiter.

Notes:
- Per-process only: running multiple workers multiplies the effective limit.
- Thread-safe: uses a lock around shared state.
- Entries are ordered by window start; pruning pops expired ones from the
  front and stops at the first live window.
- Each identity's window starts at its first request, not at a global
  boundary; the window restarts on the first request after it expires.
- Rejected requests do not consume budget, so a window's count never goes
  past the limit.
"""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable

from arky_backend.adapters.rate_limit.base import AbstractRateLimiter, RateLimitResult

# Bucket shared by requests whose identity cannot be resolved
FALLBACK_KEY = "unknown"


@dataclass
class _WindowState:
    window_start: float
    count: int


class InMemoryFixedWindowRateLimiter(AbstractRateLimiter):
    """Rate limiter using a fixed time window per key.

    Limits requests per key within a window of time (e.g., 10 requests per
    60 seconds). State lives in a dict for the lifetime of the process.

    Important:
        This limiter is per-process only. If the API runs with multiple workers
        (e.g., multiple Uvicorn/Gunicorn workers), each worker will enforce its
        own independent limits.
    """

    def __init__(
        self,
        *,
        limit: int,
        window_seconds: float,
        clock: Callable[[], float] = time.time,
        max_tracked_keys: int = 10_000,
    ) -> None:
        """Initialize the in-memory rate limiter.

        Args:
            limit: Maximum number of requests per window.
            window_seconds: Size of the window in seconds.
            clock: Time source function returning UNIX time in seconds.
            max_tracked_keys: Table size above which expired windows are pruned.

        Raises:
            ValueError: If limit or window_seconds are invalid.
        """
        if limit < 1:
            raise ValueError("limit must be >= 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")

        self._limit = limit
        self._window_seconds = window_seconds
        self._clock = clock
        self._max_tracked_keys = max_tracked_keys
        self._lock = threading.RLock()
        self._state_by_key: dict[str, _WindowState] = {}

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def window_seconds(self) -> float:
        return self._window_seconds

    def __len__(self) -> int:
        return len(self._state_by_key)

    def _expired(self, state: _WindowState, now: float) -> bool:
        return now - state.window_start >= self._window_seconds

    def _get_or_reset_state(self, key: str, now: float) -> _WindowState:
        """Get the current state for key, starting a new window when expired."""
        state = self._state_by_key.get(key)
        if state is None or self._expired(state, now):
            # Re-insert so the dict stays ordered by window start.
            self._state_by_key.pop(key, None)
            state = _WindowState(window_start=now, count=0)
            self._state_by_key[key] = state
        return state

    def prune_expired(self) -> int:
        """Drop identities whose window has expired.

        Entries are kept in window-start order, so only the expired prefix
        of the table is visited.

        Returns:
            Number of entries removed.
        """
        now = self._clock()
        stale: list[str] = []
        with self._lock:
            for key, state in self._state_by_key.items():
                if not self._expired(state, now):
                    break
                stale.append(key)
            for key in stale:
                del self._state_by_key[key]
        return len(stale)

    def _build_result(self, *, allowed: bool, state: _WindowState, now: float) -> RateLimitResult:
        reset_at = state.window_start + self._window_seconds
        reset_after = max(0, int(math.ceil(reset_at - now)))
        return RateLimitResult(
            allowed=allowed,
            limit=self._limit,
            remaining=max(0, self._limit - state.count),
            reset_at=int(math.ceil(reset_at)),
            reset_after_seconds=reset_after,
            retry_after_seconds=None if allowed else reset_after,
        )

    def consume(self, key: str | None) -> RateLimitResult:
        """Count one request for ``key`` if budget remains.

        Args:
            key: Identity to charge; falsy or non-string keys use FALLBACK_KEY.

        Returns:
            RateLimitResult with allowance decision and quota metadata.
        """
        if not key or not isinstance(key, str):
            key = FALLBACK_KEY

        now = self._clock()

        with self._lock:
            if len(self._state_by_key) > self._max_tracked_keys:
                self.prune_expired()

            state = self._get_or_reset_state(key, now)

            if state.count < self._limit:
                state.count += 1
                return self._build_result(allowed=True, state=state, now=now)

            return self._build_result(allowed=False, state=state, now=now)
