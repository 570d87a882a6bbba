"""Rate limiting dependencies for FastAPI routes.

This module wires the rate limiting adapter into the HTTP layer.

Design goals:
- Minimal coupling: routes depend on a guard dependency only.
- Explicit state: limiter instances are built per application and kept on
  ``app.state``, so each app (and each test) gets independent counters.
- Swap-friendly: storage backend can be replaced behind an abstract interface.

Rate limiting strategy:
- One fixed-window limiter per route group (chat, contact).
- Keyed by client IP; unresolvable or malformed addresses share the
  ``unknown`` bucket instead of bypassing the limit.
"""

from __future__ import annotations

import hashlib
import ipaddress
import logging
import time
from dataclasses import dataclass
from typing import Callable

from fastapi import Request, Response

from arky_backend.adapters.rate_limit import (
    FALLBACK_KEY,
    AbstractRateLimiter,
    InMemoryFixedWindowRateLimiter,
    RateLimitResult,
)
from arky_backend.core.config import AppSettings
from arky_backend.core.errors import RateLimitAppError

logger = logging.getLogger(__name__)

CHAT = "chat"
CONTACT = "contact"


@dataclass(frozen=True)
class RateLimitPolicy:
    """Configuration of one named limiter."""

    name: str
    limit: int
    window_seconds: int
    message: str

    def describe(self) -> str:
        """Human description, e.g. "10 requests per minute"."""
        noun = "request" if self.limit == 1 else "requests"
        return f"{self.limit} {noun} per {_describe_window(self.window_seconds)}"


def _describe_window(seconds: int) -> str:
    for unit, size in (("hour", 3600), ("minute", 60)):
        if seconds % size == 0:
            count = seconds // size
            return unit if count == 1 else f"{count} {unit}s"
    return "second" if seconds == 1 else f"{seconds} seconds"


def build_policies(app_settings: AppSettings) -> dict[str, RateLimitPolicy]:
    """Build the chat and contact policies from application settings."""
    return {
        CHAT: RateLimitPolicy(
            name=CHAT,
            limit=app_settings.chat_rate_limit_requests,
            window_seconds=app_settings.chat_rate_limit_window_seconds,
            message=app_settings.chat_rate_limit_message,
        ),
        CONTACT: RateLimitPolicy(
            name=CONTACT,
            limit=app_settings.contact_rate_limit_requests,
            window_seconds=app_settings.contact_rate_limit_window_seconds,
            message=app_settings.contact_rate_limit_message,
        ),
    }


def build_rate_limiters(
    policies: dict[str, RateLimitPolicy],
    clock: Callable[[], float] = time.time,
) -> dict[str, AbstractRateLimiter]:
    """Create one independent in-memory limiter per policy."""
    return {
        name: InMemoryFixedWindowRateLimiter(
            limit=policy.limit,
            window_seconds=policy.window_seconds,
            clock=clock,
        )
        for name, policy in policies.items()
    }


def _normalize_ip(candidate: str | None) -> str | None:
    """Return the canonical form of an IP address, or None if it is not one."""
    if not candidate:
        return None
    try:
        return str(ipaddress.ip_address(candidate.strip()))
    except ValueError:
        return None


def resolve_client_ip(request: Request, *, trust_forwarded_for: bool = False) -> str:
    """Extract the rate limit identity for the request.

    Args:
        request: FastAPI request.
        trust_forwarded_for: Prefer the first ``X-Forwarded-For`` hop (only
            safe behind a proxy that overwrites the header).

    Returns:
        str: Canonical client IP, or ``FALLBACK_KEY`` when none can be resolved.
    """
    if trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        ip = _normalize_ip(forwarded.split(",")[0]) if forwarded else None
        if ip:
            return ip

    client_host = request.client.host if request.client else None
    return _normalize_ip(client_host) or FALLBACK_KEY


def _hash_limiter_key(key: str) -> str:
    """Hash the rate limit key for logging without exposing client addresses."""
    return hashlib.sha256(key.encode()).hexdigest()[:16]


def _quota_headers(result: RateLimitResult) -> dict[str, str]:
    return {
        "RateLimit-Limit": str(result.limit),
        "RateLimit-Remaining": str(result.remaining),
        "RateLimit-Reset": str(result.reset_after_seconds),
    }


class RateLimitGuard:
    """FastAPI dependency enforcing one named limiter.

    Consumes one unit from the caller's budget. Allowed responses get
    ``RateLimit-*`` headers; over-budget callers get a 429 carrying the
    policy's message and a ``Retry-After`` header.
    """

    def __init__(self, name: str) -> None:
        self.name = name

    async def __call__(self, request: Request, response: Response) -> None:
        state = request.app.state
        limiter: AbstractRateLimiter = state.rate_limiters[self.name]
        policy: RateLimitPolicy = state.rate_limit_policies[self.name]
        app_settings: AppSettings = state.settings.app

        key = resolve_client_ip(request, trust_forwarded_for=app_settings.trust_forwarded_for)
        result = limiter.consume(key)
        include_headers = app_settings.rate_limit_include_headers

        if result.allowed:
            logger.debug(
                "rate_limit.allowed",
                extra={
                    "limiter": self.name,
                    "key_hash": _hash_limiter_key(key),
                    "remaining": result.remaining,
                },
            )
            if include_headers:
                response.headers.update(_quota_headers(result))
            return

        retry_after = result.retry_after_seconds or 0
        logger.warning(
            "rate_limit.exceeded",
            extra={
                "limiter": self.name,
                "key_hash": _hash_limiter_key(key),
                "fallback_bucket": key == FALLBACK_KEY,
                "limit": result.limit,
                "window_s": policy.window_seconds,
                "retry_after_s": retry_after,
            },
        )

        headers: dict[str, str] | None = None
        if include_headers:
            headers = {"Retry-After": str(retry_after), **_quota_headers(result)}

        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message=policy.message,
            details={"limit": result.limit, "retry_after": retry_after},
            headers=headers,
        )


enforce_chat_rate_limit = RateLimitGuard(CHAT)
enforce_contact_rate_limit = RateLimitGuard(CONTACT)
