"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients.

    Fields are optional to keep backward compatibility while encouraging
    consistent shapes across the codebase.
    """

    field: str
    limit: int
    retry_after: int
    provider: str
    context: dict[str, Any]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message (safe to show to clients).
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    status_code = 500

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class ValidationAppError(AppError):
    """Raised when client input validation fails."""

    status_code = 400


@dataclass
class RateLimitAppError(AppError):
    """Raised when a client exceeds its request budget."""

    headers: dict[str, str] | None = None

    status_code = 429


class ConfigurationAppError(AppError):
    """Raised when a collaborator cannot be used because credentials are missing."""

    status_code = 500


class UpstreamServiceError(AppError):
    """Raised when the AI service or the mail transport fails."""

    status_code = 500
