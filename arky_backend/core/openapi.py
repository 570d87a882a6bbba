"""OpenAPI metadata customization.

Adds tag descriptions to the generated schema and documents the rate-limit
response headers on the throttled routes. Kept apart from the app factory so
documentation concerns stay decoupled.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

TAGS_METADATA = [
    {"name": "Chat", "description": "Relay to the ARKY demo assistant."},
    {"name": "Contact", "description": "Website contact form delivered by email."},
    {"name": "Health", "description": "Service status and liveness checks."},
]

RATE_LIMITED_PATHS = ("/api/chat", "/api/contact")

_RATE_LIMIT_HEADERS = {
    "RateLimit-Limit": "Requests allowed per window.",
    "RateLimit-Remaining": "Requests left in the current window.",
    "RateLimit-Reset": "Seconds until the window resets.",
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation with tags and rate-limit docs."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        paths = schema.get("paths", {})
        for path in RATE_LIMITED_PATHS:
            operation = paths.get(path, {}).get("post")
            if not isinstance(operation, dict):
                continue
            responses = operation.setdefault("responses", {})
            responses.setdefault(
                "429",
                {
                    "description": "Rate limit exceeded.",
                    "headers": {
                        "Retry-After": {
                            "description": "Seconds to wait before retrying.",
                            "schema": {"type": "integer"},
                        }
                    },
                },
            )
            ok = responses.get("200")
            if isinstance(ok, dict):
                headers = ok.setdefault("headers", {})
                for name, description in _RATE_LIMIT_HEADERS.items():
                    headers.setdefault(
                        name, {"description": description, "schema": {"type": "integer"}}
                    )

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
