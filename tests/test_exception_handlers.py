"""Tests for global exception handlers.

Validates that all exception types are handled consistently with
proper HTTP status codes, error format, and no information leakage.
"""

import asyncio
import json
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from pydantic import BaseModel

from arky_backend.core.errors import (
    AppError,
    ConfigurationAppError,
    RateLimitAppError,
    UpstreamServiceError,
    ValidationAppError,
)
from arky_backend.core.exception_handlers import general_exception_handler, setup_exception_handlers


class _Body(BaseModel):
    count: int


@pytest.fixture
def app_with_handlers() -> FastAPI:
    """Create FastAPI app with exception handlers and a few failing routes."""
    app = FastAPI()
    setup_exception_handlers(app)

    @app.get("/validation")
    async def validation():
        raise ValidationAppError(code="message_required", message="Message is required.")

    @app.get("/rate-limited")
    async def rate_limited():
        raise RateLimitAppError(
            code="rate_limit_exceeded",
            message="Slow down.",
            details={"retry_after": 30},
            headers={"Retry-After": "30"},
        )

    @app.get("/configuration")
    async def configuration():
        raise ConfigurationAppError(code="smtp_missing_credentials", message="Server email configuration missing.")

    @app.get("/upstream")
    async def upstream():
        raise UpstreamServiceError(code="llm_unavailable", message="Failed to connect to AI service.")

    @app.post("/body")
    async def body(payload: _Body):
        return {"count": payload.count}

    return app


@pytest.fixture
def client(app_with_handlers: FastAPI) -> TestClient:
    return TestClient(app_with_handlers)


class TestAppErrorHandler:
    """Test handler for AppError and subclasses."""

    @pytest.mark.parametrize(
        ("path", "status", "code"),
        [
            ("/validation", 400, "message_required"),
            ("/rate-limited", 429, "rate_limit_exceeded"),
            ("/configuration", 500, "smtp_missing_credentials"),
            ("/upstream", 500, "llm_unavailable"),
        ],
    )
    def test_status_code_per_error_type(self, client: TestClient, path, status, code):
        response = client.get(path)

        assert response.status_code == status
        error = response.json()["error"]
        assert error["code"] == code
        assert "request_id" in error

    def test_rate_limit_error_carries_headers_and_details(self, client: TestClient):
        response = client.get("/rate-limited")

        assert response.headers["Retry-After"] == "30"
        assert response.json()["error"]["details"] == {"retry_after": 30}

    def test_details_omitted_when_absent(self, client: TestClient):
        error = client.get("/validation").json()["error"]

        assert "details" not in error

    def test_app_error_str_is_message(self):
        assert str(UpstreamServiceError(code="x", message="boom")) == "boom"


class TestRequestValidationHandler:
    def test_invalid_body_is_400(self, client: TestClient):
        response = client.post("/body", json={"count": "many"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "invalid_request"
        assert "body.count" in error["details"]["context"]["fields"]

    def test_invalid_json_is_400(self, client: TestClient):
        response = client.post("/body", content=b"{", headers={"Content-Type": "application/json"})

        assert response.status_code == 400


class TestGeneralExceptionHandler:
    """Test fallback handler for unexpected exceptions."""

    def test_general_exception_handler_logic(self):
        request = AsyncMock()
        request.url.path = "/api/chat"
        request.method = "POST"

        exc = RuntimeError("Unexpected error: SMTP password hunter2 rejected")
        response = asyncio.run(general_exception_handler(request, exc))

        data = json.loads(bytes(response.body).decode())
        assert response.status_code == 500
        assert data["error"]["code"] == "internal_server_error"
        assert "hunter2" not in data["error"]["message"]
        assert "request_id" in data["error"]

    def test_unexpected_exception_through_app(self, app_with_handlers: FastAPI):
        @app_with_handlers.get("/boom")
        async def boom():
            raise KeyError("internal detail")

        client = TestClient(app_with_handlers, raise_server_exceptions=False)
        response = client.get("/boom")

        assert response.status_code == 500
        assert "internal detail" not in response.text
        assert "KeyError" not in response.text


class TestErrorHandlerIntegration:
    def test_setup_exception_handlers_registers_handlers(self, app_with_handlers: FastAPI):
        assert AppError in app_with_handlers.exception_handlers
        assert Exception in app_with_handlers.exception_handlers

    def test_multiple_handler_setups_does_not_fail(self):
        app = FastAPI()

        setup_exception_handlers(app)
        setup_exception_handlers(app)

        assert AppError in app.exception_handlers
