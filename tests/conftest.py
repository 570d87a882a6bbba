"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It selects the testing environment before settings are imported, and
provides an isolated app per test with fake collaborators and a fake clock.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from typing import Any
from unittest.mock import Mock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from arky_backend.adapters.llm.base import AbstractLLMClient
from arky_backend.adapters.mail.base import AbstractMailTransport
from arky_backend.api.dependencies import get_llm_client, get_mail_transport
from arky_backend.core.app_factory import create_app
from arky_backend.core.config import (
    AppSettings,
    CORSSettings,
    LLMSettings,
    LogSettings,
    ServerSettings,
    Settings,
    SMTPSettings,
)


class FakeLLMClient(AbstractLLMClient):
    """Deterministic stand-in for the generative-AI service."""

    def __init__(self, reply: str | None = "ARKY can automate your reports.", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def generate(self, prompt: str, *, system_instruction: str | None = None, **kwargs: Any) -> str | None:
        self.calls.append({"prompt": prompt, "system_instruction": system_instruction})
        if self.error is not None:
            raise self.error
        return self.reply


class FakeMailTransport(AbstractMailTransport):
    """Records messages instead of talking to an SMTP server."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.sent: list[Any] = []

    async def send(self, message) -> None:
        self.sent.append(message)
        if self.error is not None:
            raise self.error


def build_settings(**app_overrides: Any) -> Settings:
    """Settings with credentials present and optional AppSettings overrides."""
    return Settings(
        app_env="testing",
        llm=LLMSettings(provider="gemini", model="gemini-2.5-flash", api_key="test-llm-key"),
        smtp=SMTPSettings(
            host="smtp.example.com",
            port=587,
            user="website@example.com",
            password="smtp-secret",
            recipient="info@gkedgemedia.com",
        ),
        app=AppSettings(**app_overrides),
        cors=CORSSettings(allowed_origins="https://gkedgemedia.com,http://localhost:3000"),
        log=LogSettings(),
        server=ServerSettings(),
    )


@pytest.fixture
def clock() -> Mock:
    """Controllable UNIX clock for the rate limiters."""
    return Mock(return_value=1_000_000.0)


@pytest.fixture
def fake_llm() -> FakeLLMClient:
    return FakeLLMClient()


@pytest.fixture
def fake_transport() -> FakeMailTransport:
    return FakeMailTransport()


@pytest.fixture
def test_settings() -> Settings:
    return build_settings()


@pytest.fixture
def app(test_settings: Settings, clock: Mock, fake_llm: FakeLLMClient, fake_transport: FakeMailTransport) -> FastAPI:
    """Fresh app (fresh limiter counters) with fake collaborators."""
    application = create_app(test_settings, clock=clock, configure_logs=False)
    application.dependency_overrides[get_llm_client] = lambda: fake_llm
    application.dependency_overrides[get_mail_transport] = lambda: fake_transport
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    """Create FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def valid_contact() -> dict[str, str]:
    return {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "email": "ada@example.com",
        "userType": "team",
        "message": "We'd like a demo for our ops team.",
    }
