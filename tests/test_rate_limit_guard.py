"""Tests for the rate limiting dependency, policies and identity resolution."""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from arky_backend.api.dependencies import get_llm_client, get_mail_transport
from arky_backend.core.app_factory import create_app
from arky_backend.core.config import AppSettings
from arky_backend.core.rate_limit import (
    CHAT,
    CONTACT,
    RateLimitPolicy,
    build_policies,
    resolve_client_ip,
)

from conftest import FakeLLMClient, FakeMailTransport, build_settings


def _request(client_host: str | None, headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/chat",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": (client_host, 50000) if client_host is not None else None,
    }
    return Request(scope)


class TestPolicies:
    def test_default_policies_match_routes(self):
        policies = build_policies(AppSettings())

        assert policies[CHAT].limit == 10
        assert policies[CHAT].window_seconds == 60
        assert policies[CONTACT].limit == 3
        assert policies[CONTACT].window_seconds == 900

    @pytest.mark.parametrize(
        ("limit", "window", "expected"),
        [
            (10, 60, "10 requests per minute"),
            (3, 900, "3 requests per 15 minutes"),
            (1, 3600, "1 request per hour"),
            (5, 7200, "5 requests per 2 hours"),
            (2, 45, "2 requests per 45 seconds"),
        ],
    )
    def test_describe(self, limit, window, expected):
        policy = RateLimitPolicy(name="x", limit=limit, window_seconds=window, message="slow down")
        assert policy.describe() == expected


class TestResolveClientIp:
    def test_uses_socket_peer_address(self):
        assert resolve_client_ip(_request("203.0.113.7")) == "203.0.113.7"

    def test_canonicalizes_ipv6(self):
        assert resolve_client_ip(_request("2001:DB8:0:0::1")) == "2001:db8::1"

    @pytest.mark.parametrize("host", [None, "", "testclient", "not-an-ip"])
    def test_unresolvable_peer_falls_back_to_constant_bucket(self, host):
        assert resolve_client_ip(_request(host)) == "unknown"

    def test_forwarded_for_ignored_unless_trusted(self):
        request = _request("10.0.0.1", {"X-Forwarded-For": "198.51.100.9"})
        assert resolve_client_ip(request) == "10.0.0.1"

    def test_forwarded_for_first_hop_when_trusted(self):
        request = _request("10.0.0.1", {"X-Forwarded-For": "198.51.100.9, 10.0.0.1"})
        assert resolve_client_ip(request, trust_forwarded_for=True) == "198.51.100.9"

    def test_malformed_forwarded_for_falls_back_to_peer(self):
        request = _request("10.0.0.1", {"X-Forwarded-For": "garbage"})
        assert resolve_client_ip(request, trust_forwarded_for=True) == "10.0.0.1"


class TestRateLimitGuard:
    def test_allowed_response_carries_quota_headers(self, client: TestClient):
        resp = client.post("/api/chat", json={"message": "hi"})

        assert resp.status_code == 200
        assert resp.headers["RateLimit-Limit"] == "10"
        assert resp.headers["RateLimit-Remaining"] == "9"
        assert resp.headers["RateLimit-Reset"] == "60"

    def test_rejection_body_and_headers(self, client: TestClient, clock: Mock):
        for _ in range(10):
            client.post("/api/chat", json={"message": "hi"})
        clock.return_value += 15

        resp = client.post("/api/chat", json={"message": "hi"})

        assert resp.status_code == 429
        error = resp.json()["error"]
        assert error["code"] == "rate_limit_exceeded"
        assert "spamming" in error["message"]
        assert error["details"]["retry_after"] == 45
        assert resp.headers["Retry-After"] == "45"
        assert resp.headers["RateLimit-Remaining"] == "0"

    def test_headers_can_be_disabled(self, clock: Mock):
        app = create_app(
            build_settings(rate_limit_include_headers=False, chat_rate_limit_requests=1),
            clock=clock,
            configure_logs=False,
        )
        app.dependency_overrides[get_llm_client] = lambda: FakeLLMClient()
        client = TestClient(app)

        ok = client.post("/api/chat", json={"message": "hi"})
        blocked = client.post("/api/chat", json={"message": "hi"})

        assert "RateLimit-Limit" not in ok.headers
        assert blocked.status_code == 429
        assert "Retry-After" not in blocked.headers

    def test_limits_are_per_client_ip_behind_trusted_proxy(self, clock: Mock):
        app = create_app(
            build_settings(trust_forwarded_for=True, contact_rate_limit_requests=1),
            clock=clock,
            configure_logs=False,
        )
        app.dependency_overrides[get_mail_transport] = lambda: FakeMailTransport()
        client = TestClient(app)
        body = {"firstName": "Ada", "email": "ada@example.com"}

        first = client.post("/api/contact", json=body, headers={"X-Forwarded-For": "198.51.100.1"})
        again = client.post("/api/contact", json=body, headers={"X-Forwarded-For": "198.51.100.1"})
        other = client.post("/api/contact", json=body, headers={"X-Forwarded-For": "198.51.100.2"})

        assert first.status_code == 200
        assert again.status_code == 429
        assert other.status_code == 200

    def test_chat_and_contact_limits_are_independent(self, client: TestClient, valid_contact):
        for _ in range(10):
            assert client.post("/api/chat", json={"message": "hi"}).status_code == 200
        assert client.post("/api/chat", json={"message": "hi"}).status_code == 429

        assert client.post("/api/contact", json=valid_contact).status_code == 200

    def test_each_app_has_its_own_counters(self, clock: Mock):
        settings = build_settings(chat_rate_limit_requests=1)
        first_app = create_app(settings, clock=clock, configure_logs=False)
        second_app = create_app(settings, clock=clock, configure_logs=False)
        for app in (first_app, second_app):
            app.dependency_overrides[get_llm_client] = lambda: FakeLLMClient()

        assert TestClient(first_app).post("/api/chat", json={"message": "hi"}).status_code == 200
        assert TestClient(first_app).post("/api/chat", json={"message": "hi"}).status_code == 429
        assert TestClient(second_app).post("/api/chat", json={"message": "hi"}).status_code == 200
