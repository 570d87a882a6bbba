from __future__ import annotations

from fastapi import APIRouter, Request

from arky_backend import __version__
from arky_backend.schemas.health import ServiceStatus

router = APIRouter(tags=["Health"])

SERVICE_NAME = "ARKY Backend API"
PUBLIC_ENDPOINTS = ["/api/chat", "/api/contact"]


@router.get("/", response_model=ServiceStatus)
def service_status(request: Request) -> ServiceStatus:
    """Describe the running service, its endpoints and configured rate limits.

    Always returns 200: neither limiter state nor missing credentials affect it.
    """

    policies = request.app.state.rate_limit_policies
    return ServiceStatus(
        service=SERVICE_NAME,
        version=__version__,
        endpoints=PUBLIC_ENDPOINTS,
        rate_limits={name: policy.describe() for name, policy in policies.items()},
    )


@router.get("/health")
def health_check() -> dict:
    """Liveness probe for load balancers and container orchestrators.

    Returns:
        dict: A dictionary with a single "status" key set to "ok".
    """

    return {"status": "ok"}
