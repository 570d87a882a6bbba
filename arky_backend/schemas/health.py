"""Pydantic schemas for service status endpoints."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class ServiceStatus(BaseModel):
    """Status payload served at the root path."""

    model_config = ConfigDict(populate_by_name=True)

    status: str = Field("running", description="Always 'running' while the process serves requests.")
    service: str = Field(..., description="Human-readable service name.")
    version: str = Field(..., description="Service version.")
    endpoints: List[str] = Field(default_factory=list, description="Public API endpoints.")
    rate_limits: Dict[str, str] = Field(
        default_factory=dict,
        alias="rateLimits",
        description="Per-route limits, e.g. {'chat': '10 requests per minute'}.",
    )
