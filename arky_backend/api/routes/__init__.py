from __future__ import annotations

from arky_backend.api.routes.chat import router as chat_router
from arky_backend.api.routes.contact import router as contact_router
from arky_backend.api.routes.health import router as health_router

__all__ = ["chat_router", "contact_router", "health_router"]
