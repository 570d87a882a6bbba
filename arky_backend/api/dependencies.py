"""FastAPI dependencies providing settings, collaborators and services.

Collaborators are resolved once per application and cached on ``app.state``.
Tests substitute fakes through ``app.dependency_overrides`` on
``get_llm_client`` / ``get_mail_transport``.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request

from arky_backend.adapters.llm.base import AbstractLLMClient
from arky_backend.adapters.llm.factory import create_llm_client
from arky_backend.adapters.mail.base import AbstractMailTransport
from arky_backend.adapters.mail.factory import create_mail_transport
from arky_backend.core.config import Settings
from arky_backend.core.errors import ConfigurationAppError
from arky_backend.services.chat_service import ChatService
from arky_backend.services.contact_service import ContactService, Sender

logger = logging.getLogger(__name__)

_UNSET = object()


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_llm_client(request: Request) -> AbstractLLMClient | None:
    """Return the app's LLM client, or None when it cannot be configured."""
    state = request.app.state
    client = getattr(state, "llm_client", _UNSET)
    if client is _UNSET:
        try:
            client = create_llm_client(state.settings.llm)
        except ConfigurationAppError as exc:
            logger.warning("llm.client_unavailable", extra={"error_code": exc.code})
            client = None
        state.llm_client = client
    return client


def get_mail_transport(request: Request) -> AbstractMailTransport | None:
    """Return the app's mail transport, or None when SMTP credentials are missing."""
    state = request.app.state
    transport = getattr(state, "mail_transport", _UNSET)
    if transport is _UNSET:
        try:
            transport = create_mail_transport(state.settings.smtp)
        except ConfigurationAppError as exc:
            logger.warning("smtp.transport_unavailable", extra={"error_code": exc.code})
            transport = None
        state.mail_transport = transport
    return transport


def get_chat_service(
    llm: Annotated[AbstractLLMClient | None, Depends(get_llm_client)],
) -> ChatService:
    return ChatService(llm)


def get_contact_service(
    transport: Annotated[AbstractMailTransport | None, Depends(get_mail_transport)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> ContactService:
    smtp = settings.smtp
    sender = Sender(address=smtp.user, name=smtp.from_name) if smtp.user else None
    return ContactService(transport, sender=sender, recipient=smtp.recipient)
