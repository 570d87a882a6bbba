"""SMTP transport built on aiosmtplib."""

from __future__ import annotations

import logging
from email.message import Message

import aiosmtplib

from arky_backend.adapters.mail.base import AbstractMailTransport

logger = logging.getLogger(__name__)

# Port on which servers expect TLS from the first byte
IMPLICIT_TLS_PORT = 465


class SMTPMailTransport(AbstractMailTransport):
    """Send messages through an authenticated SMTP server.

    Port 465 uses implicit TLS; any other port upgrades with STARTTLS.
    A new connection is opened for every message.
    """

    def __init__(
        self,
        *,
        host: str,
        port: int,
        username: str,
        password: str,
        timeout_seconds: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.timeout_seconds = timeout_seconds

    @property
    def use_tls(self) -> bool:
        return self.port == IMPLICIT_TLS_PORT

    async def send(self, message: Message) -> None:
        try:
            await aiosmtplib.send(
                message,
                hostname=self.host,
                port=self.port,
                username=self.username,
                password=self.password,
                use_tls=self.use_tls,
                start_tls=not self.use_tls,
                timeout=self.timeout_seconds,
            )
        except aiosmtplib.SMTPException as exc:
            raise RuntimeError(f"SMTP error: {exc}") from exc
        except OSError as exc:
            raise RuntimeError(f"SMTP connection error: {exc}") from exc

        logger.debug(
            "smtp.message_sent",
            extra={"smtp_host": self.host, "smtp_port": self.port},
        )
