"""Factory for the outbound mail transport."""

from arky_backend.adapters.mail.base import AbstractMailTransport
from arky_backend.adapters.mail.smtp_transport import SMTPMailTransport
from arky_backend.core.config import SMTPSettings, settings
from arky_backend.core.errors import ConfigurationAppError


def create_mail_transport(smtp_settings: SMTPSettings | None = None) -> AbstractMailTransport:
    """Build the SMTP transport from settings.

    Raises:
        ConfigurationAppError: If SMTP user or password is missing.
    """
    cfg = smtp_settings or settings.smtp

    if not cfg.configured:
        raise ConfigurationAppError(
            code="smtp_missing_credentials",
            message="Server email configuration missing.",
        )

    return SMTPMailTransport(
        host=cfg.host,
        port=cfg.port,
        username=cfg.user or "",
        password=cfg.password or "",
        timeout_seconds=cfg.timeout_seconds,
    )
