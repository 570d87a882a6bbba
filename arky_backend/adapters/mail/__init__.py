"""Mail transport adapters used by the contact relay."""

from arky_backend.adapters.mail.base import AbstractMailTransport
from arky_backend.adapters.mail.factory import create_mail_transport
from arky_backend.adapters.mail.smtp_transport import SMTPMailTransport

__all__ = [
    "AbstractMailTransport",
    "SMTPMailTransport",
    "create_mail_transport",
]
