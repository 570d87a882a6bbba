"""Contact form relay: turns a submission into a lead email."""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from email.message import Message
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from arky_backend.adapters.mail.base import AbstractMailTransport
from arky_backend.core.errors import (
    ConfigurationAppError,
    UpstreamServiceError,
    ValidationAppError,
)
from arky_backend.schemas.contact import ContactSubmission

logger = logging.getLogger(__name__)

ENTERPRISE_LABEL = "Custom Solution (Enterprise)"
INDIVIDUAL_LABEL = "ARKY AI Agent (Individual)"
NO_MESSAGE = "No additional message provided."


def _single_line(value: str) -> str:
    """Collapse whitespace so visitor input cannot add header lines."""
    return " ".join(value.split())


def interest_label(user_type: str | None) -> str:
    """Map the form's interest tag to the label used in the email."""
    return ENTERPRISE_LABEL if user_type == "team" else INDIVIDUAL_LABEL


@dataclass(frozen=True)
class Sender:
    """Envelope identity of outgoing lead emails."""

    address: str
    name: str = "GK Edge Website"


def _build_plain_body(full_name: str, email: str, interest: str, message: str) -> str:
    return (
        "New Contact Form Submission\n"
        "\n"
        f"Name: {full_name}\n"
        f"Email: {email}\n"
        f"Interest: {interest}\n"
        "\n"
        "Message:\n"
        f"{message}\n"
    )


def _build_html_body(full_name: str, email: str, interest: str, message: str) -> str:
    esc = html.escape
    body = esc(message).replace("\n", "<br/>")
    return f"""
    <h2>New Contact Form Submission</h2>
    <p><strong>Name:</strong> {esc(full_name)}</p>
    <p><strong>Email:</strong> {esc(email)}</p>
    <p><strong>Interest:</strong> {esc(interest)}</p>
    <br/>
    <p><strong>Message:</strong></p>
    <p>{body}</p>
    """


def build_lead_email(submission: ContactSubmission, *, sender: Sender, recipient: str) -> Message:
    """Build the multipart (plain text + HTML) lead notification.

    Args:
        submission: Validated form submission (first name and email present).
        sender: Address and display name for the From header.
        recipient: Fixed destination mailbox.

    Returns:
        A message ready for the mail transport.
    """
    first = (submission.first_name or "").strip()
    last = (submission.last_name or "").strip()
    full_name = f"{first} {last}".strip()
    email = (submission.email or "").strip()
    interest = interest_label(submission.user_type)
    message = (submission.message or "").strip() or NO_MESSAGE

    msg = MIMEMultipart("alternative")
    msg["Subject"] = _single_line(f"New Lead: {full_name} - {interest}")
    msg["From"] = formataddr((sender.name, sender.address))
    msg["To"] = recipient
    msg["Reply-To"] = _single_line(email)
    msg.attach(MIMEText(_build_plain_body(full_name, email, interest, message), "plain", "utf-8"))
    msg.attach(MIMEText(_build_html_body(full_name, email, interest, message), "html", "utf-8"))
    return msg


class ContactService:
    """Validate contact submissions and hand the lead email to the transport.

    Args:
        transport: Mail transport, or None when SMTP credentials are missing.
        sender: From identity; None when SMTP is not configured.
        recipient: Destination address for every lead.
    """

    def __init__(
        self,
        transport: AbstractMailTransport | None,
        *,
        sender: Sender | None,
        recipient: str,
    ) -> None:
        self.transport = transport
        self.sender = sender
        self.recipient = recipient

    async def submit(self, submission: ContactSubmission) -> None:
        """Send the lead email for ``submission``.

        Raises:
            ValidationAppError: If first name or email is missing.
            ConfigurationAppError: If SMTP credentials are missing.
            UpstreamServiceError: If the transport fails.
        """
        first_name = (submission.first_name or "").strip()
        email = (submission.email or "").strip()
        if not first_name or not email:
            raise ValidationAppError(
                code="contact_fields_required",
                message="Name and Email are required.",
                details={"context": {"required": ["firstName", "email"]}},
            )

        if self.transport is None or self.sender is None:
            logger.error("contact.smtp_not_configured")
            raise ConfigurationAppError(
                code="smtp_missing_credentials",
                message="Server email configuration missing.",
            )

        msg = build_lead_email(submission, sender=self.sender, recipient=self.recipient)

        try:
            await self.transport.send(msg)
        except Exception as exc:
            logger.error(
                "contact.send_failed",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            raise UpstreamServiceError(
                code="email_send_failed",
                message="Failed to send email. Please try again later.",
            ) from exc

        logger.info(
            "contact.email_sent",
            extra={
                "recipient": self.recipient,
                "interest": interest_label(submission.user_type),
            },
        )
