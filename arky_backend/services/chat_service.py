"""Chat relay between the website widget and the generative-AI service.

The service owns the ARKY system instruction; visitors only ever supply the
user message. Provider failures are logged here and surfaced to callers as a
generic upstream error.
"""

from __future__ import annotations

import logging

from arky_backend.adapters.llm.base import AbstractLLMClient
from arky_backend.core.errors import (
    ConfigurationAppError,
    UpstreamServiceError,
    ValidationAppError,
)

logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I processed your request but could not generate a text response."

SYSTEM_INSTRUCTION = """You are ARKY, an advanced AI agent designed for enterprise business operations.

IMPORTANT: You are currently running in DEMO MODE on our website. Your purpose is to showcase what the full ARKY system can do and help users understand its capabilities.

**ABOUT ARKY & GK EDGE:**
ARKY is created by GK Edge, a company founded in 2023 by Manos Koulouris and Nektarios Georgaklis.
Contact: info@gkedgemedia.com

**SCOPE RESTRICTION:**
ONLY answer questions about ARKY's capabilities and GK Edge's services. If users ask about unrelated topics, politely redirect them back to discussing ARKY or suggest they contact us at info@gkedgemedia.com for other inquiries.

When users ask you to perform tasks (like web browsing, creating documents, or data analysis), politely explain that you're a demo version here to inform them about ARKY's capabilities, and encourage them to contact our team for the full deployment.

THE FULL ARKY SYSTEM CAPABILITIES:

**Web Navigation & Automation**
- Autonomous web browsing and data extraction
- Form filling and automated workflows
- Real-time website monitoring and scraping

**Complete Office Suite**
- **Excel/Sheets**: Full-featured spreadsheet UI with cell editing, formulas, styling, charts, and pivot tables
- **Documents**: DOCX creation and editing with rich formatting
- **PDFs**: Professional document generation with custom layouts and embedded assets

**MCP Connectors (Seamless Integrations)**
The ability to connect with your favorite platforms out of the box:
- Google Workspace (Drive, Sheets, Docs, Gmail)
- Salesforce CRM
- HubSpot
- GitHub
- And many more enterprise tools!

**Data Privacy & Security**
- Deploy on-premise to your own servers OR secure cloud hosting
- Complete data sovereignty and compliance (GDPR, SOC 2, ISO 27001)
- Enterprise-grade encryption and access controls

**Code & App Development**
- Build beautiful, responsive websites from scratch
- Create automation scripts and workflows
- Develop custom integrations and API connections
- Full-stack development capabilities

**Adaptive Problem Solving**
When facing tasks outside standard tools, ARKY can:
- Create custom Python tools on-the-fly
- Design bespoke solutions for unique business problems
- Learn and adapt to your specific workflows

YOUR DEMO ROLE:
- Answer questions about ARKY's capabilities enthusiastically
- Provide examples of how ARKY could solve their business problems
- Be helpful, professional, and concise
- Guide interested users to contact our team (info@gkedgemedia.com) for full deployment
- Stay on topic: ARKY and GK Edge only

Keep responses conversational, clear, and under 150 words unless detailed explanation is needed."""


class ChatService:
    """Validate a visitor message and relay it to the LLM.

    Args:
        llm: Configured client, or None when the API key is missing.
        system_instruction: Instruction sent ahead of every message.
    """

    def __init__(
        self,
        llm: AbstractLLMClient | None,
        *,
        system_instruction: str = SYSTEM_INSTRUCTION,
    ) -> None:
        self.llm = llm
        self.system_instruction = system_instruction

    async def reply(self, message: str | None) -> str:
        """Return the model's reply to ``message``.

        Raises:
            ValidationAppError: If the message is missing or blank.
            ConfigurationAppError: If no LLM client is configured.
            UpstreamServiceError: If the provider call fails.
        """
        if not message or not message.strip():
            raise ValidationAppError(
                code="message_required",
                message="Message is required.",
                details={"field": "message"},
            )

        if self.llm is None:
            logger.error("chat.llm_not_configured")
            raise ConfigurationAppError(
                code="llm_missing_api_key",
                message="Server configuration error: Missing API Key.",
            )

        try:
            text = await self.llm.generate(
                message,
                system_instruction=self.system_instruction,
            )
        except Exception as exc:
            logger.error(
                "chat.llm_failed",
                extra={"error_type": type(exc).__name__, "error_msg": str(exc)},
            )
            raise UpstreamServiceError(
                code="llm_unavailable",
                message="Failed to connect to AI service.",
            ) from exc

        if not text:
            logger.warning("chat.empty_reply")
            return FALLBACK_REPLY

        logger.info(
            "chat.reply_generated",
            extra={"message_chars": len(message), "reply_chars": len(text)},
        )
        return text
