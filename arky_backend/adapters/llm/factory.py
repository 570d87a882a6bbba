"""Factory pattern for creating LLM client instances."""

from arky_backend.adapters.llm.base import AbstractLLMClient
from arky_backend.adapters.llm.openai_client import OpenAIClient
from arky_backend.core.config import LLMSettings, settings
from arky_backend.core.errors import ConfigurationAppError

# Gemini's OpenAI-compatible endpoint
GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"

SUPPORTED_PROVIDERS = ("gemini", "openai")


def create_llm_client(llm_settings: LLMSettings | None = None) -> AbstractLLMClient:
    """Instantiate the LLM client for the configured provider.

    Args:
        llm_settings: Provider settings; defaults to the global settings.

    Returns:
        AbstractLLMClient: Configured LLM client instance.

    Raises:
        ConfigurationAppError: If the API key is missing or the provider is unknown.
    """
    cfg = llm_settings or settings.llm
    provider = cfg.provider.lower()

    if provider not in SUPPORTED_PROVIDERS:
        raise ConfigurationAppError(
            code="llm_unknown_provider",
            message=(
                f"Unknown LLM provider: '{provider}'. "
                f"Supported providers: {', '.join(SUPPORTED_PROVIDERS)}"
            ),
        )

    if not cfg.api_key:
        raise ConfigurationAppError(
            code="llm_missing_api_key",
            message="Server configuration error: Missing API Key.",
            details={"provider": provider},
        )

    base_url = cfg.base_url
    if provider == "gemini" and not base_url:
        base_url = GEMINI_OPENAI_BASE_URL

    return OpenAIClient(
        api_key=cfg.api_key,
        model=cfg.model,
        base_url=base_url,
        timeout_seconds=cfg.timeout_seconds,
    )
