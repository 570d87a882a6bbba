"""LLM adapter layer - abstracts over generative-AI providers."""

from arky_backend.adapters.llm.base import AbstractLLMClient
from arky_backend.adapters.llm.factory import create_llm_client
from arky_backend.adapters.llm.openai_client import OpenAIClient

__all__ = [
    "AbstractLLMClient",
    "OpenAIClient",
    "create_llm_client",
]
