"""OpenAI-compatible chat completions adapter.

Also used for Gemini, which exposes the same API surface.
"""

from typing import Any

from openai import AsyncOpenAI

from arky_backend.adapters.llm.base import AbstractLLMClient


class OpenAIClient(AbstractLLMClient):
    """Client for calling an OpenAI-compatible chat completions endpoint.

    Uses the official OpenAI Python SDK with async support.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str | None = None,
        timeout_seconds: float = 45.0,
    ) -> None:
        """Initialize the async client.

        Args:
            api_key: Provider API key for authentication.
            model: Model name (e.g., "gemini-2.5-flash", "gpt-4o-mini").
            base_url: Optional custom base URL (e.g., Gemini's OpenAI endpoint).
            timeout_seconds: Timeout for requests in seconds.
        """
        self.client = AsyncOpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=0,
        )
        self.model = model

    async def generate(
        self,
        prompt: str,
        *,
        system_instruction: str | None = None,
        **kwargs: Any,
    ) -> str | None:
        """Generate a text reply using chat completions.

        Args:
            prompt: User message to send to the model.
            system_instruction: Optional system message placed before the prompt.
            **kwargs: Provider options (temperature, max_tokens, top_p, etc.).

        Returns:
            str | None: Message content, or None if the model produced no text.

        Raises:
            RuntimeError: If the API call fails.
        """
        messages: list[dict[str, str]] = []
        if system_instruction:
            messages.append({"role": "system", "content": system_instruction})
        messages.append({"role": "user", "content": prompt})

        request_params: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }

        # Pass through additional parameters if provided
        allowed_params = {
            "temperature",
            "max_tokens",
            "top_p",
            "frequency_penalty",
            "presence_penalty",
            "seed",
        }
        for param in allowed_params:
            if param in kwargs:
                request_params[param] = kwargs[param]

        try:
            response = await self.client.chat.completions.create(**request_params)
        except Exception as exc:
            raise RuntimeError(f"LLM API error: {str(exc)}") from exc

        if not response.choices:
            return None
        return response.choices[0].message.content
