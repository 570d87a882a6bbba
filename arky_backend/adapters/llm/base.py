from abc import ABC, abstractmethod
from typing import Any


class AbstractLLMClient(ABC):
	"""Interface for generative-AI clients that return free text."""

	@abstractmethod
	async def generate(
		self,
		prompt: str,
		*,
		system_instruction: str | None = None,
		**kwargs: Any,
	) -> str | None:
		"""Generate a text reply from the model.

		Args:
			prompt: User message to send to the model.
			system_instruction: Optional server-owned instruction sent ahead of the prompt.
			**kwargs: Provider-specific options (e.g., temperature, max_tokens).

		Returns:
			str | None: The model's text, or None when the response carried no text.

		Raises:
			RuntimeError: If the provider call fails.
		"""
		...
