"""Abstract base class for LLM service providers.

Implementations wrap the Anthropic API, OpenAI (or an OpenAI-compatible
endpoint), or a local Ollama server.  Prompt construction lives with the
caller; providers only run completions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: AnthropicLLMProvider, OpenAILLMProvider, OllamaLLMProvider
# Located in: docrag/providers/llm/
class ILLMProvider(ABC):
    """Contract for chat-completion backends."""

    @abstractmethod
    async def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
        max_tokens: int = 1024,
    ) -> str:
        """Generate a text completion from the model.

        Parameters
        ----------
        system_prompt:
            The system/instruction message that sets the model's behaviour.
        user_prompt:
            The user-facing prompt containing the actual request or data.
        temperature:
            Sampling temperature (0.0 = deterministic, 1.0 = creative).
        max_tokens:
            Upper bound on the number of tokens in the response.

        Returns
        -------
        str
            The model's text response.

        Raises
        ------
        docrag.utils.errors.LLMError
            If the API call fails or returns an empty response.
        """

    @abstractmethod
    def get_model_name(self) -> str:
        """Return the model identifier, e.g. ``"gpt-4o-mini"``."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this LLM provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured.

        Implementations verify credentials are present without making an
        inference call.
        """
