"""LLM provider implementations (tried in this order by ``docrag.main``)."""

from docrag.providers.llm.anthropic_provider import AnthropicLLMProvider
from docrag.providers.llm.ollama_provider import OllamaLLMProvider
from docrag.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["AnthropicLLMProvider", "OllamaLLMProvider", "OpenAILLMProvider"]
