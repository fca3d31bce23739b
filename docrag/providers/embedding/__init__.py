"""Embedding provider implementations.

Implementations of IEmbeddingProvider, in the order ``docrag.main`` tries them:
    1. OpenAIEmbeddingProvider    — text-embedding-3-small (1536 dims), needs a key.
    2. FastEmbedEmbeddingProvider — local ONNX, enabled with FASTEMBED_ENABLED.
    3. NomicEmbeddingProvider     — nomic-embed-text via a running Ollama server.
"""

from docrag.providers.embedding.fastembed_embedding_provider import FastEmbedEmbeddingProvider
from docrag.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from docrag.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["FastEmbedEmbeddingProvider", "NomicEmbeddingProvider", "OpenAIEmbeddingProvider"]
