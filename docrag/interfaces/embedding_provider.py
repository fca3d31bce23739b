"""Abstract base class for text-embedding service providers.

Implementations may wrap OpenAI ``text-embedding-3-small`` (or any
OpenAI-compatible endpoint), FastEmbed's local ONNX models, or Nomic
``nomic-embed-text`` served by Ollama.  The ingestion pipeline and the query
orchestrator only ever talk to this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations:
#   OpenAIEmbeddingProvider     - text-embedding-3-small (requires API key)
#   FastEmbedEmbeddingProvider  - lightweight local ONNX models
#   NomicEmbeddingProvider      - nomic-embed-text via Ollama (local)
# Located in: docrag/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for text-embedding services used by the RAG pipeline."""

    @abstractmethod
    async def embed(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            One or more text strings to embed.

        Returns
        -------
        list[list[float]]
            Embedding vectors corresponding positionally to *texts*; the
            result has exactly ``len(texts)`` entries.

        Raises
        ------
        docrag.utils.errors.EmbeddingProviderError
            If the embedding API call fails.
        """

    @abstractmethod
    async def embed_single(self, text: str) -> list[float]:
        """Embed one text, e.g. a search query, as a single-item batch."""

    @abstractmethod
    def get_dimension(self) -> int:
        """Return the dimensionality of the embedding vectors.

        Example values: ``1536`` (OpenAI ``text-embedding-3-small``),
        ``768`` (Nomic ``nomic-embed-text``).
        """

    @abstractmethod
    def get_model_name(self) -> str:
        """Return the model identifier recorded on ingestion results."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this embedding provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured.

        Must not generate an actual embedding.
        """
