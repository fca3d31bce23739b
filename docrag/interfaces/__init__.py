"""Public interface definitions for every external service docrag talks to.

Business logic depends only on these abstract base classes; concrete
adapters in ``docrag/providers/`` are built in ``docrag/main.py`` (or the
CLI) and injected into the services.

CONCRETE PROVIDER MAP:
    Interface             →  Concrete implementations
    ─────────────────────────────────────────────────────────────────────
    IEmbeddingProvider    →  OpenAIEmbeddingProvider, FastEmbedEmbeddingProvider,
                             NomicEmbeddingProvider
    IVectorStoreProvider  →  ChromaDBProvider
    ILLMProvider          →  AnthropicLLMProvider, OpenAILLMProvider,
                             OllamaLLMProvider
    IAnswerGenerator      →  GroundedAnswerGenerator (wraps an ILLMProvider)
    IDocumentStore        →  SQLiteDocumentStore
"""

from docrag.interfaces.answer_generator import IAnswerGenerator
from docrag.interfaces.document_store import IDocumentStore
from docrag.interfaces.embedding_provider import IEmbeddingProvider
from docrag.interfaces.llm_provider import ILLMProvider
from docrag.interfaces.vector_store_provider import IVectorStoreProvider

__all__ = [
    "IAnswerGenerator",
    "IDocumentStore",
    "IEmbeddingProvider",
    "ILLMProvider",
    "IVectorStoreProvider",
]
