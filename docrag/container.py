"""Provider selection and service wiring shared by the API and the CLI.

:func:`build_components` returns a flat dict of named components; the
FastAPI lifespan copies it onto ``app.state`` and the CLI uses it directly.
"""

from __future__ import annotations

from typing import Any

import structlog

from docrag.config.settings import Settings
from docrag.interfaces.embedding_provider import IEmbeddingProvider
from docrag.interfaces.llm_provider import ILLMProvider
from docrag.providers.document_store.sqlite_document_store import SQLiteDocumentStore
from docrag.providers.embedding.fastembed_embedding_provider import FastEmbedEmbeddingProvider
from docrag.providers.embedding.nomic_embedding_provider import NomicEmbeddingProvider
from docrag.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from docrag.providers.llm.anthropic_provider import AnthropicLLMProvider
from docrag.providers.llm.ollama_provider import OllamaLLMProvider
from docrag.providers.llm.openai_provider import OpenAILLMProvider
from docrag.providers.vector_store.chromadb_provider import ChromaDBProvider
from docrag.services.answer_generator import GroundedAnswerGenerator
from docrag.services.document_service import DocumentService
from docrag.services.ingestion.ingestion_service import IngestionService
from docrag.services.query_service import QueryService
from docrag.utils.errors import ConfigurationError

logger = structlog.get_logger(logger_name=__name__)


def build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider:
    """Select the first configured embedding provider.

    Priority: OpenAI (API key set) -> FastEmbed (``FASTEMBED_ENABLED``) ->
    Nomic via Ollama (``OLLAMA_BASE_URL`` reachable).  Ingestion and
    querying must use the same one, so the order never depends on runtime
    load, only on configuration.
    """
    if app_settings.openai_api_key:
        return OpenAIEmbeddingProvider(settings=app_settings)

    if app_settings.fastembed_enabled:
        fastembed = FastEmbedEmbeddingProvider(model_name=app_settings.fastembed_model)
        if fastembed.is_available():
            return fastembed

    if app_settings.ollama_base_url:
        nomic = NomicEmbeddingProvider(settings=app_settings)
        if nomic.is_available():
            return nomic

    raise ConfigurationError(
        "No embedding provider configured: set OPENAI_API_KEY, "
        "FASTEMBED_ENABLED=true, or OLLAMA_BASE_URL"
    )


def build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Select the first configured LLM provider.

    Priority: Anthropic -> OpenAI -> Ollama.
    """
    if app_settings.anthropic_api_key:
        return AnthropicLLMProvider(settings=app_settings)
    if app_settings.openai_api_key:
        return OpenAILLMProvider(settings=app_settings)
    if app_settings.ollama_base_url:
        return OllamaLLMProvider(settings=app_settings)
    raise ConfigurationError(
        "No LLM provider configured: set ANTHROPIC_API_KEY, OPENAI_API_KEY, or OLLAMA_BASE_URL"
    )


def build_components(app_settings: Settings) -> dict[str, Any]:
    """Construct every provider and service instance.

    The document store still needs ``await initialize()`` before use.
    """
    rag_config = app_settings.to_rag_config()

    embedding_provider = build_embedding_provider(app_settings)
    llm_provider = build_llm_provider(app_settings)
    vector_store = ChromaDBProvider(
        collection_name=app_settings.chroma_collection,
        host=app_settings.chroma_host,
        port=app_settings.chroma_port,
        persist_directory=app_settings.chroma_persist_dir,
        expected_dimension=embedding_provider.get_dimension(),
    )
    document_store = SQLiteDocumentStore(db_path=app_settings.document_db_path)

    document_service = DocumentService(
        document_store=document_store,
        upload_dir=app_settings.upload_dir,
        max_upload_bytes=app_settings.max_upload_bytes,
    )
    ingestion_service = IngestionService(
        document_store=document_store,
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        config=rag_config,
    )
    query_service = QueryService(
        embedding_provider=embedding_provider,
        vector_store=vector_store,
        answer_generator=GroundedAnswerGenerator(llm_provider),
        config=rag_config,
    )

    provider_registry = {
        "embedding": embedding_provider.is_available(),
        "embedding_provider": embedding_provider.get_provider_name(),
        "llm": llm_provider.is_available(),
        "llm_provider": llm_provider.get_provider_name(),
    }
    logger.info(
        "components_built",
        embedding=embedding_provider.get_provider_name(),
        embedding_model=embedding_provider.get_model_name(),
        llm=llm_provider.get_provider_name(),
        chat_model=llm_provider.get_model_name(),
        vector_store=vector_store.get_provider_name(),
    )

    return {
        "rag_config": rag_config,
        "embedding_provider": embedding_provider,
        "llm_provider": llm_provider,
        "vector_store": vector_store,
        "document_store": document_store,
        "document_service": document_service,
        "ingestion_service": ingestion_service,
        "query_service": query_service,
        "provider_registry": provider_registry,
        "max_upload_bytes": app_settings.max_upload_bytes,
    }
