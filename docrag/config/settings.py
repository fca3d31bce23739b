"""Application settings loaded from environment variables via pydantic-settings.

Two sources, highest priority first:

    1. Environment variables, e.g. ``OPENAI_API_KEY=sk-...``
    2. A ``.env`` file in the working directory

Field ``rag_top_k`` maps to ``RAG_TOP_K`` and so on.  Only the composition
root (``docrag.main`` and the CLI) reads :class:`Settings`; pipeline
components receive the frozen :class:`RagConfig` built from it.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RagConfig(BaseModel):
    """Immutable tuning parameters passed into the ingestion and query components."""

    model_config = ConfigDict(frozen=True)

    top_k: int = Field(default=5, ge=1, description="Default number of neighbours retrieved per query.")
    max_context_chars: int = Field(
        default=12000, ge=1, description="Character budget for the assembled context."
    )
    chunk_size: int = Field(default=1200, gt=0, description="Characters per chunk window.")
    chunk_overlap: int = Field(default=200, ge=0, description="Characters shared by consecutive chunks.")
    batch_size: int = Field(default=64, gt=0, description="Chunks embedded and upserted per batch.")
    prune_stale_chunks: bool = Field(
        default=True,
        description="Delete chunks left over from a longer previous ingestion of the same document.",
    )

    @model_validator(mode="after")
    def _check_overlap(self) -> "RagConfig":
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError("chunk_overlap must be smaller than chunk_size")
        return self


class Settings(BaseSettings):
    """docrag application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Model providers ===
    # Empty string = "not configured"; provider selection in main.py skips it.
    openai_api_key: str = ""
    openai_base_url: str = ""  # OpenAI-compatible endpoints (TogetherAI, vLLM, ...)
    openai_embedding_model: str = "text-embedding-3-small"
    openai_chat_model: str = "gpt-4o-mini"
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-3-5-haiku-latest"
    ollama_base_url: str = ""
    ollama_chat_model: str = "llama3"
    fastembed_enabled: bool = False
    fastembed_model: str = "BAAI/bge-small-en-v1.5"

    # === Vector store ===
    # chroma_host empty = embedded PersistentClient under chroma_persist_dir.
    chroma_host: str = ""
    chroma_port: int = 8000
    chroma_persist_dir: str = "./data/chromadb"
    chroma_collection: str = "default_kb"

    # === RAG ===
    rag_top_k: int = 5
    rag_max_context_chars: int = 12000
    ingest_chunk_size: int = 1200
    ingest_chunk_overlap: int = 200
    ingest_batch_size: int = 64
    prune_stale_chunks: bool = True

    # === Document storage ===
    document_db_path: str = "data/documents.db"
    upload_dir: str = "data/uploads"
    max_upload_bytes: int = 50 * 1024 * 1024

    # === App ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def to_rag_config(self) -> RagConfig:
        """Build the explicit pipeline configuration from these settings."""
        return RagConfig(
            top_k=self.rag_top_k,
            max_context_chars=self.rag_max_context_chars,
            chunk_size=self.ingest_chunk_size,
            chunk_overlap=self.ingest_chunk_overlap,
            batch_size=self.ingest_batch_size,
            prune_stale_chunks=self.prune_stale_chunks,
        )

    def get_available_llm_providers(self) -> list[str]:
        """Return LLM provider names that have credentials or an endpoint configured."""
        providers: list[str] = []
        if self.anthropic_api_key:
            providers.append("anthropic")
        if self.openai_api_key:
            providers.append("openai")
        if self.ollama_base_url:
            providers.append("ollama")
        return providers
