"""Custom exception hierarchy for docrag.

All application exceptions inherit from :class:`DocRagError`, which
carries an optional ``provider_name`` so error handlers can identify which
external service (e.g. "openai", "chromadb", "pymupdf") caused the failure.

The hierarchy is organized by pipeline stage:

    DocRagError  (base -- catch-all for any docrag error)
    +-- DocumentNotFoundError    (document store: unknown id)
    +-- FileMissingError         (document store: stored file gone)
    +-- UnsupportedFileTypeError (extraction: no extractor for the type)
    +-- ExtractionError          (extraction: decoder failure)
    +-- EmptyContentError        (ingestion: zero chunks produced)
    +-- EmbeddingProviderError   (embedding API failure)
    +-- VectorStoreError         (vector store read/write failure)
    +-- LLMError                 (answer generation failure)
    +-- ConfigurationError       (startup / missing config)

The ingestion pipeline converts every one of these into a ``failed``
document status; the query path lets them propagate to the caller.
"""


class DocRagError(Exception):
    """Base exception for all docrag errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[openai] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Document store errors
# ---------------------------------------------------------------------------

class DocumentNotFoundError(DocRagError):
    """Raised when a document id has no record in the document store."""

    def __init__(self, document_id: str, provider_name: str | None = None) -> None:
        self.document_id = document_id
        super().__init__(
            message=f"Document not found: {document_id}",
            provider_name=provider_name,
        )


class FileMissingError(DocRagError):
    """Raised when a document record exists but its stored file does not."""

    def __init__(
        self,
        message: str = "File missing on disk",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Extraction / ingestion errors
# ---------------------------------------------------------------------------

class UnsupportedFileTypeError(DocRagError):
    """Raised when no extractor handles the file's MIME type or extension.

    Both observed values are kept on the exception so callers can report
    exactly what was uploaded.
    """

    def __init__(self, mime_type: str, extension: str) -> None:
        self.mime_type = mime_type
        self.extension = extension
        super().__init__(
            message=(
                "Unsupported file type for ingestion: "
                f"mime_type={mime_type}, ext={extension or '(none)'}"
            ),
        )


class ExtractionError(DocRagError):
    """Raised when a supported file cannot be decoded into text."""

    def __init__(
        self,
        message: str = "Text extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class EmptyContentError(DocRagError):
    """Raised when a document yields no text to index."""

    def __init__(
        self,
        message: str = "No text content to ingest",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# External service / provider errors
# ---------------------------------------------------------------------------

class EmbeddingProviderError(DocRagError):
    """Raised when an embedding API call fails or returns a malformed batch."""

    def __init__(
        self,
        message: str = "Embedding generation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class VectorStoreError(DocRagError):
    """Raised when a vector store upsert, query, or delete fails."""

    def __init__(
        self,
        message: str = "Vector store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(DocRagError):
    """Raised when an LLM API call fails or returns an unusable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(DocRagError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
