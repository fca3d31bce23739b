"""Pydantic request/response schemas for the docrag API.

Request schemas end with "Request", response schemas with "Response".
Ingestion and query results are returned as the domain models themselves
(:class:`~docrag.models.rag.IngestionResult`,
:class:`~docrag.models.rag.QueryResult`).
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from docrag.models.document import Document, DocumentStatus


class DocumentResponse(BaseModel):
    """Public view of a registered document (no filesystem paths)."""

    document_id: str
    original_name: str
    mime_type: str
    size: int
    status: DocumentStatus
    created_at: datetime

    @classmethod
    def from_document(cls, document: Document) -> DocumentResponse:
        return cls(
            document_id=document.document_id,
            original_name=document.original_name,
            mime_type=document.mime_type,
            size=document.size,
            status=document.status,
            created_at=document.created_at,
        )


class DocumentListResponse(BaseModel):
    documents: list[DocumentResponse]
    total: int


class QueryRequest(BaseModel):
    """A question, optionally scoped to one document."""

    query: str = Field(..., min_length=1, max_length=4000)
    top_k: int | None = Field(default=None, ge=1, le=100)
    document_id: str | None = None


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
