"""FastAPI routes for document registration, ingestion and querying.

Services are resolved from ``app.state`` (populated in ``docrag.main``)
through ``Annotated[..., Depends(...)]`` aliases.

# Endpoint                              Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/documents/upload              POST    Store a file, status "uploaded"
# /api/v1/documents                     GET     List documents, newest first
# /api/v1/documents/{id}                GET     One document record
# /api/v1/documents/{id}/download       GET     The stored file
# /api/v1/documents/{id}/ingest         POST    Extract, chunk, embed, upsert
# /api/v1/rag/query                     POST    Grounded answer + sources
# /api/v1/health                        GET     Health check + provider status
"""

from __future__ import annotations

from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Request, UploadFile
from fastapi.responses import FileResponse

from docrag import __version__
from docrag.api.schemas import (
    DocumentListResponse,
    DocumentResponse,
    HealthResponse,
    QueryRequest,
)
from docrag.models.rag import IngestionResult, QueryResult
from docrag.services.document_service import DocumentService
from docrag.services.ingestion.ingestion_service import IngestionService
from docrag.services.query_service import QueryService
from docrag.utils.errors import DocumentNotFoundError
from docrag.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

# Uploads are read in 64 KB increments so oversized files are rejected
# without buffering the whole payload.
_UPLOAD_CHUNK_SIZE = 64 * 1024
_DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def _get_document_service(request: Request) -> DocumentService:
    return request.app.state.document_service


def _get_ingestion_service(request: Request) -> IngestionService:
    return request.app.state.ingestion_service


def _get_query_service(request: Request) -> QueryService:
    return request.app.state.query_service


DocumentServiceDep = Annotated[DocumentService, Depends(_get_document_service)]
IngestionServiceDep = Annotated[IngestionService, Depends(_get_ingestion_service)]
QueryServiceDep = Annotated[QueryService, Depends(_get_query_service)]


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------


@router.post(
    "/documents/upload",
    response_model=DocumentResponse,
    status_code=201,
    summary="Upload a document for later ingestion",
)
async def upload_document(
    request: Request,
    file: UploadFile,
    documents: DocumentServiceDep,
) -> DocumentResponse:
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")

    max_bytes = getattr(request.app.state, "max_upload_bytes", _DEFAULT_MAX_UPLOAD_BYTES)
    content = bytearray()
    while True:
        chunk = await file.read(_UPLOAD_CHUNK_SIZE)
        if not chunk:
            break
        content.extend(chunk)
        if len(content) > max_bytes:
            raise HTTPException(
                status_code=413,
                detail=f"File exceeds upload limit of {max_bytes} bytes",
            )

    try:
        document = await documents.register_upload(
            file.filename, bytes(content), mime_type=file.content_type or None
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return DocumentResponse.from_document(document)


@router.get("/documents", response_model=DocumentListResponse, summary="List documents")
async def list_documents(
    documents: DocumentServiceDep,
    limit: Annotated[int, Query(ge=1, le=500)] = 100,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> DocumentListResponse:
    records = await documents.list_documents(limit=limit, offset=offset)
    items = [DocumentResponse.from_document(d) for d in records]
    return DocumentListResponse(documents=items, total=len(items))


@router.get("/documents/{document_id}", response_model=DocumentResponse, summary="Get a document")
async def get_document(document_id: str, documents: DocumentServiceDep) -> DocumentResponse:
    document = await documents.get_document(document_id)
    if document is None:
        raise DocumentNotFoundError(document_id)
    return DocumentResponse.from_document(document)


@router.get("/documents/{document_id}/download", summary="Download the stored file")
async def download_document(document_id: str, documents: DocumentServiceDep) -> FileResponse:
    location = await documents.get_file_location(document_id)
    return FileResponse(
        path=location.path,
        media_type=location.mime_type,
        filename=location.original_name,
    )


@router.post(
    "/documents/{document_id}/ingest",
    response_model=IngestionResult,
    summary="Ingest a document into the vector store",
)
async def ingest_document(document_id: str, ingestion: IngestionServiceDep) -> IngestionResult:
    result = await ingestion.ingest(document_id)
    if not result.ok:
        _logger.info(
            "ingest_request_failed",
            document_id=document_id,
            error_type=result.error_type,
        )
    return result


# ---------------------------------------------------------------------------
# RAG query
# ---------------------------------------------------------------------------


@router.post("/rag/query", response_model=QueryResult, summary="Answer a question from the documents")
async def rag_query(body: QueryRequest, queries: QueryServiceDep) -> QueryResult:
    try:
        return await queries.answer_query(
            body.query,
            top_k=body.top_k,
            document_id_filter=body.document_id,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse, summary="Application health check")
async def health_check(request: Request) -> HealthResponse:
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    vector_store = getattr(request.app.state, "vector_store", None)
    if vector_store is not None:
        try:
            providers["vector_store_chunks"] = await vector_store.count()
            providers["vector_store"] = True
        except Exception as exc:
            _logger.warning("health_vector_store_unreachable", error=str(exc))
            providers["vector_store"] = False

    critical = ("embedding", "llm", "vector_store")
    status = "healthy" if all(providers.get(name, False) for name in critical) else "degraded"
    return HealthResponse(status=status, version=__version__, providers=providers)
